"""Tests for routescope.roles — custom role discovery."""

from routescope.roles import STANDARD_ROLES, RoleTable


def _roles() -> RoleTable:
    return RoleTable.from_mapping({
        "administrator": {"manage_options": True, "edit_posts": True},
        "editor": {"edit_posts": True},
        "shop_manager": {"manage_shop": True, "edit_posts": True},
        "support_agent": ["read", "moderate_comments"],
        "suspended": {"edit_posts": False},
    })


class TestRoleTable:
    def test_standard_roles(self) -> None:
        assert STANDARD_ROLES == {"administrator", "editor", "author", "contributor", "subscriber"}

    def test_grants(self) -> None:
        roles = _roles()
        assert roles.grants("shop_manager", "manage_shop")
        assert roles.grants("support_agent", "read")
        assert not roles.grants("suspended", "edit_posts")
        assert not roles.grants("missing", "read")

    def test_standard_roles_excluded(self) -> None:
        assert _roles().custom_roles_for(["manage_options"]) == ()

    def test_explicit_false_does_not_qualify(self) -> None:
        assert _roles().custom_roles_for(["edit_posts"]) == ("shop_manager",)

    def test_union_is_deduplicated(self) -> None:
        found = _roles().custom_roles_for(["edit_posts", "manage_shop", "read"])
        assert found == ("shop_manager", "support_agent")

    def test_empty_table(self) -> None:
        assert RoleTable().custom_roles_for(["read"]) == ()
