"""Capability hierarchy — ordered privilege tiers and admin-tier capabilities.

A ``CapabilityHierarchy`` is built once per process and handed to the
``AccessClassifier`` at construction time. It is immutable afterwards::

    hierarchy = CapabilityHierarchy.load()
    hierarchy.tier_of("edit_posts")  # AccessLevel.CONTRIBUTOR
    hierarchy.is_admin("manage_options")  # True

The admin-capability set can be augmented through a hook, the one
extension point the host environment gets::

    hierarchy = CapabilityHierarchy.load(
        admin_capabilities_hook=lambda caps: caps | {"manage_shop"},
    )
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class AccessLevel(Enum):
    """Verdict on the minimum privilege a permission check requires."""

    PUBLIC = "public"
    ADMIN = "admin"
    EDITOR = "editor"
    AUTHOR = "author"
    CONTRIBUTOR = "contributor"
    SUBSCRIBER = "subscriber"
    CUSTOM = "custom"
    UNKNOWN = "unknown"


# Ascending privilege order. ADMIN is the ceiling and never has a
# capability set of its own; admin-ness comes from ``admin_capabilities``.
TIER_ORDER: tuple[AccessLevel, ...] = (
    AccessLevel.SUBSCRIBER,
    AccessLevel.CONTRIBUTOR,
    AccessLevel.AUTHOR,
    AccessLevel.EDITOR,
    AccessLevel.ADMIN,
)

_TIER_RANK: dict[AccessLevel, int] = {level: rank for rank, level in enumerate(TIER_ORDER)}

# Capabilities each tier introduces on top of the tiers below it.
DEFAULT_TIERS: dict[AccessLevel, frozenset[str]] = {
    AccessLevel.SUBSCRIBER: frozenset({"read"}),
    AccessLevel.CONTRIBUTOR: frozenset({"edit_posts", "delete_posts"}),
    AccessLevel.AUTHOR: frozenset({"publish_posts", "upload_files"}),
    AccessLevel.EDITOR: frozenset({
        "edit_others_posts",
        "delete_others_posts",
        "edit_published_posts",
        "delete_published_posts",
        "edit_pages",
        "delete_pages",
        "publish_pages",
        "edit_others_pages",
        "delete_others_pages",
        "edit_published_pages",
        "delete_published_pages",
        "moderate_comments",
    }),
}

DEFAULT_ADMIN_CAPABILITIES: frozenset[str] = frozenset({
    "manage_options",
    "install_plugins",
    "activate_plugins",
    "edit_plugins",
    "delete_plugins",
    "update_plugins",
    "manage_categories",
    "manage_links",
    "upload_files",
    "import",
    "unfiltered_html",
    "edit_themes",
    "install_themes",
    "update_themes",
    "delete_themes",
    "edit_users",
    "list_users",
    "remove_users",
    "add_users",
    "create_users",
    "delete_users",
    "promote_users",
})

type AdminCapabilitiesHook = Callable[[frozenset[str]], Iterable[str]]


def tier_rank(level: AccessLevel) -> int:
    """Rank of a tier in ``TIER_ORDER``. Non-tier verdicts rank as admin."""
    return _TIER_RANK.get(level, _TIER_RANK[AccessLevel.ADMIN])


@dataclass(frozen=True, slots=True)
class CapabilityHierarchy:
    """Ordered tiers plus the set of capabilities that always imply admin."""

    tiers: Mapping[AccessLevel, frozenset[str]] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_TIERS)),
    )
    admin_capabilities: frozenset[str] = DEFAULT_ADMIN_CAPABILITIES

    def __post_init__(self) -> None:
        for level in self.tiers:
            if level not in _TIER_RANK or level is AccessLevel.ADMIN:
                msg = f"{level.value!r} is not a rankable tier below admin"
                raise ValueError(msg)

    @classmethod
    def load(
        cls,
        *,
        tiers: Mapping[AccessLevel, Iterable[str]] | None = None,
        admin_capabilities: Iterable[str] | None = None,
        admin_capabilities_hook: AdminCapabilitiesHook | None = None,
    ) -> CapabilityHierarchy:
        """Build a hierarchy from defaults, optional overrides and the hook.

        The hook receives the admin-capability set and returns the set to
        use. It runs once, here; the returned hierarchy never changes.
        """
        tier_map = DEFAULT_TIERS if tiers is None else tiers
        admin = DEFAULT_ADMIN_CAPABILITIES if admin_capabilities is None else frozenset(admin_capabilities)
        if admin_capabilities_hook is not None:
            admin = frozenset(admin_capabilities_hook(admin))
        return cls(
            tiers=MappingProxyType({level: frozenset(caps) for level, caps in tier_map.items()}),
            admin_capabilities=admin,
        )

    def is_admin(self, capability: str) -> bool:
        return capability in self.admin_capabilities

    def tier_of(self, capability: str) -> AccessLevel | None:
        """Lowest tier whose set contains ``capability``, or None."""
        for level in TIER_ORDER:
            if capability in self.tiers.get(level, ()):
                return level
        return None
