"""Role/capability configuration supplied by the hosting environment.

A ``RoleTable`` maps role names to the capabilities they grant. Only
roles outside the five built-ins are reported as "custom roles"::

    roles = RoleTable.from_mapping({
        "shop_manager": {"manage_shop": True, "edit_posts": True},
        "editor": {"edit_posts": True},
    })
    roles.custom_roles_for(["edit_posts"])  # ("shop_manager",)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

STANDARD_ROLES: frozenset[str] = frozenset({
    "administrator",
    "editor",
    "author",
    "contributor",
    "subscriber",
})


@dataclass(frozen=True, slots=True)
class RoleTable:
    """Read-only snapshot of role name -> {capability: granted}."""

    roles: Mapping[str, Mapping[str, bool]] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, roles: Mapping[str, Mapping[str, bool] | Iterable[str]]) -> RoleTable:
        """Accept either ``{cap: bool}`` maps or plain capability iterables."""
        table: dict[str, Mapping[str, bool]] = {}
        for name, caps in roles.items():
            if isinstance(caps, Mapping):
                table[name] = MappingProxyType({str(c): bool(v) for c, v in caps.items()})
            else:
                table[name] = MappingProxyType(dict.fromkeys(caps, True))
        return cls(roles=MappingProxyType(table))

    def grants(self, role: str, capability: str) -> bool:
        return bool(self.roles.get(role, {}).get(capability, False))

    def custom_roles_for(self, capabilities: Iterable[str]) -> tuple[str, ...]:
        """Non-standard roles that explicitly grant any of ``capabilities``."""
        found: set[str] = set()
        for capability in capabilities:
            for name in self.roles:
                if name in STANDARD_ROLES:
                    continue
                if self.grants(name, capability):
                    found.add(name)
        return tuple(sorted(found))
