"""Access classification — one verdict per permission check.

Rules, in order:

1. No capabilities extracted: use the extractor's hint, else ``unknown``.
2. Any admin-tier capability: ``admin``.
3. Otherwise the lowest tier that contains any extracted capability.
   A route guarded by several checks is as permissive as its weakest.
4. Capabilities that match no tier: ``admin``.

Rules 1 and 4 are deliberately different: "no evidence" reports
``unknown``, "evidence we don't recognise" reports ``admin``.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from routescope.capabilities import AccessLevel, CapabilityHierarchy, tier_rank
from routescope.extractor import Evidence
from routescope.roles import RoleTable


@dataclass(frozen=True, slots=True)
class Classification:
    """The classifier's verdict plus the evidence behind it."""

    access_level: AccessLevel
    capabilities: tuple[str, ...] = ()
    custom_roles: tuple[str, ...] = ()
    description: str = ""


class AccessClassifier:
    """Assign access levels using an explicitly supplied hierarchy."""

    __slots__ = ("_hierarchy", "_roles")

    def __init__(self, hierarchy: CapabilityHierarchy, roles: RoleTable | None = None) -> None:
        self._hierarchy = hierarchy
        self._roles = roles if roles is not None else RoleTable()

    @property
    def hierarchy(self) -> CapabilityHierarchy:
        return self._hierarchy

    def classify(self, evidence: Evidence) -> Classification:
        if not evidence.capabilities:
            level = evidence.hint if evidence.hint is not None else AccessLevel.UNKNOWN
            return Classification(access_level=level, description=evidence.description)

        return Classification(
            access_level=self.access_level_for(evidence.capabilities),
            capabilities=evidence.capabilities,
            custom_roles=self._roles.custom_roles_for(evidence.capabilities),
            description=evidence.description,
        )

    def access_level_for(self, capabilities: Sequence[str]) -> AccessLevel:
        if not capabilities:
            return AccessLevel.UNKNOWN

        if any(self._hierarchy.is_admin(cap) for cap in capabilities):
            return AccessLevel.ADMIN

        lowest = AccessLevel.ADMIN
        for cap in capabilities:
            tier = self._hierarchy.tier_of(cap)
            if tier is not None and tier_rank(tier) < tier_rank(lowest):
                lowest = tier
        return lowest
