"""Aggregate counters over a batch of route analyses."""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from routescope.analyzer import RouteAnalysis
from routescope.capabilities import AccessLevel
from routescope.risk import MUTATING_METHODS, is_public_write


@dataclass(slots=True)
class RouteStats:
    """Counts by access level, risk level, plugin and namespace, plus the two headline numbers."""

    total: int = 0
    by_access_level: Counter[str] = field(default_factory=Counter)
    by_risk_level: Counter[str] = field(default_factory=Counter)
    by_plugin: Counter[str] = field(default_factory=Counter)
    by_namespace: Counter[str] = field(default_factory=Counter)
    public_write_routes: int = 0
    admin_only_routes: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "by_access_level": dict(self.by_access_level),
            "by_risk_level": dict(self.by_risk_level),
            "by_plugin": dict(self.by_plugin),
            "by_namespace": dict(self.by_namespace),
            "public_write_routes": self.public_write_routes,
            "admin_only_routes": self.admin_only_routes,
        }

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            f"Analyzed {self.total} routes: "
            f"{self.public_write_routes} public write, {self.admin_only_routes} admin-only.",
        ]
        if self.by_risk_level:
            risks = ", ".join(f"{name}={count}" for name, count in sorted(self.by_risk_level.items()))
            lines.append(f"  Risk: {risks}")
        if self.by_access_level:
            levels = ", ".join(f"{name}={count}" for name, count in sorted(self.by_access_level.items()))
            lines.append(f"  Access: {levels}")
        return "\n".join(lines)


def compute_stats(
    routes: Iterable[RouteAnalysis],
    mutating: frozenset[str] = MUTATING_METHODS,
) -> RouteStats:
    stats = RouteStats()
    for route in routes:
        stats.total += 1
        stats.by_access_level[route.access_level.value] += 1
        stats.by_risk_level[route.risk_level.value] += 1
        stats.by_plugin[route.display_name] += 1
        stats.by_namespace[route.namespace] += 1
        if is_public_write(route.access_level, route.methods, mutating):
            stats.public_write_routes += 1
        if route.access_level is AccessLevel.ADMIN:
            stats.admin_only_routes += 1
    return stats
