"""Risk scoring — combine an access level with HTTP method mutability."""

from collections.abc import Iterable
from enum import Enum

from routescope.capabilities import AccessLevel

MUTATING_METHODS: frozenset[str] = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class RiskLevel(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def is_mutating(methods: Iterable[str], mutating: frozenset[str] = MUTATING_METHODS) -> bool:
    return not mutating.isdisjoint(m.upper() for m in methods)


def is_public_write(
    access_level: AccessLevel,
    methods: Iterable[str],
    mutating: frozenset[str] = MUTATING_METHODS,
) -> bool:
    return access_level is AccessLevel.PUBLIC and is_mutating(methods, mutating)


def score(
    access_level: AccessLevel,
    methods: Iterable[str],
    mutating: frozenset[str] = MUTATING_METHODS,
) -> RiskLevel:
    """Score a route. High is checked before medium, medium before low.

    - high: public and writable
    - medium: public read, or writable behind anything short of admin
    - low: admin-only, or read-only behind a login
    """
    writes = is_mutating(methods, mutating)
    if access_level is AccessLevel.PUBLIC and writes:
        return RiskLevel.HIGH
    if access_level is AccessLevel.PUBLIC or (access_level is not AccessLevel.ADMIN and writes):
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
