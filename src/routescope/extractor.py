"""Evidence extraction — reduce a permission reference to a description,
an access-level hint, and the capability names it appears to test.

The extractor never raises. The worst case is an empty-capabilities,
``custom``-hinted ``Evidence`` that carries the issue explaining why.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from routescope.capabilities import AccessLevel
from routescope.issues import AnalysisIssue
from routescope.permissions import AlwaysAllow, Bound, Named, NoCheck, Opaque, PermissionRef

NO_CHECK_LABEL = "No permission callback"
ALWAYS_ALLOW_LABEL = "Public access (always allow)"
COMPLEX_LABEL = "Complex callback (Closure)"


@dataclass(frozen=True, slots=True)
class Evidence:
    """What the extractor could learn about one permission reference."""

    description: str
    hint: AccessLevel | None = None
    capabilities: tuple[str, ...] = ()
    issues: tuple[AnalysisIssue, ...] = ()


class EvidenceExtractor:
    """Pattern-match permission references into ``Evidence``.

    ``check_functions`` are the helper names that mark a bare function
    name as a capability check (``custom`` rather than no hint).
    """

    __slots__ = ("_check_functions",)

    def __init__(self, check_functions: Iterable[str] = ("current_user_can",)) -> None:
        self._check_functions = tuple(check_functions)

    def extract(self, ref: PermissionRef) -> Evidence:
        match ref:
            case NoCheck():
                return Evidence(description=NO_CHECK_LABEL, hint=AccessLevel.PUBLIC)
            case AlwaysAllow():
                return Evidence(description=ALWAYS_ALLOW_LABEL, hint=AccessLevel.PUBLIC)
            case Named(name=name):
                hint = AccessLevel.CUSTOM if any(f in name for f in self._check_functions) else None
                return Evidence(description=f"Function: {name}", hint=hint)
            case Bound(label=label, source=source):
                result = source.scan()
                issues = (result.issue,) if result.issue is not None else ()
                if result.capabilities:
                    return Evidence(description=label, capabilities=result.capabilities, issues=issues)
                return Evidence(description=label, hint=AccessLevel.CUSTOM, issues=issues)
            case Opaque():
                return Evidence(description=COMPLEX_LABEL, hint=AccessLevel.CUSTOM)
