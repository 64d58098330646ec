"""Capability sources — best-effort lookup of the capabilities a check tests.

A *source* is anything that can answer "which capability names does
this permission routine appear to check?". The extractor only ever calls
``scan()``; it never knows whether the answer came from reading source
text, from a static table, or from nowhere at all.

- ``InspectSource`` reads the routine's source with ``inspect`` and runs
  the call-site patterns over it.
- ``StaticSource`` returns a fixed answer (hosts that already know).
- ``NullSource`` never finds anything.

Every source returns a ``ScanResult``; failures travel as an
``AnalysisIssue`` inside the result, never as an exception.
"""

import ast
import inspect
import logging
import re
from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from routescope.issues import AnalysisIssue, IssueStage

logger = logging.getLogger("routescope.sources")

# check_function('capability')
_CHECK_TEMPLATE = r"\b{name}\s*\(\s*['\"]([^'\"]+)['\"]"
# user_check_function(user, 'capability')
_USER_CHECK_TEMPLATE = r"\b{name}\s*\([^,]+,\s*['\"]([^'\"]+)['\"]"


def build_patterns(
    check_functions: Iterable[str] = ("current_user_can",),
    user_check_functions: Iterable[str] = ("user_can",),
) -> tuple[re.Pattern[str], ...]:
    """Compile the call-site patterns for the given helper names.

    Check-function patterns come first, so their captures lead the
    discovery order.
    """
    patterns = [re.compile(_CHECK_TEMPLATE.format(name=re.escape(n))) for n in check_functions]
    patterns.extend(
        re.compile(_USER_CHECK_TEMPLATE.format(name=re.escape(n))) for n in user_check_functions
    )
    return tuple(patterns)


DEFAULT_PATTERNS: tuple[re.Pattern[str], ...] = build_patterns()


def scan_text(source: str, patterns: Sequence[re.Pattern[str]] = DEFAULT_PATTERNS) -> tuple[str, ...]:
    """Every literal capability captured by ``patterns``, deduplicated in order."""
    found: list[str] = []
    for pattern in patterns:
        found.extend(pattern.findall(source))
    return tuple(dict.fromkeys(found))


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Capabilities found by a source, plus the issue if the scan failed."""

    capabilities: tuple[str, ...] = ()
    issue: AnalysisIssue | None = None


@runtime_checkable
class CapabilitySource(Protocol):
    """Anything that can report the capabilities a routine checks."""

    def scan(self) -> ScanResult: ...


@dataclass(frozen=True, slots=True)
class NullSource:
    """A source that never finds anything."""

    def scan(self) -> ScanResult:
        return ScanResult()


@dataclass(frozen=True, slots=True)
class StaticSource:
    """A source with a fixed, host-supplied answer."""

    capabilities: tuple[str, ...] = ()

    def scan(self) -> ScanResult:
        return ScanResult(capabilities=tuple(dict.fromkeys(self.capabilities)))


def _routine_of(target: Any) -> Any:
    """The object ``inspect`` can find source for.

    Unwraps ``functools.wraps`` decorators and maps callable instances
    to their class's ``__call__``.
    """
    routine = inspect.unwrap(target)
    if not (inspect.isroutine(routine) or inspect.isclass(routine)) and callable(routine):
        routine = type(routine).__call__
    return routine


def _contains(node: ast.expr, line: int, col: int) -> bool:
    start = (node.lineno, node.col_offset)
    end = (node.end_lineno or node.lineno, node.end_col_offset or 0)
    return start <= (line, col) < end


def _span(node: ast.expr) -> tuple[int, int]:
    return ((node.end_lineno or node.lineno) - node.lineno, (node.end_col_offset or 0) - node.col_offset)


def _lambda_source(routine: Any) -> str | None:
    """Source text of one lambda, not the whole statement it sits in.

    ``inspect`` only knows the lines a lambda starts on, so two lambdas
    in one statement would share each other's checks. Picks the
    ``ast.Lambda`` on the code's first line whose body holds the most of
    the code's instruction positions; ``None`` when that is ambiguous.
    """
    code = routine.__code__
    lines, _ = inspect.findsource(routine)
    source = "".join(lines)
    try:
        tree = ast.parse(source)
    except SyntaxError:
        return None

    positions = [(line, col) for line, _, col, _ in code.co_positions() if line is not None and col is not None]
    scored = [
        (sum(_contains(node.body, line, col) for line, col in positions), node)
        for node in ast.walk(tree)
        if isinstance(node, ast.Lambda) and node.lineno == code.co_firstlineno
    ]
    if not scored:
        return None
    best = max(hits for hits, _ in scored)
    candidates = [node for hits, node in scored if hits == best]
    if best == 0 and len(candidates) > 1:
        return None
    # Nested lambdas tie with their parent; the innermost span wins
    node = min(candidates, key=_span)
    return ast.get_source_segment(source, node)


@dataclass(frozen=True, slots=True)
class InspectSource:
    """Scan the source text of a Python callable for capability checks."""

    target: Callable[..., Any]
    patterns: tuple[re.Pattern[str], ...] = DEFAULT_PATTERNS

    def scan(self) -> ScanResult:
        try:
            routine = _routine_of(self.target)
            filename = inspect.getsourcefile(routine)
            lines, start = inspect.getsourcelines(routine)
            text = "".join(lines)
            if inspect.isfunction(routine) and routine.__name__ == "<lambda>":
                text = _lambda_source(routine) or text
        except (OSError, TypeError, ValueError) as exc:
            name = getattr(self.target, "__qualname__", type(self.target).__qualname__)
            return ScanResult(
                issue=AnalysisIssue(
                    stage=IssueStage.SOURCE,
                    message=f"Error extracting capabilities from {name}",
                    details=str(exc),
                ),
            )

        if not text:
            return ScanResult()
        logger.debug("Scanning %s:%d (%d lines)", filename, start, len(lines))
        return ScanResult(capabilities=scan_text(text, self.patterns))


def routine_key(target: Any) -> int:
    """Identity of the underlying routine, stable for the life of a batch.

    Bound methods are recreated on every attribute access, so key on
    the function they wrap.
    """
    return id(getattr(target, "__func__", target))


@dataclass(slots=True)
class ScanCache:
    """Per-batch memo so each distinct routine is read at most once.

    Built fresh by every ``RouteAnalyzer.analyze()`` call and dropped
    when the call returns.
    """

    factory: Callable[[Callable[..., Any]], CapabilitySource]
    results: dict[Hashable, ScanResult] = field(default_factory=dict)

    def source_for(self, target: Callable[..., Any]) -> CapabilitySource:
        return _CachedSource(self, routine_key(target), self.factory(target))


@dataclass(frozen=True, slots=True)
class _CachedSource:
    cache: ScanCache
    key: Hashable
    inner: CapabilitySource

    def scan(self) -> ScanResult:
        result = self.cache.results.get(self.key)
        if result is None:
            result = self.inner.scan()
            self.cache.results[self.key] = result
        return result
