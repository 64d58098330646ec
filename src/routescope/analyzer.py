"""Route discovery and analysis.

``RouteAnalyzer`` is the entry point hosts use. Every call re-reads the
registry; nothing is cached between calls::

    analyzer = RouteAnalyzer(registry, roles=RoleTable.from_mapping(host_roles))
    groups = analyzer.discover()
    results = analyzer.analyze([g.namespace for g in groups])

A route whose analysis fails is dropped from the results and reported
to the issue sink; it never aborts the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from routescope.capabilities import AccessLevel, CapabilityHierarchy
from routescope.classifier import AccessClassifier
from routescope.config import AnalyzerConfig
from routescope.errors import InvalidSelection, RegistryUnavailable, RouteScopeError
from routescope.extractor import EvidenceExtractor
from routescope.issues import AnalysisIssue, IssueSink, IssueStage, log_issue
from routescope.namespaces import guess_display_name, is_reserved, namespace_of
from routescope.permissions import SourceFactory, to_permission_ref
from routescope.registry import RouteHandler, RouteRegistry
from routescope.risk import RiskLevel, score
from routescope.roles import RoleTable
from routescope.sources import InspectSource, ScanCache, build_patterns

logger = logging.getLogger("routescope.analyzer")


@dataclass(frozen=True, slots=True)
class NamespaceGroup:
    """One plugin namespace and how many routes it owns."""

    namespace: str
    display_name: str
    route_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "namespace": self.namespace,
            "display_name": self.display_name,
            "route_count": self.route_count,
        }


@dataclass(frozen=True, slots=True)
class RouteAnalysis:
    """The verdict for one handler on one route."""

    route: str
    namespace: str
    display_name: str
    methods: tuple[str, ...]
    access_level: AccessLevel
    capabilities: tuple[str, ...]
    custom_roles: tuple[str, ...]
    callback_description: str
    risk_level: RiskLevel

    def to_dict(self) -> dict[str, Any]:
        return {
            "route": self.route,
            "namespace": self.namespace,
            "display_name": self.display_name,
            "methods": list(self.methods),
            "access_level": self.access_level.value,
            "capabilities": list(self.capabilities),
            "custom_roles": list(self.custom_roles),
            "callback_description": self.callback_description,
            "risk_level": self.risk_level.value,
        }


@dataclass(frozen=True, slots=True)
class _Namespace:
    display_name: str
    routes: list[tuple[str, Sequence[RouteHandler]]]


class RouteAnalyzer:
    """Discover plugin namespaces and classify their routes.

    The hierarchy is built once, at construction, from the config's
    extra admin capabilities; pass ``hierarchy`` to supply your own.
    """

    __slots__ = (
        "_classifier",
        "_config",
        "_extractor",
        "_issue_sink",
        "_patterns",
        "_registry",
        "_source_factory",
    )

    def __init__(
        self,
        registry: RouteRegistry,
        *,
        config: AnalyzerConfig | None = None,
        hierarchy: CapabilityHierarchy | None = None,
        roles: RoleTable | None = None,
        issue_sink: IssueSink | None = None,
        source_factory: SourceFactory | None = None,
    ) -> None:
        self._registry = registry
        self._config = config or AnalyzerConfig()
        if hierarchy is None:
            extra = frozenset(self._config.extra_admin_capabilities)
            hierarchy = CapabilityHierarchy.load(admin_capabilities_hook=lambda caps: caps | extra)
        self._classifier = AccessClassifier(hierarchy, roles)
        self._extractor = EvidenceExtractor(self._config.check_functions)
        self._issue_sink = issue_sink or log_issue
        self._patterns = build_patterns(self._config.check_functions, self._config.user_check_functions)
        self._source_factory = source_factory or self._inspect_source

    @property
    def config(self) -> AnalyzerConfig:
        return self._config

    @property
    def classifier(self) -> AccessClassifier:
        return self._classifier

    def _inspect_source(self, target: Any) -> InspectSource:
        return InspectSource(target, self._patterns)

    # -- Registry ---------------------------------------------------------

    def _snapshot(self) -> Mapping[str, Sequence[RouteHandler]]:
        try:
            routes = self._registry.get_routes()
        except RouteScopeError:
            raise
        except Exception as exc:
            msg = f"Route registry unavailable: {exc}"
            raise RegistryUnavailable(msg) from exc
        if routes is None:
            msg = "Route registry returned no route table"
            raise RegistryUnavailable(msg)
        if not isinstance(routes, Mapping):
            msg = f"Route registry returned {type(routes).__name__}, expected a mapping of path to handlers"
            raise RegistryUnavailable(msg)
        return routes

    def _namespaces(self, routes: Mapping[str, Sequence[RouteHandler]]) -> dict[str, _Namespace]:
        """Group non-reserved routes by namespace, in registry order."""
        config = self._config
        grouped: dict[str, _Namespace] = {}
        for path, handlers in routes.items():
            if not isinstance(path, str):
                self._report(
                    AnalysisIssue(
                        stage=IssueStage.REGISTRY,
                        message="Malformed route path",
                        details=f"expected a string path, got {type(path).__name__}: {path!r}",
                    ),
                )
                continue
            if is_reserved(path, config.reserved_namespaces, config.reserved_prefixes):
                continue
            namespace = namespace_of(path)
            if not namespace:
                continue
            if isinstance(handlers, (str, bytes)) or not isinstance(handlers, Sequence):
                self._report(
                    AnalysisIssue(
                        stage=IssueStage.REGISTRY,
                        message="Malformed route entry",
                        route=path,
                        details=f"expected a sequence of handlers, got {type(handlers).__name__}",
                    ),
                )
                continue
            group = grouped.get(namespace)
            if group is None:
                first = handlers[0] if handlers else None
                group = _Namespace(
                    display_name=guess_display_name(namespace, first, config.known_namespaces),
                    routes=[],
                )
                grouped[namespace] = group
            group.routes.append((path, handlers))
        return grouped

    # -- Public API -------------------------------------------------------

    def discover(self) -> list[NamespaceGroup]:
        """Every plugin namespace with its route count, sorted by display name."""
        groups = [
            NamespaceGroup(
                namespace=namespace,
                display_name=group.display_name,
                route_count=len(group.routes),
            )
            for namespace, group in self._namespaces(self._snapshot()).items()
        ]
        groups.sort(key=lambda g: g.display_name)
        return groups

    def analyze(self, selected: Iterable[str]) -> list[RouteAnalysis]:
        """Classify every handler on every route in the selected namespaces.

        Sorted by display name, then route path.

        Raises:
            InvalidSelection: ``selected`` is empty or not a collection of
                namespace names. Raised before the registry is read.
            RegistryUnavailable: the registry could not be enumerated.
        """
        wanted = _validate_selection(selected)
        namespaces = self._namespaces(self._snapshot())
        cache = ScanCache(self._source_factory)

        results: list[RouteAnalysis] = []
        for namespace, group in namespaces.items():
            if namespace not in wanted:
                continue
            for path, handlers in group.routes:
                for handler in handlers:
                    analysis = self._analyze_guarded(path, handler, namespace, group.display_name, cache)
                    if analysis is not None:
                        results.append(analysis)

        results.sort(key=lambda r: (r.display_name, r.route))
        return results

    def analyze_route(
        self,
        path: str,
        handler: RouteHandler,
        *,
        namespace: str | None = None,
        display_name: str | None = None,
        cache: ScanCache | None = None,
    ) -> tuple[RouteAnalysis, tuple[AnalysisIssue, ...]]:
        """Classify a single handler. Issues are returned, not reported."""
        if namespace is None:
            namespace = namespace_of(path)
        if display_name is None:
            display_name = guess_display_name(namespace, handler, self._config.known_namespaces)
        factory = cache.source_for if cache is not None else self._source_factory

        methods = handler.allowed_methods
        ref = to_permission_ref(handler.permission_callback, factory)
        evidence = self._extractor.extract(ref)
        verdict = self._classifier.classify(evidence)

        analysis = RouteAnalysis(
            route=path,
            namespace=namespace,
            display_name=display_name,
            methods=methods,
            access_level=verdict.access_level,
            capabilities=verdict.capabilities,
            custom_roles=verdict.custom_roles,
            callback_description=verdict.description,
            risk_level=score(verdict.access_level, methods, self._config.mutating_methods),
        )
        return analysis, tuple(issue.with_route(path) for issue in evidence.issues)

    def _analyze_guarded(
        self,
        path: str,
        handler: RouteHandler,
        namespace: str,
        display_name: str,
        cache: ScanCache,
    ) -> RouteAnalysis | None:
        try:
            analysis, issues = self.analyze_route(
                path,
                handler,
                namespace=namespace,
                display_name=display_name,
                cache=cache,
            )
        except Exception as exc:
            self._report(
                AnalysisIssue(
                    stage=IssueStage.ROUTE,
                    message="Error analyzing route",
                    route=path,
                    details=f"{type(exc).__name__}: {exc}",
                ),
            )
            return None
        for issue in issues:
            self._report(issue)
        return analysis

    def _report(self, issue: AnalysisIssue) -> None:
        try:
            self._issue_sink(issue)
        except Exception:
            logger.exception("Issue sink failed while reporting %s", issue)


def _validate_selection(selected: Iterable[str]) -> frozenset[str]:
    if isinstance(selected, str) or not isinstance(selected, Iterable):
        msg = "Namespace selection must be a collection of namespace names"
        raise InvalidSelection(msg)
    wanted: set[str] = set()
    for item in selected:
        if not isinstance(item, str):
            msg = f"Namespace selection contains a non-string item: {item!r}"
            raise InvalidSelection(msg)
        if item:
            wanted.add(item)
    if not wanted:
        msg = "No plugins selected for analysis."
        raise InvalidSelection(msg)
    return frozenset(wanted)
