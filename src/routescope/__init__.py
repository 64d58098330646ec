"""routescope — triage the permission checks guarding registered API routes.

Inspects every registered route, infers what its permission callback
actually requires, and rates the risk of the combination with the
route's HTTP methods. It never enforces anything; it only reports.

Basic usage::

    from routescope import MemoryRegistry, RouteAnalyzer, always_allow

    registry = MemoryRegistry()
    registry.register("acme/v1", "/items", methods="POST", permission_callback=always_allow)

    analyzer = RouteAnalyzer(registry)
    for group in analyzer.discover():
        print(group.display_name, group.route_count)

    for result in analyzer.analyze(["acme"]):
        print(result.route, result.access_level.value, result.risk_level.value)

HTML reports (``pip install routescope[html]``)::

    from routescope.report import render_html
    html = render_html(analyzer.analyze(["acme"]))
"""

__version__ = "0.1.0"
__all__ = [
    "AccessClassifier",
    "AccessLevel",
    "AnalysisIssue",
    "AnalyzerConfig",
    "CapabilityHierarchy",
    "ConfigurationError",
    "InvalidSelection",
    "MemoryRegistry",
    "NamespaceGroup",
    "RegistryUnavailable",
    "RiskLevel",
    "RoleTable",
    "RouteAnalysis",
    "RouteAnalyzer",
    "RouteHandler",
    "RouteRegistry",
    "RouteScopeError",
    "always_allow",
    "compute_stats",
    "score",
]

# name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "AccessClassifier": "routescope.classifier",
    "AccessLevel": "routescope.capabilities",
    "AnalysisIssue": "routescope.issues",
    "AnalyzerConfig": "routescope.config",
    "CapabilityHierarchy": "routescope.capabilities",
    "ConfigurationError": "routescope.errors",
    "InvalidSelection": "routescope.errors",
    "MemoryRegistry": "routescope.registry",
    "NamespaceGroup": "routescope.analyzer",
    "RegistryUnavailable": "routescope.errors",
    "RiskLevel": "routescope.risk",
    "RoleTable": "routescope.roles",
    "RouteAnalysis": "routescope.analyzer",
    "RouteAnalyzer": "routescope.analyzer",
    "RouteHandler": "routescope.registry",
    "RouteRegistry": "routescope.registry",
    "RouteScopeError": "routescope.errors",
    "always_allow": "routescope.permissions",
    "compute_stats": "routescope.stats",
    "score": "routescope.risk",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import routescope`` fast while providing a clean top-level API.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_path), name)
