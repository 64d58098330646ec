"""``routescope analyze`` — classify the routes of selected namespaces.

Resolves the registry (and optional role table), analyzes the
namespaces given with ``-n`` (every discovered namespace when none are
given) and prints a table, JSON, or an HTML report.
"""

import argparse
import logging
import sys
from typing import NoReturn

from routescope.analyzer import RouteAnalyzer
from routescope.cli._resolve import resolve_object, resolve_registry
from routescope.config import AnalyzerConfig
from routescope.errors import RouteScopeError
from routescope.report import format_table, render_html, to_json
from routescope.roles import RoleTable
from routescope.stats import compute_stats

logger = logging.getLogger("routescope.cli")


def _fail(exc: BaseException) -> NoReturn:
    print(f"Error: {exc}", file=sys.stderr)
    raise SystemExit(1) from exc


def run_analyze(args: argparse.Namespace) -> None:
    try:
        registry = resolve_registry(args.registry)
        roles = RoleTable.from_mapping(resolve_object(args.roles, "roles")) if args.roles else None
        config = AnalyzerConfig.from_toml(args.config) if args.config else AnalyzerConfig()
    except (ModuleNotFoundError, AttributeError, TypeError, RouteScopeError) as exc:
        _fail(exc)

    analyzer = RouteAnalyzer(registry, config=config, roles=roles)
    try:
        selected = args.namespaces or [g.namespace for g in analyzer.discover()]
        if not selected:
            print("No plugin routes registered.")
            return
        results = analyzer.analyze(selected)
    except RouteScopeError as exc:
        _fail(exc)

    logger.debug("Analyzed %d routes in %d namespaces", len(results), len(selected))
    stats = compute_stats(results, config.mutating_methods)

    if args.format == "json":
        print(to_json(results, stats))
    elif args.format == "html":
        try:
            print(render_html(results, stats))
        except RouteScopeError as exc:
            _fail(exc)
    else:
        print(format_table(results))
        print()
        print(stats.summary())
