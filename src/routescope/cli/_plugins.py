"""``routescope plugins`` — list plugin namespaces with route counts."""

import argparse
import sys

from routescope.analyzer import RouteAnalyzer
from routescope.cli._resolve import resolve_registry
from routescope.config import AnalyzerConfig
from routescope.errors import RouteScopeError
from routescope.report import format_groups


def run_plugins(args: argparse.Namespace) -> None:
    try:
        registry = resolve_registry(args.registry)
        config = AnalyzerConfig.from_toml(args.config) if args.config else AnalyzerConfig()
    except (ModuleNotFoundError, AttributeError, TypeError, RouteScopeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    try:
        groups = RouteAnalyzer(registry, config=config).discover()
    except RouteScopeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(format_groups(groups))
