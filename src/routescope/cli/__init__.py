"""routescope CLI — namespace discovery and route permission analysis.

Entry point registered as ``routescope`` in ``pyproject.toml``::

    [project.scripts]
    routescope = "routescope.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``routescope`` command."""
    parser = argparse.ArgumentParser(
        prog="routescope",
        description="routescope — triage the permission checks guarding registered API routes.",
    )
    parser.add_argument(
        "--log-level",
        default="warning",
        choices=["debug", "info", "warning", "error"],
        help="Logging verbosity (default: warning)",
    )
    parser.add_argument("--config", default=None, help="Path to a TOML config file")
    subparsers = parser.add_subparsers(dest="command")

    # -- routescope plugins -----------------------------------------------
    plugins_parser = subparsers.add_parser("plugins", help="List plugin namespaces")
    plugins_parser.add_argument(
        "registry",
        help="Import string (e.g. myapp.routes:registry)",
    )

    # -- routescope analyze -----------------------------------------------
    analyze_parser = subparsers.add_parser("analyze", help="Classify route permissions")
    analyze_parser.add_argument(
        "registry",
        help="Import string (e.g. myapp.routes:registry)",
    )
    analyze_parser.add_argument(
        "-n",
        "--namespace",
        dest="namespaces",
        action="append",
        default=[],
        help="Namespace to analyze (repeatable; default: all)",
    )
    analyze_parser.add_argument(
        "--roles",
        default=None,
        help="Import string for a role -> capabilities mapping (e.g. myapp.roles:roles)",
    )
    analyze_parser.add_argument(
        "--format",
        choices=["table", "json", "html"],
        default="table",
        help="Output format (default: table)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "plugins":
        from routescope.cli._plugins import run_plugins

        run_plugins(args)
    elif args.command == "analyze":
        from routescope.cli._analyze import run_analyze

        run_analyze(args)
