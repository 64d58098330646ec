"""Report output — plain-text table, JSON, and an HTML page.

The HTML report is rendered with kida and needs the ``html`` extra::

    pip install routescope[html]
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from routescope.analyzer import NamespaceGroup, RouteAnalysis
from routescope.errors import ReportNotInstalledError
from routescope.stats import RouteStats, compute_stats

if TYPE_CHECKING:
    from kida import Environment

ACCESS_LABELS: dict[str, str] = {
    "admin": "Admin Only",
    "editor": "Editor+",
    "author": "Author+",
    "contributor": "Contributor+",
    "subscriber": "Subscriber+",
    "public": "Public",
    "custom": "Custom",
    "unknown": "Unknown",
}

RISK_LABELS: dict[str, str] = {
    "high": "High Risk",
    "medium": "Medium Risk",
    "low": "Low Risk",
}

SUMMARY_CAPABILITIES = 2
CALLBACK_PREVIEW = 30


def access_label(level: str) -> str:
    return ACCESS_LABELS.get(level, level)


def risk_label(level: str) -> str:
    return RISK_LABELS.get(level, level)


def _table(header: tuple[str, ...], rows: list[tuple[str, ...]]) -> str:
    widths = [max(len(header[i]), *(len(r[i]) for r in rows)) for i in range(len(header) - 1)]
    fmt = "  ".join(f"{{:<{w}}}" for w in widths) + "  {}"
    lines = [fmt.format(*header)]
    sep_len = sum(widths) + 2 * len(widths) + max((len(r[-1]) for r in rows), default=0)
    lines.append("-" * min(sep_len, 80))
    lines.extend(fmt.format(*row) for row in rows)
    return "\n".join(lines)


def format_groups(groups: Sequence[NamespaceGroup]) -> str:
    """Namespaces as a NAMESPACE / PLUGIN / ROUTES table."""
    if not groups:
        return "No plugin routes registered."
    rows = [(g.namespace, g.display_name, str(g.route_count)) for g in groups]
    return _table(("NAMESPACE", "PLUGIN", "ROUTES"), rows)


def format_table(results: Sequence[RouteAnalysis]) -> str:
    """Analyses as a METHOD / PATH / ACCESS / RISK / CALLBACK table."""
    if not results:
        return "No routes found."
    rows = [
        (
            ", ".join(r.methods),
            r.route,
            access_label(r.access_level.value),
            risk_label(r.risk_level.value),
            r.callback_description,
        )
        for r in results
    ]
    return _table(("METHOD", "PATH", "ACCESS", "RISK", "CALLBACK"), rows)


def to_json(results: Sequence[RouteAnalysis], stats: RouteStats | None = None, *, indent: int | None = 2) -> str:
    if stats is None:
        stats = compute_stats(results)
    payload = {
        "routes": [r.to_dict() for r in results],
        "stats": stats.to_dict(),
        "total": len(results),
    }
    return json.dumps(payload, indent=indent)


def _row_context(route: RouteAnalysis) -> dict[str, Any]:
    caps = route.capabilities[:SUMMARY_CAPABILITIES]
    callback = route.callback_description
    if len(callback) > CALLBACK_PREVIEW:
        callback = callback[:CALLBACK_PREVIEW] + "..."
    return {
        **route.to_dict(),
        "access_label": access_label(route.access_level.value),
        "risk_label": risk_label(route.risk_level.value),
        "summary_capabilities": ", ".join(caps),
        "more_capabilities": len(route.capabilities) - len(caps),
        "callback_preview": callback,
    }


def _get_environment() -> Environment:
    """Create a kida Environment for the bundled templates, or explain what's missing."""
    try:
        from kida import Environment, PackageLoader
    except ImportError:
        msg = (
            "routescope HTML reports require 'kida' for template rendering. "
            "Install with: pip install routescope[html]"
        )
        raise ReportNotInstalledError(msg) from None

    return Environment(
        loader=PackageLoader("routescope", "templates"),
        autoescape=True,
    )


def render_html(
    results: Sequence[RouteAnalysis],
    stats: RouteStats | None = None,
    *,
    title: str = "REST route permissions",
) -> str:
    if stats is None:
        stats = compute_stats(results)
    template = _get_environment().get_template("report.html")
    return template.render({
        "title": title,
        "routes": [_row_context(r) for r in results],
        "stats": stats.to_dict(),
        "total": len(results),
    })
