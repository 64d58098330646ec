"""Transport-neutral request handlers.

The two operations a selection UI and a results UI need, with the
request-side sanitizing and the failure envelope every transport
shares. Wire them to whatever carries the request (JSON-RPC, an admin
endpoint, a CLI)::

    response = inspect_routes(analyzer, request_json.get("plugins"))
    return json.dumps(response.to_dict())

Failures never raise out of here. They come back as ``ok=False`` with a
user-facing message; the cause goes to the log.
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass, field
from typing import Any

from routescope.analyzer import RouteAnalyzer
from routescope.errors import InvalidSelection, RouteScopeError
from routescope.stats import compute_stats

logger = logging.getLogger("routescope.service")

NO_SELECTION_MESSAGE = "No plugins selected for analysis."
LOAD_FAILED_MESSAGE = "Failed to load plugins. Please try again."
ANALYZE_FAILED_MESSAGE = "Failed to analyze routes. Please try again."


@dataclass(frozen=True, slots=True)
class ServiceResponse:
    """Success flag plus payload, in the shape transports serialize."""

    ok: bool
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(cls, message: str) -> ServiceResponse:
        return cls(ok=False, data={"message": message})

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.ok, "data": self.data}


def sanitize_text(value: str) -> str:
    """Drop control characters and collapse surrounding whitespace."""
    cleaned = "".join(ch for ch in value if unicodedata.category(ch)[0] != "C")
    return " ".join(cleaned.split())


def sanitize_selection(raw: Any) -> list[str]:
    """Namespace names from an untrusted request value.

    Anything but a list or tuple is treated as no selection. Non-string
    items and items that sanitize to nothing are dropped.
    """
    if not isinstance(raw, (list, tuple)):
        return []
    selection = (sanitize_text(item) for item in raw if isinstance(item, str))
    return [item for item in selection if item]


def list_plugins(analyzer: RouteAnalyzer) -> ServiceResponse:
    try:
        groups = analyzer.discover()
    except RouteScopeError as exc:
        logger.error("Error in list_plugins - %s", exc)
        return ServiceResponse.failure(LOAD_FAILED_MESSAGE)

    return ServiceResponse(
        ok=True,
        data={"plugins": [g.to_dict() for g in groups], "total": len(groups)},
    )


def inspect_routes(analyzer: RouteAnalyzer, raw_selection: Any) -> ServiceResponse:
    selected = sanitize_selection(raw_selection)
    if not selected:
        return ServiceResponse.failure(NO_SELECTION_MESSAGE)

    try:
        routes = analyzer.analyze(selected)
    except InvalidSelection as exc:
        return ServiceResponse.failure(str(exc))
    except RouteScopeError as exc:
        logger.error("Error in inspect_routes - %s", exc)
        return ServiceResponse.failure(ANALYZE_FAILED_MESSAGE)

    stats = compute_stats(routes, analyzer.config.mutating_methods)
    return ServiceResponse(
        ok=True,
        data={
            "routes": [r.to_dict() for r in routes],
            "stats": stats.to_dict(),
            "total": len(routes),
        },
    )
