"""Analysis issues — typed failure values and the sink that receives them.

Nothing in the analysis pipeline raises for a single bad route or an
unreadable callback. Instead it produces an ``AnalysisIssue`` and the
analyzer hands it to an ``IssueSink`` at the boundary. The default sink
writes to the ``routescope.analyzer`` logger; tests and hosts can pass
``list.append`` or their own callable.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("routescope.analyzer")


class IssueStage(Enum):
    """Where in the pipeline the issue was raised."""

    REGISTRY = "registry"
    SOURCE = "source"
    ROUTE = "route"


@dataclass(frozen=True, slots=True)
class AnalysisIssue:
    """A recoverable problem found while analyzing routes."""

    stage: IssueStage
    message: str
    route: str | None = None
    details: str | None = None

    def with_route(self, route: str) -> AnalysisIssue:
        if self.route == route:
            return self
        return AnalysisIssue(stage=self.stage, message=self.message, route=route, details=self.details)

    def __str__(self) -> str:
        loc = f" [{self.route}]" if self.route else ""
        extra = f" - {self.details}" if self.details else ""
        return f"{self.stage.value}: {self.message}{loc}{extra}"


type IssueSink = Callable[[AnalysisIssue], None]


def log_issue(issue: AnalysisIssue) -> None:
    """Default sink: one WARNING line per issue."""
    logger.warning("routescope: %s", issue)
