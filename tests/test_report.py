"""Tests for routescope.report — table, JSON and HTML output."""

import json

import pytest

from routescope.analyzer import NamespaceGroup, RouteAnalysis
from routescope.capabilities import AccessLevel
from routescope.report import (
    ACCESS_LABELS,
    RISK_LABELS,
    access_label,
    format_groups,
    format_table,
    render_html,
    risk_label,
    to_json,
)
from routescope.risk import RiskLevel


def _analysis(**overrides: object) -> RouteAnalysis:
    values: dict[str, object] = {
        "route": "/acme/v1/items",
        "namespace": "acme",
        "display_name": "Acme",
        "methods": ("GET", "POST"),
        "access_level": AccessLevel.EDITOR,
        "capabilities": ("edit_pages", "edit_others_posts", "moderate_comments"),
        "custom_roles": ("shop_manager",),
        "callback_description": "acme_shop.ItemsController.can_manage_everything",
        "risk_level": RiskLevel.LOW,
    }
    values.update(overrides)
    return RouteAnalysis(**values)  # type: ignore[arg-type]


class TestLabels:
    def test_every_level_has_a_label(self) -> None:
        assert set(ACCESS_LABELS) == {level.value for level in AccessLevel}
        assert set(RISK_LABELS) == {level.value for level in RiskLevel}

    def test_lookup(self) -> None:
        assert access_label("admin") == "Admin Only"
        assert access_label("contributor") == "Contributor+"
        assert risk_label("high") == "High Risk"

    def test_unknown_value_passes_through(self) -> None:
        assert access_label("mystery") == "mystery"


class TestFormatGroups:
    def test_empty(self) -> None:
        assert format_groups([]) == "No plugin routes registered."

    def test_rows(self) -> None:
        out = format_groups([NamespaceGroup("acme", "Acme", 3)])
        lines = out.splitlines()
        assert lines[0].split() == ["NAMESPACE", "PLUGIN", "ROUTES"]
        assert lines[2].split() == ["acme", "Acme", "3"]


class TestFormatTable:
    def test_empty(self) -> None:
        assert format_table([]) == "No routes found."

    def test_rows(self) -> None:
        out = format_table([_analysis()])
        assert "GET, POST" in out
        assert "Editor+" in out
        assert "Low Risk" in out


class TestToJson:
    def test_payload(self) -> None:
        payload = json.loads(to_json([_analysis()]))
        assert payload["total"] == 1
        assert payload["routes"][0]["access_level"] == "editor"
        assert payload["routes"][0]["methods"] == ["GET", "POST"]
        assert payload["stats"]["by_access_level"] == {"editor": 1}

    def test_compact(self) -> None:
        assert "\n" not in to_json([], indent=None)


class TestRenderHtml:
    def test_renders_rows(self) -> None:
        pytest.importorskip("kida")
        html = render_html([_analysis(risk_level=RiskLevel.HIGH, access_level=AccessLevel.PUBLIC)])
        assert "/acme/v1/items" in html
        assert "High Risk" in html
        assert "Public" in html
        assert "+1 more" in html
        assert "acme_shop.ItemsController.can_..." in html

    def test_escapes_values(self) -> None:
        pytest.importorskip("kida")
        html = render_html([_analysis(callback_description="<script>")])
        assert "<script>" not in html

    def test_empty(self) -> None:
        pytest.importorskip("kida")
        assert "No results" in render_html([])
