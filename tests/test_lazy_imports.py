"""Tests for routescope's top-level API — names load from their defining modules."""

from importlib import import_module

import pytest

import routescope


class TestPublicNames:
    @pytest.mark.parametrize(("name", "module_path"), sorted(routescope._LAZY_IMPORTS.items()))
    def test_resolves_to_defining_object(self, name: str, module_path: str) -> None:
        assert getattr(routescope, name) is getattr(import_module(module_path), name)

    def test_exports_match_lazy_table(self) -> None:
        assert sorted(routescope.__all__) == sorted(routescope._LAZY_IMPORTS)

    def test_exports_sorted(self) -> None:
        assert routescope.__all__ == sorted(routescope.__all__)

    def test_from_import(self) -> None:
        from routescope import MemoryRegistry, RouteAnalyzer, always_allow

        registry = MemoryRegistry()
        registry.register("acme/v1", "/items", methods="POST", permission_callback=always_allow)
        (result,) = RouteAnalyzer(registry).analyze(["acme"])
        assert result.risk_level is routescope.RiskLevel.HIGH


class TestUnknownNames:
    def test_attribute_error(self) -> None:
        with pytest.raises(AttributeError, match="has no attribute 'Router'"):
            routescope.Router  # noqa: B018

    def test_private_module_not_exported(self) -> None:
        with pytest.raises(AttributeError):
            routescope.__getattr__("ScanCache")
