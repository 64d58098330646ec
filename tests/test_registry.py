"""Tests for routescope.registry — route handlers and the in-memory registry."""

import pytest

from routescope.permissions import always_allow
from routescope.registry import MemoryRegistry, RouteHandler, RouteRegistry, join_route, normalize_methods


class TestJoinRoute:
    def test_joins(self) -> None:
        assert join_route("acme/v1", "/items") == "/acme/v1/items"

    def test_strips_slashes(self) -> None:
        assert join_route("/acme/v1/", "items/") == "/acme/v1/items"

    def test_empty_route(self) -> None:
        assert join_route("acme/v1", "/") == "/acme/v1"


class TestNormalizeMethods:
    def test_comma_string(self) -> None:
        assert normalize_methods("get, post") == {"GET": True, "POST": True}

    def test_iterable_keeps_order(self) -> None:
        assert list(normalize_methods(["DELETE", "GET"])) == ["DELETE", "GET"]

    def test_mapping(self) -> None:
        assert normalize_methods({"get": True, "post": False}) == {"GET": True, "POST": False}


class TestRouteHandler:
    def test_allowed_methods(self) -> None:
        handler = RouteHandler(methods={"GET": True, "POST": False, "PUT": True})
        assert handler.allowed_methods == ("GET", "PUT")


class TestMemoryRegistry:
    def test_register(self) -> None:
        registry = MemoryRegistry()
        registry.register("acme/v1", "/items", methods="GET,POST", permission_callback=always_allow)
        routes = registry.get_routes()
        assert list(routes) == ["/acme/v1/items"]
        (handler,) = routes["/acme/v1/items"]
        assert handler.allowed_methods == ("GET", "POST")
        assert handler.permission_callback is always_allow

    def test_multiple_handlers_append(self) -> None:
        registry = MemoryRegistry()
        registry.register("acme/v1", "/items", methods="GET")
        registry.register("acme/v1", "/items", methods="POST")
        assert len(registry.get_routes()["/acme/v1/items"]) == 2
        assert len(registry) == 1

    def test_override(self) -> None:
        registry = MemoryRegistry()
        registry.register("acme/v1", "/items", methods="GET")
        registry.register("acme/v1", "/items", methods="POST", override=True)
        (handler,) = registry.get_routes()["/acme/v1/items"]
        assert handler.allowed_methods == ("POST",)

    def test_requires_namespace(self) -> None:
        with pytest.raises(ValueError, match="namespaced"):
            MemoryRegistry().register("/", "/items")

    def test_snapshot_is_isolated(self) -> None:
        registry = MemoryRegistry()
        registry.register("acme/v1", "/items")
        snapshot = registry.get_routes()
        registry.register("acme/v1", "/orders")
        registry.register("acme/v1", "/items", methods="DELETE")
        assert list(snapshot) == ["/acme/v1/items"]
        assert len(snapshot["/acme/v1/items"]) == 1

    def test_unregister(self) -> None:
        registry = MemoryRegistry()
        registry.register("acme/v1", "/items")
        assert registry.unregister("/acme/v1/items")
        assert not registry.unregister("/acme/v1/items")
        assert registry.get_routes() == {}

    def test_is_route_registry(self) -> None:
        assert isinstance(MemoryRegistry(), RouteRegistry)
