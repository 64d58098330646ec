"""Route registries — the external source of routes to analyze.

The analyzer only needs ``get_routes()``: an ordered mapping from path
pattern to the handlers registered on it. Anything that provides it
satisfies ``RouteRegistry``.

``MemoryRegistry`` is a small in-process registry with the same shape
as a REST route table::

    registry = MemoryRegistry()
    registry.register(
        "acme/v1",
        "/items",
        methods="GET, POST",
        permission_callback=ItemsController().can_edit,
    )
    registry.get_routes()  # {"/acme/v1/items": (RouteHandler(...),)}
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class RouteHandler:
    """One handler registered on a path.

    ``methods`` maps HTTP method to enabled flag, in registration order.
    ``permission_callback`` is the raw, host-supplied permission check.
    """

    methods: Mapping[str, bool]
    permission_callback: Any = None
    callback: Callable[..., Any] | None = None

    @property
    def allowed_methods(self) -> tuple[str, ...]:
        return tuple(method for method, enabled in self.methods.items() if enabled)


@runtime_checkable
class RouteRegistry(Protocol):
    """Source of the currently registered routes."""

    def get_routes(self) -> Mapping[str, Sequence[RouteHandler]]: ...


def normalize_methods(methods: str | Iterable[str] | Mapping[str, bool]) -> dict[str, bool]:
    """``"GET, POST"``, ``["get"]`` or ``{"GET": True}`` -> ordered method map."""
    if isinstance(methods, Mapping):
        return {str(m).upper(): bool(v) for m, v in methods.items()}
    if isinstance(methods, str):
        methods = methods.split(",")
    return {m.strip().upper(): True for m in methods if m.strip()}


def join_route(namespace: str, route: str) -> str:
    """``("acme/v1", "/items")`` -> ``"/acme/v1/items"``."""
    namespace = namespace.strip("/")
    route = route.strip("/")
    if not route:
        return f"/{namespace}"
    return f"/{namespace}/{route}"


class MemoryRegistry:
    """A mutable in-process route table.

    ``get_routes()`` returns a snapshot, so later registrations never
    leak into a result someone already holds.
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: dict[str, list[RouteHandler]] = {}

    def register(
        self,
        namespace: str,
        route: str,
        *,
        methods: str | Iterable[str] | Mapping[str, bool] = "GET",
        permission_callback: Any = None,
        callback: Callable[..., Any] | None = None,
        override: bool = False,
    ) -> RouteHandler:
        """Register a handler; extra handlers on the same path are appended."""
        if not namespace.strip("/"):
            msg = "Routes must be namespaced"
            raise ValueError(msg)

        path = join_route(namespace, route)
        handler = RouteHandler(
            methods=MappingProxyType(normalize_methods(methods)),
            permission_callback=permission_callback,
            callback=callback,
        )
        if override or path not in self._routes:
            self._routes[path] = [handler]
        else:
            self._routes[path].append(handler)
        return handler

    def unregister(self, path: str) -> bool:
        return self._routes.pop(path, None) is not None

    def get_routes(self) -> Mapping[str, Sequence[RouteHandler]]:
        return MappingProxyType({path: tuple(handlers) for path, handlers in self._routes.items()})

    def __len__(self) -> int:
        return len(self._routes)
