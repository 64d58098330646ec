"""Import resolution — turns ``"module:attribute"`` strings into objects.

Shared by ``routescope plugins`` and ``routescope analyze`` to locate a
route registry (and optionally a role table) from user-supplied strings.
"""

import importlib
from typing import Any

from routescope.registry import RouteRegistry


def resolve_object(import_string: str, default_attr: str) -> Any:
    """Import ``module`` and return ``attribute`` from ``"module:attribute"``.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = default_attr

    module = importlib.import_module(module_path)
    return getattr(module, attr_name)


def resolve_registry(import_string: str) -> RouteRegistry:
    """Resolve an import string to a route registry.

    Accepts ``"module:attribute"`` format. When the attribute portion is
    omitted, defaults to ``"registry"``. Classes and factory functions
    are called to produce the registry.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a route registry.
    """
    obj = resolve_object(import_string, "registry")

    if isinstance(obj, type) or (callable(obj) and not isinstance(obj, RouteRegistry)):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, RouteRegistry):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, which has no get_routes()"
        raise TypeError(msg)

    return obj
