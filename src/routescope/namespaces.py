"""Namespace helpers — first-segment ownership and display names.

A route's namespace is its first path segment and stands in for the
plugin that registered it. Display names are resolved in order:

1. a prefix token of the handler's bound target type
   (``acme_shop.api.ItemsController`` -> ``Acme``),
2. the well-known namespace table,
3. the formatted segment (``contact-form-7`` -> ``Contact Form 7``).
"""

import inspect
import re
from collections.abc import Mapping, Sequence
from typing import Any

from routescope.registry import RouteHandler

KNOWN_NAMESPACES: dict[str, str] = {
    "wc": "WooCommerce",
    "wc-admin": "WooCommerce Admin",
    "yoast": "Yoast SEO",
    "elementor": "Elementor",
    "buddypress": "BuddyPress",
    "bbpress": "bbPress",
    "learndash": "LearnDash",
    "tribe": "The Events Calendar",
    "gravityforms": "Gravity Forms",
    "contact-form-7": "Contact Form 7",
    "jetpack": "Jetpack",
    "woocommerce": "WooCommerce",
}

_NAMESPACE_RE = re.compile(r"^/([^/]+)")
_PREFIX_RE = re.compile(r"^(.+?)[._]")

# Modules whose names say nothing about who registered the route
_ANONYMOUS_MODULES = frozenset({"__main__", "builtins"})


def namespace_of(path: str) -> str:
    """First path segment, or ``""`` for a path without one."""
    match = _NAMESPACE_RE.match(path)
    return match.group(1) if match else ""


def is_reserved(
    path: str,
    reserved_namespaces: Sequence[str],
    reserved_prefixes: Sequence[str],
) -> bool:
    """True for routes owned by the framework itself."""
    if path.startswith(tuple(f"/{prefix}" for prefix in reserved_prefixes)):
        return True
    return namespace_of(path) in reserved_namespaces


def format_display_name(name: str) -> str:
    """Separators become spaces and each word gets an upper-case first letter."""
    name = name.replace("-", " ").replace("_", " ")
    return " ".join(word[:1].upper() + word[1:] for word in name.split(" "))


def bound_target(callback: Any) -> Any:
    """The instance a handler callback is bound to, if any."""
    if isinstance(callback, (tuple, list)) and len(callback) == 2:
        target = callback[0]
    elif inspect.ismethod(callback):
        target = callback.__self__
    else:
        return None
    if isinstance(target, (str, type)):
        return None
    return target


def _type_prefix(target: Any) -> str | None:
    cls = type(target)
    qualified = cls.__qualname__
    if cls.__module__ not in _ANONYMOUS_MODULES:
        qualified = f"{cls.__module__}.{qualified}"
    match = _PREFIX_RE.match(qualified)
    return match.group(1) if match else None


def guess_display_name(
    namespace: str,
    handler: RouteHandler | None,
    known: Mapping[str, str] = KNOWN_NAMESPACES,
) -> str:
    if handler is not None:
        target = bound_target(getattr(handler, "callback", None))
        if target is not None:
            prefix = _type_prefix(target)
            if prefix:
                return format_display_name(prefix)
    return known.get(namespace) or format_display_name(namespace)
