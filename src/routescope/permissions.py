"""Permission references — the check a route declares must pass.

Hosts register routes with whatever they have: nothing, the
``always_allow`` sentinel, a function name, a callable, an
``(object, "method")`` pair. ``to_permission_ref`` turns that raw value
into one of five tagged cases, and the extractor matches over them::

    to_permission_ref(None)                 # NoCheck()
    to_permission_ref(always_allow)         # AlwaysAllow()
    to_permission_ref("my_check")           # Named("my_check")
    to_permission_ref(controller.can_edit)  # Bound(...)
    to_permission_ref(object())             # Opaque()
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from routescope.sources import CapabilitySource, InspectSource, NullSource

# String spellings hosts use for the always-allow sentinel
ALWAYS_ALLOW_NAMES: frozenset[str] = frozenset({"__return_true", "always_allow"})

ANONYMOUS_LABEL = "Closure/Anonymous function"


def always_allow(*args: Any, **kwargs: Any) -> bool:
    """The canonical "anyone may call this route" permission check."""
    return True


@dataclass(frozen=True, slots=True)
class NoCheck:
    """The route declares no permission check at all."""


@dataclass(frozen=True, slots=True)
class AlwaysAllow:
    """The route uses the canonical always-allow sentinel."""


@dataclass(frozen=True, slots=True)
class Named:
    """A check referenced only by name; its body is not available."""

    name: str


@dataclass(frozen=True, slots=True)
class Bound:
    """A callable check whose capabilities can be asked of ``source``."""

    label: str
    source: CapabilitySource = field(default_factory=NullSource)
    target: Any = None


@dataclass(frozen=True, slots=True)
class Opaque:
    """Anything else: inline logic with no retrievable source."""


type PermissionRef = NoCheck | AlwaysAllow | Named | Bound | Opaque

type SourceFactory = Callable[[Callable[..., Any]], CapabilitySource]

_VARIANTS = (NoCheck, AlwaysAllow, Named, Bound, Opaque)


def describe_callable(func: Any) -> str:
    """Display label for a callable permission check.

    Methods render as ``Class.method``; lambdas as the anonymous label.
    """
    name = getattr(func, "__qualname__", None)
    if name is None:
        name = type(func).__qualname__
    if "<lambda>" in name:
        return ANONYMOUS_LABEL
    return name


def _pair_label(target: Any, attr: str) -> str:
    owner = target if isinstance(target, (str, type)) else type(target)
    owner_name = owner if isinstance(owner, str) else owner.__qualname__
    return f"{owner_name}.{attr}"


def to_permission_ref(raw: Any, source_factory: SourceFactory = InspectSource) -> PermissionRef:
    """Classify a raw permission-check value into a tagged reference."""
    if isinstance(raw, _VARIANTS):
        return raw
    if raw is None:
        return NoCheck()
    if raw is always_allow or (isinstance(raw, str) and raw in ALWAYS_ALLOW_NAMES):
        return AlwaysAllow()
    if isinstance(raw, str):
        return Named(raw)

    if isinstance(raw, (tuple, list)) and len(raw) == 2 and isinstance(raw[1], str):
        target, attr = raw
        label = _pair_label(target, attr)
        func = None if isinstance(target, str) else getattr(target, attr, None)
        if callable(func):
            return Bound(label=label, source=source_factory(func), target=func)
        return Bound(label=label)

    if callable(raw):
        return Bound(label=describe_callable(raw), source=source_factory(raw), target=raw)

    return Opaque()
