"""Analyzer configuration.

AnalyzerConfig is a frozen dataclass — immutable after creation, no
string-key dict lookups at analysis time. Override what you need::

    config = AnalyzerConfig(reserved_namespaces=("wp", "oembed", "internal"))

Or load it from a TOML file (``[tool.routescope]`` or ``[routescope]``)::

    config = AnalyzerConfig.from_toml("routescope.toml")
"""

from __future__ import annotations

import dataclasses
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from routescope.errors import ConfigurationError
from routescope.namespaces import KNOWN_NAMESPACES
from routescope.risk import MUTATING_METHODS


@dataclass(frozen=True, slots=True)
class AnalyzerConfig:
    """Analyzer configuration. Immutable after creation."""

    # Discovery
    reserved_namespaces: tuple[str, ...] = ("wp", "oembed")
    reserved_prefixes: tuple[str, ...] = ("wp/v2", "oembed")
    known_namespaces: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(KNOWN_NAMESPACES)),
    )

    # Extraction
    check_functions: tuple[str, ...] = ("current_user_can",)
    user_check_functions: tuple[str, ...] = ("user_can",)

    # Classification
    extra_admin_capabilities: tuple[str, ...] = ()

    # Scoring
    mutating_methods: frozenset[str] = MUTATING_METHODS

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AnalyzerConfig:
        """Build a config from plain data, rejecting unknown keys."""
        known = {f.name: f for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            msg = f"Unknown routescope config key(s): {', '.join(unknown)}"
            raise ConfigurationError(msg)

        values: dict[str, Any] = {}
        for key, value in data.items():
            if key == "known_namespaces":
                if not isinstance(value, Mapping):
                    msg = "known_namespaces must be a table of namespace = display name"
                    raise ConfigurationError(msg)
                values[key] = MappingProxyType({**KNOWN_NAMESPACES, **{str(k): str(v) for k, v in value.items()}})
                continue
            if isinstance(value, str) or not isinstance(value, (list, tuple)):
                msg = f"{key} must be a list of strings, got {type(value).__name__}"
                raise ConfigurationError(msg)
            items = tuple(str(v) for v in value)
            values[key] = frozenset(m.upper() for m in items) if key == "mutating_methods" else items
        return cls(**values)

    @classmethod
    def from_toml(cls, path: str | Path) -> AnalyzerConfig:
        try:
            with Path(path).open("rb") as fh:
                data = tomllib.load(fh)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            msg = f"Cannot read config {str(path)!r}: {exc}"
            raise ConfigurationError(msg) from exc

        table = data.get("tool", {}).get("routescope")
        if table is None:
            table = data.get("routescope")
        if table is None:
            # A pyproject.toml without our table means defaults
            table = {} if "tool" in data else data
        return cls.from_mapping(table)
