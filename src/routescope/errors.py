"""routescope exception hierarchy.

Shared across the registry adapters, analyzer, service facade and CLI so
every module raises and catches the same types.
"""


class RouteScopeError(Exception):
    """Base for all routescope-specific errors."""


class ConfigurationError(RouteScopeError):
    """Raised when analyzer configuration is invalid.

    Typically raised while loading a config file, before any analysis runs.
    """


class RegistryUnavailable(RouteScopeError):  # noqa: N818
    """The route registry could not be enumerated.

    Raised by registry adapters and re-raised unchanged by the analyzer.
    The service facade turns it into an empty failure response.
    """


class InvalidSelection(RouteScopeError, ValueError):  # noqa: N818
    """The caller's namespace selection was empty or malformed.

    Raised before any analysis work begins.
    """


class ReportNotInstalledError(RouteScopeError, ImportError):
    """The optional HTML report dependency (kida) is missing."""
