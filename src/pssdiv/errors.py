"""Exception hierarchy for the divergence detector.

Every error raised by pssdiv derives from :class:`DivergenceError` so
callers (e.g. the CLI) can catch the whole family in one place.  The
concrete classes also derive from the matching builtin (``TypeError``,
``ValueError``, ``RuntimeError``) for callers that only care about the
builtin category.
"""

from __future__ import annotations


class DivergenceError(Exception):
    """Base class for all pssdiv errors."""


class UnknownVariableStateError(DivergenceError, TypeError):
    """Raised when a mapping element carries a state outside ``VariableState``.

    The state domain is closed, so this always indicates a bug in the
    upstream mapping layer.
    """

    def __init__(self, state: object) -> None:
        self.state = state
        super().__init__(f"Unknown variable state: {state!r}")


class MalformedEntryError(DivergenceError, ValueError):
    """Raised when a mapping element violates its per-state invariants."""

    def __init__(self, variable_name: str, reason: str) -> None:
        self.variable_name = variable_name
        self.reason = reason
        super().__init__(f"Malformed mapping element '{variable_name}': {reason}")


class EmptyFindingError(DivergenceError, ValueError):
    """Raised when a finding would be built without any evidence."""


class DetectorAlreadyRunError(DivergenceError, RuntimeError):
    """Raised when ``DivergenceDetector.run()`` is called a second time."""


class MappingFileError(DivergenceError):
    """Raised when a mapping file cannot be read or parsed."""

    def __init__(self, path: str, reason: str, line: int | None = None) -> None:
        self.path = path
        self.reason = reason
        self.line = line
        location = f"{path}:{line}" if line is not None else path
        super().__init__(f"Cannot load mapping from {location}: {reason}")


class ConfigError(DivergenceError):
    """Raised when the detector configuration is invalid."""
