"""Exception hierarchy for the BEAM checker.

Per-fact errors (malformed selectors, unresolved references) are raised by the
parsing layers and converted into diagnostics by their callers; they never abort
a run.
"""


class BeamError(Exception):
    """Base exception for all checker errors."""

    pass


class MalformedSelectorError(BeamError):
    """Raised when a selector token has no recoverable structure."""

    def __init__(self, raw: str, substring: str, reason: str) -> None:
        super().__init__(f"Malformed selector '{raw}': {reason} (at '{substring}')")
        self.raw = raw
        self.substring = substring
        self.reason = reason


class UnresolvedReferenceError(BeamError):
    """Raised when a variable reference names a declaration that exists nowhere."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Variable '{name}' is never declared")
        self.name = name


class GraphFrozenError(BeamError):
    """Raised when a contribution is added after the variable graph was frozen."""

    pass


class ConfigurationError(BeamError):
    """Raised when checker configuration is invalid."""

    def __init__(self, option: str, reason: str) -> None:
        super().__init__(f"Configuration error in '{option}': {reason}")
        self.option = option
        self.reason = reason
