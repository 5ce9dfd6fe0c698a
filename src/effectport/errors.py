"""Typed exceptions for effectport."""


class EffectportError(Exception):
    """Base exception for effectport failures."""


class ConfigError(ValueError, EffectportError):
    """Bridge configuration errors."""


class CoreLoadError(EffectportError):
    """Raised when the core factory cannot be imported or created."""


class ProtocolError(ValueError, EffectportError):
    """Raised for messages or ports outside the effect vocabulary."""


class StartupQueryError(EffectportError):
    """Raised when the branch-name lookup fails."""


class EffectIOError(EffectportError):
    """Raised when a requested file read or write fails."""

    def __init__(self, operation: str, filename: str, reason: str) -> None:
        super().__init__(f"could not {operation} file '{filename}': {reason}")
        self.operation = operation
        self.filename = filename
        self.reason = reason
