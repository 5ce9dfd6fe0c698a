"""Typed effect requests and results exchanged between core and boundary.

Wire shape for both directions is ``{"commandType": <kind>, "args": {...}}``.
The ``args`` shape is fixed per command kind, so each kind gets its own
dataclass and parsing rejects anything outside the vocabulary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal, TypeAlias

from .constants import EXIT_FAILURE, EXIT_SUCCESS, PRINT, READ_FILE, WRITE_FILE
from .errors import ProtocolError

CommandType = Literal["readFile", "writeFile", "print", "exitSuccess", "exitFailure"]

COMMAND_TYPES: tuple[str, ...] = (READ_FILE, WRITE_FILE, PRINT, EXIT_SUCCESS, EXIT_FAILURE)
TERMINAL_COMMANDS = frozenset((EXIT_SUCCESS, EXIT_FAILURE))
REPLYING_COMMANDS = frozenset((READ_FILE, WRITE_FILE))


def _require_args(raw: Any) -> dict[str, Any]:
    """Split a wire dict into its args object after basic shape checks."""
    if not isinstance(raw, dict):
        raise ProtocolError("Invalid effect message: expected object")
    args = raw.get("args", {})
    if args is None:
        args = {}
    if not isinstance(args, dict):
        raise ProtocolError(
            f"Invalid effect message: args for '{raw.get('commandType')}' must be an object"
        )
    return args


def _require_str(args: dict[str, Any], key: str, command_type: str) -> str:
    value = args.get(key)
    if not isinstance(value, str):
        raise ProtocolError(
            f"Invalid effect message: '{command_type}' requires string args.{key}"
        )
    return value


def _wire(command_type: str, args: dict[str, Any]) -> dict[str, Any]:
    return {"commandType": command_type, "args": args}


@dataclass(slots=True, frozen=True)
class ReadFileRequest:
    """Read a whole file as text."""

    filename: str
    command_type: Literal["readFile"] = "readFile"

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> ReadFileRequest:
        return cls(filename=_require_str(args, "filename", READ_FILE))

    def to_dict(self) -> dict[str, Any]:
        return _wire(self.command_type, {"filename": self.filename})


@dataclass(slots=True, frozen=True)
class WriteFileRequest:
    """Create or overwrite a file with text."""

    filename: str
    text: str
    command_type: Literal["writeFile"] = "writeFile"

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> WriteFileRequest:
        return cls(
            filename=_require_str(args, "filename", WRITE_FILE),
            text=_require_str(args, "text", WRITE_FILE),
        )

    def to_dict(self) -> dict[str, Any]:
        return _wire(self.command_type, {"filename": self.filename, "text": self.text})


@dataclass(slots=True, frozen=True)
class PrintRequest:
    """Write a message to standard output. Never replied to."""

    message: str
    command_type: Literal["print"] = "print"

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> PrintRequest:
        return cls(message=_require_str(args, "message", PRINT))

    def to_dict(self) -> dict[str, Any]:
        return _wire(self.command_type, {"message": self.message})


@dataclass(slots=True, frozen=True)
class ExitSuccessRequest:
    """Print to standard output, then end the process with status 0."""

    message: str
    command_type: Literal["exitSuccess"] = "exitSuccess"

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> ExitSuccessRequest:
        return cls(message=_require_str(args, "message", EXIT_SUCCESS))

    def to_dict(self) -> dict[str, Any]:
        return _wire(self.command_type, {"message": self.message})


@dataclass(slots=True, frozen=True)
class ExitFailureRequest:
    """Print to standard error, then end the process with status 1."""

    message: str
    command_type: Literal["exitFailure"] = "exitFailure"

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> ExitFailureRequest:
        return cls(message=_require_str(args, "message", EXIT_FAILURE))

    def to_dict(self) -> dict[str, Any]:
        return _wire(self.command_type, {"message": self.message})


@dataclass(slots=True, frozen=True)
class ReadFileResult:
    """Completed read: file contents plus the requested path."""

    text: str
    filename: str
    command_type: Literal["readFile"] = "readFile"

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> ReadFileResult:
        return cls(
            text=_require_str(args, "text", READ_FILE),
            filename=_require_str(args, "filename", READ_FILE),
        )

    def to_dict(self) -> dict[str, Any]:
        return _wire(self.command_type, {"text": self.text, "filename": self.filename})


@dataclass(slots=True, frozen=True)
class WriteFileResult:
    """Completed write. Carries no payload."""

    command_type: Literal["writeFile"] = "writeFile"

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> WriteFileResult:
        del args
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return _wire(self.command_type, {})


EffectRequest: TypeAlias = (
    ReadFileRequest | WriteFileRequest | PrintRequest | ExitSuccessRequest | ExitFailureRequest
)
EffectResult: TypeAlias = ReadFileResult | WriteFileResult

_REQUEST_PARSERS: dict[str, Callable[[dict[str, Any]], EffectRequest]] = {
    READ_FILE: ReadFileRequest.from_args,
    WRITE_FILE: WriteFileRequest.from_args,
    PRINT: PrintRequest.from_args,
    EXIT_SUCCESS: ExitSuccessRequest.from_args,
    EXIT_FAILURE: ExitFailureRequest.from_args,
}

_RESULT_PARSERS: dict[str, Callable[[dict[str, Any]], EffectResult]] = {
    READ_FILE: ReadFileResult.from_args,
    WRITE_FILE: WriteFileResult.from_args,
}


def parse_effect_request(raw: Any) -> EffectRequest:
    """Parse an outbound wire message into its typed request.

    Raises:
        ProtocolError: Unknown command kind or args of the wrong shape.
    """
    args = _require_args(raw)
    command_type = raw.get("commandType")
    parser = _REQUEST_PARSERS.get(command_type) if isinstance(command_type, str) else None
    if parser is None:
        raise ProtocolError(f"Unknown commandType: {command_type!r}")
    return parser(args)


def parse_effect_result(raw: Any) -> EffectResult:
    """Parse an inbound wire message into its typed result."""
    args = _require_args(raw)
    command_type = raw.get("commandType")
    parser = _RESULT_PARSERS.get(command_type) if isinstance(command_type, str) else None
    if parser is None:
        raise ProtocolError(f"No result defined for commandType: {command_type!r}")
    return parser(args)


def is_terminal(request: EffectRequest) -> bool:
    """Return True when executing the request ends the process."""
    return request.command_type in TERMINAL_COMMANDS
