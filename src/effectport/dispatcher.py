"""Effect dispatching: route each core request to the OS adapter."""

from __future__ import annotations

import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Collection, Optional, Union

from .adapter import OsAdapter
from .constants import EXIT_FAILURE, EXIT_SUCCESS, PRINT, READ_FILE, WRITE_FILE
from .errors import EffectIOError, ProtocolError
from .logging import log_event, summarize_text
from .messages import (
    EffectRequest,
    EffectResult,
    ExitFailureRequest,
    ExitSuccessRequest,
    PrintRequest,
    ReadFileRequest,
    ReadFileResult,
    WriteFileRequest,
    WriteFileResult,
    parse_effect_request,
)

ReplyFunction = Callable[[dict[str, Any]], Union[None, Awaitable[None]]]


@dataclass
class EffectHandler:
    """Defines how to execute one command kind."""

    executor: Callable[[Any], Awaitable[Optional[EffectResult]]]
    terminal: bool = False
    replies: bool = False
    summary: str = ""


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)


class Dispatcher:
    """Single subscriber for outbound effect messages.

    Replying commands produce exactly one result; ``print`` and terminal
    commands produce none.
    """

    def __init__(self, adapter: OsAdapter, *, strict_protocol: bool = False) -> None:
        self.adapter = adapter
        self.strict_protocol = strict_protocol
        self._handlers = self._effect_handlers()

    def _effect_handlers(self) -> dict[str, EffectHandler]:
        """Return the command-kind dispatch table."""
        return {
            READ_FILE: EffectHandler(
                self._exec_read_file, replies=True, summary="Read a file as text"
            ),
            WRITE_FILE: EffectHandler(
                self._exec_write_file, replies=True, summary="Create or overwrite a file"
            ),
            PRINT: EffectHandler(self._exec_print, summary="Write to standard output"),
            EXIT_SUCCESS: EffectHandler(
                self._exec_exit_success,
                terminal=True,
                summary="Write to standard output and exit with status 0",
            ),
            EXIT_FAILURE: EffectHandler(
                self._exec_exit_failure,
                terminal=True,
                summary="Write to standard error and exit with status 1",
            ),
        }

    @property
    def handlers(self) -> dict[str, EffectHandler]:
        return dict(self._handlers)

    async def _exec_read_file(self, request: ReadFileRequest) -> ReadFileResult:
        text = await self.adapter.read_file(request.filename)
        return ReadFileResult(text=text, filename=request.filename)

    async def _exec_write_file(self, request: WriteFileRequest) -> WriteFileResult:
        await self.adapter.write_file(request.filename, request.text)
        return WriteFileResult()

    async def _exec_print(self, request: PrintRequest) -> None:
        self.adapter.print_message(request.message)

    async def _exec_exit_success(self, request: ExitSuccessRequest) -> None:
        self.adapter.exit_success(request.message)

    async def _exec_exit_failure(self, request: ExitFailureRequest) -> None:
        self.adapter.exit_failure(request.message)

    async def execute(
        self,
        request: EffectRequest,
        *,
        port: Optional[str] = None,
    ) -> Optional[EffectResult]:
        """Run one typed request and return its result, if it has one.

        Raises:
            ProtocolError: No handler is registered for the command kind.
            EffectIOError: The file effect failed.
        """
        handler = self._handlers.get(request.command_type)
        if handler is None:
            raise ProtocolError(f"Unknown commandType: {request.command_type!r}")

        if handler.terminal:
            # Logged up front: the executor does not come back.
            log_event(
                "effect_dispatch",
                command_type=request.command_type,
                port=port,
                terminal=True,
            )
            await handler.executor(request)
            return None

        started = time.perf_counter()
        filename = getattr(request, "filename", None)
        try:
            result = await handler.executor(request)
        except EffectIOError as e:
            log_event(
                "effect_failed",
                level=logging.ERROR,
                command_type=request.command_type,
                port=port,
                filename=e.filename,
                operation=e.operation,
                error_type=type(e.__cause__ or e).__name__,
                error=e.reason,
            )
            raise

        log_event(
            "effect_dispatch",
            command_type=request.command_type,
            port=port,
            filename=filename,
            elapsed_ms=_elapsed_ms(started),
        )
        return result if handler.replies else None

    async def handle(
        self,
        raw: Any,
        *,
        reply: Optional[ReplyFunction] = None,
        accepted: Optional[Collection[str]] = None,
        port: Optional[str] = None,
    ) -> None:
        """Handle one wire message from an outbound port.

        Rejected messages are logged and ignored, or fatal under
        ``strict_protocol``. A failed file effect ends the process through
        ``exitFailure`` and never produces a reply.
        """
        try:
            request = parse_effect_request(raw)
            if accepted is not None and request.command_type not in accepted:
                raise ProtocolError(
                    f"commandType '{request.command_type}' is not carried on port '{port}'"
                )
        except ProtocolError as e:
            self.reject(e, raw, port=port)
            return

        await self.handle_request(request, reply=reply, port=port)

    async def handle_request(
        self,
        request: EffectRequest,
        *,
        reply: Optional[ReplyFunction] = None,
        port: Optional[str] = None,
    ) -> None:
        """Execute an already-typed request and send its reply, if any."""
        try:
            result = await self.execute(request, port=port)
        except EffectIOError as e:
            self.adapter.exit_failure(f"Error: {e}")
            return

        if result is None:
            return
        if reply is None:
            log_event("port_dropped", level=logging.DEBUG, port=port, command_type=result.command_type)
            return
        outcome = reply(result.to_dict())
        if inspect.isawaitable(outcome):
            await outcome

    def reject(self, error: ProtocolError, raw: Any, *, port: Optional[str] = None) -> None:
        """Apply the protocol-error policy to a message outside the vocabulary."""
        command_type = raw.get("commandType") if isinstance(raw, dict) else None
        log_event(
            "effect_rejected",
            level=logging.ERROR if self.strict_protocol else logging.WARNING,
            port=port,
            command_type=command_type,
            strict=self.strict_protocol,
            error=summarize_text(error),
        )
        if self.strict_protocol:
            self.adapter.exit_failure(f"Error: {error}")
