"""Port bindings for the two wire layouts of the effect protocol.

split:   ``os``/``osResult`` carry file effects as ``{commandType, args}``;
         ``print``, ``printAndExitFailure`` and ``printAndExitSuccess`` each
         carry a plain string.
unified: ``toJS``/``fromJS`` carry every command kind as ``{commandType, args}``.

Both layouts feed the same Dispatcher, so they behave identically.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from .constants import (
    PORT_FROM_JS,
    PORT_OS,
    PORT_OS_RESULT,
    PORT_PRINT,
    PORT_PRINT_AND_EXIT_FAILURE,
    PORT_PRINT_AND_EXIT_SUCCESS,
    PORT_TO_JS,
    READ_FILE,
    VARIANT_SPLIT,
    VARIANT_UNIFIED,
    WRITE_FILE,
)
from .dispatcher import Dispatcher, ReplyFunction
from .errors import ConfigError, ProtocolError
from .messages import EffectRequest, ExitFailureRequest, ExitSuccessRequest, PrintRequest
from .ports import Port, PortHandler, Program

SPLIT_REQUIRED_PORTS = (PORT_PRINT_AND_EXIT_FAILURE, PORT_PRINT_AND_EXIT_SUCCESS)
SPLIT_OPTIONAL_PORTS = (PORT_OS, PORT_OS_RESULT, PORT_PRINT)
SPLIT_OS_COMMANDS = frozenset((READ_FILE, WRITE_FILE))

UNIFIED_REQUIRED_PORTS = (PORT_TO_JS,)
UNIFIED_OPTIONAL_PORTS = (PORT_FROM_JS,)


def _reply_to(port: Optional[Port]) -> Optional[ReplyFunction]:
    # Replies reach the core before the next outbound request is handled.
    return port.deliver if port is not None else None


def _require_ports(program: Program, names: tuple[str, ...], variant: str) -> None:
    missing = [name for name in names if name not in program.ports]
    if missing:
        raise ProtocolError(
            f"Core is missing required {variant} port(s): {', '.join(missing)}"
        )


def _string_port_handler(
    dispatcher: Dispatcher,
    port_name: str,
    make_request: Callable[[str], EffectRequest],
) -> PortHandler:
    """Build a subscriber for a port that carries a bare message string."""

    async def _handler(value: Any) -> None:
        if not isinstance(value, str):
            dispatcher.reject(
                ProtocolError(f"Port '{port_name}' expects a string message"),
                value,
                port=port_name,
            )
            return
        await dispatcher.handle_request(make_request(value), port=port_name)

    return _handler


def bind_split_ports(program: Program, dispatcher: Dispatcher) -> None:
    """Attach the dispatcher to the per-effect channel layout."""
    _require_ports(program, SPLIT_REQUIRED_PORTS, VARIANT_SPLIT)
    ports = program.ports

    print_port = ports.get(PORT_PRINT)
    if print_port is not None:
        print_port.subscribe(
            _string_port_handler(
                dispatcher, PORT_PRINT, lambda message: PrintRequest(message=message)
            )
        )

    ports[PORT_PRINT_AND_EXIT_FAILURE].subscribe(
        _string_port_handler(
            dispatcher,
            PORT_PRINT_AND_EXIT_FAILURE,
            lambda message: ExitFailureRequest(message=message),
        )
    )
    ports[PORT_PRINT_AND_EXIT_SUCCESS].subscribe(
        _string_port_handler(
            dispatcher,
            PORT_PRINT_AND_EXIT_SUCCESS,
            lambda message: ExitSuccessRequest(message=message),
        )
    )

    os_port = ports.get(PORT_OS)
    if os_port is not None:
        reply = _reply_to(ports.get(PORT_OS_RESULT))

        async def _on_os(raw: Any) -> None:
            await dispatcher.handle(
                raw, reply=reply, accepted=SPLIT_OS_COMMANDS, port=PORT_OS
            )

        os_port.subscribe(_on_os)


def bind_unified_ports(program: Program, dispatcher: Dispatcher) -> None:
    """Attach the dispatcher to the single request/reply channel pair."""
    _require_ports(program, UNIFIED_REQUIRED_PORTS, VARIANT_UNIFIED)
    reply = _reply_to(program.ports.get(PORT_FROM_JS))

    async def _on_to_js(raw: Any) -> None:
        await dispatcher.handle(raw, reply=reply, port=PORT_TO_JS)

    program.ports[PORT_TO_JS].subscribe(_on_to_js)


VARIANT_BINDERS: dict[str, Callable[[Program, Dispatcher], None]] = {
    VARIANT_SPLIT: bind_split_ports,
    VARIANT_UNIFIED: bind_unified_ports,
}


def variant_port_names(variant: str) -> tuple[str, ...]:
    """Return every port name the variant knows about."""
    if variant == VARIANT_SPLIT:
        return SPLIT_OPTIONAL_PORTS + SPLIT_REQUIRED_PORTS
    if variant == VARIANT_UNIFIED:
        return UNIFIED_REQUIRED_PORTS + UNIFIED_OPTIONAL_PORTS
    raise ConfigError(f"Unknown protocol variant: {variant!r}")


def bind_ports(program: Program, dispatcher: Dispatcher, variant: str) -> None:
    """Wire the dispatcher to the program once, using the chosen layout."""
    binder = VARIANT_BINDERS.get(variant)
    if binder is None:
        raise ConfigError(
            f"Unknown protocol variant: {variant!r} (expected one of: {', '.join(VARIANT_BINDERS)})"
        )
    binder(program, dispatcher)
