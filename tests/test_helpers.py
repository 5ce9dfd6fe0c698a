"""Shared test doubles for the decision core."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from effectport.bootstrap import Flags
from effectport.constants import (
    PORT_FROM_JS,
    PORT_OS,
    PORT_OS_RESULT,
    PORT_PRINT,
    PORT_PRINT_AND_EXIT_FAILURE,
    PORT_PRINT_AND_EXIT_SUCCESS,
    PORT_TO_JS,
)
from effectport.ports import PortSet

Outgoing = tuple[str, Any]

UNIFIED_PORTS = (PORT_TO_JS, PORT_FROM_JS)
SPLIT_PORTS = (
    PORT_OS,
    PORT_OS_RESULT,
    PORT_PRINT,
    PORT_PRINT_AND_EXIT_FAILURE,
    PORT_PRINT_AND_EXIT_SUCCESS,
)


class ScriptedCore:
    """Core double that sends a fixed script and records what comes back.

    ``react`` maps each inbound value to further outgoing messages, which
    lets a test chain requests the way a real core would.
    """

    def __init__(
        self,
        ports: Iterable[str],
        initial: Iterable[Outgoing] = (),
        inbound: Optional[str] = None,
        react: Optional[Callable[[Any], Iterable[Outgoing]]] = None,
    ) -> None:
        self.ports = tuple(ports)
        self.initial = list(initial)
        self.inbound = inbound
        self.react = react
        self.flags: Optional[Flags] = None
        self.received: list[Any] = []
        self.init_calls = 0
        self._port_set: Optional[PortSet] = None

    def init(self, flags: Flags, ports: PortSet) -> None:
        self.init_calls += 1
        self.flags = flags
        self._port_set = ports
        if self.inbound is not None and self.inbound in ports:
            ports[self.inbound].subscribe(self._on_inbound)
        for name, value in self.initial:
            ports[name].send(value)

    def _on_inbound(self, value: Any) -> None:
        self.received.append(value)
        if self.react is None or self._port_set is None:
            return
        for name, outgoing in self.react(value):
            self._port_set[name].send(outgoing)


def unified_core(*messages: dict[str, Any], react=None) -> ScriptedCore:
    """Core speaking the unified layout, sending ``messages`` on toJS."""
    return ScriptedCore(
        UNIFIED_PORTS,
        initial=[(PORT_TO_JS, message) for message in messages],
        inbound=PORT_FROM_JS,
        react=react,
    )


def split_core(*outgoing: Outgoing, ports=SPLIT_PORTS, react=None) -> ScriptedCore:
    """Core speaking the split layout."""
    return ScriptedCore(ports, initial=outgoing, inbound=PORT_OS_RESULT, react=react)


def wire(command_type: str, **args: Any) -> dict[str, Any]:
    return {"commandType": command_type, "args": args}


# Factories addressed by import path in load_core/CLI tests.


def make_hello_core() -> ScriptedCore:
    return unified_core(wire("exitSuccess", message="hello"))


def make_failing_core() -> ScriptedCore:
    return unified_core(wire("exitFailure", message="bad input"))


def make_quiet_core() -> ScriptedCore:
    return unified_core()


def make_argv_echo_core() -> "ArgvEchoCore":
    return ArgvEchoCore()


class ArgvEchoCore:
    """Prints its flags back through the print effect, then exits."""

    ports = UNIFIED_PORTS

    def init(self, flags: Flags, ports: PortSet) -> None:
        ports[PORT_TO_JS].send(wire("print", message=" ".join(flags.argv[1:])))
        ports[PORT_TO_JS].send(wire("exitSuccess", message=flags.version_message))


def make_not_a_core() -> object:
    return object()


def make_broken_core() -> ScriptedCore:
    raise RuntimeError("core exploded")
