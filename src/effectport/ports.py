"""Named message channels between the core and the boundary.

Every port of a program feeds one FIFO mailbox, so messages are delivered in
arrival order across all ports, one at a time. Effect results skip the mailbox
and go straight to the inbound port through ``Port.deliver``.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Iterable, Iterator, Optional, Union

from .errors import ProtocolError
from .logging import log_event

PortHandler = Callable[[Any], Union[None, Awaitable[None]]]


class Port:
    """One unidirectional channel. Either side may send or subscribe."""

    def __init__(self, name: str, program: Program) -> None:
        self.name = name
        self._program = program
        self._subscribers: list[PortHandler] = []

    def __repr__(self) -> str:
        return f"Port({self.name!r})"

    def subscribe(self, handler: PortHandler) -> None:
        self._subscribers.append(handler)

    def unsubscribe(self, handler: PortHandler) -> None:
        self._subscribers.remove(handler)

    def send(self, value: Any) -> None:
        """Queue ``value`` for delivery to this port's subscribers."""
        self._program.enqueue(self, value)

    async def deliver(self, value: Any) -> None:
        """Hand ``value`` to each subscriber in turn, awaiting async ones."""
        if not self._subscribers:
            log_event("port_dropped", level=logging.DEBUG, port=self.name)
            return
        for handler in list(self._subscribers):
            outcome = handler(value)
            if inspect.isawaitable(outcome):
                await outcome


class PortSet:
    """The ports a core declares, addressable by name or attribute."""

    def __init__(self, ports: Iterable[Port]) -> None:
        self._ports = {port.name: port for port in ports}

    def __contains__(self, name: object) -> bool:
        return name in self._ports

    def __iter__(self) -> Iterator[Port]:
        return iter(self._ports.values())

    def __len__(self) -> int:
        return len(self._ports)

    def __getitem__(self, name: str) -> Port:
        try:
            return self._ports[name]
        except KeyError:
            raise ProtocolError(f"Core does not declare port '{name}'") from None

    def __getattr__(self, name: str) -> Port:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._ports[name]
        except KeyError:
            raise AttributeError(f"Core does not declare port '{name}'") from None

    def get(self, name: str) -> Optional[Port]:
        """Return the named port, or None when the core omits it."""
        return self._ports.get(name)

    def names(self) -> list[str]:
        return list(self._ports)


class Program:
    """A running core: its ports plus the shared delivery mailbox."""

    def __init__(self, port_names: Iterable[str]) -> None:
        self._mailbox: asyncio.Queue[tuple[Port, Any]] = asyncio.Queue()
        names = list(dict.fromkeys(port_names))
        self.ports = PortSet(Port(name, self) for name in names)

    def enqueue(self, port: Port, value: Any) -> None:
        self._mailbox.put_nowait((port, value))

    @property
    def pending(self) -> int:
        return self._mailbox.qsize()

    async def run(self) -> None:
        """Deliver queued messages until none remain.

        Each delivery finishes before the next starts. Returns when the core
        has nothing more to say; terminal effects end the run with SystemExit.
        """
        while not self._mailbox.empty():
            port, value = self._mailbox.get_nowait()
            try:
                await port.deliver(value)
            finally:
                self._mailbox.task_done()
