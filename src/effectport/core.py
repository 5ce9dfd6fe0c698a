"""Contract for the opaque decision core and how it is loaded."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Any, Protocol, Sequence, runtime_checkable

from .errors import CoreLoadError

if TYPE_CHECKING:
    from .bootstrap import Flags
    from .ports import PortSet


@runtime_checkable
class Core(Protocol):
    """Side-effect-free program that talks to the boundary only through ports.

    ``ports`` names every port the core declares. ``init`` is called exactly
    once; it may subscribe to inbound ports and send outbound messages.
    """

    ports: Sequence[str]

    def init(self, flags: Flags, ports: PortSet) -> None: ...


def load_core(import_path: str) -> Core:
    """Create a core from a ``package.module:factory`` import path.

    Raises:
        CoreLoadError: Bad path, import failure, or the factory result is not a core.
    """
    module_name, sep, attr_path = import_path.partition(":")
    if not sep or not module_name or not attr_path:
        raise CoreLoadError(
            f"Invalid core import path '{import_path}' (expected 'package.module:factory')"
        )

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise CoreLoadError(f"Cannot import core module '{module_name}': {e}") from e

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise CoreLoadError(
                f"Core module '{module_name}' has no attribute '{attr_path}'"
            ) from None

    if not callable(target):
        raise CoreLoadError(f"Core factory '{import_path}' is not callable")

    try:
        core = target()
    except Exception as e:
        raise CoreLoadError(f"Core factory '{import_path}' failed: {e}") from e

    if not isinstance(core, Core):
        raise CoreLoadError(
            f"Core factory '{import_path}' returned {type(core).__name__}, "
            "which lacks 'ports' and 'init'"
        )
    return core
