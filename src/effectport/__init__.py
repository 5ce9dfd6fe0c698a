"""effectport - effect-dispatch boundary for a side-effect-free core."""

__version__ = "1.2.3"

from .adapter import OsAdapter
from .bootstrap import Flags, bootstrap, query_branch_name, run_bridge
from .config import BridgeConfig, load_config
from .core import Core, load_core
from .dispatcher import Dispatcher
from .ports import Port, PortSet, Program

__all__ = [
    "__version__",
    "BridgeConfig",
    "Core",
    "Dispatcher",
    "Flags",
    "OsAdapter",
    "Port",
    "PortSet",
    "Program",
    "bootstrap",
    "load_config",
    "load_core",
    "query_branch_name",
    "run_bridge",
]
