"""One-time startup: gather flags, initialize the core, attach the dispatcher."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .adapter import OsAdapter
from .config import BridgeConfig
from .constants import BRANCH_QUERY_ARGS, DEFAULT_GIT_EXECUTABLE, DEFAULT_VARIANT
from .core import Core
from .dispatcher import Dispatcher
from .errors import StartupQueryError
from .logging import log_event
from .ports import Program
from .protocol import bind_ports, variant_port_names


@dataclass(frozen=True, slots=True)
class Flags:
    """Immutable startup input handed to the core exactly once."""

    argv: tuple[str, ...]
    version_message: str
    rev: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "argv": list(self.argv),
            "versionMessage": self.version_message,
            "rev": self.rev,
        }


async def _run_branch_query(git: str, cwd: Optional[str]) -> str:
    """Run the branch query and return its trimmed output.

    Raises:
        StartupQueryError: Executable missing, spawn failure, or non-zero exit.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            git,
            *BRANCH_QUERY_ARGS,
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
        stdout, _ = await process.communicate()
    except OSError as e:
        raise StartupQueryError(f"Cannot run '{git}': {e}") from e

    if process.returncode != 0:
        raise StartupQueryError(f"'{git}' exited with status {process.returncode}")
    return stdout.decode("utf-8", errors="replace").strip()


async def query_branch_name(
    git: str = DEFAULT_GIT_EXECUTABLE,
    cwd: Optional[str] = None,
) -> str:
    """Return the current branch name, or "" when it cannot be determined."""
    started = time.perf_counter()
    try:
        rev = await _run_branch_query(git, cwd)
    except StartupQueryError as e:
        log_event(
            "branch_query_failed",
            level=logging.INFO,
            git=git,
            repo_dir=cwd,
            error_type=type(e.__cause__ or e).__name__,
            error=str(e),
        )
        return ""

    log_event(
        "branch_query",
        git=git,
        repo_dir=cwd,
        rev=rev,
        elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
    )
    return rev


async def bootstrap(
    core: Core,
    *,
    argv: Sequence[str],
    version_message: str,
    variant: str = DEFAULT_VARIANT,
    adapter: Optional[OsAdapter] = None,
    strict_protocol: bool = False,
    git: str = DEFAULT_GIT_EXECUTABLE,
    cwd: Optional[str] = None,
) -> Program:
    """Initialize ``core`` and wire a dispatcher to its ports.

    The core is not touched until the branch query has settled. Messages the
    core sends from ``init`` wait in the mailbox until ``Program.run``.
    """
    # Unknown layouts fail before the core is touched.
    variant_port_names(variant)
    rev = await query_branch_name(git=git, cwd=cwd)
    flags = Flags(argv=tuple(argv), version_message=version_message, rev=rev)

    program = Program(core.ports)
    core.init(flags, program.ports)
    log_event("core_init", variant=variant, ports=program.ports.names(), rev=rev)

    dispatcher = Dispatcher(adapter or OsAdapter(), strict_protocol=strict_protocol)
    bind_ports(program, dispatcher, variant)
    return program


async def run_bridge(
    config: BridgeConfig,
    core: Core,
    argv: Sequence[str],
    adapter: Optional[OsAdapter] = None,
) -> None:
    """Bootstrap ``core`` from ``config`` and run it until it goes quiet or exits."""
    program = await bootstrap(
        core,
        argv=argv,
        version_message=config.version_message,
        variant=config.variant,
        adapter=adapter,
        strict_protocol=config.strict_protocol,
        git=config.git,
        cwd=config.repo_dir,
    )
    await program.run()
