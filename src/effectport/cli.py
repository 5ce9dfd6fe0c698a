"""CLI bootstrap entry point for effectport."""

import argparse
import asyncio
import logging
import sys
import time
from typing import Optional

from . import __version__
from .bootstrap import run_bridge
from .config import BridgeConfig, apply_overrides, load_config
from .constants import APP_NAME, EXIT_CODE_FAILURE, VARIANT_SPLIT, VARIANT_UNIFIED
from .core import load_core
from .errors import EffectportError
from .logging import log_event, setup_logging

__all__ = ["build_parser", "main"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="effectport - run a side-effect-free core and perform its OS effects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Arguments after the options are passed to the core unchanged.",
    )

    parser.add_argument("-c", "--config", help="Path to JSON config file (optional)")
    parser.add_argument(
        "-m",
        "--core",
        help="Core factory as 'package.module:factory' (overrides config)",
    )
    parser.add_argument(
        "--variant",
        choices=(VARIANT_UNIFIED, VARIANT_SPLIT),
        help="Port layout the core speaks (default: unified)",
    )
    parser.add_argument("-l", "--log", help="Path to log file (optional)")
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Treat unknown effect messages as fatal",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument("core_args", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
    return parser


def _resolve_config(args: argparse.Namespace) -> BridgeConfig:
    base = load_config(args.config) if args.config else BridgeConfig()
    return apply_overrides(
        base,
        core=args.core,
        variant=args.variant,
        log_file=args.log,
        strict_protocol=args.strict,
    )


def _core_argv(core_args: list[str]) -> list[str]:
    if core_args and core_args[0] == "--":
        core_args = core_args[1:]
    return [sys.argv[0] if sys.argv else APP_NAME, *core_args]


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for effectport CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    app_started = time.perf_counter()

    def _uptime_ms() -> float:
        return round((time.perf_counter() - app_started) * 1000, 1)

    try:
        config = _resolve_config(args)
        if not config.core:
            print("Error: a core is required (-m/--core or 'core' in config)")
            print(f"Usage: {APP_NAME} -m <package.module:factory> [core args...]")
            sys.exit(EXIT_CODE_FAILURE)

        setup_logging(config.log_file)
        core_argv = _core_argv(args.core_args)
        core = load_core(config.core)

        log_event(
            "app_start",
            level=logging.INFO,
            core=config.core,
            variant=config.variant,
            version_message=config.version_message,
            strict_protocol=config.strict_protocol,
            log_file=config.log_file,
            argv=core_argv,
        )

        asyncio.run(run_bridge(config, core, core_argv))
        log_event("app_stop", level=logging.INFO, reason="idle", exit_code=0, uptime_ms=_uptime_ms())

    except SystemExit as e:
        # Terminal effects end the run here; record the status and pass it on.
        log_event("app_stop", level=logging.INFO, reason="exit", exit_code=e.code, uptime_ms=_uptime_ms())
        raise
    except KeyboardInterrupt:
        log_event("app_stop", level=logging.INFO, reason="keyboard_interrupt", uptime_ms=_uptime_ms())
        print("\nInterrupted")
        sys.exit(0)
    except EffectportError as e:
        print(f"Error: {e}")
        log_event(
            "app_stop",
            level=logging.ERROR,
            reason="startup_error",
            error_type=type(e).__name__,
            error=str(e),
            uptime_ms=_uptime_ms(),
        )
        sys.exit(EXIT_CODE_FAILURE)


if __name__ == "__main__":
    main()
