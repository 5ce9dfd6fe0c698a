"""Preferred key order per structured log event."""

from __future__ import annotations

DEFAULT_EVENT_KEY_ORDER: list[str] = ["ts", "level"]

EVENT_KEY_ORDER: dict[str, list[str]] = {
    # Application lifecycle events
    "app_start": [
        "ts",
        "level",
        "core",
        "variant",
        "version_message",
        "strict_protocol",
        "log_file",
        "argv",
    ],
    "app_stop": [
        "ts",
        "level",
        "reason",
        "exit_code",
        "uptime_ms",
        "error_type",
        "error",
    ],
    # Bootstrap events
    "branch_query": [
        "ts",
        "level",
        "git",
        "repo_dir",
        "rev",
        "elapsed_ms",
    ],
    "branch_query_failed": [
        "ts",
        "level",
        "git",
        "repo_dir",
        "error_type",
        "error",
    ],
    "core_init": [
        "ts",
        "level",
        "variant",
        "ports",
        "rev",
    ],
    # Effect dispatch events
    "effect_dispatch": [
        "ts",
        "level",
        "command_type",
        "port",
        "filename",
        "terminal",
        "elapsed_ms",
    ],
    "effect_failed": [
        "ts",
        "level",
        "command_type",
        "port",
        "filename",
        "operation",
        "error_type",
        "error",
    ],
    "effect_rejected": [
        "ts",
        "level",
        "port",
        "command_type",
        "strict",
        "error",
    ],
    "port_dropped": [
        "ts",
        "level",
        "port",
    ],
}

LOG_PATH_FIELDS = frozenset(
    {
        "filename",
        "log_file",
        "repo_dir",
        "config_file",
    }
)
