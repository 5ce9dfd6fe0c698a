"""Bridge configuration: JSON config file plus command-line overrides."""

from __future__ import annotations

import json
import unicodedata
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

from . import __version__
from .constants import DEFAULT_GIT_EXECUTABLE, DEFAULT_VARIANT, VARIANT_SPLIT, VARIANT_UNIFIED
from .errors import ConfigError

VARIANTS = (VARIANT_UNIFIED, VARIANT_SPLIT)

_STRING_FIELDS = ("core", "variant", "version_message", "log_file", "git", "repo_dir")
_BOOL_FIELDS = ("strict_protocol",)
_PATH_FIELDS = ("log_file", "repo_dir")


@dataclass(frozen=True, slots=True)
class BridgeConfig:
    """Resolved settings for one bridge run."""

    core: Optional[str] = None
    variant: str = DEFAULT_VARIANT
    version_message: str = __version__
    log_file: Optional[str] = None
    strict_protocol: bool = False
    git: str = DEFAULT_GIT_EXECUTABLE
    repo_dir: Optional[str] = None


def _normalize_path_text(path: str) -> str:
    normalized = unicodedata.normalize("NFC", path)
    if "\0" in normalized:
        raise ConfigError("Path cannot contain NUL bytes")
    return normalized


def resolve_path(path: str, base_dir: Optional[str] = None) -> str:
    """Resolve ``path`` to an absolute path string.

    ~ or ~/...  -> user home directory
    Absolute    -> used as-is
    Relative    -> resolved against base_dir if given, else the working directory
    """
    candidate = Path(_normalize_path_text(path)).expanduser()
    if not candidate.is_absolute():
        candidate = Path(base_dir or Path.cwd()) / candidate
    return str(candidate.resolve())


def validate_config(config: BridgeConfig) -> BridgeConfig:
    """Check field values that types alone cannot express."""
    if config.variant not in VARIANTS:
        raise ConfigError(
            f"variant must be one of: {', '.join(VARIANTS)} (got {config.variant!r})"
        )
    if not config.git:
        raise ConfigError("git must be a non-empty string")
    if config.core is not None and ":" not in config.core:
        raise ConfigError("core must look like 'package.module:factory'")
    return config


def config_from_dict(raw: Any, base_dir: Optional[str] = None) -> BridgeConfig:
    """Build a config from a parsed JSON object.

    Raises:
        ConfigError: Not an object, unknown keys, or wrong value types.
    """
    if not isinstance(raw, dict):
        raise ConfigError("Config must be a JSON object")

    known = {f.name for f in fields(BridgeConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for key, value in raw.items():
        if value is None and key in ("core", "log_file", "repo_dir"):
            continue
        if key in _STRING_FIELDS and not isinstance(value, str):
            raise ConfigError(f"{key} must be a string")
        if key in _BOOL_FIELDS and not isinstance(value, bool):
            raise ConfigError(f"{key} must be a boolean")
        if key in _PATH_FIELDS:
            value = resolve_path(value, base_dir)
        values[key] = value

    return validate_config(BridgeConfig(**values))


def load_config(path: str) -> BridgeConfig:
    """Load config from a JSON file; relative paths resolve against its directory."""
    config_path = Path(resolve_path(path))
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {config_path}") from None
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    return config_from_dict(raw, base_dir=str(config_path.parent))


def apply_overrides(config: BridgeConfig, **overrides: Any) -> BridgeConfig:
    """Return ``config`` with every non-None override applied."""
    changes = {key: value for key, value in overrides.items() if value is not None}
    for key in _PATH_FIELDS:
        if key in changes:
            changes[key] = resolve_path(changes[key])
    return validate_config(replace(config, **changes))
