"""Load and merge configuration from .rsloc.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from rsloc.config.schema import OUTPUT_FORMATS, CountConfig, OutputConfig, RslocConfig
from rsloc.stats.models import parse_contexts

CONFIG_FILENAME = ".rsloc.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    if root.is_file():
        root = root.parent
    candidate = root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: RslocConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"Unknown output format {cfg.output.format!r} (expected one of {', '.join(OUTPUT_FORMATS)})"
        )
    for name in ("include", "exclude", "crates", "types"):
        value = getattr(cfg.count, name)
        if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
            raise ConfigError(f"[count] {name} must be a list of strings")
    try:
        parse_contexts(cfg.count.types)
    except ValueError as exc:
        raise ConfigError(f"[count] types: {exc}") from exc
    if not isinstance(cfg.count.jobs, int) or isinstance(cfg.count.jobs, bool) or cfg.count.jobs < 0:
        raise ConfigError("[count] jobs must be a non-negative integer")


def _merge_env_overrides(cfg: RslocConfig) -> None:
    """Apply RSLOC_* environment variable overrides; invalid values are ignored."""
    if val := os.environ.get("RSLOC_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("RSLOC_JOBS"):
        try:
            jobs = int(val)
        except ValueError:
            jobs = -1
        if jobs >= 0:
            cfg.count.jobs = jobs
    if val := os.environ.get("RSLOC_EXCLUDE"):
        cfg.count.exclude.extend(p.strip() for p in val.split(os.pathsep) if p.strip())
    if os.environ.get("RSLOC_FAIL_ON_ERROR") == "1":
        cfg.count.fail_on_error = True


def load_config(
    root: Path,
    config_override: Optional[str] = None,
) -> RslocConfig:
    """Load, validate, and return an RslocConfig."""
    config_path = find_config_file(root, config_override)

    if config_path is None:
        cfg = RslocConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = RslocConfig(
            version=str(raw.get("version", "1.0")),
            count=_build_section(raw, CountConfig, "count"),
            output=_build_section(raw, OutputConfig, "output"),
        )
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
