"""Configuration loading, schema, and defaults."""

from rsloc.config.loader import ConfigError, load_config
from rsloc.config.schema import CountConfig, OutputConfig, RslocConfig

__all__ = [
    "ConfigError",
    "CountConfig",
    "OutputConfig",
    "RslocConfig",
    "load_config",
]
