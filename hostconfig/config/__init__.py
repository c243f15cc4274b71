"""
Configuration module for the TOML host configuration file.

Provides:
- Schema dataclasses for the known tables
- Baseline values
- TOML loading and saving
- Deferred decoding of plugin tables
"""

from .schema import (
    Config,
    GRPCConfig,
    DebugConfig,
    MetricsConfig,
)

from .defaults import build_defaults

from .loader import load_config, loads_config, save_config

from .metadata import MetaData

from .plugins import PluginTables, Primitive

from .errors import ConfigError, DecodeError, PluginDecodeError, EncodeError

__all__ = [
    # Schema classes
    "Config",
    "GRPCConfig",
    "DebugConfig",
    "MetricsConfig",
    # Defaults
    "build_defaults",
    # Loader functions
    "load_config",
    "loads_config",
    "save_config",
    # Deferred decoding
    "MetaData",
    "PluginTables",
    "Primitive",
    # Errors
    "ConfigError",
    "DecodeError",
    "PluginDecodeError",
    "EncodeError",
]
