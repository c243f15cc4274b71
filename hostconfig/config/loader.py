"""
TOML configuration loading and saving.

Uses tomllib (Python 3.11+) or tomli (backport) for reading,
and tomli_w for writing.

Loading happens in two phases. The known tables are decoded right away into
a Config; every table under [plugins] is captured raw, and decoded later by
its plugin through `Config.decode_plugin`.
"""

import copy
import dataclasses as dc
import logging
import sys
from pathlib import Path
from typing import Any

# Import tomllib or backport
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .decoding import decode_into, describe
from .defaults import build_defaults
from .errors import DecodeError
from .metadata import MetaData
from .plugins import PluginTables, Primitive
from .schema import Config


logger = logging.getLogger(__name__)

PLUGINS_KEY = "plugins"


def load_config(path: str | Path, config: Config | None = None) -> Config:
    """
    Load a TOML configuration file into a Config.

    Parameters
    ----------
    path : str | Path
        The configuration file, UTF-8 encoded.
    config : Config, optional
        The configuration to load into, normally the output of
        `build_defaults()`; a fresh one is built when omitted. Only the
        fields the file sets are overwritten. It is left untouched when
        loading fails.

    Returns
    -------
    Config
        The loaded configuration, `config` itself when one was given.

    Raises
    ------
    DecodeError
        When the file is not valid TOML, or a known field has the wrong type.
    OSError
        When the file cannot be read.
    """
    path = Path(path)
    with open(path, "rb") as f:
        raw = f.read()

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as err:
        raise DecodeError(f"{path}: invalid UTF-8: {err}") from err

    return loads_config(text, config, source=str(path))


def loads_config(text: str, config: Config | None = None, source: str = "<string>") -> Config:
    """Same as `load_config`, reading the document from a string."""
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as err:
        raise DecodeError(f"{source}: {err}") from err

    if config is None:
        config = build_defaults()

    metadata = MetaData(document, source)
    known = dict(document)
    plugins = _capture_plugins(known.pop(PLUGINS_KEY, {}), metadata)

    # Work on a copy, so a failure leaves the caller's config as it was
    staged = copy.deepcopy(config)
    decode_into(known, staged, metadata=metadata)
    staged.plugins = plugins

    for field in dc.fields(Config):
        setattr(config, field.name, getattr(staged, field.name))

    logger.debug(f"Loaded configuration from {source} with {len(plugins)} plugin table(s)")
    return config


def _capture_plugins(tables: Any, metadata: MetaData) -> PluginTables:
    key = (PLUGINS_KEY,)
    if not isinstance(tables, dict):
        raise DecodeError(f"expected a table, got {describe(tables)}", key)

    primitives = {}
    for name, value in tables.items():
        if not isinstance(value, dict):
            raise DecodeError(f"expected a table, got {describe(value)}", key + (name,))
        primitives[name] = Primitive(value, key + (name,))

    metadata.mark_decoded(key)
    return PluginTables(primitives, metadata)


def save_config(config: Config, path: str | Path) -> int:
    """Save a Config object to a TOML file, returning the number of bytes written."""
    path = Path(path)
    with open(path, "wb") as f:
        return config.write_to(f)
