"""
Configuration schema.

Top-level keys match the tables of the host configuration file:
- state, root: runtime state and persistent data directories
- grpc: control endpoint
- debug: debug endpoint and log level
- metrics: metrics listen address
- snapshotter: snapshot driver name
- subreaper: whether to act as a subreaper
- plugins: one raw table per plugin, decoded on demand

Plugin schemas are unknown here. Each plugin decodes its own table through
`Config.decode_plugin` with a destination of its own shape.
"""

import dataclasses as dc
from typing import Any, BinaryIO

import tomli_w

from .errors import EncodeError
from .plugins import PluginTables


@dc.dataclass
class GRPCConfig:
    socket: str = ""
    uid: int = 0
    gid: int = 0


@dc.dataclass
class DebugConfig:
    socket: str = ""
    level: str = ""


@dc.dataclass
class MetricsConfig:
    address: str = ""


@dc.dataclass
class Config:
    """
    Top-level configuration.

    Known tables are typed; plugin tables stay raw in `plugins`, together
    with the metadata of the parse that captured them.
    """
    # runtime state directory
    state: str = ""
    # persistent data directory
    root: str = ""
    grpc: GRPCConfig = dc.field(default_factory=GRPCConfig)
    debug: DebugConfig = dc.field(default_factory=DebugConfig)
    metrics: MetricsConfig = dc.field(default_factory=MetricsConfig)
    snapshotter: str = ""
    plugins: PluginTables = dc.field(default_factory=PluginTables)
    subreaper: bool = False

    def decode_plugin(self, name: str, destination) -> bool:
        """
        Decode the table of plugin `name` into `destination`, in place.

        Returns whether the document had a table for this plugin. A missing
        table is not an error, `destination` is then left untouched.

        Raises
        ------
        PluginDecodeError
            When the table does not fit `destination`.
        """
        return self.plugins.decode(name, destination)

    def to_dict(self) -> dict[str, Any]:
        """Plain tables for the TOML encoder, plugin tables included verbatim."""
        data: dict[str, Any] = {
            "state": self.state,
            "root": self.root,
            "grpc": dc.asdict(self.grpc),
            "debug": dc.asdict(self.debug),
            "metrics": dc.asdict(self.metrics),
            "snapshotter": self.snapshotter,
            "subreaper": self.subreaper,
        }
        if self.plugins:
            data["plugins"] = {name: primitive.value for name, primitive in self.plugins.items()}
        return data

    def write_to(self, sink: BinaryIO) -> int:
        """
        Encode the configuration as TOML into a binary sink.

        Returns the number of bytes written.

        Raises
        ------
        EncodeError
            When a value cannot be encoded or the sink fails.
        """
        try:
            payload = tomli_w.dumps(self.to_dict()).encode("utf-8")
        except (TypeError, ValueError) as err:
            raise EncodeError(f"cannot encode configuration: {err}") from err

        view = memoryview(payload)
        total = 0
        # raw sinks may accept fewer bytes than given
        while total < len(payload):
            try:
                written = sink.write(view[total:])
            except (OSError, TypeError) as err:
                raise EncodeError(f"cannot write configuration: {err}") from err
            if written is None:
                written = len(payload) - total
            if written <= 0:
                raise EncodeError(f"short write: {total} of {len(payload)} bytes written")
            total += written
        return total
