"""
Baseline values of a host that has no configuration file.
"""

from .schema import Config, GRPCConfig, DebugConfig


DEFAULT_ROOT = "/var/lib/containerd"
DEFAULT_STATE = "/run/containerd"
DEFAULT_GRPC_SOCKET = "/run/containerd/containerd.sock"
DEFAULT_DEBUG_SOCKET = "/run/containerd/debug.sock"
DEFAULT_DEBUG_LEVEL = "info"
DEFAULT_SNAPSHOTTER = "overlay"


def build_defaults() -> Config:
    """
    Return a new configuration holding the baseline values.

    The metrics address, the subreaper flag and the plugin tables have no
    natural baseline and stay empty.
    """
    return Config(
        root=DEFAULT_ROOT,
        state=DEFAULT_STATE,
        grpc=GRPCConfig(socket=DEFAULT_GRPC_SOCKET),
        debug=DebugConfig(
            level=DEFAULT_DEBUG_LEVEL,
            socket=DEFAULT_DEBUG_SOCKET,
        ),
        snapshotter=DEFAULT_SNAPSHOTTER,
    )
