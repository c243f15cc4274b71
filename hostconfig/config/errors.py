"""
Errors raised while loading, resolving and saving a configuration.
"""


class ConfigError(Exception):
    """Base class of every configuration error."""

    def __init__(self, message: str, key: tuple[str, ...] = ()):
        super().__init__(message)
        self.message = message
        self.key = tuple(key)

    @property
    def dotted_key(self) -> str:
        return ".".join(self.key)

    def __str__(self):
        if self.key:
            return f"{self.dotted_key}: {self.message}"
        return self.message


class DecodeError(ConfigError):
    """The document is malformed, or a known field has the wrong type."""


class PluginDecodeError(ConfigError):
    """A plugin table does not fit the shape its plugin asked for."""

    def __init__(self, plugin: str, message: str, key: tuple[str, ...] = ()):
        super().__init__(f"plugin {plugin!r}: {message}", key)
        self.plugin = plugin


class EncodeError(ConfigError):
    """The configuration cannot be encoded, or the sink refused the bytes."""
