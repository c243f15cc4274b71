"""
Bookkeeping of one parse pass.

A MetaData remembers every key the document defines and which of them have
been decoded into typed values so far. Plugin tables stay undecoded until a
plugin asks for them.
"""

from typing import Any, Iterator


Key = tuple[str, ...]


class MetaData:

    source: str

    def __init__(self, document: dict[str, Any], source: str = "<string>"):
        self.source = source
        # an array of tables repeats its keys once per element
        self._keys: list[Key] = list(dict.fromkeys(_walk_keys(document, ())))
        self._defined = set(self._keys)
        self._decoded: set[Key] = set()

    def keys(self) -> list[Key]:
        """All key paths defined in the document, in document order."""
        return list(self._keys)

    def is_defined(self, *key: str) -> bool:
        return tuple(key) in self._defined

    def undecoded(self) -> list[Key]:
        """Key paths that nothing has decoded yet."""
        return [key for key in self._keys if key not in self._decoded]

    def mark_decoded(self, key: Key, recursive: bool = False):
        if not key:
            return
        # parents of a decoded key count as decoded too
        for end in range(1, len(key) + 1):
            self._decoded.add(key[:end])
        if recursive:
            size = len(key)
            for each in self._keys:
                if each[:size] == key:
                    self._decoded.add(each)

    def __repr__(self):
        return f"MetaData(source={self.source!r}, keys={len(self._keys)})"


def _walk_keys(table: dict[str, Any], prefix: Key) -> Iterator[Key]:
    for name, value in table.items():
        key = prefix + (name,)
        yield key
        if isinstance(value, dict):
            yield from _walk_keys(value, key)
        # array of tables
        elif isinstance(value, list):
            for element in value:
                if isinstance(element, dict):
                    yield from _walk_keys(element, key)
