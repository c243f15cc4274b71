"""
Plugin tables kept undecoded until their plugin asks for them.
"""

import copy
import dataclasses as dc
import logging
from collections import abc
from typing import Any, Iterator

from .decoding import decode_into
from .errors import DecodeError, PluginDecodeError
from .metadata import Key, MetaData


logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True)
class Primitive:
    """
    A captured table whose structure nobody has interpreted yet.

    `value` is the raw table from the parser, `context` is where it sits in
    the document, e.g. ("plugins", "cri").
    """
    value: dict[str, Any]
    context: Key


class PluginTables(abc.Mapping):
    """
    Mapping from plugin name to its Primitive, paired with the MetaData of
    the parse pass that captured them.

    The two are only ever created together by the loader, so a fragment is
    always resolved against the metadata it came from.
    """

    def __init__(self, primitives: dict[str, Primitive] | None = None, metadata: MetaData | None = None):
        self._primitives = dict(primitives or {})
        self._metadata = metadata

    @property
    def metadata(self) -> MetaData | None:
        return self._metadata

    def __getitem__(self, name: str) -> Primitive:
        return self._primitives[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._primitives)

    def __len__(self) -> int:
        return len(self._primitives)

    def __repr__(self):
        return f"PluginTables({sorted(self._primitives)})"

    def __deepcopy__(self, memo):
        # fragments are never mutated, and the metadata belongs to its parse pass
        return self

    def decode(self, name: str, destination) -> bool:
        """
        Decode the table of plugin `name` into `destination`.

        Returns False, leaving `destination` alone, when the document has no
        table for this plugin. That is a normal state, not an error: the
        plugin keeps its own defaults.

        `destination` is either a dataclass instance, updated field by field,
        or a mutable mapping, updated with a copy of the raw table.
        """
        primitive = self._primitives.get(name)
        if primitive is None:
            return False

        if isinstance(destination, abc.MutableMapping):
            destination.update(copy.deepcopy(primitive.value))
            if self._metadata is not None:
                self._metadata.mark_decoded(primitive.context, recursive=True)
            return True

        try:
            decode_into(primitive.value, destination, primitive.context, self._metadata)
        except DecodeError as err:
            raise PluginDecodeError(name, err.message, err.key) from err
        logger.debug(f"Decoded plugin table {name!r} into {type(destination).__name__}")
        return True
