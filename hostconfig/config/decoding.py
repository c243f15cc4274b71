"""
Decode raw TOML tables into typed destinations.

So far, TOML scalars (string, integer, float, boolean, dates and times), Any,
optional and union types, enums, lists, tuples, string-keyed dicts, nested
dataclass and list of nested dataclass are being considered.

Decoding is strict: an integer is never accepted where a string is declared,
and a boolean is never accepted where an integer is declared. The only
widening is integer to float.
"""

import copy
import dataclasses as dc
import datetime as dt
import enum
import types
import typing
from collections import abc
from typing import Any

from .errors import DecodeError
from .metadata import Key, MetaData


# (key, recursive) pairs to report as decoded once the whole value succeeded
_Marks = list[tuple[Key, bool]]


def decode_into(table, destination, key: Key = (), metadata: MetaData | None = None):
    """
    Update a dataclass instance in place from a TOML table.

    Only the fields present in `table` are assigned; the others keep their
    current values. A field without a default is required and must be present.
    Keys of `table` without a matching field are ignored.

    Parameters
    ----------
    table : Mapping
        The raw table, as returned by the TOML parser.
    destination : dataclass instance
        The value to update. Nothing is assigned unless the whole table decodes.
    key : tuple of str
        Where `table` sits in the document, used in error messages.
    metadata : MetaData, optional
        Receives the keys that got decoded.

    Raises
    ------
    DecodeError
        When a value does not fit the declared type or a required key is missing.
    """
    if not dc.is_dataclass(destination) or isinstance(destination, type):
        raise TypeError(f"expected a dataclass instance, got {type(destination).__name__}")
    if type(destination).__dataclass_params__.frozen:
        raise TypeError(f"cannot update a frozen {type(destination).__name__} in place")

    marks: _Marks = []
    updates = _decode_fields(table, type(destination), key, marks, destination)
    for name, value in updates.items():
        setattr(destination, name, value)
    _commit(metadata, marks)


def decode_value(value, hint, key: Key = (), metadata: MetaData | None = None):
    """Return `value` converted to the type `hint`, raising DecodeError if it does not fit."""
    marks: _Marks = []
    result = _decode(value, hint, key, marks, None)
    _commit(metadata, marks)
    return result


def _commit(metadata: MetaData | None, marks: _Marks):
    if metadata is None:
        return
    for key, recursive in marks:
        metadata.mark_decoded(key, recursive)


def _decode_fields(table, DataType, key: Key, marks: _Marks, current=None) -> dict[str, Any]:
    if not isinstance(table, abc.Mapping):
        raise DecodeError(f"expected a table, got {describe(table)}", key)

    hints = typing.get_type_hints(DataType)
    updates = {}
    for field in dc.fields(DataType):
        if not field.init:
            continue
        field_key = key + (field.name,)
        if field.name not in table:
            if _is_required(field):
                raise DecodeError(f"missing required key {field.name!r}", field_key)
            continue
        field_current = getattr(current, field.name, None) if current is not None else None
        updates[field.name] = _decode(table[field.name], hints[field.name], field_key, marks, field_current)

    marks.append((key, False))
    return updates


def _is_required(field: dc.Field) -> bool:
    return field.default is dc.MISSING and field.default_factory is dc.MISSING


def _decode(value, hint, key: Key, marks: _Marks, current):
    if hint is Any or hint is object:
        marks.append((key, True))
        return copy.deepcopy(value)

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)

    if origin is typing.Union or origin is types.UnionType:
        return _decode_union(value, hint, args, key, marks, current)

    if origin is typing.Literal:
        if any(type(value) is type(choice) and value == choice for choice in args):
            marks.append((key, False))
            return value
        raise DecodeError(f"expected one of {list(args)}, got {value!r}", key)

    if dc.is_dataclass(hint):
        return _decode_dataclass(value, hint, key, marks, current)

    if isinstance(hint, type) and issubclass(hint, enum.Enum):
        try:
            result = hint(value)
        except ValueError:
            choices = [member.value for member in hint]
            raise DecodeError(f"expected one of {choices}, got {value!r}", key) from None
        marks.append((key, False))
        return result

    if origin in (list, abc.Sequence, abc.MutableSequence) or hint is list:
        element_hint = args[0] if args else Any
        elements = _expect(value, list, "array", key)
        marks.append((key, False))
        return [_decode(element, element_hint, key, marks, None) for element in elements]

    if origin is tuple or hint is tuple:
        elements = _expect(value, list, "array", key)
        marks.append((key, False))
        if not args or (len(args) == 2 and args[1] is Ellipsis):
            element_hint = args[0] if args else Any
            return tuple(_decode(element, element_hint, key, marks, None) for element in elements)
        if len(elements) != len(args):
            raise DecodeError(f"expected an array of {len(args)} elements, got {len(elements)}", key)
        return tuple(_decode(element, each_hint, key, marks, None) for element, each_hint in zip(elements, args))

    if origin in (dict, abc.Mapping, abc.MutableMapping) or hint is dict:
        value_hint = args[1] if args else Any
        table = _expect(value, dict, "table", key)
        marks.append((key, False))
        return {name: _decode(item, value_hint, key + (name,), marks, None) for name, item in table.items()}

    if hint in _SCALARS:
        return _decode_scalar(value, hint, key, marks)

    raise TypeError(f"cannot decode into {hint!r} at {'.'.join(key) or 'top level'}")


def _decode_union(value, hint, args, key: Key, marks: _Marks, current):
    failures = []
    for candidate in args:
        if candidate is type(None):
            continue
        attempt: _Marks = []
        try:
            result = _decode(value, candidate, key, attempt, current)
        except DecodeError as err:
            failures.append(err)
            continue
        marks.extend(attempt)
        return result
    # a single non-None candidate reports its own, more precise error
    if len(failures) == 1:
        raise failures[0]
    raise DecodeError(f"expected {_type_name(hint)}, got {describe(value)}", key)


def _decode_dataclass(value, DataType, key: Key, marks: _Marks, current):
    updatable = (
        isinstance(current, DataType)
        and not DataType.__dataclass_params__.frozen
    )
    updates = _decode_fields(value, DataType, key, marks, current if updatable else None)

    # update a copy of the nested instance, so its unset fields keep their values
    if updatable:
        result = copy.deepcopy(current)
        for name, item in updates.items():
            setattr(result, name, item)
        return result
    return DataType(**updates)


_SCALARS = {
    str: "string",
    bool: "boolean",
    int: "integer",
    float: "float",
    dt.datetime: "datetime",
    dt.date: "date",
    dt.time: "time",
}


def _decode_scalar(value, hint, key: Key, marks: _Marks):
    # bool is a subclass of int, datetime a subclass of date
    if hint in (int, float) and isinstance(value, bool):
        ok = False
    elif hint is dt.date and isinstance(value, dt.datetime):
        ok = False
    elif hint is float:
        ok = isinstance(value, (int, float))
    else:
        ok = isinstance(value, hint)
    if not ok:
        raise DecodeError(f"expected {_SCALARS[hint]}, got {describe(value)}", key)

    marks.append((key, False))
    return float(value) if hint is float else value


def _expect(value, kind: type, name: str, key: Key):
    if not isinstance(value, kind):
        raise DecodeError(f"expected {name}, got {describe(value)}", key)
    return value


def _type_name(hint) -> str:
    if hint in _SCALARS:
        return _SCALARS[hint]
    if isinstance(hint, type):
        return hint.__name__
    return str(hint).replace("typing.", "")


def describe(value) -> str:
    """Name the TOML type of a parsed value."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, dict):
        return "table"
    if isinstance(value, list):
        return "array"
    for kind, name in _SCALARS.items():
        if isinstance(value, kind):
            return name
    return type(value).__name__
