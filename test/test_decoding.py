"""
Tests of the `decoding.py` file.
"""

import dataclasses as dc
import datetime as dt
import enum
import typing

import pytest

from hostconfig.config import DecodeError, MetaData
from hostconfig.config.decoding import decode_into, decode_value, describe


class Mode(enum.Enum):
    FAST = "fast"
    SAFE = "safe"


@dc.dataclass
class Child:
    x: int
    label: str = "child"


@dc.dataclass
class Parent:
    name: str = ""
    size: int = 0
    ratio: float = 1.0
    child: Child | None = None
    tags: dict[str, int] = dc.field(default_factory=dict)
    extra: typing.Any = None


def test_scalars():
    assert decode_value("text", str) == "text"
    assert decode_value(3, int) == 3
    assert decode_value(True, bool) is True
    assert decode_value(2.5, float) == 2.5


def test_int_widens_to_float():
    value = decode_value(3, float)

    assert value == 3.0
    assert isinstance(value, float)


@pytest.mark.parametrize(
    "value, hint",
    [
        (1, str),
        ("1", int),
        (True, int),
        (False, float),
        (1.5, int),
        ("true", bool),
        (0, bool),
    ],
)
def test_scalars_are_strict(value, hint):
    with pytest.raises(DecodeError):
        decode_value(value, hint)


def test_dates_and_times():
    moment = dt.datetime(1979, 5, 27, 7, 32)

    assert decode_value(moment, dt.datetime) == moment
    assert decode_value(dt.date(1979, 5, 27), dt.date) == dt.date(1979, 5, 27)
    assert decode_value(dt.time(7, 32), dt.time) == dt.time(7, 32)
    with pytest.raises(DecodeError):
        decode_value(moment, dt.date)


def test_optional_and_union():
    assert decode_value(3, int | None) == 3
    assert decode_value(3, typing.Optional[int]) == 3
    assert decode_value("x", int | str) == "x"

    with pytest.raises(DecodeError, match="expected string"):
        decode_value(3, str | None)
    with pytest.raises(DecodeError, match="expected"):
        decode_value(1.5, int | str)


def test_literal_and_enum():
    assert decode_value("a", typing.Literal["a", "b"]) == "a"
    assert decode_value("safe", Mode) is Mode.SAFE

    with pytest.raises(DecodeError):
        decode_value("c", typing.Literal["a", "b"])
    with pytest.raises(DecodeError, match="expected one of"):
        decode_value("slow", Mode)


def test_sequences():
    assert decode_value([1, 2], list[int]) == [1, 2]
    assert decode_value([1, "a"], list) == [1, "a"]
    assert decode_value([1, 2, 3], tuple[int, ...]) == (1, 2, 3)
    assert decode_value([1, "a"], tuple[int, str]) == (1, "a")

    with pytest.raises(DecodeError):
        decode_value([1, "a"], list[int])
    with pytest.raises(DecodeError):
        decode_value([1], tuple[int, str])
    with pytest.raises(DecodeError, match="expected array"):
        decode_value("1, 2", list[int])


def test_mappings():
    assert decode_value({"a": 1}, dict[str, int]) == {"a": 1}

    with pytest.raises(DecodeError) as info:
        decode_value({"a": 1, "b": "2"}, dict[str, int], ("tags",))
    assert info.value.key == ("tags", "b")


def test_unsupported_type():
    with pytest.raises(TypeError):
        decode_value([1, 2], set[int])


def test_decode_into_updates_given_fields_only():
    parent = Parent(name="before", size=4)

    decode_into({"size": 10, "tags": {"a": 1}}, parent)

    assert parent.name == "before"
    assert parent.size == 10
    assert parent.tags == {"a": 1}


def test_decode_into_builds_optional_child():
    parent = Parent()

    decode_into({"child": {"x": 1}}, parent)

    assert parent.child == Child(x=1, label="child")


def test_decode_into_updates_existing_child():
    original = Child(x=1, label="kept")
    parent = Parent(child=original)

    decode_into({"child": {"x": 2}}, parent)

    assert parent.child == Child(x=2, label="kept")
    # the previous instance is replaced, not modified
    assert original.x == 1


def test_decode_into_missing_required_key():
    parent = Parent()

    with pytest.raises(DecodeError) as info:
        decode_into({"child": {"label": "no x"}}, parent, ("plugins", "p"))

    assert info.value.key == ("plugins", "p", "child", "x")
    assert parent.child is None


def test_decode_into_is_all_or_nothing():
    parent = Parent()

    with pytest.raises(DecodeError):
        decode_into({"name": "after", "size": "big"}, parent)

    assert parent == Parent()


def test_decode_into_any_keeps_a_copy():
    raw = {"extra": {"deep": [1, 2]}}
    parent = Parent()

    decode_into(raw, parent)
    parent.extra["deep"].append(3)

    assert raw["extra"]["deep"] == [1, 2]


def test_decode_into_rejects_non_table():
    with pytest.raises(DecodeError, match="expected a table, got array"):
        decode_into([1, 2], Parent())


def test_decode_into_marks_metadata():
    document = {"p": {"name": "n", "child": {"x": 1}, "unknown": 0, "extra": {"a": {"b": 1}}}}
    metadata = MetaData(document)

    decode_into(document["p"], Parent(), ("p",), metadata)

    assert metadata.undecoded() == [("p", "unknown")]


def test_failed_decode_marks_nothing():
    document = {"p": {"name": "n", "size": "big"}}
    metadata = MetaData(document)

    with pytest.raises(DecodeError):
        decode_into(document["p"], Parent(), ("p",), metadata)

    assert metadata.undecoded() == metadata.keys()


def test_describe():
    assert describe(True) == "boolean"
    assert describe(1) == "integer"
    assert describe(1.0) == "float"
    assert describe("s") == "string"
    assert describe([]) == "array"
    assert describe({}) == "table"
    assert describe(dt.datetime(2000, 1, 1)) == "datetime"
    assert describe(dt.date(2000, 1, 1)) == "date"
