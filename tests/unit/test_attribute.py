from __future__ import annotations

from decimal import Decimal

import pytest

from ddbjson.attribute import (
    Binary,
    BinarySet,
    Number,
    NumberSet,
    String,
    StringSet,
    decode_attribute_value,
    decode_item,
    encode_attribute_value,
    encode_item,
    from_attribute_value,
    from_item,
    is_set_value,
    to_attribute_value,
    to_item,
)
from ddbjson.errors import DecodeError, MarshalError


def test_decode_string_and_string_set() -> None:
    assert decode_attribute_value({"S": "STRING"}) == String("STRING")
    assert decode_attribute_value({"SS": ["A", "B"]}) == StringSet(("A", "B"))


def test_round_trip_preserves_every_kind() -> None:
    values = [
        String("STRING"),
        Number("123456789"),
        Binary(b"\x00\x01\xff"),
        StringSet(("A", "B")),
        NumberSet(("1", "2.5")),
        BinarySet((b"a", b"\x00")),
    ]
    for v in values:
        assert decode_attribute_value(encode_attribute_value(v)) == v


def test_binary_payloads_are_base64_on_the_wire() -> None:
    assert encode_attribute_value(Binary(b"hello")) == {"B": "aGVsbG8="}
    assert encode_attribute_value(BinarySet((b"hello", b"\x00\x01"))) == {"BS": ["aGVsbG8=", "AAE="]}
    assert decode_attribute_value({"B": "aGVsbG8="}) == Binary(b"hello")


def test_numbers_keep_their_text() -> None:
    assert encode_attribute_value(Number("1.50")) == {"N": "1.50"}
    assert decode_attribute_value({"NS": ["1.50", "-0"]}) == NumberSet(("1.50", "-0"))


@pytest.mark.parametrize(
    "payload",
    [
        {"S": "a", "N": "1"},
        {},
        {"X": "a"},
        {"s": "lowercase tag"},
        {"S": ["a"]},
        {"S": 1},
        {"SS": "a"},
        {"NS": [1, 2]},
        {"B": "not base64!"},
        {"BS": ["aGVsbG8=", "%%%"]},
        ["S", "a"],
        "S",
    ],
)
def test_decode_rejects_malformed_values(payload: object) -> None:
    with pytest.raises(DecodeError):
        decode_attribute_value(payload)


def test_codec_does_not_reject_empty_sets() -> None:
    assert encode_attribute_value(StringSet(())) == {"SS": []}
    assert decode_attribute_value({"SS": []}) == StringSet(())


def test_encode_rejects_unknown_values() -> None:
    with pytest.raises(MarshalError):
        encode_attribute_value("raw")  # type: ignore[arg-type]


def test_set_constructors_coerce_to_tuples() -> None:
    assert StringSet(["a", "b"]).values == ("a", "b")  # type: ignore[arg-type]
    assert StringSet.of("a", "b") == StringSet(("a", "b"))
    assert NumberSet.of(1, Decimal("2.5"), "3") == NumberSet(("1", "2.5", "3"))
    assert BinarySet.of(b"x") == BinarySet((b"x",))
    assert is_set_value(StringSet.of("a"))
    assert not is_set_value(String("a"))
    assert not is_set_value(None)


def test_number_of_rejects_bool() -> None:
    assert Number.of(7) == Number("7")
    assert Number.of(Decimal("1.50")) == Number("1.50")
    with pytest.raises(MarshalError):
        Number.of(True)


def test_item_codec() -> None:
    item = {"pk": String("A"), "n": Number("1")}
    wire = encode_item(item)
    assert wire == {"pk": {"S": "A"}, "n": {"N": "1"}}
    assert decode_item(wire) == item

    with pytest.raises(DecodeError):
        decode_item(["not", "an", "object"])
    with pytest.raises(DecodeError):
        decode_item({"pk": {"S": "A", "N": "1"}})


def test_to_attribute_value_converts_python_values() -> None:
    assert to_attribute_value("x") == String("x")
    assert to_attribute_value(5) == Number("5")
    assert to_attribute_value(Decimal("1.5")) == Number("1.5")
    assert to_attribute_value(b"ab") == Binary(b"ab")
    assert to_attribute_value({"a"}) == StringSet(("a",))
    assert to_attribute_value({b"z"}) == BinarySet((b"z",))

    ns = to_attribute_value({1, 2})
    assert isinstance(ns, NumberSet)
    assert sorted(ns.values) == ["1", "2"]


@pytest.mark.parametrize("value", [1.5, True, None, [1], {"a": 1}, set()])
def test_to_attribute_value_rejects_unsupported(value: object) -> None:
    with pytest.raises(MarshalError):
        to_attribute_value(value)


def test_from_attribute_value_returns_python_values() -> None:
    assert from_attribute_value(String("x")) == "x"
    assert from_attribute_value(Number("5")) == Decimal(5)
    assert from_attribute_value(Binary(b"ab")) == b"ab"
    assert from_attribute_value(StringSet(("A", "B"))) == {"A", "B"}
    assert from_attribute_value(NumberSet(("1", "2"))) == {Decimal(1), Decimal(2)}
    assert from_attribute_value(BinarySet((b"a", b"b"))) == {b"a", b"b"}


def test_to_item_from_item() -> None:
    item = to_item({"pk": "A", "count": 3, "blob": b"\x01"})
    assert item == {"pk": String("A"), "count": Number("3"), "blob": Binary(b"\x01")}
    assert from_item(item) == {"pk": "A", "count": Decimal(3), "blob": b"\x01"}
