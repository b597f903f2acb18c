from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, ClassVar, Literal

from boto3.dynamodb.types import Binary as _BotoBinary
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from .errors import DecodeError, MarshalError

type AttributeType = Literal["S", "N", "B", "SS", "NS", "BS"]

SCALAR_TYPES: frozenset[str] = frozenset({"S", "N", "B"})
SET_TYPES: frozenset[str] = frozenset({"SS", "NS", "BS"})


@dataclass(frozen=True)
class String:
    value: str
    tag: ClassVar[AttributeType] = "S"


@dataclass(frozen=True)
class Number:
    value: str
    tag: ClassVar[AttributeType] = "N"

    @staticmethod
    def of(value: int | Decimal | str) -> Number:
        if isinstance(value, bool):
            raise MarshalError("bool is not a number")
        return Number(str(value))


@dataclass(frozen=True)
class Binary:
    value: bytes
    tag: ClassVar[AttributeType] = "B"


@dataclass(frozen=True)
class StringSet:
    values: tuple[str, ...]
    tag: ClassVar[AttributeType] = "SS"

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    @staticmethod
    def of(*values: str) -> StringSet:
        return StringSet(values)


@dataclass(frozen=True)
class NumberSet:
    values: tuple[str, ...]
    tag: ClassVar[AttributeType] = "NS"

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    @staticmethod
    def of(*values: int | Decimal | str) -> NumberSet:
        return NumberSet(tuple(Number.of(v).value for v in values))


@dataclass(frozen=True)
class BinarySet:
    values: tuple[bytes, ...]
    tag: ClassVar[AttributeType] = "BS"

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    @staticmethod
    def of(*values: bytes) -> BinarySet:
        return BinarySet(values)


type AttributeValue = String | Number | Binary | StringSet | NumberSet | BinarySet

type Item = dict[str, AttributeValue]
type Key = dict[str, AttributeValue]


def is_set_value(av: AttributeValue | None) -> bool:
    return isinstance(av, (StringSet, NumberSet, BinarySet))


def _b64(data: bytes) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")


def _unb64(tag: str, text: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as err:
        raise DecodeError(f"{tag} value is not valid base64") from err


def encode_attribute_value(av: AttributeValue) -> dict[str, Any]:
    if isinstance(av, (String, Number)):
        return {av.tag: av.value}
    if isinstance(av, Binary):
        return {"B": _b64(av.value)}
    if isinstance(av, (StringSet, NumberSet)):
        return {av.tag: list(av.values)}
    if isinstance(av, BinarySet):
        return {"BS": [_b64(v) for v in av.values]}
    raise MarshalError(f"cannot encode attribute value: {av!r}")


def decode_attribute_value(obj: Any) -> AttributeValue:
    if not isinstance(obj, dict):
        raise DecodeError("attribute value must be an object")
    if len(obj) != 1:
        raise DecodeError(f"attribute value must have exactly one type key, got {len(obj)}")

    ((tag, value),) = obj.items()

    if tag in SCALAR_TYPES:
        if not isinstance(value, str):
            raise DecodeError(f"{tag} value must be a string")
        if tag == "S":
            return String(value)
        if tag == "N":
            return Number(value)
        return Binary(_unb64(tag, value))

    if tag in SET_TYPES:
        if not isinstance(value, list):
            raise DecodeError(f"{tag} value must be a list")
        if not all(isinstance(v, str) for v in value):
            raise DecodeError(f"{tag} elements must be strings")
        if tag == "SS":
            return StringSet(tuple(value))
        if tag == "NS":
            return NumberSet(tuple(value))
        return BinarySet(tuple(_unb64(tag, v) for v in value))

    raise DecodeError(f"unsupported attribute value type: {tag!r}")


def encode_item(item: Mapping[str, AttributeValue]) -> dict[str, Any]:
    return {str(name): encode_attribute_value(av) for name, av in item.items()}


def decode_item(obj: Any) -> dict[str, AttributeValue]:
    if not isinstance(obj, dict):
        raise DecodeError("item must be an object")
    return {str(name): decode_attribute_value(av) for name, av in obj.items()}


_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def to_attribute_value(value: Any) -> AttributeValue:
    """Convert a plain Python value to an attribute value.

    Accepts ``str``, ``int``, ``Decimal``, ``bytes`` and non-empty sets of
    those. Floats are rejected because they cannot be carried losslessly; use
    ``Decimal`` instead.
    """
    if isinstance(value, (set, frozenset)) and not value:
        raise MarshalError("cannot infer the type of an empty set")
    if isinstance(value, bool) or value is None:
        raise MarshalError(f"unsupported value type: {type(value).__name__}")

    try:
        raw = _serializer.serialize(value)
    except (TypeError, ValueError, ArithmeticError) as err:
        raise MarshalError(f"unsupported value: {value!r}") from err

    ((tag, payload),) = raw.items()
    if tag == "S":
        return String(payload)
    if tag == "N":
        return Number(payload)
    if tag == "B":
        return Binary(bytes(payload))
    if tag == "SS":
        return StringSet(tuple(payload))
    if tag == "NS":
        return NumberSet(tuple(payload))
    if tag == "BS":
        return BinarySet(tuple(_raw_bytes(v) for v in payload))

    raise MarshalError(f"unsupported value type: {type(value).__name__}")


def _raw_bytes(value: Any) -> bytes:
    if isinstance(value, _BotoBinary):
        return bytes(value.value)
    return bytes(value)


def from_attribute_value(av: AttributeValue) -> Any:
    if isinstance(av, (String, Number, Binary)):
        raw: dict[str, Any] = {av.tag: av.value}
    elif isinstance(av, (StringSet, NumberSet, BinarySet)):
        raw = {av.tag: list(av.values)}
    else:
        raise MarshalError(f"cannot convert attribute value: {av!r}")

    out = _deserializer.deserialize(raw)
    if isinstance(out, _BotoBinary):
        return bytes(out.value)
    if isinstance(out, set) and av.tag == "BS":
        return {_raw_bytes(v) for v in out}
    return out


def to_item(values: Mapping[str, Any]) -> dict[str, AttributeValue]:
    return {str(name): to_attribute_value(v) for name, v in values.items()}


def from_item(item: Mapping[str, AttributeValue]) -> dict[str, Any]:
    return {name: from_attribute_value(av) for name, av in item.items()}
