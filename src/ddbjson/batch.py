from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .attribute import AttributeValue, decode_item, encode_item
from .errors import DecodeError, ValidationError
from .wire import expect_object, opt_list, opt_str, put_optional, str_list

MAX_BATCH_GET_KEYS = 100
MAX_BATCH_WRITE_REQUESTS = 25


@dataclass(frozen=True)
class PutRequest:
    item: Mapping[str, AttributeValue]

    def to_wire(self) -> dict[str, Any]:
        return {"Item": encode_item(self.item)}


@dataclass(frozen=True)
class DeleteRequest:
    key: Mapping[str, AttributeValue]

    def to_wire(self) -> dict[str, Any]:
        return {"Key": encode_item(self.key)}


@dataclass(frozen=True)
class WriteRequest:
    put: PutRequest | None = None
    delete: DeleteRequest | None = None

    def __post_init__(self) -> None:
        if (self.put is None) == (self.delete is None):
            raise ValidationError("write request needs exactly one of put or delete")
        if self.put is not None and not self.put.item:
            raise ValidationError("put request item is empty")
        if self.delete is not None and not self.delete.key:
            raise ValidationError("delete request key is empty")

    @staticmethod
    def put_item(item: Mapping[str, AttributeValue]) -> WriteRequest:
        return WriteRequest(put=PutRequest(dict(item)))

    @staticmethod
    def delete_item(key: Mapping[str, AttributeValue]) -> WriteRequest:
        return WriteRequest(delete=DeleteRequest(dict(key)))

    def to_wire(self) -> dict[str, Any]:
        if self.put is not None:
            return {"PutRequest": self.put.to_wire()}
        if self.delete is not None:
            return {"DeleteRequest": self.delete.to_wire()}
        raise ValidationError("write request needs exactly one of put or delete")

    @staticmethod
    def from_wire(data: Any) -> WriteRequest:
        obj = expect_object(data, "WriteRequest", {"PutRequest", "DeleteRequest"})
        try:
            if "PutRequest" in obj and "DeleteRequest" not in obj:
                put = expect_object(obj["PutRequest"], "PutRequest", {"Item"})
                return WriteRequest(put=PutRequest(decode_item(put.get("Item"))))
            if "DeleteRequest" in obj and "PutRequest" not in obj:
                delete = expect_object(obj["DeleteRequest"], "DeleteRequest", {"Key"})
                return WriteRequest(delete=DeleteRequest(decode_item(delete.get("Key"))))
        except ValidationError as err:
            raise DecodeError(str(err)) from err
        raise DecodeError("WriteRequest must hold exactly one of PutRequest or DeleteRequest")


@dataclass(frozen=True)
class KeysAndAttributes:
    keys: Sequence[Mapping[str, AttributeValue]]
    attributes_to_get: Sequence[str] = field(default_factory=tuple)
    consistent_read: bool | None = None
    projection_expression: str | None = None
    expression_attribute_names: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))
        object.__setattr__(self, "attributes_to_get", tuple(self.attributes_to_get))
        if not self.keys:
            raise ValidationError("keys must be non-empty")

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"Keys": [encode_item(k) for k in self.keys]}
        put_optional(out, "AttributesToGet", list(self.attributes_to_get))
        put_optional(out, "ConsistentRead", self.consistent_read)
        put_optional(out, "ProjectionExpression", self.projection_expression)
        put_optional(out, "ExpressionAttributeNames", dict(self.expression_attribute_names))
        return out

    @staticmethod
    def from_wire(data: Any) -> KeysAndAttributes:
        obj = expect_object(
            data,
            "KeysAndAttributes",
            {
                "Keys",
                "AttributesToGet",
                "ConsistentRead",
                "ProjectionExpression",
                "ExpressionAttributeNames",
            },
        )
        keys = [decode_item(k) for k in opt_list(obj, "Keys") or []]
        consistent = obj.get("ConsistentRead")
        if consistent is not None and not isinstance(consistent, bool):
            raise DecodeError("ConsistentRead must be a boolean")
        names = obj.get("ExpressionAttributeNames") or {}
        if not isinstance(names, dict):
            raise DecodeError("ExpressionAttributeNames must be an object")
        try:
            return KeysAndAttributes(
                keys=keys,
                attributes_to_get=str_list(obj, "AttributesToGet"),
                consistent_read=consistent,
                projection_expression=opt_str(obj, "ProjectionExpression"),
                expression_attribute_names=names,
            )
        except ValidationError as err:
            raise DecodeError(str(err)) from err
