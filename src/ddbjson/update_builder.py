from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from .attribute import AttributeValue, encode_attribute_value, is_set_value
from .errors import ValidationError

type UpdateAction = Literal["PUT", "DELETE", "ADD"]

UPDATE_ACTIONS: frozenset[str] = frozenset({"PUT", "DELETE", "ADD"})


@dataclass(frozen=True)
class AttributeUpdate:
    action: UpdateAction
    value: AttributeValue | None = None

    def __post_init__(self) -> None:
        if self.action not in UPDATE_ACTIONS:
            raise ValidationError(f"unsupported update action: {self.action!r}")

    def to_wire(self) -> dict[str, Any]:
        # DELETE with a set removes those elements; anything else removes the attribute.
        if self.action == "DELETE" and not is_set_value(self.value):
            return {"Action": "DELETE"}
        if self.value is None:
            raise ValidationError(f"{self.action} update needs a value")
        return {"Action": self.action, "Value": encode_attribute_value(self.value)}


class AttributeUpdates:
    def __init__(self) -> None:
        self._updates: dict[str, AttributeUpdate] = {}

    def put(self, name: str, value: AttributeValue) -> AttributeUpdates:
        self._updates[name] = AttributeUpdate("PUT", value)
        return self

    def add(self, name: str, value: AttributeValue) -> AttributeUpdates:
        self._updates[name] = AttributeUpdate("ADD", value)
        return self

    def delete(self, name: str, value: AttributeValue) -> AttributeUpdates:
        if not is_set_value(value):
            raise ValidationError("delete() takes a set value; use remove() to drop the attribute")
        self._updates[name] = AttributeUpdate("DELETE", value)
        return self

    def remove(self, name: str) -> AttributeUpdates:
        self._updates[name] = AttributeUpdate("DELETE")
        return self

    def __len__(self) -> int:
        return len(self._updates)

    def build(self) -> dict[str, AttributeUpdate]:
        if not self._updates:
            raise ValidationError("at least one attribute update is required")
        return dict(self._updates)


def updates_to_wire(updates: Mapping[str, AttributeUpdate]) -> dict[str, Any]:
    return {name: upd.to_wire() for name, upd in updates.items()}
