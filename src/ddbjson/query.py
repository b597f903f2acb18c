from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from .attribute import AttributeValue, encode_attribute_value
from .errors import ValidationError

type ComparisonOperator = Literal[
    "EQ",
    "NE",
    "LT",
    "LE",
    "GT",
    "GE",
    "NOT_NULL",
    "NULL",
    "CONTAINS",
    "NOT_CONTAINS",
    "BEGINS_WITH",
    "IN",
    "BETWEEN",
]
type ConditionalOperator = Literal["AND", "OR"]

COMPARISON_OPERATORS: frozenset[str] = frozenset(
    {
        "EQ",
        "NE",
        "LT",
        "LE",
        "GT",
        "GE",
        "NOT_NULL",
        "NULL",
        "CONTAINS",
        "NOT_CONTAINS",
        "BEGINS_WITH",
        "IN",
        "BETWEEN",
    }
)

_NO_OPERAND = frozenset({"NOT_NULL", "NULL"})


def _check_arity(op: str, count: int) -> None:
    if op not in COMPARISON_OPERATORS:
        raise ValidationError(f"unsupported comparison operator: {op!r}")
    if op in _NO_OPERAND:
        if count != 0:
            raise ValidationError(f"{op} takes no operands, got {count}")
        return
    if op == "BETWEEN":
        if count != 2:
            raise ValidationError(f"BETWEEN takes exactly 2 operands, got {count}")
        return
    if op == "IN":
        if count < 1:
            raise ValidationError("IN takes at least 1 operand")
        return
    if count != 1:
        raise ValidationError(f"{op} takes exactly 1 operand, got {count}")


@dataclass(frozen=True)
class Condition:
    operator: ComparisonOperator
    values: tuple[AttributeValue, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        _check_arity(self.operator, len(self.values))

    @staticmethod
    def eq(value: AttributeValue) -> Condition:
        return Condition("EQ", (value,))

    @staticmethod
    def ne(value: AttributeValue) -> Condition:
        return Condition("NE", (value,))

    @staticmethod
    def lt(value: AttributeValue) -> Condition:
        return Condition("LT", (value,))

    @staticmethod
    def le(value: AttributeValue) -> Condition:
        return Condition("LE", (value,))

    @staticmethod
    def gt(value: AttributeValue) -> Condition:
        return Condition("GT", (value,))

    @staticmethod
    def ge(value: AttributeValue) -> Condition:
        return Condition("GE", (value,))

    @staticmethod
    def exists() -> Condition:
        return Condition("NOT_NULL")

    @staticmethod
    def not_exists() -> Condition:
        return Condition("NULL")

    @staticmethod
    def contains(value: AttributeValue) -> Condition:
        return Condition("CONTAINS", (value,))

    @staticmethod
    def not_contains(value: AttributeValue) -> Condition:
        return Condition("NOT_CONTAINS", (value,))

    @staticmethod
    def begins_with(prefix: AttributeValue) -> Condition:
        return Condition("BEGINS_WITH", (prefix,))

    @staticmethod
    def in_(*values: AttributeValue) -> Condition:
        return Condition("IN", tuple(values))

    @staticmethod
    def between(low: AttributeValue, high: AttributeValue) -> Condition:
        return Condition("BETWEEN", (low, high))

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.values:
            out["AttributeValueList"] = [encode_attribute_value(v) for v in self.values]
        out["ComparisonOperator"] = self.operator
        return out


@dataclass(frozen=True)
class DeprecatedCondition:
    """A legacy ``Expected`` entry.

    When ``exists`` is false the service only checks that the attribute is
    absent, so ``value`` is never sent.
    """

    value: AttributeValue | None = None
    exists: bool = True

    def to_wire(self) -> dict[str, Any]:
        if not self.exists:
            return {"Exists": False}
        if self.value is None:
            raise ValidationError("an Exists=true expectation needs a value")
        return {"Value": encode_attribute_value(self.value), "Exists": True}


def conditions_to_wire(conditions: Mapping[str, Condition]) -> dict[str, Any]:
    return {name: cond.to_wire() for name, cond in conditions.items()}


def expected_to_wire(expected: Mapping[str, DeprecatedCondition]) -> dict[str, Any]:
    return {name: cond.to_wire() for name, cond in expected.items()}
