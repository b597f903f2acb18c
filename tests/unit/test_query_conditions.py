from __future__ import annotations

import pytest

from ddbjson.attribute import Number, String, StringSet
from ddbjson.errors import ValidationError
from ddbjson.query import Condition, DeprecatedCondition, conditions_to_wire, expected_to_wire


def test_condition_helpers_build_the_expected_operator() -> None:
    a = String("a")
    cases = {
        "EQ": Condition.eq(a),
        "NE": Condition.ne(a),
        "LT": Condition.lt(a),
        "LE": Condition.le(a),
        "GT": Condition.gt(a),
        "GE": Condition.ge(a),
        "CONTAINS": Condition.contains(a),
        "NOT_CONTAINS": Condition.not_contains(a),
        "BEGINS_WITH": Condition.begins_with(a),
    }
    for op, cond in cases.items():
        assert cond.to_wire() == {"AttributeValueList": [{"S": "a"}], "ComparisonOperator": op}


def test_null_checks_carry_no_operands() -> None:
    assert Condition.exists().to_wire() == {"ComparisonOperator": "NOT_NULL"}
    assert Condition.not_exists().to_wire() == {"ComparisonOperator": "NULL"}


def test_between_and_in() -> None:
    assert Condition.between(Number("1"), Number("9")).to_wire() == {
        "AttributeValueList": [{"N": "1"}, {"N": "9"}],
        "ComparisonOperator": "BETWEEN",
    }
    assert Condition.in_(String("x"), String("y"), String("z")).to_wire()["AttributeValueList"] == [
        {"S": "x"},
        {"S": "y"},
        {"S": "z"},
    ]


@pytest.mark.parametrize(
    ("operator", "count"),
    [
        ("EQ", 0),
        ("EQ", 2),
        ("BEGINS_WITH", 2),
        ("NULL", 1),
        ("NOT_NULL", 1),
        ("BETWEEN", 1),
        ("BETWEEN", 3),
        ("IN", 0),
        ("LIKE", 1),
    ],
)
def test_condition_arity_is_checked(operator: str, count: int) -> None:
    with pytest.raises(ValidationError):
        Condition(operator, tuple(String(str(i)) for i in range(count)))  # type: ignore[arg-type]


def test_conditions_to_wire() -> None:
    wire = conditions_to_wire({"pk": Condition.eq(String("A")), "sk": Condition.begins_with(String("2024-"))})
    assert wire == {
        "pk": {"AttributeValueList": [{"S": "A"}], "ComparisonOperator": "EQ"},
        "sk": {"AttributeValueList": [{"S": "2024-"}], "ComparisonOperator": "BEGINS_WITH"},
    }
    assert conditions_to_wire({}) == {}


def test_deprecated_condition_wire() -> None:
    assert DeprecatedCondition(String("v")).to_wire() == {"Value": {"S": "v"}, "Exists": True}
    assert DeprecatedCondition(exists=False).to_wire() == {"Exists": False}
    assert DeprecatedCondition(String("ignored"), exists=False).to_wire() == {"Exists": False}
    assert DeprecatedCondition(StringSet(("a",))).to_wire() == {"Value": {"SS": ["a"]}, "Exists": True}

    with pytest.raises(ValidationError):
        DeprecatedCondition().to_wire()


def test_expected_to_wire() -> None:
    wire = expected_to_wire({"a": DeprecatedCondition(Number("1")), "b": DeprecatedCondition(exists=False)})
    assert wire == {"a": {"Value": {"N": "1"}, "Exists": True}, "b": {"Exists": False}}
