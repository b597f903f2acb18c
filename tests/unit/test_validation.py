from __future__ import annotations

import pytest

from ddbjson.errors import ValidationError
from ddbjson.validation import (
    MaxNameLength,
    validate_index_name,
    validate_limit,
    validate_segments,
    validate_table_name,
)


def test_validate_table_name() -> None:
    validate_table_name("abc")
    validate_table_name("Table_1.v2-prod")
    validate_table_name("a" * MaxNameLength)

    for bad in ["", "ab", "a" * (MaxNameLength + 1), "has space", "slash/name", "abc\n"]:
        with pytest.raises(ValidationError):
            validate_table_name(bad)


def test_validate_index_name() -> None:
    validate_index_name(None)
    validate_index_name("gsi1")
    with pytest.raises(ValidationError):
        validate_index_name("x")


def test_validate_limit() -> None:
    validate_limit(None)
    validate_limit(1)
    validate_limit(100, maximum=100)
    for bad in [0, -1, True, 1.5]:
        with pytest.raises(ValidationError):
            validate_limit(bad)  # type: ignore[arg-type]
    with pytest.raises(ValidationError):
        validate_limit(101, maximum=100)


def test_validate_segments() -> None:
    validate_segments(None, None)
    validate_segments(0, 1)
    validate_segments(3, 4)
    for segment, total in [(0, None), (None, 1), (-1, 2), (4, 4), (0, 0)]:
        with pytest.raises(ValidationError):
            validate_segments(segment, total)
