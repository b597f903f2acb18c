from __future__ import annotations

from collections.abc import Collection
from typing import Any

from .errors import DecodeError


def is_omitted(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, bytearray)) and len(value) == 0:
        return True
    if isinstance(value, (list, dict, tuple)) and len(value) == 0:
        return True
    return False


def put_optional(out: dict[str, Any], key: str, value: Any) -> None:
    if not is_omitted(value):
        out[key] = value


def expect_object(data: Any, what: str, allowed: Collection[str] | None = None) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"{what} must be an object, got {type(data).__name__}")
    if allowed is not None:
        unknown = sorted(k for k in data if k not in allowed)
        if unknown:
            raise DecodeError(f"{what} has unknown field(s): {', '.join(unknown)}")
    return data


def opt_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"{key} must be a string")
    return value


def opt_int(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        # Some emulators emit whole numbers as floats.
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise DecodeError(f"{key} must be an integer")
    return value


def opt_float(data: dict[str, Any], key: str) -> float | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"{key} must be a number")
    return float(value)


def opt_list(data: dict[str, Any], key: str) -> list[Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise DecodeError(f"{key} must be a list")
    return value


def opt_object(data: dict[str, Any], key: str) -> dict[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise DecodeError(f"{key} must be an object")
    return value


def str_list(data: dict[str, Any], key: str) -> tuple[str, ...]:
    values = opt_list(data, key) or []
    if not all(isinstance(v, str) for v in values):
        raise DecodeError(f"{key} must be a list of strings")
    return tuple(values)
