from __future__ import annotations

import re

from .errors import ValidationError

MinNameLength = 3
MaxNameLength = 255
MaxListTablesLimit = 100

_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+$")


def _validate_name(kind: str, name: str) -> None:
    if not isinstance(name, str) or not name:
        raise ValidationError(f"{kind} name is required")
    if len(name) < MinNameLength or len(name) > MaxNameLength:
        raise ValidationError(f"{kind} name length invalid: {name!r}")
    if _NAME_PATTERN.fullmatch(name) is None:
        raise ValidationError(f"{kind} name contains invalid characters: {name!r}")


def validate_table_name(name: str) -> None:
    _validate_name("table", name)


def validate_index_name(name: str | None) -> None:
    if name is None:
        return
    _validate_name("index", name)


def validate_limit(limit: int | None, *, maximum: int | None = None) -> None:
    if limit is None:
        return
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValidationError("limit must be > 0")
    if maximum is not None and limit > maximum:
        raise ValidationError(f"limit must be <= {maximum}")


def validate_segments(segment: int | None, total_segments: int | None) -> None:
    if (segment is None) != (total_segments is None):
        raise ValidationError("segment and total_segments must be provided together")
    if segment is None or total_segments is None:
        return
    if segment < 0 or total_segments <= 0 or segment >= total_segments:
        raise ValidationError(f"invalid segment/total_segments: {segment}/{total_segments}")
