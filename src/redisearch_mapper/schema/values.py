"""Validation and normalization of entity values against their field definitions."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timedelta, timezone
import math
from typing import Any, assert_never

from redisearch_mapper.errors import TypeMismatchError
from redisearch_mapper.schema.fields import FieldDefinition, FieldType, Point


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def is_number(value: Any) -> bool:
    """True for finite ints and floats. Booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def is_stringable(value: Any) -> bool:
    return isinstance(value, (str, bool)) or is_number(value)


def to_string(value: str | int | float | bool) -> str:
    """String conversion used for string, text and string[] values."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def format_number(value: int | float) -> str:
    """Render a number the way it is written to Redis: integral floats drop the ``.0``."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return str(value)


def date_to_epoch_ms(value: datetime) -> int:
    return (value - EPOCH) // _ONE_MS


def epoch_ms_to_date(value: int) -> datetime:
    return EPOCH + timedelta(milliseconds=value)


def coerce_date(value: Any) -> datetime | None:
    """Normalize a dateable value to an aware UTC datetime with millisecond precision.

    Returns None when the value cannot be read as a date.
    """
    if isinstance(value, datetime):
        moment = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
        moment = parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=timezone.utc)
    elif is_number(value):
        try:
            return epoch_ms_to_date(int(value))
        except OverflowError:
            return None
    else:
        return None

    moment = moment.astimezone(timezone.utc)
    return moment.replace(microsecond=moment.microsecond - moment.microsecond % 1000)


def coerce_point(value: Any) -> Point | None:
    if isinstance(value, Point):
        return value
    if isinstance(value, Mapping):
        longitude, latitude = value.get("longitude"), value.get("latitude")
    else:
        longitude, latitude = getattr(value, "longitude", None), getattr(value, "latitude", None)
    if is_number(longitude) and is_number(latitude):
        return Point(longitude=longitude, latitude=latitude)
    return None


def coerce_value(field_name: str, field_def: FieldDefinition, value: Any) -> Any:
    """Validate ``value`` for a field and return the normalized value to store.

    Raises:
        TypeMismatchError: The value does not fit the field's declared type.
    """
    field_type = field_def.field_type

    if field_type == FieldType.NUMBER:
        if is_number(value):
            return value
    elif field_type == FieldType.BOOLEAN:
        if isinstance(value, bool):
            return value
    elif field_type == FieldType.STRING or field_type == FieldType.TEXT:
        if is_stringable(value):
            return to_string(value)
    elif field_type == FieldType.POINT:
        point = coerce_point(value)
        if point is not None:
            return point
    elif field_type == FieldType.DATE:
        moment = coerce_date(value)
        if moment is not None:
            return moment
    elif field_type == FieldType.STRING_ARRAY:
        if isinstance(value, (list, tuple)) and all(is_stringable(item) for item in value):
            return [to_string(item) for item in value]
    elif field_type == FieldType.OBJECT:
        return value
    else:
        assert_never(field_type)

    raise TypeMismatchError(field_name, field_type.value, value)
