"""Convert entity data to and from the HASH and JSON storage encodings.

Both converters are driven by the schema definition only: fields that are not
declared are ignored in both directions, and unset fields never produce a key.
Entity data is keyed by field name, storage records by alias.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime
import math
from typing import TYPE_CHECKING, Any, assert_never

from redisearch_mapper.errors import DecodeError
from redisearch_mapper.schema.fields import (
    FieldDefinition,
    FieldType,
    Point,
    SchemaDefinition,
    StringArrayField,
)
from redisearch_mapper.schema.options import DataStructure
from redisearch_mapper.schema.values import (
    date_to_epoch_ms,
    epoch_ms_to_date,
    format_number,
    is_number,
)


if TYPE_CHECKING:
    from redisearch_mapper.schema.schema import Schema


EntityData = dict[str, Any]
HashData = dict[str, str]
JsonData = dict[str, Any]


def point_to_string(value: Point) -> str:
    return f"{format_number(value.longitude)},{format_number(value.latitude)}"


def string_to_point(field_name: str, value: Any) -> Point:
    if not isinstance(value, str):
        raise DecodeError(field_name, value, "Non-string point")
    parts = value.split(",")
    if len(parts) != 2:
        raise DecodeError(field_name, value, "Malformed point")
    try:
        longitude, latitude = (float(part) for part in parts)
    except ValueError:
        raise DecodeError(field_name, value, "Non-numeric point") from None
    if not (math.isfinite(longitude) and math.isfinite(latitude)):
        raise DecodeError(field_name, value, "Non-numeric point")
    return Point(longitude=longitude, latitude=latitude)


def string_to_number(field_name: str, value: str) -> int | float:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError:
        raise DecodeError(field_name, value, "Non-numeric value for number field") from None
    if not math.isfinite(number):
        raise DecodeError(field_name, value, "Non-numeric value for number field")
    return number


def string_to_boolean(field_name: str, value: str) -> bool:
    if value == "0":
        return False
    if value == "1":
        return True
    raise DecodeError(field_name, value, "Non-boolean value for boolean field")


def string_to_epoch_ms(field_name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise DecodeError(field_name, value, "Non-numeric value for date field") from None


def stored_date(field_name: str, raw: Any, epoch_ms: int) -> datetime:
    """Read epoch milliseconds back as a date. Values past the datetime range are malformed."""
    try:
        return epoch_ms_to_date(epoch_ms)
    except OverflowError:
        raise DecodeError(field_name, raw, "Out of range value for date field") from None


class AbstractConverter(ABC):
    """Shared field iteration for both encodings."""

    def __init__(self, schema_def: SchemaDefinition) -> None:
        self.schema_def = schema_def

    def encode(self, entity_data: Mapping[str, Any]) -> dict[str, Any]:
        record: dict[str, Any] = {}
        for field_name, field_def in self.schema_def.items():
            value = entity_data.get(field_name)
            if value is not None:
                record[field_def.storage_name(field_name)] = self._encode_value(field_def, value)
        return record

    def decode(self, record: Mapping[str, Any] | None) -> EntityData:
        entity_data: EntityData = {}
        if record is None:
            return entity_data
        for field_name, field_def in self.schema_def.items():
            raw = record.get(field_def.storage_name(field_name))
            if raw is not None:
                entity_data[field_name] = self._decode_value(field_name, field_def, raw)
        return entity_data

    @abstractmethod
    def _encode_value(self, field_def: FieldDefinition, value: Any) -> Any:
        raise NotImplementedError

    @abstractmethod
    def _decode_value(self, field_name: str, field_def: FieldDefinition, raw: Any) -> Any:
        raise NotImplementedError


class HashConverter(AbstractConverter):
    """Flat string map encoding used with Redis hashes."""

    def encode(self, entity_data: Mapping[str, Any]) -> HashData:
        return super().encode(entity_data)

    def _encode_value(self, field_def: FieldDefinition, value: Any) -> Any:
        field_type = field_def.field_type

        if field_type == FieldType.NUMBER:
            return format_number(value)
        if field_type == FieldType.BOOLEAN:
            return "1" if value else "0"
        if field_type == FieldType.STRING or field_type == FieldType.TEXT:
            return str(value)
        if field_type == FieldType.POINT:
            return point_to_string(value)
        if field_type == FieldType.DATE:
            return str(date_to_epoch_ms(value))
        if field_type == FieldType.STRING_ARRAY:
            assert isinstance(field_def, StringArrayField)
            return field_def.separator.join(value)
        if field_type == FieldType.OBJECT:
            return value
        assert_never(field_type)

    def _decode_value(self, field_name: str, field_def: FieldDefinition, raw: Any) -> Any:
        field_type = field_def.field_type

        if field_type == FieldType.OBJECT:
            return raw
        if not isinstance(raw, str):
            raise DecodeError(field_name, raw, "Non-string value in hash")

        if field_type == FieldType.NUMBER:
            return string_to_number(field_name, raw)
        if field_type == FieldType.BOOLEAN:
            return string_to_boolean(field_name, raw)
        if field_type == FieldType.STRING or field_type == FieldType.TEXT:
            return raw
        if field_type == FieldType.POINT:
            return string_to_point(field_name, raw)
        if field_type == FieldType.DATE:
            return stored_date(field_name, raw, string_to_epoch_ms(field_name, raw))
        if field_type == FieldType.STRING_ARRAY:
            assert isinstance(field_def, StringArrayField)
            return raw.split(field_def.separator) if raw else []
        assert_never(field_type)


class JsonConverter(AbstractConverter):
    """Structured document encoding used with RedisJSON.

    A JSON ``null`` stored for a field reads back as unset, and a missing
    document reads back as empty entity data.
    """

    def encode(self, entity_data: Mapping[str, Any]) -> JsonData:
        return super().encode(entity_data)

    def _encode_value(self, field_def: FieldDefinition, value: Any) -> Any:
        field_type = field_def.field_type

        if field_type == FieldType.POINT:
            return point_to_string(value)
        if field_type == FieldType.DATE:
            return date_to_epoch_ms(value)
        if field_type == FieldType.STRING_ARRAY:
            return list(value)
        if (
            field_type == FieldType.NUMBER
            or field_type == FieldType.BOOLEAN
            or field_type == FieldType.STRING
            or field_type == FieldType.TEXT
            or field_type == FieldType.OBJECT
        ):
            return value
        assert_never(field_type)

    def _decode_value(self, field_name: str, field_def: FieldDefinition, raw: Any) -> Any:
        field_type = field_def.field_type

        if field_type == FieldType.NUMBER:
            if not is_number(raw):
                raise DecodeError(field_name, raw, "Non-numeric value for number field")
            return raw
        if field_type == FieldType.BOOLEAN:
            if not isinstance(raw, bool):
                raise DecodeError(field_name, raw, "Non-boolean value for boolean field")
            return raw
        if field_type == FieldType.POINT:
            return string_to_point(field_name, raw)
        if field_type == FieldType.DATE:
            if not is_number(raw):
                raise DecodeError(field_name, raw, "Non-numeric value for date field")
            return stored_date(field_name, raw, int(raw))
        if field_type == FieldType.STRING_ARRAY:
            if not isinstance(raw, list):
                raise DecodeError(field_name, raw, "Non-array value for string[] field")
            if not all(isinstance(item, str) for item in raw):
                raise DecodeError(field_name, raw, "Non-string element in string[] field")
            return list(raw)
        if field_type == FieldType.STRING or field_type == FieldType.TEXT:
            if not isinstance(raw, str):
                raise DecodeError(field_name, raw, "Non-string value for string field")
            return raw
        if field_type == FieldType.OBJECT:
            return raw
        assert_never(field_type)


def converter_for(schema: Schema) -> HashConverter | JsonConverter:
    """Return the converter matching the schema's data structure."""
    if schema.data_structure == DataStructure.HASH:
        return HashConverter(schema.definition)
    return JsonConverter(schema.definition)
