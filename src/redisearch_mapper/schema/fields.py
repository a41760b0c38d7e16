"""
Field definitions for entity schemas.

Each field of an entity is described by one frozen definition object. The
definition decides how a value is validated on write, how it is encoded for
Redis, which RediSearch type indexes it and which query operators apply:

- StringField: Whole strings, indexed as TAG (exact match)
- TextField: Full-text searchable strings, indexed as TEXT
- NumberField: Numbers, indexed as NUMERIC
- BooleanField: Booleans, indexed as TAG
- PointField: Longitude/latitude pairs, indexed as GEO
- DateField: Instants, stored and indexed as epoch milliseconds
- StringArrayField: Lists of strings, indexed as TAG
- ObjectField: Arbitrary structured values, stored but never indexed
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from redisearch_mapper.config import get_settings
from redisearch_mapper.errors import InvalidSchemaOptionError


class FieldType(str, Enum):
    """Types of fields supported in a schema."""

    STRING = "string"
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    POINT = "point"
    DATE = "date"
    STRING_ARRAY = "string[]"
    OBJECT = "object"


class Point(BaseModel):
    """A point on the globe."""

    model_config = ConfigDict(frozen=True)

    longitude: float
    latitude: float


def _default_separator() -> str:
    return get_settings().default_separator


def _check_separator(separator: Any) -> None:
    if not isinstance(separator, str) or not separator:
        msg = f"Separator must be a non-empty string, got {separator!r}."
        raise InvalidSchemaOptionError("separator", separator, msg)


@dataclass(frozen=True)
class FieldDefinition:
    """Base class for all field definitions.

    Args:
        alias: Name of the field in Redis. Defaults to the name the field is
            declared under in the schema definition.
    """

    alias: str | None = None

    def __post_init__(self) -> None:
        if self.alias is not None and (not isinstance(self.alias, str) or not self.alias):
            msg = f"Field alias must be a non-empty string, got {self.alias!r}."
            raise InvalidSchemaOptionError("alias", self.alias, msg)

    @property
    def field_type(self) -> FieldType:  # pragma: no cover - interface
        raise NotImplementedError

    def storage_name(self, field_name: str) -> str:
        """Return the key used for this field in Redis."""
        return self.alias or field_name

    def to_dict(self) -> dict[str, Any]:
        """Serialize field definition to dict."""
        data: dict[str, Any] = {"type": self.field_type.value}
        if self.alias is not None:
            data["alias"] = self.alias
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FieldDefinition:
        """Deserialize field definition from dict."""
        raw_type = data.get("type")
        try:
            field_type = FieldType(raw_type)
        except ValueError:
            valid = ", ".join(f"'{t.value}'" for t in FieldType)
            msg = f"Field type '{raw_type}' is not valid. Valid types include {valid}."
            raise InvalidSchemaOptionError("type", raw_type, msg) from None

        alias = data.get("alias")
        separator = data["separator"] if "separator" in data else _default_separator()
        if field_type == FieldType.STRING:
            return StringField(alias=alias, separator=separator)
        if field_type == FieldType.STRING_ARRAY:
            return StringArrayField(alias=alias, separator=separator)
        if field_type == FieldType.TEXT:
            return TextField(alias=alias)
        if field_type == FieldType.NUMBER:
            return NumberField(alias=alias)
        if field_type == FieldType.BOOLEAN:
            return BooleanField(alias=alias)
        if field_type == FieldType.POINT:
            return PointField(alias=alias)
        if field_type == FieldType.DATE:
            return DateField(alias=alias)
        return ObjectField(alias=alias)


@dataclass(frozen=True)
class StringField(FieldDefinition):
    """
    A whole string, matched exactly.

    Strings and string arrays share the same flat representation in a HASH,
    so the separator used to split arrays also applies here. If values
    contain the separator, change it.

    Args:
        alias: Name of the field in Redis
        separator: TAG separator (default: ``|``)
    """

    separator: str = field(default_factory=_default_separator)

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_separator(self.separator)

    @property
    def field_type(self) -> FieldType:
        return FieldType.STRING

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["separator"] = self.separator
        return data


@dataclass(frozen=True)
class TextField(FieldDefinition):
    """A string searchable with full-text queries."""

    @property
    def field_type(self) -> FieldType:
        return FieldType.TEXT


@dataclass(frozen=True)
class NumberField(FieldDefinition):
    @property
    def field_type(self) -> FieldType:
        return FieldType.NUMBER


@dataclass(frozen=True)
class BooleanField(FieldDefinition):
    @property
    def field_type(self) -> FieldType:
        return FieldType.BOOLEAN


@dataclass(frozen=True)
class PointField(FieldDefinition):
    """A longitude/latitude pair, searchable by radius."""

    @property
    def field_type(self) -> FieldType:
        return FieldType.POINT


@dataclass(frozen=True)
class DateField(FieldDefinition):
    """An instant, stored as epoch milliseconds."""

    @property
    def field_type(self) -> FieldType:
        return FieldType.DATE


@dataclass(frozen=True)
class StringArrayField(FieldDefinition):
    """
    A list of strings.

    In a HASH the list is joined with the separator; in JSON it is stored as
    a native array and each element is indexed on its own.

    The HASH encoding cannot tell an empty list from a list holding one empty
    string: both are stored as ``""``, which reads back as ``[]``. Elements
    containing the separator are split apart on read. JSON keeps both intact.

    Args:
        alias: Name of the field in Redis
        separator: Join/split delimiter for HASH storage (default: ``|``)
    """

    separator: str = field(default_factory=_default_separator)

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_separator(self.separator)

    @property
    def field_type(self) -> FieldType:
        return FieldType.STRING_ARRAY

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["separator"] = self.separator
        return data


@dataclass(frozen=True)
class ObjectField(FieldDefinition):
    """An arbitrary structured value. Stored as given and never indexed."""

    @property
    def field_type(self) -> FieldType:
        return FieldType.OBJECT


SchemaDefinition = dict[str, FieldDefinition]


def normalize_definition(definition: Mapping[str, FieldDefinition | Mapping[str, Any]]) -> SchemaDefinition:
    """Return a schema definition with every entry as a FieldDefinition.

    Plain dict entries such as ``{"type": "string", "alias": "s"}`` are
    converted with ``FieldDefinition.from_dict``. Declaration order is kept.
    """
    normalized: SchemaDefinition = {}
    for name, entry in definition.items():
        if not isinstance(name, str) or not name:
            raise InvalidSchemaOptionError("definition", name, "Field names must be non-empty strings.")
        if isinstance(entry, FieldDefinition):
            normalized[name] = entry
        elif isinstance(entry, Mapping):
            normalized[name] = FieldDefinition.from_dict(entry)
        else:
            msg = f"The field '{name}' must be defined by a FieldDefinition or a dict, got {entry!r}."
            raise InvalidSchemaOptionError("definition", entry, msg)
    return normalized
