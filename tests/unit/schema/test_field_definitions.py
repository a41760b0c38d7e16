"""Unit tests for field definitions."""

import pytest

from redisearch_mapper.errors import InvalidSchemaOptionError
from redisearch_mapper.schema import Schema
from redisearch_mapper.schema.fields import (
    BooleanField,
    DateField,
    FieldDefinition,
    FieldType,
    NumberField,
    ObjectField,
    PointField,
    StringArrayField,
    StringField,
    TextField,
    normalize_definition,
)


@pytest.mark.parametrize(
    ("field_def", "field_type"),
    [
        (StringField(), FieldType.STRING),
        (TextField(), FieldType.TEXT),
        (NumberField(), FieldType.NUMBER),
        (BooleanField(), FieldType.BOOLEAN),
        (PointField(), FieldType.POINT),
        (DateField(), FieldType.DATE),
        (StringArrayField(), FieldType.STRING_ARRAY),
        (ObjectField(), FieldType.OBJECT),
    ],
)
def test_each_definition_reports_its_type(field_def, field_type):
    assert field_def.field_type == field_type


def test_separator_defaults_to_pipe():
    assert StringField().separator == "|"
    assert StringArrayField().separator == "|"


def test_separator_default_comes_from_settings(monkeypatch):
    from redisearch_mapper.config import reset_settings

    monkeypatch.setenv("REDISEARCH_MAPPER_DEFAULT_SEPARATOR", ",")
    reset_settings()

    assert StringArrayField().separator == ","
    assert StringArrayField(separator=";").separator == ";"


def test_storage_name_prefers_alias():
    assert NumberField().storage_name("aNumber") == "aNumber"
    assert NumberField(alias="n").storage_name("aNumber") == "n"


def test_empty_alias_is_rejected():
    with pytest.raises(InvalidSchemaOptionError, match="non-empty"):
        TextField(alias="")


@pytest.mark.parametrize("field_cls", [StringField, StringArrayField])
@pytest.mark.parametrize("separator", ["", None, 1, ["|"]])
def test_bad_separator_is_rejected(field_cls, separator):
    with pytest.raises(InvalidSchemaOptionError, match="non-empty string") as exc_info:
        field_cls(separator=separator)

    assert exc_info.value.option == "separator"
    assert exc_info.value.value == separator


def test_from_dict_keeps_an_empty_separator_and_rejects_it():
    with pytest.raises(InvalidSchemaOptionError) as exc_info:
        FieldDefinition.from_dict({"type": "string[]", "separator": ""})

    assert exc_info.value.option == "separator"


def test_schema_with_an_empty_separator_is_rejected():
    with pytest.raises(InvalidSchemaOptionError):
        Schema("Tagged", {"tags": {"type": "string[]", "separator": ""}}, data_structure="HASH")


def test_definitions_are_frozen():
    field_def = StringField(alias="s")
    with pytest.raises(AttributeError):
        field_def.alias = "other"  # type: ignore[misc]


def test_to_dict_includes_alias_and_separator_only_when_relevant():
    assert NumberField().to_dict() == {"type": "number"}
    assert DateField(alias="when").to_dict() == {"type": "date", "alias": "when"}
    assert StringArrayField(separator=",").to_dict() == {"type": "string[]", "separator": ","}


def test_from_dict_builds_matching_definition():
    field_def = FieldDefinition.from_dict({"type": "string[]", "alias": "tags", "separator": ","})

    assert isinstance(field_def, StringArrayField)
    assert field_def.alias == "tags"
    assert field_def.separator == ","
    assert isinstance(FieldDefinition.from_dict({"type": "object"}), ObjectField)


def test_from_dict_rejects_unknown_type():
    with pytest.raises(InvalidSchemaOptionError, match="'foo' is not valid") as exc_info:
        FieldDefinition.from_dict({"type": "foo"})

    assert exc_info.value.option == "type"
    assert exc_info.value.value == "foo"


def test_normalize_definition_keeps_order_and_converts_dicts():
    normalized = normalize_definition({"b": {"type": "number"}, "a": TextField()})

    assert list(normalized) == ["b", "a"]
    assert isinstance(normalized["b"], NumberField)


def test_normalize_definition_rejects_other_values():
    with pytest.raises(InvalidSchemaOptionError):
        normalize_definition({"a": "string"})
