"""Unit tests for RediSearch index declarations."""

import pytest

from redisearch_mapper.errors import InvalidSchemaOptionError
from redisearch_mapper.schema import (
    IndexSchemaBuilder,
    NumberField,
    ObjectField,
    Schema,
    StringArrayField,
    StringField,
    TextField,
    build_index_schema,
)
from tests.data import build_definition


def test_hash_declarations_follow_declaration_order():
    assert build_index_schema(build_definition(), "HASH") == [
        ["aString", "TAG", "SEPARATOR", "|"],
        ["someText", "TEXT"],
        ["aNumber", "NUMERIC"],
        ["aBoolean", "TAG"],
        ["aPoint", "GEO"],
        ["aDate", "NUMERIC"],
        ["anArray", "TAG", "SEPARATOR", "|"],
    ]


def test_json_declarations_use_paths():
    assert build_index_schema(build_definition(), "JSON") == [
        ["$.aString", "AS", "aString", "TAG", "SEPARATOR", "|"],
        ["$.someText", "AS", "someText", "TEXT"],
        ["$.aNumber", "AS", "aNumber", "NUMERIC"],
        ["$.aBoolean", "AS", "aBoolean", "TAG"],
        ["$.aPoint", "AS", "aPoint", "GEO"],
        ["$.aDate", "AS", "aDate", "NUMERIC"],
        ["$.anArray[*]", "AS", "anArray", "TAG"],
    ]


def test_json_string_array_indexes_every_element_without_separator():
    assert build_index_schema({"tags": StringArrayField()}, "JSON") == [["$.tags[*]", "AS", "tags", "TAG"]]


def test_hash_string_array_carries_separator():
    assert build_index_schema({"tags": StringArrayField(separator=",")}, "HASH") == [
        ["tags", "TAG", "SEPARATOR", ","]
    ]


def test_aliases_replace_field_names():
    definition = {"aNumber": NumberField(alias="n"), "aString": StringField(alias="s", separator=";")}

    assert build_index_schema(definition, "HASH") == [["n", "NUMERIC"], ["s", "TAG", "SEPARATOR", ";"]]
    assert build_index_schema(definition, "JSON") == [
        ["$.n", "AS", "n", "NUMERIC"],
        ["$.s", "AS", "s", "TAG", "SEPARATOR", ";"],
    ]


def test_object_fields_are_not_indexed():
    declarations = build_index_schema(build_definition(), "HASH")

    assert "anObject" not in [declaration[0] for declaration in declarations]
    assert build_index_schema({"anObject": ObjectField()}, "JSON") == []


def test_unknown_data_structure_is_rejected():
    with pytest.raises(InvalidSchemaOptionError):
        build_index_schema(build_definition(), "XML")


def test_schema_exposes_flattened_declarations():
    schema = Schema("Album", {"title": TextField(), "year": NumberField()}, data_structure="HASH")

    assert schema.redis_schema == ["title", "TEXT", "year", "NUMERIC"]


@pytest.mark.parametrize(
    ("options", "stop_words"),
    [
        ({}, []),
        ({"use_stop_words": "OFF"}, ["STOPWORDS", "0"]),
        ({"use_stop_words": "CUSTOM", "stop_words": ["the", "a"]}, ["STOPWORDS", "2", "the", "a"]),
    ],
)
def test_index_arguments(options, stop_words):
    schema = Schema("Album", {"title": TextField()}, data_structure="HASH", **options)

    assert IndexSchemaBuilder(schema).index_arguments() == [
        "ON",
        "HASH",
        "PREFIX",
        "1",
        "Album:",
        *stop_words,
        "SCHEMA",
        "title",
        "TEXT",
    ]
