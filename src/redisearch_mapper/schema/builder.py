"""Derive RediSearch index declarations from a schema definition."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, assert_never

from redisearch_mapper.schema.fields import (
    FieldDefinition,
    FieldType,
    SchemaDefinition,
    StringArrayField,
    StringField,
)
from redisearch_mapper.schema.options import DataStructure, StopWordMode, parse_data_structure


if TYPE_CHECKING:
    from redisearch_mapper.schema.schema import Schema


logger = logging.getLogger(__name__)

IndexDeclaration = list[str]


def _search_type(field_def: FieldDefinition, data_structure: DataStructure) -> list[str] | None:
    """Return the RediSearch type and options for a field, or None if it cannot be indexed."""
    field_type = field_def.field_type

    if field_type == FieldType.NUMBER or field_type == FieldType.DATE:
        return ["NUMERIC"]
    if field_type == FieldType.BOOLEAN:
        return ["TAG"]
    if field_type == FieldType.POINT:
        return ["GEO"]
    if field_type == FieldType.TEXT:
        return ["TEXT"]
    if field_type == FieldType.STRING:
        assert isinstance(field_def, StringField)
        return ["TAG", "SEPARATOR", field_def.separator]
    if field_type == FieldType.STRING_ARRAY:
        assert isinstance(field_def, StringArrayField)
        # JSON arrays are indexed element by element through the [*] path.
        if data_structure == DataStructure.JSON:
            return ["TAG"]
        return ["TAG", "SEPARATOR", field_def.separator]
    if field_type == FieldType.OBJECT:
        return None
    assert_never(field_type)


def build_index_declaration(
    field_name: str, field_def: FieldDefinition, data_structure: DataStructure
) -> IndexDeclaration | None:
    search_type = _search_type(field_def, data_structure)
    if search_type is None:
        return None

    alias = field_def.storage_name(field_name)
    if data_structure == DataStructure.HASH:
        return [alias, *search_type]

    suffix = "[*]" if field_def.field_type == FieldType.STRING_ARRAY else ""
    return [f"$.{alias}{suffix}", "AS", alias, *search_type]


def build_index_schema(
    definition: SchemaDefinition, data_structure: DataStructure | str
) -> list[IndexDeclaration]:
    """Build one declaration per indexable field, in declaration order.

    ``object`` fields are stored but have no RediSearch type, so they are skipped.
    """
    structure = parse_data_structure(data_structure)
    declarations: list[IndexDeclaration] = []
    for field_name, field_def in definition.items():
        declaration = build_index_declaration(field_name, field_def, structure)
        if declaration is None:
            logger.debug("Field '%s' has type '%s' and is not indexed", field_name, field_def.field_type.value)
            continue
        declarations.append(declaration)
    return declarations


class IndexSchemaBuilder:
    """Builds index declarations and ``FT.CREATE`` arguments for a Schema."""

    def __init__(self, schema: Schema) -> None:
        self.schema = schema

    def build(self) -> list[IndexDeclaration]:
        return build_index_schema(self.schema.definition, self.schema.data_structure)

    def index_arguments(self) -> list[str]:
        """Return everything that follows the index name in ``FT.CREATE``."""
        schema = self.schema
        arguments = ["ON", schema.data_structure.value, "PREFIX", "1", f"{schema.prefix}:"]

        if schema.use_stop_words == StopWordMode.OFF:
            arguments.extend(["STOPWORDS", "0"])
        elif schema.use_stop_words == StopWordMode.CUSTOM:
            arguments.extend(["STOPWORDS", str(len(schema.stop_words)), *schema.stop_words])

        arguments.append("SCHEMA")
        for declaration in self.build():
            arguments.extend(declaration)
        return arguments
