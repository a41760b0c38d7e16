"""
Schema package.

- fields: Field types and field definitions
- values: Validation and normalization of values on write
- options: Data structure and stop word options
- builder: RediSearch index declarations
- schema: The Schema tying it all together
"""

from redisearch_mapper.schema.builder import IndexSchemaBuilder, build_index_schema
from redisearch_mapper.schema.fields import (
    BooleanField,
    DateField,
    FieldDefinition,
    FieldType,
    NumberField,
    ObjectField,
    Point,
    PointField,
    SchemaDefinition,
    StringArrayField,
    StringField,
    TextField,
)
from redisearch_mapper.schema.options import DataStructure, StopWordMode
from redisearch_mapper.schema.schema import Schema
from redisearch_mapper.schema.values import coerce_value


__all__ = [
    "BooleanField",
    "DataStructure",
    "DateField",
    "FieldDefinition",
    "FieldType",
    "IndexSchemaBuilder",
    "NumberField",
    "ObjectField",
    "Point",
    "PointField",
    "Schema",
    "SchemaDefinition",
    "StopWordMode",
    "StringArrayField",
    "StringField",
    "TextField",
    "build_index_schema",
    "coerce_value",
]
