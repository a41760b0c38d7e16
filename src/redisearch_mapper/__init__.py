"""
Map typed entities onto Redis hashes and JSON documents, and search them
with RediSearch.

- schema: Field definitions, schemas and index declarations
- repository: HASH and JSON storage encodings
- search: Fluent query builder and result decoding
- entity: Typed field bags
- client: The transport protocol the library expects
"""

import logging

from redisearch_mapper.client import RawRecord, RawSearchBatch, RedisClient
from redisearch_mapper.entity import Entity
from redisearch_mapper.errors import (
    ConditionReusedError,
    DecodeError,
    EmptySubSearchError,
    InvalidSchemaOptionError,
    MapperError,
    QuerySyntaxError,
    TypeMismatchError,
    UnknownFieldError,
    UnsupportedFieldTypeError,
)
from redisearch_mapper.repository import HashConverter, JsonConverter, converter_for
from redisearch_mapper.schema import (
    BooleanField,
    DataStructure,
    DateField,
    FieldType,
    IndexSchemaBuilder,
    NumberField,
    ObjectField,
    Point,
    PointField,
    Schema,
    StopWordMode,
    StringArrayField,
    StringField,
    TextField,
    build_index_schema,
)
from redisearch_mapper.search import RawSearch, ResultConverter, Search, SearchResults


__all__ = [
    "BooleanField",
    "ConditionReusedError",
    "DataStructure",
    "DateField",
    "DecodeError",
    "EmptySubSearchError",
    "Entity",
    "FieldType",
    "HashConverter",
    "IndexSchemaBuilder",
    "InvalidSchemaOptionError",
    "JsonConverter",
    "MapperError",
    "NumberField",
    "ObjectField",
    "Point",
    "PointField",
    "QuerySyntaxError",
    "RawRecord",
    "RawSearch",
    "RawSearchBatch",
    "RedisClient",
    "ResultConverter",
    "Schema",
    "SearchResults",
    "Search",
    "StopWordMode",
    "StringArrayField",
    "StringField",
    "TextField",
    "TypeMismatchError",
    "UnknownFieldError",
    "UnsupportedFieldTypeError",
    "build_index_schema",
    "converter_for",
]

# Library logging stays silent unless the application configures it.
logging.getLogger(__name__).addHandler(logging.NullHandler())
