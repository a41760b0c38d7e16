"""Schema tying an entity's field definitions to its Redis keyspace and index."""

from __future__ import annotations

import base64
from collections.abc import Callable, Iterator, Mapping, Sequence
import hashlib
from typing import Any
from uuid import uuid4

import orjson

from redisearch_mapper.config import get_settings
from redisearch_mapper.errors import InvalidSchemaOptionError, UnknownFieldError
from redisearch_mapper.schema.builder import IndexSchemaBuilder
from redisearch_mapper.schema.fields import FieldDefinition, SchemaDefinition, normalize_definition
from redisearch_mapper.schema.options import (
    DataStructure,
    StopWordMode,
    parse_data_structure,
    parse_stop_word_mode,
)


IdStrategy = Callable[[], str]


def _uuid_strategy() -> str:
    return uuid4().hex


class Schema:
    """
    Defines how an entity is mapped to Redis and indexed by RediSearch.

    Example:
        schema = Schema(
            "Album",
            {
                "artist": StringField(),
                "title": TextField(),
                "year": NumberField(),
                "outOfPrint": BooleanField(),
                "genres": StringArrayField(),
                "released": DateField(),
                "studio": PointField(alias="studioLocation"),
            },
            data_structure="HASH",
        )

    Options are validated once, here; a Schema is read-only afterwards and
    can be shared between concurrent searches.

    Args:
        name: Entity name, used as the default keyspace prefix.
        definition: Field name to FieldDefinition (or plain dict), in declaration order.
        prefix: Keyspace prefix (default: ``name``).
        index_name: RediSearch index name (default: ``{prefix}:index``).
        index_hash_name: Key holding the index hash (default: ``{prefix}:index:hash``).
        data_structure: ``HASH`` or ``JSON`` (default from settings).
        use_stop_words: ``OFF``, ``DEFAULT`` or ``CUSTOM`` (default from settings).
        stop_words: Stop words used when ``use_stop_words`` is ``CUSTOM``.
        id_strategy: Zero-argument callable generating entity ids.
    """

    def __init__(
        self,
        name: str,
        definition: Mapping[str, FieldDefinition | Mapping[str, Any]],
        *,
        prefix: str | None = None,
        index_name: str | None = None,
        index_hash_name: str | None = None,
        data_structure: DataStructure | str | None = None,
        use_stop_words: StopWordMode | str | None = None,
        stop_words: Sequence[str] | None = None,
        id_strategy: IdStrategy | None = None,
    ) -> None:
        settings = get_settings()

        if not isinstance(name, str) or not name:
            raise InvalidSchemaOptionError("name", name, "Schema name must be a non-empty string.")
        self.name = name
        self.definition: SchemaDefinition = normalize_definition(definition)

        self.prefix = name if prefix is None else prefix
        if not self.prefix:
            raise InvalidSchemaOptionError("prefix", prefix, "Prefix must be a non-empty string.")
        self.index_name = f"{self.prefix}:index" if index_name is None else index_name
        if not self.index_name:
            raise InvalidSchemaOptionError("index_name", index_name, "Index name must be a non-empty string.")
        self.index_hash_name = f"{self.prefix}:index:hash" if index_hash_name is None else index_hash_name

        self.data_structure = parse_data_structure(data_structure or settings.default_data_structure)
        self.use_stop_words = parse_stop_word_mode(use_stop_words or settings.default_stop_words)
        self.stop_words: list[str] = list(stop_words or [])

        if id_strategy is not None and not callable(id_strategy):
            msg = "ID strategy must be a function that takes no arguments and returns a string."
            raise InvalidSchemaOptionError("id_strategy", id_strategy, msg)
        self._id_strategy: IdStrategy = id_strategy or _uuid_strategy

    def __getitem__(self, name: str) -> FieldDefinition:
        """Get field definition by name."""
        try:
            return self.definition[name]
        except KeyError:
            raise UnknownFieldError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self.definition

    def __iter__(self) -> Iterator[str]:
        return iter(self.definition)

    def __len__(self) -> int:
        return len(self.definition)

    def __repr__(self) -> str:
        return f"Schema(name={self.name!r}, data_structure={self.data_structure.value!r}, fields={list(self.definition)!r})"

    @property
    def redis_schema(self) -> list[str]:
        """Flattened field declarations for ``FT.CREATE ... SCHEMA``."""
        return [token for declaration in IndexSchemaBuilder(self).build() for token in declaration]

    @property
    def index_hash(self) -> str:
        """Fingerprint of everything that shapes the index.

        Stored in Redis under ``index_hash_name`` so callers can tell whether
        an existing index is stale.
        """
        data = {
            "definition": {name: field_def.to_dict() for name, field_def in self.definition.items()},
            "prefix": self.prefix,
            "indexName": self.index_name,
            "indexHashName": self.index_hash_name,
            "dataStructure": self.data_structure.value,
            "useStopWords": self.use_stop_words.value,
            "stopWords": self.stop_words,
        }
        digest = hashlib.sha1(orjson.dumps(data)).digest()  # noqa: S324 - fingerprint, not security
        return base64.b64encode(digest).decode("ascii")

    def key_for(self, entity_id: str) -> str:
        """Return the Redis key for an entity id."""
        return f"{self.prefix}:{entity_id}"

    def entity_id_from_key(self, key: str) -> str:
        """Strip the keyspace prefix from a Redis key."""
        return key.removeprefix(f"{self.prefix}:")

    def generate_id(self) -> str:
        """Generate a new entity id with the configured strategy."""
        return self._id_strategy()
