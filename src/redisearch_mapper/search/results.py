"""Decode pages of raw search results into entities."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from redisearch_mapper.client import RawSearchBatch
from redisearch_mapper.entity import Entity
from redisearch_mapper.repository.converters import HashConverter, JsonConverter
from redisearch_mapper.schema.options import DataStructure, parse_data_structure
from redisearch_mapper.schema.schema import Schema


logger = logging.getLogger(__name__)


class SearchResults(BaseModel):
    """A decoded page of results.

    ``count`` is the total number of matches reported by RediSearch, which
    may be larger than ``len(entities)``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    count: int
    entities: list[Entity]


class ResultConverter:
    """Turns a RawSearchBatch into entities of one schema."""

    def __init__(self, schema: Schema) -> None:
        self.schema = schema
        self._hash = HashConverter(schema.definition)
        self._json = JsonConverter(schema.definition)

    def convert(self, data_structure: DataStructure | str, batch: RawSearchBatch) -> SearchResults:
        """Decode every record of the batch.

        Raises:
            DecodeError: A record holds a malformed value. The whole batch fails.
        """
        structure = parse_data_structure(data_structure)
        converter = self._hash if structure == DataStructure.HASH else self._json

        entities = [
            Entity(
                self.schema,
                self.schema.entity_id_from_key(record.key),
                converter.decode(record.payload),
                key=record.key,
            )
            for record in batch.records
        ]
        logger.debug(
            "Converted %d of %d %s results for %s",
            len(entities),
            batch.count,
            structure.value,
            self.schema.name,
        )
        return SearchResults(count=batch.count, entities=entities)
