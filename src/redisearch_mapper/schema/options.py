"""Schema-level options: storage data structure and stop word handling."""

from __future__ import annotations

from enum import Enum

from redisearch_mapper.errors import InvalidSchemaOptionError


class DataStructure(str, Enum):
    """Redis data structure used to store entities."""

    HASH = "HASH"
    JSON = "JSON"


class StopWordMode(str, Enum):
    """How RediSearch treats stop words for an index.

    OFF disables stop words, DEFAULT uses the RediSearch list and CUSTOM uses
    the stop words configured on the schema.
    """

    OFF = "OFF"
    DEFAULT = "DEFAULT"
    CUSTOM = "CUSTOM"


def parse_data_structure(value: DataStructure | str) -> DataStructure:
    try:
        return DataStructure(value)
    except ValueError:
        msg = f"'{value}' in an invalid data structure. Valid data structures are 'HASH' and 'JSON'."
        raise InvalidSchemaOptionError("data_structure", value, msg) from None


def parse_stop_word_mode(value: StopWordMode | str) -> StopWordMode:
    try:
        return StopWordMode(value)
    except ValueError:
        msg = f"'{value}' in an invalid value for stop words. Valid values are 'OFF', 'DEFAULT', and 'CUSTOM'."
        raise InvalidSchemaOptionError("use_stop_words", value, msg) from None
