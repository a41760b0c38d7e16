"""Storage encodings for entities."""

from redisearch_mapper.repository.converters import (
    EntityData,
    HashConverter,
    HashData,
    JsonConverter,
    JsonData,
    converter_for,
)


__all__ = ["EntityData", "HashConverter", "HashData", "JsonConverter", "JsonData", "converter_for"]
