"""Entities: typed field bags validated against their schema."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from redisearch_mapper.errors import UnknownFieldError
from redisearch_mapper.schema.schema import Schema
from redisearch_mapper.schema.values import coerce_value


class Entity:
    """A record whose fields are declared by a Schema.

    Values are validated and normalized on every write. Setting a field to
    ``None`` unsets it; any other value, including ``0``, ``""`` and
    ``False``, is stored.

    Example:
        album = Entity(schema, "01FJYWEYRHYFT8YTEGQBABJ43J")
        album["year"] = 1984
        album.set("released", "1984-06-25T00:00:00Z")
        album.get("title")  # None: unset
    """

    def __init__(
        self,
        schema: Schema,
        entity_id: str | None = None,
        entity_data: Mapping[str, Any] | None = None,
        *,
        key: str | None = None,
    ) -> None:
        self.schema = schema
        self.entity_id = entity_id if entity_id is not None else schema.generate_id()
        self.key = key if key is not None else schema.key_for(self.entity_id)
        self._data: dict[str, Any] = {}
        for name, value in (entity_data or {}).items():
            self.set(name, value)

    def get(self, name: str) -> Any:
        """Return the value of a field, or None when it is unset."""
        self._field(name)
        return self._data.get(name)

    def set(self, name: str, value: Any) -> None:
        """Validate and store a value. ``None`` unsets the field."""
        field_def = self._field(name)
        if value is None:
            self._data.pop(name, None)
            return
        self._data[name] = coerce_value(name, field_def, value)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        self.set(name, None)

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return (
            self.schema.name == other.schema.name
            and self.entity_id == other.entity_id
            and self._data == other._data
        )

    def __repr__(self) -> str:
        return f"Entity({self.schema.name}, entity_id={self.entity_id!r}, data={self._data!r})"

    @property
    def entity_data(self) -> dict[str, Any]:
        """A copy of the set fields, keyed by field name."""
        return dict(self._data)

    def to_dict(self) -> dict[str, Any]:
        return {"entity_id": self.entity_id, **self._data}

    def _field(self, name: str):
        if name not in self.schema.definition:
            raise UnknownFieldError(name)
        return self.schema.definition[name]
