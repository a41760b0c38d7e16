"""Transport protocol consumed by searches, and the raw search reply shape.

Command execution, connections and retries live behind ``RedisClient``;
this package only builds the arguments and reads the replies.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import orjson

from redisearch_mapper.schema.options import DataStructure, parse_data_structure


@dataclass(frozen=True)
class RawRecord:
    """One record of a search reply: its Redis key and its undecoded payload."""

    key: str
    payload: Any


@dataclass(frozen=True)
class RawSearchBatch:
    """A page of search results as returned by the backend.

    ``count`` is the total number of matches, not the number of records in
    this page.
    """

    count: int
    records: Sequence[RawRecord] = field(default_factory=tuple)

    @classmethod
    def from_reply(cls, reply: Sequence[Any], data_structure: DataStructure | str) -> RawSearchBatch:
        """Parse an ``FT.SEARCH`` reply.

        The reply is ``[count, key1, fields1, key2, fields2, ...]``. Hash
        fields are a flat name/value list; JSON fields are ``["$", "<document>"]``.
        A ``LIMIT 0 0`` reply carries only the count.
        """
        structure = parse_data_structure(data_structure)
        if not reply:
            return cls(count=0)

        count = int(reply[0])
        records: list[RawRecord] = []
        for index in range(1, len(reply) - 1, 2):
            key = _text(reply[index])
            fields = reply[index + 1] or []
            pairs = {_text(fields[i]): fields[i + 1] for i in range(0, len(fields) - 1, 2)}
            if structure == DataStructure.HASH:
                payload: Any = {name: _text(value) for name, value in pairs.items()}
            else:
                document = pairs.get("$")
                payload = orjson.loads(document) if document is not None else None
            records.append(RawRecord(key=key, payload=payload))
        return cls(count=count, records=tuple(records))


def _text(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return value


@runtime_checkable
class RedisClient(Protocol):
    """The calls a Redis transport must provide."""

    async def get_record(self, key: str) -> dict[str, Any] | None: ...

    async def set_record(self, key: str, record: dict[str, Any]) -> None: ...

    async def run_search(self, index_name: str, query: str, offset: int, limit: int) -> RawSearchBatch: ...

    async def create_index(self, index_name: str, declarations: list[str]) -> None: ...

    async def drop_index(self, index_name: str) -> None: ...
