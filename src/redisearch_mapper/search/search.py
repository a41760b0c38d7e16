"""Fluent and raw searches over a schema's RediSearch index."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
import logging
from typing import TYPE_CHECKING, assert_never

from redisearch_mapper.config import get_settings
from redisearch_mapper.errors import EmptySubSearchError, QuerySyntaxError, UnsupportedFieldTypeError
from redisearch_mapper.observability.context import bind_search_context
from redisearch_mapper.observability.tracing import create_span
from redisearch_mapper.schema.fields import FieldType
from redisearch_mapper.search.predicates import And, FieldPredicate, Or, Predicate, render
from redisearch_mapper.search.results import ResultConverter, SearchResults
from redisearch_mapper.search.where import (
    WhereBoolean,
    WhereDate,
    WhereField,
    WhereNumber,
    WherePoint,
    WhereString,
    WhereStringArray,
    WhereText,
)


if TYPE_CHECKING:
    from redisearch_mapper.client import RawSearchBatch, RedisClient
    from redisearch_mapper.entity import Entity
    from redisearch_mapper.schema.schema import Schema


logger = logging.getLogger(__name__)

SubSearchFn = Callable[["Search"], "Search"]
Combinator = type[And] | type[Or]


class AbstractSearch(ABC):
    """Runs a query against the schema's index and decodes the results."""

    def __init__(self, schema: Schema, client: RedisClient) -> None:
        self.schema = schema
        self.client = client

    @property
    @abstractmethod
    def query(self) -> str:
        """The RediSearch query string."""

    async def count(self) -> int:
        """Number of entities matching the query."""
        results = await self._run(0, 0)
        return results.count

    async def page(self, offset: int, count: int) -> list[Entity]:
        """A page of matching entities."""
        results = await self._run(offset, count)
        return results.entities

    async def first(self) -> Entity | None:
        """The first matching entity, or None."""
        entities = await self.page(0, 1)
        return entities[0] if entities else None

    async def all(self, page_size: int | None = None) -> list[Entity]:
        """Every matching entity, fetched ``page_size`` at a time."""
        size = page_size or get_settings().default_page_size
        entities: list[Entity] = []
        offset = 0
        while True:
            found = await self.page(offset, size)
            entities.extend(found)
            if len(found) < size:
                break
            offset += size
        return entities

    @property
    def return_(self) -> AbstractSearch:
        """Returns this search. Reads well in chains: ``search.return_.all()``."""
        return self

    async def return_count(self) -> int:
        return await self.count()

    async def return_page(self, offset: int, count: int) -> list[Entity]:
        return await self.page(offset, count)

    async def return_first(self) -> Entity | None:
        return await self.first()

    async def return_all(self, page_size: int | None = None) -> list[Entity]:
        return await self.all(page_size)

    async def _run(self, offset: int, count: int) -> SearchResults:
        with bind_search_context(index=self.schema.index_name, query=self.query):
            batch = await self._call_search(offset, count)
            return ResultConverter(self.schema).convert(self.schema.data_structure, batch)

    async def _call_search(self, offset: int, count: int) -> RawSearchBatch:
        query = self.query
        attributes = {
            "search.index": self.schema.index_name,
            "search.query": query,
            "search.offset": offset,
            "search.limit": count,
        }
        logger.debug("FT.SEARCH %s %s LIMIT %d %d", self.schema.index_name, query, offset, count)
        with create_span("redisearch.search", attributes=attributes):
            try:
                return await self.client.run_search(self.schema.index_name, query, offset, count)
            except Exception as exc:
                message = str(exc)
                if message.startswith("Syntax error"):
                    raise QuerySyntaxError(query, message) from exc
                raise


class RawSearch(AbstractSearch):
    """Runs a hand-written RediSearch query."""

    def __init__(self, schema: Schema, client: RedisClient, query: str = "*") -> None:
        super().__init__(schema, client)
        self._raw_query = query

    @property
    def query(self) -> str:
        return self._raw_query


class Search(AbstractSearch):
    """
    Fluent search. Conditions are combined strictly left to right:

        search.where("a").eq(1).or_("b").eq(2).and_("c").eq(3)

    compiles to ``(((@a:[1 1]) | (@b:[2 2])) (@c:[3 3]))``: each call wraps
    everything before it. Use a sub-search to group differently:

        search.where("a").eq(1).or_(lambda s: s.where("b").eq(2).and_("c").eq(3))
    """

    def __init__(self, schema: Schema, client: RedisClient | None = None) -> None:
        super().__init__(schema, client)  # type: ignore[arg-type]
        self._root: Predicate | None = None

    @property
    def root(self) -> Predicate | None:
        return self._root

    @property
    def query(self) -> str:
        return render(self._root)

    def compile(self) -> str:
        """Render the current predicate tree. Pure: calling it twice gives the same string."""
        query = self.query
        logger.debug("Compiled %s query: %s", self.schema.name, query)
        return query

    def where(self, field_or_fn: str | SubSearchFn) -> WhereField | Search:
        """Add a condition (or sub-search) joined with AND."""
        return self._any_where(And, field_or_fn)

    def and_(self, field_or_fn: str | SubSearchFn) -> WhereField | Search:
        """Add a condition (or sub-search) joined with AND."""
        return self._any_where(And, field_or_fn)

    def or_(self, field_or_fn: str | SubSearchFn) -> WhereField | Search:
        """Add a condition (or sub-search) joined with OR."""
        return self._any_where(Or, field_or_fn)

    def _any_where(self, combinator: Combinator, field_or_fn: str | SubSearchFn) -> WhereField | Search:
        if isinstance(field_or_fn, str):
            return self._create_where(combinator, field_or_fn)
        return self._attach_sub_search(combinator, field_or_fn)

    def _attach(self, combinator: Combinator, node: Predicate) -> Search:
        self._root = node if self._root is None else combinator(self._root, node)
        return self

    def _attach_sub_search(self, combinator: Combinator, sub_search_fn: SubSearchFn) -> Search:
        sub_search = sub_search_fn(Search(self.schema, self.client))
        if sub_search.root is None:
            raise EmptySubSearchError
        return self._attach(combinator, sub_search.root)

    def _create_where(self, combinator: Combinator, field: str) -> WhereField:
        field_def = self.schema[field]
        field_type = field_def.field_type

        builder: type[WhereField]
        if field_type == FieldType.NUMBER:
            builder = WhereNumber
        elif field_type == FieldType.DATE:
            builder = WhereDate
        elif field_type == FieldType.STRING:
            builder = WhereString
        elif field_type == FieldType.TEXT:
            builder = WhereText
        elif field_type == FieldType.BOOLEAN:
            builder = WhereBoolean
        elif field_type == FieldType.STRING_ARRAY:
            builder = WhereStringArray
        elif field_type == FieldType.POINT:
            builder = WherePoint
        elif field_type == FieldType.OBJECT:
            raise UnsupportedFieldTypeError(field, field_type.value)
        else:
            assert_never(field_type)

        def complete(node: FieldPredicate) -> Search:
            return self._attach(combinator, node)

        return builder(field, field_def, self.schema.data_structure, complete)
