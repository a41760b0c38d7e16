"""
Query building and result decoding.

- predicates: Immutable predicate tree and RediSearch rendering
- where: Field-specific condition builders
- search: Fluent and raw searches
- results: Decoding raw result pages into entities
"""

from redisearch_mapper.search.predicates import And, FieldPredicate, Operator, Or, Predicate, render
from redisearch_mapper.search.results import ResultConverter, SearchResults
from redisearch_mapper.search.search import AbstractSearch, RawSearch, Search, SubSearchFn
from redisearch_mapper.search.where import (
    Circle,
    WhereBoolean,
    WhereDate,
    WhereField,
    WhereNumber,
    WherePoint,
    WhereString,
    WhereStringArray,
    WhereText,
)


__all__ = [
    "AbstractSearch",
    "And",
    "Circle",
    "FieldPredicate",
    "Operator",
    "Or",
    "Predicate",
    "RawSearch",
    "ResultConverter",
    "Search",
    "SearchResults",
    "SubSearchFn",
    "WhereBoolean",
    "WhereDate",
    "WhereField",
    "WhereNumber",
    "WherePoint",
    "WhereString",
    "WhereStringArray",
    "WhereText",
    "render",
]
