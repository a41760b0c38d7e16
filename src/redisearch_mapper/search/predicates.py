"""
Predicate tree for RediSearch queries.

A query is a tree of immutable nodes:
- FieldPredicate: one condition on one field
- And / Or: a combination of two subtrees

``render`` turns a tree into RediSearch query syntax. Combinations are always
parenthesized, so the rendered string keeps the exact shape of the tree and
never depends on RediSearch's own operator precedence.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
import re
from typing import Any, assert_never

from redisearch_mapper.schema.fields import FieldType
from redisearch_mapper.schema.options import DataStructure
from redisearch_mapper.schema.values import date_to_epoch_ms, format_number


WILDCARD = "*"

_TAG_PUNCTUATION = re.compile(r"[,.?<>{}\[\]\"':;!@#$%^&*()\-+=~|/\\ ]")
_TEXT_PUNCTUATION = re.compile(r"[,.?<>{}\[\]\"':;!@#$%^&*()\-+=~|/\\]")


class Operator(str, Enum):
    """Comparison applied by a field predicate."""

    EQ = "eq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    BETWEEN = "between"
    MATCH = "match"
    MATCH_EXACT = "match_exact"
    CONTAINS = "contains"
    CONTAINS_ONE_OF = "contains_one_of"
    IN_RADIUS = "in_radius"


_RANGE_OPERATORS = frozenset(
    {Operator.EQ, Operator.GT, Operator.GTE, Operator.LT, Operator.LTE, Operator.BETWEEN}
)

SUPPORTED_OPERATORS: dict[FieldType, frozenset[Operator]] = {
    FieldType.NUMBER: _RANGE_OPERATORS,
    FieldType.DATE: _RANGE_OPERATORS,
    FieldType.STRING: frozenset({Operator.EQ}),
    FieldType.BOOLEAN: frozenset({Operator.EQ}),
    FieldType.TEXT: frozenset({Operator.MATCH, Operator.MATCH_EXACT}),
    FieldType.STRING_ARRAY: frozenset({Operator.CONTAINS, Operator.CONTAINS_ONE_OF}),
    FieldType.POINT: frozenset({Operator.IN_RADIUS}),
    FieldType.OBJECT: frozenset(),
}


def escape_tag(value: str) -> str:
    """Backslash-escape everything RediSearch treats as punctuation in a TAG value."""
    return _TAG_PUNCTUATION.sub(r"\\\g<0>", value)


def escape_text(value: str) -> str:
    """Like escape_tag, but keeps spaces so several words can be matched."""
    return _TEXT_PUNCTUATION.sub(r"\\\g<0>", value)


class Predicate:
    """Base class for predicate nodes."""

    def render(self) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class FieldPredicate(Predicate):
    """A condition on a single field.

    Attributes:
        field: Field name in the schema.
        alias: Field name in the index.
        field_type: Declared type of the field.
        operator: Comparison to apply.
        operands: Operator arguments, already validated by the where builder.
        negated: Render as the negation of the condition.
        data_structure: Storage encoding, which decides how booleans are indexed.
    """

    field: str
    alias: str
    field_type: FieldType
    operator: Operator
    operands: tuple[Any, ...]
    negated: bool = False
    data_structure: DataStructure = DataStructure.JSON

    def __post_init__(self) -> None:
        if self.operator not in SUPPORTED_OPERATORS[self.field_type]:
            msg = f"Operator '{self.operator.value}' cannot be applied to {self.field_type.value} field '{self.field}'."
            raise ValueError(msg)

    def render(self) -> str:
        return render(self)


@dataclass(frozen=True)
class And(Predicate):
    left: Predicate
    right: Predicate

    def render(self) -> str:
        return render(self)


@dataclass(frozen=True)
class Or(Predicate):
    left: Predicate
    right: Predicate

    def render(self) -> str:
        return render(self)


def render(node: Predicate | None) -> str:
    """Render a predicate tree as a RediSearch query. An empty tree matches everything."""
    if node is None:
        return WILDCARD
    if isinstance(node, And):
        return f"({render(node.left)} {render(node.right)})"
    if isinstance(node, Or):
        return f"({render(node.left)} | {render(node.right)})"
    if isinstance(node, FieldPredicate):
        sign = "-" if node.negated else ""
        return f"({sign}@{node.alias}:{_render_condition(node)})"
    msg = f"Cannot render predicate node {node!r}."
    raise TypeError(msg)


def _render_number(value: Any) -> str:
    if isinstance(value, datetime):
        return str(date_to_epoch_ms(value))
    return format_number(value)


def _render_range(operator: Operator, operands: tuple[Any, ...]) -> str:
    values = [_render_number(operand) for operand in operands]
    if operator == Operator.EQ:
        return f"[{values[0]} {values[0]}]"
    if operator == Operator.GT:
        return f"[({values[0]} +inf]"
    if operator == Operator.GTE:
        return f"[{values[0]} +inf]"
    if operator == Operator.LT:
        return f"[-inf ({values[0]}]"
    if operator == Operator.LTE:
        return f"[-inf {values[0]}]"
    return f"[{values[0]} {values[1]}]"


def _render_condition(node: FieldPredicate) -> str:
    field_type = node.field_type
    operands = node.operands

    if field_type == FieldType.NUMBER or field_type == FieldType.DATE:
        return _render_range(node.operator, operands)
    if field_type == FieldType.STRING:
        return f"{{{escape_tag(operands[0])}}}"
    if field_type == FieldType.STRING_ARRAY:
        return f"{{{'|'.join(escape_tag(operand) for operand in operands)}}}"
    if field_type == FieldType.TEXT:
        if node.operator == Operator.MATCH_EXACT:
            return f'"{escape_text(operands[0])}"'
        return escape_text(operands[0])
    if field_type == FieldType.BOOLEAN:
        if node.data_structure == DataStructure.HASH:
            return "{1}" if operands[0] else "{0}"
        return "{true}" if operands[0] else "{false}"
    if field_type == FieldType.POINT:
        longitude, latitude, radius, units = operands
        return f"[{format_number(longitude)} {format_number(latitude)} {format_number(radius)} {units}]"
    if field_type == FieldType.OBJECT:
        msg = f"Object field '{node.field}' cannot be rendered."
        raise ValueError(msg)
    assert_never(field_type)
