"""Field-specific condition builders returned by ``Search.where``/``and_``/``or_``.

A builder collects an operator and its operands, freezes them into a
``FieldPredicate`` and hands that node to the search that created it. The
search alone decides how the node joins the tree.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar

from redisearch_mapper.errors import ConditionReusedError, TypeMismatchError
from redisearch_mapper.schema.fields import FieldDefinition, FieldType, Point
from redisearch_mapper.schema.options import DataStructure
from redisearch_mapper.schema.values import coerce_date, coerce_point, is_number, is_stringable, to_string
from redisearch_mapper.search.predicates import FieldPredicate, Operator


if TYPE_CHECKING:
    from datetime import datetime

    from redisearch_mapper.search.search import Search


CompleteFn = Callable[[FieldPredicate], "Search"]


class WhereField:
    """Base class for condition builders.

    ``not_`` negates the condition; ``is_``, ``does`` and friends only make
    chains read naturally::

        search.where("year").is_not.gt(1990)
    """

    field_type: ClassVar[FieldType]

    def __init__(
        self,
        field: str,
        field_def: FieldDefinition,
        data_structure: DataStructure,
        complete: CompleteFn,
    ) -> None:
        self.field = field
        self.alias = field_def.storage_name(field)
        self.data_structure = data_structure
        self.negated = False
        self._complete = complete
        self._finished = False

    @property
    def not_(self) -> WhereField:
        self.negated = not self.negated
        return self

    @property
    def is_(self) -> WhereField:
        return self

    @property
    def does(self) -> WhereField:
        return self

    @property
    def is_not(self) -> WhereField:
        return self.not_

    @property
    def does_not(self) -> WhereField:
        return self.not_

    def _finish(self, operator: Operator, *operands: Any) -> Search:
        if self._finished:
            raise ConditionReusedError(self.field)
        node = FieldPredicate(
            field=self.field,
            alias=self.alias,
            field_type=self.field_type,
            operator=operator,
            operands=operands,
            negated=self.negated,
            data_structure=self.data_structure,
        )
        self._finished = True
        return self._complete(node)

    def _mismatch(self, value: Any) -> TypeMismatchError:
        return TypeMismatchError(self.field, self.field_type.value, value)


class _WhereRange(WhereField):
    """Shared numeric range operators for number and date fields."""

    def _operand(self, value: Any) -> Any:  # pragma: no cover - interface
        raise NotImplementedError

    def eq(self, value: Any) -> Search:
        return self._finish(Operator.EQ, self._operand(value))

    def gt(self, value: Any) -> Search:
        return self._finish(Operator.GT, self._operand(value))

    def gte(self, value: Any) -> Search:
        return self._finish(Operator.GTE, self._operand(value))

    def lt(self, value: Any) -> Search:
        return self._finish(Operator.LT, self._operand(value))

    def lte(self, value: Any) -> Search:
        return self._finish(Operator.LTE, self._operand(value))

    def between(self, lower: Any, upper: Any) -> Search:
        return self._finish(Operator.BETWEEN, self._operand(lower), self._operand(upper))

    equals = eq
    equal_to = eq


class WhereNumber(_WhereRange):
    field_type = FieldType.NUMBER

    def _operand(self, value: Any) -> int | float:
        if not is_number(value):
            raise self._mismatch(value)
        return value

    greater_than = _WhereRange.gt
    greater_than_or_equal_to = _WhereRange.gte
    less_than = _WhereRange.lt
    less_than_or_equal_to = _WhereRange.lte


class WhereDate(_WhereRange):
    """Conditions on a date field. Operands may be datetimes, ISO strings or epoch milliseconds."""

    field_type = FieldType.DATE

    def _operand(self, value: Any) -> datetime:
        moment = coerce_date(value)
        if moment is None:
            raise self._mismatch(value)
        return moment

    on = _WhereRange.eq
    after = _WhereRange.gt
    on_or_after = _WhereRange.gte
    before = _WhereRange.lt
    on_or_before = _WhereRange.lte


class WhereString(WhereField):
    field_type = FieldType.STRING

    def eq(self, value: str | int | float | bool) -> Search:
        if not is_stringable(value):
            raise self._mismatch(value)
        return self._finish(Operator.EQ, to_string(value))

    equals = eq
    equal_to = eq


class WhereText(WhereField):
    field_type = FieldType.TEXT

    def match(self, value: str | int | float | bool) -> Search:
        """Full-text match: stemmed words, in any position."""
        if not is_stringable(value):
            raise self._mismatch(value)
        return self._finish(Operator.MATCH, to_string(value))

    def match_exact(self, value: str | int | float | bool) -> Search:
        """Full-text match of the exact phrase."""
        if not is_stringable(value):
            raise self._mismatch(value)
        return self._finish(Operator.MATCH_EXACT, to_string(value))

    matches = match
    matches_exactly = match_exact


class WhereBoolean(WhereField):
    field_type = FieldType.BOOLEAN

    def eq(self, value: bool) -> Search:
        if not isinstance(value, bool):
            raise self._mismatch(value)
        return self._finish(Operator.EQ, value)

    def true(self) -> Search:
        return self.eq(True)

    def false(self) -> Search:
        return self.eq(False)

    equals = eq
    equal_to = eq


class WhereStringArray(WhereField):
    field_type = FieldType.STRING_ARRAY

    def contains(self, value: str | int | float | bool) -> Search:
        if not is_stringable(value):
            raise self._mismatch(value)
        return self._finish(Operator.CONTAINS, to_string(value))

    def contains_one_of(self, *values: str | int | float | bool) -> Search:
        if not values or not all(is_stringable(value) for value in values):
            raise self._mismatch(values)
        return self._finish(Operator.CONTAINS_ONE_OF, *(to_string(value) for value in values))

    contain = contains
    contain_one_of = contains_one_of


class Circle:
    """A search area for point fields: an origin and a radius.

    Defaults to a one meter radius around longitude 0, latitude 0::

        lambda circle: circle.origin(-122.27, 37.80).radius(10).miles
    """

    def __init__(self) -> None:
        self.longitude_value: float = 0.0
        self.latitude_value: float = 0.0
        self.radius_value: float = 1.0
        self.units_value = "m"

    def longitude(self, value: float) -> Circle:
        self.longitude_value = self._number("longitude", value)
        return self

    def latitude(self, value: float) -> Circle:
        self.latitude_value = self._number("latitude", value)
        return self

    def origin(self, point_or_longitude: Point | Any, latitude: float | None = None) -> Circle:
        """Set the center from a Point (or anything with longitude/latitude) or two numbers."""
        if latitude is None:
            point = coerce_point(point_or_longitude)
            if point is None:
                raise TypeMismatchError("origin", FieldType.POINT.value, point_or_longitude)
            return self.longitude(point.longitude).latitude(point.latitude)
        return self.longitude(point_or_longitude).latitude(latitude)

    def radius(self, value: float) -> Circle:
        self.radius_value = self._number("radius", value)
        return self

    def _units(self, units: str) -> Circle:
        self.units_value = units
        return self

    @property
    def meters(self) -> Circle:
        return self._units("m")

    @property
    def kilometers(self) -> Circle:
        return self._units("km")

    @property
    def feet(self) -> Circle:
        return self._units("ft")

    @property
    def miles(self) -> Circle:
        return self._units("mi")

    meter = m = meters
    kilometer = km = kilometers
    foot = ft = feet
    mile = mi = miles

    @staticmethod
    def _number(name: str, value: Any) -> float:
        if not is_number(value):
            raise TypeMismatchError(name, FieldType.NUMBER.value, value)
        return value


class WherePoint(WhereField):
    field_type = FieldType.POINT

    def in_radius(self, circle_fn: Callable[[Circle], Circle]) -> Search:
        circle = circle_fn(Circle())
        if not isinstance(circle, Circle):
            raise self._mismatch(circle)
        return self._finish(
            Operator.IN_RADIUS,
            circle.longitude_value,
            circle.latitude_value,
            circle.radius_value,
            circle.units_value,
        )

    in_circle = in_radius
