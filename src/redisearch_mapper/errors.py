"""Exceptions raised by the mapping and query layers."""

from __future__ import annotations

from typing import Any


class MapperError(Exception):
    """Base exception for all mapper failures."""


class InvalidSchemaOptionError(MapperError, ValueError):
    """Raised when a schema is constructed with an invalid option or field definition."""

    def __init__(self, option: str, value: Any, message: str) -> None:
        self.option = option
        self.value = value
        super().__init__(message)


class TypeMismatchError(MapperError, TypeError):
    """Raised when a value does not fit the declared type of a field."""

    def __init__(self, field_name: str, field_type: str, value: Any) -> None:
        self.field_name = field_name
        self.field_type = field_type
        self.value = value
        super().__init__(f"Property '{field_name}' expected type of '{field_type}' but received value of '{value!r}'.")


class DecodeError(MapperError, ValueError):
    """Raised when a stored value cannot be read back as its declared type."""

    def __init__(self, field_name: str, raw_value: Any, reason: str) -> None:
        self.field_name = field_name
        self.raw_value = raw_value
        self.reason = reason
        super().__init__(f"{reason}: value of {raw_value!r} read from Redis for field '{field_name}'.")


class UnknownFieldError(MapperError, KeyError):
    """Raised when a field name is not part of the schema."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(field_name)

    def __str__(self) -> str:
        return f"The field '{self.field_name}' is not part of the schema."


class UnsupportedFieldTypeError(MapperError):
    """Raised when a field type has no query support."""

    def __init__(self, field_name: str, field_type: str) -> None:
        self.field_name = field_name
        self.field_type = field_type
        super().__init__(f"The field '{field_name}' has type '{field_type}', which cannot be searched.")


class EmptySubSearchError(MapperError):
    """Raised when a nested search did not add any predicate."""

    def __init__(self) -> None:
        super().__init__("Sub-search must define at least one condition.")


class ConditionReusedError(MapperError):
    """Raised when a condition builder is finished a second time."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(
            f"The condition on field '{field_name}' was already added to the search. "
            "Call where, and_ or or_ again to add another one."
        )


class QuerySyntaxError(MapperError):
    """Raised when RediSearch rejects a compiled query as a syntax error."""

    def __init__(self, query: str, reply: str) -> None:
        self.query = query
        self.reply = reply
        super().__init__(
            f'The query to RediSearch had a syntax error: "{reply}".\n'
            "This is often the result of using a stop word in the query. Either change the query "
            "to not use a stop word or change the stop words in the schema definition."
        )
