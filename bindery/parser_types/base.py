# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `TypeParser`, the contract every value converter in Bindery implements.

A type parser converts between raw command-line text and one semantic type:

- `parse_to_type(raw)`: Convert text (or `None`) into a typed value. Empty or
  missing text yields the type's zero value.
- `parse_from_type(value)`: Render a typed value back to its canonical text.
- `choices`: Ordered valid values, empty when unconstrained.
- `validate(raw)`: Check text before conversion without mutating anything.
  Returns `None` when the text is acceptable, otherwise a user-facing message.

`SimpleTypeParser` covers the common case of a converter function plus a
formatter, and is the base for most built-in parsers.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Sequence, TypeVar

T = TypeVar("T")


def choices_message(choices: Sequence[str]) -> str:
    """Format the list of valid choices, one per line."""
    return "Must be one of:\n" + "\n".join(f"  {choice}" for choice in choices)


class TypeParser(ABC, Generic[T]):
    """
    Base class for converters between raw strings and one semantic type.

    Subclasses must implement `parse_to_type` and `parse_from_type`. The default
    `validate` attempts a conversion and reports the error message, which is
    correct for any parser whose conversion has no side effects.

    Attributes:
        type_name (str): Short display name used in messages and help output.
        is_collection (bool): Whether the parser consumes a sequence of tokens.
        is_flag (bool): Whether the option may appear without a value.
    """

    type_name: str = "value"
    is_collection: bool = False
    is_flag: bool = False

    @property
    def choices(self) -> tuple[str, ...]:
        return ()

    @abstractmethod
    def parse_to_type(self, raw: str | None) -> T:
        """Convert raw text into a typed value."""

    @abstractmethod
    def parse_from_type(self, value: T) -> str:
        """Render a typed value as text."""

    def zero_value(self) -> T | None:
        """Value used for an optional input that was never supplied."""
        return self.parse_to_type(None)

    def validate(self, raw: str | None) -> str | None:
        if raw is None or raw == "":
            return None
        try:
            self.parse_to_type(raw)
        except (ValueError, TypeError, ArithmeticError) as error:
            return str(error) or f"Invalid {self.type_name} value: '{raw}'"
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.type_name})"


class SimpleTypeParser(TypeParser[T]):
    """
    Type parser built from a converter and an optional formatter.

    Args:
        type_name (str): Display name for messages (`int`, `UUID`, ...).
        convert (Callable[[str], T]): Converts non-empty text; raises `ValueError`
            or `TypeError` on bad input.
        format (Callable[[T], str] | None): Renders a value; defaults to `str`.
        zero (Callable[[], T | None] | None): Factory for the zero value.
        expected (str | None): Human description of accepted text used in errors.
    """

    def __init__(
        self,
        type_name: str,
        convert: Callable[[str], T],
        format: Callable[[T], str] | None = None,
        zero: Callable[[], T | None] | None = None,
        expected: str | None = None,
    ) -> None:
        self.type_name = type_name
        self._convert = convert
        self._format = format or str
        self._zero = zero
        self._expected = expected or f"a valid {type_name}"

    def parse_to_type(self, raw: str | None) -> Any:
        if raw is None or raw == "":
            return self._zero() if self._zero else None
        try:
            return self._convert(raw)
        except (ValueError, TypeError, ArithmeticError) as error:
            raise ValueError(
                f"Invalid {self.type_name} value: '{raw}'. Expected {self._expected}."
            ) from error

    def parse_from_type(self, value: Any) -> str:
        if value is None:
            return ""
        return self._format(value)
