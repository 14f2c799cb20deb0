# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Type parsers for closed sets of values: `Enum` classes and `Literal` choices.

`EnumTypeParser` resolves a member by name (and, as a convenience, by the text
of its value), honouring the configured case sensitivity. An empty or missing
value resolves to the first declared member. Unmatched values raise
`ArgumentError` whose message lists every member name, one per line.

`ChoiceTypeParser` is the string-valued counterpart used for `Literal[...]`
annotations.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Sequence

from bindery.exceptions import ArgumentError
from bindery.parser_types.base import TypeParser, choices_message


def _fold(text: str, case_sensitive: bool) -> str:
    return text if case_sensitive else text.casefold()


class EnumTypeParser(TypeParser[Enum]):
    """
    Parser for an `Enum` subclass.

    Args:
        enum_type (type[Enum]): The enumeration to parse into.
        case_sensitive (bool): Whether member names must match exactly.
    """

    def __init__(self, enum_type: type[Enum], case_sensitive: bool = False) -> None:
        members = list(enum_type)
        if not members:
            raise ValueError(f"Enum '{enum_type.__name__}' has no members")
        self.enum_type = enum_type
        self.case_sensitive = case_sensitive
        self.type_name = enum_type.__name__
        self._members = members
        self._by_name = {_fold(m.name, case_sensitive): m for m in members}
        self._by_value = {
            _fold(str(m.value), case_sensitive): m
            for m in members
            if isinstance(m.value, (str, int)) and not isinstance(m.value, bool)
        }

    @property
    def choices(self) -> tuple[str, ...]:
        return tuple(member.name for member in self._members)

    def _lookup(self, raw: str) -> Enum | None:
        key = _fold(raw.strip(), self.case_sensitive)
        member = self._by_name.get(key)
        if member is None:
            member = self._by_value.get(key)
        return member

    def parse_to_type(self, raw: str | None) -> Enum:
        if raw is None or raw == "":
            return self._members[0]
        member = self._lookup(raw)
        if member is None:
            raise ArgumentError(
                f"Invalid {self.type_name} value: '{raw}'. {choices_message(self.choices)}",
                value=raw,
            )
        return member

    def parse_from_type(self, value: Enum) -> str:
        if not isinstance(value, self.enum_type):
            raise ArgumentError(
                f"Value {value!r} is not a member of {self.type_name}", value=str(value)
            )
        return value.name

    def validate(self, raw: str | None) -> str | None:
        if raw is None or raw == "":
            return None
        if self._lookup(raw) is None:
            return choices_message(self.choices)
        return None


class ChoiceTypeParser(TypeParser[str]):
    """Parser for a fixed set of string values, e.g. `Literal["dev", "prod"]`."""

    def __init__(self, values: Sequence[Any], case_sensitive: bool = True) -> None:
        if not values:
            raise ValueError("ChoiceTypeParser requires at least one value")
        self._values = tuple(str(value) for value in values)
        self.case_sensitive = case_sensitive
        self.type_name = "choice"
        self._lookup_map = {_fold(value, case_sensitive): value for value in self._values}

    @property
    def choices(self) -> tuple[str, ...]:
        return self._values

    def parse_to_type(self, raw: str | None) -> str:
        if raw is None or raw == "":
            return self._values[0]
        value = self._lookup_map.get(_fold(raw, self.case_sensitive))
        if value is None:
            raise ArgumentError(
                f"Invalid value: '{raw}'. {choices_message(self.choices)}", value=raw
            )
        return value

    def parse_from_type(self, value: str) -> str:
        return str(value)

    def validate(self, raw: str | None) -> str | None:
        if raw is None or raw == "":
            return None
        if _fold(raw, self.case_sensitive) not in self._lookup_map:
            return choices_message(self.choices)
        return None
