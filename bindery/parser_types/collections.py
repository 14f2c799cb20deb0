# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Collection type parsers.

`ListTypeParser` and `TupleTypeParser` lift an element parser over an ordered
sequence of raw tokens. They preserve order and count; no tokens produce an
empty collection rather than an error. Every element is validated with the
element parser, and the first failing element is reported.

`BoolMappingTypeParser` is the boolean-keyed mapping placeholder. It exists so
that `dict[bool, ...]` declarations resolve, and it recognises boolean text only.
"""
from __future__ import annotations

from typing import Any, Iterable, Sequence

from bindery.parser_types.base import TypeParser


class ListTypeParser(TypeParser[list]):
    """
    Parses repeated tokens into a list using an element parser.

    `parse_to_type` also accepts a single string, treated as one element.
    """

    is_collection = True
    container: type = list

    def __init__(self, element_parser: TypeParser) -> None:
        if element_parser.is_collection:
            raise ValueError("Nested collection types are not supported")
        self.element_parser = element_parser
        self.type_name = f"{self.container.__name__}[{element_parser.type_name}]"

    @property
    def choices(self) -> tuple[str, ...]:
        return self.element_parser.choices

    @staticmethod
    def _tokens(raw: str | Sequence[str] | None) -> list[str]:
        if raw is None:
            return []
        if isinstance(raw, str):
            return [raw] if raw != "" else []
        return list(raw)

    def parse_to_type(self, raw: str | Sequence[str] | None) -> Any:
        return self.container(
            self.element_parser.parse_to_type(token) for token in self._tokens(raw)
        )

    def parse_from_type(self, value: Iterable[Any] | None) -> list[str]:  # type: ignore[override]
        if value is None:
            return []
        return [self.element_parser.parse_from_type(item) for item in value]

    def zero_value(self) -> Any:
        return self.container()

    def validate(self, raw: str | Sequence[str] | None) -> str | None:
        for token in self._tokens(raw):
            message = self.element_parser.validate(token)
            if message:
                return message
        return None

    def validate_each(self, raw: Sequence[str]) -> tuple[int, str] | None:
        """Return `(index, message)` of the first invalid element, if any."""
        for index, token in enumerate(raw):
            message = self.element_parser.validate(token)
            if message:
                return index, message
        return None


class TupleTypeParser(ListTypeParser):
    """Variable-length `tuple[T, ...]` counterpart of `ListTypeParser`."""

    container = tuple


class BoolMappingTypeParser(TypeParser[bool]):
    """Placeholder parser for boolean-keyed mappings; only boolean text is valid."""

    type_name = "bool"

    def parse_to_type(self, raw: str | None) -> bool:
        if raw is None or raw == "":
            return False
        value = raw.strip().lower()
        if value == "true":
            return True
        if value == "false":
            return False
        raise ValueError("Value must be a bool.")

    def parse_from_type(self, value: bool) -> str:
        if not isinstance(value, bool):
            return "false"
        return "true" if value else "false"
