# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Built-in type parsers for scalar values.

Contents:
- `BoolTypeParser`: Accepts true/false, yes/no, on/off, 1/0 (case-insensitive).
- `StrTypeParser`: Identity conversion.
- `IntegerTypeParser`: Integers, optionally range-checked to a fixed bit width.
- `CharTypeParser`: A single character.
- Scalar parsers for `float`, `Decimal`, `UUID`, `Path`, `datetime` and `date`.

Fixed-width integers are addressed through the `Int8` ... `UInt64` type tokens.
They are `typing.NewType` aliases of `int`, so annotated fields still hold plain
Python integers while the registry applies the right bounds.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import NewType
from uuid import UUID

from dateutil import parser as date_parser

from bindery.parser_types.base import SimpleTypeParser, TypeParser

Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
UInt8 = NewType("UInt8", int)
UInt16 = NewType("UInt16", int)
UInt32 = NewType("UInt32", int)
UInt64 = NewType("UInt64", int)
Char = NewType("Char", str)

TRUE_VALUES = frozenset({"true", "t", "yes", "y", "on", "1"})
FALSE_VALUES = frozenset({"false", "f", "no", "n", "off", "0"})


class BoolTypeParser(TypeParser[bool]):
    """Converts common truthy and falsy spellings to `bool`."""

    type_name = "bool"
    is_flag = True

    def parse_to_type(self, raw: str | None) -> bool:
        if raw is None or raw == "":
            return False
        value = raw.strip().lower()
        if value in TRUE_VALUES:
            return True
        if value in FALSE_VALUES:
            return False
        raise ValueError(
            f"Invalid bool value: '{raw}'. Expected 'true', 'false', 'yes', 'no', "
            "'on', 'off', '1', or '0'."
        )

    def parse_from_type(self, value: bool) -> str:
        return "true" if value else "false"

    @staticmethod
    def is_bool_literal(raw: str) -> bool:
        value = raw.strip().lower()
        return value in TRUE_VALUES or value in FALSE_VALUES


class StrTypeParser(TypeParser[str]):
    type_name = "str"

    def parse_to_type(self, raw: str | None) -> str:
        return "" if raw is None else raw

    def parse_from_type(self, value: str) -> str:
        return "" if value is None else str(value)

    def validate(self, raw: str | None) -> str | None:
        return None


class CharTypeParser(TypeParser[str]):
    type_name = "char"

    def parse_to_type(self, raw: str | None) -> str:
        if raw is None or raw == "":
            return "\0"
        if len(raw) != 1:
            raise ValueError(
                f"Invalid char value: '{raw}'. Expected a single character."
            )
        return raw

    def parse_from_type(self, value: str) -> str:
        return value


class IntegerTypeParser(TypeParser[int]):
    """
    Parses base-10 integers, enforcing a bit width when one is given.

    Args:
        type_name (str): Display name (`Int32`, `UInt64`, `int`, ...).
        bits (int | None): Width in bits, or None for Python's unbounded `int`.
        signed (bool): Whether negative values are allowed.
    """

    def __init__(self, type_name: str = "int", bits: int | None = None, signed=True):
        self.type_name = type_name
        self.bits = bits
        self.signed = signed
        if bits is None:
            self.min_value = self.max_value = None
        elif signed:
            self.min_value = -(2 ** (bits - 1))
            self.max_value = 2 ** (bits - 1) - 1
        else:
            self.min_value = 0
            self.max_value = 2**bits - 1

    def parse_to_type(self, raw: str | None) -> int:
        if raw is None or raw == "":
            return 0
        try:
            value = int(raw.strip().replace("_", ""))
        except ValueError:
            raise ValueError(
                f"Invalid {self.type_name} value: '{raw}'. "
                f"Expected a valid {self.type_name}."
            ) from None
        if self.min_value is not None and value < self.min_value:
            raise ValueError(self._range_message(raw))
        if self.max_value is not None and value > self.max_value:
            raise ValueError(self._range_message(raw))
        return value

    def _range_message(self, raw: str) -> str:
        return (
            f"Invalid {self.type_name} value: '{raw}'. "
            f"Expected a value between {self.min_value} and {self.max_value}."
        )

    def parse_from_type(self, value: int) -> str:
        return str(int(value))


def _parse_decimal(raw: str) -> Decimal:
    try:
        value = Decimal(raw.strip())
    except InvalidOperation as error:
        raise ValueError(str(error)) from error
    if not value.is_finite():
        raise ValueError("Decimal value must be finite")
    return value


def _parse_datetime(raw: str) -> datetime:
    return date_parser.parse(raw)


def _parse_date(raw: str) -> date:
    return date_parser.parse(raw).date()


def float_parser() -> SimpleTypeParser[float]:
    return SimpleTypeParser("float", float, repr, zero=lambda: 0.0)


def decimal_parser() -> SimpleTypeParser[Decimal]:
    return SimpleTypeParser("Decimal", _parse_decimal, str, zero=lambda: Decimal(0))


def uuid_parser() -> SimpleTypeParser[UUID]:
    return SimpleTypeParser("UUID", lambda raw: UUID(raw.strip()), str)


def path_parser() -> SimpleTypeParser[Path]:
    return SimpleTypeParser("Path", Path, str, expected="a filesystem path")


def datetime_parser() -> SimpleTypeParser[datetime]:
    return SimpleTypeParser(
        "datetime",
        _parse_datetime,
        datetime.isoformat,
        expected="a date and time such as 2025-01-31T12:00:00",
    )


def date_only_parser() -> SimpleTypeParser[date]:
    return SimpleTypeParser(
        "date", _parse_date, date.isoformat, expected="a date such as 2025-01-31"
    )


INTEGER_TOKENS: dict[object, tuple[int, bool]] = {
    Int8: (8, True),
    Int16: (16, True),
    Int32: (32, True),
    Int64: (64, True),
    UInt8: (8, False),
    UInt16: (16, False),
    UInt32: (32, False),
    UInt64: (64, False),
}


def builtin_parsers() -> dict[object, TypeParser]:
    """Return a fresh mapping of every built-in scalar type to its parser."""
    parsers: dict[object, TypeParser] = {
        str: StrTypeParser(),
        bool: BoolTypeParser(),
        int: IntegerTypeParser(),
        float: float_parser(),
        Decimal: decimal_parser(),
        Char: CharTypeParser(),
        UUID: uuid_parser(),
        Path: path_parser(),
        datetime: datetime_parser(),
        date: date_only_parser(),
    }
    for token, (bits, signed) in INTEGER_TOKENS.items():
        parsers[token] = IntegerTypeParser(token.__name__, bits=bits, signed=signed)
    return parsers
