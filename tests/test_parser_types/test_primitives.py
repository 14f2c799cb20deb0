from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from uuid import UUID

import pytest

from bindery.parser_types import (
    Char,
    Int8,
    Int16,
    Int32,
    Int64,
    TypeParserRegistry,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)


@pytest.fixture
def registry():
    return TypeParserRegistry()


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("true", True),
        ("TRUE", True),
        ("yes", True),
        ("on", True),
        ("1", True),
        ("false", False),
        ("No", False),
        ("off", False),
        ("0", False),
        ("", False),
        (None, False),
    ],
)
def test_bool_parsing(registry, raw, expected):
    assert registry.resolve(bool).parse_to_type(raw) is expected


def test_bool_rejects_garbage(registry):
    parser = registry.resolve(bool)
    with pytest.raises(ValueError):
        parser.parse_to_type("maybe")
    assert "Invalid bool value" in parser.validate("maybe")


def test_bool_canonical_text(registry):
    parser = registry.resolve(bool)
    assert parser.parse_from_type(parser.parse_to_type("yes")) == "true"
    assert parser.parse_from_type(False) == "false"


def test_str_is_identity(registry):
    parser = registry.resolve(str)
    assert parser.parse_to_type("hello world") == "hello world"
    assert parser.parse_to_type(None) == ""
    assert parser.validate("anything") is None


def test_int_parsing(registry):
    parser = registry.resolve(int)
    assert parser.parse_to_type("42") == 42
    assert parser.parse_to_type("-7") == -7
    assert parser.parse_to_type("") == 0
    assert parser.parse_from_type(12) == "12"


def test_int_validate_message(registry):
    message = registry.resolve(int).validate("x")
    assert message is not None
    assert "'x'" in message


@pytest.mark.parametrize(
    "type_id, low, high",
    [
        (Int8, -128, 127),
        (Int16, -32768, 32767),
        (Int32, -(2**31), 2**31 - 1),
        (Int64, -(2**63), 2**63 - 1),
        (UInt8, 0, 255),
        (UInt16, 0, 65535),
        (UInt64, 0, 2**64 - 1),
    ],
)
def test_fixed_width_bounds(registry, type_id, low, high):
    parser = registry.resolve(type_id)
    assert parser.parse_to_type(str(low)) == low
    assert parser.parse_to_type(str(high)) == high
    with pytest.raises(ValueError, match="between"):
        parser.parse_to_type(str(high + 1))
    with pytest.raises(ValueError, match="between"):
        parser.parse_to_type(str(low - 1))


def test_float_and_zero(registry):
    parser = registry.resolve(float)
    assert parser.parse_to_type("-1.5") == -1.5
    assert parser.parse_to_type("1e3") == 1000.0
    assert parser.parse_from_type(1000.0) == "1000.0"
    assert parser.zero_value() == 0.0


def test_decimal(registry):
    parser = registry.resolve(Decimal)
    assert parser.parse_to_type("19.99") == Decimal("19.99")
    assert parser.parse_from_type(Decimal("19.99")) == "19.99"
    assert parser.zero_value() == Decimal(0)
    assert parser.validate("abc") is not None
    assert parser.validate("NaN") is not None


def test_char(registry):
    parser = registry.resolve(Char)
    assert parser.parse_to_type("x") == "x"
    assert parser.validate("xy") is not None


def test_uuid_round_trip(registry):
    parser = registry.resolve(UUID)
    text = "12345678-1234-5678-1234-567812345678"
    value = parser.parse_to_type(text)
    assert value == UUID(text)
    assert parser.parse_from_type(value) == text
    assert parser.parse_to_type("") is None
    assert parser.validate("not-a-uuid") is not None


def test_path(registry):
    parser = registry.resolve(Path)
    assert parser.parse_to_type("/tmp/data") == Path("/tmp/data")


def test_datetime_and_date(registry):
    moment = registry.resolve(datetime).parse_to_type("2025-01-31 12:30")
    assert moment == datetime(2025, 1, 31, 12, 30)
    assert registry.resolve(datetime).parse_from_type(moment) == "2025-01-31T12:30:00"
    assert registry.resolve(date).parse_to_type("2025-01-31") == date(2025, 1, 31)
    assert registry.resolve(datetime).validate("not a date") is not None


def test_validate_never_raises_on_empty(registry):
    for type_id in (int, float, Decimal, UUID, Char, bool, datetime):
        assert registry.resolve(type_id).validate("") is None
        assert registry.resolve(type_id).validate(None) is None


@pytest.mark.parametrize(
    "type_id, value",
    [
        (int, -123456789012345),
        (Int8, -128),
        (Int16, 32767),
        (Int32, -(2**31)),
        (Int64, 2**63 - 1),
        (UInt8, 255),
        (UInt16, 0),
        (UInt32, 2**32 - 1),
        (UInt64, 2**64 - 1),
        (float, 0.1),
        (float, -2.5e-300),
        (Decimal, Decimal("-19.990")),
        (Char, "x"),
        (UUID, UUID("12345678-1234-5678-1234-567812345678")),
        (Path, Path("relative/dir/file.txt")),
        (datetime, datetime(2025, 1, 31, 12, 30, 15, 123456)),
        (date, date(2024, 2, 29)),
        (list[int], [3, -1, 2]),
        (tuple[str, ...], ("a b", "c")),
    ],
)
def test_rendered_value_parses_back_to_itself(registry, type_id, value):
    parser = registry.resolve(type_id)
    assert parser.parse_to_type(parser.parse_from_type(value)) == value
