"""
Bindery CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .base import SimpleTypeParser, TypeParser
from .collections import BoolMappingTypeParser, ListTypeParser, TupleTypeParser
from .enum_parser import ChoiceTypeParser, EnumTypeParser
from .primitives import (
    BoolTypeParser,
    Char,
    CharTypeParser,
    Int8,
    Int16,
    Int32,
    Int64,
    IntegerTypeParser,
    StrTypeParser,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from .registry import TypeParserRegistry, type_display_name

__all__ = [
    "TypeParser",
    "SimpleTypeParser",
    "TypeParserRegistry",
    "type_display_name",
    "BoolTypeParser",
    "StrTypeParser",
    "IntegerTypeParser",
    "CharTypeParser",
    "EnumTypeParser",
    "ChoiceTypeParser",
    "ListTypeParser",
    "TupleTypeParser",
    "BoolMappingTypeParser",
    "Char",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
]
