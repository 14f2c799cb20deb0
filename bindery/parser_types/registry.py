# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `TypeParserRegistry`, the lookup from a declared type to its parser.

Type identifiers are ordinary Python type objects and typing constructs:
`int`, `bool`, `Path`, `Int32`, `list[int]`, `tuple[str, ...]`, `MyEnum`,
`Literal["dev", "prod"]`, `int | None`, and so on.

Resolution order:
1. An explicitly registered parser for the exact type identifier.
2. `Optional[T]` / `T | None`: resolves `T`.
3. `Literal[...]`: a `ChoiceTypeParser` over the literal values.
4. `Enum` subclasses: an `EnumTypeParser` with the requested case sensitivity.
5. `list[T]`, `Sequence[T]`, bare `list`: a `ListTypeParser` over `T` (or `str`).
6. `tuple[T, ...]`: a `TupleTypeParser` over `T`.
7. `dict[bool, ...]`: the `BoolMappingTypeParser` placeholder.

Anything else raises `UnsupportedTypeError`. Resolved parsers are cached per
`(type, case_sensitive)` so every descriptor sharing a type shares its parser.

Example:
    registry = TypeParserRegistry()
    registry.resolve(list[int]).parse_to_type(["1", "2"])  # [1, 2]
"""
from __future__ import annotations

import collections.abc
import types
from enum import Enum
from threading import Lock
from typing import Any, Literal, Union, get_args, get_origin

from bindery.exceptions import UnsupportedTypeError
from bindery.logger import logger
from bindery.parser_types.base import TypeParser
from bindery.parser_types.collections import (
    BoolMappingTypeParser,
    ListTypeParser,
    TupleTypeParser,
)
from bindery.parser_types.enum_parser import ChoiceTypeParser, EnumTypeParser
from bindery.parser_types.primitives import builtin_parsers

SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Iterable,
    collections.abc.Collection,
)
MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def type_display_name(type_id: Any) -> str:
    """Readable name for a type identifier, used in help and errors."""
    if isinstance(type_id, type) and get_origin(type_id) is None:
        return type_id.__name__
    name = getattr(type_id, "__name__", None)
    if name and get_origin(type_id) is None:
        return name
    return repr(type_id).replace("typing.", "")


class TypeParserRegistry:
    """
    Registry of type parsers keyed by type identifier.

    Methods:
        register(type_id, parser): Add or replace the parser for a type.
        resolve(type_id, case_sensitive=False): Return the parser for a type.
        resolve_for(type_id, case_sensitive): Same, with explicit case sensitivity.
        is_supported(type_id): Whether `resolve` would succeed.
    """

    def __init__(self, include_builtins: bool = True) -> None:
        self._parsers: dict[Any, TypeParser] = (
            builtin_parsers() if include_builtins else {}
        )
        self._cache: dict[tuple[Any, bool], TypeParser] = {}
        self._lock = Lock()

    def register(self, type_id: Any, parser: TypeParser) -> None:
        if not isinstance(parser, TypeParser):
            raise TypeError(f"{parser!r} is not a TypeParser")
        with self._lock:
            self._parsers[type_id] = parser
            self._cache.clear()
        logger.debug("Registered type parser %r for %s", parser, type_display_name(type_id))

    def __contains__(self, type_id: Any) -> bool:
        return type_id in self._parsers

    def is_supported(self, type_id: Any) -> bool:
        try:
            self.resolve(type_id)
        except UnsupportedTypeError:
            return False
        return True

    def resolve(self, type_id: Any, case_sensitive: bool = False) -> TypeParser:
        key = (type_id, case_sensitive)
        try:
            cached = self._cache.get(key)
        except TypeError:
            return self._derive(type_id, case_sensitive)
        if cached is not None:
            return cached
        parser = self._derive(type_id, case_sensitive)
        with self._lock:
            self._cache[key] = parser
        return parser

    def resolve_for(self, type_id: Any, case_sensitive: bool) -> TypeParser:
        """Resolve with explicit case sensitivity for enum and choice matching."""
        return self.resolve(type_id, case_sensitive=case_sensitive)

    def _derive(self, type_id: Any, case_sensitive: bool) -> TypeParser:
        try:
            registered = self._parsers.get(type_id)
        except TypeError:
            registered = None
        if registered is not None:
            return registered

        origin = get_origin(type_id)
        args = get_args(type_id)

        if origin is Union or isinstance(type_id, types.UnionType):
            members = [arg for arg in args if arg is not type(None)]
            if len(members) == 1:
                return self.resolve(members[0], case_sensitive)
            raise UnsupportedTypeError(type_id)

        if origin is Literal:
            return ChoiceTypeParser(args, case_sensitive=case_sensitive)

        if isinstance(type_id, type) and issubclass(type_id, Enum):
            return EnumTypeParser(type_id, case_sensitive=case_sensitive)

        if type_id is list:
            return ListTypeParser(self.resolve(str))

        if origin in SEQUENCE_ORIGINS and len(args) == 1:
            return ListTypeParser(self._element(type_id, args[0], case_sensitive))

        if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
            return TupleTypeParser(self._element(type_id, args[0], case_sensitive))

        if origin in MAPPING_ORIGINS and args and args[0] is bool:
            return BoolMappingTypeParser()

        raise UnsupportedTypeError(type_id)

    def _element(self, type_id: Any, element: Any, case_sensitive: bool) -> TypeParser:
        parser = self.resolve(element, case_sensitive)
        if parser.is_collection:
            raise UnsupportedTypeError(type_id)
        return parser
