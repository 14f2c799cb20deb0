# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the static metadata that describes commands, options and arguments.

Descriptors are immutable pydantic models built once at registration time,
either directly, through `CommandBuilder`, or from a YAML/TOML declaration
(`bindery.config`). The `Binder` reads them to map argv tokens onto a command
instance, and the help renderer reads them to print usage.

Key Models:
- `OptionDescriptor`: A named option (`-n`, `--name`) with optional environment
  fallback, required flag, allowed choices and default.
- `ArgumentDescriptor`: A positional argument identified by its index.
- `CommandDescriptor`: A command path with its options, arguments and the class
  instantiated during binding.

Invariants enforced here:
- An option declares at least one of `short` / `long`.
- `-h` / `--help` are reserved and never user-assignable.
- Flag names and destination names are unique within a command.
- Argument positions form a contiguous sequence starting at 0.
"""
from __future__ import annotations

import keyword
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bindery.exceptions import InvalidDescriptorError
from bindery.parser_types import type_display_name

RESERVED_SHORT_FLAGS = frozenset({"h"})
RESERVED_LONG_FLAGS = frozenset({"help"})
ROOT_RESERVED_FLAGS = frozenset({"-V", "--version"})


def _check_dest(dest: str) -> str:
    if not dest or not dest.isidentifier() or keyword.iskeyword(dest):
        raise InvalidDescriptorError(
            f"dest must be a valid identifier (letters, digits, and underscores only): {dest!r}"
        )
    return dest


def _normalize_choices(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or isinstance(value, dict):
        raise InvalidDescriptorError("choices must be a list or tuple of values")
    return tuple(str(choice) for choice in value)


class OptionDescriptor(BaseModel):
    """
    Describes a named command-line option.

    Attributes:
        dest (str): Attribute name assigned on the bound command.
        short (str | None): Single-character flag without the dash (`"n"` for `-n`).
        long (str | None): Long flag without the dashes (`"name"` for `--name`).
        env (str | None): Environment variable consulted when the flag is absent.
        required (bool): Fail binding when neither flag nor fallback supply a value.
        type (Any): Declared type identifier resolved through the type registry.
        choices (tuple[str, ...]): Allowed raw values; empty means unconstrained.
        case_sensitive (bool): Whether choices and enum names must match exactly.
        default (Any): Value used when the option is optional and absent.
        description (str): Help text.
    """

    dest: str
    short: str | None = None
    long: str | None = None
    env: str | None = None
    required: bool = False
    type: Any = str
    choices: tuple[str, ...] = ()
    case_sensitive: bool = False
    default: Any = None
    description: str = ""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("short", "long", mode="before")
    @classmethod
    def strip_dashes(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lstrip("-")
        return value

    @field_validator("choices", mode="before")
    @classmethod
    def normalize_choices(cls, value: Any) -> tuple[str, ...]:
        return _normalize_choices(value)

    @model_validator(mode="after")
    def check_flags(self) -> OptionDescriptor:
        _check_dest(self.dest)
        if not self.short and not self.long:
            raise InvalidDescriptorError(
                f"Option '{self.dest}' must declare a short or a long flag"
            )
        if self.short is not None:
            if len(self.short) != 1 or self.short.isdigit() or self.short.isspace():
                raise InvalidDescriptorError(
                    f"Short flag '-{self.short}' must be a single non-digit character"
                )
            if self.short in RESERVED_SHORT_FLAGS:
                raise InvalidDescriptorError(f"Flag '-{self.short}' is reserved for help")
        if self.long is not None:
            if len(self.long) < 2 or any(char.isspace() or char == "=" for char in self.long):
                raise InvalidDescriptorError(
                    f"Long flag '--{self.long}' must be at least 2 characters "
                    "without spaces or '='"
                )
            if self.long in RESERVED_LONG_FLAGS:
                raise InvalidDescriptorError(f"Flag '--{self.long}' is reserved for help")
        if self.required and self.default is not None:
            raise InvalidDescriptorError(
                f"Option '{self.dest}' cannot be required and have a default"
            )
        return self

    @property
    def flags(self) -> tuple[str, ...]:
        """All spellings of this option, short first."""
        flags = []
        if self.short:
            flags.append(f"-{self.short}")
        if self.long:
            flags.append(f"--{self.long}")
        return tuple(flags)

    @property
    def display_name(self) -> str:
        return f"--{self.long}" if self.long else f"-{self.short}"

    @property
    def type_name(self) -> str:
        return type_display_name(self.type)


class ArgumentDescriptor(BaseModel):
    """
    Describes a positional command-line argument.

    Attributes:
        dest (str): Attribute name assigned on the bound command.
        position (int): Zero-based index among the command's positional arguments.
        type (Any): Declared type identifier.
        required (bool): Fail binding when the position is not supplied.
        choices (tuple[str, ...]): Allowed raw values; empty means unconstrained.
        case_sensitive (bool): Whether choices and enum names must match exactly.
        default (Any): Value used when the argument is optional and absent.
        description (str): Help text.
    """

    dest: str
    position: int = Field(ge=0)
    type: Any = str
    required: bool = False
    choices: tuple[str, ...] = ()
    case_sensitive: bool = False
    default: Any = None
    description: str = ""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("choices", mode="before")
    @classmethod
    def normalize_choices(cls, value: Any) -> tuple[str, ...]:
        return _normalize_choices(value)

    @model_validator(mode="after")
    def check_dest(self) -> ArgumentDescriptor:
        _check_dest(self.dest)
        if self.required and self.default is not None:
            raise InvalidDescriptorError(
                f"Argument '{self.dest}' cannot be required and have a default"
            )
        return self

    @property
    def display_name(self) -> str:
        return self.dest

    @property
    def type_name(self) -> str:
        return type_display_name(self.type)


class CommandDescriptor(BaseModel):
    """
    Describes one invocable command.

    Attributes:
        name (str): Space-separated command path (`"config set"`); `""` is the root.
        description (str): One-line summary shown in help listings.
        command_type (Any): Class instantiated by the command factory while binding.
        options (tuple[OptionDescriptor, ...]): Declared options, in help order.
        arguments (tuple[ArgumentDescriptor, ...]): Positional arguments by position.
        aliases (tuple[str, ...]): Alternate spellings of the last path segment.
        help_epilog (str): Text printed after the option table.
        hidden (bool): Omit from command listings.
    """

    name: str = ""
    description: str = ""
    command_type: Any
    options: tuple[OptionDescriptor, ...] = ()
    arguments: tuple[ArgumentDescriptor, ...] = ()
    aliases: tuple[str, ...] = ()
    help_epilog: str = ""
    hidden: bool = False

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        if isinstance(value, str):
            return " ".join(value.split())
        return value

    @field_validator("arguments", mode="after")
    @classmethod
    def sort_arguments(
        cls, value: tuple[ArgumentDescriptor, ...]
    ) -> tuple[ArgumentDescriptor, ...]:
        return tuple(sorted(value, key=lambda argument: argument.position))

    @model_validator(mode="after")
    def check_invariants(self) -> CommandDescriptor:
        if not callable(self.command_type):
            raise InvalidDescriptorError(
                f"command_type for '{self.name}' must be a class or factory"
            )
        if any(segment.startswith("-") for segment in self.path):
            raise InvalidDescriptorError(
                f"Command path segments cannot start with '-': {self.name!r}"
            )
        for alias in self.aliases:
            if not alias or alias.startswith("-") or " " in alias:
                raise InvalidDescriptorError(f"Invalid alias {alias!r} for '{self.name}'")
            if not self.path:
                raise InvalidDescriptorError("The root command cannot have aliases")

        seen_flags: set[str] = set()
        for option in self.options:
            for flag in option.flags:
                if flag in seen_flags:
                    raise InvalidDescriptorError(
                        f"Duplicate flag '{flag}' in command '{self.name}'"
                    )
                seen_flags.add(flag)
        if not self.path:
            for flag in sorted(seen_flags & ROOT_RESERVED_FLAGS):
                raise InvalidDescriptorError(
                    f"Flag '{flag}' is reserved for the root command's version output"
                )

        seen_dests: set[str] = set()
        for item in (*self.options, *self.arguments):
            if item.dest in seen_dests:
                raise InvalidDescriptorError(
                    f"Duplicate destination '{item.dest}' in command '{self.name}'"
                )
            seen_dests.add(item.dest)

        positions = [argument.position for argument in self.arguments]
        if positions != list(range(len(positions))):
            raise InvalidDescriptorError(
                f"Argument positions for '{self.name}' must be contiguous from 0, "
                f"got {positions}"
            )

        seen_optional = False
        for argument in self.arguments:
            if argument.required and seen_optional:
                raise InvalidDescriptorError(
                    f"Required argument '{argument.dest}' cannot follow an optional "
                    f"argument in '{self.name}'"
                )
            seen_optional = seen_optional or not argument.required
        return self

    @property
    def path(self) -> tuple[str, ...]:
        return tuple(self.name.split())

    @property
    def display_name(self) -> str:
        return self.name or "<root>"

    def get_option(self, flag: str) -> OptionDescriptor | None:
        """Find the option declaring `flag` (`-n` or `--name`)."""
        for option in self.options:
            if flag in option.flags:
                return option
        return None

    def get_argument(self, position: int) -> ArgumentDescriptor | None:
        if 0 <= position < len(self.arguments):
            return self.arguments[position]
        return None
