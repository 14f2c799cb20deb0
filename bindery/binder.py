# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `Binder`, which turns raw argv tokens into a populated command instance.

Binding runs in six steps:
1. Tokenize argv into option occurrences and positional tokens.
2. Resolve each option from its flags, then its environment fallback, failing
   when a required option has neither.
3. Assign positional tokens to arguments by position; a collection argument
   absorbs the rest.
4. Validate every raw value: descriptor choices first, then the type parser.
5. Convert raw values with the type parser.
6. Create the command through the `CommandFactory` and assign each value.

Nothing is created or assigned until every value has converted, so a failed
bind never leaves a partially populated command behind.

Accepted token forms:
    --long value    --long=value    -s value    -s=value    -svalue
    --flag          --flag false    --flag=false            -abc (bundled flags)
    -5 / -1.5 as values or positionals      -- ends option processing

`-h` / `--help` anywhere before `--` raises `HelpSignal` carrying the descriptor.
"""
from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Sequence

from bindery.descriptors import ArgumentDescriptor, CommandDescriptor, OptionDescriptor
from bindery.exceptions import (
    ArgumentError,
    InvalidDescriptorError,
    InvalidValueError,
    MissingRequiredArgumentError,
    MissingRequiredOptionError,
    UnexpectedArgumentError,
    UnknownOptionError,
)
from bindery.factory import DefaultCommandFactory
from bindery.logger import logger
from bindery.parser_types import TypeParser, TypeParserRegistry
from bindery.parser_types.base import choices_message
from bindery.protocols import CommandFactory, ConfigurationSource
from bindery.signals import HelpSignal
from bindery.sources import EnvironmentSource

HELP_FLAGS = ("-h", "--help")
END_OF_OPTIONS = "--"
NEGATIVE_NUMBER = re.compile(r"^-(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$")


def is_negative_number(token: str) -> bool:
    return bool(NEGATIVE_NUMBER.match(token))


def _looks_like_flag(token: str) -> bool:
    return token.startswith("-") and token != "-" and not is_negative_number(token)


@dataclass
class BindingPlan:
    """Parsers and flag lookups resolved once per descriptor."""

    descriptor: CommandDescriptor
    option_parsers: dict[str, TypeParser]
    argument_parsers: tuple[TypeParser, ...]
    short_flags: dict[str, OptionDescriptor] = field(default_factory=dict)
    long_flags: dict[str, OptionDescriptor] = field(default_factory=dict)


@dataclass
class OptionState:
    """Tracks the raw occurrences collected for one option."""

    option: OptionDescriptor
    parser: TypeParser
    values: list[str] = field(default_factory=list)
    source: str = "argv"

    @property
    def present(self) -> bool:
        return bool(self.values)


class Binder:
    """
    Binds argv onto command instances described by `CommandDescriptor`s.

    Args:
        type_registry (TypeParserRegistry | None): Source of type parsers.
        configuration (ConfigurationSource | None): Fallback lookup for options
            declaring `env`; defaults to the process environment.
        factory (CommandFactory | None): Creates command instances.
    """

    def __init__(
        self,
        type_registry: TypeParserRegistry | None = None,
        configuration: ConfigurationSource | None = None,
        factory: CommandFactory | None = None,
    ) -> None:
        self.type_registry = type_registry or TypeParserRegistry()
        self.configuration = configuration or EnvironmentSource()
        self.factory = factory or DefaultCommandFactory()
        self._plans: dict[int, BindingPlan] = {}
        self._lock = Lock()

    def prepare(self, descriptor: CommandDescriptor) -> BindingPlan:
        """
        Resolve and cache the parsers for a descriptor.

        Raises:
            UnsupportedTypeError: A declared type has no parser.
            InvalidDescriptorError: A collection argument is not last, or a
                declared choice or default is not valid for its type.
        """
        plan = self._plans.get(id(descriptor))
        if plan is not None and plan.descriptor is descriptor:
            return plan

        option_parsers: dict[str, TypeParser] = {}
        short_flags: dict[str, OptionDescriptor] = {}
        long_flags: dict[str, OptionDescriptor] = {}
        for option in descriptor.options:
            parser = self.type_registry.resolve_for(option.type, option.case_sensitive)
            self._check_choices(descriptor, option, parser)
            self._check_default(descriptor, option, parser)
            option_parsers[option.dest] = parser
            if option.short:
                short_flags[option.short] = option
            if option.long:
                long_flags[option.long] = option

        argument_parsers: list[TypeParser] = []
        for argument in descriptor.arguments:
            parser = self.type_registry.resolve_for(
                argument.type, argument.case_sensitive
            )
            if parser.is_collection and argument.position != len(descriptor.arguments) - 1:
                raise InvalidDescriptorError(
                    f"Collection argument '{argument.dest}' in "
                    f"'{descriptor.display_name}' must be the last argument"
                )
            self._check_choices(descriptor, argument, parser)
            self._check_default(descriptor, argument, parser)
            argument_parsers.append(parser)

        plan = BindingPlan(
            descriptor=descriptor,
            option_parsers=option_parsers,
            argument_parsers=tuple(argument_parsers),
            short_flags=short_flags,
            long_flags=long_flags,
        )
        with self._lock:
            self._plans[id(descriptor)] = plan
        logger.debug("Prepared binding plan for '%s'", descriptor.display_name)
        return plan

    @staticmethod
    def _check_choices(
        descriptor: CommandDescriptor,
        item: OptionDescriptor | ArgumentDescriptor,
        parser: TypeParser,
    ) -> None:
        for choice in item.choices:
            message = parser.validate(choice)
            if message:
                raise InvalidDescriptorError(
                    f"Invalid choice {choice!r} for '{item.dest}' in "
                    f"'{descriptor.display_name}': {message}"
                )

    @staticmethod
    def _check_default(
        descriptor: CommandDescriptor,
        item: OptionDescriptor | ArgumentDescriptor,
        parser: TypeParser,
    ) -> None:
        default = item.default
        if isinstance(default, str):
            raw_values = [default]
        elif (
            parser.is_collection
            and isinstance(default, (list, tuple))
            and all(isinstance(value, str) for value in default)
        ):
            raw_values = list(default)
        else:
            return
        for raw in raw_values:
            message = parser.validate(raw)
            if message:
                raise InvalidDescriptorError(
                    f"Default {default!r} for '{item.dest}' in "
                    f"'{descriptor.display_name}' is invalid: {message}"
                )

    def bind(self, descriptor: CommandDescriptor, argv: Sequence[str]) -> Any:
        """
        Bind argv onto a new instance of `descriptor.command_type`.

        Raises:
            HelpSignal: `-h` or `--help` was given.
            BindingError: Any tokenization, resolution, validation or
                conversion failure.
        """
        plan = self.prepare(descriptor)
        argv = list(argv)
        self._check_help(descriptor, argv)

        states, positionals = self._tokenize(plan, argv)
        self._resolve_options(states)
        raw_arguments = self._resolve_arguments(plan, positionals)

        values: dict[str, Any] = {}
        for state in states.values():
            values[state.option.dest] = self._convert(
                state.option,
                state.parser,
                self._option_raw(state),
                label=f"option '{state.option.display_name}'",
                name=state.option.display_name,
            )
        for argument, parser, raw in zip(
            descriptor.arguments, plan.argument_parsers, raw_arguments
        ):
            values[argument.dest] = self._convert(
                argument,
                parser,
                raw,
                label=f"argument '{argument.dest}' (position {argument.position})",
                name=argument.dest,
                position=argument.position,
            )

        command = self.factory.create(descriptor.command_type)
        for dest, value in values.items():
            setattr(command, dest, value)
        logger.debug("Bound '%s': %s", descriptor.display_name, values)
        return command

    @staticmethod
    def _check_help(descriptor: CommandDescriptor, argv: list[str]) -> None:
        for token in argv:
            if token == END_OF_OPTIONS:
                return
            if token in HELP_FLAGS:
                raise HelpSignal(descriptor=descriptor)

    def _tokenize(
        self, plan: BindingPlan, argv: list[str]
    ) -> tuple[dict[str, OptionState], list[str]]:
        states = {
            option.dest: OptionState(option, plan.option_parsers[option.dest])
            for option in plan.descriptor.options
        }
        positionals: list[str] = []
        index = 0
        options_ended = False
        while index < len(argv):
            token = argv[index]
            if options_ended or not _looks_like_flag(token):
                positionals.append(token)
                index += 1
                continue
            if token == END_OF_OPTIONS:
                options_ended = True
                index += 1
                continue
            if token.startswith("--"):
                index = self._consume_long(plan, states, argv, index)
            else:
                index = self._consume_short(plan, states, argv, index)
        return states, positionals

    def _consume_long(
        self,
        plan: BindingPlan,
        states: dict[str, OptionState],
        argv: list[str],
        index: int,
    ) -> int:
        name, sep, inline = argv[index][2:].partition("=")
        option = plan.long_flags.get(name)
        if option is None:
            raise UnknownOptionError(f"--{name}")
        return self._consume_value(
            states[option.dest], argv, index, inline if sep else None
        )

    def _consume_short(
        self,
        plan: BindingPlan,
        states: dict[str, OptionState],
        argv: list[str],
        index: int,
    ) -> int:
        token = argv[index]
        option = plan.short_flags.get(token[1])
        if option is None:
            raise UnknownOptionError(token[:2])
        state = states[option.dest]
        if len(token) == 2:
            return self._consume_value(state, argv, index, None)
        if token[2] == "=":
            return self._consume_value(state, argv, index, token[3:])
        if not state.parser.is_flag:
            return self._consume_value(state, argv, index, token[2:])

        # -abc: every character must name a boolean flag
        for char in token[1:]:
            bundled = plan.short_flags.get(char)
            if bundled is None or not states[bundled.dest].parser.is_flag:
                raise UnknownOptionError(f"-{char}")
            states[bundled.dest].values.append("true")
        return index + 1

    @staticmethod
    def _consume_value(
        state: OptionState, argv: list[str], index: int, inline: str | None
    ) -> int:
        if inline is not None:
            state.values.append(inline)
            return index + 1

        following = argv[index + 1] if index + 1 < len(argv) else None
        if state.parser.is_flag:
            if following is not None and following.strip().lower() in ("true", "false"):
                state.values.append(following)
                return index + 2
            state.values.append("true")
            return index + 1

        if following is None or following == END_OF_OPTIONS or _looks_like_flag(following):
            raise InvalidValueError(
                f"Option '{state.option.display_name}' requires a value",
                name=state.option.display_name,
            )
        state.values.append(following)
        return index + 2

    def _resolve_options(self, states: dict[str, OptionState]) -> None:
        for state in states.values():
            if state.present:
                continue
            option = state.option
            if option.env:
                raw = self.configuration.get(option.env)
                if raw is not None and raw != "":
                    state.values.append(raw)
                    state.source = "env"
                    logger.debug(
                        "Option '%s' resolved from environment variable %s",
                        option.display_name,
                        option.env,
                    )
                    continue
            if option.required:
                raise MissingRequiredOptionError(option.display_name)
            state.source = "default"

    @staticmethod
    def _option_raw(state: OptionState) -> str | list[str] | None:
        if not state.present:
            return None
        if state.parser.is_collection:
            return list(state.values)
        return state.values[-1]

    @staticmethod
    def _resolve_arguments(
        plan: BindingPlan, positionals: list[str]
    ) -> list[str | list[str] | None]:
        raw_arguments: list[str | list[str] | None] = []
        index = 0
        for argument, parser in zip(plan.descriptor.arguments, plan.argument_parsers):
            raw: str | list[str] | None
            if parser.is_collection:
                raw = positionals[index:] or None
                index = len(positionals)
            elif index < len(positionals):
                raw = positionals[index]
                index += 1
            else:
                raw = None
            if raw is None and argument.required:
                raise MissingRequiredArgumentError(argument.dest, argument.position)
            raw_arguments.append(raw)
        if index < len(positionals):
            raise UnexpectedArgumentError(positionals[index])
        return raw_arguments

    def _convert(
        self,
        item: OptionDescriptor | ArgumentDescriptor,
        parser: TypeParser,
        raw: str | list[str] | None,
        *,
        label: str,
        name: str,
        position: int | None = None,
    ) -> Any:
        if raw is None:
            return self._default(item, parser)

        tokens = raw if isinstance(raw, list) else [raw]
        for token in tokens:
            self._validate(item, parser, token, label=label, name=name, position=position)

        try:
            return parser.parse_to_type(raw)
        except ArgumentError as error:
            raise ArgumentError(
                f"Invalid value for {label}: {error}",
                name=name,
                value=error.value,
                position=position,
            ) from error
        except (ValueError, TypeError, ArithmeticError) as error:
            raise InvalidValueError(
                f"Invalid value {self._quote(raw)} for {label}: {error}",
                name=name,
                value=raw if isinstance(raw, str) else " ".join(raw),
                position=position,
            ) from error

    @staticmethod
    def _validate(
        item: OptionDescriptor | ArgumentDescriptor,
        parser: TypeParser,
        token: str,
        *,
        label: str,
        name: str,
        position: int | None,
    ) -> None:
        if item.choices:
            if item.case_sensitive:
                allowed = token in item.choices
            else:
                allowed = token.casefold() in {c.casefold() for c in item.choices}
            if not allowed:
                raise ArgumentError(
                    f"Invalid value '{token}' for {label}. {choices_message(item.choices)}",
                    name=name,
                    value=token,
                    position=position,
                )

        element = getattr(parser, "element_parser", parser)
        message = element.validate(token)
        if not message:
            return
        error_type = ArgumentError if element.choices else InvalidValueError
        raise error_type(
            f"Invalid value '{token}' for {label}: {message}",
            name=name,
            value=token,
            position=position,
        )

    @staticmethod
    def _default(item: OptionDescriptor | ArgumentDescriptor, parser: TypeParser) -> Any:
        default = item.default
        if default is None:
            return parser.zero_value()
        if isinstance(default, str):
            return parser.parse_to_type(default)
        if (
            parser.is_collection
            and isinstance(default, (list, tuple))
            and all(isinstance(value, str) for value in default)
        ):
            return parser.parse_to_type(list(default))
        return copy.deepcopy(default)

    @staticmethod
    def _quote(raw: str | list[str]) -> str:
        if isinstance(raw, str):
            return f"'{raw}'"
        return "[" + ", ".join(f"'{token}'" for token in raw) + "]"
