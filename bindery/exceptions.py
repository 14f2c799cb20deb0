# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used in Bindery.

These exceptions provide structured error handling for descriptor mistakes,
unsupported types, binding failures, dispatch failures, lifecycle callback
failures, and declared command failures.

All exceptions inherit from `BinderyError`, the base exception for the framework.
Every exception that reaches the user carries the exit code the application
should terminate with.

Exception Hierarchy:
- BinderyError
    ├── UnsupportedTypeError
    ├── InvalidDescriptorError
    ├── DuplicateCommandError
    ├── CommandNotFoundError
    ├── AggregateCallbackError
    ├── CommandError
    └── BindingError
          ├── ArgumentError
          ├── MissingRequiredOptionError
          ├── MissingRequiredArgumentError
          ├── InvalidValueError
          ├── UnknownOptionError
          └── UnexpectedArgumentError
"""
from __future__ import annotations

from typing import Sequence

from bindery.result import ExitCode


class BinderyError(Exception):
    """Base exception for Bindery."""

    exit_code: int = ExitCode.UNEXPECTED


class UnsupportedTypeError(BinderyError):
    """Raised when no type parser is registered or derivable for a type."""

    def __init__(self, type_id: object):
        self.type_id = type_id
        name = getattr(type_id, "__name__", None) or repr(type_id)
        super().__init__(f"No type parser registered for type '{name}'")


class InvalidDescriptorError(BinderyError):
    """Raised when command, option or argument metadata violates an invariant."""


class DuplicateCommandError(BinderyError):
    """Raised when a command with the same name or alias is already registered."""


class CommandNotFoundError(BinderyError):
    """Raised when the requested command path does not match a registered command."""

    exit_code = ExitCode.COMMAND_NOT_FOUND

    def __init__(
        self, name: str, suggestions: Sequence[str] = (), message: str | None = None
    ):
        self.name = name
        self.suggestions = list(suggestions)
        if message is None:
            message = f"Unknown command '{name}'."
            if self.suggestions:
                message += " Did you mean: " + ", ".join(self.suggestions) + "?"
        super().__init__(message)


class AggregateCallbackError(BinderyError):
    """Raised after a lifecycle phase in which one or more callbacks failed."""

    def __init__(self, errors: Sequence[BaseException], phase: str | None = None):
        self.errors = list(errors)
        self.phase = phase
        where = f"'{phase}' " if phase else ""
        details = "; ".join(f"{type(error).__name__}: {error}" for error in self.errors)
        super().__init__(
            f"{len(self.errors)} {where}lifecycle callback(s) failed: {details}"
        )


class CommandError(BinderyError):
    """
    Declared command failure carrying an explicit exit code.

    Raise it from a command body to end the run cleanly with `exit_code`.
    """

    def __init__(self, message: str = "", exit_code: int = ExitCode.COMMAND_FAILURE):
        if exit_code == ExitCode.SUCCESS:
            raise ValueError("CommandError requires a non-zero exit code")
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class BindingError(BinderyError):
    """
    Base class for every failure raised while binding argv onto a command.

    Attributes:
        name (str | None): Display name of the offending option or argument.
        value (str | None): Raw token text that caused the failure, if any.
        position (int | None): Argument position, for positional failures.
    """

    exit_code = ExitCode.USAGE

    def __init__(
        self,
        message: str,
        *,
        name: str | None = None,
        value: str | None = None,
        position: int | None = None,
    ):
        super().__init__(message)
        self.name = name
        self.value = value
        self.position = position


class ArgumentError(BindingError, ValueError):
    """Raised when a value is not one of the allowed choices or enum members."""


class MissingRequiredOptionError(BindingError):
    """Raised when a required option is absent from argv and its fallback."""

    def __init__(self, name: str):
        super().__init__(f"Missing required option: {name}", name=name)


class MissingRequiredArgumentError(BindingError):
    """Raised when a required positional argument is absent."""

    def __init__(self, name: str, position: int | None = None):
        super().__init__(
            f"Missing required argument: {name}", name=name, position=position
        )


class InvalidValueError(BindingError):
    """Raised when a raw value fails validation or type conversion."""


class UnknownOptionError(BindingError):
    """Raised when argv contains a flag no option declares."""

    def __init__(self, flag: str):
        super().__init__(f"Unknown option: {flag}", name=flag, value=flag)


class UnexpectedArgumentError(BindingError):
    """Raised when argv holds more positional tokens than the command declares."""

    def __init__(self, value: str):
        super().__init__(f"Unexpected argument: '{value}'", value=value)
