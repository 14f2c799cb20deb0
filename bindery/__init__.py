"""
Bindery CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import logging

from .application import Application
from .binder import Binder
from .builder import CommandBuilder
from .command import Command
from .descriptors import ArgumentDescriptor, CommandDescriptor, OptionDescriptor
from .exceptions import (
    AggregateCallbackError,
    ArgumentError,
    BinderyError,
    BindingError,
    CommandError,
    CommandNotFoundError,
    DuplicateCommandError,
    InvalidDescriptorError,
    InvalidValueError,
    MissingRequiredArgumentError,
    MissingRequiredOptionError,
    UnexpectedArgumentError,
    UnknownOptionError,
    UnsupportedTypeError,
)
from .factory import DefaultCommandFactory
from .hook_manager import HookManager, HookType
from .lifecycle import CancellationSignal, LifecycleCoordinator, LifecycleState
from .parser_types import TypeParser, TypeParserRegistry
from .registry import CommandRegistry
from .result import ExitCode, ExitOutcome
from .runner import InvocationRunner
from .sources import EnvironmentSource, MappingSource

logger = logging.getLogger("bindery")

__version__ = "0.1.0"

__all__ = [
    "Application",
    "Binder",
    "CommandBuilder",
    "Command",
    "ArgumentDescriptor",
    "CommandDescriptor",
    "OptionDescriptor",
    "AggregateCallbackError",
    "ArgumentError",
    "BinderyError",
    "BindingError",
    "CommandError",
    "CommandNotFoundError",
    "DuplicateCommandError",
    "InvalidDescriptorError",
    "InvalidValueError",
    "MissingRequiredArgumentError",
    "MissingRequiredOptionError",
    "UnexpectedArgumentError",
    "UnknownOptionError",
    "UnsupportedTypeError",
    "DefaultCommandFactory",
    "HookManager",
    "HookType",
    "CancellationSignal",
    "LifecycleCoordinator",
    "LifecycleState",
    "TypeParser",
    "TypeParserRegistry",
    "CommandRegistry",
    "ExitCode",
    "ExitOutcome",
    "InvocationRunner",
    "EnvironmentSource",
    "MappingSource",
]
