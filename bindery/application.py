# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Application`, the entry point that ties dispatch, binding, execution
and lifecycle supervision together.

Run flow:
1. `-h` / `--help` alone prints global help; `-V` / `--version` prints the version.
2. `CommandRegistry.match` selects the command from the leading argv tokens.
3. `Binder.bind` builds the command instance (`--help` prints command help).
4. A `LifecycleCoordinator` is created, OS signal handlers are installed, and
   the command runs on a signal linked to the root. A watcher starts the
   pre-exit callbacks as soon as the root is cancelled.
5. `shutdown()` always runs, then the exit code is returned.

Exit codes follow `bindery.result.ExitCode`. User-facing errors print as
`Error: <message>` on stderr followed by a hint.

Example:
    app = Application(program="deploytool", version="1.0.0")
    app.add_command(
        CommandBuilder("deploy", Deploy, description="Deploy a service")
        .option("-n", "--name", required=True)
    )
    app.run()
"""
from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, NoReturn, Sequence

from rich.console import Console
from rich.markup import escape

from bindery.binder import Binder
from bindery.builder import CommandBuilder
from bindery.command import Command
from bindery.console import console as default_console
from bindery.console import err_console as default_err_console
from bindery.debug import register_debug_hooks
from bindery.descriptors import CommandDescriptor
from bindery.exceptions import (
    AggregateCallbackError,
    BindingError,
    CommandNotFoundError,
    MissingRequiredArgumentError,
    MissingRequiredOptionError,
    UnknownOptionError,
)
from bindery.help import HelpFormatter
from bindery.hook_manager import HookManager
from bindery.lifecycle import LifecycleCoordinator
from bindery.logger import logger
from bindery.parser_types import TypeParserRegistry
from bindery.protocols import CommandFactory, ConfigurationSource
from bindery.registry import CommandRegistry
from bindery.result import ExitCode
from bindery.runner import InvocationRunner
from bindery.signals import HelpSignal
from bindery.themes import OneColors
from bindery.utils import get_program_invocation

HELP_FLAGS = ("-h", "--help")
VERSION_FLAGS = ("-V", "--version")


class Application:
    """
    A command-line application built from registered command descriptors.

    Args:
        program (str | None): Program name for usage lines; defaults to the
            invocation name.
        description (str): Summary shown in global help.
        version (str): Printed by `--version`.
        epilog (str): Text printed after the global command listing.
        type_registry (TypeParserRegistry | None): Parsers available to commands.
        configuration (ConfigurationSource | None): Option fallback source.
        factory (CommandFactory | None): Creates command instances.
        hooks (HookManager | None): Execution hooks for every command.
        debug_hooks (bool): Register logging hooks for every execution.
        verbose (bool): Set the `bindery` logger to DEBUG.
        install_signal_handlers (bool): Route SIGINT/SIGTERM to the coordinator.
        console (Console | None): Console for help and version output.
        err_console (Console | None): Console for error output.
    """

    def __init__(
        self,
        program: str | None = None,
        description: str = "",
        version: str = "0.0.0",
        epilog: str = "",
        type_registry: TypeParserRegistry | None = None,
        configuration: ConfigurationSource | None = None,
        factory: CommandFactory | None = None,
        hooks: HookManager | None = None,
        debug_hooks: bool = False,
        verbose: bool = False,
        install_signal_handlers: bool = True,
        console: Console | None = None,
        err_console: Console | None = None,
    ) -> None:
        self.program = program or get_program_invocation()
        self.description = description
        self.version = version
        self.console = console or default_console
        self.err_console = err_console or default_err_console
        self.type_registry = type_registry or TypeParserRegistry()
        self.commands = CommandRegistry()
        self.binder = Binder(self.type_registry, configuration, factory)
        self.hooks = hooks or HookManager()
        self.install_signal_handlers = install_signal_handlers
        self.help = HelpFormatter(
            self.program,
            description=description,
            version=version,
            epilog=epilog,
            console=self.console,
            type_registry=self.type_registry,
        )
        if debug_hooks:
            logger.debug("Enabling debug hooks for all commands")
            register_debug_hooks(self.hooks)
        if verbose:
            logging.getLogger("bindery").setLevel(logging.DEBUG)

        self.runner = InvocationRunner(self.hooks)

    def add_command(self, command: CommandDescriptor | CommandBuilder) -> CommandDescriptor:
        """
        Register a command, resolving its parsers up front.

        Raises:
            UnsupportedTypeError: A declared type has no parser.
            InvalidDescriptorError: The descriptor is inconsistent.
            DuplicateCommandError: The path or an alias is taken.
        """
        descriptor = command.build() if isinstance(command, CommandBuilder) else command
        if not isinstance(descriptor, CommandDescriptor):
            raise TypeError(f"Expected a CommandDescriptor or CommandBuilder, got {command!r}")
        self.binder.prepare(descriptor)
        self.commands.register(descriptor)
        return descriptor

    def add_commands(
        self, commands: Sequence[CommandDescriptor | CommandBuilder]
    ) -> list[CommandDescriptor]:
        return [self.add_command(command) for command in commands]

    def command(
        self, name: str | Sequence[str], command_type: Any, description: str = "", **kwargs
    ) -> CommandBuilder:
        """Start a `CommandBuilder`; pass the result to `add_command`."""
        return CommandBuilder(name, command_type, description=description, **kwargs)

    async def run_async(self, argv: Sequence[str] | None = None) -> int:
        """Run one invocation and return its exit code."""
        argv = list(sys.argv[1:] if argv is None else argv)

        if (len(argv) == 1 and argv[0] in HELP_FLAGS) or (
            not argv and self.commands.root is None
        ):
            self.help.render_global(self.commands)
            return ExitCode.SUCCESS if argv else ExitCode.USAGE
        if argv and argv[0] in VERSION_FLAGS:
            self.help.render_version()
            return ExitCode.SUCCESS

        descriptor: CommandDescriptor | None = None
        try:
            descriptor, remaining = self.commands.match(argv)
            bound = self.binder.bind(descriptor, remaining)
        except HelpSignal as signal:
            self.help.render_command(signal.descriptor or descriptor, self.commands)
            return ExitCode.SUCCESS
        except (CommandNotFoundError, BindingError) as error:
            logger.debug("Rejected argv %s: %s", argv, error)
            self.report_error(str(error), self._hint(error, descriptor))
            return error.exit_code

        return await self.execute(descriptor, bound)

    async def execute(self, descriptor: CommandDescriptor, bound: Any) -> int:
        """Run a bound command under a fresh lifecycle coordinator."""
        lifecycle = LifecycleCoordinator(descriptor.display_name)
        if self.install_signal_handlers:
            lifecycle.install_signal_handlers()
        if isinstance(bound, Command) or hasattr(bound, "lifecycle"):
            bound.lifecycle = lifecycle
        signal = lifecycle.create_linked_signal(descriptor.display_name)
        watcher = asyncio.create_task(lifecycle.wait_for_termination())

        exit_code: int = ExitCode.UNEXPECTED
        try:
            outcome = await self.runner.run(bound, signal, name=descriptor.display_name)
            exit_code = outcome.exit_code
            if not outcome.ok:
                self.report_error(outcome.message or f"Command exited with code {exit_code}")
            elif lifecycle.interrupted:
                exit_code = ExitCode.INTERRUPTED
        except (KeyboardInterrupt, asyncio.CancelledError):
            logger.info("[%s] Interrupted", descriptor.display_name)
            exit_code = ExitCode.INTERRUPTED
        except Exception as error:
            logger.error(
                "[%s] Unexpected error: %s", descriptor.display_name, error, exc_info=True
            )
            self.report_error(
                f"Unexpected error: {error}",
                "Run again with verbose logging for the full traceback.",
            )
            exit_code = ExitCode.UNEXPECTED
        finally:
            try:
                await lifecycle.shutdown("command finished")
            except AggregateCallbackError as error:
                self.err_console.print(
                    f"[{OneColors.LIGHT_YELLOW}]Warning:[/] {escape(str(error))}"
                )
            finally:
                watcher.cancel()
                await asyncio.gather(watcher, return_exceptions=True)
                lifecycle.remove_signal_handlers()
                signal.close()
        return exit_code

    def _hint(
        self, error: BaseException, descriptor: CommandDescriptor | None
    ) -> str:
        if isinstance(error, CommandNotFoundError) or descriptor is None:
            return f"Run '{self.program} --help' to see available commands and options."
        command = " ".join([self.program, *descriptor.path])
        if isinstance(
            error,
            (MissingRequiredOptionError, MissingRequiredArgumentError, UnknownOptionError),
        ):
            return f"Run '{command} --help' for more information on command options."
        return f"Run '{command} --help' for more information."

    def report_error(self, message: str, hint: str | None = None) -> None:
        self.err_console.print(f"[{OneColors.DARK_RED}]Error:[/] {escape(message)}")
        if hint:
            self.err_console.print(f"[hint]{escape(hint)}[/hint]")

    def run(self, argv: Sequence[str] | None = None) -> NoReturn:
        """Run synchronously and exit the process with the resulting code."""
        try:
            exit_code = asyncio.run(self.run_async(argv))
        except KeyboardInterrupt:
            logger.info("KeyboardInterrupt. Exiting.")
            exit_code = ExitCode.INTERRUPTED
        sys.exit(int(exit_code))
