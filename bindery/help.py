# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Renders help and usage text from descriptor data using Rich.

`HelpFormatter` never inspects command classes. Everything it prints comes from
descriptor fields, the `CommandRegistry` layout and the type parser each
option or argument resolves to:

    usage: deploy [-n NAME] [--replicas REPLICAS] COUNT

    Deploy a service

    positional:
      COUNT                          Number of instances (default: 0)
    options:
      -h, --help                     Show this help message and exit.
      -n, --name NAME                Service name  [required] [env: DEPLOY_NAME]
"""
from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bindery.console import console as default_console
from bindery.descriptors import ArgumentDescriptor, CommandDescriptor, OptionDescriptor
from bindery.parser_types import TypeParser, TypeParserRegistry
from bindery.registry import CommandRegistry


class HelpFormatter:
    """
    Prints global and per-command help.

    Value names, flag-ness and possible values come from the parser each
    option or argument resolves to, so enum members appear without being
    repeated as `choices`.

    Args:
        program (str): Program name shown in usage lines.
        description (str): Summary shown in global help.
        version (str): Version string printed for `--version`.
        epilog (str): Text printed after the command listing.
        console (Console): Target console.
        type_registry (TypeParserRegistry | None): Registry used to resolve parsers.
    """

    def __init__(
        self,
        program: str,
        description: str = "",
        version: str = "",
        epilog: str = "",
        console: Console | None = None,
        type_registry: TypeParserRegistry | None = None,
    ) -> None:
        self.program = program
        self.description = description
        self.version = version
        self.epilog = epilog
        self.console = console or default_console
        self.type_registry = type_registry or TypeParserRegistry()

    def _parser(self, item: OptionDescriptor | ArgumentDescriptor) -> TypeParser:
        return self.type_registry.resolve_for(item.type, item.case_sensitive)

    def possible_values(
        self, item: OptionDescriptor | ArgumentDescriptor
    ) -> tuple[str, ...]:
        return tuple(item.choices) or self._parser(item).choices

    def metavar(self, item: OptionDescriptor | ArgumentDescriptor) -> str:
        values = self.possible_values(item)
        if values:
            return "{" + ",".join(values) + "}"
        return item.dest.upper()

    def _is_flag(self, option: OptionDescriptor) -> bool:
        return self._parser(option).is_flag

    def option_usage(self, option: OptionDescriptor) -> str:
        flag = option.flags[0]
        text = flag if self._is_flag(option) else f"{flag} {self.metavar(option)}"
        return text if option.required else f"[{text}]"

    def argument_usage(self, argument: ArgumentDescriptor) -> str:
        text = self.metavar(argument)
        if self._parser(argument).is_collection:
            text = f"{text} ..."
        return text if argument.required else f"[{text}]"

    def usage(self, descriptor: CommandDescriptor, has_subcommands: bool = False) -> str:
        """Plain-text usage line for a command."""
        parts = [self.program, *descriptor.path]
        if has_subcommands:
            parts.append("<command>")
        parts.extend(self.option_usage(option) for option in descriptor.options)
        parts.extend(self.argument_usage(argument) for argument in descriptor.arguments)
        return " ".join(parts)

    def _details(self, item: OptionDescriptor | ArgumentDescriptor) -> str:
        details = [escape(item.description)] if item.description else []
        if item.required:
            details.append("[required]\\[required][/required]")
        env = getattr(item, "env", None)
        if env:
            details.append(f"[env]\\[env: {escape(env)}][/env]")
        if item.default is not None:
            details.append(f"(default: {escape(str(item.default))})")
        if not (isinstance(item, OptionDescriptor) and self._is_flag(item)):
            values = self.possible_values(item)
            if values:
                details.append(f"Possible values: {escape(', '.join(values))}")
        return "  ".join(details)

    def _line(self, label: str, style: str, details: str) -> None:
        padded = f"{label:<30}"
        if details and len(label) > 30:
            details = f"\n{'':<33}{details}"
        self.console.print(f"  [{style}]{escape(padded)}[/{style}] {details}".rstrip())

    def render_command(
        self, descriptor: CommandDescriptor, registry: CommandRegistry | None = None
    ) -> None:
        """Print usage, description, positionals, options and subcommands."""
        subcommands = registry.subcommands(descriptor) if registry else []
        usage = self.usage(descriptor, has_subcommands=bool(subcommands))
        self.console.print(f"[usage]usage:[/usage] [bold]{escape(usage)}[/bold]\n")

        if descriptor.description:
            self.console.print(escape(descriptor.description) + "\n")
        if descriptor.aliases:
            self.console.print(
                f"[bold]aliases:[/bold] {escape(', '.join(descriptor.aliases))}\n"
            )

        if descriptor.arguments:
            self.console.print("[bold]positional:[/bold]")
            for argument in descriptor.arguments:
                self._line(
                    self.metavar(argument), "argument", self._details(argument)
                )

        self.console.print("[bold]options:[/bold]")
        self._line("-h, --help", "option", "Show this help message and exit.")
        if not descriptor.path and self.version:
            self._line("-V, --version", "option", "Show the version and exit.")
        for option in descriptor.options:
            flags = ", ".join(option.flags)
            if not self._is_flag(option):
                flags = f"{flags} {self.metavar(option)}"
            self._line(flags, "option", self._details(option))

        if subcommands:
            self.console.print()
            self.console.print(self.command_table(subcommands, title="commands"))

        if descriptor.help_epilog:
            self.console.print("\n" + escape(descriptor.help_epilog))

    def command_table(
        self, descriptors: list[CommandDescriptor], title: str = "commands"
    ) -> Table:
        table = Table(title=title, title_justify="left", box=None, show_header=False)
        table.add_column("command", style="command", no_wrap=True)
        table.add_column("description")
        for descriptor in descriptors:
            if descriptor.hidden:
                continue
            name = descriptor.name
            if descriptor.aliases:
                name = f"{name} ({', '.join(descriptor.aliases)})"
            table.add_row(escape(name), escape(descriptor.description))
        return table

    def render_global(self, registry: CommandRegistry) -> None:
        """Print program usage and every visible command."""
        root = registry.root
        if root is not None:
            self.render_command(root, registry)
            others = [d for d in registry if d.path and len(d.path) > 1]
            if others:
                self.console.print()
                self.console.print(self.command_table(others, title="nested commands"))
            return

        self.console.print(
            f"[usage]usage:[/usage] [bold]{escape(self.program + ' <command> [options]')}[/bold]\n"
        )
        if self.description:
            self.console.print(escape(self.description) + "\n")
        commands = [descriptor for descriptor in registry if descriptor.path]
        if commands:
            self.console.print(self.command_table(commands))
        self.console.print("\n[bold]options:[/bold]")
        self._line("-h, --help", "option", "Show this help message and exit.")
        if self.version:
            self._line("-V, --version", "option", "Show the version and exit.")
        if self.epilog:
            self.console.print("\n" + escape(self.epilog))

    def render_version(self) -> None:
        self.console.print(f"[command]{escape(self.program)}[/command] {escape(self.version)}")
