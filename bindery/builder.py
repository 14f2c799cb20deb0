# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `CommandBuilder`, a fluent way to declare a `CommandDescriptor`.

Options are declared with argparse-style flags, arguments get consecutive
positions in declaration order:

    descriptor = (
        CommandBuilder("deploy", Deploy, description="Deploy a service")
        .option("-n", "--name", required=True, env="DEPLOY_NAME")
        .option("--replicas", type=int, default=1)
        .argument("targets", type=list[str])
        .build()
    )

The destination name defaults to the long flag with dashes converted to
underscores, as argparse does.
"""
from __future__ import annotations

from typing import Any, Sequence

from pydantic import ValidationError

from bindery.descriptors import ArgumentDescriptor, CommandDescriptor, OptionDescriptor
from bindery.exceptions import InvalidDescriptorError


def _validation_message(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in detail['loc']) or 'value'}: {detail['msg']}"
        for detail in error.errors()
    )


class CommandBuilder:
    """
    Accumulates options and arguments, then produces a frozen `CommandDescriptor`.

    Args:
        name (str | Sequence[str]): Command path; `""` declares the root command.
        command_type (Any): Class instantiated during binding.
        description (str): One-line summary for help output.
        aliases (Sequence[str]): Alternate spellings of the last path segment.
        help_epilog (str): Text printed after the option list.
        hidden (bool): Hide the command from listings.
    """

    def __init__(
        self,
        name: str | Sequence[str],
        command_type: Any,
        description: str = "",
        aliases: Sequence[str] = (),
        help_epilog: str = "",
        hidden: bool = False,
    ) -> None:
        self.name = name
        self.command_type = command_type
        self.description = description
        self.aliases = tuple(aliases)
        self.help_epilog = help_epilog
        self.hidden = hidden
        self._options: list[OptionDescriptor] = []
        self._arguments: list[ArgumentDescriptor] = []

    @staticmethod
    def _split_flags(flags: Sequence[str]) -> tuple[str | None, str | None]:
        short = long = None
        for flag in flags:
            if not isinstance(flag, str) or not flag.startswith("-") or flag == "-":
                raise InvalidDescriptorError(
                    f"Invalid flag {flag!r}: flags must start with '-' or '--'"
                )
            if flag.startswith("--"):
                if long is not None:
                    raise InvalidDescriptorError(f"Multiple long flags given: {flags}")
                long = flag[2:]
            else:
                if short is not None:
                    raise InvalidDescriptorError(f"Multiple short flags given: {flags}")
                short = flag[1:]
        return short, long

    def option(
        self,
        *flags: str,
        dest: str | None = None,
        type: Any = str,
        required: bool = False,
        env: str | None = None,
        choices: Sequence[Any] | None = None,
        case_sensitive: bool = False,
        default: Any = None,
        description: str = "",
    ) -> CommandBuilder:
        """Declare an option by its flags (`"-n"`, `"--name"`)."""
        if not flags:
            raise InvalidDescriptorError("An option requires at least one flag")
        short, long = self._split_flags(flags)
        if dest is None:
            dest = (long or short or "").replace("-", "_")
        self._options.append(
            self._model(
                OptionDescriptor,
                dest=dest,
                short=short,
                long=long,
                type=type,
                required=required,
                env=env,
                choices=choices,
                case_sensitive=case_sensitive,
                default=default,
                description=description,
            )
        )
        return self

    def argument(
        self,
        dest: str,
        type: Any = str,
        required: bool = False,
        choices: Sequence[Any] | None = None,
        case_sensitive: bool = False,
        default: Any = None,
        description: str = "",
    ) -> CommandBuilder:
        """Declare the next positional argument."""
        self._arguments.append(
            self._model(
                ArgumentDescriptor,
                dest=dest,
                position=len(self._arguments),
                type=type,
                required=required,
                choices=choices,
                case_sensitive=case_sensitive,
                default=default,
                description=description,
            )
        )
        return self

    def build(self) -> CommandDescriptor:
        return self._model(
            CommandDescriptor,
            name=self.name,
            description=self.description,
            command_type=self.command_type,
            options=tuple(self._options),
            arguments=tuple(self._arguments),
            aliases=self.aliases,
            help_epilog=self.help_epilog,
            hidden=self.hidden,
        )

    @staticmethod
    def _model(model: type, **fields: Any) -> Any:
        try:
            return model(**fields)
        except ValidationError as error:
            raise InvalidDescriptorError(_validation_message(error)) from error
