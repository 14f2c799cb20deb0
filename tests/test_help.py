from enum import Enum, IntEnum
from io import StringIO
from typing import Optional

import pytest
from rich.console import Console

from bindery import Command, CommandBuilder, CommandRegistry
from bindery.help import HelpFormatter
from bindery.themes import get_nord_theme


class Noop(Command):
    async def run(self, signal):
        return None


class Level(IntEnum):
    NONE = 0
    LOW = 1


class Color(Enum):
    RED = "red"
    BLUE = "blue"


@pytest.fixture
def formatter():
    console = Console(file=StringIO(), width=120, theme=get_nord_theme())
    return HelpFormatter("tool", description="A tool", version="2.0", console=console)


def output(formatter):
    return formatter.console.file.getvalue()


@pytest.fixture
def registry():
    registry = CommandRegistry()
    registry.register(
        CommandBuilder("config", Noop, description="Manage configuration").build()
    )
    registry.register(
        CommandBuilder(
            "config set", Noop, description="Set a value", help_epilog="Values persist."
        )
        .option("-k", "--key", required=True, env="CONFIG_KEY", description="Key name")
        .option("--force", type=bool)
        .option("--mode", choices=["fast", "safe"], default="safe")
        .argument("values", type=list[str])
        .build()
    )
    registry.register(CommandBuilder("secret", Noop, hidden=True).build())
    return registry


def test_usage_line(formatter, registry):
    descriptor = registry.resolve("config set")
    assert (
        formatter.usage(descriptor)
        == "tool config set -k KEY [--force] [--mode {fast,safe}] [VALUES ...]"
    )


def test_command_help_sections(formatter, registry):
    formatter.render_command(registry.resolve("config set"), registry)
    text = output(formatter)
    assert "Set a value" in text
    assert "positional:" in text
    assert "options:" in text
    assert "-h, --help" in text
    assert "-k, --key KEY" in text
    assert "[env: CONFIG_KEY]" in text
    assert "[required]" in text
    assert "(default: safe)" in text
    assert "Values persist." in text
    assert "--version" not in text


def test_group_help_lists_subcommands(formatter, registry):
    formatter.render_command(registry.resolve("config"), registry)
    text = output(formatter)
    assert "tool config <command>" in text
    assert "Set a value" in text


def test_global_help_hides_hidden_commands(formatter, registry):
    formatter.render_global(registry)
    text = output(formatter)
    assert "tool <command> [options]" in text
    assert "A tool" in text
    assert "config" in text
    assert "secret" not in text
    assert "-V, --version" in text


def test_root_help_shows_version_flag(formatter):
    registry = CommandRegistry()
    registry.register(CommandBuilder("", Noop).option("--color", type=Color).build())
    formatter.render_global(registry)
    text = output(formatter)
    assert "usage: tool [--color {RED,BLUE}]" in text
    assert "-V, --version" in text


def test_enum_members_listed_as_possible_values(formatter):
    descriptor = (
        CommandBuilder("tune", Noop)
        .option("--level", type=Level, description="Lvl")
        .argument("shade", type=Color)
        .build()
    )
    formatter.render_command(descriptor)
    text = output(formatter)
    assert "--level {NONE,LOW}" in text
    assert "Possible values: NONE, LOW" in text
    assert "Possible values: RED, BLUE" in text
    assert formatter.usage(descriptor) == "tool tune [--level {NONE,LOW}] [{RED,BLUE}]"


def test_flag_detection_follows_resolved_parser(formatter):
    descriptor = (
        CommandBuilder("sync", Noop)
        .option("--dry-run", type=Optional[bool])
        .option("--tags", type=list[int])
        .build()
    )
    assert formatter.usage(descriptor) == "tool sync [--dry-run] [--tags TAGS]"


def test_version(formatter):
    formatter.render_version()
    assert output(formatter).strip() == "tool 2.0"
