import pytest

from bindery import Command, CommandBuilder, CommandRegistry
from bindery.exceptions import CommandNotFoundError, DuplicateCommandError


class Noop(Command):
    async def run(self, signal):
        return None


def build(name, *, aliases=(), arguments=()):
    builder = CommandBuilder(name, Noop, aliases=aliases)
    for dest in arguments:
        builder.argument(dest)
    return builder.build()


@pytest.fixture
def registry():
    registry = CommandRegistry()
    registry.register(build("deploy", aliases=["d"]))
    registry.register(build("config set", aliases=["s"]))
    registry.register(build("config get"))
    return registry


def test_register_and_resolve(registry):
    assert registry.resolve("deploy").name == "deploy"
    assert registry.resolve(["config", "set"]).name == "config set"
    assert registry.resolve("config s").name == "config set"
    assert registry.resolve("d").name == "deploy"
    assert len(registry) == 3


def test_contains(registry):
    assert "deploy" in registry
    assert "config get" in registry
    assert "config" not in registry


def test_iteration_is_sorted_by_path(registry):
    assert [descriptor.name for descriptor in registry] == [
        "config get",
        "config set",
        "deploy",
    ]


def test_duplicate_name_rejected(registry):
    with pytest.raises(DuplicateCommandError):
        registry.register(build("deploy"))


def test_alias_collision_rejected(registry):
    with pytest.raises(DuplicateCommandError):
        registry.register(build("destroy", aliases=["d"]))
    with pytest.raises(DuplicateCommandError):
        registry.register(build("d"))


def test_lookup_is_case_sensitive(registry):
    with pytest.raises(CommandNotFoundError):
        registry.resolve("Deploy")


def test_resolve_suggests_close_names(registry):
    with pytest.raises(CommandNotFoundError) as excinfo:
        registry.resolve("deplyo")
    assert "deploy" in excinfo.value.suggestions
    assert "Did you mean" in str(excinfo.value)
    assert excinfo.value.exit_code == 127


def test_children(registry):
    assert registry.children() == ["config", "d", "deploy"]
    assert registry.children("config") == ["get", "s", "set"]


def test_match_longest_prefix(registry):
    descriptor, rest = registry.match(["config", "set", "--key", "a"])
    assert descriptor.name == "config set"
    assert rest == ["--key", "a"]


def test_match_alias(registry):
    descriptor, rest = registry.match(["d", "now"])
    assert descriptor.name == "deploy"
    assert rest == ["now"]


def test_match_group_requires_subcommand(registry):
    with pytest.raises(CommandNotFoundError, match="requires a subcommand") as excinfo:
        registry.match(["config", "--key", "a"])
    assert excinfo.value.suggestions == ["get", "s", "set"]


def test_match_unknown_without_root(registry):
    with pytest.raises(CommandNotFoundError) as excinfo:
        registry.match(["deplo"])
    assert excinfo.value.suggestions == ["deploy"]


def test_match_empty_without_root(registry):
    with pytest.raises(CommandNotFoundError, match="No command specified"):
        registry.match([])


def test_root_command_receives_unmatched_argv():
    registry = CommandRegistry()
    registry.register(build("", arguments=["target"]))
    registry.register(build("status"))
    descriptor, rest = registry.match(["prod"])
    assert descriptor is registry.root
    assert rest == ["prod"]
    assert registry.match(["status"])[0].name == "status"


def test_root_without_arguments_rejects_stray_word():
    registry = CommandRegistry()
    registry.register(build(""))
    registry.register(build("status"))
    assert registry.match(["--flag"])[0] is registry.root
    with pytest.raises(CommandNotFoundError) as excinfo:
        registry.match(["stats"])
    assert "status" in excinfo.value.suggestions


def test_subcommands(registry):
    registry.register(build("config"))
    config = registry.resolve("config")
    assert [child.name for child in registry.subcommands(config)] == [
        "config get",
        "config set",
    ]
