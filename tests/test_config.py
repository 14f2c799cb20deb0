import textwrap
from enum import Enum
from io import StringIO

import pytest
from rich.console import Console

from bindery import HookType
from bindery.config import BinderyConfig, load_config, loader, resolve_type
from bindery.exceptions import InvalidDescriptorError
from bindery.parser_types import Int8
from bindery.sources import ChainedSource, EnvironmentSource, MappingSource
from bindery.themes import get_nord_theme

COMMANDS_MODULE = '''
from enum import Enum

from bindery import Command

CALLS = []


class Level(Enum):
    LOW = "low"
    HIGH = "high"


class Greet(Command):
    async def run(self, signal):
        CALLS.append(("greet", self.name, self.times, self.level))


def audit(context):
    CALLS.append(("audit", context.name))
'''


@pytest.fixture
def commands_module(tmp_path, monkeypatch):
    (tmp_path / "cfg_commands.py").write_text(COMMANDS_MODULE)
    monkeypatch.syspath_prepend(str(tmp_path))
    import cfg_commands

    cfg_commands.CALLS.clear()
    yield cfg_commands


def quiet_console():
    return Console(file=StringIO(), width=120, theme=get_nord_theme())


YAML_CONFIG = """
program: greeter
version: 1.0
env_prefix: GREETER_
environment:
  LEVEL: high
hooks:
  before: [cfg_commands.audit]
commands:
  - name: greet
    description: Say hello
    command: cfg_commands.Greet
    aliases: [g]
    options:
      - flags: [-n, --name]
        required: true
      - flags: --level
        type: cfg_commands.Level
        env: LEVEL
    arguments:
      - dest: times
        type: int
        default: 1
"""

TOML_CONFIG = """
program = "greeter"

[[commands]]
name = "greet"
command = "cfg_commands.Greet"

[[commands.options]]
flags = ["-n", "--name"]
default = "world"

[[commands.options]]
flags = ["--level"]
type = "cfg_commands.Level"

[[commands.arguments]]
dest = "times"
type = "int8"
default = 2
"""


@pytest.mark.asyncio
async def test_yaml_loader_builds_application(tmp_path, commands_module, monkeypatch):
    monkeypatch.delenv("GREETER_LEVEL", raising=False)
    path = tmp_path / "bindery.yaml"
    path.write_text(YAML_CONFIG)
    app = loader(
        path,
        install_signal_handlers=False,
        console=quiet_console(),
        err_console=quiet_console(),
    )
    assert app.program == "greeter"
    assert app.version == "1.0"
    assert "g" in app.commands

    assert await app.run_async(["g", "-n", "Ada", "3"]) == 0
    assert commands_module.CALLS == [
        ("audit", "greet"),
        ("greet", "Ada", 3, commands_module.Level.HIGH),
    ]


@pytest.mark.asyncio
async def test_process_environment_wins_over_declared(tmp_path, commands_module, monkeypatch):
    monkeypatch.setenv("GREETER_LEVEL", "low")
    path = tmp_path / "bindery.yaml"
    path.write_text(YAML_CONFIG)
    app = loader(path, install_signal_handlers=False, console=quiet_console())
    assert await app.run_async(["greet", "-n", "Ada"]) == 0
    assert commands_module.CALLS[-1] == ("greet", "Ada", 1, commands_module.Level.LOW)


@pytest.mark.asyncio
async def test_toml_loader(tmp_path, commands_module):
    path = tmp_path / "bindery.toml"
    path.write_text(TOML_CONFIG)
    app = loader(path, install_signal_handlers=False, console=quiet_console())
    assert await app.run_async(["greet"]) == 0
    assert commands_module.CALLS == [("greet", "world", 2, commands_module.Level.LOW)]


def test_config_chains_environment(tmp_path, commands_module):
    path = tmp_path / "bindery.yaml"
    path.write_text(YAML_CONFIG)
    config = load_config(path)
    assert config.environment == {"LEVEL": "high"}
    assert config.hooks == {"before": ["cfg_commands.audit"]}
    app = config.to_application(install_signal_handlers=False)
    assert isinstance(app.binder.configuration, ChainedSource)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_unsupported_suffix(tmp_path):
    path = tmp_path / "bindery.json"
    path.write_text("{}")
    with pytest.raises(ValueError, match="Unsupported"):
        load_config(path)


def test_non_mapping_rejected(tmp_path):
    path = tmp_path / "bindery.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="mapping"):
        load_config(path)


def test_invalid_hook_type_rejected(tmp_path):
    path = tmp_path / "bindery.yaml"
    path.write_text(
        textwrap.dedent(
            """
            hooks:
              sometimes: [x.y]
            """
        )
    )
    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(path)


def test_command_requires_import_path():
    config = BinderyConfig(commands=[{"name": "x", "command": "not_a_module_xyz.Thing"}])
    with pytest.raises(InvalidDescriptorError, match="Could not import"):
        config.descriptors()


@pytest.mark.parametrize(
    "name, expected",
    [
        ("int", int),
        ("String", str),
        ("int8", Int8),
        ("list[int]", list[int]),
        ("tuple[float, ...]", tuple[float, ...]),
    ],
)
def test_resolve_type_names(name, expected):
    assert resolve_type(name) == expected


def test_resolve_type_dotted_path():
    class Local(Enum):
        A = "a"

    assert resolve_type("bindery.hook_manager.HookType") is HookType
    assert resolve_type(Local) is Local
    with pytest.raises(InvalidDescriptorError):
        resolve_type("mystery")


def test_sources():
    assert EnvironmentSource("APP_", {"APP_NAME": "x"}).get("NAME") == "x"
    assert EnvironmentSource(environ={}).get("NAME") is None
    assert MappingSource({"PORT": 80}).get("PORT") == "80"
    chained = ChainedSource(MappingSource({"A": ""}), MappingSource({"A": "b"}))
    assert chained.get("A") == "b"
    assert chained.get("missing") is None
