# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""config.py
Declarative loader for Bindery applications.

Commands can be declared in YAML or TOML instead of Python:

    program: deploytool
    version: 1.0.0
    env_prefix: DEPLOY_
    hooks:
      before: [myapp.hooks.audit]
    commands:
      - name: deploy
        description: Deploy a service
        command: myapp.commands.Deploy
        aliases: [d]
        options:
          - flags: [-n, --name]
            required: true
            env: NAME
          - flags: [--replicas]
            type: int
            default: 1
        arguments:
          - dest: targets
            type: list[str]

Types are named with the built-in names below, `list[...]` / `tuple[...]` of
those, or a dotted import path (for `Enum` classes and registered types).
"""
from __future__ import annotations

import importlib
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any
from uuid import UUID

import toml
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from bindery.application import Application
from bindery.builder import CommandBuilder
from bindery.descriptors import CommandDescriptor
from bindery.exceptions import InvalidDescriptorError
from bindery.hook_manager import HookType
from bindery.logger import logger
from bindery.parser_types import (
    Char,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from bindery.sources import ChainedSource, EnvironmentSource, MappingSource

__all__ = [
    "EnvironmentSource",
    "MappingSource",
    "ChainedSource",
    "TYPE_NAMES",
    "import_object",
    "resolve_type",
    "RawOption",
    "RawArgument",
    "RawCommand",
    "BinderyConfig",
    "load_config",
    "loader",
]

TYPE_NAMES: dict[str, Any] = {
    "str": str,
    "string": str,
    "bool": bool,
    "int": int,
    "float": float,
    "decimal": Decimal,
    "char": Char,
    "uuid": UUID,
    "path": Path,
    "datetime": datetime,
    "date": date,
    "int8": Int8,
    "int16": Int16,
    "int32": Int32,
    "int64": Int64,
    "uint8": UInt8,
    "uint16": UInt16,
    "uint32": UInt32,
    "uint64": UInt64,
}


def import_object(dotted_path: str) -> Any:
    """Dynamically imports an object from a dotted path like 'my.module.Deploy'."""
    module_path, _, attr = dotted_path.rpartition(".")
    if not module_path:
        raise InvalidDescriptorError(f"Invalid import path: {dotted_path!r}")
    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as error:
        logger.error("Failed to import module '%s': %s", module_path, error)
        raise InvalidDescriptorError(
            f"Could not import '{dotted_path}': {error}. Ensure the module is "
            "installed and discoverable via PYTHONPATH."
        ) from error
    try:
        return getattr(module, attr)
    except AttributeError as error:
        logger.error(
            "Module '%s' does not have attribute '%s': %s", module_path, attr, error
        )
        raise InvalidDescriptorError(
            f"Module '{module_path}' has no attribute '{attr}'"
        ) from error


def resolve_type(name: Any) -> Any:
    """Turn a declared type name into a type identifier."""
    if not isinstance(name, str):
        return name
    text = name.strip()
    lowered = text.lower()
    if lowered in TYPE_NAMES:
        return TYPE_NAMES[lowered]
    for container in ("list", "tuple"):
        if lowered.startswith(f"{container}[") and lowered.endswith("]"):
            inner = text[len(container) + 1 : -1].strip()
            if container == "tuple" and inner.endswith(", ..."):
                inner = inner[: -len(", ...")].strip()
            element = resolve_type(inner)
            return list[element] if container == "list" else tuple[element, ...]
    if "." in text:
        return import_object(text)
    raise InvalidDescriptorError(f"Unknown type name: {name!r}")


def _default_text(cls, value: Any) -> Any:
    """Defaults are kept as text so the type parser converts them."""
    if isinstance(value, (bool, int, float)):
        return str(value)
    if isinstance(value, list):
        return [str(item) for item in value]
    return value


class RawOption(BaseModel):
    """Raw option model for Bindery configuration."""

    flags: list[str]
    dest: str | None = None
    type: str = "str"
    required: bool = False
    env: str | None = None
    choices: list[Any] | None = None
    case_sensitive: bool = False
    default: Any = None
    description: str = ""

    @field_validator("flags", mode="before")
    @classmethod
    def split_flags(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.replace(",", " ").split()
        return value

    coerce_default = field_validator("default", mode="before")(_default_text)


class RawArgument(BaseModel):
    """Raw positional argument model for Bindery configuration."""

    dest: str
    type: str = "str"
    required: bool = False
    choices: list[Any] | None = None
    case_sensitive: bool = False
    default: Any = None
    description: str = ""

    coerce_default = field_validator("default", mode="before")(_default_text)


class RawCommand(BaseModel):
    """Raw command model for Bindery configuration."""

    name: str = ""
    description: str = ""
    command: str
    aliases: list[str] = Field(default_factory=list)
    options: list[RawOption] = Field(default_factory=list)
    arguments: list[RawArgument] = Field(default_factory=list)
    help_epilog: str = ""
    hidden: bool = False

    def to_descriptor(self) -> CommandDescriptor:
        builder = CommandBuilder(
            self.name,
            import_object(self.command),
            description=self.description,
            aliases=self.aliases,
            help_epilog=self.help_epilog,
            hidden=self.hidden,
        )
        for option in self.options:
            builder.option(
                *option.flags,
                dest=option.dest,
                type=resolve_type(option.type),
                required=option.required,
                env=option.env,
                choices=option.choices,
                case_sensitive=option.case_sensitive,
                default=option.default,
                description=option.description,
            )
        for argument in self.arguments:
            builder.argument(
                argument.dest,
                type=resolve_type(argument.type),
                required=argument.required,
                choices=argument.choices,
                case_sensitive=argument.case_sensitive,
                default=argument.default,
                description=argument.description,
            )
        return builder.build()


class BinderyConfig(BaseModel):
    """Bindery application configuration model."""

    program: str | None = None
    description: str = ""
    version: str = "0.0.0"
    epilog: str = ""
    env_prefix: str = ""
    environment: dict[str, str] = Field(default_factory=dict)
    debug_hooks: bool = False
    hooks: dict[str, list[str]] = Field(default_factory=dict)
    commands: list[RawCommand] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, value: Any) -> Any:
        return value if value is None else str(value)

    @field_validator("environment", mode="before")
    @classmethod
    def coerce_environment(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(key): str(item) for key, item in value.items()}
        return value

    @field_validator("hooks")
    @classmethod
    def validate_hook_types(cls, value: dict[str, list[str]]) -> dict[str, list[str]]:
        for hook_type in value:
            HookType(hook_type)
        return value

    def descriptors(self) -> list[CommandDescriptor]:
        return [command.to_descriptor() for command in self.commands]

    def to_application(self, **kwargs: Any) -> Application:
        configuration = EnvironmentSource(prefix=self.env_prefix)
        if self.environment:
            configuration = ChainedSource(configuration, MappingSource(self.environment))
        app = Application(
            program=self.program,
            description=self.description,
            version=self.version,
            epilog=self.epilog,
            configuration=kwargs.pop("configuration", configuration),
            debug_hooks=self.debug_hooks,
            **kwargs,
        )
        for hook_type, paths in self.hooks.items():
            for path in paths:
                app.hooks.register(hook_type, import_object(path))
        app.add_commands(self.descriptors())
        return app


def load_config(file_path: Path | str) -> BinderyConfig:
    """
    Read and validate a YAML or TOML configuration file.

    Raises:
        FileNotFoundError: The file does not exist.
        ValueError: The format is unsupported or the content is malformed.
    """
    if isinstance(file_path, (str, Path)):
        path = Path(file_path)
    else:
        raise TypeError("file_path must be a string or Path object.")

    if not path.is_file():
        raise FileNotFoundError(f"No such config file: {file_path}")

    suffix = path.suffix
    with path.open("r", encoding="UTF-8") as config_file:
        if suffix in (".yaml", ".yml"):
            raw_config = yaml.safe_load(config_file)
        elif suffix == ".toml":
            raw_config = toml.load(config_file)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    if not isinstance(raw_config, dict):
        raise ValueError(
            "Configuration file must contain a mapping with a list of commands.\n"
            "Example:\n"
            "program: mytool\n"
            "commands:\n"
            "  - name: greet\n"
            "    command: my_module.Greet"
        )
    try:
        config = BinderyConfig(**raw_config)
    except ValidationError as error:
        raise ValueError(f"Invalid configuration in {path}: {error}") from error
    logger.debug("Loaded %d command(s) from %s", len(config.commands), path)
    return config


def loader(file_path: Path | str, **kwargs: Any) -> Application:
    """
    Load a Bindery application from a YAML or TOML file.

    Each command needs at least `command`, the dotted import path of its class.

    Args:
        file_path (str | Path): Path to the config file.
        **kwargs: Extra `Application` arguments (`console`, `factory`, ...).

    Returns:
        Application: An application with every declared command registered.
    """
    return load_config(file_path).to_application(**kwargs)
