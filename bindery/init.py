# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""init.py"""
from pathlib import Path

from bindery.command import Command
from bindery.console import console
from bindery.exceptions import CommandError

TEMPLATE_COMMANDS = """\
# Command classes referenced from bindery.yaml.
# Run: python -m bindery --help to see available commands.

import asyncio

from bindery import Command, ExitOutcome
from bindery.console import console


class Greet(Command):
    name: str
    shout: bool
    times: int

    async def run(self, signal):
        message = f"Hello, {self.name}!"
        for _ in range(self.times):
            console.print(message.upper() if self.shout else message)


class Wait(Command):
    seconds: float

    async def run(self, signal):
        self.lifecycle.on_exiting(lambda: console.print("Stopping early..."))
        try:
            await asyncio.wait_for(signal.wait(), timeout=self.seconds)
        except asyncio.TimeoutError:
            console.print(f"Waited {self.seconds}s")
            return None
        return ExitOutcome.failure("Interrupted while waiting", 130)
"""

TEMPLATE_CONFIG = """\
# bindery.yaml: config-driven command declarations.
# Each command points at a class in commands.py.
program: sample
description: Sample Bindery project
version: 0.1.0
commands:
  - name: greet
    description: Print a greeting
    command: commands.Greet
    options:
      - flags: [-n, --name]
        required: true
        env: GREET_NAME
        description: Who to greet
      - flags: [-s, --shout]
        type: bool
        description: Upper-case the greeting
    arguments:
      - dest: times
        type: int
        default: 1
        description: How many times to greet
  - name: wait
    description: Wait until the timeout or Ctrl+C
    command: commands.Wait
    arguments:
      - dest: seconds
        type: float
        default: 5
"""


def init_project(name: str = ".") -> Path:
    """Write a sample `bindery.yaml` and `commands.py` into `name`."""
    target = Path(name).resolve()
    target.mkdir(parents=True, exist_ok=True)

    commands_path = target / "commands.py"
    config_path = target / "bindery.yaml"

    if commands_path.exists() or config_path.exists():
        raise CommandError(f"Project already initialized at {target}")

    commands_path.write_text(TEMPLATE_COMMANDS, encoding="UTF-8")
    config_path.write_text(TEMPLATE_CONFIG, encoding="UTF-8")

    console.print(f"Initialized Bindery project in {target}")
    return target


class InitCommand(Command):
    """Built-in `init` command available when no configuration is found."""

    name: str = "."

    def run(self, signal):
        init_project(self.name)
