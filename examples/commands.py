from bindery import Command, CommandError
from bindery.console import console

SETTINGS: dict[str, str] = {"region": "us-east"}


class ConfigGet(Command):
    async def run(self, signal):
        if self.key not in SETTINGS:
            raise CommandError(f"No such key: {self.key}", exit_code=3)
        console.print(SETTINGS[self.key])


class ConfigSet(Command):
    async def run(self, signal):
        SETTINGS[self.key] = self.value
        console.print(f"{self.key} = {self.value}")


def announce(context):
    console.print(f"[dim]running {context.name}[/dim]")
