from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path

from bindery import Application, Command, CommandBuilder
from bindery.console import console
from bindery.parser_types import UInt16


class Region(Enum):
    US_EAST = "us-east"
    EU_WEST = "eu-west"


class Provision(Command):
    async def run(self, signal):
        for key, value in self.values().items():
            console.print(f"{key:>10}: {value!r}")


app = Application(program="provision", description="Type conversion demo")
app.add_command(
    CommandBuilder("", Provision)
    .option("-r", "--region", type=Region, description="Target region")
    .option("-p", "--port", type=UInt16, default="8080")
    .option("--budget", type=Decimal, default="0")
    .option("--at", type=datetime, description="Start time")
    .option("-v", "--verbose", type=bool)
    .option("-t", "--tag", type=list[str], description="Repeatable tag")
    .option("--size", choices=["small", "large"], default="small")
    .argument("files", type=list[Path], description="Files to upload")
)

# python type_validation.py -r eu-west -t a -t b --at "2025-01-31 12:00" a.txt b.txt
# python type_validation.py --port 70000
if __name__ == "__main__":
    app.run()
