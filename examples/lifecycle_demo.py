import asyncio

from bindery import Application, Command, CommandBuilder, HookType
from bindery.console import console
from bindery.context import ExecutionContext
from bindery.utils import setup_logging

setup_logging()


class Worker(Command):
    async def run(self, signal):
        self.lifecycle.on_exiting(self.flush)
        self.lifecycle.on_exited(lambda: console.print("[dim]connections closed[/dim]"))
        for tick in range(self.ticks):
            if signal.cancelled:
                console.print(f"Stopping after {tick} ticks: {signal.reason}")
                return None
            console.print(f"tick {tick}")
            try:
                await asyncio.wait_for(signal.wait(), timeout=1)
            except asyncio.TimeoutError:
                continue
        return None

    async def flush(self):
        await asyncio.sleep(0.2)
        console.print("buffers flushed")


def timing(context: ExecutionContext):
    console.print(f"[dim]{context.to_log_line()}[/dim]")


app = Application(program="worker", description="Press Ctrl+C to stop early")
app.hooks.register(HookType.AFTER, timing)
app.add_command(CommandBuilder("", Worker).argument("ticks", type=int, default="10"))

# python lifecycle_demo.py 5   (Ctrl+C exits with code 130)
if __name__ == "__main__":
    app.run()
