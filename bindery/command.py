# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Command`, the base class for bindable command types.

The binder creates an instance through the command factory and assigns one
attribute per declared option and argument. The application then sets
`lifecycle` to the coordinator supervising the run, and the runner awaits
`run(signal)`.

A command body may:
- return `None` for success,
- return an `ExitOutcome` to choose the exit code explicitly,
- return an `int` exit code,
- raise `CommandError` to fail with a message and exit code.

Example:
    class Greet(Command):
        name: str

        async def run(self, signal):
            console.print(f"Hello {self.name}")
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bindery.lifecycle import CancellationSignal, LifecycleCoordinator
    from bindery.result import ExitOutcome


class Command:
    """Base class for commands executed by the `InvocationRunner`."""

    lifecycle: LifecycleCoordinator | None = None

    async def run(self, signal: CancellationSignal) -> ExitOutcome | int | None:
        raise NotImplementedError(f"{type(self).__name__} must implement run()")

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{key}={value!r}"
            for key, value in vars(self).items()
            if not key.startswith("_") and key != "lifecycle"
        )
        return f"{type(self).__name__}({fields})"

    def values(self) -> dict[str, Any]:
        """Bound attribute values, excluding the lifecycle handle."""
        return {
            key: value
            for key, value in vars(self).items()
            if not key.startswith("_") and key != "lifecycle"
        }
