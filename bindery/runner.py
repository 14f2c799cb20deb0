# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `InvocationRunner`, which executes a bound command once.

The runner awaits `command.run(signal)` (sync bodies run inline and may return
an awaitable) and normalizes the result into an `ExitOutcome`:

- `None` → `ExitOutcome.success()`
- `ExitOutcome` → returned unchanged
- `int` → that exit code (`0` is success)
- raised `CommandError` → `ExitOutcome.failure(message, exit_code)`

Any other exception propagates to the caller unchanged. There are no retries.
Execution hooks (`BEFORE`, `ON_SUCCESS`, `ON_ERROR`, `AFTER`, `ON_TEARDOWN`)
run around the body with an `ExecutionContext`.
"""
from __future__ import annotations

from typing import Any

from bindery.context import ExecutionContext
from bindery.exceptions import CommandError
from bindery.hook_manager import HookManager, HookType
from bindery.lifecycle import CancellationSignal
from bindery.logger import logger
from bindery.result import ExitOutcome
from bindery.utils import ensure_async


class InvocationRunner:
    """
    Runs bound commands and maps their results to `ExitOutcome`s.

    Args:
        hooks (HookManager | None): Execution hooks triggered around each run.
    """

    def __init__(self, hooks: HookManager | None = None) -> None:
        self.hooks = hooks or HookManager()

    async def run(
        self, command: Any, signal: CancellationSignal, name: str | None = None
    ) -> ExitOutcome:
        body = getattr(command, "run", None)
        if not callable(body):
            raise TypeError(f"{type(command).__name__} has no callable run() method")

        context = ExecutionContext(name=name or type(command).__name__, command=command)
        context.start_timer()
        try:
            await self.hooks.trigger(HookType.BEFORE, context)
            result = await ensure_async(body)(signal)
            outcome = self.to_outcome(result)
            context.result = outcome
            if outcome.ok:
                await self.hooks.trigger(HookType.ON_SUCCESS, context)
            else:
                await self.hooks.trigger(HookType.ON_ERROR, context)
            return outcome
        except CommandError as error:
            context.exception = error
            outcome = ExitOutcome.failure(error.message or str(error), error.exit_code)
            context.result = outcome
            logger.debug("[%s] CommandError: %s", context.name, error)
            await self.hooks.trigger(HookType.ON_ERROR, context)
            return outcome
        except Exception as error:
            context.exception = error
            await self.hooks.trigger(HookType.ON_ERROR, context)
            raise
        finally:
            context.stop_timer()
            await self.hooks.trigger(HookType.AFTER, context)
            await self.hooks.trigger(HookType.ON_TEARDOWN, context)
            logger.debug("%s", context.to_log_line())

    @staticmethod
    def to_outcome(result: Any) -> ExitOutcome:
        if result is None:
            return ExitOutcome.success()
        if isinstance(result, ExitOutcome):
            return result
        if isinstance(result, int) and not isinstance(result, bool):
            if result == 0:
                return ExitOutcome.success()
            return ExitOutcome.failure(f"Command exited with code {result}", result)
        logger.debug("Ignoring command return value %r", result)
        return ExitOutcome.success()
