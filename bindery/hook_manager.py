# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Execution hooks for the `InvocationRunner`.

A hook receives the `ExecutionContext` of the command being run. Hooks are
observers: a hook that raises is logged and skipped, and the command's outcome
is left untouched.

    hooks = HookManager()
    hooks.register("before", audit)
    hooks.register(HookType.ON_ERROR, page_oncall)
"""
from __future__ import annotations

import inspect
from collections import defaultdict
from enum import Enum
from typing import Awaitable, Callable, Union

from bindery.context import ExecutionContext
from bindery.logger import logger
from bindery.utils import callable_name

Hook = Union[
    Callable[[ExecutionContext], None], Callable[[ExecutionContext], Awaitable[None]]
]

_SHORT_NAMES = {
    "success": "on_success",
    "error": "on_error",
    "teardown": "on_teardown",
}


class HookType(Enum):
    """Points in a command run where hooks fire, in firing order.

    `ON_SUCCESS` and `ON_ERROR` are exclusive; `AFTER` and `ON_TEARDOWN`
    always fire. Lookup by value is case-insensitive and accepts the short
    names "success", "error" and "teardown".
    """

    BEFORE = "before"
    ON_SUCCESS = "on_success"
    ON_ERROR = "on_error"
    AFTER = "after"
    ON_TEARDOWN = "on_teardown"

    @classmethod
    def _missing_(cls, value: object) -> HookType:
        if isinstance(value, str):
            key = value.strip().lower()
            key = _SHORT_NAMES.get(key, key)
            for member in cls:
                if member.value == key:
                    return member
        names = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown hook type {value!r}; expected one of: {names}")

    def __str__(self) -> str:
        return self.value


class HookManager:
    """Ordered hook lists, one per `HookType`."""

    def __init__(self) -> None:
        self._hooks: defaultdict[HookType, list[Hook]] = defaultdict(list)

    def register(self, hook_type: HookType | str, hook: Hook) -> Hook:
        """Append `hook` to the list for `hook_type` and return it.

        Raises:
            ValueError: `hook_type` names no stage.
            TypeError: `hook` is not callable.
        """
        if not callable(hook):
            raise TypeError(f"Hook {hook!r} is not callable")
        self._hooks[HookType(hook_type)].append(hook)
        return hook

    def hooks(self, hook_type: HookType | str) -> list[Hook]:
        return list(self._hooks[HookType(hook_type)])

    def clear(self, hook_type: HookType | str | None = None) -> None:
        if hook_type is None:
            self._hooks.clear()
        else:
            self._hooks.pop(HookType(hook_type), None)

    async def trigger(self, hook_type: HookType, context: ExecutionContext) -> None:
        for hook in self.hooks(hook_type):
            try:
                await self._call(hook, context)
            except Exception as error:
                logger.warning(
                    "Hook %s failed at %s of '%s': %s",
                    callable_name(hook),
                    hook_type,
                    context.name,
                    error,
                )

    @staticmethod
    async def _call(hook: Hook, context: ExecutionContext) -> None:
        outcome = hook(context)
        if inspect.isawaitable(outcome):
            await outcome

    def __repr__(self) -> str:
        registered = {
            str(hook_type): [callable_name(hook) for hook in hooks]
            for hook_type, hooks in self._hooks.items()
            if hooks
        }
        return f"HookManager({registered})"
