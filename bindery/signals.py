# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines flow control signals used internally by Bindery.

These signals are raised to interrupt the normal binding or dispatch flow
(displaying help for a command) without being treated as
traditional exceptions.

All signals inherit from `FlowSignal`, which is a subclass of `BaseException`
to ensure they bypass standard `except Exception` blocks.

Signals:
- HelpSignal: Help was requested for the application or a single command.
"""
from __future__ import annotations

from typing import Any


class FlowSignal(BaseException):
    """Base class for all flow control signals in Bindery.

    These are not errors. They're used to short-circuit binding when the user
    asked for something other than running a command.
    """


class HelpSignal(FlowSignal):
    """Raised when `-h` / `--help` is encountered while binding."""

    def __init__(
        self, message: str = "Help signal received.", descriptor: Any = None
    ) -> None:
        super().__init__(message)
        self.descriptor = descriptor

