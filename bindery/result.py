# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the exit codes and the `ExitOutcome` result type used by Bindery.

Command bodies may return an `ExitOutcome` directly to report a declared
failure without raising. The `InvocationRunner` also converts a raised
`CommandError` into an `ExitOutcome`, so both styles end up as a single
value that the application maps to the process exit code.

Exit codes:
- SUCCESS (0): The command completed.
- COMMAND_FAILURE (1): Default code for a declared command failure.
- USAGE (2): Binding failed (unknown option, bad value, missing required input).
- UNEXPECTED (70): An unmapped exception escaped the command body.
- COMMAND_NOT_FOUND (127): The requested command path is not registered.
- INTERRUPTED (130): The run was cancelled by an operator interrupt.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes reserved by Bindery."""

    SUCCESS = 0
    COMMAND_FAILURE = 1
    USAGE = 2
    UNEXPECTED = 70
    COMMAND_NOT_FOUND = 127
    INTERRUPTED = 130

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ExitOutcome:
    """
    Result of running a single bound command.

    Use `ExitOutcome.success()` or `ExitOutcome.failure(message, exit_code)`
    rather than constructing it directly.

    Attributes:
        exit_code (int): Process exit code; 0 only for success.
        message (str): Human-readable failure message (empty on success).
    """

    exit_code: int = ExitCode.SUCCESS
    message: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.exit_code, int) or isinstance(self.exit_code, bool):
            raise TypeError(f"exit_code must be an int, got {self.exit_code!r}")

    @classmethod
    def success(cls) -> ExitOutcome:
        return cls(exit_code=ExitCode.SUCCESS)

    @classmethod
    def failure(
        cls, message: str, exit_code: int = ExitCode.COMMAND_FAILURE
    ) -> ExitOutcome:
        if exit_code == ExitCode.SUCCESS:
            raise ValueError("A failure outcome requires a non-zero exit code")
        return cls(exit_code=int(exit_code), message=message)

    @property
    def ok(self) -> bool:
        return self.exit_code == ExitCode.SUCCESS

    def __str__(self) -> str:
        if self.ok:
            return "<ExitOutcome success>"
        return f"<ExitOutcome failure code={self.exit_code} message={self.message!r}>"
