# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Per-run record handed to execution hooks.

The `InvocationRunner` creates one `ExecutionContext` per command run, starts
its clock before the `BEFORE` hooks, and fills in `result` or `exception`
before the outcome hooks fire.
"""
from __future__ import annotations

import time
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from bindery.result import ExitOutcome


class ExecutionContext(BaseModel):
    """What ran, how it ended and how long it took.

    `command` is the bound command instance. `extra` is scratch space that
    hooks may share between stages.
    """

    name: str
    command: Any = None
    result: ExitOutcome | None = None
    exception: BaseException | None = None

    started_at: datetime | None = None
    finished_at: datetime | None = None
    extra: dict[str, Any] = Field(default_factory=dict)

    _clock_start: float | None = None
    _clock_end: float | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def start_timer(self) -> None:
        self.started_at = datetime.now()
        self._clock_start = time.perf_counter()
        self._clock_end = None

    def stop_timer(self) -> None:
        self._clock_end = time.perf_counter()
        self.finished_at = datetime.now()

    @property
    def duration(self) -> float | None:
        """Seconds elapsed, measured up to now while the run is in progress."""
        if self._clock_start is None:
            return None
        end = self._clock_end if self._clock_end is not None else time.perf_counter()
        return end - self._clock_start

    @property
    def exit_code(self) -> int | None:
        return None if self.result is None else self.result.exit_code

    @property
    def success(self) -> bool:
        if self.exception is not None:
            return False
        return self.result is None or self.result.ok

    @property
    def status(self) -> str:
        return "OK" if self.success else "ERROR"

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "exit_code": self.exit_code,
            "exception": repr(self.exception) if self.exception else None,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "duration": self.duration,
            "extra": self.extra,
        }

    def to_log_line(self) -> str:
        fields = {
            "status": self.status,
            "exit_code": "n/a" if self.exit_code is None else self.exit_code,
            "duration": "n/a" if self.duration is None else f"{self.duration:.3f}s",
        }
        if self.exception is not None:
            fields["exception"] = type(self.exception).__name__
        pairs = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"[{self.name}] {pairs}"
