# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""Small helpers shared across Bindery: async adaptation, naming, logging setup."""
from __future__ import annotations

import functools
import inspect
import logging
import os
import shutil
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import pythonjsonlogger.json
from rich.logging import RichHandler

from bindery.console import err_console

T = TypeVar("T")

JSON_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
TEXT_LOG_FORMAT = "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"
CONTAINER_MARKERS = ("docker", "kubepods", "containerd", "podman")
QUIET_LOGGERS = ("asyncio", "markdown_it")


def get_program_invocation() -> str:
    """Name to show in usage lines: the installed script, or `python <script>`."""
    script = sys.argv[0]
    installed = shutil.which(script)
    if installed:
        return Path(installed).name
    if "python" in Path(sys.executable).name:
        return f"python {script}"
    return script


def ensure_async(function: Callable[..., T]) -> Callable[..., Awaitable[T]]:
    """Wrap a sync callable so it can be awaited; coroutine functions pass through."""
    if inspect.iscoroutinefunction(function):
        return function  # type: ignore
    if not callable(function):
        raise TypeError(f"{function!r} is not callable")

    @functools.wraps(function)
    async def awaitable(*args, **kwargs) -> T:
        value = function(*args, **kwargs)
        if inspect.isawaitable(value):
            value = await value
        return value

    return awaitable


def callable_name(function: Any) -> str:
    return getattr(function, "__qualname__", None) or getattr(
        function, "__name__", repr(function)
    )


def running_in_container() -> bool:
    try:
        cgroup = Path("/proc/1/cgroup").read_text(encoding="UTF-8")
    except OSError:
        return False
    return any(marker in cgroup for marker in CONTAINER_MARKERS)


def _console_handler(mode: str) -> logging.Handler:
    if mode == "cli":
        return RichHandler(
            console=err_console,
            markup=True,
            rich_tracebacks=True,
            show_path=False,
            log_time_format="[%X]",
        )
    if mode == "json":
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(pythonjsonlogger.json.JsonFormatter(JSON_LOG_FORMAT))
        return handler
    raise ValueError(f"Unknown log mode {mode!r}; expected 'cli' or 'json'")


def setup_logging(
    mode: str | None = None,
    log_filename: str | None = None,
    json_log_to_file: bool = False,
    file_log_level: int = logging.DEBUG,
    console_log_level: int = logging.WARNING,
) -> None:
    """
    Install Bindery's log handlers on the root logger, replacing existing ones.

    Console records go to stderr so command output on stdout stays clean.

    Args:
        mode: "cli" for Rich-formatted records or "json" for one JSON object per
            record. Defaults to `BINDERY_LOG_MODE`, then to "json" inside a
            container and "cli" elsewhere.
        log_filename: Also append records to this file when given.
        json_log_to_file: Write JSON records to the file instead of plain text.
        file_log_level: Threshold for the file handler.
        console_log_level: Threshold for the stderr handler.

    Raises:
        ValueError: `mode` is neither "cli" nor "json".
    """
    mode = mode or os.getenv("BINDERY_LOG_MODE") or (
        "json" if running_in_container() else "cli"
    )
    handlers = [_console_handler(mode)]
    handlers[0].setLevel(console_log_level)

    if log_filename:
        file_handler = logging.FileHandler(log_filename, "a", "UTF-8")
        file_handler.setLevel(file_log_level)
        if json_log_to_file:
            file_handler.setFormatter(pythonjsonlogger.json.JsonFormatter(JSON_LOG_FORMAT))
        else:
            file_handler.setFormatter(logging.Formatter(TEXT_LOG_FORMAT))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)
    for handler in handlers:
        root.addHandler(handler)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("bindery").debug("Logging configured (%s mode)", mode)
