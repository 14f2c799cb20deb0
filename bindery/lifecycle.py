# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Process lifecycle supervision for a single command run.

`LifecycleCoordinator` owns the root `CancellationSignal` and two ordered lists
of shutdown callbacks:

- pre-exit (`on_exiting`): run when the coordinator enters `EXITING`, after an
  interrupt or a shutdown request.
- post-exit (`on_exited`): run when it enters `EXITED`, only once every pre-exit
  callback has completed or failed.

State machine:

    RUNNING --request_shutdown()/signal--> EXITING --pre-exit done--> EXITED

Callbacks of one phase are started together with `asyncio.gather`. Sync
callbacks run in a worker thread through `asyncio.to_thread`, so a blocking
callback does not hold up the others. A failing callback never stops its
siblings or the next phase; the failures of a phase are collected into one
`AggregateCallbackError`, logged when the phase ends and raised by `shutdown()`
once teardown is over.

Registration while a phase is running:
- A callback for the running phase runs in a follow-up batch of that phase.
- A pre-exit callback registered once the pre-exit phase has finished runs
  with the post-exit callbacks.
- Anything registered after teardown is dropped with a warning.

Example:
    lifecycle = LifecycleCoordinator()
    lifecycle.on_exiting(flush_buffers)
    lifecycle.on_exited(close_connections)
    signal = lifecycle.create_linked_signal()
    ...
    await lifecycle.shutdown()
"""
from __future__ import annotations

import asyncio
import inspect
import signal as os_signal
import threading
from enum import Enum
from typing import Any, Awaitable, Callable, Union

from bindery.exceptions import AggregateCallbackError
from bindery.logger import logger
from bindery.utils import callable_name

LifecycleCallback = Union[Callable[[], None], Callable[[], Awaitable[None]]]


class CancellationSignal:
    """
    Thread-safe, one-way cancellation flag.

    Commands poll `cancelled` or `await wait()`. Linked children created with
    `link()` cancel when their parent cancels; cancelling a child never touches
    the parent.
    """

    def __init__(self, name: str = "signal") -> None:
        self.name = name
        self._cancelled = False
        self._reason: str | None = None
        self._callbacks: list[Callable[[CancellationSignal], None]] = []
        self._lock = threading.Lock()
        self._unlink: Callable[[], None] | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> bool:
        """Cancel the signal. Returns `False` if it was already cancelled."""
        with self._lock:
            if self._cancelled:
                return False
            self._cancelled = True
            self._reason = reason
            callbacks = list(self._callbacks)
            self._callbacks.clear()
        logger.debug("Signal '%s' cancelled: %s", self.name, reason)
        for callback in callbacks:
            try:
                callback(self)
            except Exception as error:
                logger.warning(
                    "Cancellation callback %s on '%s' failed: %s",
                    callable_name(callback),
                    self.name,
                    error,
                )
        return True

    def add_callback(
        self, callback: Callable[[CancellationSignal], None]
    ) -> Callable[[], None]:
        """
        Run `callback(signal)` on cancellation, immediately if already cancelled.

        Returns a function that removes the callback.
        """
        with self._lock:
            if not self._cancelled:
                self._callbacks.append(callback)
                return lambda: self._remove_callback(callback)
        callback(self)
        return lambda: None

    def _remove_callback(self, callback: Callable[[CancellationSignal], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def link(self, name: str | None = None) -> CancellationSignal:
        """Create a child signal cancelled whenever this one is."""
        child = CancellationSignal(name or f"{self.name}.child")
        child._unlink = self.add_callback(lambda parent: child.cancel(parent.reason))
        return child

    def close(self) -> None:
        """Detach this signal from its parent."""
        if self._unlink is not None:
            self._unlink()
            self._unlink = None

    async def wait(self) -> None:
        """Suspend until the signal is cancelled."""
        if self._cancelled:
            return
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[None] = loop.create_future()

        def wake(_: CancellationSignal) -> None:
            if not loop.is_closed():
                loop.call_soon_threadsafe(_resolve, waiter)

        remove = self.add_callback(wake)
        try:
            await waiter
        finally:
            remove()

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "active"
        return f"CancellationSignal(name={self.name!r}, {state})"


def _resolve(waiter: asyncio.Future[None]) -> None:
    if not waiter.done():
        waiter.set_result(None)


class LifecycleState(Enum):
    """Coordinator states, in the only order they are entered."""

    RUNNING = "running"
    EXITING = "exiting"
    EXITED = "exited"

    def __str__(self) -> str:
        return self.value


class LifecycleCoordinator:
    """
    Supervises cancellation and ordered shutdown callbacks for one run.

    Attributes:
        root_signal (CancellationSignal): Cancelled on the first shutdown request.
        interrupted (bool): Whether shutdown was triggered by an OS signal.
    """

    PHASES = (LifecycleState.EXITING, LifecycleState.EXITED)

    def __init__(self, name: str = "bindery") -> None:
        self.name = name
        self.root_signal = CancellationSignal(f"{name}.root")
        self.interrupted = False
        self._state = LifecycleState.RUNNING
        self._callbacks: dict[LifecycleState, list[LifecycleCallback]] = {
            phase: [] for phase in self.PHASES
        }
        self._completed: set[LifecycleState] = set()
        self._tasks: dict[LifecycleState, asyncio.Task[AggregateCallbackError | None]] = {}
        self._errors: list[AggregateCallbackError] = []
        self._lock = threading.Lock()
        self._signal_loop: asyncio.AbstractEventLoop | None = None
        self._installed_signals: list[os_signal.Signals] = []

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def torn_down(self) -> bool:
        return LifecycleState.EXITED in self._completed

    def create_linked_signal(self, name: str | None = None) -> CancellationSignal:
        return self.root_signal.link(name)

    def on_exiting(self, callback: LifecycleCallback) -> bool:
        """Register a pre-exit callback. Returns `False` once torn down."""
        return self._register(LifecycleState.EXITING, callback)

    def on_exited(self, callback: LifecycleCallback) -> bool:
        """Register a post-exit callback. Returns `False` once torn down."""
        return self._register(LifecycleState.EXITED, callback)

    def _register(self, phase: LifecycleState, callback: LifecycleCallback) -> bool:
        if not callable(callback):
            raise TypeError(f"{callback!r} is not callable")
        with self._lock:
            if self.torn_down:
                logger.warning(
                    "Ignoring %s callback %s registered after teardown",
                    phase,
                    callable_name(callback),
                )
                return False
            if phase in self._completed:
                phase = LifecycleState.EXITED
            self._callbacks[phase].append(callback)
        return True

    def request_shutdown(self, reason: str | None = None) -> None:
        """Cancel the root signal. Safe to call from signal handlers and threads."""
        self.root_signal.cancel(reason or "shutdown requested")

    def _phase_task(
        self, phase: LifecycleState
    ) -> asyncio.Task[AggregateCallbackError | None]:
        task = self._tasks.get(phase)
        if task is None:
            task = asyncio.ensure_future(self._run_phase(phase))
            self._tasks[phase] = task
        return task

    async def wait_for_termination(self) -> None:
        """Wait for the root signal, then run the pre-exit phase."""
        await self.root_signal.wait()
        await asyncio.shield(self._phase_task(LifecycleState.EXITING))

    async def shutdown(self, reason: str | None = None) -> None:
        """
        Drive both phases to completion. Safe to call more than once.

        Raises:
            AggregateCallbackError: One or more callbacks failed. When both
                phases failed the errors are combined with `phase=None`.
        """
        self.request_shutdown(reason)
        await asyncio.shield(self._phase_task(LifecycleState.EXITING))
        await asyncio.shield(self._phase_task(LifecycleState.EXITED))
        if len(self._errors) == 1:
            raise self._errors[0]
        if self._errors:
            raise AggregateCallbackError(
                [error for aggregate in self._errors for error in aggregate.errors]
            )

    async def _run_phase(self, phase: LifecycleState) -> AggregateCallbackError | None:
        self._state = phase
        logger.debug("Lifecycle '%s' entering %s", self.name, phase)
        errors: list[BaseException] = []
        processed = 0
        while True:
            with self._lock:
                batch = self._callbacks[phase][processed:]
                processed += len(batch)
                if not batch:
                    self._completed.add(phase)
                    break
            results = await asyncio.gather(
                *(self._invoke(callback) for callback in batch), return_exceptions=True
            )
            for callback, result in zip(batch, results):
                if isinstance(result, BaseException):
                    logger.warning(
                        "%s callback %s failed: %s", phase, callable_name(callback), result
                    )
                    errors.append(result)

        if not errors:
            return None
        aggregate = AggregateCallbackError(errors, phase=str(phase))
        self._errors.append(aggregate)
        logger.error("%s", aggregate)
        return aggregate

    @staticmethod
    async def _invoke(callback: LifecycleCallback) -> None:
        if inspect.iscoroutinefunction(callback):
            await callback()
            return
        result: Any = await asyncio.to_thread(callback)
        if inspect.isawaitable(result):
            await result

    def install_signal_handlers(
        self, loop: asyncio.AbstractEventLoop | None = None
    ) -> None:
        """Route SIGINT and SIGTERM to `request_shutdown` where supported."""
        loop = loop or asyncio.get_running_loop()
        for sig in (os_signal.SIGINT, os_signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._on_os_signal, sig)
            except (NotImplementedError, RuntimeError, ValueError) as error:
                logger.debug("Cannot install handler for %s: %s", sig.name, error)
                continue
            self._installed_signals.append(sig)
        self._signal_loop = loop

    def remove_signal_handlers(self) -> None:
        if self._signal_loop is None:
            return
        for sig in self._installed_signals:
            self._signal_loop.remove_signal_handler(sig)
        self._installed_signals.clear()
        self._signal_loop = None

    def _on_os_signal(self, sig: os_signal.Signals) -> None:
        logger.info("Received %s, shutting down", sig.name)
        self.interrupted = True
        self.request_shutdown(f"received {sig.name}")

    def __repr__(self) -> str:
        return f"LifecycleCoordinator(name={self.name!r}, state={self._state})"
