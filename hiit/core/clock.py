"""Repeating one-second tick source for workout sessions."""

from __future__ import annotations

import asyncio
import inspect
from typing import Awaitable, Callable, Optional, Union


TickCallback = Callable[[], Union[None, Awaitable[None]]]


class ClockDriver:
    """Emit ticks on the running loop until ``stop`` is called.

    The callback is awaited before the next interval starts, so at most one
    tick is ever in flight.
    """

    def __init__(self) -> None:
        self._task: Optional[asyncio.Task[None]] = None
        self._stop_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return (
            self._task is not None
            and not self._task.done()
            and not self._stop_event.is_set()
        )

    def start(self, on_tick: TickCallback, interval_ms: int = 1000) -> None:
        if self.is_running:
            raise RuntimeError("Clock already running")
        if interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")

        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(
            self._run(on_tick, interval_ms / 1000.0, self._stop_event)
        )

    def stop(self) -> None:
        self._stop_event.set()
        if self._task is not None and not self._task.done():
            if self._task is not asyncio.current_task():
                self._task.cancel()
        self._task = None

    async def _run(
        self,
        on_tick: TickCallback,
        interval_sec: float,
        stop_event: asyncio.Event,
    ) -> None:
        while not stop_event.is_set():
            await asyncio.sleep(interval_sec)
            if stop_event.is_set():
                return
            result = on_tick()
            if inspect.isawaitable(result):
                await result
