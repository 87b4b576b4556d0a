"""Settings Debouncer — coalesces rapid settings edits into one persisted write.

Invariants:
    - N schedule() calls inside one quiet window produce exactly 1 persist call, with the Nth value
    - schedule() cancels only the pending timer, never a write already handed to the gateway
    - Writes are serialized: a write starts only after the previous one finished,
      so the backend always ends with the newest value
    - Status: schedule → SAVING; write ok → SAVED → IDLE after the display window;
      write failed → ERROR until the next schedule()
    - A write that finishes after a newer schedule() does not touch the status
      (the newer edit owns it)
    - No retry on failure

Design Decisions:
    - asyncio tasks as timers: cancel-and-reschedule is task.cancel() + create_task()
    - Generation counter instead of comparing values: two identical edits still count as two
    - Status listeners are plain callables so the store, routes and tests observe the same sequence
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from origen.core.domain_types import SaveStatus

logger = logging.getLogger(__name__)


async def _finished(task: asyncio.Task) -> None:
    """Wait for `task` without cancelling it and without inheriting its cancellation."""
    try:
        await asyncio.shield(task)
    except asyncio.CancelledError:
        if not task.cancelled():
            raise


class SettingsDebouncer:
    """Quiet-period scheduler with a save-status state machine."""

    def __init__(
        self,
        persist: Callable[[Any], Awaitable[None]],
        delay: float = 0.8,
        saved_display: float = 3.0,
        on_status_change: Callable[[SaveStatus], object] | None = None,
    ):
        self._persist = persist
        self.delay = delay
        self.saved_display = saved_display
        self._status = SaveStatus.IDLE
        self._generation = 0
        self._timer: asyncio.Task | None = None
        self._write: asyncio.Task | None = None
        self._revert: asyncio.Task | None = None
        self._listeners: list[Callable[[SaveStatus], object]] = []
        if on_status_change is not None:
            self._listeners.append(on_status_change)

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def pending(self) -> bool:
        """True while an edit is waiting for its quiet window to elapse."""
        return self._timer is not None

    def add_listener(self, listener: Callable[[SaveStatus], object]) -> None:
        self._listeners.append(listener)

    def _set_status(self, status: SaveStatus) -> None:
        if status == self._status:
            return
        self._status = status
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception as e:
                logger.error(f"Save-status listener failed: {e}", exc_info=True)

    def schedule(self, value: Any) -> None:
        """Record an edit: restart the quiet window with the latest value."""
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
        if self._revert is not None:
            self._revert.cancel()
            self._revert = None
        self._set_status(SaveStatus.SAVING)
        self._timer = asyncio.get_running_loop().create_task(
            self._fire(value, self._generation),
        )

    async def _fire(self, value: Any, generation: int) -> None:
        await asyncio.sleep(self.delay)
        # Past the window: from here on the write is not cancellable by schedule()
        self._timer = None
        previous, self._write = self._write, asyncio.current_task()
        try:
            if previous is not None and not previous.done():
                await _finished(previous)
            await self._persist(value)
        except Exception as e:
            logger.error(
                f"Settings save failed: {e}",
                extra={"operation": "settings_upsert"},
            )
            if generation == self._generation:
                self._set_status(SaveStatus.ERROR)
            return
        finally:
            if self._write is asyncio.current_task():
                self._write = None

        if generation != self._generation:
            return
        self._set_status(SaveStatus.SAVED)
        self._revert = asyncio.get_running_loop().create_task(self._clear_saved())

    async def _clear_saved(self) -> None:
        await asyncio.sleep(self.saved_display)
        self._revert = None
        if self._status == SaveStatus.SAVED:
            self._set_status(SaveStatus.IDLE)

    async def drain(self) -> None:
        """Wait until the pending edit (if any) has been written or has failed."""
        while self._timer is not None or self._write is not None:
            task = self._timer or self._write
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if task.cancelled():
                    continue  # rescheduled by a newer edit
                raise

    async def close(self, flush: bool = True) -> None:
        """Stop all timers. With flush, a waiting edit is written first."""
        if flush:
            await self.drain()
        for task in (self._timer, self._revert):
            if task is not None:
                task.cancel()
        self._timer = None
        self._revert = None
