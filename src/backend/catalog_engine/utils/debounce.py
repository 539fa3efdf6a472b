"""
Input debouncing on the running event loop.

A burst of triggers inside the quiescence window produces a single callback,
fired once the window elapses after the last trigger. A callback that has
already fired is never cancelled by a later trigger.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)


class Debouncer:

    def __init__(self, delay: float, callback: Callable[[], Awaitable[None]]):
        self.delay = delay
        self.callback = callback
        self._timer: Optional[asyncio.Task] = None
        self._firing: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def trigger(self) -> None:
        """Restart the quiescence window"""
        self.cancel()
        self._timer = asyncio.create_task(self._run())

    def cancel(self) -> None:
        if self.pending:
            self._timer.cancel()
        self._timer = None

    async def wait(self) -> None:
        """Wait until no window is open and every fired callback has finished"""
        while self.pending or self._firing:
            tasks = set(self._firing)
            if self.pending:
                tasks.add(self._timer)
            await asyncio.wait(tasks)

    async def _run(self) -> None:
        await asyncio.sleep(self.delay)

        task = asyncio.current_task()
        if self._timer is task:
            self._timer = None
        self._firing.add(task)

        try:
            await self.callback()
        except Exception as e:
            logger.error(f"Debounced callback failed: {e}", exc_info=True)
        finally:
            self._firing.discard(task)
