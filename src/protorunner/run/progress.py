"""Cosmetic progress ticker for an in-flight run.

The ticker carries no information about real execution progress; it only keeps
the bar moving until the execution service answers. It is a scoped resource:

```python
async with ProgressTicker(on_tick):
    result = await client.run_protocol(...)
# ticker task is cancelled here, on success, error or cancellation alike
```
"""

from __future__ import annotations

import asyncio
import contextlib
import random
from typing import Callable, Optional

from loguru import logger

from protorunner.util.defaults import PROGRESS_MAX_INCREMENT, PROGRESS_TICK_INTERVAL


class ProgressTicker:
    """Calls `on_tick(increment)` every `interval` seconds while entered.

    Parameters
    ----------
    on_tick : Callable[[float], None]
        Receives a random increment drawn uniformly from [0, max_increment]
    interval : float, optional
        Seconds between ticks, by default PROGRESS_TICK_INTERVAL
    max_increment : float, optional
        Upper end of the increment distribution, by default PROGRESS_MAX_INCREMENT
    rng : random.Random, optional
        Random source, for reproducible tests
    """

    def __init__(
        self,
        on_tick: Callable[[float], None],
        interval: float = PROGRESS_TICK_INTERVAL,
        max_increment: float = PROGRESS_MAX_INCREMENT,
        rng: Optional[random.Random] = None,
    ):
        self._on_tick = on_tick
        self.interval = interval
        self.max_increment = max_increment
        self._rng = rng or random.Random()
        self._task: Optional[asyncio.Task] = None
        self.ticks = 0

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            self.ticks += 1
            self._on_tick(self._rng.uniform(0, self.max_increment))

    async def __aenter__(self) -> ProgressTicker:
        if self.active:
            raise RuntimeError("Progress ticker already running")
        self._task = asyncio.create_task(self._run())
        logger.trace("Progress ticker started")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.trace("Progress ticker stopped after {} ticks", self.ticks)
