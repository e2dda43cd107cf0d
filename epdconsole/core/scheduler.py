# -*- coding: utf-8 -*-
# epdconsole/core/scheduler.py – cykliczne zadania (polling dashboardu, ping)
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set


class PeriodicTask:
    """Fixed-rate timer running ``callback`` as an independent task per period.

    Runs are not awaited by the timer: a slow run may overlap the next one.
    An exception inside a run is logged and never stops the schedule.
    """

    def __init__(self, name: str, interval_s: float, callback: Callable[[], Awaitable[object]],
                 run_immediately: bool = True):
        self.name = name
        self.interval_s = float(interval_s)
        self._callback = callback
        self._run_immediately = run_immediately
        self._running = False
        self._task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        self.runs = 0

    def start(self):
        if self._task and not self._task.done():
            return
        self._running = True
        self._task = asyncio.create_task(self._loop(), name=f"timer-{self.name}")

    async def stop(self):
        self._running = False
        tasks = list(self._inflight)
        if self._task:
            tasks.append(self._task)
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._task = None
        self._inflight.clear()

    async def _loop(self):
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        if self._run_immediately:
            self._spawn()
        while self._running:
            next_at += self.interval_s
            await asyncio.sleep(max(0.0, next_at - loop.time()))
            if not self._running:
                break
            self._spawn()

    def _spawn(self):
        self.runs += 1
        t = asyncio.create_task(self._run_once())
        self._inflight.add(t)
        t.add_done_callback(self._inflight.discard)

    async def _run_once(self):
        try:
            await self._callback()
        except Exception as e:
            logging.warning("Timer %s run error: %s", self.name, e)
