# -*- coding: utf-8 -*-
# sensorboard/core/scheduler.py - periodic relay status refresh
from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Optional

from sensorboard.core.config import DASHBOARD
from sensorboard.core.relay import RelayController

logger = logging.getLogger(__name__)


class RelayPoller:
    def __init__(self, relay: RelayController, interval_s: Optional[float] = None):
        self.relay = relay
        self.interval = float(interval_s if interval_s is not None else DASHBOARD["poll_interval_s"])
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        if self.running:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop(), name="relay-poller")

    async def stop(self):
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        self._task = None

    async def _loop(self):
        while self._running:
            try:
                await self.relay.refresh()
            except Exception:
                logger.exception("Relay poll error")
            await asyncio.sleep(self.interval)
