"""Periodic in-game command (e.g. ``/home1``) while the session is connected."""

from __future__ import annotations

import asyncio
import logging

from paybot.shared.models import Command

from .purchase import CommandSink

LOGGER = logging.getLogger("Paybot.KeepAlive")


class KeepAlive:
    """Connection listener that enqueues ``command`` every ``interval`` seconds."""

    def __init__(self, queue: CommandSink, command: str, interval: float = 60.0) -> None:
        self.queue = queue
        self.command = command.strip()
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.command)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def on_connected(self) -> None:
        if not self.enabled or self.running:
            return
        LOGGER.info(f"{self.command} loop started ({self.interval:g}s)")
        self._task = asyncio.create_task(self._loop())

    async def on_disconnected(self) -> None:
        await self.stop()

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.queue.enqueue(Command(self.command))
