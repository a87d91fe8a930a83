"""Connection-aware, ordered delivery of game commands.

Commands are appended to an in-memory FIFO and handed to the game session one
at a time while it is connected, with a fixed pause between commands to stay
under the server's chat rate limit. A disconnect pauses delivery; everything
still pending goes out after the next connect, in insertion order.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable

from paybot.shared.models import Command

LOGGER = logging.getLogger("Paybot.Dispatch")

COMMAND_DELAY = 0.5

SendFunc = Callable[[str], Awaitable[None]]


class CommandDispatchQueue:
    """FIFO of pending commands driven by connection-state events.

    Only one drain task runs at a time, so no two commands are ever sent
    concurrently. ``enqueue`` may be called at any point, including while a
    drain is sleeping between commands.
    """

    def __init__(self, send: SendFunc, *, delay: float = COMMAND_DELAY) -> None:
        self._send = send
        self._delay = delay
        self._pending: deque[Command] = deque()
        self._connected = False
        self._drain_task: asyncio.Task | None = None
        self.delivered = 0

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def pending(self) -> int:
        return len(self._pending)

    def snapshot(self) -> list[str]:
        """Pending command texts, head first."""
        return [command.text for command in self._pending]

    def enqueue(self, command: Command) -> None:
        self._pending.append(command)
        LOGGER.debug(f"Queued command: {command.text} (pending={len(self._pending)})")
        if self._connected:
            self._schedule_drain()
        else:
            LOGGER.info(f"Session not ready, holding command: {command.text}")

    async def drain(self) -> None:
        """Deliver pending commands until empty or disconnected."""
        task = self._schedule_drain()
        if task is not None:
            await task

    async def on_connected(self) -> None:
        self._connected = True
        LOGGER.info(f"Session connected, {len(self._pending)} command(s) pending")
        self._schedule_drain()

    async def on_disconnected(self) -> None:
        self._connected = False
        if self._pending:
            LOGGER.warning(f"Session disconnected, holding {len(self._pending)} command(s)")

    async def close(self) -> None:
        if self._drain_task and not self._drain_task.done():
            self._drain_task.cancel()
            try:
                await self._drain_task
            except asyncio.CancelledError:
                pass
        self._drain_task = None

    def _schedule_drain(self) -> asyncio.Task | None:
        if not self._connected or not self._pending:
            return self._drain_task if self._drain_task and not self._drain_task.done() else None
        if self._drain_task is None or self._drain_task.done():
            self._drain_task = asyncio.create_task(self._drain_loop())
        return self._drain_task

    async def _drain_loop(self) -> None:
        while self._pending and self._connected:
            command = self._pending.popleft()
            try:
                LOGGER.info(f"Executing command: {command.text}")
                await self._send(command.text)
            except asyncio.CancelledError:
                self._pending.appendleft(command)
                raise
            except Exception as e:
                # Not handed over; keep it at the head for the next connect
                LOGGER.error(f"Failed to deliver '{command.text}': {e}")
                self._pending.appendleft(command)
                return
            self.delivered += 1
            await asyncio.sleep(self._delay)
