"""Game session over a websocket chat bridge, with auto-reconnect.

The game protocol itself lives in the bridge process. Each outbound text frame
is one chat line typed by the bot; each inbound text frame is one chat message
seen by the bot.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import aiohttp

from .exceptions import SessionNotConnected

LOGGER = logging.getLogger("Paybot.Session")

PAYMENT_KEYWORDS = ("paid", "received", "balance")


class ConnectionListener(Protocol):
    async def on_connected(self) -> None: ...

    async def on_disconnected(self) -> None: ...


class GameSession:
    """Owns the bridge connection and publishes connect/disconnect events."""

    def __init__(
        self,
        bridge_url: str,
        *,
        host: str,
        port: int,
        username: str,
        version: str,
        reconnect_delay: float = 5.0,
        heartbeat: float = 30.0,
        http: aiohttp.ClientSession | None = None,
    ) -> None:
        self.bridge_url = bridge_url
        self.host = host
        self.port = port
        self.username = username
        self.version = version
        self.reconnect_delay = reconnect_delay
        self.heartbeat = heartbeat
        self._http = http
        self._owns_http = http is None
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._listeners: list[ConnectionListener] = []

    @property
    def connected(self) -> bool:
        return self._ws is not None and not self._ws.closed

    def add_listener(self, listener: ConnectionListener) -> None:
        self._listeners.append(listener)

    async def send_chat(self, text: str) -> None:
        ws = self._ws
        if ws is None or ws.closed:
            raise SessionNotConnected(text)
        await ws.send_str(text)

    async def run(self) -> None:
        """Connect, serve until the bridge closes, wait, reconnect. Runs until cancelled."""
        while True:
            try:
                await self._connect_once()
                LOGGER.warning(f"Bot disconnected. Reconnecting in {self.reconnect_delay}s...")
            except asyncio.CancelledError:
                break
            except Exception as e:
                LOGGER.error(f"Session error: {e}")
                LOGGER.warning(f"Reconnecting to {self.bridge_url} in {self.reconnect_delay}s...")
            try:
                await asyncio.sleep(self.reconnect_delay)
            except asyncio.CancelledError:
                break

    async def close(self) -> None:
        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        if self._owns_http and self._http is not None:
            await self._http.close()
            self._http = None

    async def _connect_once(self) -> None:
        if self._http is None:
            self._http = aiohttp.ClientSession()

        params = {
            "host": self.host,
            "port": str(self.port),
            "username": self.username,
            "version": self.version,
        }
        LOGGER.info(f"Connecting to {self.host}:{self.port} as {self.username}...")

        async with self._http.ws_connect(
            self.bridge_url, params=params, heartbeat=self.heartbeat
        ) as ws:
            self._ws = ws
            LOGGER.info("Bot connected to game server")
            await self._emit("on_connected")
            try:
                async for message in ws:
                    if message.type == aiohttp.WSMsgType.TEXT:
                        self._handle_chat(message.data)
                    elif message.type == aiohttp.WSMsgType.ERROR:
                        LOGGER.error(f"Bridge error: {ws.exception()}")
                        break
            finally:
                self._ws = None
                if ws.close_code not in (None, aiohttp.WSCloseCode.OK):
                    LOGGER.warning(f"Bridge closed the connection (code={ws.close_code})")
                await self._emit("on_disconnected")

    def _handle_chat(self, text: str) -> None:
        LOGGER.info(f"[Chat] {text}")
        lowered = text.lower()
        if any(keyword in lowered for keyword in PAYMENT_KEYWORDS):
            LOGGER.info(f"[Payment] {text}")

    async def _emit(self, event: str) -> None:
        for listener in list(self._listeners):
            try:
                await getattr(listener, event)()
            except Exception as e:
                LOGGER.exception(f"Listener {type(listener).__name__}.{event} failed: {e}")
