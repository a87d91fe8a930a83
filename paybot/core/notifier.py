"""Discord webhook notifications for purchase and connection status"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any

import aiohttp
import discord

logger = logging.getLogger(__name__)

COLOR_SUCCESS = 0x00FF00
COLOR_ERROR = 0xFF0000
COLOR_WARNING = 0xFF9900


class NotificationKind(str, Enum):
    PAYMENT_SUCCESS = "payment_success"
    PAYMENT_ERROR = "payment_error"
    BOT_STATUS = "bot_status"


def build_embed(
    kind: NotificationKind, data: dict[str, Any], *, server: str = "", username: str = ""
) -> discord.Embed:
    """Build the status embed for one notification event"""
    timestamp = datetime.now(timezone.utc)

    if kind is NotificationKind.PAYMENT_SUCCESS:
        embed = discord.Embed(
            title="💰 Payment Processed", color=COLOR_SUCCESS, timestamp=timestamp
        )
        embed.add_field(name="Player", value=str(data["in_game_name"]), inline=True)
        embed.add_field(name="Amount", value=str(data["amount"]), inline=True)
        embed.add_field(name="Product", value=str(data["product_name"]), inline=False)
        embed.add_field(name="Quantity", value=str(data["quantity"]), inline=True)
        embed.add_field(name="Invoice ID", value=str(data["invoice_id"]), inline=True)
        return embed

    if kind is NotificationKind.PAYMENT_ERROR:
        embed = discord.Embed(
            title="❌ Payment Error",
            color=COLOR_ERROR,
            description=str(data.get("error", "")),
            timestamp=timestamp,
        )
        embed.add_field(
            name="Invoice ID", value=str(data.get("invoice_id") or "Unknown"), inline=True
        )
        return embed

    connected = bool(data.get("connected"))
    embed = discord.Embed(
        title="✅ Bot Connected" if connected else "⚠️ Bot Disconnected",
        color=COLOR_SUCCESS if connected else COLOR_WARNING,
        timestamp=timestamp,
    )
    embed.add_field(name="Server", value=server or "-", inline=True)
    embed.add_field(name="Username", value=username or "-", inline=True)
    return embed


class DiscordNotifier:
    """Posts status embeds to a Discord webhook.

    Delivery failures are logged and never propagated: a purchase that was
    already queued stays queued whether or not Discord heard about it.
    """

    def __init__(
        self,
        webhook_url: str,
        *,
        server: str = "",
        username: str = "",
        http: aiohttp.ClientSession | None = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.server = server
        self.username = username
        self._http = http
        self._owns_http = http is None
        self._tasks: set[asyncio.Task] = set()

    @property
    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    def dispatch(self, kind: NotificationKind, data: dict[str, Any]) -> None:
        """Send in the background; returns immediately."""
        task = asyncio.create_task(self.send(kind, data))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def send(self, kind: NotificationKind, data: dict[str, Any]) -> bool:
        """Send one notification. Returns True when Discord accepted it."""
        if not self.is_configured:
            logger.info("Discord webhook not configured, skipping notification")
            return False

        try:
            embed = build_embed(kind, data, server=self.server, username=self.username)
            if self._http is None:
                self._http = aiohttp.ClientSession()
            webhook = discord.Webhook.from_url(self.webhook_url, session=self._http)
            await webhook.send(embeds=[embed])
            return True
        except discord.HTTPException as e:
            logger.error(f"Failed to send Discord notification: {e.status} {e.text}")
        except Exception as e:
            logger.error(f"Error sending Discord notification: {e}")
        return False

    async def on_connected(self) -> None:
        self.dispatch(NotificationKind.BOT_STATUS, {"connected": True})

    async def on_disconnected(self) -> None:
        self.dispatch(NotificationKind.BOT_STATUS, {"connected": False})

    async def close(self) -> None:
        """Wait for in-flight notifications and release the HTTP session"""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self._owns_http and self._http is not None:
            await self._http.close()
            self._http = None
