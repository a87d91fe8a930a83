"""Runtime wiring: the objects one paybot process shares between its tasks."""

from __future__ import annotations

from dataclasses import dataclass

from paybot.core.config import Settings
from paybot.core.dispatch import CommandDispatchQueue
from paybot.core.notifier import DiscordNotifier
from paybot.core.session import GameSession
from paybot.services import KeepAlive, ProductCatalog, PurchaseProcessor


@dataclass
class BotState:
    """Session object handed to the HTTP handlers instead of module globals."""

    settings: Settings
    catalog: ProductCatalog
    session: GameSession
    queue: CommandDispatchQueue
    notifier: DiscordNotifier
    processor: PurchaseProcessor
    keepalive: KeepAlive

    @classmethod
    def from_settings(cls, settings: Settings) -> BotState:
        catalog = ProductCatalog(settings.product_config)
        session = GameSession(
            settings.game_bridge_url,
            host=settings.mc_host,
            port=settings.mc_port,
            username=settings.mc_username,
            version=settings.mc_version,
            reconnect_delay=settings.reconnect_delay,
        )
        queue = CommandDispatchQueue(session.send_chat, delay=settings.command_delay)
        notifier = DiscordNotifier(
            settings.discord_webhook_url,
            server=settings.server_label,
            username=settings.mc_username,
        )
        keepalive = KeepAlive(queue, settings.keepalive_command, settings.keepalive_interval)

        # Queue first so pending commands start draining before anything else reacts
        session.add_listener(queue)
        session.add_listener(keepalive)
        session.add_listener(notifier)

        return cls(
            settings=settings,
            catalog=catalog,
            session=session,
            queue=queue,
            notifier=notifier,
            processor=PurchaseProcessor(catalog, queue, notifier),
            keepalive=keepalive,
        )

    async def close(self) -> None:
        await self.keepalive.stop()
        await self.queue.close()
        await self.session.close()
        await self.notifier.close()
