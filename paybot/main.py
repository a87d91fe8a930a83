import asyncio
import logging
import sys

from dotenv import load_dotenv
from pydantic import ValidationError
from pydantic_settings import SettingsError

from paybot.core import get_settings, setup_logging
from paybot.core.config import Settings
from paybot.core.http_server import WebhookServer
from paybot.state import BotState

LOGGER: logging.Logger = logging.getLogger("Paybot")


def load_settings() -> Settings:
    load_dotenv()
    try:
        return get_settings()
    except ValidationError as e:
        setup_logging()
        LOGGER.error("Invalid or missing environment variables:")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]).upper()
            LOGGER.error(f"  - {field}: {error['msg']}")
        LOGGER.error("Please check your .env file")
        sys.exit(1)
    except SettingsError as e:
        setup_logging()
        LOGGER.error(f"Failed to parse configuration: {e}")
        sys.exit(1)


def log_configuration(state: BotState) -> None:
    settings = state.settings
    LOGGER.info("Configuration:")
    LOGGER.info(f"  Game Server: {settings.server_label}")
    LOGGER.info(f"  Bridge: {settings.game_bridge_url}")
    LOGGER.info(f"  Bot Username: {settings.mc_username}")
    LOGGER.info(f"  Using Password: {'Yes' if settings.mc_password else 'No'}")
    LOGGER.info(f"  Products Configured: {len(state.catalog)}")
    LOGGER.info(f"  Custom Field Name: {settings.custom_field_name}")
    LOGGER.info(f"  Discord Webhook: {'Yes' if state.notifier.is_configured else 'No'}")
    if state.keepalive.enabled:
        LOGGER.info(
            f"  Keep-alive: {state.keepalive.command} every {state.keepalive.interval:g}s"
        )


async def run(settings: Settings) -> None:
    state = BotState.from_settings(settings)
    log_configuration(state)

    server = WebhookServer(state, host=settings.host, port=settings.port)
    await server.start()

    try:
        await state.session.run()
    finally:
        await server.stop()
        await state.close()


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    LOGGER.info("=== SellAuth Payment Bot ===")

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        LOGGER.warning("Shutting down...")


if __name__ == "__main__":
    main()
