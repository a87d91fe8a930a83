"""Shared fixtures for paybot tests."""

from unittest.mock import MagicMock

import pytest

from paybot.core.config import Settings
from paybot.services import ProductCatalog, PurchaseProcessor
from paybot.shared.models import Command, ProductConfig

PRODUCTS = {
    "gold": {"name": "Gold Pack", "amountPerUnit": 1_000_000, "onPurchaseCommand": "/afk 33"},
    "silver": {"name": "Silver Pack", "amountPerUnit": 1_000},
    "gold-alt": {"name": "gold pack", "amountPerUnit": 5},
}


class RecordingQueue:
    """Stands in for CommandDispatchQueue; keeps commands in order."""

    def __init__(self) -> None:
        self.commands: list[Command] = []

    def enqueue(self, command: Command) -> None:
        self.commands.append(command)

    @property
    def texts(self) -> list[str]:
        return [command.text for command in self.commands]


@pytest.fixture
def catalog() -> ProductCatalog:
    return ProductCatalog(
        {key: ProductConfig.model_validate(value) for key, value in PRODUCTS.items()}
    )


@pytest.fixture
def queue() -> RecordingQueue:
    return RecordingQueue()


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture
def processor(catalog, queue, notifier) -> PurchaseProcessor:
    return PurchaseProcessor(catalog, queue, notifier)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        mc_username="PayBot",
        mc_host="mc.example.net",
        product_config=PRODUCTS,
        discord_webhook_url="",
        custom_field_name="in_game_name",
        command_delay=0,
        keepalive_command="",
    )
