"""Core modules for paybot."""

from .config import Settings, get_settings
from .dispatch import COMMAND_DELAY, CommandDispatchQueue
from .exceptions import PaybotError, SessionNotConnected
from .logging import setup_logging
from .notifier import DiscordNotifier, NotificationKind, build_embed
from .session import ConnectionListener, GameSession

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Setup functions
    "setup_logging",
    # Delivery
    "COMMAND_DELAY",
    "CommandDispatchQueue",
    "ConnectionListener",
    "GameSession",
    # Notifications
    "DiscordNotifier",
    "NotificationKind",
    "build_embed",
    # Errors
    "PaybotError",
    "SessionNotConnected",
]
