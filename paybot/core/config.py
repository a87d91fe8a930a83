"""Paybot configuration"""

import logging
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from paybot.shared.models import ProductConfig

logger = logging.getLogger(__name__)

DEFAULT_CUSTOM_FIELD_NAME = "in_game_name"


class Settings(BaseSettings):
    """Paybot settings loaded from the environment / .env"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Game server (forwarded to the chat bridge)
    mc_host: str = Field(default="localhost", description="Game server host")
    mc_port: int = Field(default=25565, description="Game server port")
    mc_username: str = Field(..., description="Bot account username")
    mc_password: str = Field(default="", description="Bot account password (optional)")
    mc_version: str = Field(default="1.20.1", description="Game protocol version")
    game_bridge_url: str = Field(
        default="ws://localhost:3002/chat", description="Websocket URL of the game chat bridge"
    )

    # Discord
    discord_webhook_url: str = Field(default="", description="Discord webhook for status embeds")

    # Products, JSON object keyed by product id
    product_config: dict[str, ProductConfig] = Field(
        default_factory=dict, description="Product catalog (PRODUCT_CONFIG)"
    )
    custom_field_name: str = Field(
        default=DEFAULT_CUSTOM_FIELD_NAME, description="Custom field holding the in-game name"
    )

    # Webhook server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(
        default=3001,
        validation_alias=AliasChoices("port", "server_port"),
        description="Server port",
    )

    # Delivery
    command_delay: float = Field(default=0.5, ge=0, description="Seconds between game commands")
    reconnect_delay: float = Field(default=5.0, ge=0, description="Seconds before reconnecting")
    keepalive_command: str = Field(default="", description="Periodic command, e.g. /home1")
    keepalive_interval: float = Field(default=60.0, gt=0, description="Keep-alive period")

    # Environment
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("mc_username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Reject an empty MC_USERNAME"""
        if not v.strip():
            raise ValueError("MC_USERNAME must not be empty")
        return v.strip()

    @field_validator("custom_field_name")
    @classmethod
    def validate_custom_field_name(cls, v: str) -> str:
        """Blank CUSTOM_FIELD_NAME means the default field"""
        return v.strip() or DEFAULT_CUSTOM_FIELD_NAME

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper

    @property
    def server_label(self) -> str:
        return f"{self.mc_host}:{self.mc_port}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()  # type: ignore[call-arg]
