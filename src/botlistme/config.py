"""
Configuration management for the Botlist.me client.

This module handles configuration loading from environment variables and
.env files, validation, and provides typed configuration objects for the
client, the autoposter, the webhook listener and the CLI.

Every setting can be passed explicitly when constructing the client, or
picked up from ``BOTLISTME_*`` environment variables.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


# Autopost interval bounds, in milliseconds
DEFAULT_STATS_INTERVAL = 1_800_000
MIN_STATS_INTERVAL = 900_000


class ClientOptions(BaseSettings):
    """Botlist.me client configuration settings."""

    token: Optional[str] = Field(
        default=None,
        description="Botlist.me authorization token for this bot"
    )
    stats_interval: Optional[int] = Field(
        default=None,
        description="How often the autoposter posts stats, in milliseconds"
    )
    bot_id: Optional[str] = Field(
        default=None,
        description="Bot ID used when no host client is attached"
    )
    api_base_url: str = Field(
        default="https://api.botlist.me/api/v1",
        description="Base URL of the Botlist.me API"
    )
    webhook_port: Optional[int] = Field(
        default=None,
        gt=0,
        lt=65536,
        description="Port to run the vote webhook on; enables the webhook when set"
    )
    webhook_host: str = Field(
        default="0.0.0.0",
        description="Interface the vote webhook binds to"
    )
    webhook_path: str = Field(
        default="/botlistmewebhook",
        description="Path the vote webhook listens on"
    )
    webhook_auth: Optional[str] = Field(
        default=None,
        description="Authorization secret configured on the bot page"
    )

    class Config:
        env_prefix = "BOTLISTME_"

    @validator("stats_interval")
    def validate_stats_interval(cls, v: Optional[int]) -> Optional[int]:
        """Reject intervals shorter than 15 minutes."""
        if v is not None and v < MIN_STATS_INTERVAL:
            raise ValueError(
                f"stats_interval may not be shorter than {MIN_STATS_INTERVAL} (15 minutes)"
            )
        return v

    @validator("webhook_path")
    def validate_webhook_path(cls, v: str) -> str:
        """Make sure the webhook path is absolute."""
        return v if v.startswith("/") else f"/{v}"

    @validator("api_base_url")
    def validate_api_base_url(cls, v: str) -> str:
        return v.rstrip("/")


class LoggingConfig(BaseSettings):
    """Logging configuration settings."""

    level: str = Field(
        default="INFO",
        description="Logging level"
    )
    format: str = Field(
        default="text",
        description="Log format: 'json' or 'text'"
    )

    class Config:
        env_prefix = "LOG_"

    @validator("level")
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @validator("format")
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in {"json", "text"}:
            raise ValueError("Log format must be 'json' or 'text'")
        return v


class AppConfig(BaseSettings):
    """Configuration for the command line tool."""

    client: ClientOptions = Field(default_factory=ClientOptions)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def load_config() -> AppConfig:
    """
    Load and validate application configuration.

    Loads a ``.env`` file from the working directory if there is one, then
    builds the configuration from the environment.

    Returns:
        AppConfig: Validated application configuration

    Raises:
        ValidationError: If configuration is invalid

    Example:
        ```python
        config = load_config()
        print(f"Posting to: {config.client.api_base_url}")
        ```
    """
    env_file = Path(".env")
    if env_file.exists():
        from dotenv import load_dotenv
        load_dotenv(env_file)

    return AppConfig()
