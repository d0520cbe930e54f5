"""Utility modules for the Botlist.me client."""

from botlistme.utils.exceptions import (
    BotlistMeError,
    ConfigurationError,
    MissingArgumentError,
    BotlistMeAPIError,
)
from botlistme.utils.logging import setup_logging

__all__ = [
    "BotlistMeError",
    "ConfigurationError",
    "MissingArgumentError",
    "BotlistMeAPIError",
    "setup_logging",
]
