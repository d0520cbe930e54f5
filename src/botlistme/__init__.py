"""
botlistme - An asyncio client for the Botlist.me bot list.

This package posts your bot's server and shard counts to Botlist.me,
reads bot and user information, checks votes, and can run a vote webhook
listener and a stats autoposter tied to a discord.py bot.

Key Features:
- aiohttp based API client with normalized responses and errors
- Stats autoposter started by the bot's ready event
- Vote webhook on its own port or on an existing aiohttp application
- Configuration from arguments, environment variables or .env files

Example:
    Basic usage:

    ```python
    from botlistme import BotlistMe

    botlist = BotlistMe(token, host=bot)

    @botlist.listen("error")
    async def on_autopost_error(error):
        print(f"Autopost failed: {error}")
    ```
"""

__version__ = "1.1.0"

from botlistme.client import BotlistMe
from botlistme.config import ClientOptions
from botlistme.host import HostClient, DiscordHostAdapter
from botlistme.http.models import Response, Vote
from botlistme.utils.exceptions import (
    BotlistMeError,
    ConfigurationError,
    MissingArgumentError,
    BotlistMeAPIError,
)
from botlistme.webhook.server import WebhookServer

__all__ = [
    "BotlistMe",
    "ClientOptions",
    "HostClient",
    "DiscordHostAdapter",
    "Response",
    "Vote",
    "WebhookServer",
    "BotlistMeError",
    "ConfigurationError",
    "MissingArgumentError",
    "BotlistMeAPIError",
    "__version__",
]
