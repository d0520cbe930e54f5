"""
Botlist.me API client.

This module contains BotlistMe, the entry point of the library. It posts
bot stats, reads bot and user information, checks votes, and optionally
runs the stats autoposter and the vote webhook.
"""

from typing import Any, Dict, Mapping, Optional, Union

from aiohttp import web
from pydantic import ValidationError

from botlistme.autopost import AutoPoster
from botlistme.config import ClientOptions, DEFAULT_STATS_INTERVAL
from botlistme.events import EventDispatcher
from botlistme.host import HostClient, resolve_host
from botlistme.http.client import HTTPClient
from botlistme.http.models import StatsPayload, VoteCheck
from botlistme.utils.exceptions import ConfigurationError, MissingArgumentError
from botlistme.utils.logging import get_logger, log_error
from botlistme.webhook.server import WebhookServer


class BotlistMe(EventDispatcher):
    """
    Client for the Botlist.me API.

    When a supported host client is passed, stats are posted automatically
    once the bot is ready and then every ``stats_interval`` milliseconds.

    Events:
    - ``posted``: the autoposter posted stats successfully
    - ``error`` (exception): an autopost failed

    Attributes:
        token: Botlist.me authorization token
        options: Validated client options
        host: The host bot, or None in request-only mode
        autoposter: The autoposter, or None when no supported host was given
        webhook: The vote webhook, or None when it is not enabled

    Example:
        ```python
        bot = commands.Bot(command_prefix="!", intents=discord.Intents.default())
        botlist = BotlistMe(os.environ["BOTLISTME_TOKEN"], host=bot)

        @botlist.listen("posted")
        async def on_posted():
            print("Server count posted")
        ```
    """

    def __init__(
        self,
        token: Optional[str] = None,
        options: Union[ClientOptions, Mapping[str, Any], None] = None,
        host: Any = None,
        *,
        webhook_app: Optional[web.Application] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: Botlist.me authorization token (falls back to ``options.token``)
            options: ClientOptions or a mapping of option values
            host: A HostClient or a discord.py client
            webhook_app: Existing aiohttp application to attach the webhook to

        Raises:
            ConfigurationError: If the options are invalid
        """
        super().__init__()
        self.logger = get_logger(__name__)
        self.options = self._load_options(options)
        self.token = token or self.options.token

        self.http = HTTPClient(self.token, self.options.api_base_url)

        self.host: Optional[HostClient] = resolve_host(host)
        self.autoposter: Optional[AutoPoster] = None
        if self.host is not None:
            self.stats_interval = self.options.stats_interval or DEFAULT_STATS_INTERVAL
            self.autoposter = AutoPoster(self, self.host, self.stats_interval / 1000)
            self.autoposter.attach()

        self.webhook: Optional[WebhookServer] = None
        if self.options.webhook_port or webhook_app is not None:
            self.webhook = WebhookServer(
                port=self.options.webhook_port,
                path=self.options.webhook_path,
                auth=self.options.webhook_auth,
                app=webhook_app,
                host=self.options.webhook_host,
            )

    @staticmethod
    def _load_options(options: Union[ClientOptions, Mapping[str, Any], None]) -> ClientOptions:
        if isinstance(options, ClientOptions):
            return options
        try:
            return ClientOptions(**dict(options or {}))
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid Botlist.me client options",
                context={"errors": e.error_count()},
                original_error=e,
            )

    def dispatch(self, event: str, *args: Any) -> None:
        if event == "error" and not self.has_listeners("error") and args:
            log_error(args[0], {"event_name": "error"})
        super().dispatch(event, *args)

    def _resolve_bot_id(self, caller: str) -> str:
        bot_id = self.host.bot_id() if self.host is not None else None
        bot_id = bot_id or self.options.bot_id
        if not bot_id:
            raise MissingArgumentError(
                f"{caller} needs the bot id; attach a host client or set the bot_id option"
            )
        return bot_id

    async def post_stats(
        self,
        server_count: Optional[int] = None,
        shard_count: Optional[int] = None,
    ) -> Any:
        """
        Post the bot's server and shard count.

        Without arguments the counts are read from the host client.

        Args:
            server_count: Number of servers the bot is in
            shard_count: Number of shards the bot runs on

        Returns:
            The parsed response body

        Raises:
            MissingArgumentError: If no count was given and there is no host
            BotlistMeAPIError: If the API rejects the request
        """
        if server_count is None and self.host is None:
            raise MissingArgumentError("post_stats requires 1 argument")

        if server_count is not None:
            payload = StatsPayload(server_count=server_count, shard_count=shard_count)
        else:
            payload = StatsPayload(
                server_count=self.host.guild_count(),
                shard_count=self.host.shard_count(),
            )

        bot_id = self._resolve_bot_id("post_stats")
        response = await self.http.request("post", f"bots/{bot_id}/stats", payload.to_request())
        return response.body

    async def get_bot(self, id: Optional[str] = None) -> Dict[str, Any]:
        """
        Get information about a bot.

        Args:
            id: ID of the bot; defaults to the host bot

        Returns:
            The bot information
        """
        if not id and self.host is None and not self.options.bot_id:
            raise MissingArgumentError("get_bot requires id as argument")
        if not id:
            id = self._resolve_bot_id("get_bot")
        response = await self.http.request("get", f"bots/{id}")
        return response.body

    async def get_user(self, id: Optional[str] = None) -> Dict[str, Any]:
        """
        Get information about a user.

        Args:
            id: ID of the user

        Returns:
            The user information
        """
        if not id:
            raise MissingArgumentError("get_user requires id as argument")
        response = await self.http.request("get", f"users/{id}")
        return response.body

    async def has_voted(self, id: Optional[str] = None) -> bool:
        """
        Check whether a user voted for the bot in the last 24 hours.

        Args:
            id: ID of the user

        Returns:
            True if the user has voted
        """
        if not id:
            raise MissingArgumentError("has_voted requires id as argument")
        bot_id = self._resolve_bot_id("has_voted")
        response = await self.http.request("get", f"bots/{bot_id}/voted", {"userId": id})
        body = response.body if isinstance(response.body, dict) else {}
        return VoteCheck(**body).has_voted

    async def start(self) -> None:
        """Start the webhook server, if this client owns one."""
        if self.webhook is not None:
            await self.webhook.start()

    async def close(self) -> None:
        """Stop the autoposter and the webhook server."""
        if self.autoposter is not None:
            await self.autoposter.stop()
        if self.webhook is not None:
            await self.webhook.stop()
        await self.wait_for_listeners()

    async def __aenter__(self) -> "BotlistMe":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
