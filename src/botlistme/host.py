"""
Host client capability interface.

The client only needs four things from the bot it runs in: the guild count,
the bot's own user id, the shard count and a way to be told when the bot is
ready. Applications can hand in anything that implements HostClient;
discord.py clients are wrapped automatically by DiscordHostAdapter.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, Protocol, Set, runtime_checkable

import discord

from botlistme.utils.logging import get_logger


ReadyCallback = Callable[[], Awaitable[None]]


@runtime_checkable
class HostClient(Protocol):
    """What the autoposter and the derived-value calls read from the host bot."""

    def guild_count(self) -> int:
        ...

    def bot_id(self) -> Optional[str]:
        ...

    def shard_count(self) -> Optional[int]:
        ...

    def on_ready(self, callback: ReadyCallback) -> None:
        ...


class DiscordHostAdapter:
    """
    HostClient implementation for discord.py.

    Works with ``discord.Client`` and its subclasses, including
    ``commands.Bot`` and the auto-sharded variants.

    Attributes:
        bot: The wrapped discord.py client
    """

    def __init__(self, bot: discord.Client) -> None:
        self.bot = bot
        self._ready_tasks: Set[asyncio.Task] = set()

    def guild_count(self) -> int:
        return len(self.bot.guilds)

    def bot_id(self) -> Optional[str]:
        user = self.bot.user
        return str(user.id) if user is not None else None

    def shard_count(self) -> Optional[int]:
        """
        Total shard count, or None when it is not worth reporting.

        ``shard_count`` wins when it is set; otherwise the size of the
        ``shards`` mapping is used unless the bot runs a single shard.
        """
        if getattr(self.bot, "shard_count", None):
            return self.bot.shard_count
        shards = getattr(self.bot, "shards", None)
        if shards is not None and len(shards) != 1:
            return len(shards)
        return None

    def on_ready(self, callback: ReadyCallback) -> None:
        add_listener = getattr(self.bot, "add_listener", None)
        if add_listener is not None:
            # commands.Bot keeps a list of extra listeners per event
            add_listener(callback, "on_ready")
            return

        # discord.Client has a single on_ready slot that a later @client.event
        # replaces, so hook the dispatcher instead
        original_dispatch = self.bot.dispatch

        def dispatch(event: str, *args: Any, **kwargs: Any) -> Any:
            if event == "ready":
                task = asyncio.get_running_loop().create_task(callback())
                self._ready_tasks.add(task)
                task.add_done_callback(self._ready_tasks.discard)
            return original_dispatch(event, *args, **kwargs)

        self.bot.dispatch = dispatch


def resolve_host(candidate: Any) -> Optional[HostClient]:
    """
    Turn whatever the application passed as host into a HostClient.

    Args:
        candidate: A HostClient implementation or a discord.py client

    Returns:
        The host to use, or None when the object is not supported
    """
    if candidate is None:
        return None
    if isinstance(candidate, discord.Client):
        return DiscordHostAdapter(candidate)
    if isinstance(candidate, HostClient):
        return candidate

    get_logger(__name__).warning(
        "The provided client is not supported; autopost disabled",
        client_type=type(candidate).__name__,
    )
    return None
