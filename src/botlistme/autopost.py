"""
Periodic stats posting.

The AutoPoster waits for the host bot's ready signal, posts stats right
away and then keeps posting on a fixed interval until it is stopped.
Each post runs in its own task so a slow or failing post never delays or
cancels the next one.
"""

import asyncio
from typing import Optional, Set, TYPE_CHECKING

from botlistme.host import HostClient
from botlistme.utils.logging import get_service_logger

if TYPE_CHECKING:
    from botlistme.client import BotlistMe


class AutoPoster:
    """
    Posts stats on a timer once the host bot is ready.

    Results are reported through the owning client's events: ``posted``
    after a successful post, ``error`` with the exception after a failed
    one. Failures never propagate out of the timer.

    Attributes:
        client: The BotlistMe client used to post
        host: The host bot the ready signal comes from
        interval: Seconds between posts
    """

    def __init__(self, client: "BotlistMe", host: HostClient, interval: float) -> None:
        self.client = client
        self.host = host
        self.interval = interval
        self.logger = get_service_logger("autopost")

        self._task: Optional[asyncio.Task] = None
        self._posts: Set[asyncio.Task] = set()
        self._attached = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def attach(self) -> None:
        """Subscribe to the host's ready signal."""
        if self._attached:
            return
        self.host.on_ready(self._on_ready)
        self._attached = True
        self.logger.debug("Autoposter armed", interval_seconds=self.interval)

    async def _on_ready(self) -> None:
        # ready fires again after reconnects; keep a single loop
        if self.running:
            self.logger.debug("Ready received while autoposter is running")
            return
        self.start()

    def start(self) -> None:
        """Start posting now and every ``interval`` seconds after that."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        self.logger.info("Autoposter started", interval_seconds=self.interval)

    async def _run(self) -> None:
        while True:
            post = asyncio.get_running_loop().create_task(self.post_once())
            self._posts.add(post)
            post.add_done_callback(self._posts.discard)
            await asyncio.sleep(self.interval)

    async def post_once(self) -> None:
        """Post stats once and report the result as an event."""
        try:
            await self.client.post_stats()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.warning(
                "Autopost failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            self.client.dispatch("error", e)
        else:
            self.logger.info("Autopost succeeded")
            self.client.dispatch("posted")

    async def stop(self) -> None:
        """Stop the timer and cancel any post still in flight."""
        tasks = list(self._posts)
        if self._task is not None:
            tasks.append(self._task)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._task = None
        self.logger.info("Autoposter stopped")
