"""
Vote webhook listener.

Botlist.me calls a URL of your choice whenever someone votes for the bot.
This module provides a small aiohttp server (or a route on an existing
aiohttp application) that checks the request's Authorization header
against the secret configured on the bot page and reports each vote as a
``vote`` event.
"""

import secrets
from typing import Optional

from aiohttp import web
from aiohttp.web import Request, Response

from botlistme.events import EventDispatcher
from botlistme.http.models import Vote
from botlistme.utils.logging import get_service_logger


class WebhookServer(EventDispatcher):
    """
    Receives vote notifications.

    Events:
    - ``vote`` (Vote): a request passed the authorization check
    - ``ready`` (host, port, path): the owned server is listening

    Security:
    - The Authorization header must equal the configured secret
    - Without a secret every request is accepted (a warning is logged)

    Attributes:
        port: Port of the owned server (None when attached to an existing app)
        path: Route the votes are posted to
        auth: Expected Authorization header value
        app: The aiohttp application serving the route
    """

    def __init__(
        self,
        port: Optional[int] = None,
        path: str = "/botlistmewebhook",
        auth: Optional[str] = None,
        app: Optional[web.Application] = None,
        host: str = "0.0.0.0",
    ) -> None:
        super().__init__()
        if port is None and app is None:
            raise ValueError("WebhookServer needs a port or an existing application")

        self.port = port
        self.host = host
        self.path = path if path.startswith("/") else f"/{path}"
        self.auth = auth
        self.logger = get_service_logger("webhook")

        if not auth:
            self.logger.warning(
                "No webhook authorization configured; every request will be accepted",
                path=self.path,
            )

        # Routes have to be added before an existing app is started
        self.owns_app = app is None
        self.app = app if app is not None else web.Application()
        self.app.router.add_post(self.path, self._handle_vote)

        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None

    async def start(self) -> None:
        """Start the owned server. Does nothing when attached to another app."""
        if not self.owns_app:
            self.logger.debug("Webhook attached to an existing application", path=self.path)
            return
        if self.runner is not None:
            return

        self.runner = web.AppRunner(self.app)
        await self.runner.setup()

        self.site = web.TCPSite(self.runner, self.host, self.port)
        await self.site.start()

        self.logger.info("Webhook server started", host=self.host, port=self.port, path=self.path)
        self.dispatch("ready", self.host, self.port, self.path)

    async def stop(self) -> None:
        """Stop the owned server."""
        if self.site:
            await self.site.stop()
            self.site = None
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            self.logger.info("Webhook server stopped")

    def _check_auth(self, request: Request) -> bool:
        """Check the Authorization header against the configured secret."""
        if not self.auth:
            return True
        header = request.headers.get("Authorization", "")
        return secrets.compare_digest(header.encode(), self.auth.encode())

    async def _handle_vote(self, request: Request) -> Response:
        """Vote endpoint."""
        if not self._check_auth(request):
            self.logger.warning("Rejected webhook request", remote=request.remote)
            return Response(status=401, text="Unauthorized")

        try:
            payload = await request.json()
            vote = Vote(**payload)
        except (ValueError, TypeError):
            # UnicodeDecodeError and pydantic's ValidationError are ValueErrors
            return Response(status=400, text="Invalid JSON")

        self.logger.info("Vote received", bot=vote.bot, user=vote.user, type=vote.type)
        self.dispatch("vote", vote)
        return Response(status=204)
