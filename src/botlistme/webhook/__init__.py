"""
Vote webhook listener.

Receives the vote notifications Botlist.me sends to the bot's webhook URL
and reports them as ``vote`` events.
"""

from botlistme.webhook.server import WebhookServer

__all__ = ["WebhookServer"]
