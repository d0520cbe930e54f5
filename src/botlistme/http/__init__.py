"""HTTP layer for the Botlist.me API."""

from botlistme.http.client import HTTPClient
from botlistme.http.models import (
    Response,
    StatsPayload,
    VoteCheck,
    Vote,
)

__all__ = [
    "HTTPClient",
    "Response",
    "StatsPayload",
    "VoteCheck",
    "Vote",
]
