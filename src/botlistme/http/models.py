"""
Data models for Botlist.me API interactions.

This module defines Pydantic models for the data exchanged with the API:
the normalized response envelope, the stats payload and the vote payloads
sent by the API and by the vote webhook.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, root_validator


class Response(BaseModel):
    """
    Normalized wrapper around one HTTP response.

    Attributes:
        raw: The response body as text
        body: The parsed body; JSON-decoded only when the content type
            contains ``application/json`` and the text parses, otherwise
            the raw text
        status: HTTP status code
        status_text: HTTP reason phrase
        headers: Response headers; a header sent more than once has its
            values joined with ", "
        ok: True iff status is in [200, 300)
    """

    raw: str = ""
    body: Any = None
    status: int
    status_text: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    ok: bool = False

    @root_validator(pre=True)
    def compute_ok(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """Derive ``ok`` from the status code."""
        values = dict(values)
        status = values.get("status")
        values["ok"] = isinstance(status, int) and 200 <= status < 300
        return values


class StatsPayload(BaseModel):
    """
    Body of a stats post.

    ``shard_count`` is left out of the request body when it is not known.
    """

    server_count: int = Field(ge=0, description="Number of servers the bot is in")
    shard_count: Optional[int] = Field(
        default=None,
        ge=0,
        description="Number of shards the bot runs on"
    )

    def to_request(self) -> Dict[str, int]:
        return self.dict(exclude_none=True)


class VoteCheck(BaseModel):
    """Answer of the ``bots/{id}/voted`` endpoint."""

    voted: Any = None

    @property
    def has_voted(self) -> bool:
        return bool(self.voted)

    class Config:
        extra = "allow"


class Vote(BaseModel):
    """
    A vote notification received by the webhook.

    Only the common fields are declared; anything else the service sends is
    kept as extra attributes.
    """

    bot: Optional[str] = Field(default=None, description="ID of the bot that was voted for")
    user: Optional[str] = Field(default=None, description="ID of the user who voted")
    type: Optional[str] = Field(default=None, description="Vote type, e.g. 'upvote' or 'test'")

    @root_validator(pre=True)
    def stringify_ids(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """IDs may arrive as numbers; keep them as strings."""
        values = dict(values)
        for key in ("bot", "user"):
            if isinstance(values.get(key), int):
                values[key] = str(values[key])
        return values

    class Config:
        extra = "allow"
