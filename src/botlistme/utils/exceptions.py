"""
Custom exceptions for the Botlist.me client.

This module defines the exception hierarchy raised by the client. All
exceptions inherit from BotlistMeError so callers can catch every
library error with a single except clause.

Transport failures (DNS errors, refused connections, ...) are not wrapped:
they propagate as the ``aiohttp.ClientError`` / ``OSError`` raised by the
transport.
"""

from typing import Optional, Any, Dict, TYPE_CHECKING

if TYPE_CHECKING:
    from botlistme.http.models import Response


class BotlistMeError(Exception):
    """
    Base exception class for all Botlist.me client errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information about the error
        original_error: The original exception that caused this error (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        error_str = self.message
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            error_str += f" (Context: {context_str})"
        if self.original_error:
            error_str += f" (Caused by: {self.original_error})"
        return error_str


class ConfigurationError(BotlistMeError):
    """
    Raised when client options are invalid.

    This exception is raised when:
    - ``stats_interval`` is shorter than 15 minutes
    - Any other option fails validation

    Example:
        ```python
        try:
            BotlistMe(token, options={"stats_interval": 60_000})
        except ConfigurationError as e:
            print(e.original_error)
        ```
    """
    pass


class MissingArgumentError(BotlistMeError):
    """
    Raised when a call is missing an argument it cannot derive.

    This is a programmer error: the caller has to pass the id (or attach a
    host client the value can be read from).
    """
    pass


class BotlistMeAPIError(BotlistMeError):
    """
    Raised when the Botlist.me API answers with a non-2xx status.

    The message is ``"<status> <status text>"``; the response envelope is
    attached both as ``response`` and field by field.

    Attributes:
        status: HTTP status code
        status_text: HTTP reason phrase
        headers: Response headers
        raw: Raw response body
        body: Parsed body (JSON-decoded when the content type says so)
        ok: Always False for this error

    Example:
        ```python
        try:
            await client.get_bot("123")
        except BotlistMeAPIError as e:
            if e.status == 404:
                print("No such bot")
        ```
    """

    def __init__(self, response: "Response") -> None:
        super().__init__(f"{response.status} {response.status_text}")
        self.response = response
        self.status = response.status
        self.status_text = response.status_text
        self.headers = response.headers
        self.raw = response.raw
        self.body = response.body
        self.ok = response.ok
