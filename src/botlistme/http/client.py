"""
HTTP request wrapper for the Botlist.me API.

This module sends single requests to the API and normalizes the outcome:
a 2xx answer becomes a Response envelope, anything else a
BotlistMeAPIError carrying the same envelope. Transport failures are
logged and re-raised untouched.

Every request opens its own ``aiohttp.ClientSession``, so concurrent calls
share nothing but the token.
"""

import json
import time
from typing import Any, Dict, Optional

import aiohttp

from botlistme import __version__
from botlistme.http.models import Response
from botlistme.utils.exceptions import BotlistMeAPIError
from botlistme.utils.logging import (
    get_logger,
    log_http_request,
    log_http_response,
    generate_correlation_id,
)


class HTTPClient:
    """
    Minimal HTTP client for the Botlist.me API.

    Attributes:
        token: Authorization token sent with every request (may be None)
        base_url: API host and version prefix, without trailing slash
    """

    METHODS = frozenset({"get", "post"})

    def __init__(self, token: Optional[str], base_url: str) -> None:
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.logger = get_logger(__name__)

    def _build_headers(self) -> Dict[str, str]:
        headers = {"User-Agent": f"botlistme-python/{__version__}"}
        if self.token:
            headers["Authorization"] = self.token
        else:
            self.logger.warning("No Botlist.me authorization token has been provided")
        return headers

    def _parse_body(self, raw: str, content_type: str, correlation_id: str) -> Any:
        """Decode a JSON body, keeping the raw text when it does not parse."""
        if not raw or "application/json" not in content_type:
            return raw
        try:
            return json.loads(raw)
        except ValueError:
            self.logger.warning(
                "Response declared JSON but did not parse",
                correlation_id=correlation_id,
            )
            return raw

    @staticmethod
    def _flatten_headers(headers: Any) -> Dict[str, str]:
        """Collapse a multi-valued header mapping, joining repeats with ", "."""
        flat: Dict[str, str] = {}
        seen = set()
        for key in headers.keys():
            if key.lower() in seen:
                continue
            seen.add(key.lower())
            flat[key] = ", ".join(headers.getall(key))
        return flat

    async def request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Response:
        """
        Send one request to the API.

        Args:
            method: ``get`` or ``post``
            endpoint: API path relative to the versioned base, e.g. ``bots/123``
            data: For ``get``, query parameters; for ``post``, the JSON body

        Returns:
            The response envelope of a 2xx answer

        Raises:
            ValueError: If the method is not supported
            BotlistMeAPIError: If the API answers with a non-2xx status
            aiohttp.ClientError: If the transport fails

        Example:
            ```python
            http = HTTPClient(token, "https://api.botlist.me/api/v1")
            response = await http.request("get", "bots/123")
            print(response.body)
            ```
        """
        method = method.lower()
        if method not in self.METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = self._build_headers()
        correlation_id = generate_correlation_id()

        kwargs: Dict[str, Any] = {"headers": headers}
        if data is not None and method == "get":
            kwargs["params"] = {key: str(value) for key, value in data.items()}
        elif data is not None and method == "post":
            # aiohttp sets the application/json content type for json bodies
            kwargs["json"] = data

        log_http_request(
            method=method.upper(),
            url=url,
            headers=headers,
            body=data,
            correlation_id=correlation_id,
        )

        start_time = time.time()
        try:
            async with aiohttp.ClientSession() as session:
                async with session.request(method.upper(), url, **kwargs) as resp:
                    raw = await resp.text()
                    response_time_ms = (time.time() - start_time) * 1000
                    response = Response(
                        raw=raw,
                        body=self._parse_body(raw, resp.headers.get("Content-Type", ""), correlation_id),
                        status=resp.status,
                        status_text=resp.reason or "",
                        headers=self._flatten_headers(resp.headers),
                    )
        except aiohttp.ClientError as e:
            log_http_response(
                status_code=0,
                response_time_ms=(time.time() - start_time) * 1000,
                error=f"{type(e).__name__}: {e}",
                correlation_id=correlation_id,
            )
            raise

        log_http_response(
            status_code=response.status,
            response_time_ms=response_time_ms,
            response_size=len(raw.encode("utf-8")),
            error=None if response.ok else f"{response.status} {response.status_text}",
            correlation_id=correlation_id,
        )

        if not response.ok:
            raise BotlistMeAPIError(response)
        return response
