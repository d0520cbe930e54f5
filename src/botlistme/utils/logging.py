"""
Logging configuration and utilities for the Botlist.me client.

This module provides logging setup with support for both structured JSON
logging (for production) and human-readable text logging (for development).
It integrates with structlog for structured logging and rich for console
output.

The library itself never configures logging on import; applications call
``setup_logging`` once (the CLI does so on startup). Until then structlog's
defaults apply.

Features:
- HTTP request/response logging for the Botlist.me API
- Request correlation IDs for tracing
- Service-specific loggers
"""

import json
import logging
import sys
import uuid
from typing import Any, Dict, Optional, Union
from urllib.parse import urlparse

import structlog
from rich.console import Console
from rich.logging import RichHandler

from botlistme.config import LoggingConfig


def setup_logging(config: LoggingConfig) -> None:
    """
    Set up application logging based on configuration.

    This function configures the logging system with either JSON structured
    logging for production or rich text logging for development. It sets up
    both the standard library logging and structlog for consistent output.

    Args:
        config: Logging configuration settings

    Example:
        ```python
        from botlistme.config import load_config
        from botlistme.utils.logging import setup_logging

        app_config = load_config()
        setup_logging(app_config.logging)
        ```
    """
    # Clear any existing handlers
    logging.getLogger().handlers.clear()
    logging.getLogger().setLevel(config.level)

    if config.format == "json":
        _setup_json_logging(config)
    else:
        _setup_rich_logging(config)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _structlog_processor if config.format == "json" else _rich_processor,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.level)
        ),
        logger_factory=structlog.WriteLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    configure_external_loggers()


def _setup_json_logging(config: LoggingConfig) -> None:
    """Set up structured JSON logging for production."""
    formatter = logging.Formatter(
        fmt='{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
            '"logger": "%(name)s", "message": "%(message)s"}',
        datefmt="%Y-%m-%dT%H:%M:%SZ"
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(config.level)

    logging.getLogger().addHandler(handler)


def _setup_rich_logging(config: LoggingConfig) -> None:
    """Set up rich text logging for development."""
    console = Console(stderr=True)

    handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
    )

    handler.setLevel(config.level)
    logging.getLogger().addHandler(handler)


def _structlog_processor(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> str:
    """Process structlog events for JSON output."""
    return json.dumps(event_dict, default=str)


def _rich_processor(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> str:
    """Process structlog events for rich text output."""
    message = event_dict.pop("event", "")

    context_items = [
        f"{key}={value}"
        for key, value in event_dict.items()
        if key not in {"timestamp", "level"}
    ]
    if context_items:
        message += f" ({', '.join(context_items)})"

    level = event_dict.get("level", "info").upper()
    return f"{event_dict.get('timestamp', '')} [{level}] {message}"


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Optional logger name (defaults to calling module)

    Returns:
        Configured structlog BoundLogger instance

    Example:
        ```python
        logger = get_logger(__name__)
        logger.info("Posting stats", server_count=1200)
        ```
    """
    return structlog.get_logger(name)


def log_error(error: BaseException, context: Optional[Dict[str, Any]] = None) -> None:
    """
    Log an error with context information.

    Args:
        error: The exception that occurred
        context: Additional context information
    """
    logger = get_logger()
    error_context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if context:
        error_context.update(context)

    logger.error("Exception occurred", **error_context)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for tracking requests."""
    return str(uuid.uuid4())[:8]


def get_service_logger(service_name: str) -> structlog.BoundLogger:
    """
    Get a service-specific logger with consistent naming.

    Args:
        service_name: Name of the service (e.g., 'api', 'webhook', 'autopost')

    Returns:
        Logger bound with service context
    """
    logger = get_logger(f"botlistme.{service_name}")
    return logger.bind(service=service_name)


def log_http_request(
    method: str,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    body: Optional[Union[str, Dict[str, Any]]] = None,
    service: str = "api",
    correlation_id: Optional[str] = None
) -> None:
    """
    Log HTTP request details.

    Args:
        method: HTTP method (GET, POST)
        url: Request URL
        headers: Request headers (sensitive headers will be masked)
        body: Request body
        service: Service name
        correlation_id: Optional correlation ID for request tracking
    """
    logger = get_service_logger(service)
    parsed_url = urlparse(url)

    safe_headers = {}
    if headers:
        for key, value in headers.items():
            if any(sensitive in key.lower() for sensitive in ['authorization', 'token', 'secret']):
                safe_headers[key] = f"***{value[-4:] if len(value) > 4 else '***'}"
            else:
                safe_headers[key] = value

    logger.debug(
        "HTTP request initiated",
        method=method,
        host=parsed_url.netloc,
        path=parsed_url.path,
        headers=safe_headers,
        body=body,
        correlation_id=correlation_id or "none"
    )


def log_http_response(
    status_code: int,
    response_time_ms: float,
    response_size: Optional[int] = None,
    error: Optional[str] = None,
    service: str = "api",
    correlation_id: Optional[str] = None
) -> None:
    """
    Log HTTP response details.

    Args:
        status_code: HTTP status code (0 when the transport failed)
        response_time_ms: Response time in milliseconds
        response_size: Response size in bytes
        error: Error message if request failed
        service: Service name
        correlation_id: Optional correlation ID for request tracking
    """
    logger = get_service_logger(service)

    log_level = "debug"
    if status_code >= 400 or status_code == 0:
        log_level = "error" if status_code >= 500 or status_code == 0 else "warning"

    log_data = {
        "status_code": status_code,
        "response_time_ms": round(response_time_ms, 2),
        "correlation_id": correlation_id or "none"
    }

    if response_size is not None:
        log_data["response_size_bytes"] = response_size

    if error:
        log_data["error"] = error

    message = "HTTP request failed" if error else "HTTP response received"

    getattr(logger, log_level)(message, **log_data)


def configure_external_loggers() -> None:
    """
    Configure logging levels for external libraries to reduce noise.
    """
    logging.getLogger('aiohttp.access').setLevel(logging.WARNING)
    logging.getLogger('aiohttp.client').setLevel(logging.WARNING)
    logging.getLogger('aiohttp.server').setLevel(logging.WARNING)

    logging.getLogger('discord').setLevel(logging.WARNING)
    logging.getLogger('discord.http').setLevel(logging.WARNING)
    logging.getLogger('discord.gateway').setLevel(logging.INFO)
