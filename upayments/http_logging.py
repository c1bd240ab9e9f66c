"""
Request/response logging for the UPayments HTTP client.

Every attempt (retries included) is logged on the configured channel. A
failure while logging is reported on this module's logger and otherwise
ignored, so it can never change a request's outcome.
"""

import logging
from collections.abc import Callable
from typing import Any

import httpx

logger = logging.getLogger(__name__)

MASKED_HEADERS = frozenset({"authorization"})


def _masked_headers(headers: httpx.Headers) -> dict[str, str]:
    masked = {}
    for name, value in headers.items():
        if name.lower() in MASKED_HEADERS:
            scheme, _, token = value.partition(" ")
            value = f"{scheme} ***{token[-4:]}" if token else "***"
        masked[name] = value
    return masked


def _body_text(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


class RequestLogger:
    """
    Logs UPayments traffic on a dedicated logger ("channel").

    Args:
        channel: Logger that receives the records
    """

    def __init__(self, channel: logging.Logger):
        self._channel = channel

    @classmethod
    def for_channel(cls, name: str) -> "RequestLogger":
        return cls(logging.getLogger(name))

    @property
    def channel(self) -> logging.Logger:
        return self._channel

    def _safely(self, fn: Callable[..., Any], *args: Any) -> None:
        try:
            fn(*args)
        except Exception:
            logger.debug("UPayments request logging failed", exc_info=True)

    def log_request(self, request: httpx.Request) -> None:
        self._safely(self._log_request, request)

    def log_response(self, response: httpx.Response) -> None:
        self._safely(self._log_response, response)

    def log_exception(self, request: httpx.Request, error: Exception) -> None:
        self._safely(self._log_exception, request, error)

    def _log_request(self, request: httpx.Request) -> None:
        self._channel.info(
            f"Request: {request.method} {request.url}",
            extra={
                "method": request.method,
                "uri": str(request.url),
                "headers": _masked_headers(request.headers),
                "body": _body_text(request.content),
            },
        )

    def _log_response(self, response: httpx.Response) -> None:
        self._channel.info(
            f"Response: {response.status_code} {response.request.method} {response.request.url}",
            extra={
                "status": response.status_code,
                "headers": dict(response.headers),
                "body": response.text,
            },
        )

    def _log_exception(self, request: httpx.Request, error: Exception) -> None:
        self._channel.error(
            f"Request Exception: {request.method} {request.url}: {error}",
            extra={
                "error_message": str(error),
                "error_type": type(error).__name__,
                "request": _body_text(request.content),
            },
        )
