# ============================================================================
# SCOPE: GLOBAL
# Description: Cliente HTTP para la API de UPayments con retry automático.
# ============================================================================
"""
UPayments HTTP Client with retry.

Single Responsibility: Execute gateway requests and normalize their outcome.

Retry Strategy:
- Network errors (no response): retry
- 5xx: retry
- Anything else: no retry

Outcome:
- 2xx with a falsy, non-null ``status`` in the body -> UpaymentsApiError
- Redirects are followed; any other non-2xx -> UpaymentsTransportError
- No response once retries are exhausted -> UpaymentsTransportError
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential_jitter,
    wait_none,
)

from .exceptions import UpaymentsApiError, UpaymentsTransportError
from .http_logging import RequestLogger

logger = logging.getLogger(__name__)

NO_RESPONSE_MESSAGE = "An error occurred while processing the request"


def _is_server_error(response: httpx.Response) -> bool:
    return response.status_code >= 500


def _message(data: Any) -> str | None:
    """Best available error message of a decoded body."""
    message = data.get("message") if isinstance(data, dict) else None
    if message is None or isinstance(message, str):
        return message
    return str(message)


def _last_outcome(retry_state: RetryCallState) -> httpx.Response:
    """Hand back the final response, or re-raise the final exception."""
    return retry_state.outcome.result()


class UpaymentsHttpClient:
    """
    Synchronous HTTP client for the UPayments API.

    Uses a persistent httpx.Client for connection reuse. A caller-owned
    client can be injected instead; it is then left open by close().
    """

    DEFAULT_TIMEOUT = 30.0
    MAX_RETRIES = 3  # Extra attempts after the first
    RETRY_WAIT = 0.1  # Initial backoff in seconds
    MAX_WAIT = 2.0  # Backoff ceiling in seconds

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_wait: float = RETRY_WAIT,
        request_logger: RequestLogger | None = None,
        http_client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP client.

        Args:
            api_key: Bearer token
            base_url: Gateway base URL, without trailing slash
            timeout: Request timeout in seconds
            max_retries: Extra attempts on network errors and 5xx responses
            retry_wait: Initial exponential backoff; 0 retries immediately
            request_logger: Logs every attempt when given
            http_client: Shared httpx.Client to send through
            transport: httpx transport for the owned client (tests, proxies)
        """
        if max_retries < 0:
            raise ValueError("max_retries must be 0 or greater")

        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_retries = max_retries
        self._retry_wait = retry_wait
        self._request_logger = request_logger
        self._transport = transport
        self._owns_client = http_client is None
        self._client: httpx.Client | None = http_client

        self._retrying = Retrying(
            retry=retry_if_exception_type(httpx.RequestError) | retry_if_result(_is_server_error),
            stop=stop_after_attempt(max_retries + 1),
            wait=(
                wait_exponential_jitter(initial=retry_wait, max=self.MAX_WAIT, jitter=retry_wait)
                if retry_wait > 0
                else wait_none()
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            retry_error_callback=_last_outcome,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def headers(self) -> dict[str, str]:
        """Get standard headers for requests."""
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _ensure_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout, transport=self._transport, follow_redirects=True)
        return self._client

    def close(self) -> None:
        """Close the owned HTTP client and release connections."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "UpaymentsHttpClient":
        self._ensure_client()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get_url(self, endpoint_path: str) -> str:
        """Build absolute URL for an endpoint path."""
        return f"{self._base_url}/{endpoint_path.lstrip('/')}"

    def _attempt(self, client: httpx.Client, request: httpx.Request) -> httpx.Response:
        """Send one attempt, logging both sides when logging is on."""
        if self._request_logger:
            self._request_logger.log_request(request)

        try:
            response = client.send(request)
        except httpx.RequestError as e:
            if self._request_logger:
                self._request_logger.log_exception(request, e)
            raise

        if self._request_logger:
            self._request_logger.log_response(response)
        return response

    def send(
        self,
        method: str,
        endpoint_path: str,
        body: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Issue a request with retry and return the decoded JSON body.

        Args:
            method: HTTP method
            endpoint_path: Path relative to the base URL
            body: JSON body, omitted when empty
            params: Query string parameters

        Returns:
            Decoded response dict (empty if no body)

        Raises:
            UpaymentsApiError: Body reports ``status: false``
            UpaymentsTransportError: Network failure or HTTP error status
        """
        client = self._ensure_client()
        request = client.build_request(
            method,
            self.get_url(endpoint_path),
            json=dict(body) if body else None,
            params=dict(params) if params else None,
            headers=self.headers,
        )

        try:
            response = self._retrying.copy()(self._attempt, client, request)
        except httpx.RequestError as e:
            logger.error(f"UPayments {method} {endpoint_path} failed without response: {e}")
            raise UpaymentsTransportError(NO_RESPONSE_MESSAGE) from e

        return self._handle_response(method, endpoint_path, response)

    def _handle_response(self, method: str, endpoint_path: str, response: httpx.Response) -> dict[str, Any]:
        data = self._decode(response)

        if not response.is_success:
            # Redirects the client did not follow land here too
            message = _message(data)
            logger.error(f"UPayments {method} {endpoint_path} returned HTTP {response.status_code}: {message}")
            raise UpaymentsTransportError(
                message or "Unknown error",
                status_code=response.status_code,
                response_data=data if isinstance(data, dict) else None,
            )

        if not isinstance(data, dict):
            raise UpaymentsTransportError(
                "Invalid JSON response from UPayments",
                status_code=response.status_code,
            )

        if data.get("status") is not None and not data["status"]:
            message = _message(data) or "Upayments API error"
            logger.warning(f"UPayments {method} {endpoint_path} rejected: {message}")
            raise UpaymentsApiError(message, response.status_code, data)

        return data

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Decode the JSON body; empty body -> {}, invalid JSON -> None."""
        if not response.content.strip():
            return {}
        try:
            return response.json()
        except ValueError:
            return None
