# ============================================================================
# SCOPE: GLOBAL
# Description: Excepciones del cliente UPayments.
# ============================================================================
"""
UPayments Exceptions.

Single Responsibility: Define the three failure kinds of a gateway call.

- UpaymentsValidationError: input rejected locally, nothing was sent
- UpaymentsApiError: the gateway answered with ``status: false``
- UpaymentsTransportError: network failure or HTTP error after retries
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Failure cause, for callers that prefer matching over except clauses."""

    VALIDATION = "validation"
    API = "api"
    TRANSPORT = "transport"


class UpaymentsError(Exception):
    """
    Base exception for UPayments errors.

    Attributes:
        message: Human-readable error description
        code: Numeric code (HTTP status where one exists)
        kind: ErrorKind of the failure
    """

    kind: ErrorKind | None = None

    def __init__(self, message: str, code: int | None = None):
        self.message = message
        self.code = code
        super().__init__(message)


class UpaymentsValidationError(UpaymentsError):
    """Required field missing/empty or enumerated field out of range."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str = "Validation Error", field: str | None = None):
        self.field = field
        super().__init__(message, 422)


class UpaymentsApiError(UpaymentsError):
    """
    The HTTP call succeeded but the gateway rejected the operation.

    Attributes:
        status_code: HTTP status of the response
        api_response: Decoded response body
    """

    kind = ErrorKind.API

    def __init__(
        self,
        message: str = "Upayments API error",
        status_code: int = 500,
        api_response: dict[str, Any] | None = None,
    ):
        self.status_code = status_code
        self.api_response = api_response or {}
        super().__init__(message, status_code)


class UpaymentsTransportError(UpaymentsError):
    """
    Network failure, or an HTTP error status once retries are exhausted.

    Attributes:
        status_code: HTTP status, or None when no response was received
        response_data: Decoded error body, if any
    """

    kind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
    ):
        self.status_code = status_code
        self.response_data = response_data or {}
        super().__init__(message, status_code)
