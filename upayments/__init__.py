"""
UPayments Python SDK.

Usage:
    from upayments import UpaymentsService

    with UpaymentsService(api_key="...") as upayments:
        status = upayments.get_payment_status("TRACK123")
"""

from .config.settings import UpaymentsSettings, get_settings
from .exceptions import (
    ErrorKind,
    UpaymentsApiError,
    UpaymentsError,
    UpaymentsTransportError,
    UpaymentsValidationError,
)
from .http_client import UpaymentsHttpClient
from .models import ApiResponse
from .payload_builder import PaymentRequestBuilder
from .profiles import LEGACY_PROFILE, PROFILES, V1_PROFILE, ApiProfile, EndpointTable, get_profile
from .service import UpaymentsService
from .validation import RequiredFieldPolicy

__version__ = "0.1.0"

__all__ = [
    # Service
    "UpaymentsService",
    "PaymentRequestBuilder",
    "UpaymentsHttpClient",
    "ApiResponse",
    # Configuration
    "UpaymentsSettings",
    "get_settings",
    "ApiProfile",
    "EndpointTable",
    "RequiredFieldPolicy",
    "PROFILES",
    "V1_PROFILE",
    "LEGACY_PROFILE",
    "get_profile",
    # Exceptions
    "ErrorKind",
    "UpaymentsError",
    "UpaymentsValidationError",
    "UpaymentsApiError",
    "UpaymentsTransportError",
]
