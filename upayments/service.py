"""
UPayments API Service

Sync client for the UPayments hosted payment gateway using Bearer Token auth.
Payment parameters are accumulated through the fluent builder API and then
dispatched by one method per gateway operation.

Connection Details:
    - Base URL: https://sandboxapi.upayments.com (sandbox)
    - Auth: Bearer Token (API key)

Endpoints (v1 profile):
    - POST /api/v1/charge - Create payment (link)
    - GET /api/v1/get-payment-status/{trackId} - Payment status
    - POST /api/v1/create-refund - Single refund
    - POST /api/v1/create-multivendor-refund - Multi-vendor refund
    - POST /api/v1/create-customer-unique-token - Card tokenization
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from .config.settings import get_settings
from .exceptions import UpaymentsValidationError
from .http_client import UpaymentsHttpClient
from .http_logging import RequestLogger
from .models import ApiResponse
from .payload_builder import PaymentRequestBuilder
from .profiles import ApiProfile, get_profile

logger = logging.getLogger(__name__)

REFUND_OPTIONAL_FIELDS = ("customerFirstName", "customerEmail", "customerMobileNumber", "reference", "notifyUrl")
MULTI_VENDOR_REFUND_OPTIONAL_FIELDS = ("receiptId",) + REFUND_OPTIONAL_FIELDS
TRACK_ID_LOOKUP = "trackId"


class UpaymentsService(PaymentRequestBuilder):
    """
    UPayments gateway client.

    The service is itself the request builder: setters chain and the
    operation methods send the accumulated parameters. Refund and card
    operations replace the parameter set with their own body, except
    create_multi_vendor_refund which sends the vendors added through
    add_refund_vendor.

    Environment Variables:
        UPAYMENTS_API_KEY: Bearer token for API auth
        UPAYMENTS_API_URL: Base URL (sandbox by default)
        UPAYMENTS_PROFILE: v1 or legacy
        UPAYMENTS_LOGGING_CHANNEL: Logger name for request/response logs
        UPAYMENTS_LOGGING_ENABLED: Enable request/response logging
        UPAYMENTS_TIMEOUT: Request timeout in seconds (default: 30)
        UPAYMENTS_MAX_RETRIES: Extra attempts on transient failures (default: 3)

    Example:
        with UpaymentsService() as upayments:
            result = (
                upayments.add_product("Shoes", "Running shoes", 25.0, 1)
                .set_order({"id": "ORD1", "description": "Shoes", "currency": "KWD", "amount": 25.0})
                .set_payment_gateway("knet")
                .set_return_url("https://shop.example/return")
                .set_cancel_url("https://shop.example/cancel")
                .set_notification_url("https://shop.example/notify")
                .create_payment()
            )
            # result.data["link"] contains the payment URL
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        logging_channel: str | None = None,
        logging_enabled: bool | None = None,
        profile: ApiProfile | str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_wait: float | None = None,
        request_logger: logging.Logger | None = None,
        http_client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the service; unset arguments fall back to settings.

        Args:
            request_logger: Logger for request/response records, overrides
                logging_channel
            http_client: Shared httpx.Client (caller keeps ownership)
            transport: httpx transport for the owned client
        """
        settings = get_settings()

        if profile is None:
            profile = settings.UPAYMENTS_PROFILE
        if isinstance(profile, str):
            profile = get_profile(profile)
        super().__init__(profile)

        api_key = api_key if api_key is not None else settings.UPAYMENTS_API_KEY
        if not api_key:
            logger.error("UPAYMENTS_API_KEY not configured")

        if logging_enabled is None:
            logging_enabled = settings.UPAYMENTS_LOGGING_ENABLED

        traffic_logger = None
        if logging_enabled:
            if request_logger is not None:
                traffic_logger = RequestLogger(request_logger)
            else:
                traffic_logger = RequestLogger.for_channel(logging_channel or settings.UPAYMENTS_LOGGING_CHANNEL)

        self._http = UpaymentsHttpClient(
            api_key=api_key,
            base_url=base_url or settings.UPAYMENTS_API_URL,
            timeout=timeout if timeout is not None else settings.UPAYMENTS_TIMEOUT,
            max_retries=max_retries if max_retries is not None else settings.UPAYMENTS_MAX_RETRIES,
            retry_wait=retry_wait if retry_wait is not None else settings.UPAYMENTS_RETRY_WAIT,
            request_logger=traffic_logger,
            http_client=http_client,
            transport=transport,
        )

    @property
    def http(self) -> UpaymentsHttpClient:
        return self._http

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> UpaymentsService:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _send(
        self,
        method: str,
        operation: str,
        identifier: str | None = None,
        body: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> ApiResponse:
        path = self.profile.endpoints.path(operation, identifier)
        data = self._http.send(method, path, body=body, params=params)
        return ApiResponse.model_validate(data)

    def _require(self, message: str, *values: Any) -> None:
        if any(self._is_blank(value) for value in values):
            raise UpaymentsValidationError(message)

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    def create_payment(self) -> ApiResponse:
        """
        Create a payment from the accumulated parameters.

        Returns:
            ApiResponse whose data carries the payment link

        Raises:
            UpaymentsValidationError: Required payment parameters missing
            UpaymentsApiError: Gateway rejected the payment
            UpaymentsTransportError: Network or HTTP error
        """
        self.validate_for_payment()
        order_id = self._parameters["order"].get("id")
        logger.info(f"Creating UPayments charge: order={order_id}")
        return self._send("POST", "create_payment", body=self._parameters)

    def get_payment_status(self, payment_id: str, lookup_type: str = TRACK_ID_LOOKUP) -> ApiResponse:
        """
        Fetch payment status by track id (path) or invoice id (query string).

        Any lookup_type other than "trackId" is treated as an invoice id.
        """
        if lookup_type == TRACK_ID_LOOKUP:
            return self._send("GET", "get_payment_status", identifier=payment_id)
        return self._send("GET", "get_payment_status", params={"invoice_id": payment_id})

    def check_payment_button_status(self) -> ApiResponse:
        """Which payment buttons are enabled for the merchant."""
        return self._send("GET", "check_payment_button_status")

    # ------------------------------------------------------------------
    # Refunds
    # ------------------------------------------------------------------

    def create_refund(
        self,
        order_id: str,
        total_price: float,
        optional_params: Mapping[str, Any] | None = None,
    ) -> ApiResponse:
        message = "The order ID and a valid total price are required for a refund."
        try:
            total_price = float(total_price)
        except (TypeError, ValueError) as e:
            raise UpaymentsValidationError(message) from e

        if self._is_blank(order_id) or total_price <= 0:
            raise UpaymentsValidationError(message)

        self._parameters = {"orderId": order_id, "totalPrice": total_price}
        self._add_optional_params(optional_params, REFUND_OPTIONAL_FIELDS)

        logger.info(f"Creating UPayments refund: order={order_id}, amount={total_price}")
        return self._send("POST", "create_refund", body=self._parameters)

    def get_refund_status(self, order_id: str) -> ApiResponse:
        return self._send("GET", "get_refund_status", identifier=order_id)

    def check_single_refund_status(self, order_id: str) -> ApiResponse:
        return self._send("GET", "check_single_refund_status", identifier=order_id)

    def delete_refund(self, order_id: str, refund_order_id: str) -> ApiResponse:
        self._parameters = {"orderId": order_id, "refundOrderId": refund_order_id}
        return self._send("POST", "delete_refund", body=self._parameters)

    def create_multi_vendor_refund(
        self,
        order_id: str,
        optional_params: Mapping[str, Any] | None = None,
    ) -> ApiResponse:
        """
        Refund several vendors of one order.

        Sends the vendors accumulated with add_refund_vendor, in the order
        they were added, together with order_id and the optional fields.
        """
        self._require("The order ID is required for multi-vendor refund.", order_id)

        self._parameters["orderId"] = order_id
        self._add_optional_params(optional_params, MULTI_VENDOR_REFUND_OPTIONAL_FIELDS)

        vendors = len(self._parameters.get("refundPayload", []))
        logger.info(f"Creating UPayments multi-vendor refund: order={order_id}, vendors={vendors}")
        return self._send("POST", "create_multi_vendor_refund", body=self._parameters)

    def delete_multi_vendor_refund(
        self,
        generated_invoice_id: str,
        order_id: str,
        refund_order_id: str,
        refund_arn: str,
    ) -> ApiResponse:
        self._require(
            "All parameters are required for deleting a multi-vendor refund.",
            generated_invoice_id,
            order_id,
            refund_order_id,
            refund_arn,
        )

        self._parameters = {
            "generatedInvoiceId": generated_invoice_id,
            "orderId": order_id,
            "refundOrderId": refund_order_id,
            "refundArn": refund_arn,
        }
        return self._send("POST", "delete_multi_vendor_refund", body=self._parameters)

    # ------------------------------------------------------------------
    # Card tokenization
    # ------------------------------------------------------------------

    def create_customer_unique_token(self, customer_unique_token: str) -> ApiResponse:
        self._require("The customer unique token is required.", customer_unique_token)

        self._parameters = {"customerUniqueToken": customer_unique_token}
        return self._send("POST", "create_customer_token", body=self._parameters)

    def add_card(self, return_url: str, customer_unique_token: str) -> ApiResponse:
        """Get a hosted page link where the customer saves a card."""
        self._require("Both return URL and customer unique token are required.", return_url, customer_unique_token)

        self._parameters = {"returnUrl": return_url, "customerUniqueToken": customer_unique_token}
        return self._send("POST", "add_card", body=self._parameters)

    def retrieve_customer_cards(self, customer_unique_token: str) -> ApiResponse:
        self._require("The customer unique token is required.", customer_unique_token)

        self._parameters = {"customerUniqueToken": customer_unique_token}
        return self._send("POST", "retrieve_customer_cards", body=self._parameters)
