# ============================================================================
# SCOPE: GLOBAL
# Description: Builder fluido para los payloads de pagos y reembolsos UPayments.
# ============================================================================
"""
UPayments Payload Builder.

Single Responsibility: Accumulate and validate request parameters.

Each setter validates its own input, stores it under the wire key the gateway
expects and returns the builder, so calls chain:

    builder = (
        PaymentRequestBuilder()
        .add_product("Shoes", "Running shoes", 25.0, 1)
        .set_order({"id": "ORD1", "description": "Shoes", "currency": "KWD", "amount": 25.0})
        .set_return_url("https://shop.example/return")
    )

A builder owns its parameter set and mutates it in place; use one instance
per transaction.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from .exceptions import UpaymentsValidationError
from .profiles import NOTIFICATION_TYPES, V1_PROFILE, ApiProfile
from .validation import is_blank, validate_required_fields

CUSTOMER_REQUIRED_FIELDS = ("uniqueId", "name", "email", "mobile")
EXTRA_MERCHANT_REQUIRED_FIELDS = ("amount", "knetCharge", "knetChargeType", "ccCharge", "ccChargeType", "ibanNumber")
MERCHANT_DATA_STATE_FIELDS = ("order", "paymentGateway", "returnUrl", "cancelUrl", "notificationUrl")
REFUND_VENDOR_REQUIRED_FIELDS = (
    "refundRequestId",
    "ibanNumber",
    "totalPaid",
    "refundedAmount",
    "remainingLimit",
    "amountToRefund",
    "merchantType",
)
PAYMENT_REQUIRED_FIELDS = ("order", "returnUrl", "cancelUrl", "notificationUrl")
INVOICE_GATEWAY = "create-invoice"


class PaymentRequestBuilder:
    """
    Fluent accumulator for UPayments request bodies.

    Validation rules (order fields, gateway enumeration, what counts as an
    empty value) come from the ApiProfile.
    """

    def __init__(self, profile: ApiProfile | None = None) -> None:
        self._profile = profile or V1_PROFILE
        self._parameters: dict[str, Any] = {}
        self._white_labeled = self._profile.white_labeled

    @property
    def profile(self) -> ApiProfile:
        return self._profile

    @property
    def parameters(self) -> dict[str, Any]:
        """Deep copy of the accumulated parameter set."""
        return copy.deepcopy(self._parameters)

    @property
    def is_white_labeled(self) -> bool:
        return self._white_labeled

    def _validate(self, fields: Mapping[str, Any], required_fields: tuple[str, ...]) -> None:
        validate_required_fields(fields, required_fields, self._profile.required_field_policy)

    def _is_blank(self, value: Any) -> bool:
        return is_blank(value, self._profile.required_field_policy)

    def _add_optional_params(self, optional_params: Mapping[str, Any] | None, fields: tuple[str, ...]) -> None:
        """Copy the listed keys from optional_params, skipping blank values."""
        if not optional_params:
            return
        for field in fields:
            value = optional_params.get(field)
            if not self._is_blank(value):
                self._parameters[field] = value

    def reset(self) -> PaymentRequestBuilder:
        """Discard all accumulated parameters and the white-label flag."""
        self._parameters = {}
        self._white_labeled = self._profile.white_labeled
        return self

    # ------------------------------------------------------------------
    # Payment parameters
    # ------------------------------------------------------------------

    def add_product(self, name: str, description: str, price: float, quantity: int) -> PaymentRequestBuilder:
        try:
            product = {
                "name": name,
                "description": description,
                "price": float(price),
                "quantity": int(quantity),
            }
        except (TypeError, ValueError) as e:
            raise UpaymentsValidationError(f"Invalid product '{name}': {e}") from e

        self._parameters.setdefault("products", []).append(product)
        return self

    def mark_as_white_labeled(self) -> PaymentRequestBuilder:
        """Require a payment gateway on create_payment."""
        self._white_labeled = True
        return self

    def mark_as_non_white_labeled(self) -> PaymentRequestBuilder:
        self._white_labeled = False
        return self

    def set_order(self, order_data: Mapping[str, Any]) -> PaymentRequestBuilder:
        self._validate(order_data, self._profile.order_required_fields)
        self._parameters["order"] = dict(order_data)
        return self

    def set_customer(self, customer_data: Mapping[str, Any]) -> PaymentRequestBuilder:
        self._validate(customer_data, CUSTOMER_REQUIRED_FIELDS)
        self._parameters["customer"] = dict(customer_data)
        return self

    def set_payment_gateway(self, source: str) -> PaymentRequestBuilder:
        """
        Select the payment method shown to the customer.

        Raises:
            UpaymentsValidationError: blank source, or a source outside the
                profile's gateway list when the profile restricts it
        """
        if self._is_blank(source):
            raise UpaymentsValidationError("The payment gateway source is required.", field="paymentGateway")

        gateways = self._profile.payment_gateways
        if self._profile.restrict_payment_gateways and source not in gateways:
            allowed = f"{', '.join(gateways[:-1])} and {gateways[-1]}"
            raise UpaymentsValidationError(
                f"The payment gateway source is not valid, please add one of {allowed}.",
                field="paymentGateway",
            )

        self._parameters.setdefault("paymentGateway", {})["src"] = source
        return self

    def set_language(self, language: str) -> PaymentRequestBuilder:
        self._parameters["language"] = language
        return self

    def set_reference(self, reference_id: str) -> PaymentRequestBuilder:
        self._parameters["reference"] = {"id": reference_id}
        return self

    def set_return_url(self, url: str) -> PaymentRequestBuilder:
        self._parameters["returnUrl"] = url
        return self

    def set_cancel_url(self, url: str) -> PaymentRequestBuilder:
        self._parameters["cancelUrl"] = url
        return self

    def set_notification_url(self, url: str) -> PaymentRequestBuilder:
        self._parameters["notificationUrl"] = url
        return self

    def set_notification_type(self, notification_type: str) -> PaymentRequestBuilder:
        if notification_type not in NOTIFICATION_TYPES:
            raise UpaymentsValidationError(
                "The field notification type must be one of 'email', 'sms', 'link', 'all'.",
                field="notificationType",
            )
        self._parameters["notificationType"] = notification_type
        return self

    def set_customer_extra_data(self, data: str) -> PaymentRequestBuilder:
        self._parameters["customerExtraData"] = data
        return self

    def set_extra_merchant_data(self, data: Mapping[str, Any]) -> PaymentRequestBuilder:
        """Append a vendor split entry; the entry itself must be complete."""
        self._validate(data, EXTRA_MERCHANT_REQUIRED_FIELDS)
        self._parameters.setdefault("extraMerchantData", []).append(dict(data))
        return self

    def add_merchant_data(self, merchant_data: Mapping[str, Any]) -> PaymentRequestBuilder:
        """
        Append a vendor split entry once the payment itself is configured.

        Unlike set_extra_merchant_data this checks the builder's state (order,
        gateway and the three URLs must already be set), not the entry.
        """
        self._validate(self._parameters, MERCHANT_DATA_STATE_FIELDS)
        self._parameters.setdefault("extraMerchantData", []).append(dict(merchant_data))
        return self

    def validate_for_payment(self) -> None:
        """
        Check the accumulated state is ready for the charge endpoint.

        White-labeled merchants must pick a gateway; invoices additionally
        need the customer and how to notify them.
        """
        required = list(PAYMENT_REQUIRED_FIELDS)
        if self._white_labeled:
            required.append("paymentGateway")

        gateway = self._parameters.get("paymentGateway") or {}
        if gateway.get("src") == INVOICE_GATEWAY:
            required.extend(("customer", "notificationType"))

        self._validate(self._parameters, tuple(required))

    # ------------------------------------------------------------------
    # Refund parameters
    # ------------------------------------------------------------------

    def add_refund_vendor(self, vendor_data: Mapping[str, Any]) -> PaymentRequestBuilder:
        self._validate(vendor_data, REFUND_VENDOR_REQUIRED_FIELDS)
        self._parameters.setdefault("refundPayload", []).append(dict(vendor_data))
        return self
