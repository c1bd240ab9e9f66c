# ============================================================================
# SCOPE: GLOBAL
# Description: Perfiles de API (endpoints y reglas de validación) de UPayments.
# ============================================================================
"""
UPayments API Profiles.

A profile bundles the endpoint table and the validation rules for one API
flavour, so that versions differ only in data:

- v1: ``/api/v1/...`` paths, strict gateway enumeration
- legacy: unprefixed paths (version lives in the base URL), any gateway
  source, ``order.reference`` required
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from urllib.parse import quote

from .validation import RequiredFieldPolicy

ENDPOINT_NAMES = (
    "create_payment",
    "get_payment_status",
    "create_refund",
    "get_refund_status",
    "check_single_refund_status",
    "delete_refund",
    "create_multi_vendor_refund",
    "delete_multi_vendor_refund",
    "create_customer_token",
    "add_card",
    "retrieve_customer_cards",
    "check_payment_button_status",
)

_ENDPOINT_SLUGS = {
    "create_payment": "charge",
    "get_payment_status": "get-payment-status",
    "create_refund": "create-refund",
    "get_refund_status": "check-refund",
    "check_single_refund_status": "check-refund-status",
    "delete_refund": "delete-refund",
    "create_multi_vendor_refund": "create-multivendor-refund",
    "delete_multi_vendor_refund": "delete-multivendor-refund",
    "create_customer_token": "create-customer-unique-token",
    "add_card": "add-card",
    "retrieve_customer_cards": "retrieve-customer-cards",
    "check_payment_button_status": "check-payment-button-status",
}

PAYMENT_GATEWAYS = ("knet", "cc", "samsung-pay", "apple-pay", "google-pay", "create-invoice")
NOTIFICATION_TYPES = ("email", "sms", "link", "all")


class EndpointTable:
    """Read-only mapping of operation name to URL path."""

    def __init__(self, paths: Mapping[str, str]):
        missing = [name for name in ENDPOINT_NAMES if name not in paths]
        if missing:
            raise ValueError(f"Endpoint table is missing: {', '.join(missing)}")
        self._paths = MappingProxyType(dict(paths))

    @classmethod
    def with_prefix(cls, prefix: str) -> "EndpointTable":
        """Build the standard table with every slug under prefix."""
        prefix = prefix.rstrip("/")
        return cls({name: f"{prefix}/{slug}" for name, slug in _ENDPOINT_SLUGS.items()})

    def path(self, operation: str, identifier: str | None = None) -> str:
        """
        Resolve operation to its path, optionally with an identifier suffix.

        Raises:
            KeyError: unknown operation name
        """
        base = self._paths[operation]
        if identifier is None:
            return base
        return f"{base}/{quote(str(identifier), safe='')}"

    def as_dict(self) -> dict[str, str]:
        return dict(self._paths)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, EndpointTable) and self.as_dict() == other.as_dict()

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._paths.items())))

    def __repr__(self) -> str:
        return f"EndpointTable({self.as_dict()!r})"


@dataclass(frozen=True)
class ApiProfile:
    """
    Declarative endpoint and validation configuration.

    Attributes:
        name: Profile identifier
        endpoints: Operation to path table
        order_required_fields: Keys ``set_order`` demands
        restrict_payment_gateways: Enforce PAYMENT_GATEWAYS in ``set_payment_gateway``
        required_field_policy: How "missing" is judged
        white_labeled: Initial white-label flag of a new builder
    """

    name: str
    endpoints: EndpointTable
    order_required_fields: tuple[str, ...] = ("id", "description", "currency", "amount")
    restrict_payment_gateways: bool = True
    required_field_policy: RequiredFieldPolicy = RequiredFieldPolicy.TRUTHY
    white_labeled: bool = False
    payment_gateways: tuple[str, ...] = PAYMENT_GATEWAYS


V1_PROFILE = ApiProfile(
    name="v1",
    endpoints=EndpointTable.with_prefix("/api/v1"),
)

LEGACY_PROFILE = ApiProfile(
    name="legacy",
    endpoints=EndpointTable.with_prefix(""),
    order_required_fields=("id", "reference", "description", "currency", "amount"),
    restrict_payment_gateways=False,
)

PROFILES: Mapping[str, ApiProfile] = MappingProxyType(
    {V1_PROFILE.name: V1_PROFILE, LEGACY_PROFILE.name: LEGACY_PROFILE}
)


def get_profile(name: str) -> ApiProfile:
    """
    Look up a shipped profile by name.

    Raises:
        ValueError: unknown profile name
    """
    try:
        return PROFILES[name]
    except KeyError:
        raise ValueError(f"Unknown UPayments profile '{name}'. Available: {', '.join(PROFILES)}") from None
