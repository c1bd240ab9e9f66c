"""
Required-field checks shared by the request builder and the service.
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from .exceptions import UpaymentsValidationError


class RequiredFieldPolicy(str, Enum):
    """
    How a required field is judged missing.

    TRUTHY: absent or falsy (``""``, empty collection, ``0``, ``False``, ``None``).
    PRESENCE: absent, ``None``, blank string or empty collection. ``0`` and
    ``False`` are accepted.
    """

    TRUTHY = "truthy"
    PRESENCE = "presence"


def is_blank(value: Any, policy: RequiredFieldPolicy = RequiredFieldPolicy.TRUTHY) -> bool:
    """Return True if value counts as empty under policy."""
    if policy is RequiredFieldPolicy.TRUTHY:
        return not value
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def validate_required_fields(
    fields: Mapping[str, Any],
    required_fields: Iterable[str],
    policy: RequiredFieldPolicy = RequiredFieldPolicy.TRUTHY,
) -> None:
    """
    Raise on the first required field that is missing or blank.

    Raises:
        UpaymentsValidationError: with ``field`` set to the offending name
    """
    for field in required_fields:
        if field not in fields or is_blank(fields[field], policy):
            raise UpaymentsValidationError(f"The field '{field}' is required.", field=field)
