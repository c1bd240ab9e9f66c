"""
Tests for required-field validation policies.
"""

import pytest

from upayments.exceptions import ErrorKind, UpaymentsValidationError
from upayments.validation import RequiredFieldPolicy, is_blank, validate_required_fields


class TestIsBlankTruthy:
    """TRUTHY treats every falsy value as missing."""

    @pytest.mark.parametrize("value", ["", [], {}, 0, 0.0, False, None])
    def test_falsy_values_are_blank(self, value):
        assert is_blank(value) is True

    @pytest.mark.parametrize("value", ["x", " ", [1], {"a": 1}, 1, -1, 0.01, True])
    def test_truthy_values_are_not_blank(self, value):
        assert is_blank(value) is False


class TestIsBlankPresence:
    """PRESENCE accepts zero and False but rejects empty text and collections."""

    @pytest.mark.parametrize("value", [None, "", "   ", [], {}, ()])
    def test_empty_values_are_blank(self, value):
        assert is_blank(value, RequiredFieldPolicy.PRESENCE) is True

    @pytest.mark.parametrize("value", [0, 0.0, False, "x", [0]])
    def test_zero_and_false_are_present(self, value):
        assert is_blank(value, RequiredFieldPolicy.PRESENCE) is False


class TestValidateRequiredFields:
    def test_complete_fields_pass(self):
        validate_required_fields({"a": 1, "b": "x"}, ("a", "b"))

    def test_absent_field_is_reported(self):
        with pytest.raises(UpaymentsValidationError) as exc_info:
            validate_required_fields({"a": 1}, ("a", "b"))

        assert exc_info.value.field == "b"
        assert str(exc_info.value) == "The field 'b' is required."
        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert exc_info.value.code == 422

    def test_first_missing_field_in_declared_order_wins(self):
        with pytest.raises(UpaymentsValidationError) as exc_info:
            validate_required_fields({}, ("z", "a"))

        assert exc_info.value.field == "z"

    def test_zero_amount_rejected_under_truthy_policy(self):
        with pytest.raises(UpaymentsValidationError):
            validate_required_fields({"amount": 0}, ("amount",))

    def test_zero_amount_accepted_under_presence_policy(self):
        validate_required_fields({"amount": 0}, ("amount",), RequiredFieldPolicy.PRESENCE)
