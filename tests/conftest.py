"""
Shared pytest fixtures for all tests.

This module provides a stub UPayments gateway (served through
httpx.MockTransport), factories for clients wired to it, and isolation of the
UPAYMENTS_* environment.
"""

import json
import os
from typing import Any

import httpx
import pytest

from upayments.config.settings import reset_settings
from upayments.http_client import UpaymentsHttpClient
from upayments.service import UpaymentsService

TEST_API_KEY = "test-key-1234"
TEST_BASE_URL = "https://sandbox.upayments.test"


# ============================================================================
# ENVIRONMENT ISOLATION
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Run every test without UPAYMENTS_* variables or a stray .env file."""
    for name in list(os.environ):
        if name.startswith("UPAYMENTS_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


# ============================================================================
# GATEWAY STUB
# ============================================================================


class GatewayStub:
    """
    Scripted UPayments gateway.

    Each outcome is either an exception to raise or a ``(status_code, body)``
    tuple, optionally with a third item of response headers. Outcomes are
    consumed in order; the last one repeats.
    """

    def __init__(self, *outcomes: Any):
        self.outcomes = list(outcomes) or [(200, {"status": True})]
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        status_code, body, *rest = outcome
        headers = rest[0] if rest else None
        if isinstance(body, (dict, list)):
            return httpx.Response(status_code, json=body, headers=headers)
        return httpx.Response(status_code, text=body or "", headers=headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def gateway_stub():
    """Factory: gateway_stub((200, {...}), httpx.ConnectError("down"), ...)."""
    return GatewayStub


@pytest.fixture
def make_http_client():
    """Build an UpaymentsHttpClient bound to a stub, without backoff waits."""
    clients = []

    def _make(stub: GatewayStub, **kwargs: Any) -> UpaymentsHttpClient:
        kwargs.setdefault("retry_wait", 0)
        client = UpaymentsHttpClient(
            api_key=TEST_API_KEY,
            base_url=TEST_BASE_URL,
            transport=stub.transport,
            **kwargs,
        )
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def make_service():
    """Build an UpaymentsService bound to a stub, logging off, no backoff."""
    services = []

    def _make(stub: GatewayStub, **kwargs: Any) -> UpaymentsService:
        kwargs.setdefault("retry_wait", 0)
        kwargs.setdefault("logging_enabled", False)
        service = UpaymentsService(
            api_key=TEST_API_KEY,
            base_url=TEST_BASE_URL,
            transport=stub.transport,
            **kwargs,
        )
        services.append(service)
        return service

    yield _make

    for service in services:
        service.close()


# ============================================================================
# TEST DATA
# ============================================================================


@pytest.fixture
def order_data() -> dict:
    return {
        "id": "ORD123",
        "reference": "REF123",
        "description": "Order Description",
        "currency": "KWD",
        "amount": 100.0,
    }


@pytest.fixture
def customer_data() -> dict:
    return {
        "uniqueId": "CUST123",
        "name": "John Doe",
        "email": "john.doe@example.com",
        "mobile": "+96512345678",
    }


@pytest.fixture
def refund_vendor() -> dict:
    return {
        "refundRequestId": "REF123",
        "ibanNumber": "KW91KFHO0000000000051010173254",
        "totalPaid": "100.0",
        "refundedAmount": 1.0,
        "remainingLimit": 100.0,
        "amountToRefund": 10.0,
        "merchantType": "vendor",
    }


@pytest.fixture
def extra_merchant_data() -> dict:
    return {
        "amount": 10.0,
        "knetCharge": 0.5,
        "knetChargeType": "fixed",
        "ccCharge": 2.5,
        "ccChargeType": "percentage",
        "ibanNumber": "KW31NBOK0000000000002010177457",
    }
