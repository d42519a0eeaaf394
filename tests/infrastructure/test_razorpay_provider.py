"""Tests for the Razorpay-compatible provider adapter."""

import hashlib
import hmac

import pytest
import requests

from storefront.domain.exceptions import PaymentProviderError
from storefront.infrastructure.payments.razorpay_provider import RazorpayProvider


class _Response:

    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class _Session:
    """Records POSTs and answers with a canned response."""

    def __init__(self, response=None, error=None):
        self.auth = None
        self.calls = []
        self._response = response
        self._error = error

    def post(self, url, json=None, timeout=None):
        self.calls.append((url, json, timeout))
        if self._error:
            raise self._error
        return self._response


def _provider(session):
    return RazorpayProvider(
        key_id="rzp_test_key",
        key_secret="key-secret",
        webhook_secret="hook-secret",
        api_url="https://pay.example/v1/",
        timeout=5.0,
        session=session,
    )


def _hmac(secret, message):
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


class TestSignatures:

    def test_payment_signature(self):
        provider = _provider(_Session())
        good = _hmac("key-secret", b"order_1|pay_1")
        assert provider.verify_payment_signature("order_1", "pay_1", good)
        assert not provider.verify_payment_signature("order_1", "pay_2", good)
        assert not provider.verify_payment_signature("order_1", "pay_1", "")

    def test_webhook_signature_covers_raw_body(self):
        provider = _provider(_Session())
        body = b'{"event":"payment.captured"}'
        assert provider.verify_webhook_signature(body, _hmac("hook-secret", body))
        assert not provider.verify_webhook_signature(body + b" ", _hmac("hook-secret", body))

    def test_missing_secret_never_verifies(self):
        provider = RazorpayProvider("id", "", "", session=_Session())
        assert not provider.verify_payment_signature("o", "p", _hmac("", b"o|p"))


class TestHttp:

    def test_create_order_posts_minor_units_with_auth(self):
        session = _Session(_Response(200, {"id": "order_1", "amount": 109700}))
        provider = _provider(session)

        entity = provider.create_order(109700, "INR", "ORD-20240601-1234", {"order_id": "1"})

        assert entity["id"] == "order_1"
        url, body, timeout = session.calls[0]
        assert url == "https://pay.example/v1/orders"
        assert body == {
            "amount": 109700,
            "currency": "INR",
            "receipt": "ORD-20240601-1234",
            "notes": {"order_id": "1"},
        }
        assert timeout == 5.0
        assert session.auth == ("rzp_test_key", "key-secret")

    def test_refund_path(self):
        session = _Session(_Response(200, {"id": "rfnd_1"}))
        _provider(session).refund("pay_9", 500, {"reason": "return"})
        assert session.calls[0][0] == "https://pay.example/v1/payments/pay_9/refund"

    def test_error_description_surfaces(self):
        session = _Session(_Response(400, {"error": {"description": "The amount is invalid"}}))
        with pytest.raises(PaymentProviderError, match="The amount is invalid"):
            _provider(session).create_order(0, "INR", "r", {})

    def test_error_without_json_body(self):
        session = _Session(_Response(502, ValueError("not json")))
        with pytest.raises(PaymentProviderError, match="HTTP 502"):
            _provider(session).create_order(100, "INR", "r", {})

    def test_network_failure(self):
        session = _Session(error=requests.ConnectionError("connection refused"))
        with pytest.raises(PaymentProviderError, match="unreachable"):
            _provider(session).refund("pay_1", 100, {})
