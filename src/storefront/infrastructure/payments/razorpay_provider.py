"""Razorpay-compatible PaymentProvider over its REST API.

Amounts cross the wire in minor units (paise). Signatures are
HMAC-SHA256 hex digests:

- checkout callback: ``HMAC(key_secret, "<order_id>|<payment_id>")``
- webhook delivery:  ``HMAC(webhook_secret, <raw request body>)``
"""

from __future__ import annotations

import hashlib
import hmac

import requests
import structlog

from storefront.domain.exceptions import PaymentProviderError
from storefront.domain.gateway.payment_provider import PaymentProvider

logger = structlog.get_logger(component="payment_provider")


class RazorpayProvider(PaymentProvider):

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        webhook_secret: str,
        api_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._key_secret = key_secret
        self._webhook_secret = webhook_secret
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._http = session or requests.Session()
        self._http.auth = (key_id, key_secret)

    # --- PaymentProvider interface --------------------------------------------

    def create_order(self, amount_minor: int, currency: str, receipt: str, notes: dict) -> dict:
        return self._post(
            "/orders",
            {"amount": amount_minor, "currency": currency, "receipt": receipt, "notes": notes},
        )

    def verify_payment_signature(
        self, provider_order_id: str, provider_payment_id: str, signature: str
    ) -> bool:
        return _matches(
            self._key_secret,
            f"{provider_order_id}|{provider_payment_id}".encode(),
            signature,
        )

    def verify_webhook_signature(self, raw_body: bytes, signature: str) -> bool:
        return _matches(self._webhook_secret, raw_body, signature)

    def refund(self, provider_payment_id: str, amount_minor: int, notes: dict) -> dict:
        return self._post(
            f"/payments/{provider_payment_id}/refund",
            {"amount": amount_minor, "notes": notes},
        )

    # --- HTTP -----------------------------------------------------------------

    def _post(self, path: str, body: dict) -> dict:
        url = f"{self._api_url}{path}"
        try:
            response = self._http.post(url, json=body, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.error("provider_unreachable", path=path, error=str(exc))
            raise PaymentProviderError(f"Payment provider unreachable: {exc}") from exc

        if response.status_code >= 400:
            try:
                description = response.json().get("error", {}).get("description")
            except ValueError:
                description = None
            logger.error("provider_request_failed", path=path, status=response.status_code)
            raise PaymentProviderError(
                description or f"Payment provider returned HTTP {response.status_code}"
            )
        return response.json()


def sign(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def _matches(secret: str, message: bytes, signature: str) -> bool:
    if not secret:
        logger.error("signing_secret_missing")
        return False
    return hmac.compare_digest(sign(secret, message), signature or "")
