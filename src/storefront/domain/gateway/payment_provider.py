"""Port to the external payment provider."""

from __future__ import annotations

from abc import ABC, abstractmethod


class PaymentProvider(ABC):

    @abstractmethod
    def create_order(self, amount_minor: int, currency: str, receipt: str, notes: dict) -> dict:
        """Open a provider-side order. Returns the provider's order entity."""

    @abstractmethod
    def verify_payment_signature(
        self, provider_order_id: str, provider_payment_id: str, signature: str
    ) -> bool:
        """Check the signature the client got back from the checkout widget."""

    @abstractmethod
    def verify_webhook_signature(self, raw_body: bytes, signature: str) -> bool:
        """Check the signature header of a webhook delivery."""

    @abstractmethod
    def refund(self, provider_payment_id: str, amount_minor: int, notes: dict) -> dict:
        """Refund a captured payment. Returns the provider's refund entity."""
