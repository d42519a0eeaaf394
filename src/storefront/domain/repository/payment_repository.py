"""Abstract repository for Payment records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.payment import Payment


class PaymentRepository(ABC):

    @abstractmethod
    def add(self, payment: Payment) -> None:
        """Persist a new payment record and assign ``payment.id``."""

    @abstractmethod
    def get_by_order_id(self, order_id: int) -> Payment | None:
        """Return the most recent payment record for an order, or None."""

    @abstractmethod
    def save(self, payment: Payment) -> None:
        """Persist an updated payment record."""
