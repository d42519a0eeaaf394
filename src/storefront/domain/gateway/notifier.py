"""Port to the outbound notification collaborator."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class Notifier(ABC):

    @abstractmethod
    def order_placed(self, order: Order) -> None:
        """Tell the shopper their order was placed."""

    @abstractmethod
    def payment_confirmed(self, order: Order) -> None:
        """Tell the shopper their payment went through (or failed)."""
