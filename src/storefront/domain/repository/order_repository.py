"""Abstract repository for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import FulfillmentStatus, Order, PaymentStatus


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a new order with its items and assign ``order.id``."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def exists_for_reservation(self, reservation_id: str) -> bool:
        """Whether an order has already consumed ``reservation_id``."""

    @abstractmethod
    def transition_payment_status(
        self,
        order_id: int,
        from_statuses: tuple[PaymentStatus, ...],
        to_status: PaymentStatus,
    ) -> bool:
        """Set the payment status iff it is currently one of ``from_statuses``.

        A single conditional update; returns whether a row changed.
        """

    @abstractmethod
    def transition_fulfillment_status(
        self,
        order_id: int,
        from_statuses: tuple[FulfillmentStatus, ...],
        to_status: FulfillmentStatus,
    ) -> bool:
        """Same contract as ``transition_payment_status``, for fulfillment."""
