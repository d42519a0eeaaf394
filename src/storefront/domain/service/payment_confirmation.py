"""Domain service: Payment Confirmation.

The client-driven verify call and the provider webhook both end up here.
The transition is a conditional update on the order's payment status, so
the first delivery applies it and every later one finds the precondition
gone and does nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.order import CONFIRMABLE_FROM, Order, PaymentStatus
from storefront.domain.model.payment import PaymentRecordStatus
from storefront.domain.repository.unit_of_work import UnitOfWork

_RECORD_STATUS = {
    PaymentStatus.PAID: PaymentRecordStatus.CAPTURED,
    PaymentStatus.FAILED: PaymentRecordStatus.FAILED,
}


@dataclass(frozen=True)
class ConfirmationResult:
    order: Order
    applied: bool


class PaymentConfirmationService:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def confirm_payment(
        self,
        order_id: int,
        outcome: PaymentStatus,
        provider_payment_id: str | None = None,
        provider_data: dict | None = None,
    ) -> ConfirmationResult:
        """Move the order's payment to ``outcome`` if it has not moved yet.

        ``applied`` is False when a previous delivery already did the work
        (or the order is past the point where ``outcome`` makes sense).
        """
        if outcome not in CONFIRMABLE_FROM:
            raise ValidationError(f"Cannot confirm a payment as {outcome.value}")

        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            applied = uow.orders.transition_payment_status(
                order_id, CONFIRMABLE_FROM[outcome], outcome
            )
            if not applied:
                return ConfirmationResult(order=order, applied=False)

            payment = uow.payments.get_by_order_id(order_id)
            if payment is not None:
                payment.status = _RECORD_STATUS[outcome]
                if provider_payment_id:
                    payment.provider_payment_id = provider_payment_id
                if provider_data:
                    payment.provider_data = provider_data
                uow.payments.save(payment)
            uow.commit()

        order.payment_status = outcome
        return ConfirmationResult(order=order, applied=True)
