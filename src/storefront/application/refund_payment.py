"""Application service: Refund Payment use case.

Only a paid order can be refunded; anything else is a rejected
precondition, not a silent no-op.
"""

from __future__ import annotations

from typing import Callable

import structlog

from storefront.application.dto import PaymentConfirmationDTO
from storefront.domain.exceptions import EntityNotFoundError, PaymentPreconditionFailed
from storefront.domain.gateway.payment_provider import PaymentProvider
from storefront.domain.model.order import PaymentStatus
from storefront.domain.model.payment import PaymentRecordStatus
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(component="payments")


class RefundPaymentHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        provider: PaymentProvider,
    ) -> None:
        self._uow_factory = uow_factory
        self._provider = provider

    def handle(self, order_id: int, reason: str | None = None) -> PaymentConfirmationDTO:
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
            payment = uow.payments.get_by_order_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        order.mark_refunded()  # raises unless paid
        if (
            payment is None
            or payment.status != PaymentRecordStatus.CAPTURED
            or not payment.provider_payment_id
        ):
            raise PaymentPreconditionFailed("Payment not captured, cannot refund")

        refund = self._provider.refund(
            payment.provider_payment_id,
            order.final_amount.to_minor_units(),
            {"order_id": str(order_id), "reason": reason or "Order cancellation/return"},
        )

        with self._uow_factory() as uow:
            if not uow.orders.transition_payment_status(
                order_id, (PaymentStatus.PAID,), PaymentStatus.REFUNDED
            ):
                logger.error("refund_state_conflict", order_id=order_id, refund_id=refund.get("id"))
                raise PaymentPreconditionFailed("Payment state changed while refunding")
            payment.status = PaymentRecordStatus.REFUNDED
            payment.provider_data = {**payment.provider_data, "refund": refund}
            uow.payments.save(payment)
            uow.commit()

        logger.info("payment_refunded", order_id=order_id, refund_id=refund.get("id"))
        return PaymentConfirmationDTO(
            order_id=order_id,
            payment_status=PaymentStatus.REFUNDED.value,
            applied=True,
        )
