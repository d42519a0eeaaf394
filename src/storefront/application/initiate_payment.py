"""Application service: Initiate Payment use case.

Opens an order with the payment provider for a placed, unpaid, online
order and records our side of it.
"""

from __future__ import annotations

from typing import Callable

import structlog

from storefront.application.dto import PaymentInitiationDTO
from storefront.domain.exceptions import (
    EntityNotFoundError,
    PaymentMethodNotAllowed,
    PaymentPreconditionFailed,
    ValidationError,
)
from storefront.domain.gateway.payment_provider import PaymentProvider
from storefront.domain.model.order import PaymentMethod, PaymentStatus
from storefront.domain.model.payment import Payment
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(component="payments")


class InitiatePaymentHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        provider: PaymentProvider,
    ) -> None:
        self._uow_factory = uow_factory
        self._provider = provider

    def handle(self, order_id: int, user_id: str) -> PaymentInitiationDTO:
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        if order.user_id != user_id:
            raise ValidationError("Access denied")
        if order.payment_method == PaymentMethod.COD:
            raise PaymentMethodNotAllowed("Cannot initiate online payment for COD order")
        if order.payment_status != PaymentStatus.PENDING:
            raise PaymentPreconditionFailed(
                f"Order {order.order_number} payment is already {order.payment_status.value}"
            )

        amount_minor = order.final_amount.to_minor_units()
        provider_order = self._provider.create_order(
            amount_minor=amount_minor,
            currency=order.final_amount.currency,
            receipt=order.order_number,
            notes={"order_id": str(order.id), "order_number": order.order_number},
        )

        payment = Payment(
            id=None,
            order_id=order_id,
            provider_order_id=provider_order["id"],
            amount=order.final_amount,
            provider_data=provider_order,
        )
        with self._uow_factory() as uow:
            uow.payments.add(payment)
            uow.commit()

        logger.info(
            "payment_initiated",
            order_id=order_id,
            provider_order_id=payment.provider_order_id,
            amount_minor=amount_minor,
        )
        return PaymentInitiationDTO(
            payment_id=payment.id,  # type: ignore[arg-type]
            order_id=order_id,
            order_number=order.order_number,
            provider_order_id=payment.provider_order_id,
            amount_minor=amount_minor,
            currency=order.final_amount.currency,
        )
