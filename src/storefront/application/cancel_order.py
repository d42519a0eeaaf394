"""Application service: Cancel Order use case.

Cancelling a placed order puts its units back on the shelf. The status
change and the restock commit together, and only the caller whose
conditional status update lands gets to restock.
"""

from __future__ import annotations

from typing import Callable

import structlog

from storefront.application.dto import OrderDTO, to_order_dto
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.order import CANCELLABLE, FulfillmentStatus
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(component="orders")


class CancelOrderHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: int, user_id: str) -> OrderDTO:
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            if order.user_id != user_id:
                raise ValidationError("Access denied")

            order.cancel()
            if not uow.orders.transition_fulfillment_status(
                order_id, CANCELLABLE, FulfillmentStatus.CANCELLED
            ):
                logger.info("order_cancel_lost_race", order_id=order_id)
                raise ValidationError(f"Order #{order_id} can no longer be cancelled")
            for item in order.items:
                uow.stock.restock(item.variant_id, item.quantity.value)
            uow.commit()

        logger.info("order_cancelled", order_id=order_id, order_number=order.order_number)
        return to_order_dto(order)
