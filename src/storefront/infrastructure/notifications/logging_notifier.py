"""Notifier that records customer-facing events in the log.

Stands in until a mail/SMS collaborator is wired up.
"""

from __future__ import annotations

import structlog

from storefront.domain.gateway.notifier import Notifier
from storefront.domain.model.order import Order

logger = structlog.get_logger(component="notifier")


class LoggingNotifier(Notifier):

    def order_placed(self, order: Order) -> None:
        logger.info(
            "notify_order_placed",
            user_id=order.user_id,
            order_number=order.order_number,
            final_amount=str(order.final_amount),
        )

    def payment_confirmed(self, order: Order) -> None:
        logger.info(
            "notify_payment_status",
            user_id=order.user_id,
            order_number=order.order_number,
            payment_status=order.payment_status.value,
        )
