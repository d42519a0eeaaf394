"""Application service: Verify Payment use case.

Entry point for the shopper's browser coming back from the provider's
checkout with a signed (order, payment) pair. Shares the confirmation
step with the webhook, so whichever arrives second is a no-op.
"""

from __future__ import annotations

from typing import Callable

import structlog

from storefront.application.dto import PaymentConfirmationDTO
from storefront.application.side_effects import run_best_effort
from storefront.domain.exceptions import SignatureVerificationFailed
from storefront.domain.gateway.notifier import Notifier
from storefront.domain.gateway.payment_provider import PaymentProvider
from storefront.domain.model.order import PaymentStatus
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.payment_confirmation import PaymentConfirmationService

logger = structlog.get_logger(component="payments")


class VerifyPaymentHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        confirmation: PaymentConfirmationService,
        provider: PaymentProvider,
        notifier: Notifier,
    ) -> None:
        self._uow_factory = uow_factory
        self._confirmation = confirmation
        self._provider = provider
        self._notifier = notifier

    def handle(
        self,
        order_id: int,
        provider_order_id: str,
        provider_payment_id: str,
        signature: str,
    ) -> PaymentConfirmationDTO:
        if not self._provider.verify_payment_signature(
            provider_order_id, provider_payment_id, signature
        ):
            logger.warning(
                "signature_verification_failed",
                source="verify",
                order_id=order_id,
                provider_order_id=provider_order_id,
            )
            raise SignatureVerificationFailed("Invalid payment signature")

        # A valid signature only proves something about the provider order we
        # opened for this order.
        with self._uow_factory() as uow:
            payment = uow.payments.get_by_order_id(order_id)
        if payment is None:
            logger.warning(
                "signature_verification_failed",
                source="verify",
                order_id=order_id,
                provider_order_id=provider_order_id,
                reason="no_payment_initiated",
            )
            raise SignatureVerificationFailed("No online payment was initiated for this order")
        if payment.provider_order_id != provider_order_id:
            logger.warning(
                "signature_verification_failed",
                source="verify",
                order_id=order_id,
                provider_order_id=provider_order_id,
                reason="provider_order_mismatch",
            )
            raise SignatureVerificationFailed("Payment does not belong to this order")

        result = self._confirmation.confirm_payment(
            order_id, PaymentStatus.PAID, provider_payment_id=provider_payment_id
        )
        if result.applied:
            logger.info("payment_confirmed", source="verify", order_id=order_id)
            run_best_effort(
                lambda: self._notifier.payment_confirmed(result.order),
                "payment_confirmed_notify",
                order_id=order_id,
            )
        else:
            logger.info(
                "payment_confirmation_duplicate",
                source="verify",
                order_id=order_id,
                payment_status=result.order.payment_status.value,
            )

        return PaymentConfirmationDTO(
            order_id=order_id,
            payment_status=result.order.payment_status.value,
            applied=result.applied,
        )
