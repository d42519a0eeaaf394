"""Application service: Payment Webhook use case.

The provider posts signed events asynchronously, possibly more than once
and in any order relative to the shopper's verify call. The signature is
checked against the raw body before anything in it is trusted.
"""

from __future__ import annotations

import json

import structlog

from storefront.application.dto import WebhookAckDTO
from storefront.application.side_effects import run_best_effort
from storefront.domain.exceptions import SignatureVerificationFailed, ValidationError
from storefront.domain.gateway.notifier import Notifier
from storefront.domain.gateway.payment_provider import PaymentProvider
from storefront.domain.model.order import PaymentStatus
from storefront.domain.service.payment_confirmation import PaymentConfirmationService

logger = structlog.get_logger(component="payments")

# event -> (entity the local order id lives on, payment outcome)
HANDLED_EVENTS: dict[str, tuple[str, PaymentStatus]] = {
    "payment.captured": ("payment", PaymentStatus.PAID),
    "payment.failed": ("payment", PaymentStatus.FAILED),
    "order.paid": ("order", PaymentStatus.PAID),
}


class PaymentWebhookHandler:

    def __init__(
        self,
        confirmation: PaymentConfirmationService,
        provider: PaymentProvider,
        notifier: Notifier,
    ) -> None:
        self._confirmation = confirmation
        self._provider = provider
        self._notifier = notifier

    def handle(self, raw_body: bytes, signature: str) -> WebhookAckDTO:
        if not self._provider.verify_webhook_signature(raw_body, signature):
            logger.warning("signature_verification_failed", source="webhook")
            raise SignatureVerificationFailed("Invalid webhook signature")

        try:
            body = json.loads(raw_body)
        except ValueError as exc:
            raise ValidationError("Webhook body is not valid JSON") from exc
        if not isinstance(body, dict):
            raise ValidationError("Webhook body must be a JSON object")

        event = body.get("event", "")
        if event not in HANDLED_EVENTS:
            logger.info("webhook_event_ignored", event=event)
            return WebhookAckDTO(event=event)

        entity_name, outcome = HANDLED_EVENTS[event]
        payload = body.get("payload", {})
        entity = payload.get(entity_name, {}).get("entity", {})
        raw_order_id = (entity.get("notes") or {}).get("order_id")
        if not raw_order_id:
            logger.error("webhook_missing_order_id", event=event)
            return WebhookAckDTO(event=event)
        try:
            order_id = int(raw_order_id)
        except (TypeError, ValueError):
            raise ValidationError(f"Webhook carries a malformed order id: {raw_order_id!r}") from None

        payment_entity = payload.get("payment", {}).get("entity", {})
        result = self._confirmation.confirm_payment(
            order_id,
            outcome,
            provider_payment_id=payment_entity.get("id"),
            provider_data=payment_entity or None,
        )
        if result.applied:
            logger.info("payment_confirmed", source="webhook", event=event, order_id=order_id)
            run_best_effort(
                lambda: self._notifier.payment_confirmed(result.order),
                "payment_confirmed_notify",
                order_id=order_id,
            )
        else:
            logger.info(
                "payment_confirmation_duplicate",
                source="webhook",
                event=event,
                order_id=order_id,
                payment_status=result.order.payment_status.value,
            )
        return WebhookAckDTO(event=event, order_id=order_id, applied=result.applied)
