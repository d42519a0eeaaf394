"""Integration tests for the payment use cases (SQLite-backed)."""

import json

import pytest

from storefront.application.handle_payment_webhook import PaymentWebhookHandler
from storefront.application.initiate_payment import InitiatePaymentHandler
from storefront.application.refund_payment import RefundPaymentHandler
from storefront.application.verify_payment import VerifyPaymentHandler
from storefront.domain.exceptions import (
    EntityNotFoundError,
    PaymentMethodNotAllowed,
    PaymentPreconditionFailed,
    PaymentProviderError,
    SignatureVerificationFailed,
    ValidationError,
)
from storefront.domain.model.order import Order, OrderItem, PaymentMethod, PaymentStatus
from storefront.domain.model.payment import PaymentRecordStatus
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.service.payment_confirmation import PaymentConfirmationService
from tests.fakes import GOOD_SIGNATURE, FakePaymentProvider, RecordingNotifier
from tests.sql_support import sql_uow_factory


class _Payments:

    def __init__(self, method=PaymentMethod.RAZORPAY):
        self.uow = sql_uow_factory()
        self.provider = FakePaymentProvider()
        self.notifier = RecordingNotifier()
        self.confirmation = PaymentConfirmationService(self.uow)
        self.order_id = self._place(method)

    def _place(self, method):
        order = Order.place(
            user_id="u1",
            items=[OrderItem("V1", "Tee", Quantity(2), Money.of("499.00"))],
            shipping_charge=Money.of("99"),
            discount_amount=Money.zero(),
            payment_method=method,
            shipping_address_id="addr-1",
        )
        with self.uow() as uow:
            uow.orders.add(order)
            uow.commit()
        return order.id

    def initiate(self, user_id="u1"):
        return InitiatePaymentHandler(self.uow, self.provider).handle(self.order_id, user_id)

    def verify(self, provider_order_id, signature=GOOD_SIGNATURE, payment_id="pay_1"):
        handler = VerifyPaymentHandler(self.uow, self.confirmation, self.provider, self.notifier)
        return handler.handle(self.order_id, provider_order_id, payment_id, signature)

    def webhook(self, event, order_id=None, signature=GOOD_SIGNATURE, payment_id="pay_1"):
        notes = {"order_id": str(order_id or self.order_id)}
        body = {
            "event": event,
            "payload": {
                "payment": {"entity": {"id": payment_id, "status": "captured", "notes": notes}},
                "order": {"entity": {"id": "order_fake1", "notes": notes}},
            },
        }
        handler = PaymentWebhookHandler(self.confirmation, self.provider, self.notifier)
        return handler.handle(json.dumps(body).encode(), signature)

    def refund(self):
        return RefundPaymentHandler(self.uow, self.provider).handle(self.order_id)

    def state(self):
        with self.uow() as uow:
            return uow.orders.get_by_id(self.order_id), uow.payments.get_by_order_id(self.order_id)


# ── Initiate ─────────────────────────────────────────────────────────────────


class TestInitiatePayment:

    def test_opens_provider_order_in_minor_units(self):
        payments = _Payments()

        dto = payments.initiate()

        assert dto.amount_minor == 109700
        assert dto.currency == "INR"
        sent = payments.provider.orders[0]
        assert sent["receipt"] == dto.order_number
        assert sent["notes"]["order_id"] == str(payments.order_id)
        _, record = payments.state()
        assert record.provider_order_id == dto.provider_order_id
        assert record.status == PaymentRecordStatus.CREATED

    def test_cod_order_rejected(self):
        payments = _Payments(method=PaymentMethod.COD)
        with pytest.raises(PaymentMethodNotAllowed, match="COD"):
            payments.initiate()

    def test_someone_elses_order_rejected(self):
        payments = _Payments()
        with pytest.raises(ValidationError, match="Access denied"):
            payments.initiate(user_id="u2")

    def test_paid_order_rejected(self):
        payments = _Payments()
        dto = payments.initiate()
        payments.verify(dto.provider_order_id)
        with pytest.raises(PaymentPreconditionFailed, match="already paid"):
            payments.initiate()

    def test_provider_outage_leaves_no_record(self):
        payments = _Payments()
        payments.provider.fail_with = "gateway timeout"
        with pytest.raises(PaymentProviderError, match="gateway timeout"):
            payments.initiate()
        assert payments.state()[1] is None


# ── Verify + webhook ─────────────────────────────────────────────────────────


class TestConfirmation:

    def test_verify_marks_paid_and_notifies_once(self):
        payments = _Payments()
        dto = payments.initiate()

        first = payments.verify(dto.provider_order_id)
        second = payments.verify(dto.provider_order_id)

        assert first.applied and not second.applied
        assert second.payment_status == "paid"
        order, record = payments.state()
        assert order.payment_status == PaymentStatus.PAID
        assert record.status == PaymentRecordStatus.CAPTURED
        assert record.provider_payment_id == "pay_1"
        assert len(payments.notifier.confirmed) == 1

    def test_bad_signature_changes_nothing(self):
        payments = _Payments()
        dto = payments.initiate()

        with pytest.raises(SignatureVerificationFailed):
            payments.verify(dto.provider_order_id, signature="forged")

        order, _ = payments.state()
        assert order.payment_status == PaymentStatus.PENDING

    def test_signature_for_a_different_provider_order_rejected(self):
        payments = _Payments()
        payments.initiate()
        with pytest.raises(SignatureVerificationFailed, match="does not belong"):
            payments.verify("order_someone_else")

    @pytest.mark.parametrize("method", [PaymentMethod.COD, PaymentMethod.RAZORPAY])
    def test_order_without_initiated_payment_cannot_be_verified(self, method):
        payments = _Payments(method=method)

        with pytest.raises(SignatureVerificationFailed, match="No online payment"):
            payments.verify("order_of_another_purchase")

        order, record = payments.state()
        assert order.payment_status == PaymentStatus.PENDING
        assert record is None
        assert payments.notifier.confirmed == []

    def test_webhook_then_verify_applies_once(self):
        payments = _Payments()
        dto = payments.initiate()

        ack = payments.webhook("payment.captured")
        result = payments.verify(dto.provider_order_id)

        assert ack.applied and ack.order_id == payments.order_id
        assert not result.applied
        assert len(payments.notifier.confirmed) == 1

    def test_verify_then_duplicate_webhooks_apply_once(self):
        payments = _Payments()
        dto = payments.initiate()
        payments.verify(dto.provider_order_id)

        acks = [payments.webhook("order.paid"), payments.webhook("payment.captured")]

        assert [a.applied for a in acks] == [False, False]
        assert payments.state()[0].payment_status == PaymentStatus.PAID

    def test_failed_payment_can_be_retried(self):
        payments = _Payments()
        dto = payments.initiate()

        assert payments.webhook("payment.failed").applied
        assert payments.state()[0].payment_status == PaymentStatus.FAILED

        assert payments.verify(dto.provider_order_id, payment_id="pay_2").applied
        order, record = payments.state()
        assert order.payment_status == PaymentStatus.PAID
        assert record.provider_payment_id == "pay_2"

    def test_late_failure_never_overrides_paid(self):
        payments = _Payments()
        dto = payments.initiate()
        payments.verify(dto.provider_order_id)

        assert not payments.webhook("payment.failed").applied
        assert payments.state()[0].payment_status == PaymentStatus.PAID

    def test_webhook_with_bad_signature_rejected(self):
        payments = _Payments()
        with pytest.raises(SignatureVerificationFailed):
            payments.webhook("payment.captured", signature="forged")

    def test_unhandled_event_acknowledged(self):
        payments = _Payments()
        ack = payments.webhook("refund.processed")
        assert ack.event == "refund.processed" and not ack.applied

    def test_webhook_body_must_be_json(self):
        payments = _Payments()
        handler = PaymentWebhookHandler(payments.confirmation, payments.provider, payments.notifier)
        with pytest.raises(ValidationError, match="not valid JSON"):
            handler.handle(b"{not json", GOOD_SIGNATURE)

    def test_webhook_for_unknown_order(self):
        payments = _Payments()
        with pytest.raises(EntityNotFoundError):
            payments.webhook("payment.captured", order_id=999)


# ── Refund ───────────────────────────────────────────────────────────────────


class TestRefund:

    def test_refunds_captured_payment(self):
        payments = _Payments()
        dto = payments.initiate()
        payments.verify(dto.provider_order_id)

        result = payments.refund()

        assert result.payment_status == "refunded"
        assert payments.provider.refunds[0]["payment_id"] == "pay_1"
        assert payments.provider.refunds[0]["amount"] == 109700
        order, record = payments.state()
        assert order.payment_status == PaymentStatus.REFUNDED
        assert record.status == PaymentRecordStatus.REFUNDED

    def test_unpaid_order_cannot_be_refunded(self):
        payments = _Payments()
        payments.initiate()
        with pytest.raises(PaymentPreconditionFailed, match="expected paid"):
            payments.refund()
        assert payments.provider.refunds == []

    def test_refund_twice_rejected(self):
        payments = _Payments()
        dto = payments.initiate()
        payments.verify(dto.provider_order_id)
        payments.refund()
        with pytest.raises(PaymentPreconditionFailed):
            payments.refund()
        assert len(payments.provider.refunds) == 1
