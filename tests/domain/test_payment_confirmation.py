"""Unit tests for the PaymentConfirmationService."""

import pytest

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.order import Order, OrderItem, PaymentMethod, PaymentStatus
from storefront.domain.model.payment import Payment, PaymentRecordStatus
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.service.payment_confirmation import PaymentConfirmationService
from tests.fakes import FakeUnitOfWork


def _setup():
    uow = FakeUnitOfWork()
    order = Order.place(
        user_id="u1",
        items=[OrderItem("V1", "Tee", Quantity(2), Money.of("499"))],
        shipping_charge=Money.of("99"),
        discount_amount=Money.zero(),
        payment_method=PaymentMethod.RAZORPAY,
        shipping_address_id="addr-1",
    )
    uow.orders.add(order)
    uow.payments.add(Payment(None, order.id, "order_fake1", order.final_amount))
    return PaymentConfirmationService(uow), uow, order


class TestConfirmPayment:

    def test_first_delivery_applies(self):
        service, uow, order = _setup()

        result = service.confirm_payment(order.id, PaymentStatus.PAID, provider_payment_id="pay_1")

        assert result.applied
        assert uow.orders.get_by_id(order.id).payment_status == PaymentStatus.PAID
        payment = uow.payments.get_by_order_id(order.id)
        assert payment.status == PaymentRecordStatus.CAPTURED
        assert payment.provider_payment_id == "pay_1"

    def test_redelivery_is_a_no_op(self):
        service, uow, order = _setup()
        service.confirm_payment(order.id, PaymentStatus.PAID, provider_payment_id="pay_1")
        commits = uow.commits

        result = service.confirm_payment(order.id, PaymentStatus.PAID, provider_payment_id="pay_1")

        assert not result.applied
        assert uow.commits == commits

    def test_failed_then_paid_on_retry(self):
        service, uow, order = _setup()
        assert service.confirm_payment(order.id, PaymentStatus.FAILED).applied
        assert service.confirm_payment(order.id, PaymentStatus.PAID, "pay_2").applied
        assert uow.orders.get_by_id(order.id).payment_status == PaymentStatus.PAID

    def test_failure_never_overrides_paid(self):
        service, uow, order = _setup()
        service.confirm_payment(order.id, PaymentStatus.PAID)
        assert not service.confirm_payment(order.id, PaymentStatus.FAILED).applied
        assert uow.orders.get_by_id(order.id).payment_status == PaymentStatus.PAID

    def test_unknown_order(self):
        service, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            service.confirm_payment(999, PaymentStatus.PAID)

    def test_refunded_is_not_a_confirmation_outcome(self):
        service, _, order = _setup()
        with pytest.raises(ValidationError, match="Cannot confirm"):
            service.confirm_payment(order.id, PaymentStatus.REFUNDED)
