"""SQLAlchemy-backed implementation of PaymentRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.domain.model.payment import Payment, PaymentRecordStatus
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.payment_repository import PaymentRepository
from storefront.infrastructure.persistence.orm import PaymentRow


class SqlPaymentRepository(PaymentRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, payment: Payment) -> None:
        row = PaymentRow(
            order_id=payment.order_id,
            provider_order_id=payment.provider_order_id,
            provider_payment_id=payment.provider_payment_id,
            amount=payment.amount.amount,
            currency=payment.amount.currency,
            status=payment.status.value,
            provider_data=dict(payment.provider_data),
        )
        self._session.add(row)
        self._session.flush()
        payment.id = row.id

    def get_by_order_id(self, order_id: int) -> Payment | None:
        row = self._session.scalars(
            select(PaymentRow)
            .where(PaymentRow.order_id == order_id)
            .order_by(PaymentRow.id.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        ).first()
        if row is None:
            return None
        return Payment(
            id=row.id,
            order_id=row.order_id,
            provider_order_id=row.provider_order_id,
            amount=Money.of(row.amount, row.currency),
            status=PaymentRecordStatus(row.status),
            provider_payment_id=row.provider_payment_id,
            provider_data=dict(row.provider_data or {}),
        )

    def save(self, payment: Payment) -> None:
        row = self._session.get(PaymentRow, payment.id)
        if row is None:
            self.add(payment)
            return
        row.status = payment.status.value
        row.provider_payment_id = payment.provider_payment_id
        row.provider_data = dict(payment.provider_data)
