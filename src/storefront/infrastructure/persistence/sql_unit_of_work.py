"""SQLAlchemy-backed UnitOfWork: one session, one transaction."""

from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from storefront.domain.model.value_objects import DEFAULT_CURRENCY
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.sql_cart_repository import (
    SqlAddressRepository,
    SqlCartRepository,
)
from storefront.infrastructure.persistence.sql_coupon_repository import SqlCouponRepository
from storefront.infrastructure.persistence.sql_order_repository import SqlOrderRepository
from storefront.infrastructure.persistence.sql_payment_repository import SqlPaymentRepository
from storefront.infrastructure.persistence.sql_stock_ledger import SqlStockLedger


class SqlUnitOfWork(UnitOfWork):

    def __init__(self, session_factory: sessionmaker, currency: str = DEFAULT_CURRENCY) -> None:
        self._session_factory = session_factory
        self._currency = currency
        self._session: Session | None = None

    def __enter__(self) -> SqlUnitOfWork:
        self._session = self._session_factory()
        self.stock = SqlStockLedger(self._session)
        self.orders = SqlOrderRepository(self._session)
        self.payments = SqlPaymentRepository(self._session)
        self.coupons = SqlCouponRepository(self._session, self._currency)
        self.carts = SqlCartRepository(self._session)
        self.addresses = SqlAddressRepository(self._session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        finally:
            self._session.close()  # type: ignore[union-attr]
            self._session = None

    def commit(self) -> None:
        self._session.commit()  # type: ignore[union-attr]

    def rollback(self) -> None:
        self._session.rollback()  # type: ignore[union-attr]
