"""Abstract Unit of Work — one relational transaction.

Everything written through a unit's repositories commits together on
``commit()``; leaving the ``with`` block without committing rolls back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.repository.cart_repository import AddressRepository, CartRepository
from storefront.domain.repository.coupon_repository import CouponRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.payment_repository import PaymentRepository
from storefront.domain.repository.stock_ledger import StockLedger


class UnitOfWork(ABC):
    stock: StockLedger
    orders: OrderRepository
    payments: PaymentRepository
    coupons: CouponRepository
    carts: CartRepository
    addresses: AddressRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every write in this unit durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted writes. Harmless after ``commit()``."""
