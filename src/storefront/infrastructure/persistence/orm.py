"""Relational tables for everything checkout keeps durably."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class VariantStockRow(Base):
    __tablename__ = "variant_stock"
    __table_args__ = (
        CheckConstraint("held >= 0", name="ck_variant_stock_held_non_negative"),
        CheckConstraint("held <= on_hand", name="ck_variant_stock_held_within_on_hand"),
    )

    variant_id = Column(String(64), primary_key=True)
    on_hand = Column(Integer, nullable=False, default=0)
    held = Column(Integer, nullable=False, default=0)


class OrderRow(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_number = Column(String(32), nullable=False, unique=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    currency = Column(String(3), nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)
    shipping_charge = Column(Numeric(12, 2), nullable=False)
    discount_amount = Column(Numeric(12, 2), nullable=False)
    final_amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(20), nullable=False)
    payment_status = Column(String(20), nullable=False, index=True)
    fulfillment_status = Column(String(20), nullable=False)
    shipping_address_id = Column(String(64), nullable=False)
    coupon_code = Column(String(50))
    reservation_id = Column(String(64), unique=True)
    placed_at = Column(DateTime(timezone=True), nullable=False)
    shipped_at = Column(DateTime(timezone=True))
    delivered_at = Column(DateTime(timezone=True))

    items = relationship(
        "OrderItemRow",
        cascade="all, delete-orphan",
        order_by="OrderItemRow.id",
        lazy="selectin",
    )


class OrderItemRow(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    variant_id = Column(String(64), nullable=False)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)


class CouponRow(Base):
    __tablename__ = "coupons"

    code = Column(String(50), primary_key=True)
    discount_type = Column(String(20), nullable=False)
    value = Column(Numeric(12, 2), nullable=False)
    valid_from = Column(DateTime(timezone=True), nullable=False)
    valid_until = Column(DateTime(timezone=True), nullable=False)
    min_order_value = Column(Numeric(12, 2))
    max_discount = Column(Numeric(12, 2))
    usage_limit = Column(Integer)
    used_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)


class PaymentRow(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    provider_order_id = Column(String(64), nullable=False, index=True)
    provider_payment_id = Column(String(64))
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    status = Column(String(20), nullable=False)
    provider_data = Column(JSON, nullable=False, default=dict)


class CartItemRow(Base):
    __tablename__ = "cart_items"
    __table_args__ = (UniqueConstraint("user_id", "variant_id", name="uq_cart_items_user_variant"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    variant_id = Column(String(64), nullable=False)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)


class AddressRow(Base):
    __tablename__ = "addresses"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    postal_code = Column(String(12), nullable=False)


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands timestamps back naive; everything here is UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
