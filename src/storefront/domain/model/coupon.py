"""Coupon — a discount rule keyed by a case-insensitive code."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from storefront.domain.model.value_objects import Money


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    FREE_SHIPPING = "free_shipping"


def normalize_code(code: str) -> str:
    return code.strip().upper()


@dataclass
class Coupon:
    code: str
    discount_type: DiscountType
    value: Decimal
    valid_from: datetime
    valid_until: datetime
    min_order_value: Money | None = None
    max_discount: Money | None = None
    usage_limit: int | None = None
    used_count: int = 0
    is_active: bool = True

    def __post_init__(self) -> None:
        self.code = normalize_code(self.code)

    def rejection_reason(self, order_value: Money, now: datetime) -> str | None:
        """Why this coupon cannot be used right now, or None if it can."""
        if not self.is_active:
            return "Coupon is not active"
        if now < self.valid_from:
            return "Coupon not yet valid"
        if now > self.valid_until:
            return "Coupon expired"
        if self.min_order_value is not None and order_value < self.min_order_value:
            return f"Minimum order value {self.min_order_value} required"
        if self.uses_exhausted:
            return "Coupon usage limit reached"
        return None

    def discount_for(self, subtotal: Money) -> Money:
        """Discount this coupon grants on ``subtotal``; never more than it."""
        if self.discount_type == DiscountType.PERCENTAGE:
            discount = subtotal.percent(self.value)
            if self.max_discount is not None:
                discount = discount.min(self.max_discount)
        elif self.discount_type == DiscountType.FIXED:
            discount = Money(self.value, subtotal.currency)
        else:
            discount = Money.zero(subtotal.currency)
        return discount.min(subtotal)

    @property
    def uses_exhausted(self) -> bool:
        return self.usage_limit is not None and self.used_count >= self.usage_limit

    @property
    def waives_shipping(self) -> bool:
        return self.discount_type == DiscountType.FREE_SHIPPING
