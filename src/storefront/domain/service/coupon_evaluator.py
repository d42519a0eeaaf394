"""Domain service: Coupon Evaluator.

Validation and discount computation are pure reads. The usage counter is
bumped by a separate call, made only once an order that used the coupon
has been committed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from storefront.domain.clock import Clock, utc_now
from storefront.domain.exceptions import InvalidCoupon
from storefront.domain.model.coupon import normalize_code
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class CouponQuote:
    """What a valid coupon does to an order of a given value."""

    code: str
    discount: Money
    free_shipping: bool

    def final_amount(self, order_value: Money) -> Money:
        return order_value - self.discount


class CouponEvaluator:

    def __init__(self, uow_factory: Callable[[], UnitOfWork], clock: Clock = utc_now) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def validate(self, code: str, order_value: Money) -> CouponQuote:
        """Quote the discount for ``order_value`` or raise InvalidCoupon.

        Never changes the coupon.
        """
        normalized = normalize_code(code or "")
        if not normalized:
            raise InvalidCoupon(code, "Coupon code is required")

        with self._uow_factory() as uow:
            coupon = uow.coupons.get_by_code(normalized)

        if coupon is None:
            raise InvalidCoupon(normalized, "Invalid coupon code")
        reason = coupon.rejection_reason(order_value, self._clock())
        if reason is not None:
            raise InvalidCoupon(normalized, reason)

        return CouponQuote(
            code=coupon.code,
            discount=coupon.discount_for(order_value),
            free_shipping=coupon.waives_shipping,
        )

    def increment_usage(self, code: str) -> bool:
        """Count one confirmed use of ``code``. False if it is unknown or used up."""
        with self._uow_factory() as uow:
            counted = uow.coupons.increment_usage(normalize_code(code))
            uow.commit()
        return counted
