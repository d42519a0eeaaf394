"""Application service: Create Coupon use case."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.coupon import Coupon, DiscountType
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork


class CreateCouponHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork], currency: str) -> None:
        self._uow_factory = uow_factory
        self._currency = currency

    def handle(
        self,
        code: str,
        discount_type: str,
        value: str,
        valid_from: datetime,
        valid_until: datetime,
        min_order_value: str | None = None,
        max_discount: str | None = None,
        usage_limit: int | None = None,
    ) -> Coupon:
        try:
            kind = DiscountType(discount_type.strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown discount type '{discount_type}'") from None
        try:
            amount = Decimal(value)
        except InvalidOperation:
            raise ValidationError(f"Invalid discount value: {value!r}") from None
        if amount < 0 or (kind == DiscountType.PERCENTAGE and amount > 100):
            raise ValidationError(f"Discount value {value} out of range for {kind.value}")
        if valid_until <= valid_from:
            raise ValidationError("Coupon validity window is empty")

        coupon = Coupon(
            code=code,
            discount_type=kind,
            value=amount,
            valid_from=valid_from,
            valid_until=valid_until,
            min_order_value=Money.of(min_order_value, self._currency) if min_order_value else None,
            max_discount=Money.of(max_discount, self._currency) if max_discount else None,
            usage_limit=usage_limit,
        )
        if not coupon.code:
            raise ValidationError("Coupon code is required")
        with self._uow_factory() as uow:
            if uow.coupons.get_by_code(coupon.code) is not None:
                raise ValidationError(f"Coupon '{coupon.code}' already exists")
            uow.coupons.add(coupon)
            uow.commit()
        return coupon
