"""Application service: Validate Coupon use case (query).

Quotes a coupon against an order value. Never counts as a use.
"""

from __future__ import annotations

from storefront.application.dto import CouponQuoteDTO
from storefront.domain.model.value_objects import Money
from storefront.domain.service.coupon_evaluator import CouponEvaluator


class ValidateCouponHandler:

    def __init__(self, coupons: CouponEvaluator, currency: str) -> None:
        self._coupons = coupons
        self._currency = currency

    def handle(self, code: str, order_value: str) -> CouponQuoteDTO:
        value = Money.of(order_value, self._currency)
        quote = self._coupons.validate(code, value)
        return CouponQuoteDTO(
            code=quote.code,
            discount=str(quote.discount),
            free_shipping=quote.free_shipping,
            final_amount=str(quote.final_amount(value)),
        )
