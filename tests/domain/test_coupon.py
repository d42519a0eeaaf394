"""Unit tests for Coupon rules."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.domain.model.coupon import Coupon, DiscountType
from storefront.domain.model.value_objects import Money

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _coupon(**overrides) -> Coupon:
    fields = dict(
        code=" save10 ",
        discount_type=DiscountType.PERCENTAGE,
        value=Decimal("10"),
        valid_from=NOW - timedelta(days=1),
        valid_until=NOW + timedelta(days=1),
    )
    fields.update(overrides)
    return Coupon(**fields)


class TestRejectionReason:

    def test_code_is_normalized(self):
        assert _coupon().code == "SAVE10"

    def test_valid_coupon_has_no_reason(self):
        assert _coupon().rejection_reason(Money.of("500"), NOW) is None

    @pytest.mark.parametrize(
        "overrides, reason",
        [
            ({"is_active": False}, "Coupon is not active"),
            ({"valid_from": NOW + timedelta(hours=1)}, "Coupon not yet valid"),
            ({"valid_until": NOW - timedelta(hours=1)}, "Coupon expired"),
            ({"min_order_value": Money.of("1000")}, "Minimum order value INR 1000.00 required"),
            ({"usage_limit": 5, "used_count": 5}, "Coupon usage limit reached"),
        ],
    )
    def test_reasons(self, overrides, reason):
        assert _coupon(**overrides).rejection_reason(Money.of("500"), NOW) == reason

    def test_window_bounds_are_inclusive(self):
        coupon = _coupon(valid_from=NOW, valid_until=NOW)
        assert coupon.rejection_reason(Money.of("500"), NOW) is None


class TestDiscount:

    def test_percentage(self):
        assert _coupon().discount_for(Money.of("1598")) == Money.of("159.80")

    def test_percentage_capped_by_max_discount(self):
        coupon = _coupon(value=Decimal("50"), max_discount=Money.of("200"))
        assert coupon.discount_for(Money.of("1000")) == Money.of("200")

    def test_fixed_never_exceeds_subtotal(self):
        coupon = _coupon(discount_type=DiscountType.FIXED, value=Decimal("300"))
        assert coupon.discount_for(Money.of("1000")) == Money.of("300")
        assert coupon.discount_for(Money.of("120")) == Money.of("120")

    def test_free_shipping(self):
        coupon = _coupon(discount_type=DiscountType.FREE_SHIPPING, value=Decimal("0"))
        assert coupon.discount_for(Money.of("500")) == Money.zero()
        assert coupon.waives_shipping
