"""SQLAlchemy-backed implementation of CouponRepository."""

from __future__ import annotations

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from storefront.domain.model.coupon import Coupon, DiscountType, normalize_code
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money
from storefront.domain.repository.coupon_repository import CouponRepository
from storefront.infrastructure.persistence.orm import CouponRow, as_utc


class SqlCouponRepository(CouponRepository):

    def __init__(self, session: Session, currency: str = DEFAULT_CURRENCY) -> None:
        self._session = session
        self._currency = currency

    def get_by_code(self, code: str) -> Coupon | None:
        row = self._session.get(CouponRow, normalize_code(code), populate_existing=True)
        return self._to_domain(row) if row else None

    def add(self, coupon: Coupon) -> None:
        self._session.add(
            CouponRow(
                code=coupon.code,
                discount_type=coupon.discount_type.value,
                value=coupon.value,
                valid_from=coupon.valid_from,
                valid_until=coupon.valid_until,
                min_order_value=coupon.min_order_value.amount if coupon.min_order_value else None,
                max_discount=coupon.max_discount.amount if coupon.max_discount else None,
                usage_limit=coupon.usage_limit,
                used_count=coupon.used_count,
                is_active=coupon.is_active,
            )
        )
        self._session.flush()

    def increment_usage(self, code: str) -> bool:
        result = self._session.execute(
            update(CouponRow)
            .where(
                CouponRow.code == normalize_code(code),
                or_(
                    CouponRow.usage_limit.is_(None),
                    CouponRow.used_count < CouponRow.usage_limit,
                ),
            )
            .values(used_count=CouponRow.used_count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def _to_domain(self, row: CouponRow) -> Coupon:
        return Coupon(
            code=row.code,
            discount_type=DiscountType(row.discount_type),
            value=row.value,
            valid_from=as_utc(row.valid_from),
            valid_until=as_utc(row.valid_until),
            min_order_value=(
                Money.of(row.min_order_value, self._currency)
                if row.min_order_value is not None
                else None
            ),
            max_discount=(
                Money.of(row.max_discount, self._currency)
                if row.max_discount is not None
                else None
            ),
            usage_limit=row.usage_limit,
            used_count=row.used_count,
            is_active=row.is_active,
        )
