"""Abstract repository for Coupon."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.coupon import Coupon


class CouponRepository(ABC):

    @abstractmethod
    def get_by_code(self, code: str) -> Coupon | None:
        """Return the coupon for a normalized code, or None."""

    @abstractmethod
    def add(self, coupon: Coupon) -> None:
        """Persist a new coupon."""

    @abstractmethod
    def increment_usage(self, code: str) -> bool:
        """Atomically bump ``used_count`` by one, never past ``usage_limit``.

        False when the coupon is unknown or already used up.
        """
