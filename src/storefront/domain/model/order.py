"""Order aggregate — the durable result of a checkout.

The Order is an aggregate root that owns its line items. Items and the
monetary breakdown are fixed at placement; afterwards only the payment
status (and, outside checkout, the fulfillment status) moves.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import PaymentPreconditionFailed, ValidationError
from storefront.domain.model.value_objects import Money, Quantity


class PaymentMethod(Enum):
    RAZORPAY = "razorpay"
    COD = "cod"
    UPI = "upi"
    CARD = "card"
    NETBANKING = "netbanking"
    WALLET = "wallet"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class FulfillmentStatus(Enum):
    PLACED = "placed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


# Payment transitions a confirmation may apply, keyed by target state.
CONFIRMABLE_FROM: dict[PaymentStatus, tuple[PaymentStatus, ...]] = {
    PaymentStatus.PAID: (PaymentStatus.PENDING, PaymentStatus.FAILED),
    PaymentStatus.FAILED: (PaymentStatus.PENDING,),
}

CANCELLABLE = (FulfillmentStatus.PLACED, FulfillmentStatus.PROCESSING)


@dataclass
class OrderItem:
    """Captures the price of a variant at placement time."""

    variant_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at placement

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use ``Order.place()`` for new orders — it enforces the pricing rules.
    The ``__init__`` is intentionally simple so the repository can
    reconstitute persisted orders without re-validating.
    """

    id: int | None
    order_number: str
    user_id: str
    items: list[OrderItem]
    subtotal: Money
    shipping_charge: Money
    discount_amount: Money
    final_amount: Money
    payment_method: PaymentMethod
    shipping_address_id: str
    coupon_code: str | None = None
    reservation_id: str | None = None  # the hold this order consumed
    payment_status: PaymentStatus = PaymentStatus.PENDING
    fulfillment_status: FulfillmentStatus = FulfillmentStatus.PLACED
    placed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        user_id: str,
        items: list[OrderItem],
        shipping_charge: Money,
        discount_amount: Money,
        payment_method: PaymentMethod,
        shipping_address_id: str,
        coupon_code: str | None = None,
        reservation_id: str | None = None,
        now: datetime | None = None,
    ) -> Order:
        """Build a new order, enforcing the pricing invariants."""
        if not items:
            raise ValidationError("Order must contain at least one item")

        subtotal = Money.zero(items[0].unit_price.currency)
        for item in items:
            subtotal = subtotal + item.subtotal

        if discount_amount > subtotal:
            raise ValidationError(
                f"Discount {discount_amount} exceeds order subtotal {subtotal}"
            )

        placed_at = now or datetime.now(timezone.utc)
        return Order(
            id=None,
            order_number=generate_order_number(placed_at),
            user_id=user_id,
            items=list(items),
            subtotal=subtotal,
            shipping_charge=shipping_charge,
            discount_amount=discount_amount,
            final_amount=subtotal + shipping_charge - discount_amount,
            payment_method=payment_method,
            shipping_address_id=shipping_address_id,
            coupon_code=coupon_code,
            reservation_id=reservation_id,
            placed_at=placed_at,
        )

    # --- State transitions ----------------------------------------------------

    def mark_refunded(self) -> None:
        if self.payment_status != PaymentStatus.PAID:
            raise PaymentPreconditionFailed(
                f"Cannot refund order {self.order_number} - payment status is "
                f"{self.payment_status.value}, expected paid"
            )
        self.payment_status = PaymentStatus.REFUNDED

    def cancel(self) -> None:
        """Transition PLACED|PROCESSING -> CANCELLED.

        Stock restocking must happen in the same transaction (coordinated by
        the application handler).
        """
        if self.fulfillment_status == FulfillmentStatus.CANCELLED:
            raise ValidationError("Order is already cancelled")
        if self.fulfillment_status not in CANCELLABLE:
            raise ValidationError(
                f"Cannot cancel order in {self.fulfillment_status.value} status"
            )
        self.fulfillment_status = FulfillmentStatus.CANCELLED


def generate_order_number(at: datetime | None = None) -> str:
    """``ORD-YYYYMMDD-NNNN``: the placement date plus a random suffix."""
    at = at or datetime.now(timezone.utc)
    return f"ORD-{at:%Y%m%d}-{random.randint(1000, 9999)}"
