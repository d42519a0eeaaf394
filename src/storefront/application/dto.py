"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.order import Order


@dataclass(frozen=True)
class CheckoutRequest:
    """Input: everything a shopper submits to place an order."""

    user_id: str
    address_id: str
    payment_method: str
    coupon_code: str | None = None
    reservation_id: str | None = None


@dataclass(frozen=True)
class ReservationDTO:
    reservation_id: str
    user_id: str
    items: list[tuple[str, int]]  # (variant_id, quantity)
    expires_at: str


@dataclass(frozen=True)
class CouponQuoteDTO:
    code: str
    discount: str
    free_shipping: bool
    final_amount: str


@dataclass(frozen=True)
class OrderItemDTO:
    variant_id: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "INR 499.00"
    subtotal: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    order_number: str
    user_id: str
    items: list[OrderItemDTO]
    subtotal: str
    shipping_charge: str
    discount_amount: str
    final_amount: str
    payment_method: str
    payment_status: str
    fulfillment_status: str
    coupon_code: str | None
    placed_at: str


@dataclass(frozen=True)
class CheckoutResultDTO:
    order: OrderDTO
    coupon_warning: str | None = None


@dataclass(frozen=True)
class PaymentInitiationDTO:
    payment_id: int
    order_id: int
    order_number: str
    provider_order_id: str
    amount_minor: int
    currency: str


@dataclass(frozen=True)
class PaymentConfirmationDTO:
    order_id: int
    payment_status: str
    applied: bool


@dataclass(frozen=True)
class WebhookAckDTO:
    event: str
    order_id: int | None = None
    applied: bool = False


@dataclass(frozen=True)
class CartLineDTO:
    variant_id: str
    product_name: str
    quantity: int
    unit_price: str
    subtotal: str


# --- Mapping ------------------------------------------------------------------


def to_order_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        user_id=order.user_id,
        items=[
            OrderItemDTO(
                variant_id=item.variant_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                subtotal=str(item.subtotal),
            )
            for item in order.items
        ],
        subtotal=str(order.subtotal),
        shipping_charge=str(order.shipping_charge),
        discount_amount=str(order.discount_amount),
        final_amount=str(order.final_amount),
        payment_method=order.payment_method.value,
        payment_status=order.payment_status.value,
        fulfillment_status=order.fulfillment_status.value,
        coupon_code=order.coupon_code,
        placed_at=order.placed_at.strftime("%Y-%m-%d %H:%M UTC"),
    )
