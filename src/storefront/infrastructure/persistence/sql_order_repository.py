"""SQLAlchemy-backed implementation of OrderRepository."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.domain.exceptions import CheckoutFailed
from storefront.domain.model.order import (
    FulfillmentStatus,
    Order,
    OrderItem,
    PaymentMethod,
    PaymentStatus,
    generate_order_number,
)
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.orm import OrderItemRow, OrderRow, as_utc

# Draws of a fresh order number before giving up on a crowded day.
_ORDER_NUMBER_ATTEMPTS = 5


class SqlOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> None:
        for _ in range(_ORDER_NUMBER_ATTEMPTS):
            if not self._number_taken(order.order_number):
                break
            order.order_number = generate_order_number(order.placed_at)
        else:
            raise CheckoutFailed("Could not allocate an order number; please retry")

        row = self._to_row(order)
        self._session.add(row)
        self._session.flush()
        order.id = row.id

    def get_by_id(self, order_id: int) -> Order | None:
        row = self._session.get(OrderRow, order_id, populate_existing=True)
        return self._to_domain(row) if row else None

    def exists_for_reservation(self, reservation_id: str) -> bool:
        return (
            self._session.execute(
                select(OrderRow.id).where(OrderRow.reservation_id == reservation_id)
            ).first()
            is not None
        )

    def transition_payment_status(
        self,
        order_id: int,
        from_statuses: tuple[PaymentStatus, ...],
        to_status: PaymentStatus,
    ) -> bool:
        result = self._session.execute(
            update(OrderRow)
            .where(
                OrderRow.id == order_id,
                OrderRow.payment_status.in_([s.value for s in from_statuses]),
            )
            .values(payment_status=to_status.value)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def transition_fulfillment_status(
        self,
        order_id: int,
        from_statuses: tuple[FulfillmentStatus, ...],
        to_status: FulfillmentStatus,
    ) -> bool:
        result = self._session.execute(
            update(OrderRow)
            .where(
                OrderRow.id == order_id,
                OrderRow.fulfillment_status.in_([s.value for s in from_statuses]),
            )
            .values(fulfillment_status=to_status.value)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    # --- Mapping --------------------------------------------------------------

    def _number_taken(self, order_number: str) -> bool:
        return (
            self._session.execute(
                select(OrderRow.id).where(OrderRow.order_number == order_number)
            ).first()
            is not None
        )

    @staticmethod
    def _to_row(order: Order) -> OrderRow:
        return OrderRow(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            currency=order.final_amount.currency,
            subtotal=order.subtotal.amount,
            shipping_charge=order.shipping_charge.amount,
            discount_amount=order.discount_amount.amount,
            final_amount=order.final_amount.amount,
            payment_method=order.payment_method.value,
            payment_status=order.payment_status.value,
            fulfillment_status=order.fulfillment_status.value,
            shipping_address_id=order.shipping_address_id,
            coupon_code=order.coupon_code,
            reservation_id=order.reservation_id,
            placed_at=order.placed_at,
            shipped_at=order.shipped_at,
            delivered_at=order.delivered_at,
            items=[
                OrderItemRow(
                    variant_id=item.variant_id,
                    product_name=item.product_name,
                    quantity=item.quantity.value,
                    unit_price=item.unit_price.amount,
                )
                for item in order.items
            ],
        )

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        currency = row.currency
        return Order(
            id=row.id,
            order_number=row.order_number,
            user_id=row.user_id,
            items=[
                OrderItem(
                    variant_id=item.variant_id,
                    product_name=item.product_name,
                    quantity=Quantity(item.quantity),
                    unit_price=Money.of(item.unit_price, currency),
                )
                for item in row.items
            ],
            subtotal=Money.of(row.subtotal, currency),
            shipping_charge=Money.of(row.shipping_charge, currency),
            discount_amount=Money.of(row.discount_amount, currency),
            final_amount=Money.of(row.final_amount, currency),
            payment_method=PaymentMethod(row.payment_method),
            shipping_address_id=row.shipping_address_id,
            coupon_code=row.coupon_code,
            reservation_id=row.reservation_id,
            payment_status=PaymentStatus(row.payment_status),
            fulfillment_status=FulfillmentStatus(row.fulfillment_status),
            placed_at=as_utc(row.placed_at),
            shipped_at=as_utc(row.shipped_at),
            delivered_at=as_utc(row.delivered_at),
        )
