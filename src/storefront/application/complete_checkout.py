"""Application service: Complete Checkout use case.

Turns the shopper's cart into a placed order:

1. Check the shipping address belongs to the shopper.
2. For cash on delivery, check the store allows COD at that postal code.
3. Snapshot the cart and price it (subtotal, shipping rule).
4. Apply the coupon if it validates; otherwise carry on without it and
   report why.
5. In ONE transaction: create the order and its items, convert held stock
   into a sale, clear the cart.
6. After commit: count the coupon use, retire the reservation lease,
   notify. None of these can undo the order.
"""

from __future__ import annotations

from typing import Callable

import structlog

from storefront.application.dto import CheckoutRequest, CheckoutResultDTO, to_order_dto
from storefront.application.side_effects import run_best_effort
from storefront.domain.clock import Clock, utc_now
from storefront.domain.exceptions import (
    AddressOwnershipViolation,
    CheckoutFailed,
    DomainException,
    EntityNotFoundError,
    InsufficientStock,
    InvalidCoupon,
    PaymentMethodNotAllowed,
    ReservationExpiredOrMissing,
    ValidationError,
)
from storefront.domain.gateway.notifier import Notifier
from storefront.domain.model.cart import Address, CartLine
from storefront.domain.model.order import Order, OrderItem, PaymentMethod
from storefront.domain.model.policy import StorePolicy
from storefront.domain.model.reservation import Reservation
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.coupon_evaluator import CouponEvaluator, CouponQuote
from storefront.domain.service.reservation_manager import ReservationManager, merge_lines

logger = structlog.get_logger(component="checkout")


class CompleteCheckoutHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        reservations: ReservationManager,
        coupons: CouponEvaluator,
        policy: StorePolicy,
        notifier: Notifier,
        side_effect_attempts: int = 3,
        clock: Clock = utc_now,
    ) -> None:
        self._uow_factory = uow_factory
        self._reservations = reservations
        self._coupons = coupons
        self._policy = policy
        self._notifier = notifier
        self._side_effect_attempts = side_effect_attempts
        self._clock = clock

    def handle(self, request: CheckoutRequest) -> CheckoutResultDTO:
        method = _parse_payment_method(request.payment_method)

        with self._uow_factory() as uow:
            address = uow.addresses.get_by_id(request.address_id)
            cart = uow.carts.list_lines(request.user_id)

        address = self._check_address(address, request)
        if method == PaymentMethod.COD and not self._policy.allows_cod(address.postal_code):
            raise PaymentMethodNotAllowed(
                "Cash on Delivery is not available for this location"
            )
        if not cart:
            raise ValidationError("Cart is empty")

        # --- Pricing (snapshot) -----------------------------------------------
        subtotal = Money.zero(cart[0].unit_price.currency)
        for line in cart:
            subtotal = subtotal + line.subtotal
        shipping = self._policy.shipping_charge_for(subtotal)

        quote, coupon_warning = self._quote_coupon(request, subtotal)
        discount = quote.discount if quote else Money.zero(subtotal.currency)
        if quote is not None and quote.free_shipping:
            shipping = Money.zero(subtotal.currency)

        reservation = self._live_reservation(request)

        order = Order.place(
            user_id=request.user_id,
            items=[
                OrderItem(
                    variant_id=line.variant_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,  # <-- price snapshot
                )
                for line in cart
            ],
            shipping_charge=shipping,
            discount_amount=discount,
            payment_method=method,
            shipping_address_id=address.id,
            coupon_code=quote.code if quote else None,
            reservation_id=reservation.reservation_id if reservation else None,
            now=self._clock(),
        )

        # --- The one atomic unit ----------------------------------------------
        try:
            with self._uow_factory() as uow:
                uow.orders.add(order)
                convert_stock(uow.stock, cart, reservation)
                if uow.carts.clear(request.user_id) != len(cart):
                    raise CheckoutFailed("Cart changed during checkout; please retry")
                uow.commit()
        except InsufficientStock as exc:
            logger.info(
                "checkout_insufficient_stock",
                user_id=request.user_id,
                variant_id=exc.variant_id,
            )
            raise
        except DomainException:
            raise
        except Exception as exc:
            logger.error("checkout_transaction_failed", user_id=request.user_id, error=str(exc))
            raise CheckoutFailed("Checkout could not be completed; please retry") from exc

        logger.info(
            "order_placed",
            order_id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            final_amount=str(order.final_amount),
            reservation_id=reservation.reservation_id if reservation else None,
        )

        # --- Post-commit, best effort -----------------------------------------
        context = {"order_number": order.order_number}
        if quote is not None:
            run_best_effort(
                lambda: self._count_coupon_use(quote.code, order),
                "coupon_usage_increment",
                coupon_code=quote.code,
                **context,
            )
        if reservation is not None:
            run_best_effort(
                lambda: self._reservations.mark_confirmed(reservation.reservation_id),
                "reservation_lease_retire",
                attempts=self._side_effect_attempts,
                reservation_id=reservation.reservation_id,
                **context,
            )
        run_best_effort(lambda: self._notifier.order_placed(order), "order_placed_notify", **context)

        return CheckoutResultDTO(order=to_order_dto(order), coupon_warning=coupon_warning)

    # --- Steps ----------------------------------------------------------------

    @staticmethod
    def _check_address(address: Address | None, request: CheckoutRequest) -> Address:
        if address is None:
            raise EntityNotFoundError("Shipping address not found")
        if address.user_id != request.user_id:
            logger.warning(
                "address_ownership_violation",
                user_id=request.user_id,
                address_id=request.address_id,
            )
            raise AddressOwnershipViolation("Invalid shipping address")
        return address

    def _quote_coupon(
        self, request: CheckoutRequest, subtotal: Money
    ) -> tuple[CouponQuote | None, str | None]:
        """A failing coupon never fails checkout; its reason is handed back."""
        if not request.coupon_code:
            return None, None
        try:
            return self._coupons.validate(request.coupon_code, subtotal), None
        except InvalidCoupon as exc:
            logger.info(
                "coupon_rejected_at_checkout",
                user_id=request.user_id,
                coupon_code=exc.code,
                reason=exc.reason,
            )
            return None, exc.reason

    def _count_coupon_use(self, code: str, order: Order) -> None:
        if not self._coupons.increment_usage(code):
            # Validated under the limit, counted over it. Reconciled out of band.
            logger.warning(
                "coupon_usage_limit_exceeded",
                coupon_code=code,
                order_number=order.order_number,
            )

    def _live_reservation(self, request: CheckoutRequest) -> Reservation | None:
        if not request.reservation_id:
            return None
        try:
            reservation = self._reservations.require(request.reservation_id)
        except ReservationExpiredOrMissing:
            logger.info(
                "reservation_lapsed_at_checkout",
                user_id=request.user_id,
                reservation_id=request.reservation_id,
            )
            return None
        if reservation.user_id != request.user_id:
            raise ValidationError("Reservation belongs to another shopper")
        return reservation


def convert_stock(
    ledger: StockLedger, cart: list[CartLine], reservation: Reservation | None
) -> None:
    """Sell every cart unit, using the reservation's holds where they exist.

    Units the lease does not cover are held first, which re-checks
    availability atomically. Held units the cart no longer wants are given
    back. Any shortfall raises InsufficientStock and the caller's
    transaction rolls back.
    """
    needed = {line.variant_id: line.quantity.value for line in merge_lines(cart)}
    leased = (
        {line.variant_id: line.quantity.value for line in reservation.lines}
        if reservation is not None
        else {}
    )

    for variant_id in sorted(needed.keys() | leased.keys()):
        want = needed.get(variant_id, 0)
        held = leased.get(variant_id, 0)
        if want < held:
            ledger.release(variant_id, held - want)
        if want == 0:
            continue
        if want > held and not ledger.reserve(variant_id, want - held):
            raise InsufficientStock(variant_id, want)
        if not ledger.deduct(variant_id, want):
            raise InsufficientStock(variant_id, want)


def _parse_payment_method(raw: str) -> PaymentMethod:
    try:
        return PaymentMethod(raw.strip().lower())
    except ValueError:
        raise PaymentMethodNotAllowed(f"Unknown payment method '{raw}'") from None
