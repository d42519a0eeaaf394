"""CLI commands for the checkout flow: reserve, inspect, release, place."""

from __future__ import annotations

import click

from storefront.application.complete_checkout import CompleteCheckoutHandler
from storefront.application.dto import CheckoutRequest, ReservationDTO
from storefront.application.initiate_checkout import InitiateCheckoutHandler
from storefront.application.release_reservation import ReleaseReservationHandler
from storefront.application.show_reservation import ShowReservationHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import (
    coupon_evaluator,
    notifier,
    reservation_manager,
    settings,
    uow_factory,
)
from storefront.infrastructure.cli.order_commands import display_order


def _display_reservation(dto: ReservationDTO) -> None:
    click.echo(f"Reservation {dto.reservation_id}  (user={dto.user_id})")
    click.echo(f"Expires:  {dto.expires_at}")
    for variant_id, quantity in dto.items:
        click.echo(f"  {variant_id:<20} {quantity:>5}")


@click.command("start")
@click.option("--user", required=True, help="Shopper ID.")
def checkout_start(user: str) -> None:
    """Hold stock for everything in the shopper's cart."""
    handler = InitiateCheckoutHandler(reservation_manager())

    try:
        dto = handler.handle(user)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_reservation(dto)


@click.command("show")
@click.option("--reservation", required=True, help="Reservation ID.")
def checkout_show(reservation: str) -> None:
    """Show a live reservation."""
    try:
        dto = ShowReservationHandler(reservation_manager()).handle(reservation)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_reservation(dto)


@click.command("release")
@click.option("--reservation", required=True, help="Reservation ID.")
def checkout_release(reservation: str) -> None:
    """Give a reservation's held stock back."""
    released = ReleaseReservationHandler(reservation_manager()).handle(reservation)
    if released:
        click.echo(f"Reservation {reservation} released")
    else:
        click.echo(f"Reservation {reservation} was already resolved")


@click.command("complete")
@click.option("--user", required=True, help="Shopper ID.")
@click.option("--address", required=True, help="Shipping address ID.")
@click.option("--method", "payment_method", required=True, help="Payment method, e.g. cod or razorpay.")
@click.option("--coupon", default=None, help="Coupon code.")
@click.option("--reservation", default=None, help="Reservation ID from 'checkout start'.")
def checkout_complete(
    user: str,
    address: str,
    payment_method: str,
    coupon: str | None,
    reservation: str | None,
) -> None:
    """Place an order from the shopper's cart."""
    s = settings()
    handler = CompleteCheckoutHandler(
        uow_factory=uow_factory(),
        reservations=reservation_manager(),
        coupons=coupon_evaluator(),
        policy=s.store_policy(),
        notifier=notifier(),
        side_effect_attempts=s.side_effect_attempts,
    )
    request = CheckoutRequest(
        user_id=user,
        address_id=address,
        payment_method=payment_method,
        coupon_code=coupon,
        reservation_id=reservation,
    )

    try:
        result = handler.handle(request)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if result.coupon_warning:
        click.echo(f"Coupon not applied: {result.coupon_warning}")
    display_order(result.order)
