"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.dto import OrderDTO
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import uow_factory


def display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id} {dto.order_number}  (payment={dto.payment_status}, status={dto.fulfillment_status})")
    click.echo(f"Customer: {dto.user_id}")
    click.echo(f"Placed:   {dto.placed_at}")
    click.echo(f"Method:   {dto.payment_method}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*52}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>12} {item.subtotal:>12}"
        )
    click.echo(f"  {'-'*52}")
    click.echo(f"  {'Subtotal':<27} {dto.subtotal:>25}")
    click.echo(f"  {'Shipping':<27} {dto.shipping_charge:>25}")
    discount_label = f"Discount ({dto.coupon_code})" if dto.coupon_code else "Discount"
    click.echo(f"  {discount_label:<27} {dto.discount_amount:>25}")
    click.echo(f"  {'Order Total':<27} {dto.final_amount:>25}")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(uow_factory())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order(dto)


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.option("--user", required=True, help="Shopper ID that owns the order.")
def order_cancel(order_id: int, user: str) -> None:
    """Cancel a placed order and put its stock back."""
    handler = CancelOrderHandler(uow_factory())

    try:
        dto = handler.handle(order_id, user)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} cancelled  (status={dto.fulfillment_status})")
