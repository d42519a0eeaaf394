"""CLI commands for shopper carts."""

from __future__ import annotations

import click

from storefront.application.dto import CartLineDTO
from storefront.application.manage_cart import AddToCartHandler, ShowCartHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import settings, uow_factory


def _display_cart(lines: list[CartLineDTO]) -> None:
    if not lines:
        click.echo("Cart is empty.")
        return
    click.echo(f"  {'Variant':<14} {'Product':<20} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*67}")
    for line in lines:
        click.echo(
            f"  {line.variant_id:<14} {line.product_name:<20} {line.quantity:>5} "
            f"{line.unit_price:>12} {line.subtotal:>12}"
        )


@click.command("add")
@click.option("--user", required=True, help="Shopper ID.")
@click.option("--variant", required=True, help="Variant ID.")
@click.option("--name", "product_name", required=True, help="Product name.")
@click.option("--quantity", required=True, type=int, help="Units wanted.")
@click.option("--price", required=True, help="Unit price, e.g. 499.00.")
def cart_add(user: str, variant: str, product_name: str, quantity: int, price: str) -> None:
    """Put a variant in the shopper's cart (replaces an existing line)."""
    handler = AddToCartHandler(uow_factory(), settings().currency)

    try:
        lines = handler.handle(user, variant, product_name, quantity, price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(lines)


@click.command("show")
@click.option("--user", required=True, help="Shopper ID.")
def cart_show(user: str) -> None:
    """Show the shopper's cart."""
    _display_cart(ShowCartHandler(uow_factory()).handle(user))
