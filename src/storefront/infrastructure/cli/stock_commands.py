"""CLI commands for variant stock."""

from __future__ import annotations

import click

from storefront.application.set_stock import SetStockHandler
from storefront.application.show_stock import ShowStockHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import uow_factory


@click.command("set")
@click.option("--variant", required=True, help="Variant ID.")
@click.option("--on-hand", required=True, type=int, help="Physical units on the shelf.")
def stock_set(variant: str, on_hand: int) -> None:
    """Set the on-hand count for a variant."""
    handler = SetStockHandler(uow_factory())

    try:
        record = handler.handle(variant_id=variant, on_hand=on_hand)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Stock for '{variant}' set to {record.on_hand} "
        f"(held={record.held}, available={record.available})"
    )


@click.command("show")
def stock_show() -> None:
    """Show stock levels for every variant."""
    lines = ShowStockHandler(uow_factory()).handle()

    if not lines:
        click.echo("No stock records found.")
        return

    click.echo(f"{'Variant':<20} {'On hand':>8} {'Held':>8} {'Available':>10}")
    click.echo("-" * 49)
    for line in lines:
        click.echo(f"{line.variant_id:<20} {line.on_hand:>8} {line.held:>8} {line.available:>10}")
