"""CLI commands for shipping addresses."""

from __future__ import annotations

import click

from storefront.application.add_address import AddAddressHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import uow_factory


@click.command("add")
@click.option("--id", "address_id", required=True, help="Address ID.")
@click.option("--user", required=True, help="Owning shopper ID.")
@click.option("--postal-code", required=True, help="Postal code (pincode).")
def address_add(address_id: str, user: str, postal_code: str) -> None:
    """Register a shipping address for a shopper."""
    try:
        address = AddAddressHandler(uow_factory()).handle(address_id, user, postal_code)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Address '{address.id}' added for {address.user_id} ({address.postal_code})")
