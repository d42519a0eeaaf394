import click

from storefront.infrastructure.bootstrap import init_schema, settings
from storefront.infrastructure.cli.address_commands import address_add
from storefront.infrastructure.cli.cart_commands import cart_add, cart_show
from storefront.infrastructure.cli.checkout_commands import (
    checkout_complete,
    checkout_release,
    checkout_show,
    checkout_start,
)
from storefront.infrastructure.cli.coupon_commands import coupon_create, coupon_validate
from storefront.infrastructure.cli.order_commands import order_cancel, order_show
from storefront.infrastructure.cli.payment_commands import (
    payment_initiate,
    payment_refund,
    payment_verify,
    payment_webhook,
)
from storefront.infrastructure.cli.stock_commands import stock_set, stock_show
from storefront.infrastructure.logging_setup import configure_logging


@click.group()
def cli() -> None:
    """Storefront — inventory reservation and checkout"""
    s = settings()
    configure_logging(s.log_level, s.log_json)


@cli.command("init-db")
def init_db() -> None:
    """Create the database tables."""
    init_schema()
    click.echo("Schema ready.")


@cli.group()
def stock() -> None:
    """Manage variant stock."""


@cli.group()
def cart() -> None:
    """Manage a shopper's cart."""


@cli.group()
def address() -> None:
    """Manage shipping addresses."""


@cli.group()
def coupon() -> None:
    """Manage coupons."""


@cli.group()
def checkout() -> None:
    """Reserve stock and place orders."""


@cli.group()
def order() -> None:
    """Inspect and cancel orders."""


@cli.group()
def payment() -> None:
    """Collect, confirm and refund payments."""


# Register subcommands
stock.add_command(stock_set)
stock.add_command(stock_show)
cart.add_command(cart_add)
cart.add_command(cart_show)
address.add_command(address_add)
coupon.add_command(coupon_create)
coupon.add_command(coupon_validate)
checkout.add_command(checkout_start)
checkout.add_command(checkout_show)
checkout.add_command(checkout_release)
checkout.add_command(checkout_complete)
order.add_command(order_show)
order.add_command(order_cancel)
payment.add_command(payment_initiate)
payment.add_command(payment_verify)
payment.add_command(payment_webhook)
payment.add_command(payment_refund)
