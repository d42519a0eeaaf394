"""CLI commands for coupons."""

from __future__ import annotations

from datetime import timezone

import click

from storefront.application.create_coupon import CreateCouponHandler
from storefront.application.validate_coupon import ValidateCouponHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import coupon_evaluator, settings, uow_factory

_DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]


@click.command("create")
@click.option("--code", required=True, help="Coupon code (case-insensitive).")
@click.option(
    "--type",
    "discount_type",
    required=True,
    type=click.Choice(["percentage", "fixed", "free_shipping"]),
    help="Kind of discount.",
)
@click.option("--value", default="0", show_default=True, help="Percent or flat amount.")
@click.option("--valid-from", required=True, type=click.DateTime(_DATE_FORMATS), help="Start (UTC).")
@click.option("--valid-until", required=True, type=click.DateTime(_DATE_FORMATS), help="End (UTC).")
@click.option("--min-order", default=None, help="Minimum order value.")
@click.option("--max-discount", default=None, help="Cap for percentage discounts.")
@click.option("--usage-limit", default=None, type=int, help="Total uses allowed.")
def coupon_create(
    code: str,
    discount_type: str,
    value: str,
    valid_from,
    valid_until,
    min_order: str | None,
    max_discount: str | None,
    usage_limit: int | None,
) -> None:
    """Create a coupon."""
    handler = CreateCouponHandler(uow_factory(), settings().currency)

    try:
        coupon = handler.handle(
            code=code,
            discount_type=discount_type,
            value=value,
            valid_from=valid_from.replace(tzinfo=timezone.utc),
            valid_until=valid_until.replace(tzinfo=timezone.utc),
            min_order_value=min_order,
            max_discount=max_discount,
            usage_limit=usage_limit,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Coupon {coupon.code} created ({coupon.discount_type.value} {coupon.value})")


@click.command("validate")
@click.option("--code", required=True, help="Coupon code.")
@click.option("--order-value", required=True, help="Order value to quote against.")
def coupon_validate(code: str, order_value: str) -> None:
    """Quote a coupon against an order value without using it."""
    handler = ValidateCouponHandler(coupon_evaluator(), settings().currency)

    try:
        quote = handler.handle(code, order_value)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Coupon {quote.code} is valid")
    click.echo(f"  Discount:      {quote.discount}")
    click.echo(f"  Free shipping: {'yes' if quote.free_shipping else 'no'}")
    click.echo(f"  Final amount:  {quote.final_amount}")
