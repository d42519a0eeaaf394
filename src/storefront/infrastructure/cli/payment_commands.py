"""CLI commands for online payments."""

from __future__ import annotations

import click

from storefront.application.handle_payment_webhook import PaymentWebhookHandler
from storefront.application.initiate_payment import InitiatePaymentHandler
from storefront.application.refund_payment import RefundPaymentHandler
from storefront.application.verify_payment import VerifyPaymentHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import (
    notifier,
    payment_confirmation,
    payment_provider,
    uow_factory,
)


@click.command("initiate")
@click.option("--order", "order_id", required=True, type=int, help="Order ID.")
@click.option("--user", required=True, help="Shopper ID that owns the order.")
def payment_initiate(order_id: int, user: str) -> None:
    """Open a provider order for an unpaid online order."""
    handler = InitiatePaymentHandler(uow_factory(), payment_provider())

    try:
        dto = handler.handle(order_id, user)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Provider order {dto.provider_order_id} opened for {dto.order_number}")
    click.echo(f"Amount: {dto.amount_minor} (minor units, {dto.currency})")


@click.command("verify")
@click.option("--order", "order_id", required=True, type=int, help="Order ID.")
@click.option("--provider-order", required=True, help="Provider order ID.")
@click.option("--provider-payment", required=True, help="Provider payment ID.")
@click.option("--signature", required=True, help="Signature returned by the checkout.")
def payment_verify(order_id: int, provider_order: str, provider_payment: str, signature: str) -> None:
    """Confirm a payment from the checkout callback."""
    handler = VerifyPaymentHandler(
        uow_factory(), payment_confirmation(), payment_provider(), notifier()
    )

    try:
        dto = handler.handle(order_id, provider_order, provider_payment, signature)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    state = "confirmed" if dto.applied else "already confirmed"
    click.echo(f"Order #{dto.order_id} payment {state}  (payment={dto.payment_status})")


@click.command("webhook")
@click.option("--body", "body_file", required=True, type=click.File("rb"), help="Raw webhook body ('-' for stdin).")
@click.option("--signature", required=True, help="Value of the signature header.")
def payment_webhook(body_file, signature: str) -> None:
    """Process a provider webhook delivery."""
    handler = PaymentWebhookHandler(payment_confirmation(), payment_provider(), notifier())

    try:
        ack = handler.handle(body_file.read(), signature)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Event {ack.event or '-'} acknowledged  (order={ack.order_id}, applied={ack.applied})")


@click.command("refund")
@click.option("--order", "order_id", required=True, type=int, help="Order ID.")
@click.option("--reason", default=None, help="Reason recorded with the refund.")
def payment_refund(order_id: int, reason: str | None) -> None:
    """Refund a paid order in full."""
    handler = RefundPaymentHandler(uow_factory(), payment_provider())

    try:
        dto = handler.handle(order_id, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.order_id} refunded  (payment={dto.payment_status})")
