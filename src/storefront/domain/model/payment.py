"""Payment record — our side of a provider transaction for one order."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from storefront.domain.model.value_objects import Money


class PaymentRecordStatus(Enum):
    CREATED = "created"
    CAPTURED = "captured"
    FAILED = "failed"
    REFUNDED = "refunded"


@dataclass
class Payment:
    id: int | None
    order_id: int
    provider_order_id: str
    amount: Money
    status: PaymentRecordStatus = PaymentRecordStatus.CREATED
    provider_payment_id: str | None = None
    provider_data: dict = field(default_factory=dict)
