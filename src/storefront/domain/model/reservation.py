"""Reservation — a time-boxed hold on stock, backed by a lease.

A reservation exists only as a lease entry. Its payload is everything
needed to give the held units back if the shopper walks away.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Quantity

DEFAULT_TTL = timedelta(minutes=10)


@dataclass(frozen=True)
class ReservationLine:
    variant_id: str
    quantity: Quantity


@dataclass
class Reservation:
    """A live hold. Only ever observed in the HELD state.

    Once the lease is gone the reservation has left HELD for good; callers
    see that as ``None`` from the reservation manager, never as an object.
    """

    reservation_id: str
    user_id: str
    lines: list[ReservationLine]
    created_at: datetime
    expires_at: datetime

    @staticmethod
    def open(
        user_id: str,
        lines: list[ReservationLine],
        ttl: timedelta = DEFAULT_TTL,
        now: datetime | None = None,
    ) -> Reservation:
        if not lines:
            raise ValidationError("Reservation must hold at least one line")
        if ttl <= timedelta(0):
            raise ValidationError("Reservation TTL must be positive")
        created = now or datetime.now(timezone.utc)
        return Reservation(
            reservation_id=new_reservation_id(),
            user_id=user_id,
            lines=list(lines),
            created_at=created,
            expires_at=created + ttl,
        )

    # --- Lease payload --------------------------------------------------------

    def to_payload(self) -> dict:
        return {
            "reservation_id": self.reservation_id,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
            "items": [
                {"variant_id": line.variant_id, "quantity": line.quantity.value}
                for line in self.lines
            ],
        }

    @staticmethod
    def from_payload(payload: dict) -> Reservation:
        return Reservation(
            reservation_id=payload["reservation_id"],
            user_id=payload["user_id"],
            lines=[
                ReservationLine(item["variant_id"], Quantity(int(item["quantity"])))
                for item in payload["items"]
            ],
            created_at=datetime.fromisoformat(payload["created_at"]),
            expires_at=datetime.fromisoformat(payload["expires_at"]),
        )


def new_reservation_id() -> str:
    return f"RES-{secrets.token_hex(12)}"
