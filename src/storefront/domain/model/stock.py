"""VariantStock aggregate — physical units and active holds per variant.

Each sellable variant has one stock record that knows how many units are
on hand and how many of those are held by live reservations.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import InsufficientStock, ValidationError


@dataclass
class VariantStock:
    """Aggregate root for stock tracking.

    Invariants:
    - ``held`` can never exceed ``on_hand``
    - ``available`` is always >= 0
    """

    variant_id: str
    on_hand: int
    held: int = 0

    @property
    def available(self) -> int:
        return self.on_hand - self.held

    def reserve(self, quantity: int) -> None:
        """Place a hold on ``quantity`` units.

        Raises InsufficientStock if fewer units are available.
        """
        _require_positive(quantity, "Reservation")
        if quantity > self.available:
            raise InsufficientStock(
                self.variant_id,
                quantity,
                f"Insufficient stock for variant {self.variant_id} "
                f"(need {quantity}, have {self.available} available)",
            )
        self.held += quantity

    def release(self, quantity: int) -> None:
        """Drop a hold. Floors at zero so a double release is harmless."""
        _require_positive(quantity, "Release")
        self.held = max(self.held - quantity, 0)

    def deduct(self, quantity: int) -> None:
        """Permanently sell held units.

        Both ``on_hand`` and ``held`` decrease by the same amount, so
        ``available`` is unchanged.
        """
        _require_positive(quantity, "Deduct")
        if quantity > self.held:
            raise InsufficientStock(
                self.variant_id,
                quantity,
                f"Cannot deduct {quantity} of variant {self.variant_id} "
                f"- only {self.held} currently held",
            )
        self.held -= quantity
        self.on_hand -= quantity

    def restock(self, quantity: int) -> None:
        """Return units to the shelf (cancellation or return)."""
        _require_positive(quantity, "Restock")
        self.on_hand += quantity

    def set_on_hand(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("On-hand quantity cannot be negative")
        if quantity < self.held:
            raise ValidationError(
                f"Cannot set on-hand of variant {self.variant_id} to {quantity} "
                f"- {self.held} units are currently held"
            )
        self.on_hand = quantity


def _require_positive(quantity: int, action: str) -> None:
    if quantity <= 0:
        raise ValidationError(f"{action} quantity must be positive")
