"""Read models for the cart and address collaborators.

The storefront owns carts and addresses elsewhere; checkout only needs a
snapshot of what is in the cart and where it ships.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class CartLine:
    """One cart row, priced at the moment it was read."""

    variant_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class Address:
    id: str
    user_id: str
    postal_code: str
