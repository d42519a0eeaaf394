"""Store policy — the storefront settings checkout consults."""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class StorePolicy:
    free_shipping_threshold: Money
    standard_shipping_charge: Money
    cod_default_enabled: bool = True
    cod_enabled_pincodes: frozenset[str] = field(default_factory=frozenset)

    def shipping_charge_for(self, subtotal: Money) -> Money:
        if subtotal >= self.free_shipping_threshold:
            return Money.zero(subtotal.currency)
        return self.standard_shipping_charge

    def allows_cod(self, postal_code: str) -> bool:
        return self.cod_default_enabled or str(postal_code) in self.cod_enabled_pincodes
