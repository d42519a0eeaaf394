"""Application service: Set Stock use case."""

from __future__ import annotations

from typing import Callable

from storefront.domain.model.stock import VariantStock
from storefront.domain.repository.unit_of_work import UnitOfWork


class SetStockHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, variant_id: str, on_hand: int) -> VariantStock:
        """Set the physical on-hand count for a variant, creating it if new."""
        with self._uow_factory() as uow:
            record = uow.stock.set_on_hand(variant_id, on_hand)
            uow.commit()
        return record
