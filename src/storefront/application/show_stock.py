"""Application service: Show Stock use case (query)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class StockLineDTO:
    variant_id: str
    on_hand: int
    held: int
    available: int


class ShowStockHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self) -> list[StockLineDTO]:
        with self._uow_factory() as uow:
            records = uow.stock.list_all()
        return [
            StockLineDTO(
                variant_id=record.variant_id,
                on_hand=record.on_hand,
                held=record.held,
                available=record.available,
            )
            for record in records
        ]
