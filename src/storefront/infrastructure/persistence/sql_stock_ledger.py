"""SQLAlchemy-backed StockLedger.

Every mutation is one guarded ``UPDATE`` whose ``rowcount`` tells us
whether the guard held. Concurrent callers are serialized by the
database's row lock, never by a read in Python.
"""

from __future__ import annotations

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.stock import VariantStock
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.stock_ledger import StockLedger
from storefront.infrastructure.persistence.orm import VariantStockRow

_row = VariantStockRow


class SqlStockLedger(StockLedger):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- StockLedger interface ------------------------------------------------

    def reserve(self, variant_id: str, quantity: int) -> bool:
        Quantity(quantity)
        return self._apply(
            update(_row)
            .where(_row.variant_id == variant_id, _row.on_hand - _row.held >= quantity)
            .values(held=_row.held + quantity)
        )

    def release(self, variant_id: str, quantity: int) -> None:
        Quantity(quantity)
        self._apply(
            update(_row)
            .where(_row.variant_id == variant_id)
            .values(held=case((_row.held > quantity, _row.held - quantity), else_=0))
        )

    def deduct(self, variant_id: str, quantity: int) -> bool:
        Quantity(quantity)
        return self._apply(
            update(_row)
            .where(_row.variant_id == variant_id, _row.held >= quantity)
            .values(on_hand=_row.on_hand - quantity, held=_row.held - quantity)
        )

    def restock(self, variant_id: str, quantity: int) -> None:
        Quantity(quantity)
        if not self._apply(
            update(_row)
            .where(_row.variant_id == variant_id)
            .values(on_hand=_row.on_hand + quantity)
        ):
            raise EntityNotFoundError(f"No stock record for variant {variant_id}")

    def get(self, variant_id: str) -> VariantStock | None:
        row = self._session.execute(
            select(_row.variant_id, _row.on_hand, _row.held).where(_row.variant_id == variant_id)
        ).first()
        return VariantStock(*row) if row else None

    def list_all(self) -> list[VariantStock]:
        rows = self._session.execute(
            select(_row.variant_id, _row.on_hand, _row.held).order_by(_row.variant_id)
        ).all()
        return [VariantStock(*row) for row in rows]

    def set_on_hand(self, variant_id: str, quantity: int) -> VariantStock:
        current = self.get(variant_id)
        if current is None:
            record = VariantStock(variant_id=variant_id, on_hand=0)
            record.set_on_hand(quantity)
            self._session.add(VariantStockRow(variant_id=variant_id, on_hand=quantity, held=0))
            self._session.flush()
            return record

        current.set_on_hand(quantity)  # validates against the held count we just read
        if not self._apply(
            update(_row)
            .where(_row.variant_id == variant_id, _row.held <= quantity)
            .values(on_hand=quantity)
        ):
            raise ValidationError(
                f"Cannot set on-hand of variant {variant_id} to {quantity} "
                "- holds changed while updating"
            )
        return self.get(variant_id)  # type: ignore[return-value]

    # --- Helpers --------------------------------------------------------------

    def _apply(self, statement) -> bool:
        result = self._session.execute(statement.execution_options(synchronize_session=False))
        return result.rowcount == 1
