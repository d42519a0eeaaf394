"""Abstract Stock Ledger — atomic counter operations per variant.

Every mutating method must be a single conditional update at the storage
layer. Implementations never read ``available`` and write ``held`` in two
steps.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.stock import VariantStock


class StockLedger(ABC):

    @abstractmethod
    def reserve(self, variant_id: str, quantity: int) -> bool:
        """Hold ``quantity`` units iff ``on_hand - held >= quantity``."""

    @abstractmethod
    def release(self, variant_id: str, quantity: int) -> None:
        """Drop ``quantity`` held units, flooring ``held`` at zero."""

    @abstractmethod
    def deduct(self, variant_id: str, quantity: int) -> bool:
        """Sell held units: ``on_hand`` and ``held`` both drop by ``quantity``.

        Returns False, changing nothing, when fewer than ``quantity`` units
        are held.
        """

    @abstractmethod
    def restock(self, variant_id: str, quantity: int) -> None:
        """Add ``quantity`` units to ``on_hand``."""

    @abstractmethod
    def get(self, variant_id: str) -> VariantStock | None:
        """Return a snapshot of the record, or None."""

    @abstractmethod
    def list_all(self) -> list[VariantStock]:
        """Return a snapshot of every record."""

    @abstractmethod
    def set_on_hand(self, variant_id: str, quantity: int) -> VariantStock:
        """Create the record or set its ``on_hand`` (never below ``held``)."""
