"""Abstract Lease Store — TTL-backed entries that stand for live holds.

The store's own expiry is the only clock: an entry that is gone is gone,
and nothing in the engine keeps a timer of its own.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta


class LeaseStore(ABC):

    @abstractmethod
    def put(self, reservation_id: str, payload: dict, ttl: timedelta) -> None:
        """Write the lease; it disappears on its own after ``ttl``."""

    @abstractmethod
    def get(self, reservation_id: str) -> dict | None:
        """Return the payload, or None if absent or expired."""

    @abstractmethod
    def delete(self, reservation_id: str) -> bool:
        """Remove the lease. True if it was still there."""
