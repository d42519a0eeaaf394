"""Domain service: Reservation Manager.

Owns the hold lifecycle ``NONE -> HELD -> {CONFIRMED, RELEASED, EXPIRED}``.
Holds are counters on the stock ledger; the reservation itself is a lease
whose TTL is the only expiry authority. A reservation whose lease is gone,
or whose holds an order has already consumed, has left HELD for good.

Holds that outlive their lease (shopper walked away) stay on the ledger
until the external reconciler releases them. Nothing here trusts a lease
beyond its TTL: confirmation re-checks availability on its own.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Callable

from storefront.domain.clock import Clock, utc_now
from storefront.domain.exceptions import (
    InsufficientStock,
    ReservationExpiredOrMissing,
    ValidationError,
)
from storefront.domain.model.cart import CartLine
from storefront.domain.model.reservation import (
    DEFAULT_TTL,
    Reservation,
    ReservationLine,
)
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.lease_store import LeaseStore
from storefront.domain.repository.unit_of_work import UnitOfWork


class ReservationManager:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        lease_store: LeaseStore,
        ttl: timedelta = DEFAULT_TTL,
        clock: Clock = utc_now,
    ) -> None:
        self._uow_factory = uow_factory
        self._leases = lease_store
        self._ttl = ttl
        self._clock = clock

    def initiate_checkout(self, user_id: str) -> Reservation:
        """Hold every unit in the user's cart and open a lease for it.

        Either every line is held or none is: a line that cannot be held
        makes us release the lines already held in this call before raising
        InsufficientStock.
        """
        with self._uow_factory() as uow:
            cart = uow.carts.list_lines(user_id)
            if not cart:
                raise ValidationError("Cart is empty")
            lines = merge_lines(cart)

            reserved: list[ReservationLine] = []
            for line in lines:
                if not uow.stock.reserve(line.variant_id, line.quantity.value):
                    for done in reserved:
                        uow.stock.release(done.variant_id, done.quantity.value)
                    uow.commit()
                    raise InsufficientStock(line.variant_id, line.quantity.value)
                reserved.append(line)
            uow.commit()

        reservation = Reservation.open(user_id, reserved, self._ttl, now=self._clock())
        try:
            self._leases.put(reservation.reservation_id, reservation.to_payload(), self._ttl)
        except Exception:
            # No lease, no holds.
            self._release_lines(reserved)
            raise
        return reservation

    def lookup(self, reservation_id: str) -> Reservation | None:
        """The live reservation, or None once it has left HELD.

        A lease that outlived its checkout (retirement failed after commit)
        no longer stands for held units.
        """
        payload = self._leases.get(reservation_id)
        if payload is None or self._converted(reservation_id):
            return None
        return Reservation.from_payload(payload)

    def require(self, reservation_id: str) -> Reservation:
        reservation = self.lookup(reservation_id)
        if reservation is None:
            raise ReservationExpiredOrMissing(
                f"Reservation {reservation_id} has expired or was already resolved"
            )
        return reservation

    def release(self, reservation_id: str) -> bool:
        """Give the held units back. Safe to call any number of times.

        The lease is deleted before the ledger is touched so that only one
        of several concurrent callers wins the release. Holds already sold
        by an order stay sold; only the stale lease goes. Returns whether
        this call released anything.
        """
        payload = self._leases.get(reservation_id)
        if payload is None or not self._leases.delete(reservation_id):
            return False
        reservation = Reservation.from_payload(payload)
        with self._uow_factory() as uow:
            if uow.orders.exists_for_reservation(reservation_id):
                return False
            for line in reservation.lines:
                uow.stock.release(line.variant_id, line.quantity.value)
            uow.commit()
        return True

    def mark_confirmed(self, reservation_id: str) -> bool:
        """Retire the lease of a reservation whose holds became a sale."""
        return self._leases.delete(reservation_id)

    def _converted(self, reservation_id: str) -> bool:
        with self._uow_factory() as uow:
            return uow.orders.exists_for_reservation(reservation_id)

    def _release_lines(self, lines: list[ReservationLine]) -> None:
        with self._uow_factory() as uow:
            for line in lines:
                uow.stock.release(line.variant_id, line.quantity.value)
            uow.commit()


def merge_lines(cart: list[CartLine]) -> list[ReservationLine]:
    """One line per variant, in variant order so row locks are taken in a
    stable order across concurrent callers."""
    totals: dict[str, int] = {}
    for line in cart:
        totals[line.variant_id] = totals.get(line.variant_id, 0) + line.quantity.value
    return [
        ReservationLine(variant_id, Quantity(qty))
        for variant_id, qty in sorted(totals.items())
    ]
