"""Application service: Release Reservation use case.

An absent lease means the reservation already expired, was released, or
became an order. That is a resolved reservation, not an error.
"""

from __future__ import annotations

import structlog

from storefront.domain.service.reservation_manager import ReservationManager

logger = structlog.get_logger(component="reservations")


class ReleaseReservationHandler:

    def __init__(self, reservations: ReservationManager) -> None:
        self._reservations = reservations

    def handle(self, reservation_id: str) -> bool:
        released = self._reservations.release(reservation_id)
        if released:
            logger.info("reservation_released", reservation_id=reservation_id)
        else:
            logger.info("reservation_already_resolved", reservation_id=reservation_id)
        return released
