"""Application service: Initiate Checkout use case.

Holds every unit in the shopper's cart for the reservation TTL and hands
back the reservation ID and its deadline.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import ReservationDTO
from storefront.domain.exceptions import InsufficientStock
from storefront.domain.model.reservation import Reservation
from storefront.domain.service.reservation_manager import ReservationManager

logger = structlog.get_logger(component="reservations")


class InitiateCheckoutHandler:

    def __init__(self, reservations: ReservationManager) -> None:
        self._reservations = reservations

    def handle(self, user_id: str) -> ReservationDTO:
        try:
            reservation = self._reservations.initiate_checkout(user_id)
        except InsufficientStock as exc:
            logger.info(
                "reservation_rejected",
                user_id=user_id,
                variant_id=exc.variant_id,
                requested=exc.requested,
            )
            raise

        logger.info(
            "reservation_created",
            reservation_id=reservation.reservation_id,
            user_id=user_id,
            lines=len(reservation.lines),
            expires_at=reservation.expires_at.isoformat(),
        )
        return to_reservation_dto(reservation)


def to_reservation_dto(reservation: Reservation) -> ReservationDTO:
    return ReservationDTO(
        reservation_id=reservation.reservation_id,
        user_id=reservation.user_id,
        items=[(line.variant_id, line.quantity.value) for line in reservation.lines],
        expires_at=reservation.expires_at.isoformat(),
    )
