"""Application service: Show Reservation use case (query)."""

from __future__ import annotations

from storefront.application.dto import ReservationDTO
from storefront.application.initiate_checkout import to_reservation_dto
from storefront.domain.service.reservation_manager import ReservationManager


class ShowReservationHandler:

    def __init__(self, reservations: ReservationManager) -> None:
        self._reservations = reservations

    def handle(self, reservation_id: str) -> ReservationDTO:
        """Raises ReservationExpiredOrMissing once the hold is resolved."""
        return to_reservation_dto(self._reservations.require(reservation_id))
