"""Upcoming reservation lookups."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from fitness_coach.domain.reservations import Reservation


class ReservationRepository(Protocol):
    """Persistence interface for reservations."""

    def list_reservations_from(
        self, member_id: str, start: date
    ) -> list[Reservation]:
        """Return reservations dated on or after start."""


@dataclass
class ReservationService:
    """Service for reading a member's reservations."""

    repository: ReservationRepository

    def list_upcoming(self, member_id: str, today: date) -> list[Reservation]:
        """Return reservations from today on, ordered by date and time slot."""
        reservations = self.repository.list_reservations_from(member_id, today)
        return sorted(
            (item for item in reservations if item.date >= today),
            key=lambda item: (item.date, item.time_slot),
        )


def format_reservation(reservation: Reservation) -> str:
    """Format a reservation as a single display line."""
    return (
        f"{reservation.date.isoformat()} {reservation.time_slot} - "
        f"{reservation.gym_id} ({reservation.equipment_id})"
    )
