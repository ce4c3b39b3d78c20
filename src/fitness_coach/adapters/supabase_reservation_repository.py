"""Supabase repository for equipment reservations."""

from dataclasses import dataclass
from datetime import date, datetime

from supabase import Client

from fitness_coach.domain.reservations import Reservation
from fitness_coach.services.reservations import ReservationRepository


@dataclass
class SupabaseReservationRepository(ReservationRepository):
    """Supabase implementation for reservation queries."""

    client: Client

    def list_reservations_from(
        self, member_id: str, start: date
    ) -> list[Reservation]:
        """Return reservations dated on or after start."""
        response = (
            self.client.table("reservations")
            .select("id, member_id, gym_id, equipment_id, date, time_slot")
            .eq("member_id", member_id)
            .gte("date", start.isoformat())
            .order("date", desc=False)
            .order("time_slot", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> Reservation:
    return Reservation(
        id=str(row.get("id", "")),
        member_id=str(row.get("member_id", "")),
        gym_id=str(row.get("gym_id", "")),
        equipment_id=str(row.get("equipment_id", "")),
        date=datetime.fromisoformat(str(row["date"])).date(),
        time_slot=str(row.get("time_slot", "")),
    )
