"""Domain models for equipment reservations."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Reservation:
    """Equipment reservation held by a member."""

    id: str
    member_id: str
    gym_id: str
    equipment_id: str
    date: date
    time_slot: str
