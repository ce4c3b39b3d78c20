"""Supabase repository for progress entries and workout logs."""

import math
from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from fitness_coach.domain.stats import ProgressEntry, WorkoutLogEntry
from fitness_coach.services.stats import ProgressRepository


@dataclass
class SupabaseProgressRepository(ProgressRepository):
    """Supabase implementation for progress queries."""

    client: Client

    def list_progress_entries(self, member_id: str) -> list[ProgressEntry]:
        """Return body composition entries, oldest first."""
        response = (
            self.client.table("progress_entries")
            .select("id, label, weight, body_fat, muscle_mass, recorded_at")
            .eq("member_id", member_id)
            .order("recorded_at", desc=False)
            .execute()
        )
        return [_parse_progress_row(row) for row in response.data or []]

    def list_workout_logs(self, member_id: str) -> list[WorkoutLogEntry]:
        """Return workout logs, newest first."""
        response = (
            self.client.table("workout_logs")
            .select("id, week_label, day, focus, completed, completed_at, created_at")
            .eq("member_id", member_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_workout_row(row) for row in response.data or []]


def _parse_progress_row(row: dict[str, object]) -> ProgressEntry:
    return ProgressEntry(
        id=str(row.get("id", "")),
        label=row.get("label") or "Progress",
        weight=_parse_number(row.get("weight")),
        body_fat=_parse_number(row.get("body_fat")),
        muscle_mass=_parse_number(row.get("muscle_mass")),
        recorded_at=_parse_datetime(row.get("recorded_at")),
    )


def _parse_workout_row(row: dict[str, object]) -> WorkoutLogEntry:
    return WorkoutLogEntry(
        id=str(row.get("id", "")),
        week_label=row.get("week_label") or "Week",
        day=row.get("day") or "Day",
        focus=row.get("focus") or "Workout",
        completed=bool(row.get("completed")),
        completed_at=_parse_datetime(row.get("completed_at")),
        created_at=_parse_datetime(row.get("created_at")),
    )


def _parse_number(value: object) -> float | None:
    """Return a finite float for numeric or numeric-string values."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _parse_datetime(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None
