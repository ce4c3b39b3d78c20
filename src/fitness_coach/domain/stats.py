"""Domain models for member progress statistics."""

from datetime import datetime

from pydantic import Field

from fitness_coach.domain.models import CamelModel


class ProgressEntry(CamelModel):
    """Body composition snapshot recorded by a member."""

    id: str
    label: str = "Progress"
    weight: float | None = None
    body_fat: float | None = None
    muscle_mass: float | None = None
    recorded_at: datetime | None = None


class WorkoutLogEntry(CamelModel):
    """Workout session record."""

    id: str
    week_label: str = "Week"
    day: str = "Day"
    focus: str = "Workout"
    completed: bool = False
    completed_at: datetime | None = None
    created_at: datetime | None = None


class ProgressSummary(CamelModel):
    """Weight and body composition trend."""

    start_weight: float | None = None
    latest_weight: float | None = None
    weight_delta: float | None = None
    average_body_fat: float | None = None
    average_muscle_mass: float | None = None


class WeekBreakdown(CamelModel):
    """Workout completion for a single week label."""

    week_label: str
    total: int
    completed: int
    completion_rate: float


class WorkoutSummary(CamelModel):
    """Workout completion summary."""

    total_sessions: int = 0
    completed_sessions: int = 0
    completion_rate: float = 0
    recent_streak: int = 0
    week_breakdown: list[WeekBreakdown] = Field(default_factory=list)


class MemberProgressStats(CamelModel):
    """Raw entries plus the computed summaries for a member."""

    member_id: str
    progress_entries: list[ProgressEntry]
    progress_summary: ProgressSummary
    workout_logs: list[WorkoutLogEntry]
    workout_summary: WorkoutSummary
