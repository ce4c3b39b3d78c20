"""Progress statistics for members."""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from fitness_coach.domain.errors import ValidationError
from fitness_coach.domain.stats import (
    MemberProgressStats,
    ProgressEntry,
    ProgressSummary,
    WeekBreakdown,
    WorkoutLogEntry,
    WorkoutSummary,
)

DEFAULT_WEEK_LABEL = "Recent"


class ProgressRepository(Protocol):
    """Persistence interface for progress entries and workout logs."""

    def list_progress_entries(self, member_id: str) -> list[ProgressEntry]:
        """Return body composition entries, oldest first."""

    def list_workout_logs(self, member_id: str) -> list[WorkoutLogEntry]:
        """Return workout logs, newest first."""


@dataclass
class ProgressStatsService:
    """Service computing progress and workout summaries."""

    repository: ProgressRepository

    def get_stats(self, member_id: str) -> MemberProgressStats:
        """Fetch a member's entries and summarize them."""
        member_id = member_id.strip()
        if not member_id:
            raise ValidationError("memberId is required", fields=["memberId"])
        entries = self.repository.list_progress_entries(member_id)
        # Logs without a timestamp count as just created.
        now = datetime.now(tz=UTC).timestamp()
        logs = sorted(
            self.repository.list_workout_logs(member_id),
            key=lambda log: log.created_at.timestamp() if log.created_at else now,
            reverse=True,
        )
        return MemberProgressStats(
            member_id=member_id,
            progress_entries=entries,
            progress_summary=summarize_progress(entries),
            workout_logs=logs,
            workout_summary=summarize_workouts(logs),
        )


def summarize_progress(entries: list[ProgressEntry]) -> ProgressSummary:
    """Summarize weight change and average body composition."""
    if not entries:
        return ProgressSummary()
    start_weight = entries[0].weight
    latest_weight = entries[-1].weight
    weight_delta = (
        _round1(latest_weight - start_weight)
        if start_weight is not None and latest_weight is not None
        else None
    )
    return ProgressSummary(
        start_weight=start_weight,
        latest_weight=latest_weight,
        weight_delta=weight_delta,
        average_body_fat=_rounded_mean([entry.body_fat for entry in entries]),
        average_muscle_mass=_rounded_mean([entry.muscle_mass for entry in entries]),
    )


def summarize_workouts(logs: list[WorkoutLogEntry]) -> WorkoutSummary:
    """Summarize completion for logs ordered newest first."""
    if not logs:
        return WorkoutSummary()
    completed = sum(1 for log in logs if log.completed)

    streak = 0
    for log in logs:
        if not log.completed:
            break
        streak += 1

    weeks: dict[str, list[int]] = {}
    for log in logs:
        counts = weeks.setdefault(log.week_label or DEFAULT_WEEK_LABEL, [0, 0])
        counts[0] += 1
        if log.completed:
            counts[1] += 1

    return WorkoutSummary(
        total_sessions=len(logs),
        completed_sessions=completed,
        completion_rate=_percentage(completed, len(logs)),
        recent_streak=streak,
        week_breakdown=[
            WeekBreakdown(
                week_label=label,
                total=total,
                completed=done,
                completion_rate=_percentage(done, total),
            )
            for label, (total, done) in weeks.items()
        ],
    )


def _rounded_mean(values: list[float | None]) -> float | None:
    numbers = [value for value in values if value is not None]
    if not numbers:
        return None
    return _round1(sum(numbers) / len(numbers))


def _percentage(part: int, total: int) -> float:
    if total <= 0:
        return 0
    return _round1(part / total * 100)


def _round1(value: float) -> float:
    """Round to one decimal, halves away from zero."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
