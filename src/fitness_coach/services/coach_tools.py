"""Member-scoped tools the coach model can call during a chat turn."""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from fitness_coach.services.plans import PlanService
from fitness_coach.services.reservations import ReservationService, format_reservation
from fitness_coach.services.stats import ProgressStatsService
from fitness_coach.services.videos import (
    DEFAULT_MAX_RESULTS,
    MAX_RESULTS,
    MIN_RESULTS,
    VideoSearchService,
    format_videos,
)

NO_PLAN = "No saved plan was found for this member."
MEMBER_NOT_FOUND = "Member information could not be found."
NO_RESERVATIONS = "There are no upcoming reservations."

_NO_ARGUMENTS: dict[str, object] = {
    "type": "object",
    "properties": {},
    "additionalProperties": False,
}

_logger = logging.getLogger(__name__)


class CoachTool(Protocol):
    """Callable tool exposed to the model."""

    name: str
    description: str
    parameters: dict[str, object]

    async def invoke(self, arguments: dict[str, object]) -> str:
        """Run the tool and return text for the model."""


@dataclass
class MemberPlanTool:
    """Reads the member's stored plan."""

    member_id: str | None
    plans: PlanService
    name: str = "get_member_plan"
    description: str = (
        "Fetch the member's latest workout and diet plan. "
        "Returns a notice when no plan has been generated yet."
    )
    parameters: dict[str, object] = field(default_factory=lambda: dict(_NO_ARGUMENTS))

    async def invoke(self, arguments: dict[str, object]) -> str:
        if not self.member_id:
            return NO_PLAN
        stored = self.plans.get_plan(self.member_id)
        if stored is None:
            return NO_PLAN
        return json.dumps(stored.plan.to_payload(), ensure_ascii=False)


@dataclass
class MemberProgressStatsTool:
    """Summarizes the member's body composition and workout logs."""

    member_id: str | None
    stats: ProgressStatsService
    name: str = "get_member_progress_stats"
    description: str = (
        "Analyze the member's body composition records and workout logs and "
        "summarize recent trends. Use it to write motivating, data-backed feedback."
    )
    parameters: dict[str, object] = field(default_factory=lambda: dict(_NO_ARGUMENTS))

    async def invoke(self, arguments: dict[str, object]) -> str:
        if not self.member_id:
            return MEMBER_NOT_FOUND
        stats = self.stats.get_stats(self.member_id)
        return json.dumps(stats.to_payload(), ensure_ascii=False)


@dataclass
class UpcomingReservationsTool:
    """Lists the member's upcoming equipment reservations."""

    member_id: str | None
    reservations: ReservationService
    today: date
    name: str = "get_upcoming_reservations"
    description: str = (
        "List the member's upcoming equipment reservations. "
        "If there are none, tell the member there are no reservations."
    )
    parameters: dict[str, object] = field(default_factory=lambda: dict(_NO_ARGUMENTS))

    async def invoke(self, arguments: dict[str, object]) -> str:
        if not self.member_id:
            return NO_RESERVATIONS
        upcoming = self.reservations.list_upcoming(self.member_id, self.today)
        if not upcoming:
            return NO_RESERVATIONS
        return "\n".join(format_reservation(item) for item in upcoming)


@dataclass
class ExerciseVideoSearchTool:
    """Finds YouTube videos demonstrating an exercise."""

    videos: VideoSearchService
    name: str = "search_exercise_videos"
    description: str = (
        "Search YouTube for videos when the member asks how to perform an "
        "exercise or wants a video example, and share the links."
    )
    parameters: dict[str, object] = field(
        default_factory=lambda: {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": (
                        'Exercise or movement to look up, e.g. "deadlift form".'
                    ),
                },
                "maxResults": {
                    "type": "integer",
                    "minimum": MIN_RESULTS,
                    "maximum": MAX_RESULTS,
                    "description": f"Number of videos, default {DEFAULT_MAX_RESULTS}.",
                },
                "language": {
                    "type": "string",
                    "description": "Search language code. Defaults to ko.",
                },
            },
            "required": ["query"],
            "additionalProperties": False,
        }
    )

    async def invoke(self, arguments: dict[str, object]) -> str:
        language = arguments.get("language")
        results = await self.videos.search(
            str(arguments.get("query") or ""),
            max_results=arguments.get("maxResults"),
            language=language if isinstance(language, str) and language else None,
        )
        return format_videos(results)


@dataclass
class CoachToolFactory:
    """Builds the tool set for a single chat request."""

    plans: PlanService
    stats: ProgressStatsService
    reservations: ReservationService
    videos: VideoSearchService
    timezone_name: str = "UTC"

    def build(self, member_id: str | None) -> list[CoachTool]:
        """Return the four coach tools bound to member_id."""
        today = datetime.now(tz=ZoneInfo(self.timezone_name)).date()
        return [
            MemberPlanTool(member_id=member_id, plans=self.plans),
            MemberProgressStatsTool(member_id=member_id, stats=self.stats),
            UpcomingReservationsTool(
                member_id=member_id, reservations=self.reservations, today=today
            ),
            ExerciseVideoSearchTool(videos=self.videos),
        ]


async def dispatch_tool_call(
    tools: Sequence[CoachTool], name: str, raw_arguments: str | None
) -> str:
    """Invoke a tool by name, turning any failure into text for the model."""
    tool = next((candidate for candidate in tools if candidate.name == name), None)
    if tool is None:
        return f"Unknown tool: {name}"
    try:
        arguments = json.loads(raw_arguments) if raw_arguments else {}
    except json.JSONDecodeError:
        return f"Invalid arguments for {name}: expected a JSON object."
    if not isinstance(arguments, dict):
        return f"Invalid arguments for {name}: expected a JSON object."
    try:
        return await tool.invoke(arguments)
    except Exception as exc:
        _logger.warning("Tool %s failed: %s", name, exc)
        return f"Tool {name} failed: {exc}"
