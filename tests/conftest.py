"""Shared test fixtures."""

import copy
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime

import pytest

from fitness_coach.adapters.youtube_client import VideoSearchClient
from fitness_coach.config import Settings
from fitness_coach.containers import AppContainer
from fitness_coach.domain.plan import FitnessPlan, StoredPlan
from fitness_coach.domain.reservations import Reservation
from fitness_coach.domain.stats import ProgressEntry, WorkoutLogEntry
from fitness_coach.services.chat import ChatService, ToolCallingChatClient
from fitness_coach.services.coach_tools import (
    CoachTool,
    CoachToolFactory,
    dispatch_tool_call,
)
from fitness_coach.services.plans import (
    PlanRepository,
    PlanService,
    StructuredCompletionClient,
)
from fitness_coach.services.reservations import (
    ReservationRepository,
    ReservationService,
)
from fitness_coach.services.stats import ProgressRepository, ProgressStatsService
from fitness_coach.services.videos import VideoSearchService

SUPABASE_TEST_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJlLWZvci10ZXN0cw"
)


def make_meal(name: str, calories: int) -> dict[str, object]:
    return {
        "name": name,
        "calories": calories,
        "description": f"{name} description",
        "recipe": f"Prepare {name}",
    }


def make_plan_payload(days: int = 7) -> dict[str, object]:
    """Return a valid camelCase plan payload with the given number of days."""
    labels = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    return {
        "workoutPlan": [
            {
                "day": labels[index % 7],
                "focus": "Full body",
                "exercises": [
                    {
                        "name": "Squat",
                        "sets": 3,
                        "reps": "10-12",
                        "rest": "60s",
                        "description": "Keep your chest up.",
                    }
                ],
            }
            for index in range(days)
        ],
        "dietPlan": [
            {
                "day": labels[index % 7],
                "meals": {
                    "breakfast": make_meal("Oatmeal", 350),
                    "lunch": make_meal("Chicken salad", 550),
                    "dinner": make_meal("Salmon and rice", 600),
                },
                "dailyTotal": {
                    "calories": 1500,
                    "protein": "120g",
                    "carbs": "150g",
                    "fat": "45g",
                },
            }
            for index in range(days)
        ],
    }


@dataclass
class FakeStructuredClient(StructuredCompletionClient):
    """Fake structured completion client returning queued payloads."""

    payload: dict[str, object] = field(default_factory=make_plan_payload)
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def generate_structured(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float | None,
        max_output_tokens: int | None,
        system_prompt: str,
        user_prompt: str,
        schema_name: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        self.calls.append(
            {
                "model": model,
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "schema_name": schema_name,
                "schema": schema,
            }
        )
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.payload)


@dataclass
class FakeChatClient(ToolCallingChatClient):
    """Fake chat client that requests scripted tool calls, then replies."""

    reply: str = "Keep going, you are doing great!"
    tool_calls: list[tuple[str, str]] = field(default_factory=list)
    error: Exception | None = None
    tool_outputs: list[tuple[str, str]] = field(default_factory=list)
    seen_messages: list[dict[str, str]] = field(default_factory=list)
    seen_tools: list[str] = field(default_factory=list)

    async def run_with_tools(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float | None,
        max_output_tokens: int | None,
        messages: list[dict[str, str]],
        tools: Sequence[CoachTool],
    ) -> str:
        self.seen_messages = list(messages)
        self.seen_tools = [tool.name for tool in tools]
        if self.error is not None:
            raise self.error
        for name, arguments in self.tool_calls:
            output = await dispatch_tool_call(tools, name, arguments)
            self.tool_outputs.append((name, output))
        return self.reply


@dataclass
class InMemoryPlanRepository(PlanRepository):
    """In-memory plan repository for tests."""

    rows: dict[str, dict[str, object]] = field(default_factory=dict)
    fail_writes: bool = False
    writes: int = 0

    def get_plan(self, member_id: str) -> StoredPlan | None:
        row = self.rows.get(member_id)
        if not row or "plan" not in row:
            return None
        return StoredPlan(plan=row["plan"], updated_at=row.get("updated_at"))

    def save_plan(
        self, member_id: str, plan: FitnessPlan, updated_at: datetime
    ) -> None:
        if self.fail_writes:
            raise RuntimeError("database unavailable")
        self.writes += 1
        row = self.rows.setdefault(member_id, {})
        row.update({"plan": plan, "updated_at": updated_at})


@dataclass
class InMemoryProgressRepository(ProgressRepository):
    """In-memory progress repository for tests."""

    entries: dict[str, list[ProgressEntry]] = field(default_factory=dict)
    logs: dict[str, list[WorkoutLogEntry]] = field(default_factory=dict)
    error: Exception | None = None

    def list_progress_entries(self, member_id: str) -> list[ProgressEntry]:
        if self.error is not None:
            raise self.error
        return list(self.entries.get(member_id, []))

    def list_workout_logs(self, member_id: str) -> list[WorkoutLogEntry]:
        if self.error is not None:
            raise self.error
        return list(self.logs.get(member_id, []))


@dataclass
class InMemoryReservationRepository(ReservationRepository):
    """In-memory reservation repository for tests."""

    reservations: list[Reservation] = field(default_factory=list)

    def list_reservations_from(
        self, member_id: str, start: date
    ) -> list[Reservation]:
        return [
            item
            for item in self.reservations
            if item.member_id == member_id and item.date >= start
        ]


@dataclass
class FakeVideoSearchClient(VideoSearchClient):
    """Fake video search client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "items": [
                {
                    "id": {"videoId": "abc123"},
                    "snippet": {
                        "title": "Deadlift form guide",
                        "channelTitle": "Strength Channel",
                        "description": "Hinge at the hips.",
                        "thumbnails": {"default": {"url": "https://img/1.jpg"}},
                    },
                }
            ]
        }
    )
    error: Exception | None = None
    calls: list[tuple[str, int, str]] = field(default_factory=list)

    async def search_videos(
        self, query: str, max_results: int, language: str
    ) -> dict[str, object]:
        self.calls.append((query, max_results, language))
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=SUPABASE_TEST_KEY,
        openai_api_key="openai-key",
        youtube_api_key="youtube-key",
    )


@pytest.fixture
def structured_client() -> FakeStructuredClient:
    return FakeStructuredClient()


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def plan_repository() -> InMemoryPlanRepository:
    return InMemoryPlanRepository()


@pytest.fixture
def progress_repository() -> InMemoryProgressRepository:
    return InMemoryProgressRepository()


@pytest.fixture
def video_client() -> FakeVideoSearchClient:
    return FakeVideoSearchClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    structured_client: FakeStructuredClient,
    chat_client: FakeChatClient,
    plan_repository: InMemoryPlanRepository,
    progress_repository: InMemoryProgressRepository,
    video_client: FakeVideoSearchClient,
) -> AppContainer:
    plan_service = PlanService(
        client=structured_client,
        repository=plan_repository,
        model=settings.openai_model,
    )
    stats_service = ProgressStatsService(progress_repository)
    reservation_service = ReservationService(InMemoryReservationRepository())
    video_service = VideoSearchService(client=video_client)
    chat_service = ChatService(
        client=chat_client,
        tool_factory=CoachToolFactory(
            plans=plan_service,
            stats=stats_service,
            reservations=reservation_service,
            videos=video_service,
        ),
        model=settings.openai_model,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        plan_service=plan_service,
        chat_service=chat_service,
        stats_service=stats_service,
        reservation_service=reservation_service,
        video_service=video_service,
        close_resources=close_resources,
    )
