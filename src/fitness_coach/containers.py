"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from fitness_coach.adapters.openai_coach_client import OpenAICoachClient
from fitness_coach.adapters.supabase_plan_repository import SupabasePlanRepository
from fitness_coach.adapters.supabase_progress_repository import (
    SupabaseProgressRepository,
)
from fitness_coach.adapters.supabase_reservation_repository import (
    SupabaseReservationRepository,
)
from fitness_coach.adapters.youtube_client import HttpxYouTubeClient
from fitness_coach.config import Settings
from fitness_coach.services.chat import ChatService
from fitness_coach.services.coach_tools import CoachToolFactory
from fitness_coach.services.plans import PlanService
from fitness_coach.services.reservations import ReservationService
from fitness_coach.services.stats import ProgressStatsService
from fitness_coach.services.videos import VideoSearchService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    plan_service: PlanService
    chat_service: ChatService
    stats_service: ProgressStatsService
    reservation_service: ReservationService
    video_service: VideoSearchService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    coach_client = OpenAICoachClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    youtube_client = (
        HttpxYouTubeClient.create(
            api_key=resolved_settings.youtube_api_key,
            base_url=resolved_settings.youtube_base_url,
        )
        if resolved_settings.youtube_api_key
        else None
    )

    plan_service = PlanService(
        client=coach_client,
        repository=SupabasePlanRepository(supabase_client),
        model=resolved_settings.openai_model,
        temperature=resolved_settings.plan_temperature,
        max_output_tokens=resolved_settings.plan_max_output_tokens,
    )
    stats_service = ProgressStatsService(SupabaseProgressRepository(supabase_client))
    reservation_service = ReservationService(
        SupabaseReservationRepository(supabase_client)
    )
    video_service = VideoSearchService(
        client=youtube_client,
        default_language=resolved_settings.video_search_language,
    )
    chat_service = ChatService(
        client=coach_client,
        tool_factory=CoachToolFactory(
            plans=plan_service,
            stats=stats_service,
            reservations=reservation_service,
            videos=video_service,
            timezone_name=resolved_settings.coach_timezone,
        ),
        model=resolved_settings.openai_model,
        temperature=resolved_settings.chat_temperature,
        max_output_tokens=resolved_settings.chat_max_output_tokens,
    )

    async def close_resources() -> None:
        await coach_client.client.close()
        if youtube_client is not None:
            await youtube_client.close()

    return AppContainer(
        settings=resolved_settings,
        plan_service=plan_service,
        chat_service=chat_service,
        stats_service=stats_service,
        reservation_service=reservation_service,
        video_service=video_service,
        close_resources=close_resources,
    )
