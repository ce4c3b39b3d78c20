"""Plan generation pipeline backed by a structured-output LLM."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from fitness_coach.domain.errors import PersistenceError, UpstreamError, ValidationError
from fitness_coach.domain.plan import FitnessPlan, StoredPlan, fitness_plan_json_schema
from fitness_coach.services.profiles import build_profile_prompt, sanitize_profile

PLAN_SYSTEM_PROMPT = (
    "You are an experienced bilingual (Korean & English) fitness coach.\n"
    "Respond with a JSON object matching the provided schema.\n"
    "Keep workouts safe based on the user's health conditions, include rest days, "
    "and ensure diets align with the goal."
)

PLAN_SCHEMA_NAME = "fitness_plan"

_logger = logging.getLogger(__name__)


class StructuredCompletionClient(Protocol):
    """Interface for schema-constrained LLM completions."""

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
        """Return the parsed JSON completion."""


class PlanRepository(Protocol):
    """Persistence interface for generated plans."""

    def get_plan(self, member_id: str) -> StoredPlan | None:
        """Return the stored plan for a member, if any."""

    def save_plan(
        self, member_id: str, plan: FitnessPlan, updated_at: datetime
    ) -> None:
        """Upsert the member's plan, preserving unrelated columns."""


@dataclass
class PlanGenerationResult:
    """Outcome of a plan generation run."""

    plan: FitnessPlan
    persistence_error: PersistenceError | None = None

    @property
    def persisted(self) -> bool:
        """Return True when the plan was saved."""
        return self.persistence_error is None


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class PlanService:
    """Runs sanitize, prompt, completion and persist steps in order."""

    client: StructuredCompletionClient
    repository: PlanRepository
    model: str
    temperature: float | None = 0.4
    max_output_tokens: int | None = 6000
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def generate(
        self, member_id: str | None, raw_profile: Mapping[str, object] | None
    ) -> PlanGenerationResult:
        """Generate a plan for the member and persist it."""
        member_id = (member_id or "").strip()
        missing = [
            name
            for name, value in (("memberId", member_id), ("profile", raw_profile))
            if not value
        ]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}", fields=missing
            )

        profile = sanitize_profile(raw_profile)
        prompt = build_profile_prompt(profile)
        plan = await self._request_plan(prompt)
        return PlanGenerationResult(
            plan=plan, persistence_error=self._persist(member_id, plan)
        )

    def get_plan(self, member_id: str) -> StoredPlan | None:
        """Return the stored plan for a member."""
        member_id = member_id.strip()
        if not member_id:
            raise ValidationError("memberId is required", fields=["memberId"])
        return self.repository.get_plan(member_id)

    async def _request_plan(self, prompt: str) -> FitnessPlan:
        user_prompt = (
            f"Member profile:\n{prompt}\n"
            "Using the profile above, create a 7-day workout and diet plan as JSON."
        )
        try:
            raw = await self.client.generate_structured(
                model=self.model,
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
                system_prompt=PLAN_SYSTEM_PROMPT,
                user_prompt=user_prompt,
                schema_name=PLAN_SCHEMA_NAME,
                schema=fitness_plan_json_schema(),
            )
        except Exception as exc:
            raise UpstreamError(f"Plan generation failed: {exc}") from exc
        try:
            return FitnessPlan.model_validate(raw)
        except PydanticValidationError as exc:
            raise UpstreamError(
                f"Generated plan did not match the schema ({exc.error_count()} errors)"
            ) from exc

    def _persist(self, member_id: str, plan: FitnessPlan) -> PersistenceError | None:
        try:
            self.repository.save_plan(member_id, plan, self.clock())
        except Exception as exc:
            _logger.exception("Failed to persist plan", extra={"member_id": member_id})
            return PersistenceError(member_id, f"Failed to save plan: {exc}")
        return None
