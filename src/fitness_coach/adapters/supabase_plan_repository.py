"""Supabase repository for generated plans."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from fitness_coach.domain.plan import FitnessPlan, StoredPlan
from fitness_coach.services.plans import PlanRepository


@dataclass
class SupabasePlanRepository(PlanRepository):
    """Supabase implementation for plan persistence keyed by member id."""

    client: Client

    def get_plan(self, member_id: str) -> StoredPlan | None:
        """Return the stored plan for a member."""
        response = (
            self.client.table("plans")
            .select("plan, updated_at")
            .eq("member_id", member_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        if not row.get("plan"):
            return None
        return StoredPlan(plan=row["plan"], updated_at=row.get("updated_at"))

    def save_plan(
        self, member_id: str, plan: FitnessPlan, updated_at: datetime
    ) -> None:
        """Upsert the plan row; columns not in the payload are left untouched."""
        self.client.table("plans").upsert(
            {
                "member_id": member_id,
                "plan": plan.to_payload(),
                "updated_at": updated_at.isoformat(),
            },
            on_conflict="member_id",
        ).execute()
