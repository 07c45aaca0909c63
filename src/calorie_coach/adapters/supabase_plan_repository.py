"""Supabase repository for daily plans."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from calorie_coach.domain.meals import DailyPlan
from calorie_coach.domain.records import daily_plan_from_record, daily_plan_to_record
from calorie_coach.services.plans import DailyPlanRepository


@dataclass
class SupabaseDailyPlanRepository(DailyPlanRepository):
    """Supabase implementation storing each plan as a JSON document."""

    client: Client

    def save_plan(self, user_id: str, plan: DailyPlan) -> None:
        """Upsert the plan row for the user and plan date."""
        self.client.table("daily_plans").upsert(
            {
                "user_id": user_id,
                "plan_date": plan.meal_plan.date.isoformat(),
                "generated_at": plan.generated_at.isoformat(),
                "plan_json": daily_plan_to_record(plan),
            },
            on_conflict="user_id,plan_date",
        ).execute()

    def get_plan(self, user_id: str, plan_date: date) -> DailyPlan | None:
        """Return the plan for a user and date."""
        response = (
            self.client.table("daily_plans")
            .select("plan_json")
            .eq("user_id", user_id)
            .eq("plan_date", plan_date.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return daily_plan_from_record(response.data[0]["plan_json"])

    def list_plans(self, user_id: str, limit: int) -> list[DailyPlan]:
        """Return recent plans for a user."""
        response = (
            self.client.table("daily_plans")
            .select("plan_json")
            .eq("user_id", user_id)
            .order("plan_date", desc=True)
            .limit(limit)
            .execute()
        )
        return [daily_plan_from_record(row["plan_json"]) for row in response.data or []]

    def delete_plan(self, user_id: str, plan_date: date) -> bool:
        """Delete the plan row; return True when a row was removed."""
        response = (
            self.client.table("daily_plans")
            .delete()
            .eq("user_id", user_id)
            .eq("plan_date", plan_date.isoformat())
            .execute()
        )
        return bool(response.data)
