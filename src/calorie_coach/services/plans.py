"""Daily plan service: calculate, generate and persist a day's plan."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from typing import Protocol

from calorie_coach.domain.errors import PlanNotFound
from calorie_coach.domain.meals import DailyPlan
from calorie_coach.domain.profile import UserProfile
from calorie_coach.services.calories import calculate_calories
from calorie_coach.services.meal_planner import MealPlanService
from calorie_coach.services.remote_plans import RemotePlanRequest, RemotePlanService

MAX_SAVED_PLANS = 10

_logger = logging.getLogger(__name__)


class DailyPlanRepository(Protocol):
    """Persistence interface for daily plans."""

    def save_plan(self, user_id: str, plan: DailyPlan) -> None:
        """Insert or replace the plan for its user and date."""

    def get_plan(self, user_id: str, plan_date: date) -> DailyPlan | None:
        """Return the plan for a user and date, if present."""

    def list_plans(self, user_id: str, limit: int) -> list[DailyPlan]:
        """Return the user's plans, newest date first."""

    def delete_plan(self, user_id: str, plan_date: date) -> bool:
        """Delete a plan; return True when one existed."""


@dataclass
class DailyPlanService:
    """Application service for creating and managing daily plans."""

    repository: DailyPlanRepository
    planner: MealPlanService
    remote_planner: RemotePlanService

    async def create_plan(
        self,
        user_id: str,
        profile: UserProfile,
        *,
        use_remote: bool = False,
        cuisine: str = "thai",
    ) -> DailyPlan:
        """Calculate calories, build a meal plan and store the result."""
        calculation = calculate_calories(profile)
        if use_remote:
            meal_plan = await self.remote_planner.generate(
                RemotePlanRequest(
                    profile=profile,
                    target_calories=calculation.target_calories,
                    cuisine=cuisine,
                )
            )
        else:
            meal_plan = self.planner.generate_meal_plan(
                calculation.target_calories, profile.goal
            )
        daily_plan = DailyPlan(
            profile=profile,
            calorie_calc=calculation,
            meal_plan=meal_plan,
            generated_at=datetime.now(tz=UTC),
        )
        self.repository.save_plan(user_id, daily_plan)
        _logger.info(
            "Daily plan saved: user=%s date=%s source=%s",
            user_id,
            meal_plan.date,
            meal_plan.source,
        )
        return daily_plan

    def get_plan(self, user_id: str, plan_date: date) -> DailyPlan:
        """Return a stored plan or raise PlanNotFound."""
        plan = self.repository.get_plan(user_id, plan_date)
        if plan is None:
            raise PlanNotFound(f"No plan for {user_id} on {plan_date.isoformat()}.")
        return plan

    def list_recent(
        self, user_id: str, limit: int = MAX_SAVED_PLANS
    ) -> list[DailyPlan]:
        """Return recent plans; the limit is clamped to 1..MAX_SAVED_PLANS."""
        return self.repository.list_plans(
            user_id, max(1, min(limit, MAX_SAVED_PLANS))
        )

    def delete_plan(self, user_id: str, plan_date: date) -> None:
        if not self.repository.delete_plan(user_id, plan_date):
            raise PlanNotFound(f"No plan for {user_id} on {plan_date.isoformat()}.")

    def regenerate_slot(self, user_id: str, plan_date: date, slot: str) -> DailyPlan:
        """Refill one slot of a stored plan and persist the result."""
        current = self.get_plan(user_id, plan_date)
        meal_plan = self.planner.regenerate_meal_type(current.meal_plan, slot)
        updated = replace(
            current, meal_plan=meal_plan, generated_at=datetime.now(tz=UTC)
        )
        self.repository.save_plan(user_id, updated)
        return updated
