"""In-memory repositories used when no Supabase project is configured."""

from dataclasses import dataclass, field
from datetime import date

from calorie_coach.domain.meals import DailyPlan
from calorie_coach.domain.progress import WeightLog
from calorie_coach.services.plans import DailyPlanRepository
from calorie_coach.services.progress import WeightLogRepository


@dataclass
class InMemoryDailyPlanRepository(DailyPlanRepository):
    """Process-local plan store keyed by user id and plan date."""

    plans: dict[tuple[str, date], DailyPlan] = field(default_factory=dict)

    def save_plan(self, user_id: str, plan: DailyPlan) -> None:
        self.plans[(user_id, plan.meal_plan.date)] = plan

    def get_plan(self, user_id: str, plan_date: date) -> DailyPlan | None:
        return self.plans.get((user_id, plan_date))

    def list_plans(self, user_id: str, limit: int) -> list[DailyPlan]:
        owned = [plan for (owner, _), plan in self.plans.items() if owner == user_id]
        owned.sort(key=lambda plan: plan.meal_plan.date, reverse=True)
        return owned[:limit]

    def delete_plan(self, user_id: str, plan_date: date) -> bool:
        return self.plans.pop((user_id, plan_date), None) is not None


@dataclass
class InMemoryWeightLogRepository(WeightLogRepository):
    """Process-local weigh-in store; one entry per user and date."""

    logs: dict[str, dict[date, WeightLog]] = field(default_factory=dict)

    def list_logs(self, user_id: str) -> list[WeightLog]:
        return list(self.logs.get(user_id, {}).values())

    def upsert_log(self, user_id: str, log: WeightLog) -> None:
        self.logs.setdefault(user_id, {})[log.date] = log
