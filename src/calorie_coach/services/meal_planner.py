"""Meal plan generation from a calorie target and a food catalog."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from typing import Protocol, TypeVar

from calorie_coach.domain.errors import (
    CatalogUnavailable,
    MissingDistribution,
    UnknownMealSlot,
)
from calorie_coach.domain.meals import (
    MEAL_SLOTS,
    FoodItem,
    MealPlan,
    NutritionalBalance,
    PlanAnalysis,
    PlanSummary,
)
from calorie_coach.services.calories import calculate_meal_distribution, round_half_up

MAIN_ITEM_SHARE = 0.75
MIN_REMAINING_CALORIES = 50
MAX_ITEMS_PER_SLOT = 3
TOP_CANDIDATES = 3
FALLBACK_TOLERANCE = 1.2

LOSE_TAGS = frozenset({"vegetable", "fiber", "protein", "light"})
GAIN_TAGS = frozenset({"protein", "carbohydrate"})
LOSE_CALORIE_CEILING = 300
GAIN_CALORIE_FLOOR = 300

ON_TARGET_PCT = 5
ADVICE_PCT = 10
MIN_TAGGED_ITEMS = 2

T = TypeVar("T")

_logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Source of randomness for picking among candidate items."""

    def choice(self, seq: Sequence[T]) -> T:
        """Return one element of a non-empty sequence."""


def is_food_suitable_for_goal(food: FoodItem, goal: str) -> bool:
    """Return True when a food fits the dietary direction of a goal."""
    tags = set(food.tags)
    if goal == "lose":
        return bool(tags & LOSE_TAGS) or food.calories < LOSE_CALORIE_CEILING
    if goal in {"gain", "muscle"}:
        return bool(tags & GAIN_TAGS) or food.calories >= GAIN_CALORIE_FLOOR
    return True


def find_closest_calorie_foods(
    foods: Sequence[FoodItem], target_calories: float, count: int = TOP_CANDIDATES
) -> list[FoodItem]:
    """Return up to ``count`` foods ordered by distance from the target."""
    ranked = sorted(foods, key=lambda food: abs(food.calories - target_calories))
    return ranked[:count]


def total_calories(plan_slots: Mapping[str, Sequence[FoodItem]]) -> int:
    return sum(item.calories for slot in MEAL_SLOTS for item in plan_slots[slot])


@dataclass
class MealPlanService:
    """Fills meal slots from a read-only catalog using an injected RNG."""

    catalog: Mapping[str, Sequence[FoodItem]] | None
    rng: RandomSource

    def generate_meal_plan(
        self,
        target_calories: int,
        goal: str = "maintain",
        plan_date: date | None = None,
    ) -> MealPlan:
        """Create a full day plan for a target and goal."""
        self._require_catalog()
        distribution = calculate_meal_distribution(target_calories)
        slots = {
            slot: tuple(
                self.select_meals_for_calories(
                    slot, distribution.for_slot(slot), goal
                )
            )
            for slot in MEAL_SLOTS
        }
        plan = MealPlan(
            date=plan_date or datetime.now(tz=UTC).date(),
            total_calories=total_calories(slots),
            target_calories=target_calories,
            goal=goal,
            distribution=distribution,
            **slots,
        )
        _logger.info(
            "Meal plan generated: target=%s goal=%s total=%s",
            target_calories,
            goal,
            plan.total_calories,
        )
        return plan

    def select_meals_for_calories(
        self, slot: str, sub_budget: float, goal: str
    ) -> list[FoodItem]:
        """Pick a main item plus up to two supplements for one slot."""
        available = self._slot_items(slot)
        if not available:
            return []

        selected: list[FoodItem] = []
        used: set[str] = set()
        remaining = sub_budget

        main_target = round_half_up(sub_budget * MAIN_ITEM_SHARE)
        main = self.select_single_meal(available, main_target, goal, used)
        if main is not None:
            selected.append(main)
            used.add(main.name)
            remaining -= main.calories

        while remaining > MIN_REMAINING_CALORIES and len(selected) < MAX_ITEMS_PER_SLOT:
            supplement = self.select_single_meal(
                available, remaining, goal, used, is_supplement=True
            )
            if supplement is None:
                break
            selected.append(supplement)
            used.add(supplement.name)
            remaining -= supplement.calories

        return selected

    def select_single_meal(  # noqa: PLR0913
        self,
        foods: Sequence[FoodItem],
        target_calories: float,
        goal: str,
        used: set[str] | None = None,
        is_supplement: bool = False,
    ) -> FoodItem | None:
        """Pick one food near a calorie target, or None if nothing fits."""
        used = used or set()
        available = [food for food in foods if food.name not in used]
        if not available:
            return None

        candidates = [
            food for food in available if is_food_suitable_for_goal(food, goal)
        ]
        if is_supplement:
            candidates = [
                food for food in candidates if food.calories <= target_calories
            ]
        if not candidates:
            ceiling = target_calories * FALLBACK_TOLERANCE
            candidates = [food for food in available if food.calories <= ceiling]
        if not candidates:
            return None

        return self.rng.choice(find_closest_calorie_foods(candidates, target_calories))

    def regenerate_meal_type(self, plan: MealPlan, slot: str) -> MealPlan:
        """Refill one slot, keeping the other slots and distribution."""
        if slot not in MEAL_SLOTS:
            raise UnknownMealSlot(f"Unknown meal slot: {slot!r}")
        if plan.distribution is None or not plan.distribution.for_slot(slot):
            raise MissingDistribution(f"Plan has no calorie budget for {slot}.")
        self._require_catalog()
        items = tuple(
            self.select_meals_for_calories(
                slot, plan.distribution.for_slot(slot), plan.goal
            )
        )
        slots = {name: plan.items_for(name) for name in MEAL_SLOTS}
        slots[slot] = items
        return replace(plan, total_calories=total_calories(slots), **{slot: items})

    def regenerate_all_meals(self, plan: MealPlan) -> MealPlan:
        """Regenerate every slot with the plan's target and goal."""
        return self.generate_meal_plan(plan.target_calories, plan.goal, plan.date)

    def _slot_items(self, slot: str) -> Sequence[FoodItem]:
        if slot not in MEAL_SLOTS:
            raise UnknownMealSlot(f"Unknown meal slot: {slot!r}")
        self._require_catalog()
        return self.catalog.get(slot) or ()

    def _require_catalog(self) -> None:
        if self.catalog is None:
            raise CatalogUnavailable("Food catalog is not loaded.")


def analyze_meal_plan(plan: MealPlan) -> PlanAnalysis:
    """Compare a plan against its target and count nutrition tags."""
    summary = _summarize(plan)
    balance = _balance(plan)
    recommendations: list[str] = []
    if summary.difference_pct > ADVICE_PCT:
        recommendations.append(
            "Calories are above target; choose smaller portions or lighter dishes."
        )
    elif summary.difference_pct < -ADVICE_PCT:
        recommendations.append(
            "Calories are below target; add a portion or a more filling dish."
        )
    if balance.protein < MIN_TAGGED_ITEMS:
        recommendations.append(
            "Add more protein such as fish, eggs, chicken or tofu."
        )
    if balance.vegetable < MIN_TAGGED_ITEMS:
        recommendations.append("Add more vegetables for fibre and vitamins.")
    return PlanAnalysis(
        summary=summary, balance=balance, recommendations=recommendations
    )


def calorie_difference_pct(actual: float, target: float) -> int:
    if target == 0:
        return 0
    return round_half_up((actual - target) / target * 100)


def _summarize(plan: MealPlan) -> PlanSummary:
    counts = {slot: len(plan.items_for(slot)) for slot in MEAL_SLOTS}
    total = sum(item.calories for item in plan.all_items())
    difference = calorie_difference_pct(total, plan.target_calories)
    if difference > ON_TARGET_PCT:
        status = "over_target"
    elif difference < -ON_TARGET_PCT:
        status = "under_target"
    else:
        status = "on_target"
    return PlanSummary(
        total_calories=total,
        target_calories=plan.target_calories,
        difference_pct=difference,
        status=status,
        total_meals=sum(counts.values()),
        counts=counts,
    )


def _balance(plan: MealPlan) -> NutritionalBalance:
    tag_counts: dict[str, int] = {}
    for item in plan.all_items():
        for tag in item.tags:
            tag_counts[tag] = tag_counts.get(tag, 0) + 1
    return NutritionalBalance(
        protein=tag_counts.get("protein", 0),
        carbohydrate=tag_counts.get("carbohydrate", 0),
        vegetable=tag_counts.get("vegetable", 0),
        fiber=tag_counts.get("fiber", 0),
        vitamin=tag_counts.get("vitamin", 0),
    )
