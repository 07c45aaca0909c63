"""Domain models for foods and meal plans."""

from dataclasses import dataclass, field
from datetime import date, datetime

from calorie_coach.domain.profile import CalorieCalculation, UserProfile

MEAL_SLOTS = ("breakfast", "lunch", "dinner", "snacks")


@dataclass(frozen=True)
class FoodItem:
    """Catalog entry or generated meal item."""

    name: str
    portion: str
    calories: int
    protein: float
    carbs: float
    fat: float
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class MealDistribution:
    """Calorie sub-budget for each meal slot."""

    breakfast: int
    lunch: int
    dinner: int
    snacks: int

    def for_slot(self, slot: str) -> int:
        return getattr(self, slot)

    @property
    def total(self) -> int:
        return self.breakfast + self.lunch + self.dinner + self.snacks


@dataclass(frozen=True)
class MealPlan:
    """A single day of meals split by slot."""

    date: date
    breakfast: tuple[FoodItem, ...]
    lunch: tuple[FoodItem, ...]
    dinner: tuple[FoodItem, ...]
    snacks: tuple[FoodItem, ...]
    total_calories: int
    target_calories: int
    goal: str
    distribution: MealDistribution | None = None
    source: str = "local"

    def items_for(self, slot: str) -> tuple[FoodItem, ...]:
        return getattr(self, slot)

    def all_items(self) -> list[FoodItem]:
        return [item for slot in MEAL_SLOTS for item in self.items_for(slot)]


@dataclass(frozen=True)
class PlanSummary:
    """Totals of a meal plan compared with its target."""

    total_calories: int
    target_calories: int
    difference_pct: int
    status: str
    total_meals: int
    counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class NutritionalBalance:
    """Count of plan items carrying each nutrition tag."""

    protein: int
    carbohydrate: int
    vegetable: int
    fiber: int
    vitamin: int


@dataclass(frozen=True)
class PlanAnalysis:
    """Summary, balance and follow-up advice for a meal plan."""

    summary: PlanSummary
    balance: NutritionalBalance
    recommendations: list[str]


@dataclass(frozen=True)
class DailyPlan:
    """Profile, calculation and meal plan persisted together for a day."""

    profile: UserProfile
    calorie_calc: CalorieCalculation
    meal_plan: MealPlan
    generated_at: datetime
