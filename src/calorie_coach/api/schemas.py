"""Request bodies accepted by the HTTP API."""

import datetime

from pydantic import BaseModel, Field

from calorie_coach.domain.meals import FoodItem, MealDistribution, MealPlan
from calorie_coach.domain.profile import UserProfile
from calorie_coach.domain.progress import WeightLog


class ProfileIn(BaseModel):
    """Biometric profile; ranges are checked by the calorie engine."""

    gender: str = ""
    age: int | None = None
    weight: float | None = None
    height: float | None = None
    activity_level: str = ""
    goal: str = "maintain"
    target_weight: float | None = None
    timeframe: float | None = Field(default=None, gt=0)

    def to_domain(self) -> UserProfile:
        return UserProfile(**self.model_dump())


class FoodItemIn(BaseModel):
    name: str
    portion: str = ""
    calories: int = 0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    tags: list[str] = Field(default_factory=list)

    def to_domain(self) -> FoodItem:
        return FoodItem(
            name=self.name,
            portion=self.portion,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            tags=tuple(self.tags),
        )


class DistributionIn(BaseModel):
    breakfast: int
    lunch: int
    dinner: int
    snacks: int


class MealPlanIn(BaseModel):
    """A meal plan as previously returned by the API."""

    date: datetime.date
    breakfast: list[FoodItemIn] = Field(default_factory=list)
    lunch: list[FoodItemIn] = Field(default_factory=list)
    dinner: list[FoodItemIn] = Field(default_factory=list)
    snacks: list[FoodItemIn] = Field(default_factory=list)
    total_calories: int = 0
    target_calories: int = 0
    goal: str = "maintain"
    distribution: DistributionIn | None = None
    source: str = "local"

    def to_domain(self) -> MealPlan:
        distribution = None
        if self.distribution is not None:
            distribution = MealDistribution(**self.distribution.model_dump())
        return MealPlan(
            date=self.date,
            breakfast=tuple(item.to_domain() for item in self.breakfast),
            lunch=tuple(item.to_domain() for item in self.lunch),
            dinner=tuple(item.to_domain() for item in self.dinner),
            snacks=tuple(item.to_domain() for item in self.snacks),
            total_calories=self.total_calories,
            target_calories=self.target_calories,
            goal=self.goal,
            distribution=distribution,
            source=self.source,
        )


class MealPlanRequest(BaseModel):
    target_calories: int = Field(gt=0)
    goal: str = "maintain"
    plan_date: datetime.date | None = None


class RegenerateRequest(BaseModel):
    """Plan to regenerate; every slot is refilled when slot is omitted."""

    plan: MealPlanIn
    slot: str | None = None


class RemoteMealRequest(BaseModel):
    """Remote plan request; the target is calculated when omitted."""

    profile: ProfileIn
    target_calories: int | None = Field(default=None, gt=0)
    cuisine: str = "thai"
    prompt: str | None = None


class DailyPlanRequest(BaseModel):
    profile: ProfileIn
    use_remote: bool = False
    cuisine: str = "thai"


class WeightLogIn(BaseModel):
    date: datetime.date
    weight: float = Field(gt=0)

    def to_domain(self) -> WeightLog:
        return WeightLog(date=self.date, weight=self.weight)


class ProgressRequest(BaseModel):
    profile: ProfileIn
    today: datetime.date | None = None
