"""Models for meal plans returned by the language model."""

from pydantic import BaseModel, Field


class RemoteMealItem(BaseModel):
    """Single meal item in a generated plan."""

    name: str
    portion: str = ""
    calories: float
    protein: float
    carbs: float
    fat: float


class RemoteMealPlan(BaseModel):
    """Structured output for a generated day of meals."""

    breakfast: list[RemoteMealItem]
    lunch: list[RemoteMealItem]
    dinner: list[RemoteMealItem]
    snacks: list[RemoteMealItem] = Field(default_factory=list)
    total_calories: float = Field(alias="totalCalories")
