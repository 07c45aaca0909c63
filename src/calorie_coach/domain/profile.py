"""Domain models for user profiles and calorie calculations."""

from dataclasses import dataclass

GENDERS = ("male", "female")
GOALS = ("lose", "maintain", "gain")


@dataclass(frozen=True)
class UserProfile:
    """Biometric profile submitted by a user."""

    gender: str
    age: int
    weight: float
    height: float
    activity_level: str
    goal: str
    target_weight: float | None = None
    timeframe: float | None = None

    @property
    def has_weight_target(self) -> bool:
        """Return True when there is a target weight and a positive timeframe."""
        return bool(self.target_weight) and (self.timeframe or 0) > 0


@dataclass(frozen=True)
class MacroBreakdown:
    """Daily macronutrient targets in grams."""

    protein: int
    carbs: int
    fat: int


@dataclass(frozen=True)
class CalorieCalculation:
    """Result of running a profile through the calorie engine."""

    bmr: int
    tdee: int
    target_calories: int
    deficit_or_surplus: int
    macro_breakdown: MacroBreakdown


@dataclass(frozen=True)
class GoalValidation:
    """Advisory result of checking a weight goal for safety."""

    is_valid: bool
    message: str | None = None
