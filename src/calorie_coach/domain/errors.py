"""Domain errors raised by the calorie engine and meal planner."""


class CalorieCoachError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "calorie_coach_error"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []


class InvalidProfile(CalorieCoachError):
    """Profile is missing biometric fields or has out-of-range values."""

    code = "invalid_profile"


class InvalidActivityLevel(CalorieCoachError):
    """Activity level is not one of the known tiers."""

    code = "invalid_activity_level"


class InvalidGoal(CalorieCoachError):
    """Goal is not one of lose, maintain or gain."""

    code = "invalid_goal"


class UnknownMealSlot(CalorieCoachError):
    """Meal slot name is not breakfast, lunch, dinner or snacks."""

    code = "unknown_meal_slot"


class MissingDistribution(CalorieCoachError):
    """Meal plan has no calorie distribution to regenerate a slot from."""

    code = "missing_distribution"


class CatalogUnavailable(CalorieCoachError):
    """Food catalog is not loaded or is structurally invalid."""

    code = "catalog_unavailable"


class PlanNotFound(CalorieCoachError):
    """No stored daily plan exists for the requested user and date."""

    code = "plan_not_found"
