"""Calorie engine: BMR, TDEE, goal-adjusted targets and derived metrics."""

import logging
import math

from calorie_coach.domain.errors import (
    InvalidActivityLevel,
    InvalidGoal,
    InvalidProfile,
)
from calorie_coach.domain.meals import MealDistribution
from calorie_coach.domain.profile import (
    GENDERS,
    GOALS,
    CalorieCalculation,
    GoalValidation,
    MacroBreakdown,
    UserProfile,
)

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very-active": 1.9,
}

KCAL_PER_KG = 7700
MAX_DAILY_DELTA = 1000
DEFAULT_DAILY_DELTA = 500
MIN_TARGET_CALORIES = 1200
LOSE_BMR_FLOOR_FACTOR = 1.2
MAX_SAFE_WEEKLY_CHANGE_KG = 1.0

# protein/carbs/fat share of target calories and kcal per gram
MACRO_SPLIT = {"protein": (0.30, 4), "carbs": (0.45, 4), "fat": (0.25, 9)}

MEAL_SHARES = {"breakfast": 0.25, "lunch": 0.35, "dinner": 0.30, "snacks": 0.10}

AGE_RANGE = (15, 100)
HEIGHT_RANGE = (100, 250)
WEIGHT_RANGE = (30, 300)

SENIOR_AGE = 50
YOUNG_ADULT_AGE = 25

GOAL_ADVICE = {
    "lose": "Favour grilled, steamed and boiled dishes with protein at every meal.",
    "maintain": "Keep meals regular and balanced with protein and vegetables.",
    "gain": "Eat four to five times a day and add protein-rich snacks.",
}

_logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)


def validate_profile(profile: UserProfile) -> list[str]:
    """Return every range or enum problem found in a profile."""
    errors: list[str] = []
    if not _in_range(profile.age, AGE_RANGE):
        errors.append("Age must be between 15 and 100 years.")
    if profile.gender not in GENDERS:
        errors.append("Gender must be male or female.")
    if not _in_range(profile.height, HEIGHT_RANGE):
        errors.append("Height must be between 100 and 250 cm.")
    if not _in_range(profile.weight, WEIGHT_RANGE):
        errors.append("Weight must be between 30 and 300 kg.")
    if profile.activity_level not in ACTIVITY_MULTIPLIERS:
        errors.append("Activity level is not recognised.")
    if profile.goal not in GOALS:
        errors.append("Goal must be lose, maintain or gain.")
    if profile.target_weight is not None and not _in_range(
        profile.target_weight, WEIGHT_RANGE
    ):
        errors.append("Target weight must be between 30 and 300 kg.")
    if _has_invalid_timeframe(profile):
        errors.append("Timeframe must be a positive number of weeks.")
    return errors


def calculate_bmr(profile: UserProfile) -> int:
    """Mifflin-St Jeor basal metabolic rate in kcal/day."""
    if not (profile.age and profile.gender and profile.height and profile.weight):
        raise InvalidProfile("Age, gender, height and weight are required for BMR.")
    base = 10 * profile.weight + 6.25 * profile.height - 5 * profile.age
    if profile.gender == "male":
        return round_half_up(base + 5)
    return round_half_up(base - 161)


def calculate_tdee(bmr: float, activity_level: str) -> int:
    """Total daily energy expenditure for an activity tier."""
    multiplier = ACTIVITY_MULTIPLIERS.get(activity_level)
    if multiplier is None:
        raise InvalidActivityLevel(f"Unknown activity level: {activity_level!r}")
    return round_half_up(bmr * multiplier)


def calculate_target_calories(profile: UserProfile, tdee: int) -> CalorieCalculation:
    """Apply the goal deficit or surplus to a TDEE and derive macros."""
    if profile.goal not in GOALS:
        raise InvalidGoal(f"Unknown goal: {profile.goal!r}")
    bmr = calculate_bmr(profile)

    delta = 0
    if profile.goal != "maintain":
        magnitude = DEFAULT_DAILY_DELTA
        if profile.has_weight_target:
            change = profile.weight - profile.target_weight
            if profile.goal != "lose":
                change = -change
            weekly_change = change / profile.timeframe
            daily_delta = weekly_change * KCAL_PER_KG / 7
            magnitude = round_half_up(min(abs(daily_delta), MAX_DAILY_DELTA))
        delta = -magnitude if profile.goal == "lose" else magnitude

    target: float = tdee + delta
    if profile.goal == "lose":
        target = max(target, bmr * LOSE_BMR_FLOOR_FACTOR)
    target_calories = max(round_half_up(target), MIN_TARGET_CALORIES)

    return CalorieCalculation(
        bmr=bmr,
        tdee=tdee,
        target_calories=target_calories,
        deficit_or_surplus=delta,
        macro_breakdown=calculate_macros(target_calories),
    )


def calculate_macros(target_calories: float) -> MacroBreakdown:
    """Split target calories into protein, carbs and fat grams."""
    grams = {
        name: round_half_up(target_calories * share / kcal_per_gram)
        for name, (share, kcal_per_gram) in MACRO_SPLIT.items()
    }
    return MacroBreakdown(**grams)


def calculate_calories(profile: UserProfile) -> CalorieCalculation:
    """Validate a profile and run it through BMR, TDEE and target steps."""
    errors = validate_profile(profile)
    if errors:
        raise InvalidProfile("Profile is invalid.", details=errors)
    bmr = calculate_bmr(profile)
    tdee = calculate_tdee(bmr, profile.activity_level)
    calculation = calculate_target_calories(profile, tdee)
    _logger.info(
        "Calories calculated: goal=%s bmr=%s tdee=%s target=%s",
        profile.goal,
        calculation.bmr,
        calculation.tdee,
        calculation.target_calories,
    )
    return calculation


def validate_goal(profile: UserProfile) -> GoalValidation:
    """Check that a weight target is reachable at a safe weekly rate."""
    if _has_invalid_timeframe(profile):
        return GoalValidation(
            is_valid=False, message="Timeframe must be a positive number of weeks."
        )
    if not profile.has_weight_target:
        return GoalValidation(is_valid=True)
    weekly_change = abs(profile.weight - profile.target_weight) / profile.timeframe
    if weekly_change > MAX_SAFE_WEEKLY_CHANGE_KG:
        return GoalValidation(
            is_valid=False,
            message=(
                f"A change of {weekly_change:.1f} kg/week may be unsafe "
                "(keep it at or below 1 kg/week)."
            ),
        )
    if profile.goal == "lose" and profile.target_weight >= profile.weight:
        return GoalValidation(
            is_valid=False,
            message="Target weight for weight loss must be below current weight.",
        )
    if profile.goal == "gain" and profile.target_weight <= profile.weight:
        return GoalValidation(
            is_valid=False,
            message="Target weight for weight gain must be above current weight.",
        )
    return GoalValidation(is_valid=True)


def calculate_time_to_goal(
    profile: UserProfile, daily_deficit_or_surplus: float
) -> int:
    """Weeks needed to reach the target weight at the given daily delta."""
    if profile.goal == "maintain" or not profile.target_weight:
        return 0
    weekly_kg = abs(daily_deficit_or_surplus) / KCAL_PER_KG * 7
    if not weekly_kg:
        return 0
    return math.ceil(abs(profile.weight - profile.target_weight) / weekly_kg)


def calculate_weekly_weight_change(daily_deficit_or_surplus: float) -> float:
    """Expected weight change in kg/week; negative means loss."""
    return daily_deficit_or_surplus * 7 / KCAL_PER_KG


def calculate_bmi(height: float, weight: float) -> float:
    """Body mass index rounded to one decimal."""
    if not height:
        return 0.0
    height_m = height / 100
    return round_half_up(weight / (height_m * height_m) * 10) / 10


def get_bmi_category(bmi: float) -> str:
    if bmi < 18.5:  # noqa: PLR2004
        return "underweight"
    if bmi < 25:  # noqa: PLR2004
        return "normal"
    if bmi < 30:  # noqa: PLR2004
        return "overweight"
    return "obese"


def build_recommendations(
    profile: UserProfile, calculation: CalorieCalculation
) -> list[str]:
    """Advice for a calculation, tailored to goal, BMI category and age."""
    advice = [GOAL_ADVICE.get(profile.goal, GOAL_ADVICE["maintain"])]
    category = get_bmi_category(calculate_bmi(profile.height, profile.weight))
    if category == "underweight":
        advice.append("Your BMI is below the healthy range; add food and protein.")
    elif category == "obese":
        advice.append(
            "Your BMI is high; watch portion sizes and add regular exercise."
        )
    if profile.age >= SENIOR_AGE:
        advice.append("At your age, prioritise calcium and vitamin D.")
    elif profile.age <= YOUNG_ADULT_AGE:
        advice.append("Good eating habits built now pay off in the long run.")
    weeks = calculate_time_to_goal(profile, calculation.deficit_or_surplus)
    if weeks:
        advice.append(
            "Following the plan consistently, expect to reach your goal "
            f"in about {weeks} weeks."
        )
    else:
        advice.append("Track your results and adjust the plan as needed.")
    return advice


def calculate_meal_distribution(target_calories: float) -> MealDistribution:
    """Split daily calories into per-slot sub-budgets."""
    return MealDistribution(
        **{
            slot: round_half_up(target_calories * share)
            for slot, share in MEAL_SHARES.items()
        }
    )


def _in_range(value: float | None, bounds: tuple[int, int]) -> bool:
    if value is None:
        return False
    low, high = bounds
    return low <= value <= high


def _has_invalid_timeframe(profile: UserProfile) -> bool:
    """A target weight given with a zero or negative number of weeks."""
    return bool(profile.target_weight) and (
        profile.timeframe is not None and profile.timeframe <= 0
    )
