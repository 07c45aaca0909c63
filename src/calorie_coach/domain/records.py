"""Conversion between domain models and JSON-compatible records."""

from dataclasses import asdict
from datetime import date, datetime

from calorie_coach.domain.meals import (
    MEAL_SLOTS,
    DailyPlan,
    FoodItem,
    MealDistribution,
    MealPlan,
)
from calorie_coach.domain.profile import CalorieCalculation, MacroBreakdown, UserProfile


def food_item_to_record(item: FoodItem) -> dict[str, object]:
    return {
        "name": item.name,
        "portion": item.portion,
        "calories": item.calories,
        "protein": item.protein,
        "carbs": item.carbs,
        "fat": item.fat,
        "tags": list(item.tags),
    }


def meal_plan_to_record(plan: MealPlan) -> dict[str, object]:
    """Serialize a meal plan with ISO dates and list-valued slots."""
    record: dict[str, object] = {
        "date": plan.date.isoformat(),
        "total_calories": plan.total_calories,
        "target_calories": plan.target_calories,
        "goal": plan.goal,
        "distribution": asdict(plan.distribution) if plan.distribution else None,
        "source": plan.source,
    }
    for slot in MEAL_SLOTS:
        record[slot] = [food_item_to_record(item) for item in plan.items_for(slot)]
    return record


def daily_plan_to_record(plan: DailyPlan) -> dict[str, object]:
    return {
        "profile": asdict(plan.profile),
        "calorie_calc": asdict(plan.calorie_calc),
        "meal_plan": meal_plan_to_record(plan.meal_plan),
        "generated_at": plan.generated_at.isoformat(),
    }


def food_item_from_record(record: dict[str, object]) -> FoodItem:
    return FoodItem(
        name=str(record.get("name", "")),
        portion=str(record.get("portion", "")),
        calories=int(record.get("calories", 0)),
        protein=float(record.get("protein", 0.0)),
        carbs=float(record.get("carbs", 0.0)),
        fat=float(record.get("fat", 0.0)),
        tags=tuple(record.get("tags") or ()),
    )


def meal_plan_from_record(record: dict[str, object]) -> MealPlan:
    """Rebuild a meal plan from its serialized form."""
    distribution = record.get("distribution")
    slots = {
        slot: tuple(food_item_from_record(item) for item in record.get(slot) or [])
        for slot in MEAL_SLOTS
    }
    return MealPlan(
        date=date.fromisoformat(str(record["date"])),
        total_calories=int(record.get("total_calories", 0)),
        target_calories=int(record.get("target_calories", 0)),
        goal=str(record.get("goal", "maintain")),
        distribution=MealDistribution(**distribution) if distribution else None,
        source=str(record.get("source", "local")),
        **slots,
    )


def daily_plan_from_record(record: dict[str, object]) -> DailyPlan:
    calc = dict(record["calorie_calc"])
    calc["macro_breakdown"] = MacroBreakdown(**calc["macro_breakdown"])
    return DailyPlan(
        profile=UserProfile(**record["profile"]),
        calorie_calc=CalorieCalculation(**calc),
        meal_plan=meal_plan_from_record(record["meal_plan"]),
        generated_at=datetime.fromisoformat(str(record["generated_at"])),
    )
