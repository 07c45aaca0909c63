"""Language-model meal plans with a local fallback."""

import asyncio
import json
import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol

from pydantic import ValidationError

from calorie_coach.domain.meals import MEAL_SLOTS, FoodItem, MealPlan
from calorie_coach.domain.profile import UserProfile
from calorie_coach.domain.remote import RemoteMealItem, RemoteMealPlan
from calorie_coach.services.calories import calculate_meal_distribution, round_half_up
from calorie_coach.services.meal_planner import MealPlanService, total_calories

# slots are trimmed in this order when a plan exceeds its target
CLAMP_ORDER = ("snacks", "dinner", "lunch", "breakfast")

SYSTEM_PROMPT = (
    "You are a nutritionist who is strict about JSON structure and safe nutrition."
)

PLAN_JSON_SHAPE = (
    '{"breakfast":[{"name":"","portion":"","calories":0,"protein":0,"carbs":0,'
    '"fat":0}],"lunch":[],"dinner":[],"snacks":[],"totalCalories":0}'
)

_logger = logging.getLogger(__name__)


class MealPlanClient(Protocol):
    """Interface for language-model meal plan completion."""

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        temperature: float,
    ) -> str:
        """Return the raw JSON text produced by the model."""


@dataclass(frozen=True)
class RemotePlanRequest:
    """Inputs for a remote meal plan."""

    profile: UserProfile
    target_calories: int
    cuisine: str = "thai"
    prompt: str | None = None


@dataclass
class RemotePlanService:
    """Requests plans from a language model and falls back to the local planner."""

    client: MealPlanClient | None
    planner: MealPlanService
    model: str
    temperature: float = 0.6
    timeout_seconds: float = 20.0

    async def generate(self, request: RemotePlanRequest) -> MealPlan:
        """Return a remote plan clamped to target, or a local plan on any failure."""
        if self.client is None:
            return self._fallback(request, reason="remote generation disabled")
        prompt = request.prompt or build_prompt(request)
        try:
            text = await asyncio.wait_for(
                self.client.complete(
                    model=self.model,
                    system_prompt=SYSTEM_PROMPT,
                    prompt=prompt,
                    temperature=self.temperature,
                ),
                timeout=self.timeout_seconds,
            )
            remote = RemoteMealPlan.model_validate(json.loads(text or "{}"))
        except TimeoutError:
            _logger.warning(
                "Remote meal plan timed out after %ss", self.timeout_seconds
            )
            return self._fallback(request, reason="timeout")
        except (ValueError, ValidationError) as exc:
            _logger.warning("Remote meal plan was malformed: %s", exc)
            return self._fallback(request, reason="malformed response")
        except Exception:
            _logger.exception("Remote meal plan request failed")
            return self._fallback(request, reason="request failed")

        plan = to_meal_plan(remote, request)
        return clamp_plan_to_target(plan, request.target_calories)

    def _fallback(self, request: RemotePlanRequest, *, reason: str) -> MealPlan:
        _logger.info("Using local meal plan: %s", reason)
        return self.planner.generate_meal_plan(
            request.target_calories, request.profile.goal
        )


def build_prompt(request: RemotePlanRequest) -> str:
    """Build the nutritionist prompt for a profile and calorie target."""
    profile = request.profile
    cuisine = "Thai food" if request.cuisine == "thai" else "any cuisine"
    target = request.target_calories
    return "\n".join(
        [
            f"Plan {cuisine}: 3 meals plus snacks for one day.",
            f"Aim close to {target} kcal and never exceed it (<= {target} kcal).",
            "If the day cannot be filled, leave calories unused rather than exceed.",
            (
                f"User: gender {profile.gender}, age {profile.age}, "
                f"height {profile.height} cm, weight {profile.weight} kg, "
                f"activity {profile.activity_level}, goal {profile.goal}."
            ),
            "Output requirements:",
            "- Reply with JSON only, no other text.",
            f"- JSON shape: {PLAN_JSON_SHAPE}",
            "- totalCalories must equal the sum of every item's calories.",
            f"- totalCalories must not exceed {target}.",
            "- Avoid repeated fried dishes and keep protein adequate.",
            "- Give portions in grams, cups or spoons.",
        ]
    )


def to_meal_plan(remote: RemoteMealPlan, request: RemotePlanRequest) -> MealPlan:
    """Convert a validated model response into a MealPlan."""
    slots = {
        slot: tuple(_to_food_item(item) for item in getattr(remote, slot))
        for slot in MEAL_SLOTS
    }
    return MealPlan(
        date=datetime.now(tz=UTC).date(),
        total_calories=total_calories(slots),
        target_calories=request.target_calories,
        goal=request.profile.goal,
        distribution=calculate_meal_distribution(request.target_calories),
        source="remote",
        **slots,
    )


def clamp_plan_to_target(plan: MealPlan, target_calories: float) -> MealPlan:
    """Scale items down, snacks first, until the plan fits the target."""
    slots = {slot: list(plan.items_for(slot)) for slot in MEAL_SLOTS}
    current = total_calories(slots)
    if current <= target_calories:
        return replace(plan, total_calories=current)

    remaining_cut = current - target_calories
    for slot in CLAMP_ORDER:
        remaining_cut = _reduce_slot(slots[slot], remaining_cut)

    frozen = {slot: tuple(items) for slot, items in slots.items()}
    return replace(plan, total_calories=total_calories(frozen), **frozen)


def scale_item(item: FoodItem, factor: float) -> FoodItem:
    """Scale calories and macros of an item by a non-negative factor."""
    factor = max(0.0, factor)
    return replace(
        item,
        calories=round_half_up(item.calories * factor),
        protein=round(item.protein * factor, 1),
        carbs=round(item.carbs * factor, 1),
        fat=round(item.fat * factor, 1),
    )


def _reduce_slot(items: list[FoodItem], cut: float) -> float:
    """Trim items in place from the last one backwards; return the cut left."""
    for index in range(len(items) - 1, -1, -1):
        if cut <= 1:
            break
        item = items[index]
        if item.calories <= 0:
            continue
        reducible = min(item.calories, cut)
        items[index] = scale_item(item, (item.calories - reducible) / item.calories)
        cut -= reducible
    return max(0.0, cut)


def _to_food_item(item: RemoteMealItem) -> FoodItem:
    return FoodItem(
        name=item.name,
        portion=item.portion,
        calories=round_half_up(item.calories),
        protein=item.protein,
        carbs=item.carbs,
        fat=item.fat,
    )
