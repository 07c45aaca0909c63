"""Shared test fixtures."""

import asyncio
import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TypeVar

import pytest

from calorie_coach.adapters.memory_repositories import (
    InMemoryDailyPlanRepository,
    InMemoryWeightLogRepository,
)
from calorie_coach.config import Settings
from calorie_coach.containers import AppContainer
from calorie_coach.domain.meals import FoodItem
from calorie_coach.domain.profile import UserProfile
from calorie_coach.services.catalog import FoodCatalog
from calorie_coach.services.meal_planner import MealPlanService
from calorie_coach.services.plans import DailyPlanService
from calorie_coach.services.progress import WeightLogService
from calorie_coach.services.remote_plans import MealPlanClient, RemotePlanService

T = TypeVar("T")


class FirstChoice:
    """Random source that always picks the closest candidate."""

    def choice(self, seq: Sequence[T]) -> T:
        return seq[0]


class LastChoice:
    """Random source that always picks the furthest of the candidates."""

    def choice(self, seq: Sequence[T]) -> T:
        return seq[-1]


def food(name: str, calories: int, *tags: str) -> FoodItem:
    return FoodItem(
        name=name,
        portion="1 serving",
        calories=calories,
        protein=10.0,
        carbs=20.0,
        fat=5.0,
        tags=tags,
    )


SMALL_CATALOG = FoodCatalog.from_items(
    {
        "breakfast": [
            food("Boiled eggs", 140, "protein", "light"),
            food("Jok moo", 220, "protein", "light"),
            food("Khao man kai", 580, "protein", "carbohydrate"),
            food("Patongo", 360, "carbohydrate"),
        ],
        "lunch": [
            food("Som tam", 120, "vegetable", "fiber", "light"),
            food("Kai yang", 250, "protein"),
            food("Kaphrao kai", 520, "protein", "carbohydrate"),
            food("Sticky rice", 170, "carbohydrate"),
        ],
        "dinner": [
            food("Pla phao", 320, "protein", "vegetable"),
            food("Yam woon sen", 200, "vegetable", "light"),
            food("Steamed rice", 240, "carbohydrate"),
        ],
        "snacks": [
            food("Banana", 90, "fruit", "carbohydrate"),
            food("Yogurt", 100, "protein", "light"),
            food("Peanuts", 160, "protein", "healthy-fat"),
        ],
    }
)

REMOTE_PLAN_PAYLOAD = {
    "breakfast": [
        {
            "name": "Jok moo",
            "portion": "1 bowl",
            "calories": 400,
            "protein": 20,
            "carbs": 50,
            "fat": 10,
        }
    ],
    "lunch": [
        {
            "name": "Khao man kai",
            "portion": "1 plate",
            "calories": 700,
            "protein": 30,
            "carbs": 80,
            "fat": 25,
        }
    ],
    "dinner": [
        {
            "name": "Tom yum goong",
            "portion": "1 bowl",
            "calories": 600,
            "protein": 35,
            "carbs": 30,
            "fat": 20,
        },
        {
            "name": "Steamed rice",
            "portion": "1 plate",
            "calories": 200,
            "protein": 4,
            "carbs": 45,
            "fat": 0.5,
        },
    ],
    "snacks": [
        {
            "name": "Mango sticky rice",
            "portion": "1 plate",
            "calories": 300,
            "protein": 4,
            "carbs": 60,
            "fat": 7,
        },
        {
            "name": "Banana",
            "portion": "1 fruit",
            "calories": 100,
            "protein": 1,
            "carbs": 25,
            "fat": 0,
        },
    ],
    "totalCalories": 2300,
}


@dataclass
class FakeMealPlanClient(MealPlanClient):
    """Fake language-model client returning canned text or raising."""

    text: str = field(default_factory=lambda: json.dumps(REMOTE_PLAN_PAYLOAD))
    error: Exception | None = None
    delay_seconds: float = 0.0
    prompts: list[str] = field(default_factory=list)

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        temperature: float,
    ) -> str:
        self.prompts.append(prompt)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return self.text


def make_profile(**overrides: object) -> UserProfile:
    values: dict[str, object] = {
        "gender": "male",
        "age": 25,
        "weight": 70.0,
        "height": 170.0,
        "activity_level": "moderate",
        "goal": "maintain",
    }
    values.update(overrides)
    return UserProfile(**values)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        openai_api_key=None,
        supabase_url=None,
        supabase_service_key=None,
        catalog_path=None,
        random_seed=7,
    )


@pytest.fixture
def meal_planner() -> MealPlanService:
    return MealPlanService(catalog=SMALL_CATALOG, rng=FirstChoice())


@pytest.fixture
def meal_plan_client() -> FakeMealPlanClient:
    return FakeMealPlanClient()


@pytest.fixture
def plan_repository() -> InMemoryDailyPlanRepository:
    return InMemoryDailyPlanRepository()


@pytest.fixture
def weight_repository() -> InMemoryWeightLogRepository:
    return InMemoryWeightLogRepository()


@pytest.fixture
def container(
    settings: Settings,
    meal_planner: MealPlanService,
    meal_plan_client: FakeMealPlanClient,
    plan_repository: InMemoryDailyPlanRepository,
    weight_repository: InMemoryWeightLogRepository,
) -> AppContainer:
    remote_planner = RemotePlanService(
        client=meal_plan_client,
        planner=meal_planner,
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        timeout_seconds=settings.remote_timeout_seconds,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        catalog=SMALL_CATALOG,
        meal_planner=meal_planner,
        remote_planner=remote_planner,
        daily_plan_service=DailyPlanService(
            repository=plan_repository,
            planner=meal_planner,
            remote_planner=remote_planner,
        ),
        weight_log_service=WeightLogService(weight_repository),
        close_resources=close_resources,
    )
