"""Dependency container wiring for the application."""

import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_coach.adapters.memory_repositories import (
    InMemoryDailyPlanRepository,
    InMemoryWeightLogRepository,
)
from calorie_coach.adapters.openai_meal_client import OpenAIMealPlanClient
from calorie_coach.adapters.supabase_plan_repository import SupabaseDailyPlanRepository
from calorie_coach.adapters.supabase_weight_repository import (
    SupabaseWeightLogRepository,
)
from calorie_coach.config import Settings
from calorie_coach.services.catalog import FoodCatalog, load_catalog
from calorie_coach.services.meal_planner import MealPlanService
from calorie_coach.services.plans import DailyPlanRepository, DailyPlanService
from calorie_coach.services.progress import WeightLogRepository, WeightLogService
from calorie_coach.services.remote_plans import RemotePlanService

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog: FoodCatalog
    meal_planner: MealPlanService
    remote_planner: RemotePlanService
    daily_plan_service: DailyPlanService
    weight_log_service: WeightLogService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    catalog = load_catalog(resolved_settings.catalog_path)
    meal_planner = MealPlanService(
        catalog=catalog, rng=random.Random(resolved_settings.random_seed)
    )

    openai_client = None
    if resolved_settings.remote_enabled:
        openai_client = OpenAIMealPlanClient.create(
            api_key=resolved_settings.openai_api_key,
            timeout_seconds=resolved_settings.remote_timeout_seconds,
        )
    remote_planner = RemotePlanService(
        client=openai_client,
        planner=meal_planner,
        model=resolved_settings.openai_model,
        temperature=resolved_settings.openai_temperature,
        timeout_seconds=resolved_settings.remote_timeout_seconds,
    )

    plan_repository, weight_repository = _build_repositories(resolved_settings)

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog=catalog,
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


def _build_repositories(
    settings: Settings,
) -> tuple[DailyPlanRepository, WeightLogRepository]:
    if settings.supabase_enabled:
        supabase_client = create_client(
            settings.supabase_url, settings.supabase_service_key
        )
        return (
            SupabaseDailyPlanRepository(supabase_client),
            SupabaseWeightLogRepository(supabase_client),
        )
    _logger.info("Supabase is not configured; using in-memory repositories")
    return InMemoryDailyPlanRepository(), InMemoryWeightLogRepository()
