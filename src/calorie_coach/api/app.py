"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date

from fastapi import FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from calorie_coach.api.schemas import (
    DailyPlanRequest,
    MealPlanIn,
    MealPlanRequest,
    ProfileIn,
    ProgressRequest,
    RegenerateRequest,
    RemoteMealRequest,
    WeightLogIn,
)
from calorie_coach.app_logging import configure_logging
from calorie_coach.containers import AppContainer
from calorie_coach.domain.errors import (
    CalorieCoachError,
    CatalogUnavailable,
    PlanNotFound,
)
from calorie_coach.domain.meals import DailyPlan
from calorie_coach.domain.progress import WeightLog
from calorie_coach.domain.records import daily_plan_to_record, meal_plan_to_record
from calorie_coach.services.calories import (
    build_recommendations,
    calculate_bmi,
    calculate_calories,
    calculate_meal_distribution,
    calculate_time_to_goal,
    calculate_weekly_weight_change,
    get_bmi_category,
    validate_goal,
)
from calorie_coach.services.meal_planner import analyze_meal_plan
from calorie_coach.services.remote_plans import RemotePlanRequest


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(CalorieCoachError)
    async def handle_domain_error(
        request: Request, exc: CalorieCoachError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s: %s", exc.code, exc.message)
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.code, "message": exc.message, "details": exc.details},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/calories")
    async def calories(body: ProfileIn) -> dict[str, object]:
        """Run a profile through the calorie engine."""
        profile = body.to_domain()
        calculation = calculate_calories(profile)
        bmi = calculate_bmi(profile.height, profile.weight)
        return {
            "calculation": asdict(calculation),
            "goal_validation": asdict(validate_goal(profile)),
            "bmi": round(bmi, 1),
            "bmi_category": get_bmi_category(bmi),
            "weekly_weight_change": round(
                calculate_weekly_weight_change(calculation.deficit_or_surplus), 2
            ),
            "weeks_to_goal": calculate_time_to_goal(
                profile, calculation.deficit_or_surplus
            ),
            "meal_distribution": asdict(
                calculate_meal_distribution(calculation.target_calories)
            ),
            "recommendations": build_recommendations(profile, calculation),
        }

    @app.post("/meal-plans")
    async def create_meal_plan(
        body: MealPlanRequest, request: Request
    ) -> dict[str, object]:
        """Generate a local meal plan for a calorie target."""
        state_container: AppContainer = request.app.state.container
        plan = state_container.meal_planner.generate_meal_plan(
            body.target_calories, body.goal, body.plan_date
        )
        return meal_plan_to_record(plan)

    @app.post("/meal-plans/regenerate")
    async def regenerate_meal_plan(
        body: RegenerateRequest, request: Request
    ) -> dict[str, object]:
        """Regenerate one slot, or the whole plan when no slot is given."""
        state_container: AppContainer = request.app.state.container
        planner = state_container.meal_planner
        plan = body.plan.to_domain()
        if body.slot is None:
            return meal_plan_to_record(planner.regenerate_all_meals(plan))
        return meal_plan_to_record(planner.regenerate_meal_type(plan, body.slot))

    @app.post("/meal-plans/analyze")
    async def analyze_plan(body: MealPlanIn) -> dict[str, object]:
        """Summarize a plan against its target and suggest improvements."""
        return asdict(analyze_meal_plan(body.to_domain()))

    @app.post("/api/meal")
    async def remote_meal_plan(
        body: RemoteMealRequest, request: Request
    ) -> dict[str, object]:
        """Generate a plan with the language model, falling back locally."""
        state_container: AppContainer = request.app.state.container
        profile = body.profile.to_domain()
        target = body.target_calories
        if target is None:
            target = calculate_calories(profile).target_calories
        plan = await state_container.remote_planner.generate(
            RemotePlanRequest(
                profile=profile,
                target_calories=target,
                cuisine=body.cuisine,
                prompt=body.prompt,
            )
        )
        return meal_plan_to_record(plan)

    @app.post("/users/{user_id}/plans", status_code=status.HTTP_201_CREATED)
    async def create_daily_plan(
        user_id: str, body: DailyPlanRequest, request: Request
    ) -> dict[str, object]:
        """Calculate, generate and store today's plan for a user."""
        state_container: AppContainer = request.app.state.container
        plan = await state_container.daily_plan_service.create_plan(
            user_id,
            body.profile.to_domain(),
            use_remote=body.use_remote,
            cuisine=body.cuisine,
        )
        return daily_plan_to_record(plan)

    @app.get("/users/{user_id}/plans")
    async def list_daily_plans(
        user_id: str, request: Request, limit: int = Query(10, ge=1)
    ) -> dict[str, object]:
        """Return the user's most recent plans."""
        state_container: AppContainer = request.app.state.container
        plans = state_container.daily_plan_service.list_recent(user_id, limit)
        return {"plans": [_plan_summary(plan) for plan in plans]}

    @app.get("/users/{user_id}/plans/{plan_date}")
    async def get_daily_plan(
        user_id: str, plan_date: date, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        plan = state_container.daily_plan_service.get_plan(user_id, plan_date)
        return daily_plan_to_record(plan)

    @app.delete(
        "/users/{user_id}/plans/{plan_date}",
        status_code=status.HTTP_204_NO_CONTENT,
    )
    async def delete_daily_plan(
        user_id: str, plan_date: date, request: Request
    ) -> None:
        state_container: AppContainer = request.app.state.container
        state_container.daily_plan_service.delete_plan(user_id, plan_date)

    @app.post("/users/{user_id}/plans/{plan_date}/regenerate/{slot}")
    async def regenerate_daily_plan_slot(
        user_id: str, plan_date: date, slot: str, request: Request
    ) -> dict[str, object]:
        """Refill one slot of a stored plan."""
        state_container: AppContainer = request.app.state.container
        plan = state_container.daily_plan_service.regenerate_slot(
            user_id, plan_date, slot
        )
        return daily_plan_to_record(plan)

    @app.post("/users/{user_id}/weights")
    async def add_weigh_in(
        user_id: str, body: WeightLogIn, request: Request
    ) -> dict[str, object]:
        """Record a weigh-in and return the updated history."""
        state_container: AppContainer = request.app.state.container
        logs = state_container.weight_log_service.add_weigh_in(
            user_id, body.to_domain()
        )
        return {"logs": [_weight_log_record(log) for log in logs]}

    @app.get("/users/{user_id}/weights")
    async def list_weigh_ins(user_id: str, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        logs = state_container.weight_log_service.list_logs(user_id)
        return {"logs": [_weight_log_record(log) for log in logs]}

    @app.post("/users/{user_id}/progress")
    async def goal_progress(
        user_id: str, body: ProgressRequest, request: Request
    ) -> dict[str, object]:
        """Return progress towards the profile's target weight."""
        state_container: AppContainer = request.app.state.container
        service = state_container.weight_log_service
        progress = service.get_progress(user_id, body.profile.to_domain(), body.today)
        return {
            "progress": asdict(progress) if progress else None,
            "latest_weight": service.latest_weight(user_id),
        }

    return app


def _status_for(exc: CalorieCoachError) -> int:
    if isinstance(exc, PlanNotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, CatalogUnavailable):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_422_UNPROCESSABLE_ENTITY


def _plan_summary(plan: DailyPlan) -> dict[str, object]:
    return {
        "date": plan.meal_plan.date.isoformat(),
        "target_calories": plan.calorie_calc.target_calories,
        "total_calories": plan.meal_plan.total_calories,
        "goal": plan.profile.goal,
        "source": plan.meal_plan.source,
        "generated_at": plan.generated_at.isoformat(),
    }


def _weight_log_record(log: WeightLog) -> dict[str, object]:
    return {"date": log.date.isoformat(), "weight": log.weight}
