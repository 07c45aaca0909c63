"""Tests for record serialization of plans."""

import asyncio
import json

from calorie_coach.containers import AppContainer
from calorie_coach.domain.records import (
    daily_plan_from_record,
    daily_plan_to_record,
    meal_plan_from_record,
)
from tests.conftest import make_profile


def test_daily_plan_record_is_json_compatible(container: AppContainer) -> None:
    plan = asyncio.run(
        container.daily_plan_service.create_plan(
            "user-1", make_profile(goal="lose", target_weight=65.0, timeframe=12)
        )
    )

    record = json.loads(json.dumps(daily_plan_to_record(plan)))

    assert record["meal_plan"]["date"] == plan.meal_plan.date.isoformat()
    assert record["calorie_calc"]["macro_breakdown"]["protein"] == 157
    assert record["meal_plan"]["breakfast"][0]["tags"]
    assert daily_plan_from_record(record) == plan


def test_meal_plan_record_tolerates_missing_optional_fields() -> None:
    plan = meal_plan_from_record({"date": "2026-01-05", "lunch": [{"name": "Som tam"}]})

    assert plan.lunch[0].name == "Som tam"
    assert plan.lunch[0].calories == 0
    assert plan.distribution is None
    assert plan.source == "local"
