"""Tests for the HTTP API."""

from dataclasses import replace

from fastapi.testclient import TestClient

from calorie_coach.api.app import create_app
from calorie_coach.containers import AppContainer
from calorie_coach.services.meal_planner import MealPlanService

PROFILE = {
    "gender": "male",
    "age": 25,
    "weight": 70,
    "height": 170,
    "activity_level": "moderate",
    "goal": "lose",
    "target_weight": 65,
    "timeframe": 12,
}


def _client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def test_health(container: AppContainer) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_calories_endpoint(container: AppContainer) -> None:
    response = _client(container).post("/calories", json=PROFILE)

    assert response.status_code == 200
    body = response.json()
    assert body["calculation"]["bmr"] == 1643
    assert body["calculation"]["target_calories"] == 2089
    assert body["calculation"]["macro_breakdown"] == {
        "protein": 157,
        "carbs": 235,
        "fat": 58,
    }
    assert body["goal_validation"]["is_valid"] is True
    assert body["bmi"] == 24.2
    assert body["bmi_category"] == "normal"
    assert body["weekly_weight_change"] == -0.42
    assert body["weeks_to_goal"] == 13
    assert body["meal_distribution"]["lunch"] == 731
    assert body["recommendations"][-1].endswith("in about 13 weeks.")


def test_calories_endpoint_rejects_invalid_profile(container: AppContainer) -> None:
    response = _client(container).post(
        "/calories", json={**PROFILE, "age": 12, "gender": "other"}
    )

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "invalid_profile"
    assert len(body["details"]) == 2


def test_meal_plan_endpoints(container: AppContainer) -> None:
    client = _client(container)

    created = client.post(
        "/meal-plans",
        json={"target_calories": 2000, "goal": "maintain", "plan_date": "2026-01-05"},
    )
    plan = created.json()
    analyzed = client.post("/meal-plans/analyze", json=plan)
    regenerated = client.post(
        "/meal-plans/regenerate", json={"plan": plan, "slot": "snacks"}
    )
    regenerated_all = client.post("/meal-plans/regenerate", json={"plan": plan})

    assert created.status_code == 200
    assert plan["date"] == "2026-01-05"
    assert plan["total_calories"] == 1910
    assert [item["name"] for item in plan["snacks"]] == ["Peanuts"]
    assert analyzed.json()["summary"]["status"] == "on_target"
    assert regenerated.json()["breakfast"] == plan["breakfast"]
    assert regenerated_all.json()["target_calories"] == 2000


def test_regenerate_rejects_unknown_slot(container: AppContainer) -> None:
    client = _client(container)
    plan = client.post("/meal-plans", json={"target_calories": 2000}).json()

    response = client.post("/meal-plans/regenerate", json={"plan": plan, "slot": "tea"})

    assert response.status_code == 422
    assert response.json()["error"] == "unknown_meal_slot"


def test_missing_catalog_returns_service_unavailable(container: AppContainer) -> None:
    planner = MealPlanService(catalog=None, rng=container.meal_planner.rng)
    client = _client(replace(container, meal_planner=planner))

    response = client.post("/meal-plans", json={"target_calories": 2000})

    assert response.status_code == 503
    assert response.json()["error"] == "catalog_unavailable"


def test_remote_meal_endpoint_clamps_to_calculated_target(
    container: AppContainer,
) -> None:
    response = _client(container).post("/api/meal", json={"profile": PROFILE})

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "remote"
    assert body["target_calories"] == 2089
    assert body["total_calories"] == 2089


def test_daily_plan_lifecycle(container: AppContainer) -> None:
    client = _client(container)

    created = client.post("/users/u1/plans", json={"profile": PROFILE})
    plan_date = created.json()["meal_plan"]["date"]
    listed = client.get("/users/u1/plans")
    fetched = client.get(f"/users/u1/plans/{plan_date}")
    regenerated = client.post(f"/users/u1/plans/{plan_date}/regenerate/dinner")
    deleted = client.delete(f"/users/u1/plans/{plan_date}")
    missing = client.get(f"/users/u1/plans/{plan_date}")

    assert created.status_code == 201
    assert listed.json()["plans"][0]["target_calories"] == 2089
    assert fetched.json()["calorie_calc"]["tdee"] == 2547
    assert regenerated.status_code == 200
    assert deleted.status_code == 204
    assert missing.status_code == 404
    assert missing.json()["error"] == "plan_not_found"


def test_weights_and_progress(container: AppContainer) -> None:
    client = _client(container)
    profile = {**PROFILE, "weight": 80, "target_weight": 70, "timeframe": 10}

    client.post("/users/u1/weights", json={"date": "2026-01-01", "weight": 80})
    added = client.post("/users/u1/weights", json={"date": "2026-01-15", "weight": 77})
    listed = client.get("/users/u1/weights")
    progress = client.post(
        "/users/u1/progress", json={"profile": profile, "today": "2026-01-29"}
    )

    assert [log["weight"] for log in added.json()["logs"]] == [77.0, 80.0]
    assert listed.json()["logs"][0]["date"] == "2026-01-15"
    assert progress.json()["progress"]["progress_percentage"] == 30.0
    assert progress.json()["progress"]["weeks_passed"] == 4
    assert progress.json()["latest_weight"] == 77.0


def test_progress_is_null_without_timeframe(container: AppContainer) -> None:
    profile = {key: value for key, value in PROFILE.items() if key != "timeframe"}

    response = _client(container).post("/users/u1/progress", json={"profile": profile})

    assert response.json() == {"progress": None, "latest_weight": None}


def test_calories_rejects_non_positive_timeframe(container: AppContainer) -> None:
    response = _client(container).post("/calories", json={**PROFILE, "timeframe": -1})

    assert response.status_code == 422


def test_list_plans_rejects_non_positive_limit(container: AppContainer) -> None:
    client = _client(container)
    client.post("/users/u1/plans", json={"profile": PROFILE})

    assert client.get("/users/u1/plans", params={"limit": -1}).status_code == 422
    assert client.get("/users/u1/plans", params={"limit": 0}).status_code == 422
    assert len(client.get("/users/u1/plans", params={"limit": 1}).json()["plans"]) == 1
