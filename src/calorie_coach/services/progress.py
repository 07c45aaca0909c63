"""Weigh-in logging and progress towards a target weight."""

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from typing import Protocol

from calorie_coach.domain.profile import UserProfile
from calorie_coach.domain.progress import GoalProgress, WeightLog


class WeightLogRepository(Protocol):
    """Persistence interface for weigh-ins."""

    def list_logs(self, user_id: str) -> list[WeightLog]:
        """Return every weigh-in for a user."""

    def upsert_log(self, user_id: str, log: WeightLog) -> None:
        """Insert a weigh-in, replacing any existing one for the same date."""


@dataclass
class WeightLogService:
    """Service for weigh-ins and goal progress."""

    repository: WeightLogRepository

    def add_weigh_in(self, user_id: str, log: WeightLog) -> list[WeightLog]:
        """Record a weigh-in and return the updated history."""
        self.repository.upsert_log(user_id, log)
        return self.list_logs(user_id)

    def list_logs(self, user_id: str) -> list[WeightLog]:
        """Return weigh-ins, newest first."""
        return sorted(
            self.repository.list_logs(user_id), key=lambda log: log.date, reverse=True
        )

    def latest_weight(self, user_id: str) -> float | None:
        logs = self.list_logs(user_id)
        return logs[0].weight if logs else None

    def get_progress(
        self, user_id: str, profile: UserProfile, today: date | None = None
    ) -> GoalProgress | None:
        """Compute progress, treating the latest weigh-in as the current weight."""
        latest = self.latest_weight(user_id)
        if latest is not None:
            profile = replace(profile, weight=latest)
        return compute_goal_progress(profile, self.list_logs(user_id), today)


def compute_goal_progress(
    profile: UserProfile, logs: list[WeightLog], today: date | None = None
) -> GoalProgress | None:
    """Progress in the goal direction; None when the profile has no timeframe."""
    timeframe = profile.timeframe or 0
    if timeframe <= 0:
        return None
    today = today or datetime.now(tz=UTC).date()
    if profile.goal == "maintain":
        target_weight = profile.weight
    else:
        target_weight = profile.target_weight or profile.weight

    ordered = sorted(logs, key=lambda log: log.date)
    start_weight = ordered[0].weight if ordered else profile.weight
    start_date = ordered[0].date if ordered else today
    current_weight = ordered[-1].weight if ordered else start_weight

    total_change = abs(target_weight - start_weight)
    delta = start_weight - current_weight
    progress_kg = -delta if profile.goal == "gain" else delta
    if total_change == 0:
        percentage = 100.0
    else:
        percentage = min(100.0, max(0.0, progress_kg / total_change * 100))

    return GoalProgress(
        weeks_passed=max(0, (today - start_date).days // 7),
        timeframe=timeframe,
        total_change=total_change,
        progress_kg=max(0.0, progress_kg),
        progress_percentage=percentage,
        current_weight=current_weight,
        start_weight=start_weight,
        target_weight=target_weight,
    )
