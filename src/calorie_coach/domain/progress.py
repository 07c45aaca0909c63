"""Domain models for weigh-ins and goal progress."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class WeightLog:
    """A single weigh-in."""

    date: date
    weight: float


@dataclass(frozen=True)
class GoalProgress:
    """Progress towards a target weight."""

    weeks_passed: int
    timeframe: float
    total_change: float
    progress_kg: float
    progress_percentage: float
    current_weight: float
    start_weight: float
    target_weight: float
