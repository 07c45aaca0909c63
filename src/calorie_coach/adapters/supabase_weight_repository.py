"""Supabase repository for weigh-ins."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from calorie_coach.domain.progress import WeightLog
from calorie_coach.services.progress import WeightLogRepository


@dataclass
class SupabaseWeightLogRepository(WeightLogRepository):
    """Supabase implementation for weigh-ins."""

    client: Client

    def list_logs(self, user_id: str) -> list[WeightLog]:
        """Return weigh-ins for a user, newest first."""
        response = (
            self.client.table("weight_logs")
            .select("logged_on, weight_kg")
            .eq("user_id", user_id)
            .order("logged_on", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def upsert_log(self, user_id: str, log: WeightLog) -> None:
        """Insert or replace the weigh-in for its date."""
        self.client.table("weight_logs").upsert(
            {
                "user_id": user_id,
                "logged_on": log.date.isoformat(),
                "weight_kg": log.weight,
            },
            on_conflict="user_id,logged_on",
        ).execute()


def _parse_row(row: dict[str, object]) -> WeightLog:
    return WeightLog(
        date=date.fromisoformat(str(row["logged_on"])[:10]),
        weight=float(row.get("weight_kg", 0.0)),
    )
