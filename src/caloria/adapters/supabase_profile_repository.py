"""Supabase repository for goals, water intake and streak stats."""

from dataclasses import dataclass
from datetime import UTC, date, datetime

from supabase import Client

from caloria.adapters.records import (
    goals_from_record,
    stats_from_record,
    stats_to_record,
)
from caloria.domain.nutrition import NutritionGoals
from caloria.domain.profile import UserStats
from caloria.services.store import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation backed by user_profiles and water_intake."""

    client: Client

    def get_goals(self, user_id: str) -> NutritionGoals | None:
        """Return stored goals for a user."""
        row = self._get_profile(user_id, "nutrition_goals")
        goals = row.get("nutrition_goals") if row else None
        if not isinstance(goals, dict):
            return None
        return goals_from_record(goals)

    def save_goals(self, user_id: str, goals: NutritionGoals) -> None:
        """Persist goals on the profile row."""
        self._upsert_profile(user_id, {"nutrition_goals": goals.to_dict()})

    def get_water_intake(self, user_id: str, day: date) -> float:
        """Return the day's water total in ml."""
        response = (
            self.client.table("water_intake")
            .select("amount_ml")
            .eq("user_id", user_id)
            .eq("day", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return 0.0
        return float(response.data[0].get("amount_ml") or 0.0)

    def save_water_intake(self, user_id: str, day: date, amount_ml: float) -> None:
        """Persist the day's water total."""
        self.client.table("water_intake").upsert(
            {"user_id": user_id, "day": day.isoformat(), "amount_ml": amount_ml},
            on_conflict="user_id,day",
        ).execute()

    def get_user_stats(self, user_id: str) -> UserStats | None:
        """Return stored streak stats."""
        row = self._get_profile(user_id, "stats")
        stats = row.get("stats") if row else None
        if not isinstance(stats, dict):
            return None
        return stats_from_record(stats)

    def save_user_stats(self, user_id: str, stats: UserStats) -> None:
        """Persist streak stats on the profile row."""
        self._upsert_profile(user_id, {"stats": stats_to_record(stats)})

    def _get_profile(self, user_id: str, column: str) -> dict[str, object] | None:
        response = (
            self.client.table("user_profiles")
            .select(column)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0]

    def _upsert_profile(self, user_id: str, values: dict[str, object]) -> None:
        response = (
            self.client.table("user_profiles")
            .upsert(
                {
                    "user_id": user_id,
                    **values,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to update profile for user {user_id}")
