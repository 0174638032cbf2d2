"""Per-user food store owning entries, goals and water intake."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from typing import Protocol
from uuid import uuid4

from caloria.domain.entries import FoodEntry, FoodEntryDraft, MealType
from caloria.domain.nutrition import (
    DEFAULT_NUTRITION_GOALS,
    NutritionData,
    NutritionGoals,
)
from caloria.domain.profile import UserStats
from caloria.domain.stats import DailyStats, HistorySummary
from caloria.services.aggregation import compute_daily_stats, summarize_history
from caloria.services.clock import Clock
from caloria.services.filters import ReportWindow, filter_entries
from caloria.services.streaks import record_meal_logged

_logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = {"id", "user_id"}
_PATCHABLE_FIELDS = {item.name for item in fields(FoodEntry)} - _IMMUTABLE_FIELDS


class EntryRepository(Protocol):
    """Persistence interface for food entries."""

    def list_entries(self, user_id: str) -> list[FoodEntry]:
        """Return all entries for a user."""

    def save_entry(self, entry: FoodEntry) -> None:
        """Insert or replace an entry."""

    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry by id."""


class ProfileRepository(Protocol):
    """Persistence interface for goals, water intake and user stats."""

    def get_goals(self, user_id: str) -> NutritionGoals | None:
        """Return stored goals, if any."""

    def save_goals(self, user_id: str, goals: NutritionGoals) -> None:
        """Persist goals."""

    def get_water_intake(self, user_id: str, day: date) -> float:
        """Return water intake in ml for a day."""

    def save_water_intake(self, user_id: str, day: date, amount_ml: float) -> None:
        """Persist the water total for a day."""

    def get_user_stats(self, user_id: str) -> UserStats | None:
        """Return stored streak stats, if any."""

    def save_user_stats(self, user_id: str, stats: UserStats) -> None:
        """Persist streak stats."""


class StoreUnavailableError(RuntimeError):
    """Raised when a user's stored state cannot be read."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Stored state for user {user_id} is unavailable")
        self.user_id = user_id


def new_entry_id(now: datetime) -> str:
    """Return an id like ``entry_<epoch millis>_<random>``."""
    return f"entry_{int(now.timestamp() * 1000)}_{uuid4().hex[:9]}"


@dataclass
class FoodStore:
    """State container for one user's session.

    Every mutation recomputes ``today_stats`` from the full entry list.
    Persistence failures are logged and never roll back in-memory state.
    """

    user_id: str
    entry_repository: EntryRepository
    profile_repository: ProfileRepository
    clock: Clock
    goals: NutritionGoals = DEFAULT_NUTRITION_GOALS
    entries: list[FoodEntry] = field(default_factory=list)
    water_intake_ml: float = 0.0
    water_day: date | None = None
    user_stats: UserStats = field(default_factory=UserStats)
    today_stats: DailyStats | None = None
    id_factory: Callable[[datetime], str] = new_entry_id

    def load(self) -> None:
        """Restore state from the repositories.

        State is replaced only when every read succeeds; otherwise the store
        is left untouched and StoreUnavailableError is raised.
        """
        today = self.clock.now().date()
        try:
            entries = self.entry_repository.list_entries(self.user_id)
            goals = self.profile_repository.get_goals(self.user_id)
            water_intake_ml = self.profile_repository.get_water_intake(
                self.user_id, today
            )
            user_stats = self.profile_repository.get_user_stats(self.user_id)
        except Exception as exc:
            _logger.exception(
                "Failed to load food store", extra={"user_id": self.user_id}
            )
            raise StoreUnavailableError(self.user_id) from exc
        self.entries = entries
        self.goals = goals or DEFAULT_NUTRITION_GOALS
        self.water_intake_ml = water_intake_ml
        self.water_day = today
        self.user_stats = user_stats or UserStats()
        self.recalculate()

    def add_entry(self, draft: FoodEntryDraft) -> FoodEntry:
        """Assign an id to a drafted entry, store it and recompute."""
        now = self.clock.now()
        entry = FoodEntry(
            id=self.id_factory(now),
            user_id=draft.user_id,
            food=draft.food,
            quantity=draft.quantity,
            serving_size=draft.serving_size,
            meal_type=draft.meal_type,
            date=draft.date,
            nutrition=draft.nutrition,
            image_url=draft.image_url,
            notes=draft.notes,
        )
        self.entries = [*self.entries, entry]
        self._persist("save entry", lambda: self.entry_repository.save_entry(entry))

        self.user_stats = record_meal_logged(self.user_stats, now.date())
        stats = self.user_stats
        self._persist(
            "save user stats",
            lambda: self.profile_repository.save_user_stats(self.user_id, stats),
        )
        self.recalculate()
        return entry

    def update_entry(
        self, entry_id: str, patch: Mapping[str, object]
    ) -> FoodEntry | None:
        """Apply a partial update; return None for an unknown id."""
        updates = _normalize_patch(patch)
        updated: FoodEntry | None = None
        entries: list[FoodEntry] = []
        for entry in self.entries:
            if entry.id == entry_id:
                updated = replace(entry, **updates)
                entries.append(updated)
            else:
                entries.append(entry)
        if updated is None:
            return None
        self.entries = entries
        saved = updated
        self._persist("update entry", lambda: self.entry_repository.save_entry(saved))
        self.recalculate()
        return updated

    def delete_entry(self, entry_id: str) -> bool:
        """Remove an entry; return False when it does not exist."""
        remaining = [entry for entry in self.entries if entry.id != entry_id]
        if len(remaining) == len(self.entries):
            return False
        self.entries = remaining
        self._persist(
            "delete entry", lambda: self.entry_repository.delete_entry(entry_id)
        )
        self.recalculate()
        return True

    def update_goals(self, patch: Mapping[str, object]) -> NutritionGoals:
        """Merge goal changes and recompute."""
        self.goals = self.goals.merged(patch)
        goals = self.goals
        self._persist(
            "save goals",
            lambda: self.profile_repository.save_goals(self.user_id, goals),
        )
        self.recalculate()
        return self.goals

    def add_water(self, amount_ml: float) -> float:
        """Add to today's water intake and return the new total."""
        if amount_ml < 0:
            raise ValueError("Water amount must be non-negative")
        today = self.clock.now().date()
        self.water_intake_ml = self._water_for(today) + amount_ml
        self.water_day = today
        total = self.water_intake_ml
        self._persist(
            "save water intake",
            lambda: self.profile_repository.save_water_intake(
                self.user_id, today, total
            ),
        )
        self.recalculate()
        return total

    def reset_water(self) -> None:
        """Reset today's water intake to zero."""
        self.water_intake_ml = 0.0
        self.water_day = self.clock.now().date()
        self.recalculate()

    def today_water(self) -> float:
        """Return water intake in ml for the current local day."""
        return self._water_for(self.clock.now().date())

    def get_entry(self, entry_id: str) -> FoodEntry | None:
        """Return an entry by id."""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def today_entries(self) -> list[FoodEntry]:
        """Return entries logged today in local time."""
        return filter_entries(self.entries, ReportWindow.DAILY, self.clock)

    def entries_by_meal(self, meal_type: MealType | str) -> list[FoodEntry]:
        """Return today's entries for a meal slot."""
        return filter_entries(
            self.entries, ReportWindow.DAILY, self.clock, meal_type=meal_type
        )

    def history(
        self,
        window: ReportWindow | str,
        meal_type: MealType | str | None = None,
        clock: Clock | None = None,
    ) -> tuple[list[FoodEntry], HistorySummary]:
        """Return filtered entries with their rounded summary."""
        selected = filter_entries(
            self.entries, window, clock or self.clock, meal_type
        )
        return selected, summarize_history(selected)

    def stats(
        self,
        window: ReportWindow | str = ReportWindow.DAILY,
        meal_type: MealType | str | None = None,
        clock: Clock | None = None,
    ) -> DailyStats | None:
        """Return stats for a window with water intake merged in."""
        stats = compute_daily_stats(
            self.entries, window, self.goals, clock or self.clock, meal_type
        )
        if stats is None:
            return None
        return replace(stats, water_intake_ml=self.today_water())

    def recalculate(self) -> None:
        """Recompute today's stats from the current entries."""
        self.today_stats = self.stats(ReportWindow.DAILY)

    def _water_for(self, day: date) -> float:
        # A total from an earlier day does not carry over.
        if self.water_day != day:
            return 0.0
        return self.water_intake_ml

    def _persist(self, action: str, func: Callable[[], None]) -> None:
        try:
            func()
        except Exception:
            _logger.exception(
                "Failed to %s", action, extra={"user_id": self.user_id}
            )


@dataclass
class FoodStoreRegistry:
    """Creates and caches one loaded store per user."""

    entry_repository: EntryRepository
    profile_repository: ProfileRepository
    clock: Clock
    _stores: dict[str, FoodStore] = field(default_factory=dict)

    def get(self, user_id: str) -> FoodStore:
        """Return the store for a user, loading it on first access.

        A store whose load fails is not cached, so the next access retries.
        """
        store = self._stores.get(user_id)
        if store is None:
            store = FoodStore(
                user_id=user_id,
                entry_repository=self.entry_repository,
                profile_repository=self.profile_repository,
                clock=self.clock,
            )
            store.load()
            self._stores[user_id] = store
        return store

    def evict(self, user_id: str) -> None:
        """Drop a cached store so the next access reloads it."""
        self._stores.pop(user_id, None)


def _normalize_patch(patch: Mapping[str, object]) -> dict[str, object]:
    unknown = set(patch) - _PATCHABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
    updates = dict(patch)
    if "meal_type" in updates and not isinstance(updates["meal_type"], MealType):
        updates["meal_type"] = MealType(str(updates["meal_type"]))
    if "nutrition" in updates and not isinstance(
        updates["nutrition"], NutritionData
    ):
        raw = updates["nutrition"]
        updates["nutrition"] = NutritionData.from_mapping(
            raw if isinstance(raw, Mapping) else None
        )
    return updates
