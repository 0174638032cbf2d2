"""Nutrition totals, goal progress and daily stats."""

import math
from collections.abc import Iterable, Sequence

from caloria.domain.entries import FoodEntry, MealType
from caloria.domain.nutrition import NutritionData, NutritionGoals
from caloria.domain.stats import (
    DailyStats,
    HistorySummary,
    ProgressData,
    ProgressStatus,
)
from caloria.services.clock import Clock
from caloria.services.filters import ReportWindow, filter_entries

UNDER_THRESHOLD = 0.9
OVER_THRESHOLD = 1.1

TRACKED_NUTRIENTS: tuple[str, ...] = ("calories", "protein", "carbs", "fat", "fiber")
ALL_GOAL_NUTRIENTS: tuple[str, ...] = (*TRACKED_NUTRIENTS, "sugar", "sodium")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)


def accumulate(entries: Iterable[FoodEntry]) -> NutritionData:
    """Sum nutrition snapshots across entries."""
    total = NutritionData()
    for entry in entries:
        total = total + entry.nutrition
    return total


def classify_progress(current: float, goal: float) -> ProgressData:
    """Compare intake against a goal.

    A goal of zero or less yields a percentage of 0.
    """
    percentage = round_half_up(current / goal * 100) if goal > 0 else 0
    if current < goal * UNDER_THRESHOLD:
        status = ProgressStatus.UNDER
    elif current > goal * OVER_THRESHOLD:
        status = ProgressStatus.OVER
    else:
        status = ProgressStatus.ON_TRACK
    return ProgressData(
        current=current, goal=goal, percentage=percentage, status=status
    )


def compute_progress(
    totals: NutritionData,
    goals: NutritionGoals,
    nutrients: Sequence[str] = TRACKED_NUTRIENTS,
) -> dict[str, ProgressData]:
    """Classify each nutrient independently."""
    unknown = set(nutrients) - set(ALL_GOAL_NUTRIENTS)
    if unknown:
        raise ValueError(f"No goal defined for: {', '.join(sorted(unknown))}")
    return {
        nutrient: classify_progress(totals.value(nutrient), goals.value(nutrient))
        for nutrient in nutrients
    }


def compute_daily_stats(  # noqa: PLR0913
    entries: Iterable[FoodEntry],
    window: ReportWindow | str,
    goals: NutritionGoals,
    clock: Clock,
    meal_type: MealType | str | None = None,
    nutrients: Sequence[str] = TRACKED_NUTRIENTS,
) -> DailyStats | None:
    """Return stats for the window, or None when nothing was logged."""
    selected = filter_entries(entries, window, clock, meal_type)
    if not selected:
        return None
    totals = accumulate(selected)
    return DailyStats(
        date=clock.now(),
        nutrition=totals,
        goals=goals,
        progress=compute_progress(totals, goals, nutrients),
        meals=selected,
    )


def summarize_history(entries: Sequence[FoodEntry]) -> HistorySummary:
    """Return rounded macro totals and a meal count."""
    totals = accumulate(entries)
    return HistorySummary(
        calories=round_half_up(totals.calories),
        protein=round_half_up(totals.protein),
        carbs=round_half_up(totals.carbs),
        fat=round_half_up(totals.fat),
        meals=len(entries),
    )
