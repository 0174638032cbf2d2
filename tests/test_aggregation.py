"""Tests for nutrition totals and goal progress."""

from dataclasses import fields, replace
from datetime import timedelta

import pytest

from caloria.domain.entries import FoodEntry, MealType
from caloria.domain.nutrition import DEFAULT_NUTRITION_GOALS, NutritionData
from caloria.domain.stats import ProgressStatus
from caloria.services.aggregation import (
    ALL_GOAL_NUTRIENTS,
    accumulate,
    classify_progress,
    compute_daily_stats,
    compute_progress,
    round_half_up,
    summarize_history,
)
from caloria.services.clock import FixedClock
from caloria.services.filters import ReportWindow
from tests.conftest import NOW, make_entry


def test_accumulate_sums_every_nutrient() -> None:
    entries = [
        make_entry("a", calories=300, protein=20, carbs=30, fat=10, fiber=2),
        make_entry("b", calories=450.5, protein=35, carbs=40, fat=15.5, fiber=6),
    ]

    total = accumulate(entries)

    assert total.calories == pytest.approx(750.5)
    assert total.protein == pytest.approx(55)
    assert total.carbs == pytest.approx(70)
    assert total.fat == pytest.approx(25.5)
    assert total.fiber == pytest.approx(8)
    assert total.sodium == 0


def _full_entry(entry_id: str, scale: float) -> FoodEntry:
    nutrition = NutritionData(
        **{
            item.name: (index + 1) * scale
            for index, item in enumerate(fields(NutritionData))
        }
    )
    return replace(make_entry(entry_id), nutrition=nutrition)


def test_accumulate_is_additive_over_disjoint_sets() -> None:
    first = [_full_entry("a", 1.25), _full_entry("b", 0.5)]
    second = [_full_entry("c", 2.75), _full_entry("d", 4.0), _full_entry("e", 0.25)]

    combined = accumulate(first + second)

    assert combined == accumulate(first) + accumulate(second)
    assert combined.vitamin_c == 15 * 8.75
    assert all(getattr(combined, item.name) > 0 for item in fields(NutritionData))


def test_accumulate_empty_is_zero() -> None:
    assert accumulate([]) == NutritionData()


@pytest.mark.parametrize(
    ("current", "expected"),
    [
        (1799.999, ProgressStatus.UNDER),
        (1800, ProgressStatus.ON_TRACK),
        (2000, ProgressStatus.ON_TRACK),
        (2200, ProgressStatus.ON_TRACK),
        (2200.001, ProgressStatus.OVER),
    ],
)
def test_classify_progress_thresholds(
    current: float, expected: ProgressStatus
) -> None:
    assert classify_progress(current, 2000).status is expected


def test_classify_progress_percentage_rounds_half_up() -> None:
    progress = classify_progress(1000, 2000)

    assert progress.percentage == 50
    assert progress.current == 1000
    assert progress.goal == 2000
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_classify_progress_with_zero_goal() -> None:
    over = classify_progress(100, 0)
    empty = classify_progress(0, 0)

    assert over.percentage == 0
    assert over.status is ProgressStatus.OVER
    assert empty.percentage == 0
    assert empty.status is ProgressStatus.ON_TRACK


def test_compute_progress_defaults_to_tracked_nutrients() -> None:
    totals = NutritionData(calories=1900, protein=40, carbs=260, fat=90, fiber=25)

    progress = compute_progress(totals, DEFAULT_NUTRITION_GOALS)

    assert set(progress) == {"calories", "protein", "carbs", "fat", "fiber"}
    assert progress["calories"].status is ProgressStatus.ON_TRACK
    assert progress["protein"].status is ProgressStatus.UNDER
    assert progress["fat"].status is ProgressStatus.OVER
    assert progress["protein"].percentage == 27


def test_compute_progress_can_include_sugar_and_sodium() -> None:
    totals = NutritionData(sugar=60, sodium=1000)

    progress = compute_progress(totals, DEFAULT_NUTRITION_GOALS, ALL_GOAL_NUTRIENTS)

    assert progress["sugar"].status is ProgressStatus.OVER
    assert progress["sodium"].status is ProgressStatus.UNDER


def test_compute_progress_rejects_unknown_nutrient() -> None:
    with pytest.raises(ValueError, match="iron"):
        compute_progress(NutritionData(), DEFAULT_NUTRITION_GOALS, ("iron",))


def test_compute_daily_stats_uses_today_only() -> None:
    clock = FixedClock(NOW)
    entries = [
        make_entry("today-1", logged_at=NOW - timedelta(hours=3), calories=400),
        make_entry("today-2", logged_at=NOW, calories=600, meal_type=MealType.LUNCH),
        make_entry("yesterday", logged_at=NOW - timedelta(days=1), calories=900),
    ]

    stats = compute_daily_stats(
        entries, ReportWindow.DAILY, DEFAULT_NUTRITION_GOALS, clock
    )

    assert stats is not None
    assert stats.nutrition.calories == 1000
    assert [entry.id for entry in stats.meals] == ["today-2", "today-1"]
    assert stats.progress["calories"].percentage == 50
    assert stats.date == NOW
    assert stats.goals == DEFAULT_NUTRITION_GOALS


def test_compute_daily_stats_returns_none_when_nothing_selected() -> None:
    clock = FixedClock(NOW)
    entries = [make_entry(logged_at=NOW - timedelta(days=1))]

    assert (
        compute_daily_stats(entries, "daily", DEFAULT_NUTRITION_GOALS, clock) is None
    )
    assert compute_daily_stats([], "weekly", DEFAULT_NUTRITION_GOALS, clock) is None


def test_compute_daily_stats_applies_meal_filter() -> None:
    clock = FixedClock(NOW)
    entries = [
        make_entry("breakfast", calories=300),
        make_entry("dinner", calories=700, meal_type=MealType.DINNER),
    ]

    stats = compute_daily_stats(
        entries, "daily", DEFAULT_NUTRITION_GOALS, clock, meal_type="dinner"
    )

    assert stats is not None
    assert stats.nutrition.calories == 700
    assert [entry.id for entry in stats.meals] == ["dinner"]


def test_summarize_history_rounds_totals() -> None:
    entries = [
        make_entry("a", calories=100.4, protein=10.5, carbs=20.2, fat=3.5),
        make_entry("b", calories=200.3, protein=5.1, carbs=10.1, fat=1.2),
    ]

    summary = summarize_history(entries)

    assert summary.calories == 301
    assert summary.protein == 16
    assert summary.carbs == 30
    assert summary.fat == 5
    assert summary.meals == 2
