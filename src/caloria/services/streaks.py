"""Logging streak bookkeeping."""

from dataclasses import replace
from datetime import date, timedelta

from caloria.domain.profile import UserStats


def record_meal_logged(stats: UserStats, today: date) -> UserStats:
    """Return stats updated for a meal logged on ``today``."""
    last = stats.last_activity_date
    is_new_day = last != today
    if not is_new_day:
        streak = stats.current_streak
    elif last is not None and last == today - timedelta(days=1):
        streak = stats.current_streak + 1
    else:
        streak = 1

    return replace(
        stats,
        current_streak=streak,
        longest_streak=max(streak, stats.longest_streak),
        total_meals_logged=stats.total_meals_logged + 1,
        total_days_tracked=stats.total_days_tracked + (1 if is_new_day else 0),
        last_activity_date=today,
    )
