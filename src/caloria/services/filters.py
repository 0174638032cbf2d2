"""Entry selection by reporting window and meal type."""

from collections.abc import Iterable
from datetime import datetime, timedelta
from enum import StrEnum

from caloria.domain.entries import FoodEntry, MealType
from caloria.services.clock import Clock

ALL_MEALS = "all"


class ReportWindow(StrEnum):
    """Calendar window used for reporting."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class UnsupportedWindowError(ValueError):
    """Raised for a window name that is not daily, weekly or monthly."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Unsupported window: {value!r}")
        self.value = value


def parse_window(value: str | ReportWindow) -> ReportWindow:
    """Return the ReportWindow for value or raise UnsupportedWindowError."""
    if isinstance(value, ReportWindow):
        return value
    try:
        return ReportWindow(value)
    except ValueError as exc:
        raise UnsupportedWindowError(value) from exc


def parse_meal_type(value: str | MealType | None) -> MealType | None:
    """Return a MealType, or None when the filter is bypassed."""
    if value is None or value == ALL_MEALS:
        return None
    return MealType(value)


def window_start(window: ReportWindow | str, clock: Clock) -> datetime:
    """Return local midnight at the start of the window."""
    resolved = parse_window(window)
    midnight = clock.now().replace(hour=0, minute=0, second=0, microsecond=0)
    if resolved is ReportWindow.DAILY:
        return midnight
    if resolved is ReportWindow.WEEKLY:
        # weeks start on Sunday
        days_since_sunday = (midnight.weekday() + 1) % 7
        return midnight - timedelta(days=days_since_sunday)
    return midnight.replace(day=1)


def filter_entries(
    entries: Iterable[FoodEntry],
    window: ReportWindow | str,
    clock: Clock,
    meal_type: MealType | str | None = None,
) -> list[FoodEntry]:
    """Return entries in the window, newest first."""
    resolved = parse_window(window)
    meal_filter = parse_meal_type(meal_type)
    start = window_start(resolved, clock)
    today = start.date()

    selected: list[FoodEntry] = []
    for entry in entries:
        logged_at = local_datetime(entry.date, clock)
        if resolved is ReportWindow.DAILY:
            if logged_at.date() != today:
                continue
        elif logged_at < start:
            continue
        if meal_filter is not None and entry.meal_type != meal_filter:
            continue
        selected.append(entry)

    return sorted(
        selected, key=lambda item: local_datetime(item.date, clock), reverse=True
    )


def local_datetime(value: datetime, clock: Clock) -> datetime:
    """Convert value to the clock timezone; naive values are taken as local."""
    if value.tzinfo is None:
        return value.replace(tzinfo=clock.tz)
    return value.astimezone(clock.tz)
