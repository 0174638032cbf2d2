"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from caloria.domain.entries import FoodEntry
from caloria.domain.nutrition import NutritionData, NutritionGoals


class ProgressStatus(StrEnum):
    """Intake compared against a goal."""

    UNDER = "under"
    ON_TRACK = "on-track"
    OVER = "over"


@dataclass(frozen=True)
class ProgressData:
    """Progress of one nutrient against its goal."""

    current: float
    goal: float
    percentage: int
    status: ProgressStatus


@dataclass(frozen=True)
class DailyStats:
    """Totals and progress for a reporting window."""

    date: datetime
    nutrition: NutritionData
    goals: NutritionGoals
    progress: dict[str, ProgressData]
    meals: list[FoodEntry]
    water_intake_ml: float = 0.0


@dataclass(frozen=True)
class HistorySummary:
    """Rounded totals shown above a filtered history list."""

    calories: int
    protein: int
    carbs: int
    fat: int
    meals: int
