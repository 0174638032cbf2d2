"""Domain models for body metrics, goal planning and user activity."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from caloria.domain.nutrition import NutritionGoals


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(StrEnum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class GoalType(StrEnum):
    LOSE_WEIGHT = "lose_weight"
    MAINTAIN_WEIGHT = "maintain_weight"
    GAIN_WEIGHT = "gain_weight"
    GAIN_MUSCLE = "gain_muscle"
    IMPROVE_HEALTH = "improve_health"


class WeightGoalRate(StrEnum):
    SLOW = "slow"
    MODERATE = "moderate"
    FAST = "fast"


@dataclass(frozen=True)
class BodyProfile:
    """Inputs collected during onboarding."""

    weight_kg: float
    height_cm: float
    age: int
    gender: Gender
    activity_level: ActivityLevel
    goal_type: GoalType = GoalType.MAINTAIN_WEIGHT
    weekly_rate: WeightGoalRate = WeightGoalRate.MODERATE
    target_weight_kg: float | None = None


@dataclass(frozen=True)
class GoalPlan:
    """Onboarding result: energy estimates plus derived goals."""

    bmr: float
    tdee: float
    bmi: float
    weekly_goal_kg: float
    target_date: date | None
    goals: NutritionGoals


@dataclass(frozen=True)
class UserStats:
    """Logging streak and usage counters."""

    current_streak: int = 0
    longest_streak: int = 0
    total_days_tracked: int = 0
    total_meals_logged: int = 0
    last_activity_date: date | None = None
