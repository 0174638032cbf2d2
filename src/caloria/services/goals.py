"""Onboarding goal calculation.

BMR uses the Mifflin-St Jeor equation, TDEE applies an activity multiplier,
and the calorie target is adjusted for the chosen goal and weekly rate
before being split into macros.
"""

import math
from datetime import timedelta

from caloria.domain.nutrition import NutritionGoals
from caloria.domain.profile import (
    ActivityLevel,
    BodyProfile,
    Gender,
    GoalPlan,
    GoalType,
    WeightGoalRate,
)
from caloria.services.aggregation import round_half_up
from caloria.services.clock import Clock

MIN_DAILY_CALORIES = 1200
DEFAULT_SODIUM_MG = 2300
FIBER_G_PER_1000_KCAL = 14
SUGAR_G_PER_1000_KCAL = 25
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

GOAL_CALORIE_MODIFIERS: dict[GoalType, float] = {
    GoalType.LOSE_WEIGHT: 0.85,
    GoalType.MAINTAIN_WEIGHT: 1.0,
    GoalType.GAIN_WEIGHT: 1.15,
    GoalType.GAIN_MUSCLE: 1.1,
    GoalType.IMPROVE_HEALTH: 1.0,
}

RATE_CALORIE_ADJUSTMENTS: dict[WeightGoalRate, int] = {
    WeightGoalRate.SLOW: 250,
    WeightGoalRate.MODERATE: 500,
    WeightGoalRate.FAST: 750,
}

RATE_WEEKLY_KG: dict[WeightGoalRate, float] = {
    WeightGoalRate.SLOW: 0.25,
    WeightGoalRate.MODERATE: 0.5,
    WeightGoalRate.FAST: 0.75,
}

# protein, carbs, fat as fractions of target calories
_DEFAULT_SPLIT = (0.25, 0.45, 0.30)
MACRO_SPLITS: dict[GoalType, tuple[float, float, float]] = {
    GoalType.GAIN_MUSCLE: (0.30, 0.40, 0.30),
    GoalType.LOSE_WEIGHT: (0.30, 0.35, 0.35),
}

_DEFICIT_GOALS = {GoalType.LOSE_WEIGHT}
_SURPLUS_GOALS = {GoalType.GAIN_WEIGHT, GoalType.GAIN_MUSCLE}


def calculate_bmr(profile: BodyProfile) -> float:
    """Return basal metabolic rate in kcal/day."""
    base = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
    if profile.gender is Gender.MALE:
        return base + 5
    return base - 161


def calculate_tdee(profile: BodyProfile) -> float:
    """Return total daily energy expenditure in kcal/day."""
    return calculate_bmr(profile) * ACTIVITY_MULTIPLIERS[profile.activity_level]


def target_calories(profile: BodyProfile) -> float:
    """Return the unrounded daily calorie target, floored at 1200."""
    calories = calculate_tdee(profile) * GOAL_CALORIE_MODIFIERS[profile.goal_type]
    adjustment = RATE_CALORIE_ADJUSTMENTS[profile.weekly_rate]
    if profile.goal_type in _DEFICIT_GOALS:
        calories -= adjustment
    elif profile.goal_type in _SURPLUS_GOALS:
        calories += adjustment
    return max(calories, MIN_DAILY_CALORIES)


def compute_goals(profile: BodyProfile) -> NutritionGoals:
    """Derive daily nutrition goals from a body profile."""
    calories = target_calories(profile)
    protein_pct, carbs_pct, fat_pct = MACRO_SPLITS.get(
        profile.goal_type, _DEFAULT_SPLIT
    )
    return NutritionGoals(
        calories=round_half_up(calories),
        protein=round_half_up(calories * protein_pct / KCAL_PER_G_PROTEIN),
        carbs=round_half_up(calories * carbs_pct / KCAL_PER_G_CARBS),
        fat=round_half_up(calories * fat_pct / KCAL_PER_G_FAT),
        fiber=round_half_up(calories / 1000 * FIBER_G_PER_1000_KCAL),
        sugar=round_half_up(calories / 1000 * SUGAR_G_PER_1000_KCAL),
        sodium=DEFAULT_SODIUM_MG,
    )


def calculate_bmi(profile: BodyProfile) -> float:
    """Return body mass index rounded to one decimal."""
    height_m = profile.height_cm / 100
    if height_m <= 0:
        return 0.0
    return round(profile.weight_kg / height_m**2, 1)


def build_goal_plan(profile: BodyProfile, clock: Clock) -> GoalPlan:
    """Return energy estimates, goals and a projected target date."""
    weekly_goal = RATE_WEEKLY_KG[profile.weekly_rate]
    target_date = None
    if profile.target_weight_kg is not None:
        difference = abs(profile.target_weight_kg - profile.weight_kg)
        weeks_needed = math.ceil(difference / weekly_goal)
        target_date = clock.now().date() + timedelta(weeks=weeks_needed)
    return GoalPlan(
        bmr=calculate_bmr(profile),
        tdee=calculate_tdee(profile),
        bmi=calculate_bmi(profile),
        weekly_goal_kg=weekly_goal,
        target_date=target_date,
        goals=compute_goals(profile),
    )
