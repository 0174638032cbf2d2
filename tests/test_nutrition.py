"""Tests for nutrition domain models."""

import math

from caloria.domain.nutrition import (
    DEFAULT_NUTRITION_GOALS,
    NutritionData,
    nutrient_names,
)


def test_addition_is_field_wise() -> None:
    total = NutritionData(calories=100, iron=1.5) + NutritionData(calories=50, iron=2)

    assert total.calories == 150
    assert total.iron == 3.5


def test_scaled_clamps_negative_factor() -> None:
    base = NutritionData(calories=200, protein=10)

    assert base.scaled(1.5).calories == 300
    assert base.scaled(-2) == NutritionData()


def test_from_mapping_coerces_bad_values() -> None:
    nutrition = NutritionData.from_mapping(
        {
            "calories": -5,
            "protein": math.nan,
            "carbs": math.inf,
            "fat": True,
            "fiber": "3.5",
            "sugar": None,
            "saturatedFat": 2,
            "unknown": 10,
        }
    )

    assert nutrition.calories == 0
    assert nutrition.protein == 0
    assert nutrition.carbs == 0
    assert nutrition.fat == 0
    assert nutrition.fiber == 3.5
    assert nutrition.sugar == 0
    assert nutrition.saturated_fat == 2
    assert len(nutrition.to_dict()) == len(nutrient_names()) == 15


def test_goals_merge_ignores_unknown_keys() -> None:
    merged = DEFAULT_NUTRITION_GOALS.merged({"fiber": 30, "iron": 18})

    assert merged.fiber == 30
    assert merged.calories == DEFAULT_NUTRITION_GOALS.calories
    assert "iron" not in merged.to_dict()
