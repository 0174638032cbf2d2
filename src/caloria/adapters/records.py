"""Conversion between domain models and stored JSON rows."""

from datetime import date, datetime

from caloria.domain.entries import Food, FoodCategory, FoodEntry, MealType
from caloria.domain.nutrition import (
    DEFAULT_NUTRITION_GOALS,
    NutritionData,
    NutritionGoals,
    ServingSize,
)
from caloria.domain.profile import UserStats


def entry_to_record(entry: FoodEntry) -> dict[str, object]:
    """Serialize an entry; dates become ISO-8601 strings."""
    return {
        "id": entry.id,
        "user_id": entry.user_id,
        "food_id": entry.food_id,
        "food": food_to_record(entry.food),
        "quantity": entry.quantity,
        "serving_size": _serving_to_record(entry.serving_size),
        "meal_type": entry.meal_type.value,
        "logged_at": entry.date.isoformat(),
        "nutrition": entry.nutrition.to_dict(),
        "image_url": entry.image_url,
        "notes": entry.notes,
    }


def entry_from_record(row: dict[str, object]) -> FoodEntry:
    """Parse a stored entry row."""
    return FoodEntry(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        food=food_from_record(_as_dict(row.get("food"))),
        quantity=float(row.get("quantity", 1.0)),
        serving_size=_serving_from_record(_as_dict(row.get("serving_size"))),
        meal_type=MealType(str(row.get("meal_type") or MealType.SNACK)),
        date=datetime.fromisoformat(str(row["logged_at"])),
        nutrition=NutritionData.from_mapping(_as_dict(row.get("nutrition"))),
        image_url=_optional_str(row.get("image_url")),
        notes=_optional_str(row.get("notes")),
    )


def food_to_record(food: Food) -> dict[str, object]:
    return {
        "id": food.id,
        "name": food.name,
        "nutrition": food.nutrition.to_dict(),
        "serving_size": _serving_to_record(food.serving_size),
        "category": food.category.value,
        "brand": food.brand,
        "barcode": food.barcode,
        "image_url": food.image_url,
        "verified": food.verified,
    }


def food_from_record(row: dict[str, object]) -> Food:
    try:
        category = FoodCategory(str(row.get("category") or FoodCategory.UNKNOWN))
    except ValueError:
        category = FoodCategory.UNKNOWN
    return Food(
        id=str(row.get("id", "")),
        name=str(row.get("name", "")),
        nutrition=NutritionData.from_mapping(_as_dict(row.get("nutrition"))),
        serving_size=_serving_from_record(_as_dict(row.get("serving_size"))),
        category=category,
        brand=_optional_str(row.get("brand")),
        barcode=_optional_str(row.get("barcode")),
        image_url=_optional_str(row.get("image_url")),
        verified=bool(row.get("verified", False)),
    )


def goals_from_record(row: dict[str, object]) -> NutritionGoals:
    """Parse stored goals; missing targets fall back to the defaults."""
    return DEFAULT_NUTRITION_GOALS.merged(row)


def stats_to_record(stats: UserStats) -> dict[str, object]:
    return {
        "current_streak": stats.current_streak,
        "longest_streak": stats.longest_streak,
        "total_days_tracked": stats.total_days_tracked,
        "total_meals_logged": stats.total_meals_logged,
        "last_activity_date": (
            stats.last_activity_date.isoformat() if stats.last_activity_date else None
        ),
    }


def stats_from_record(row: dict[str, object]) -> UserStats:
    last_raw = row.get("last_activity_date")
    return UserStats(
        current_streak=int(row.get("current_streak", 0)),
        longest_streak=int(row.get("longest_streak", 0)),
        total_days_tracked=int(row.get("total_days_tracked", 0)),
        total_meals_logged=int(row.get("total_meals_logged", 0)),
        last_activity_date=(
            date.fromisoformat(last_raw[:10])
            if isinstance(last_raw, str) and last_raw
            else None
        ),
    )


def _serving_to_record(serving: ServingSize) -> dict[str, object]:
    return {"amount": serving.amount, "unit": serving.unit, "grams": serving.grams}


def _serving_from_record(row: dict[str, object]) -> ServingSize:
    return ServingSize(
        amount=float(row.get("amount", 1.0)),
        unit=str(row.get("unit", "serving")),
        grams=float(row.get("grams", 0.0)),
    )


def _as_dict(value: object) -> dict[str, object]:
    return value if isinstance(value, dict) else {}


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)
