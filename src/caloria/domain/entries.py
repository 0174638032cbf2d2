"""Domain models for logged food entries."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from caloria.domain.nutrition import NutritionData, ServingSize


class MealType(StrEnum):
    """Meal slot an entry was logged under."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    SUPPLEMENT = "supplement"


class FoodCategory(StrEnum):
    """Broad food grouping."""

    FRUITS = "fruits"
    VEGETABLES = "vegetables"
    GRAINS = "grains"
    PROTEIN = "protein"
    DAIRY = "dairy"
    FATS = "fats"
    BEVERAGES = "beverages"
    SNACKS = "snacks"
    PREPARED = "prepared"
    SUPPLEMENT = "supplement"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Food:
    """Reference food with nutrition per serving."""

    id: str
    name: str
    nutrition: NutritionData
    serving_size: ServingSize
    category: FoodCategory = FoodCategory.UNKNOWN
    brand: str | None = None
    barcode: str | None = None
    image_url: str | None = None
    verified: bool = False


@dataclass(frozen=True)
class FoodEntry:
    """A logged meal or snack.

    ``nutrition`` is already scaled to the logged quantity.
    """

    id: str
    user_id: str
    food: Food
    quantity: float
    serving_size: ServingSize
    meal_type: MealType
    date: datetime
    nutrition: NutritionData
    image_url: str | None = None
    notes: str | None = None

    @property
    def food_id(self) -> str:
        return self.food.id


@dataclass(frozen=True)
class FoodEntryDraft:
    """Entry data supplied by the user before an id is assigned."""

    user_id: str
    food: Food
    quantity: float
    serving_size: ServingSize
    meal_type: MealType
    date: datetime
    nutrition: NutritionData
    image_url: str | None = None
    notes: str | None = None
