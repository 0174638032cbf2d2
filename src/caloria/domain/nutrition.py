"""Nutrition domain models."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace

# camelCase keys used by the mobile client and stored snapshots.
_CAMEL_ALIASES = {
    "saturatedFat": "saturated_fat",
    "transFat": "trans_fat",
    "vitaminA": "vitamin_a",
    "vitaminC": "vitamin_c",
}


@dataclass(frozen=True)
class NutritionData:
    """Nutrient amounts for a food or a sum of foods.

    Units follow the field name: kcal for calories, mg for sodium,
    cholesterol, potassium, calcium, iron and vitamin C, IU for vitamin A,
    grams otherwise.
    """

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    cholesterol: float = 0.0
    saturated_fat: float = 0.0
    trans_fat: float = 0.0
    potassium: float = 0.0
    calcium: float = 0.0
    iron: float = 0.0
    vitamin_a: float = 0.0
    vitamin_c: float = 0.0

    def __add__(self, other: "NutritionData") -> "NutritionData":
        if not isinstance(other, NutritionData):
            return NotImplemented
        return NutritionData(
            **{
                name: getattr(self, name) + getattr(other, name)
                for name in nutrient_names()
            }
        )

    def scaled(self, factor: float) -> "NutritionData":
        """Return a copy with every nutrient multiplied by factor."""
        factor = max(factor, 0.0)
        return NutritionData(
            **{name: getattr(self, name) * factor for name in nutrient_names()}
        )

    def value(self, nutrient: str) -> float:
        """Return the amount of a nutrient by field name."""
        return float(getattr(self, nutrient))

    def to_dict(self) -> dict[str, float]:
        """Return nutrient amounts keyed by field name."""
        return {name: getattr(self, name) for name in nutrient_names()}

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object] | None) -> "NutritionData":
        """Build from a loose mapping; bad or missing values become 0."""
        if not raw:
            return cls()
        values: dict[str, float] = {}
        for key, value in raw.items():
            name = _CAMEL_ALIASES.get(key, key)
            if name in _NUTRIENT_NAMES:
                values[name] = _coerce_amount(value)
        return cls(**values)


@dataclass(frozen=True)
class NutritionGoals:
    """Daily nutrient targets."""

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    sugar: float
    sodium: float

    def value(self, nutrient: str) -> float:
        """Return the target for a nutrient by field name."""
        return float(getattr(self, nutrient))

    def merged(self, patch: Mapping[str, object]) -> "NutritionGoals":
        """Return goals with the known keys in patch applied."""
        known = {item.name for item in fields(self)}
        updates = {
            key: _coerce_amount(value) for key, value in patch.items() if key in known
        }
        return replace(self, **updates)

    def to_dict(self) -> dict[str, float]:
        """Return targets keyed by field name."""
        return {item.name: getattr(self, item.name) for item in fields(self)}


DEFAULT_NUTRITION_GOALS = NutritionGoals(
    calories=2000,
    protein=150,
    carbs=250,
    fat=67,
    fiber=25,
    sugar=50,
    sodium=2300,
)


@dataclass(frozen=True)
class ServingSize:
    """Portion description for a food."""

    amount: float
    unit: str
    grams: float


def nutrient_names() -> tuple[str, ...]:
    """Return NutritionData field names in declaration order."""
    return _NUTRIENT_NAMES


def _coerce_amount(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        amount = float(value)
    elif isinstance(value, str):
        try:
            amount = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if math.isnan(amount) or math.isinf(amount) or amount < 0:
        return 0.0
    return amount


_NUTRIENT_NAMES = tuple(item.name for item in fields(NutritionData))
