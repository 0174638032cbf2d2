"""Pydantic models for API request payloads."""

from datetime import datetime

from pydantic import BaseModel, Field

from caloria.domain.entries import Food, FoodCategory, MealType
from caloria.domain.nutrition import NutritionData, ServingSize
from caloria.domain.profile import (
    ActivityLevel,
    BodyProfile,
    Gender,
    GoalType,
    WeightGoalRate,
)


class NutritionPayload(BaseModel):
    """Nutrient amounts; omitted nutrients are 0."""

    calories: float = Field(default=0.0, ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)
    fiber: float = Field(default=0.0, ge=0.0)
    sugar: float = Field(default=0.0, ge=0.0)
    sodium: float = Field(default=0.0, ge=0.0)
    cholesterol: float = Field(default=0.0, ge=0.0)
    saturated_fat: float = Field(default=0.0, ge=0.0)
    trans_fat: float = Field(default=0.0, ge=0.0)
    potassium: float = Field(default=0.0, ge=0.0)
    calcium: float = Field(default=0.0, ge=0.0)
    iron: float = Field(default=0.0, ge=0.0)
    vitamin_a: float = Field(default=0.0, ge=0.0)
    vitamin_c: float = Field(default=0.0, ge=0.0)

    def to_domain(self) -> NutritionData:
        return NutritionData(**self.model_dump())


class ServingSizePayload(BaseModel):
    amount: float = Field(gt=0)
    unit: str
    grams: float = Field(ge=0)

    def to_domain(self) -> ServingSize:
        return ServingSize(amount=self.amount, unit=self.unit, grams=self.grams)


class FoodPayload(BaseModel):
    """Reference food with nutrition per serving."""

    id: str | None = None
    name: str = Field(min_length=1)
    nutrition: NutritionPayload = Field(default_factory=NutritionPayload)
    serving_size: ServingSizePayload
    category: FoodCategory = FoodCategory.UNKNOWN
    brand: str | None = None
    barcode: str | None = None
    image_url: str | None = None
    verified: bool = False

    def to_domain(self, fallback_id: str) -> Food:
        return Food(
            id=self.id or fallback_id,
            name=self.name,
            nutrition=self.nutrition.to_domain(),
            serving_size=self.serving_size.to_domain(),
            category=self.category,
            brand=self.brand,
            barcode=self.barcode,
            image_url=self.image_url,
            verified=self.verified,
        )


class EntryCreate(BaseModel):
    """New entry; nutrition defaults to the food's nutrition times quantity."""

    food: FoodPayload
    meal_type: MealType
    quantity: float = Field(default=1.0, gt=0)
    serving_size: ServingSizePayload | None = None
    date: datetime | None = None
    nutrition: NutritionPayload | None = None
    image_url: str | None = None
    notes: str | None = None


class EntryUpdate(BaseModel):
    """Partial entry update; changing quantity rescales nutrition."""

    quantity: float | None = Field(default=None, gt=0)
    serving_size: ServingSizePayload | None = None
    meal_type: MealType | None = None
    date: datetime | None = None
    nutrition: NutritionPayload | None = None
    image_url: str | None = None
    notes: str | None = None


class GoalsUpdate(BaseModel):
    calories: float | None = Field(default=None, ge=0)
    protein: float | None = Field(default=None, ge=0)
    carbs: float | None = Field(default=None, ge=0)
    fat: float | None = Field(default=None, ge=0)
    fiber: float | None = Field(default=None, ge=0)
    sugar: float | None = Field(default=None, ge=0)
    sodium: float | None = Field(default=None, ge=0)


class BodyProfilePayload(BaseModel):
    """Onboarding inputs for goal calculation."""

    weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    age: int = Field(gt=0, lt=130)
    gender: Gender
    activity_level: ActivityLevel
    goal_type: GoalType = GoalType.MAINTAIN_WEIGHT
    weekly_rate: WeightGoalRate = WeightGoalRate.MODERATE
    target_weight_kg: float | None = Field(default=None, gt=0)

    def to_domain(self) -> BodyProfile:
        return BodyProfile(**self.model_dump())


class WaterPayload(BaseModel):
    amount_ml: float = Field(gt=0)
