"""Models for food recognition results."""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, Field

from caloria.domain.entries import Food
from caloria.domain.nutrition import NutritionData, ServingSize


class RecognizedFood(BaseModel):
    """Single food detected in a photo, nutrition per serving."""

    name: str
    category: str = "unknown"
    confidence: float = Field(ge=0.0, le=1.0)
    serving_amount: float = Field(gt=0)
    serving_unit: str = "g"
    serving_grams: float = Field(gt=0)
    calories: float = Field(ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)
    fiber: float = Field(default=0.0, ge=0.0)
    sugar: float = Field(default=0.0, ge=0.0)
    sodium: float = Field(default=0.0, ge=0.0)


class RecognitionExtract(BaseModel):
    """Structured output from a recognition client."""

    primary: RecognizedFood
    alternatives: list[RecognizedFood] = Field(default_factory=list)
    suggested_grams: float | None = Field(default=None, gt=0)


@dataclass(frozen=True)
class RecognizedAlternative:
    """A lower-confidence candidate for the photographed food."""

    id: str
    food: Food
    confidence: float


@dataclass(frozen=True)
class FoodRecognitionResult:
    """Recognition outcome with nutrition scaled to the suggested portion."""

    id: str
    detected_food: Food
    nutrition: NutritionData
    confidence: float
    timestamp: datetime
    suggested_portion: ServingSize | None
    alternatives: list[RecognizedAlternative]
    image_url: str | None = None
