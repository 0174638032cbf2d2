"""Food recognition from meal photos."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from caloria.domain.entries import Food, FoodCategory
from caloria.domain.nutrition import NutritionData, ServingSize
from caloria.domain.recognition import (
    FoodRecognitionResult,
    RecognitionExtract,
    RecognizedAlternative,
    RecognizedFood,
)
from caloria.services.clock import Clock

_logger = logging.getLogger(__name__)

_FOOD_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "category": {
            "type": "string",
            "enum": [category.value for category in FoodCategory],
        },
        "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
        "serving_amount": {"type": "number"},
        "serving_unit": {"type": "string"},
        "serving_grams": {"type": "number"},
        "calories": {"type": "number", "minimum": 0.0},
        "protein": {"type": "number", "minimum": 0.0},
        "carbs": {"type": "number", "minimum": 0.0},
        "fat": {"type": "number", "minimum": 0.0},
        "fiber": {"type": "number", "minimum": 0.0},
        "sugar": {"type": "number", "minimum": 0.0},
        "sodium": {"type": "number", "minimum": 0.0},
    },
    "required": [
        "name",
        "category",
        "confidence",
        "serving_amount",
        "serving_unit",
        "serving_grams",
        "calories",
        "protein",
        "carbs",
        "fat",
        "fiber",
        "sugar",
        "sodium",
    ],
    "additionalProperties": False,
}

RECOGNITION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "primary": _FOOD_SCHEMA,
        "alternatives": {"type": "array", "items": _FOOD_SCHEMA},
        "suggested_grams": {"anyOf": [{"type": "number"}, {"type": "null"}]},
    },
    "required": ["primary", "alternatives", "suggested_grams"],
    "additionalProperties": False,
}

RECOGNITION_PROMPT = (
    "Identify the main food in this meal photo. "
    "Report nutrition per serving, a confidence between 0 and 1, up to three "
    "alternative candidates, and the visible portion in grams if you can "
    "estimate it."
)


class RecognitionClient(Protocol):
    """Interface for photo-based food recognition backends."""

    async def recognize(
        self, *, image_data_url: str, prompt: str, schema: dict[str, object]
    ) -> dict[str, object]:
        """Return raw recognition data matching schema."""


@dataclass
class RecognitionService:
    """Validates recognition output and scales it to the suggested portion."""

    client: RecognitionClient
    clock: Clock

    async def recognize(
        self, image_bytes: bytes, image_url: str | None = None
    ) -> FoodRecognitionResult:
        """Recognize the food in a photo."""
        if not image_bytes:
            raise ValueError("Image is empty")
        raw = await self.client.recognize(
            image_data_url=_to_data_url(image_bytes),
            prompt=RECOGNITION_PROMPT,
            schema=RECOGNITION_SCHEMA,
        )
        extract = RecognitionExtract.model_validate(raw)
        detected = _to_food(extract.primary)
        grams = extract.suggested_grams or extract.primary.serving_grams
        factor = grams / extract.primary.serving_grams
        _logger.info(
            "Recognized %s (confidence=%.2f, grams=%.0f)",
            detected.name,
            extract.primary.confidence,
            grams,
        )
        return FoodRecognitionResult(
            id=f"recognition_{uuid4().hex}",
            detected_food=detected,
            nutrition=detected.nutrition.scaled(factor),
            confidence=extract.primary.confidence,
            timestamp=self.clock.now(),
            suggested_portion=ServingSize(amount=grams, unit="g", grams=grams),
            alternatives=[
                RecognizedAlternative(
                    id=f"alt_{index}",
                    food=_to_food(candidate),
                    confidence=candidate.confidence,
                )
                for index, candidate in enumerate(extract.alternatives, start=1)
            ],
            image_url=image_url,
        )


def _to_food(item: RecognizedFood) -> Food:
    try:
        category = FoodCategory(item.category)
    except ValueError:
        category = FoodCategory.UNKNOWN
    return Food(
        id=f"food_{uuid4().hex[:12]}",
        name=item.name,
        nutrition=NutritionData(
            calories=item.calories,
            protein=item.protein,
            carbs=item.carbs,
            fat=item.fat,
            fiber=item.fiber,
            sugar=item.sugar,
            sodium=item.sodium,
        ),
        serving_size=ServingSize(
            amount=item.serving_amount,
            unit=item.serving_unit,
            grams=item.serving_grams,
        ),
        category=category,
        verified=False,
    )


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[4:12] in {b"ftypheic", b"ftypheix", b"ftypmif1"}:
        return "image/heic"
    return "image/jpeg"
