"""Canned recognition client for demos and local runs."""

import asyncio
import copy
from dataclasses import dataclass, field

from caloria.services.recognition import RecognitionClient

DEMO_RESULT: dict[str, object] = {
    "primary": {
        "name": "Grilled chicken",
        "category": "protein",
        "confidence": 0.85,
        "serving_amount": 150,
        "serving_unit": "g",
        "serving_grams": 150,
        "calories": 250,
        "protein": 30,
        "carbs": 0,
        "fat": 12,
        "fiber": 0,
        "sugar": 0,
        "sodium": 450,
    },
    "alternatives": [
        {
            "name": "Chicken breast",
            "category": "protein",
            "confidence": 0.6,
            "serving_amount": 150,
            "serving_unit": "g",
            "serving_grams": 150,
            "calories": 231,
            "protein": 43,
            "carbs": 0,
            "fat": 5,
            "fiber": 0,
            "sugar": 0,
            "sodium": 400,
        }
    ],
    "suggested_grams": None,
}


@dataclass
class DemoRecognitionClient(RecognitionClient):
    """Returns the same result for every photo after an optional delay."""

    delay_seconds: float = 0.0
    payload: dict[str, object] = field(
        default_factory=lambda: copy.deepcopy(DEMO_RESULT)
    )

    async def recognize(
        self, *, image_data_url: str, prompt: str, schema: dict[str, object]
    ) -> dict[str, object]:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        return copy.deepcopy(self.payload)
