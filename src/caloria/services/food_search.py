"""Manual food search backed by USDA FoodData Central."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass

from caloria.adapters.fdc_client import FdcClient
from caloria.domain.entries import Food, FoodCategory
from caloria.domain.nutrition import NutritionData, ServingSize
from caloria.services.cache import Cache

# FDC nutrient ids; amounts are reported per 100 g.
_NUTRIENT_IDS: dict[int, str] = {
    1008: "calories",
    1003: "protein",
    1005: "carbs",
    1004: "fat",
    1079: "fiber",
    2000: "sugar",
    1063: "sugar",
    1093: "sodium",
    1253: "cholesterol",
    1258: "saturated_fat",
    1257: "trans_fat",
    1092: "potassium",
    1087: "calcium",
    1089: "iron",
    1104: "vitamin_a",
    1162: "vitamin_c",
}

_VERIFIED_DATA_TYPES = {"Foundation", "SR Legacy", "Survey (FNDDS)"}
_GRAM_UNITS = {"g", "grm", "gram", "grams"}

_logger = logging.getLogger(__name__)


@dataclass
class FoodSearchService:
    """Search foods for manual logging, with caching and a short retry."""

    fdc_client: FdcClient
    cache: Cache
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 5) -> list[Food]:
        """Return foods matching query with nutrition per 100 g."""
        cleaned = query.strip()
        if not cleaned:
            return []
        cache_key = f"fdc:search:{cleaned.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(cleaned, page_size=limit),
            action="search",
        )
        foods = [_parse_search_food(item) for item in payload.get("foods", [])]
        self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        _logger.info("Food search: query=%s results=%s", cleaned, len(foods))
        return foods

    async def get_food(self, fdc_id: int) -> Food:
        """Return a food with nutrition for its labelled serving."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, Food):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        food = _parse_food_detail(payload)
        self.cache.set(cache_key, food, ttl_seconds=self.food_ttl_seconds)
        return food

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[dict[str, object]]], *, action: str
    ) -> dict[str, object]:
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def extract_nutrition(food_nutrients: list[dict[str, object]]) -> NutritionData:
    """Map FDC nutrient rows onto NutritionData (per 100 g)."""
    values: dict[str, object] = {}
    for nutrient in food_nutrients:
        info = nutrient.get("nutrient") or {}
        nutrient_id = (
            info.get("id") if isinstance(info, Mapping) else None
        ) or nutrient.get("nutrientId")
        name = _NUTRIENT_IDS.get(nutrient_id) if isinstance(nutrient_id, int) else None
        if name is None or name in values:
            continue
        amount = nutrient.get("amount", nutrient.get("value"))
        if amount is not None:
            values[name] = amount
    return NutritionData.from_mapping(values)


def _parse_search_food(item: dict[str, object]) -> Food:
    return Food(
        id=f"fdc_{item['fdcId']}",
        name=str(item.get("description", "")),
        nutrition=extract_nutrition(item.get("foodNutrients") or []),
        serving_size=ServingSize(amount=100, unit="g", grams=100),
        category=FoodCategory.UNKNOWN,
        brand=_brand(item),
        barcode=_optional_str(item.get("gtinUpc")),
        verified=item.get("dataType") in _VERIFIED_DATA_TYPES,
    )


def _parse_food_detail(payload: dict[str, object]) -> Food:
    per_100g = extract_nutrition(payload.get("foodNutrients") or [])
    serving_grams = _serving_grams(payload)
    if serving_grams is None:
        serving = ServingSize(amount=100, unit="g", grams=100)
        nutrition = per_100g
    else:
        serving = ServingSize(
            amount=float(payload.get("servingSize", serving_grams)),
            unit=str(payload.get("servingSizeUnit") or "g"),
            grams=serving_grams,
        )
        nutrition = per_100g.scaled(serving_grams / 100)
    return Food(
        id=f"fdc_{payload['fdcId']}",
        name=str(payload.get("description", "")),
        nutrition=nutrition,
        serving_size=serving,
        category=FoodCategory.UNKNOWN,
        brand=_brand(payload),
        barcode=_optional_str(payload.get("gtinUpc")),
        verified=payload.get("dataType") in _VERIFIED_DATA_TYPES,
    )


def _serving_grams(payload: dict[str, object]) -> float | None:
    size = payload.get("servingSize")
    unit = str(payload.get("servingSizeUnit") or "g").lower()
    if isinstance(size, int | float) and size > 0 and unit in _GRAM_UNITS:
        return float(size)
    return None


def _brand(payload: dict[str, object]) -> str | None:
    return _optional_str(payload.get("brandName") or payload.get("brandOwner"))


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _status_code_from_exception(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
