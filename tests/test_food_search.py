"""Tests for USDA food search."""

import asyncio

import pytest

from caloria.services.cache import InMemoryCache
from caloria.services.clock import FixedClock
from caloria.services.food_search import FoodSearchService, extract_nutrition
from tests.conftest import NOW, FakeFdcClient


def _service(fdc_client: FakeFdcClient, retry_attempts: int = 1) -> FoodSearchService:
    return FoodSearchService(
        fdc_client=fdc_client,
        cache=InMemoryCache(clock=FixedClock(NOW)),
        retry_attempts=retry_attempts,
        retry_delay_seconds=0,
    )


def test_search_maps_foods_per_100g() -> None:
    service = _service(FakeFdcClient())

    foods = asyncio.run(service.search("chicken breast"))

    assert [food.id for food in foods] == ["fdc_171077", "fdc_2345678"]
    first, second = foods
    assert first.nutrition.calories == 165
    assert first.nutrition.protein == 31
    assert first.nutrition.sodium == 74
    assert first.serving_size.grams == 100
    assert first.verified is True
    assert second.verified is False
    assert second.brand == "Kirkland"
    assert second.barcode == "096619000000"


def test_search_uses_cache() -> None:
    client = FakeFdcClient()
    service = _service(client)

    asyncio.run(service.search("Chicken"))
    asyncio.run(service.search("chicken "))

    assert client.search_calls == 1


def test_blank_query_skips_api() -> None:
    client = FakeFdcClient()

    assert asyncio.run(_service(client).search("   ")) == []
    assert client.search_calls == 0


def test_get_food_scales_to_serving() -> None:
    service = _service(FakeFdcClient())

    food = asyncio.run(service.get_food(2345678))

    assert food.serving_size.grams == 85
    assert food.nutrition.calories == pytest.approx(102)
    assert food.nutrition.protein == pytest.approx(20.4)
    assert food.brand == "Costco"


def test_get_food_without_gram_serving_stays_per_100g() -> None:
    client = FakeFdcClient(
        food_payload={
            "fdcId": 1,
            "description": "Milk",
            "dataType": "Foundation",
            "servingSize": 1,
            "servingSizeUnit": "cup",
            "foodNutrients": [{"nutrientId": 1008, "amount": 42}],
        }
    )

    food = asyncio.run(_service(client).get_food(1))

    assert food.serving_size.grams == 100
    assert food.nutrition.calories == 42
    assert food.verified is True


def test_retry_recovers_from_one_failure() -> None:
    client = FakeFdcClient(failures=1)

    foods = asyncio.run(_service(client).search("rice"))

    assert foods
    assert client.search_calls == 2


def test_retry_gives_up_after_limit() -> None:
    client = FakeFdcClient(failures=5)

    with pytest.raises(RuntimeError):
        asyncio.run(_service(client, retry_attempts=1).search("rice"))

    assert client.search_calls == 2


def test_extract_nutrition_prefers_first_sugar_source() -> None:
    nutrition = extract_nutrition(
        [
            {"nutrientId": 2000, "value": 12},
            {"nutrientId": 1063, "value": 99},
            {"nutrientId": 9999, "value": 1},
            {"nutrient": {"id": 1162}, "amount": 4.5},
        ]
    )

    assert nutrition.sugar == 12
    assert nutrition.vitamin_c == 4.5
