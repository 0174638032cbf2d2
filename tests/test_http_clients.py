"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from caloria.adapters.fdc_client import HttpxFdcClient
from caloria.adapters.openai_recognition_client import OpenAIRecognitionClient


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str = json.dumps({"primary": {}})) -> None:
        self.responses = _FakeResponses(output_text)


def test_openai_recognition_client_parses_output() -> None:
    fake = _FakeOpenAI()
    client = OpenAIRecognitionClient(
        client=fake, model="gpt-5.2", reasoning_effort="high"
    )

    result = asyncio.run(
        client.recognize(
            image_data_url="data:image/jpeg;base64,ZmFrZQ==",
            prompt="Identify the food",
            schema={"type": "object"},
        )
    )

    payload = fake.responses.last_payload
    assert result == {"primary": {}}
    assert payload is not None
    assert payload["model"] == "gpt-5.2"
    assert payload["reasoning"] == {"effort": "high"}
    assert payload["store"] is False
    text_format = payload["text"]["format"]  # type: ignore[index]
    assert text_format["name"] == "food_recognition"


def test_openai_recognition_client_rejects_empty_output() -> None:
    client = OpenAIRecognitionClient(client=_FakeOpenAI(output_text=""), model="m")

    with pytest.raises(RuntimeError, match="empty"):
        asyncio.run(
            client.recognize(image_data_url="data:,", prompt="p", schema={})
        )


def test_fdc_client_search_and_get() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/foods/search"):
            return httpx.Response(200, json={"foods": []})
        return httpx.Response(200, json={"fdcId": 1, "foodNutrients": []})

    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    client = HttpxFdcClient(
        api_key="key",
        base_url="https://api.test",
        http_client=async_client,
    )

    search = asyncio.run(client.search_foods("rice", page_size=3))
    food = asyncio.run(client.get_food(1))

    assert search == {"foods": []}
    assert food["fdcId"] == 1
    body = json.loads(seen[0].content.decode())
    assert body["query"] == "rice"
    assert body["pageSize"] == 3
    assert "Foundation" in body["dataType"]
    assert seen[0].url.params["api_key"] == "key"
    assert seen[1].url.path == "/food/1"


def test_fdc_client_raises_for_http_errors() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    client = HttpxFdcClient(
        api_key="key",
        base_url="https://api.test",
        http_client=httpx.AsyncClient(transport=transport),
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.search_foods("rice"))
