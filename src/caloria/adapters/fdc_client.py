"""USDA FoodData Central API client."""

from dataclasses import dataclass, field
from typing import Protocol

import httpx

DEFAULT_DATA_TYPES = ("Foundation", "SR Legacy", "Survey (FNDDS)", "Branded")


class FdcClient(Protocol):
    """Raw access to the FoodData Central search and detail endpoints."""

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """Return the raw search payload with a ``foods`` list."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Return the raw detail payload for one food."""


@dataclass
class HttpxFdcClient(FdcClient):
    """FoodData Central client over a shared httpx session.

    Search is restricted to ``data_types``; nutrient amounts in both
    endpoints are reported per 100 g.
    """

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    data_types: tuple[str, ...] = field(default=DEFAULT_DATA_TYPES)
    timeout_seconds: float = 15

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxFdcClient":
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
        )

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        return await self._request(
            "POST",
            "/foods/search",
            json={
                "query": query,
                "pageSize": page_size,
                "dataType": list(self.data_types),
            },
        )

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        return await self._request("GET", f"/food/{fdc_id}")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self, method: str, path: str, json: dict[str, object] | None = None
    ) -> dict[str, object]:
        response = await self.http_client.request(
            method,
            f"{self.base_url}{path}",
            params={"api_key": self.api_key},
            json=json,
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()
