"""TheMealDB client (external recipe source)."""

import logging
from typing import Any

import httpx

from src.config import get_settings

logger = logging.getLogger(__name__)

Meal = dict[str, Any]


class MealDBError(Exception):
    """TheMealDB could not be reached or answered with an error."""


class MealDBClient:
    """Thin async client over TheMealDB JSON API."""

    SOURCE = "themealdb"

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.mealdb_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds

    async def _get(self, path: str, params: dict[str, str]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(f"{self.base_url}/{path}", params=params)
                response.raise_for_status()
                return response.json() or {}
        except httpx.HTTPError as e:
            logger.warning(f"TheMealDB request {path} {params} failed: {e}")
            raise MealDBError(f"TheMealDB request failed: {e}") from e
        except ValueError as e:
            logger.warning(f"TheMealDB returned invalid JSON for {path}: {e}")
            raise MealDBError("TheMealDB returned invalid JSON") from e

    async def lookup(self, meal_id: str) -> Meal | None:
        """Full meal record by id, or None if TheMealDB has no such meal."""
        data = await self._get("lookup.php", {"i": meal_id})
        meals = data.get("meals") or []
        return meals[0] if meals else None

    async def search(self, query: str) -> list[Meal]:
        """Full meal records matching a name search."""
        data = await self._get("search.php", {"s": query})
        return data.get("meals") or []

    async def filter_by_category(self, category: str) -> list[Meal]:
        """Meal summaries (idMeal, strMeal, strMealThumb) in a category."""
        data = await self._get("filter.php", {"c": category})
        return data.get("meals") or []
