"""Nutrition enrichment using the Edamam Nutrition Analysis API."""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import httpx

from src.config import get_settings

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest whole number, halves away from zero (2.5 -> 3)."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


@dataclass
class NutritionFacts:
    """Whole-recipe nutrition totals, rounded to whole units."""

    calories: int = 0
    protein_g: int = 0
    carbs_g: int = 0
    fat_g: int = 0
    fiber_g: int = 0
    sugar_g: int = 0
    sodium_mg: int = 0


class NutritionService:
    """Service for fetching nutrition data from Edamam."""

    # Edamam nutrient codes -> NutritionFacts fields
    NUTRIENT_CODES = {
        "PROCNT": "protein_g",
        "CHOCDF": "carbs_g",
        "FAT": "fat_g",
        "FIBTG": "fiber_g",
        "SUGAR": "sugar_g",
        "NA": "sodium_mg",
    }

    def __init__(self) -> None:
        """Initialize the nutrition service."""
        settings = get_settings()
        self.app_id = settings.edamam_app_id
        self.app_key = settings.edamam_app_key
        self.api_url = settings.edamam_api_url
        self.timeout = settings.http_timeout_seconds
        self._configured = settings.edamam_configured

    @property
    def is_configured(self) -> bool:
        """Check if the Edamam credentials are configured."""
        return self._configured

    def _extract_nutrients(self, data: dict) -> NutritionFacts:
        """Map an Edamam nutrition-details response onto NutritionFacts.

        Args:
            data: Response body with ``calories`` and ``totalNutrients``

        Returns:
            NutritionFacts with every value rounded half up; absent nutrients are zero
        """
        facts = NutritionFacts(calories=round_half_up(data.get("calories") or 0))
        total = data.get("totalNutrients") or {}
        for code, field_name in self.NUTRIENT_CODES.items():
            quantity = (total.get(code) or {}).get("quantity") or 0
            setattr(facts, field_name, round_half_up(quantity))
        return facts

    async def analyze_recipe(self, title: str, ingredients: list[str]) -> NutritionFacts | None:
        """Compute nutrition for a recipe's ingredient lines.

        Never raises: any failure is logged and reported as None so callers
        fall back to zero-valued nutrition.

        Args:
            title: Recipe title
            ingredients: Lines like "2 cups flour"

        Returns:
            NutritionFacts if successful, None if not configured or failed
        """
        if not self.is_configured:
            logger.debug("Edamam API not configured - skipping nutrition enrichment")
            return None

        if not ingredients:
            return None

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.api_url,
                    params={"app_id": self.app_id, "app_key": self.app_key},
                    json={"title": title, "ingr": ingredients},
                )
                response.raise_for_status()
                return self._extract_nutrients(response.json())
        except httpx.HTTPError as e:
            logger.warning(f"Edamam API error for '{title}': {e}")
        except Exception as e:
            logger.warning(f"Error analyzing nutrition for '{title}': {e}")
        return None
