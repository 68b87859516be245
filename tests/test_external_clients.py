"""Tests for the TheMealDB client and the Edamam nutrition service."""

from unittest.mock import patch

import httpx
import pytest

from src.services.mealdb import MealDBClient, MealDBError
from src.services.nutrition_service import NutritionFacts, NutritionService

RealAsyncClient = httpx.AsyncClient


def transport_returning(handler):
    """Patch httpx.AsyncClient so every request goes through ``handler``."""

    def make_client(**kwargs):
        return RealAsyncClient(transport=httpx.MockTransport(handler), **kwargs)

    return patch("httpx.AsyncClient", side_effect=make_client)


class TestMealDBClient:
    """Tests for MealDBClient."""

    @pytest.mark.asyncio
    async def test_lookup(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"meals": [{"idMeal": "52772"}]})

        with transport_returning(handler):
            meal = await MealDBClient(base_url="https://mealdb.test/api").lookup("52772")

        assert meal == {"idMeal": "52772"}
        assert seen[0].url.path == "/api/lookup.php"
        assert seen[0].url.params["i"] == "52772"

    @pytest.mark.asyncio
    async def test_lookup_missing_meal(self):
        with transport_returning(lambda request: httpx.Response(200, json={"meals": None})):
            assert await MealDBClient().lookup("1") is None

    @pytest.mark.asyncio
    async def test_search_and_filter(self):
        def handler(request):
            if request.url.path.endswith("search.php"):
                assert request.url.params["s"] == "soup"
                return httpx.Response(200, json={"meals": [{"idMeal": "1"}, {"idMeal": "2"}]})
            assert request.url.params["c"] == "Seafood"
            return httpx.Response(200, json={"meals": None})

        with transport_returning(handler):
            client = MealDBClient()
            assert len(await client.search("soup")) == 2
            assert await client.filter_by_category("Seafood") == []

    @pytest.mark.asyncio
    async def test_http_error_becomes_mealdb_error(self):
        with transport_returning(lambda request: httpx.Response(503)):
            with pytest.raises(MealDBError):
                await MealDBClient().lookup("52772")

    @pytest.mark.asyncio
    async def test_invalid_json_becomes_mealdb_error(self):
        with transport_returning(lambda request: httpx.Response(200, text="<html>")):
            with pytest.raises(MealDBError):
                await MealDBClient().search("soup")


def configured_nutrition_service() -> NutritionService:
    service = NutritionService()
    service.app_id = "app"
    service.app_key = "key"
    service._configured = True
    return service


class TestNutritionService:
    """Tests for NutritionService."""

    def test_extract_nutrients_rounds_and_defaults(self):
        data = {
            "calories": 512.6,
            "totalNutrients": {
                "PROCNT": {"quantity": 30.4},
                "CHOCDF": {"quantity": 61.5},
                "NA": {"quantity": 900.2},
            },
        }
        facts = NutritionService()._extract_nutrients(data)
        assert facts == NutritionFacts(
            calories=513, protein_g=30, carbs_g=62, fat_g=0, fiber_g=0, sugar_g=0, sodium_mg=900
        )

    @pytest.mark.parametrize(
        ("quantity", "expected"),
        [(0.5, 1), (2.5, 3), (4.5, 5), (2.49, 2), (0, 0)],
    )
    def test_extract_nutrients_rounds_halves_up(self, quantity, expected):
        data = {
            "calories": quantity,
            "totalNutrients": {"PROCNT": {"quantity": quantity}, "FAT": {"quantity": quantity}},
        }
        facts = NutritionService()._extract_nutrients(data)
        assert (facts.calories, facts.protein_g, facts.fat_g) == (expected, expected, expected)

    @pytest.mark.asyncio
    async def test_not_configured_skips_request(self):
        service = NutritionService()
        service._configured = False
        with patch("httpx.AsyncClient") as client_cls:
            assert await service.analyze_recipe("Soup", ["1 cup lentils"]) is None
        client_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_analyze_recipe(self):
        def handler(request):
            assert request.url.params["app_id"] == "app"
            return httpx.Response(200, json={"calories": 100, "totalNutrients": {}})

        with transport_returning(handler):
            facts = await configured_nutrition_service().analyze_recipe("Soup", ["1 cup lentils"])
        assert facts.calories == 100

    @pytest.mark.asyncio
    async def test_failure_degrades_to_none(self):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        with transport_returning(handler):
            facts = await configured_nutrition_service().analyze_recipe("Soup", ["1 cup lentils"])
        assert facts is None
