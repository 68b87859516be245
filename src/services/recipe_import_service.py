"""Recipe import from TheMealDB: normalization, dedup and upsert."""

import logging
import re
import time
from urllib.parse import parse_qs, urlparse

from sqlalchemy.orm import Session

from src.config import get_settings
from src.errors import BadGateway, BadRequest, NotFound
from src.models.enums import ImportOutcome, RecipeCategory
from src.models.user import User
from src.schemas.recipe_import import (
    ImportItemResult,
    ImportReport,
    NormalizedIngredient,
    NormalizedRecipe,
    RecipeImportRequest,
)
from src.services.mealdb import Meal, MealDBClient, MealDBError
from src.services.nutrition_service import NutritionService
from src.services.recipe_service import RecipeService

logger = logging.getLogger(__name__)

# TheMealDB exposes ingredients as strIngredient1..20 / strMeasure1..20
MAX_INGREDIENT_SLOTS = 20

# TheMealDB category label (lower-cased) -> internal category
CATEGORY_MAP = {
    "breakfast": RecipeCategory.BREAKFAST,
    "lunch": RecipeCategory.LUNCH,
    "dinner": RecipeCategory.DINNER,
    "main course": RecipeCategory.DINNER,
    "beef": RecipeCategory.DINNER,
    "chicken": RecipeCategory.DINNER,
    "goat": RecipeCategory.DINNER,
    "lamb": RecipeCategory.DINNER,
    "pork": RecipeCategory.DINNER,
    "seafood": RecipeCategory.DINNER,
    "pasta": RecipeCategory.DINNER,
    "vegetarian": RecipeCategory.DINNER,
    "vegan": RecipeCategory.DINNER,
}

LINE_BREAK_RE = re.compile(r"\r?\n+")
# "1.", "2)", "3 -", "4.Text", "Step 5", "STEP 6:" at the start of an instruction line.
# Not "1.5 cups" or "2-3 minutes".
STEP_LABEL_RE = re.compile(
    r"^(?:step\s*\d+\s*[.):-]?|\d+\s*[.):](?!\d)|\d+\s*-(?!\s*\d))\s*", re.IGNORECASE
)
LEADING_DIGITS_RE = re.compile(r"^\d+")


def map_category(label: str | None) -> RecipeCategory:
    """Map an upstream category label onto the internal category enum."""
    if not label:
        return RecipeCategory.OTHER
    return CATEGORY_MAP.get(label.strip().lower(), RecipeCategory.OTHER)


def extract_meal_id(url: str) -> str | None:
    """Pull a TheMealDB id out of a URL.

    Looks at the ``i`` and ``mealId`` query parameters first, then at the last
    path segment (``/meal/52874-Beef-Stew`` gives ``52874``).
    """
    parsed = urlparse(url.strip())
    if not parsed.scheme or not parsed.netloc:
        return None

    params = parse_qs(parsed.query)
    for key in ("i", "mealId"):
        values = [v.strip() for v in params.get(key, []) if v.strip()]
        if values:
            return values[0]

    segments = [s for s in parsed.path.split("/") if s]
    if not segments:
        return None
    last = segments[-1]
    digits = LEADING_DIGITS_RE.match(last)
    if digits:
        return digits.group(0)
    if "." in last:  # a script name such as lookup.php, not an id
        return None
    return last


def split_instructions(text: str | None) -> list[str]:
    """Split free-text instructions into ordered steps.

    Lines are trimmed, leading step labels removed and empty lines dropped.
    """
    steps = []
    for line in LINE_BREAK_RE.split(text or ""):
        line = STEP_LABEL_RE.sub("", line.strip(), count=1).strip()
        if line:
            steps.append(line)
    return steps


def extract_ingredients(meal: Meal) -> list[NormalizedIngredient]:
    """Collect the non-empty ingredient/measure pairs of a meal."""
    ingredients = []
    for slot in range(1, MAX_INGREDIENT_SLOTS + 1):
        name = str(meal.get(f"strIngredient{slot}") or "").strip()
        if not name:
            continue
        quantity = str(meal.get(f"strMeasure{slot}") or "").strip()
        ingredients.append(
            NormalizedIngredient(name=name, quantity=quantity or None, position=slot)
        )
    return ingredients


def normalize_meal(meal: Meal) -> NormalizedRecipe:
    """Map a full TheMealDB record into the internal recipe shape."""
    area = str(meal.get("strArea") or "").strip()
    return NormalizedRecipe(
        external_source=MealDBClient.SOURCE,
        external_id=str(meal["idMeal"]),
        title=str(meal.get("strMeal") or "").strip() or "Untitled",
        category=map_category(meal.get("strCategory")),
        description=f"{area} cuisine" if area else None,
        image=meal.get("strMealThumb") or None,
        source_url=meal.get("strSource") or None,
        ingredients=extract_ingredients(meal),
        steps=split_instructions(meal.get("strInstructions")),
    )


class RecipeImportService:
    """Admin-only import of TheMealDB recipes into the catalog."""

    def __init__(
        self,
        db: Session,
        mealdb: MealDBClient,
        nutrition: NutritionService,
    ):
        self.db = db
        self.mealdb = mealdb
        self.nutrition = nutrition
        self.recipes = RecipeService(db)
        self.settings = get_settings()

    async def run(self, request: RecipeImportRequest, actor: User) -> ImportReport:
        """Dispatch to single-item mode (id/url) or bulk mode (q/category)."""
        if request.id or request.url:
            return await self.import_single(request, actor)
        if request.q or request.category:
            return await self.import_bulk(request, actor)
        raise BadRequest("Provide id, url, q or category")

    async def _enrich(self, normalized: NormalizedRecipe):
        return await self.nutrition.analyze_recipe(
            normalized.title, normalized.ingredient_lines()
        )

    async def import_single(self, request: RecipeImportRequest, actor: User) -> ImportReport:
        """Fetch one meal and upsert it. Re-importing refreshes the stored recipe."""
        meal_id = request.id or extract_meal_id(request.url or "")
        if not meal_id:
            raise BadRequest("Could not determine a TheMealDB id from the request")

        override = None
        if request.category:
            try:
                override = RecipeCategory(request.category.lower())
            except ValueError as e:
                raise BadRequest(f"Invalid category: {request.category}") from e

        try:
            meal = await self.mealdb.lookup(meal_id)
        except MealDBError as e:
            raise BadGateway(str(e)) from e
        if meal is None:
            raise NotFound("Not found on TheMealDB")

        normalized = normalize_meal(meal)
        if override is not None:
            normalized.category = override

        nutrition = await self._enrich(normalized)
        result = self.recipes.upsert_recipe(
            actor.id,
            normalized,
            is_public=request.public,
            published=request.publish,
            nutrition=nutrition,
        )

        outcome = ImportOutcome.INSERTED if result.created else ImportOutcome.UPDATED
        logger.info(
            f"Imported {normalized.external_source}:{normalized.external_id} "
            f"as recipe {result.recipe_id} ({outcome.value})"
        )
        report = ImportReport(mode="single")
        report.record(
            ImportItemResult(
                external_id=normalized.external_id,
                title=normalized.title,
                status=outcome,
                recipe_id=result.recipe_id,
            )
        )
        return report

    async def import_bulk(self, request: RecipeImportRequest, actor: User) -> ImportReport:
        """Search or filter TheMealDB and insert every meal not already imported.

        Items are processed sequentially in upstream order. Per-item upstream
        failures are reported as failed outcomes instead of aborting the run.
        """
        limit = min(request.limit, self.settings.import_max_items)
        deadline = time.monotonic() + self.settings.import_time_budget_seconds

        needs_lookup = not request.q
        try:
            if request.q:
                meals = await self.mealdb.search(request.q)
            else:
                meals = await self.mealdb.filter_by_category(request.category)
        except MealDBError as e:
            raise BadGateway(str(e)) from e

        report = ImportReport(mode="bulk")
        for summary in meals[:limit]:
            meal_id = str(summary.get("idMeal") or "").strip()
            title = summary.get("strMeal")
            if not meal_id:
                report.record(
                    ImportItemResult(
                        external_id="",
                        title=title,
                        status=ImportOutcome.FAILED,
                        reason="missing idMeal",
                    )
                )
                continue

            existing = self.recipes.find_by_external_key(MealDBClient.SOURCE, meal_id)
            if existing is not None:
                report.record(
                    ImportItemResult(
                        external_id=meal_id,
                        title=title,
                        status=ImportOutcome.SKIPPED,
                        recipe_id=existing.id,
                        reason="already imported",
                    )
                )
                continue

            # Only items that still need upstream or insert work count against the budget
            if time.monotonic() > deadline:
                report.record(
                    ImportItemResult(
                        external_id=meal_id,
                        title=title,
                        status=ImportOutcome.FAILED,
                        reason="time budget exceeded",
                    )
                )
                continue

            item = await self._import_bulk_item(meal_id, summary, needs_lookup, request, actor)
            report.record(item)

        logger.info(
            f"Bulk import by user {actor.id}: {report.inserted} inserted, "
            f"{report.skipped} skipped, {report.failed} failed"
        )
        return report

    async def _import_bulk_item(
        self,
        meal_id: str,
        summary: Meal,
        needs_lookup: bool,
        request: RecipeImportRequest,
        actor: User,
    ) -> ImportItemResult:
        title = summary.get("strMeal")
        meal = summary
        if needs_lookup:
            try:
                meal = await self.mealdb.lookup(meal_id)
            except MealDBError as e:
                return ImportItemResult(
                    external_id=meal_id, title=title, status=ImportOutcome.FAILED, reason=str(e)
                )
            if meal is None:
                return ImportItemResult(
                    external_id=meal_id,
                    title=title,
                    status=ImportOutcome.FAILED,
                    reason="not found on TheMealDB",
                )

        normalized = normalize_meal(meal)
        nutrition = await self._enrich(normalized)
        recipe_id = self.recipes.insert_recipe(
            actor.id,
            normalized,
            is_public=request.public,
            published=request.publish,
            nutrition=nutrition,
        )
        if recipe_id is None:
            # Lost a race with a concurrent import of the same meal
            return ImportItemResult(
                external_id=meal_id,
                title=normalized.title,
                status=ImportOutcome.SKIPPED,
                reason="already imported",
            )

        logger.debug(f"Inserted {MealDBClient.SOURCE}:{meal_id} as recipe {recipe_id}")
        return ImportItemResult(
            external_id=meal_id,
            title=normalized.title,
            status=ImportOutcome.INSERTED,
            recipe_id=recipe_id,
        )
