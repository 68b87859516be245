"""Recipe service: hydration, authoring and the external-key upsert."""

import logging
from dataclasses import dataclass

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from src.errors import BadRequest, NotFound
from src.models.recipe import Recipe, RecipeIngredient, RecipeNutrition, RecipeStep
from src.models.user import User
from src.schemas.recipe import (
    NutritionInput,
    NutritionPatch,
    NutritionView,
    RecipeCreate,
    RecipeIngredientView,
    RecipeSummary,
    RecipeUpdate,
    RecipeView,
)
from src.schemas.recipe_import import NormalizedRecipe
from src.services.nutrition_service import NutritionFacts

logger = logging.getLogger(__name__)

PUBLIC_LIST_LIMIT = 200
ADMIN_LIST_DEFAULT_LIMIT = 100
ADMIN_LIST_MAX_LIMIT = 500

NUTRITION_FIELDS = (
    "calories",
    "protein_g",
    "carbs_g",
    "fat_g",
    "fiber_g",
    "sugar_g",
    "sodium_mg",
)


@dataclass
class UpsertResult:
    """Outcome of an upsert by external key."""

    recipe_id: int
    created: bool


def hydrate(recipe: Recipe) -> RecipeView:
    """Assemble the served representation of a recipe from its child rows.

    Ingredients come back ordered by (position, id) and steps by step number
    through the relationship ordering. A missing nutrition row reads as zeros.
    """
    n = recipe.nutrition
    return RecipeView(
        id=recipe.id,
        title=recipe.title,
        category=recipe.category,
        description=recipe.description,
        image=recipe.image_url,
        ingredients=[RecipeIngredientView.model_validate(i) for i in recipe.ingredients],
        instructions=[step.text for step in recipe.steps],
        nutrition=NutritionView(
            calories=n.calories or 0,
            protein=n.protein_g or 0,
            carbs=n.carbs_g or 0,
            fat=n.fat_g or 0,
            fiber=n.fiber_g or 0,
            sugar=n.sugar_g or 0,
            sodium=n.sodium_mg or 0,
        )
        if n is not None
        else NutritionView(),
        created_at=recipe.created_at,
        updated_at=recipe.updated_at,
    )


def clean_steps(instructions: list[str]) -> list[str]:
    """Trim instructions and drop empty ones."""
    return [text.strip() for text in instructions if text and text.strip()]


class RecipeService:
    """Service for recipe persistence."""

    def __init__(self, db: Session):
        self.db = db

    # --- Reads ---

    def get_recipe(self, recipe_id: int) -> Recipe | None:
        return self.db.query(Recipe).filter(Recipe.id == recipe_id).first()

    def get_visible_recipe(self, recipe_id: int, user: User | None) -> Recipe:
        """Get a recipe the caller may see; hidden recipes read as not found."""
        recipe = self.get_recipe(recipe_id)
        if recipe is None or not recipe.is_visible_to(user):
            raise NotFound("Recipe not found")
        return recipe

    def find_by_external_key(self, external_source: str, external_id: str) -> Recipe | None:
        return (
            self.db.query(Recipe)
            .filter(
                Recipe.external_source == external_source,
                Recipe.external_id == external_id,
            )
            .first()
        )

    def list_visible(self, user: User | None) -> list[Recipe]:
        """Public+published recipes, plus the caller's own (admins see everything)."""
        query = self.db.query(Recipe).options(
            selectinload(Recipe.ingredients),
            selectinload(Recipe.steps),
            selectinload(Recipe.nutrition),
        )
        public = and_(Recipe.is_public.is_(True), Recipe.published.is_(True))
        if user is None:
            query = query.filter(public)
        elif not user.is_admin:
            query = query.filter(or_(public, Recipe.created_by == user.id))

        return (
            query.order_by(Recipe.created_at.desc(), Recipe.id.desc())
            .limit(PUBLIC_LIST_LIMIT)
            .all()
        )

    def admin_summaries(
        self, search: str = "", limit: int = ADMIN_LIST_DEFAULT_LIMIT
    ) -> list[RecipeSummary]:
        """Summary rows for the admin table, newest first."""
        limit = min(max(limit, 1), ADMIN_LIST_MAX_LIMIT)
        ingredient_count = (
            select(func.count(RecipeIngredient.id))
            .where(RecipeIngredient.recipe_id == Recipe.id)
            .correlate(Recipe)
            .scalar_subquery()
        )
        step_count = (
            select(func.count(RecipeStep.id))
            .where(RecipeStep.recipe_id == Recipe.id)
            .correlate(Recipe)
            .scalar_subquery()
        )

        query = (
            self.db.query(
                Recipe,
                User.email,
                RecipeNutrition,
                ingredient_count.label("ingredient_count"),
                step_count.label("step_count"),
            )
            .outerjoin(User, User.id == Recipe.created_by)
            .outerjoin(RecipeNutrition, RecipeNutrition.recipe_id == Recipe.id)
        )
        search = search.strip()
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Recipe.title.ilike(pattern), Recipe.category.ilike(pattern)))

        rows = query.order_by(Recipe.created_at.desc(), Recipe.id.desc()).limit(limit).all()
        return [
            RecipeSummary(
                id=recipe.id,
                title=recipe.title,
                category=recipe.category,
                description=recipe.description,
                image=recipe.image_url,
                is_public=recipe.is_public,
                published=recipe.published,
                external_source=recipe.external_source,
                external_id=recipe.external_id,
                created_at=recipe.created_at,
                created_by_email=email,
                calories=nutrition.calories if nutrition else 0,
                protein_g=nutrition.protein_g if nutrition else 0,
                carbs_g=nutrition.carbs_g if nutrition else 0,
                fat_g=nutrition.fat_g if nutrition else 0,
                ingredient_count=ingredients or 0,
                step_count=steps or 0,
            )
            for recipe, email, nutrition, ingredients, steps in rows
        ]

    # --- Direct authoring ---

    def create_recipe(self, creator: User, data: RecipeCreate) -> Recipe:
        """Create a recipe with its ingredients, steps and nutrition in one commit."""
        recipe = Recipe(
            title=data.title,
            category=data.category.value,
            description=data.description,
            image_url=data.image,
            created_by=creator.id,
            is_public=data.is_public,
            published=data.published,
        )
        self._replace_ingredients(recipe, [(i.name, i.quantity) for i in data.ingredients])
        self._replace_steps(recipe, data.instructions)
        recipe.nutrition = self._nutrition_row(data.nutrition)

        self.db.add(recipe)
        self._commit()
        self.db.refresh(recipe)
        logger.info(f"User {creator.id} created recipe {recipe.id} ({recipe.title})")
        return recipe

    def update_recipe(self, recipe: Recipe, data: RecipeUpdate) -> Recipe:
        """Patch a recipe. Supplied child lists fully replace the existing ones."""
        fields = data.model_dump(exclude_unset=True)
        for required in ("title", "category"):
            if required in fields and fields[required] is None:
                raise BadRequest(f"{required} cannot be null")

        if "title" in fields:
            recipe.title = data.title
        if "category" in fields:
            recipe.category = data.category.value
        if "description" in fields:
            recipe.description = data.description
        if "image" in fields:
            recipe.image_url = data.image
        for flag in ("is_public", "published"):
            if fields.get(flag) is not None:
                setattr(recipe, flag, fields[flag])

        if data.ingredients is not None:
            self._replace_ingredients(recipe, [(i.name, i.quantity) for i in data.ingredients])
        if data.instructions is not None:
            self._replace_steps(recipe, data.instructions)
        if data.nutrition is not None:
            self._patch_nutrition(recipe, data.nutrition)

        recipe.updated_at = func.now()
        self._commit()
        self.db.refresh(recipe)
        return recipe

    def delete_recipe(self, recipe_id: int) -> bool:
        """Delete a recipe and its children. Returns False if nothing was deleted."""
        recipe = self.get_recipe(recipe_id)
        if recipe is None:
            return False
        self.db.delete(recipe)
        self._commit()
        logger.info(f"Deleted recipe {recipe_id}")
        return True

    # --- External-key upsert ---

    def upsert_recipe(
        self,
        creator_id: int,
        normalized: NormalizedRecipe,
        is_public: bool = True,
        published: bool = True,
        nutrition: NutritionFacts | None = None,
    ) -> UpsertResult:
        """Insert or update a recipe keyed by (external_source, external_id).

        Existing recipes get their base fields updated and their ingredients
        and steps fully replaced. Everything happens in one transaction. If a
        concurrent import inserts the same key first, the insert conflict is
        treated as authoritative and the write is retried as an update.
        """
        args = (creator_id, normalized, is_public, published, nutrition)
        try:
            return self._upsert_once(*args)
        except IntegrityError:
            logger.info(
                f"Concurrent insert for {normalized.external_source}:"
                f"{normalized.external_id}, retrying as update"
            )
            return self._upsert_once(*args)

    def _upsert_once(
        self,
        creator_id: int,
        normalized: NormalizedRecipe,
        is_public: bool,
        published: bool,
        nutrition: NutritionFacts | None,
    ) -> UpsertResult:
        recipe = self.find_by_external_key(normalized.external_source, normalized.external_id)
        created = recipe is None
        if created:
            recipe = Recipe(
                created_by=creator_id,
                external_source=normalized.external_source,
                external_id=normalized.external_id,
            )
            self.db.add(recipe)
        else:
            recipe.updated_at = func.now()

        self._apply_normalized(recipe, normalized, is_public, published, nutrition)
        self._commit()
        return UpsertResult(recipe_id=recipe.id, created=created)

    def insert_recipe(
        self,
        creator_id: int,
        normalized: NormalizedRecipe,
        is_public: bool = True,
        published: bool = True,
        nutrition: NutritionFacts | None = None,
    ) -> int | None:
        """Insert a new imported recipe; None if its external key already exists."""
        recipe = Recipe(
            created_by=creator_id,
            external_source=normalized.external_source,
            external_id=normalized.external_id,
        )
        self.db.add(recipe)
        self._apply_normalized(recipe, normalized, is_public, published, nutrition)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return None
        except Exception:
            self.db.rollback()
            raise
        return recipe.id

    # --- Helpers ---

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _apply_normalized(
        self,
        recipe: Recipe,
        normalized: NormalizedRecipe,
        is_public: bool,
        published: bool,
        nutrition: NutritionFacts | None,
    ) -> None:
        recipe.title = normalized.title
        recipe.category = normalized.category.value
        recipe.description = normalized.description
        recipe.image_url = normalized.image
        recipe.source_url = normalized.source_url
        recipe.is_public = is_public
        recipe.published = published

        recipe.ingredients = [
            RecipeIngredient(name=i.name, quantity=i.quantity, position=i.position)
            for i in normalized.ingredients
            if i.name.strip()
        ]
        self._replace_steps(recipe, normalized.steps)

        if recipe.nutrition is None:
            recipe.nutrition = self._nutrition_row()
        if nutrition is not None:
            for name in NUTRITION_FIELDS:
                setattr(recipe.nutrition, name, getattr(nutrition, name))

    @staticmethod
    def _replace_ingredients(recipe: Recipe, items: list[tuple[str, str | None]]) -> None:
        recipe.ingredients = [
            RecipeIngredient(name=name, quantity=quantity or None, position=index)
            for index, (name, quantity) in enumerate(items, start=1)
        ]

    @staticmethod
    def _replace_steps(recipe: Recipe, instructions: list[str]) -> None:
        recipe.steps = [
            RecipeStep(step_no=index, text=text)
            for index, text in enumerate(clean_steps(instructions), start=1)
        ]

    @staticmethod
    def _nutrition_row(values: NutritionInput | None = None) -> RecipeNutrition:
        if values is None:
            return RecipeNutrition(**{name: 0 for name in NUTRITION_FIELDS})
        return RecipeNutrition(**{name: getattr(values, name) for name in NUTRITION_FIELDS})

    def _patch_nutrition(self, recipe: Recipe, patch: NutritionPatch) -> None:
        if recipe.nutrition is None:
            recipe.nutrition = self._nutrition_row()
        for name, value in patch.model_dump(exclude_none=True).items():
            setattr(recipe.nutrition, name, value)
