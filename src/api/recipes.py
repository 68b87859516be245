"""Recipe API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_optional_user, require_admin
from src.database import get_db
from src.models.user import User
from src.schemas.recipe import RecipeCreate, RecipeView
from src.services.recipe_service import RecipeService, hydrate

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.get("", response_model=list[RecipeView])
async def list_recipes(
    current_user: Annotated[User | None, Depends(get_optional_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """List public recipes, plus the caller's own when signed in."""
    return [hydrate(recipe) for recipe in RecipeService(db).list_visible(current_user)]


@router.post("", response_model=RecipeView, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    recipe_data: RecipeCreate,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a recipe with ingredients, steps and nutrition (admin only)."""
    recipe = RecipeService(db).create_recipe(current_user, recipe_data)
    return hydrate(recipe)


@router.get("/{recipe_id}", response_model=RecipeView)
async def get_recipe(
    recipe_id: int,
    current_user: Annotated[User | None, Depends(get_optional_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a specific recipe."""
    return hydrate(RecipeService(db).get_visible_recipe(recipe_id, current_user))
