"""Admin API endpoints: recipe curation, imports and user roles."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from src.api.dependencies import get_recipe_import_service, require_admin
from src.database import get_db
from src.errors import BadRequest, Forbidden, NotFound
from src.models.user import User
from src.schemas.auth import UserResponse, UserRoleUpdate
from src.schemas.recipe import RecipeSummary, RecipeUpdate, RecipeView
from src.schemas.recipe_import import ImportReport, RecipeImportRequest
from src.services.recipe_import_service import RecipeImportService
from src.services.recipe_service import RecipeService, hydrate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

USER_LIST_DEFAULT_LIMIT = 50
USER_LIST_MAX_LIMIT = 200


# --- Recipes ---


@router.get("/recipes", response_model=list[RecipeSummary])
async def list_recipes(
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    search: str = "",
    limit: int = 100,
):
    """List every recipe with child counts and macros."""
    return RecipeService(db).admin_summaries(search=search, limit=limit)


@router.post("/recipes/import", response_model=ImportReport)
async def import_recipes(
    request: RecipeImportRequest,
    current_user: Annotated[User, Depends(require_admin)],
    service: Annotated[RecipeImportService, Depends(get_recipe_import_service)],
):
    """Import recipes from TheMealDB by id, URL, search term or category."""
    return await service.run(request, current_user)


@router.patch("/recipes/{recipe_id}", response_model=RecipeView)
async def update_recipe(
    recipe_id: int,
    recipe_data: RecipeUpdate,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Edit a recipe. Supplied ingredient/instruction lists replace the existing ones."""
    service = RecipeService(db)
    recipe = service.get_recipe(recipe_id)
    if recipe is None:
        raise NotFound("Recipe not found")
    return hydrate(service.update_recipe(recipe, recipe_data))


@router.delete("/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: int,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a recipe and its children."""
    if not RecipeService(db).delete_recipe(recipe_id):
        raise NotFound("Recipe not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Users ---


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    search: str = "",
    limit: int = USER_LIST_DEFAULT_LIMIT,
):
    """List users, newest first, optionally filtered by email or name."""
    limit = min(max(limit, 1), USER_LIST_MAX_LIMIT)
    query = db.query(User)
    search = search.strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(User.email.ilike(pattern), User.name.ilike(pattern)))
    return query.order_by(User.created_at.desc(), User.id.desc()).limit(limit).all()


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFound("User not found")
    return user


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a single user."""
    return get_user_or_404(db, user_id)


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user_roles(
    user_id: int,
    roles: UserRoleUpdate,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Set a user's admin/nutritionist flags."""
    changes = roles.model_dump(exclude_none=True)
    if not changes:
        raise BadRequest("No changes")
    if user_id == current_user.id and changes.get("is_admin") is False:
        raise Forbidden("Admins cannot remove their own admin role")

    user = get_user_or_404(db, user_id)
    for flag, value in changes.items():
        setattr(user, flag, value)
    db.commit()
    db.refresh(user)

    logger.info(f"Admin {current_user.id} set roles {changes} on user {user.id}")
    return user
