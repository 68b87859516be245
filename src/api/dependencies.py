"""FastAPI dependencies for authentication and database.

This is the only place where an ``AuthFailure`` is turned into an HTTP error.
"""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from src.database import get_db
from src.errors import Forbidden, Unauthorized
from src.models.enums import AuthFailure
from src.models.user import User
from src.services.auth import authenticate, authorize_admin, parse_bearer
from src.services.mealdb import MealDBClient
from src.services.nutrition_service import NutritionService
from src.services.recipe_import_service import RecipeImportService


def raise_for_auth_failure(failure: AuthFailure) -> None:
    """Map an authorization failure onto the error taxonomy."""
    if failure is AuthFailure.FORBIDDEN:
        raise Forbidden("Admin only")
    raise Unauthorized("Invalid or expired session")


def get_bearer_token(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Require a well-formed bearer header and return the raw token."""
    token = parse_bearer(authorization)
    if token is None:
        raise Unauthorized("Missing bearer token")
    return token


def get_current_user(
    db: Annotated[Session, Depends(get_db)],
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Get the current authenticated user from the bearer session."""
    result = authenticate(db, authorization)
    if isinstance(result, AuthFailure):
        raise_for_auth_failure(result)
    return result


def get_optional_user(
    db: Annotated[Session, Depends(get_db)],
    authorization: Annotated[str | None, Header()] = None,
) -> User | None:
    """Get the current user if a valid session was presented, else None."""
    result = authenticate(db, authorization)
    if isinstance(result, AuthFailure):
        return None
    return result


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get the current user, requiring the admin flag."""
    failure = authorize_admin(current_user)
    if failure is not None:
        raise_for_auth_failure(failure)
    return current_user


def get_recipe_import_service(
    db: Annotated[Session, Depends(get_db)],
) -> RecipeImportService:
    """Get recipe import service with dependencies."""
    return RecipeImportService(db, MealDBClient(), NutritionService())
