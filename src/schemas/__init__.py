"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from src.schemas.goal import GoalCreate, GoalResponse, ProgressCreate, ProgressRecorded
from src.schemas.recipe import RecipeCreate, RecipeUpdate, RecipeView
from src.schemas.recipe_import import ImportReport, RecipeImportRequest

__all__ = [
    "UserRegister",
    "UserLogin",
    "AuthResponse",
    "UserResponse",
    "RecipeCreate",
    "RecipeUpdate",
    "RecipeView",
    "RecipeImportRequest",
    "ImportReport",
    "GoalCreate",
    "GoalResponse",
    "ProgressCreate",
    "ProgressRecorded",
]
