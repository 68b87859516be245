"""SQLAlchemy models."""

from src.models.goal import Goal, GoalProgress
from src.models.recipe import Recipe, RecipeIngredient, RecipeNutrition, RecipeStep
from src.models.tracking import GlucoseReading, Workout
from src.models.user import AuthSession, User

__all__ = [
    "User",
    "AuthSession",
    "Recipe",
    "RecipeIngredient",
    "RecipeStep",
    "RecipeNutrition",
    "Goal",
    "GoalProgress",
    "GlucoseReading",
    "Workout",
]
