"""Enums for model fields."""

from enum import Enum


class RecipeCategory(str, Enum):
    """Meal slot a recipe belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    OTHER = "other"


class GoalStatus(str, Enum):
    """Goal lifecycle status, derived from progress."""

    ACTIVE = "active"
    COMPLETED = "completed"


class MealContext(str, Enum):
    """When a glucose reading was taken relative to food."""

    FASTING = "fasting"
    BEFORE_MEAL = "before-meal"
    AFTER_MEAL = "after-meal"
    BEDTIME = "bedtime"


class WorkoutIntensity(str, Enum):
    """Perceived workout intensity."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class AuthFailure(str, Enum):
    """Why a request could not be authorized."""

    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"


class ImportOutcome(str, Enum):
    """Per-item result of a recipe import."""

    INSERTED = "inserted"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"
