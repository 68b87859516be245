"""Glucose and workout logging schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import MealContext, WorkoutIntensity


class GlucoseReadingCreate(BaseModel):
    """Log a glucose reading."""

    mg_dl: float = Field(..., gt=0, allow_inf_nan=False)
    reading_time: datetime
    meal_context: MealContext | None = None
    notes: str | None = Field(None, max_length=2000)


class GlucoseReadingResponse(BaseModel):
    """Glucose reading response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    mg_dl: float
    reading_time: datetime
    meal_context: MealContext | None
    notes: str | None


class WorkoutCreate(BaseModel):
    """Log a workout."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=50)
    duration_min: int = Field(0, ge=0)
    intensity: WorkoutIntensity
    notes: str | None = Field(None, max_length=2000)


class WorkoutResponse(BaseModel):
    """Workout response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: str
    duration_min: int
    intensity: WorkoutIntensity
    notes: str | None
    created_at: datetime
    updated_at: datetime
