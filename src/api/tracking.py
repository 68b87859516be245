"""Glucose and workout logging endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user
from src.database import get_db
from src.models.tracking import GlucoseReading, Workout
from src.models.user import User
from src.schemas.tracking import (
    GlucoseReadingCreate,
    GlucoseReadingResponse,
    WorkoutCreate,
    WorkoutResponse,
)

GLUCOSE_LIST_LIMIT = 1000
WORKOUT_LIST_LIMIT = 500

glucose_router = APIRouter(prefix="/api/glucose", tags=["glucose"])
workouts_router = APIRouter(prefix="/api/workouts", tags=["workouts"])


@glucose_router.get("", response_model=list[GlucoseReadingResponse])
async def list_glucose_readings(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """List the current user's readings, newest first."""
    return (
        db.query(GlucoseReading)
        .filter(GlucoseReading.user_id == current_user.id)
        .order_by(GlucoseReading.reading_time.desc(), GlucoseReading.id.desc())
        .limit(GLUCOSE_LIST_LIMIT)
        .all()
    )


@glucose_router.post(
    "", response_model=GlucoseReadingResponse, status_code=status.HTTP_201_CREATED
)
async def create_glucose_reading(
    reading_data: GlucoseReadingCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Log a glucose reading."""
    reading = GlucoseReading(
        user_id=current_user.id,
        mg_dl=reading_data.mg_dl,
        reading_time=reading_data.reading_time,
        meal_context=reading_data.meal_context.value if reading_data.meal_context else None,
        notes=reading_data.notes,
    )
    db.add(reading)
    db.commit()
    db.refresh(reading)
    return reading


@workouts_router.get("", response_model=list[WorkoutResponse])
async def list_workouts(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """List the current user's workouts, newest first."""
    return (
        db.query(Workout)
        .filter(Workout.user_id == current_user.id)
        .order_by(Workout.created_at.desc(), Workout.id.desc())
        .limit(WORKOUT_LIST_LIMIT)
        .all()
    )


@workouts_router.post("", response_model=WorkoutResponse, status_code=status.HTTP_201_CREATED)
async def create_workout(
    workout_data: WorkoutCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Log a workout."""
    workout = Workout(
        user_id=current_user.id,
        name=workout_data.name,
        type=workout_data.type,
        duration_min=workout_data.duration_min,
        intensity=workout_data.intensity.value,
        notes=workout_data.notes,
    )
    db.add(workout)
    db.commit()
    db.refresh(workout)
    return workout
