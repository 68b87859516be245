"""Per-user logging models: glucose readings and workouts."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text

from src.database import Base
from src.models.mixins import CreatedAtMixin, TimestampMixin


class GlucoseReading(Base, CreatedAtMixin):
    """Blood-glucose reading in mg/dL."""

    __tablename__ = "glucose_readings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    mg_dl = Column(Float, nullable=False)
    reading_time = Column(DateTime(timezone=True), nullable=False, index=True)
    meal_context = Column(String(20), nullable=True)  # MealContext
    notes = Column(Text, nullable=True)


class Workout(Base, TimestampMixin):
    """Logged workout session."""

    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False)
    duration_min = Column(Integer, nullable=False, default=0)
    intensity = Column(String(20), nullable=False)  # WorkoutIntensity
    notes = Column(Text, nullable=True)
