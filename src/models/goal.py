"""Goal and GoalProgress models."""

from sqlalchemy import Column, Date, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import CreatedAtMixin, TimestampMixin


class Goal(Base, TimestampMixin):
    """A measurable target; current_value is the running sum of its progress events."""

    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    target_value = Column(Float, nullable=False)
    unit = Column(String(50), nullable=False)
    current_value = Column(Float, nullable=False, default=0)
    due_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default="active")  # GoalStatus

    user = relationship("User", backref="goals")
    progress_events = relationship(
        "GoalProgress", back_populates="goal", order_by="GoalProgress.id"
    )


class GoalProgress(Base, CreatedAtMixin):
    """Append-only progress contribution."""

    __tablename__ = "goal_progress"

    id = Column(Integer, primary_key=True, index=True)
    goal_id = Column(
        Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True
    )
    delta = Column(Float, nullable=False)
    note = Column(Text, nullable=True)

    goal = relationship("Goal", back_populates="progress_events")
