"""Goal and progress schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import GoalStatus


class GoalCreate(BaseModel):
    """Create a goal."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    target_value: float = Field(..., gt=0, allow_inf_nan=False)
    unit: str = Field(..., min_length=1, max_length=50)
    due_date: date | None = None


class GoalResponse(BaseModel):
    """Goal response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    target_value: float
    unit: str
    current_value: float
    due_date: date | None
    status: GoalStatus
    created_at: datetime
    updated_at: datetime


class ProgressCreate(BaseModel):
    """Progress contribution. Positivity is enforced by the ledger."""

    delta: float
    note: str | None = Field(None, max_length=2000)


class ProgressRecorded(BaseModel):
    """Result of recording progress."""

    ok: bool = True
    progress_id: int


class GoalProgressResponse(BaseModel):
    """Stored progress event."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    goal_id: int
    delta: float
    note: str | None
    created_at: datetime
