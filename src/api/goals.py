"""Goal API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user
from src.database import get_db
from src.models.user import User
from src.schemas.goal import (
    GoalCreate,
    GoalProgressResponse,
    GoalResponse,
    ProgressCreate,
    ProgressRecorded,
)
from src.services.goal_service import GoalService

router = APIRouter(prefix="/api/goals", tags=["goals"])


def get_goal_service(
    db: Annotated[Session, Depends(get_db)],
) -> GoalService:
    """Get goal service with dependencies."""
    return GoalService(db)


@router.get("", response_model=list[GoalResponse])
async def list_goals(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GoalService, Depends(get_goal_service)],
):
    """List the current user's goals."""
    return service.list_goals(current_user)


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal_data: GoalCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GoalService, Depends(get_goal_service)],
):
    """Create a goal."""
    return service.create_goal(current_user, goal_data)


@router.post("/{goal_id}/progress", response_model=ProgressRecorded)
async def record_progress(
    goal_id: int,
    progress: ProgressCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GoalService, Depends(get_goal_service)],
):
    """Add progress towards a goal."""
    progress_id = service.record_progress(goal_id, current_user.id, progress.delta, progress.note)
    return ProgressRecorded(progress_id=progress_id)


@router.get("/{goal_id}/progress", response_model=list[GoalProgressResponse])
async def list_progress(
    goal_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GoalService, Depends(get_goal_service)],
):
    """List a goal's progress events, oldest first."""
    return service.list_progress(goal_id, current_user.id)
