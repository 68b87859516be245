"""Goal service and the append-only progress ledger."""

import logging
import math

from sqlalchemy import case
from sqlalchemy.orm import Session

from src.errors import BadRequest, NotFound
from src.models.enums import GoalStatus
from src.models.goal import Goal, GoalProgress
from src.models.user import User
from src.schemas.goal import GoalCreate

logger = logging.getLogger(__name__)


class GoalService:
    """Service for goals and their progress events."""

    def __init__(self, db: Session):
        self.db = db

    def get_user_goal(self, goal_id: int, user_id: int) -> Goal:
        """Get a goal owned by the user; anything else reads as not found."""
        goal = self.db.query(Goal).filter(Goal.id == goal_id, Goal.user_id == user_id).first()
        if goal is None:
            raise NotFound("Goal not found")
        return goal

    def list_goals(self, user: User) -> list[Goal]:
        return (
            self.db.query(Goal)
            .filter(Goal.user_id == user.id)
            .order_by(Goal.created_at.desc(), Goal.id.desc())
            .all()
        )

    def create_goal(self, user: User, data: GoalCreate) -> Goal:
        goal = Goal(
            user_id=user.id,
            title=data.title,
            target_value=data.target_value,
            unit=data.unit,
            current_value=0,
            due_date=data.due_date,
            status=GoalStatus.ACTIVE.value,
        )
        self.db.add(goal)
        self.db.commit()
        self.db.refresh(goal)
        return goal

    def record_progress(
        self, goal_id: int, user_id: int, delta: float, note: str | None = None
    ) -> int:
        """Append a progress event and fold it into the goal, atomically.

        The goal total is incremented in SQL so concurrent contributions never
        overwrite each other. Status flips to completed once the total reaches
        the target and is never moved back to active here.

        Returns:
            The id of the new progress event.
        """
        if not math.isfinite(delta) or delta <= 0:
            raise BadRequest("delta must be a positive number")

        goal = self.get_user_goal(goal_id, user_id)
        was_completed = goal.status == GoalStatus.COMPLETED.value

        event = GoalProgress(goal_id=goal.id, delta=delta, note=note)
        self.db.add(event)
        new_total = Goal.current_value + delta
        try:
            self.db.flush()
            self.db.query(Goal).filter(Goal.id == goal.id, Goal.user_id == user_id).update(
                {
                    Goal.current_value: new_total,
                    Goal.status: case(
                        (new_total >= Goal.target_value, GoalStatus.COMPLETED.value),
                        else_=Goal.status,
                    ),
                },
                synchronize_session=False,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(goal)
        if not was_completed and goal.status == GoalStatus.COMPLETED.value:
            logger.info(f"Goal {goal.id} completed ({goal.current_value}/{goal.target_value})")
        return event.id

    def list_progress(self, goal_id: int, user_id: int) -> list[GoalProgress]:
        """Progress events of an owned goal, oldest first."""
        goal = self.get_user_goal(goal_id, user_id)
        return (
            self.db.query(GoalProgress)
            .filter(GoalProgress.goal_id == goal.id)
            .order_by(GoalProgress.id)
            .all()
        )
