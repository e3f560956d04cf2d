"""ORM models exposed for metadata discovery."""
from lunite.db.models.planner_state import PlannerState
from lunite.db.models.user import User

__all__ = ["PlannerState", "User"]
