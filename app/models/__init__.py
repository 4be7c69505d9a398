"""Database models."""

# Import all models here to ensure they're recognized by SQLAlchemy
from app.models.plan import Plan
from app.models.user import ActivityLevelType, GenderType, GoalType, User

__all__ = [
    "User",
    "Plan",
    "GenderType",
    "GoalType",
    "ActivityLevelType",
]
