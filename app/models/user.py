import enum

from sqlalchemy import Column, Float, Integer, String

from app.db.base_class import Base


class GenderType(str, enum.Enum):
    male = "male"
    female = "female"
    other = "other"


class GoalType(str, enum.Enum):
    weight_loss = "weight_loss"
    muscle_gain = "muscle_gain"
    maintenance = "maintenance"
    endurance = "endurance"


class ActivityLevelType(str, enum.Enum):
    sedentary = "sedentary"
    light = "light"
    moderate = "moderate"
    active = "active"
    very_active = "very_active"


class User(Base):
    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    # Stored lower-cased; the unique index makes the check case-insensitive.
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    age = Column(Integer, nullable=True)
    weight = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    gender = Column(String(16), nullable=False, default=GenderType.male.value)
    goal = Column(String(32), nullable=False, default=GoalType.weight_loss.value)
    activity_level = Column(String(32), nullable=False, default=ActivityLevelType.moderate.value)
