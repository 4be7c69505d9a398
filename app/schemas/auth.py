from datetime import datetime
from typing import Optional

from pydantic import EmailStr, field_validator

from app.models.user import ActivityLevelType, GenderType, GoalType, User
from app.schemas.base import BaseSchema, SuccessResponse, blank_to_none


class BiometricFields(BaseSchema):
    """Profile fields shared by signup and profile update.

    Falsy values are dropped before validation, so ``"age": ""`` or
    ``"age": 0`` behaves exactly like leaving ``age`` out.
    """

    age: Optional[int] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    gender: Optional[GenderType] = None
    goal: Optional[GoalType] = None
    activity_level: Optional[ActivityLevelType] = None

    @field_validator("age", "weight", "height", "gender", "goal", "activity_level", mode="before")
    @classmethod
    def _falsy_is_absent(cls, value):
        return blank_to_none(value)


# Registration schemas
class UserSignup(BiometricFields):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, value):
        return blank_to_none(value)


# Login schemas
class UserLogin(BaseSchema):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(BiometricFields):
    """Partial profile update. Email is not updatable."""

    name: Optional[str] = None


class PasswordChange(BaseSchema):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class UserPublic(BaseSchema):
    """User representation safe to return to clients (no password hash)."""

    user_id: str
    name: str
    email: str
    age: Optional[int] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    gender: GenderType
    goal: GoalType
    activity_level: ActivityLevelType

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(
            user_id=user.id,
            name=user.name,
            email=user.email,
            age=user.age,
            weight=user.weight,
            height=user.height,
            gender=user.gender,
            goal=user.goal,
            activity_level=user.activity_level,
        )


class UserProfile(UserPublic):
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        public = UserPublic.from_user(user)
        return cls(**public.model_dump(), created_at=user.created_at)


class AuthResponse(SuccessResponse):
    token: str
    user: UserPublic


class UserResponse(SuccessResponse):
    user: UserPublic


class ProfileResponse(SuccessResponse):
    user: UserProfile


# Token schemas
class TokenPayload(BaseSchema):
    sub: str
    exp: int
