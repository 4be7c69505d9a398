from datetime import datetime
from typing import Any, List, Optional

from pydantic import field_validator

from app.models.plan import Plan
from app.models.user import ActivityLevelType, GenderType, GoalType
from app.schemas.base import BaseSchema, SuccessResponse, blank_to_none


class PlanRequest(BaseSchema):
    """Inputs for plan generation, used by both the trial and the saved route.

    goal, age, weight and height are required; the service reports them as
    missing when absent or falsy.
    """

    goal: Optional[GoalType] = None
    age: Optional[int] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    activity_level: Optional[ActivityLevelType] = None
    focus_area: Optional[str] = None
    duration: Optional[str] = None
    gender: Optional[GenderType] = None
    dietary_restrictions: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _falsy_is_absent(cls, value):
        return blank_to_none(value)


class PlanParameters(BaseSchema):
    """The exact request used to generate a plan, after defaults."""

    goal: GoalType
    activity_level: ActivityLevelType
    focus_area: str
    duration: str
    age: int
    weight: float
    height: float
    gender: GenderType
    dietary_restrictions: Optional[str] = None


class PlanUserInfo(BaseSchema):
    """Snapshot of the biometrics at generation time."""

    age: int
    weight: float
    height: float
    gender: GenderType
    goal: GoalType
    activity_level: ActivityLevelType
    bmi: float


class GeneratedPlan(BaseSchema):
    plan: str
    user_info: PlanUserInfo
    parameters: PlanParameters
    created_at: datetime
    id: Optional[str] = None


class GeneratePlanResponse(SuccessResponse):
    data: GeneratedPlan


class PlanOut(BaseSchema):
    """A saved plan as returned by the archive routes."""

    id: str
    user_id: str
    plan: str
    parameters: PlanParameters
    user_info: PlanUserInfo
    created_at: datetime

    @classmethod
    def from_plan(cls, plan: Plan) -> "PlanOut":
        return cls(
            id=plan.id,
            user_id=plan.user_id,
            plan=plan.plan,
            parameters=PlanParameters.model_validate(plan.parameters),
            user_info=PlanUserInfo.model_validate(plan.user_info),
            created_at=plan.created_at,
        )


class PlanResponse(SuccessResponse):
    data: PlanOut


class PlanListResponse(SuccessResponse):
    data: List[PlanOut]


class DietSuggestionRequest(BaseSchema):
    """Free-form inputs; any JSON value is echoed into the suggestion as text."""

    meal_type: Optional[Any] = None
    dietary_preferences: Optional[Any] = None
    calories: Optional[Any] = None

    @field_validator("*", mode="before")
    @classmethod
    def _falsy_is_absent(cls, value):
        return blank_to_none(value)


class DietSuggestion(BaseSchema):
    suggestion: str


class DietSuggestionResponse(SuccessResponse):
    data: DietSuggestion
