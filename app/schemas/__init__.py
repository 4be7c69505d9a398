"""Pydantic schemas for request and response validation."""

from .base import BaseSchema, ErrorResponse, MessageResponse, SuccessResponse

# Auth schemas
from .auth import (
    AuthResponse,
    PasswordChange,
    ProfileResponse,
    ProfileUpdate,
    TokenPayload,
    UserLogin,
    UserProfile,
    UserPublic,
    UserResponse,
    UserSignup,
)

# Plan schemas
from .plan import (
    DietSuggestion,
    DietSuggestionRequest,
    DietSuggestionResponse,
    GeneratedPlan,
    GeneratePlanResponse,
    PlanListResponse,
    PlanOut,
    PlanParameters,
    PlanRequest,
    PlanResponse,
    PlanUserInfo,
)

__all__ = [
    "BaseSchema",
    "SuccessResponse",
    "MessageResponse",
    "ErrorResponse",
    "UserSignup",
    "UserLogin",
    "ProfileUpdate",
    "PasswordChange",
    "UserPublic",
    "UserProfile",
    "AuthResponse",
    "UserResponse",
    "ProfileResponse",
    "TokenPayload",
    "PlanRequest",
    "PlanParameters",
    "PlanUserInfo",
    "GeneratedPlan",
    "GeneratePlanResponse",
    "PlanOut",
    "PlanResponse",
    "PlanListResponse",
    "DietSuggestionRequest",
    "DietSuggestion",
    "DietSuggestionResponse",
]
