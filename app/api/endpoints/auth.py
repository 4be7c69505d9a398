from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_identity
from app.db.async_session import get_async_db
from app.schemas.auth import (
    AuthResponse,
    PasswordChange,
    ProfileResponse,
    ProfileUpdate,
    UserLogin,
    UserProfile,
    UserPublic,
    UserResponse,
    UserSignup,
)
from app.schemas.base import MessageResponse
from app.services.auth import AuthService

router = APIRouter()


@router.post("/signup", response_model=AuthResponse)
async def signup(user_data: UserSignup, db: AsyncSession = Depends(get_async_db)) -> Any:
    """
    Register a new user and sign them in.
    """
    token, user = await AuthService.register(db, user_data)
    return AuthResponse(token=token, user=UserPublic.from_user(user))


@router.post("/login", response_model=AuthResponse)
async def login(login_data: UserLogin, db: AsyncSession = Depends(get_async_db)) -> Any:
    """
    Authenticate a user with email and password.
    """
    token, user = await AuthService.login(db, login_data)
    return AuthResponse(token=token, user=UserPublic.from_user(user))


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    user_id: str = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
) -> Any:
    """Get the signed-in user's profile."""
    user = await AuthService.get_profile(db, user_id)
    return ProfileResponse(user=UserProfile.from_user(user))


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    user_id: str = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
) -> Any:
    """Update any subset of the profile fields."""
    user = await AuthService.update_profile(db, user_id, profile_data)
    return UserResponse(user=UserPublic.from_user(user))


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    password_data: PasswordChange,
    user_id: str = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
) -> Any:
    """Change the password. Existing tokens stay valid."""
    await AuthService.change_password(db, user_id, password_data)
    return MessageResponse(message="Password updated successfully")


@router.delete("/account", response_model=MessageResponse)
async def delete_account(
    user_id: str = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
) -> Any:
    """Delete the account. Saved plans are not removed."""
    await AuthService.delete_account(db, user_id)
    return MessageResponse(message="Account deleted successfully")
