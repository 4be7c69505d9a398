"""
API dependency injection module.

Bearer-token dependencies shared by the routers. ``get_current_identity``
only checks the token; ``get_current_user`` also requires the account to
still exist.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import UnauthenticatedError
from app.db.async_session import get_async_db
from app.models.user import User
from app.services.auth import AuthService

# auto_error is off so a missing header goes through our own 401 envelope
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login",
    auto_error=False,
)


async def get_current_identity(token: Optional[str] = Depends(oauth2_scheme)) -> str:
    """
    Get the user id from the bearer token.

    Raises:
        UnauthenticatedError: missing, invalid or expired token
    """
    if not token:
        raise UnauthenticatedError("Not authorized, no token")
    return AuthService.decode_access_token(token)


async def get_current_user(
    user_id: str = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
) -> User:
    """
    Get the current authenticated user.

    A token whose account has been deleted is treated as invalid.
    """
    user = await AuthService.get_user_by_id(db, user_id)
    if user is None:
        raise UnauthenticatedError("Not authorized, user not found")
    return user
