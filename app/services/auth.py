from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Tuple

import bcrypt
import jwt
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from app.models.user import ActivityLevelType, GenderType, GoalType, User
from app.schemas.auth import PasswordChange, ProfileUpdate, TokenPayload, UserLogin, UserSignup
from app.utils.logger import auth_logger

# Same message for unknown email and wrong password
INVALID_CREDENTIALS = "Invalid credentials"

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_PASSWORD_BYTES]


class AuthService:
    """
    Authentication service: account creation, credential checks, token
    issuance and the profile operations of the signed-in user.
    """

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a hash."""
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode('utf-8'))

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password for storage."""
        salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(_password_bytes(password), salt)
        return hashed.decode('utf-8')

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    @classmethod
    def create_access_token(cls, user_id: str, expires_delta: timedelta = None) -> str:
        """Create a signed JWT carrying the user id and an expiry."""
        if expires_delta is None:
            expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)

        expire = datetime.now(timezone.utc) + expires_delta
        to_encode = {"sub": str(user_id), "exp": expire}

        return jwt.encode(
            to_encode,
            settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )

    @classmethod
    def decode_access_token(cls, token: str) -> str:
        """Return the user id in a valid token.

        Raises:
            UnauthenticatedError: bad signature, malformed or expired token
        """
        try:
            payload = jwt.decode(
                token,
                settings.SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM],
            )
            token_data = TokenPayload(**payload)
        except jwt.ExpiredSignatureError:
            raise UnauthenticatedError("Not authorized, token expired")
        except (jwt.PyJWTError, ValueError):
            raise UnauthenticatedError("Not authorized, token failed")

        return token_data.sub

    @classmethod
    async def get_user_by_email(cls, db: AsyncSession, email: str) -> Optional[User]:
        """Get a user by email (case-insensitive)."""
        stmt = select(User).where(User.email == cls.normalize_email(email))
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @classmethod
    async def get_user_by_id(cls, db: AsyncSession, user_id: str) -> Optional[User]:
        """Get a user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @classmethod
    async def register(cls, db: AsyncSession, data: UserSignup) -> Tuple[str, User]:
        """Create an account and return ``(token, user)``."""
        if not data.name or not data.email or not data.password:
            raise ValidationError("Please provide name, email and password")

        email = cls.normalize_email(data.email)
        auth_logger.info("Signup requested", "SIGNUP", email=email)

        # Pre-check only; the unique index settles concurrent signups.
        if await cls.get_user_by_email(db, email):
            auth_logger.warning("Email already registered", "SIGNUP", email=email)
            raise ConflictError("User already exists")

        user = User(
            name=data.name,
            email=email,
            hashed_password=cls.get_password_hash(data.password),
            age=data.age,
            weight=data.weight,
            height=data.height,
            gender=(data.gender or GenderType.male).value,
            goal=(data.goal or GoalType.weight_loss).value,
            activity_level=(data.activity_level or ActivityLevelType.moderate).value,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            auth_logger.warning("Signup lost the race on the email index", "SIGNUP", email=email)
            raise ConflictError("User already exists")
        await db.refresh(user)

        auth_logger.success("User created", "SIGNUP", user_id=user.id)
        return cls.create_access_token(user.id), user

    @classmethod
    async def login(cls, db: AsyncSession, data: UserLogin) -> Tuple[str, User]:
        """Check credentials and return ``(token, user)``."""
        if not data.email or not data.password:
            raise InvalidCredentialsError(INVALID_CREDENTIALS)

        user = await cls.get_user_by_email(db, data.email)
        if not user or not cls.verify_password(data.password, user.hashed_password):
            auth_logger.warning("Login rejected", "LOGIN")
            raise InvalidCredentialsError(INVALID_CREDENTIALS)

        auth_logger.success("Login successful", "LOGIN", user_id=user.id)
        return cls.create_access_token(user.id), user

    @classmethod
    async def get_profile(cls, db: AsyncSession, user_id: str) -> User:
        user = await cls.get_user_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    @classmethod
    async def update_profile(cls, db: AsyncSession, user_id: str, data: ProfileUpdate) -> User:
        """Overwrite only the fields that were sent with a truthy value.

        The schema turns ``""`` and ``0`` into ``None``, so those never clear a
        stored value. Email is not part of the update.
        """
        user = await cls.get_profile(db, user_id)

        changes = {
            key: value.value if isinstance(value, Enum) else value
            for key, value in data.model_dump().items()
            if value
        }
        for key, value in changes.items():
            setattr(user, key, value)

        if changes:
            await db.commit()
            await db.refresh(user)
        auth_logger.info("Profile updated", "PROFILE", user_id=user.id, fields=sorted(changes))
        return user

    @classmethod
    async def change_password(cls, db: AsyncSession, user_id: str, data: PasswordChange) -> None:
        if not data.current_password or not data.new_password:
            raise ValidationError("Please provide current and new password")

        user = await cls.get_profile(db, user_id)
        if not cls.verify_password(data.current_password, user.hashed_password):
            raise InvalidCredentialsError("Current password is incorrect")

        if len(data.new_password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
            )

        user.hashed_password = cls.get_password_hash(data.new_password)
        await db.commit()
        auth_logger.success("Password changed", "PASSWORD", user_id=user.id)

    @classmethod
    async def delete_account(cls, db: AsyncSession, user_id: str) -> None:
        """Delete the user row. Their plans are left in place (orphaned)."""
        await db.execute(delete(User).where(User.id == user_id))
        await db.commit()
        auth_logger.info("Account deleted", "ACCOUNT", user_id=user_id)
