from typing import List

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

class Settings(BaseSettings):
    """Application settings."""

    # Application
    PROJECT_NAME: str = "FitSphere API"
    PROJECT_DESCRIPTION: str = "Backend API for FitSphere"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"
    HOST: str = "localhost"
    PORT: int = 5000

    # Security
    SECRET_KEY: str  # required, startup fails if unset
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 10
    MIN_PASSWORD_LENGTH: int = 6

    # Plans
    PLAN_HISTORY_LIMIT: int = 20

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Database
    DATABASE_URL: str
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 3600  # 1 hour
    DB_POOL_PRE_PING: bool = True

    @field_validator("SECRET_KEY", "DATABASE_URL")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must be set to a non-empty value")
        return value

    @property
    def async_database_url(self) -> str:
        """Get the async driver URL for the configured database."""
        base_url = self.DATABASE_URL

        # Convert postgresql:// to postgresql+asyncpg://
        if base_url.startswith("postgresql://"):
            return base_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif base_url.startswith("postgres://"):
            return base_url.replace("postgres://", "postgresql+asyncpg://", 1)
        else:
            return base_url

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

settings = Settings()
