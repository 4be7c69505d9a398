from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text
from typing import AsyncGenerator, Optional, Dict, Any
import logging
import time
from datetime import datetime, timezone

from app.core.config import settings
from app.db.base_class import Base
from app.utils.logger import db_logger

logger = logging.getLogger(__name__)


class AsyncDatabaseManager:
    """
    Manages the async database engine and sessions.

    One instance lives for the whole process. It owns the engine, the session
    factory, table creation on startup and disposal on shutdown.
    """

    def __init__(self, database_url: Optional[str] = None):
        self.async_engine: Optional[AsyncEngine] = None
        self.async_session_factory: Optional[async_sessionmaker] = None
        self._is_initialized = False
        self._initialize_engine(database_url or settings.async_database_url)

    def _initialize_engine(self, async_db_url: str):
        """Initialize the async database engine."""
        try:
            logger.info(f"Initializing async database engine with URL: {async_db_url[:50]}...")

            engine_kwargs: Dict[str, Any] = {"echo": settings.DB_ECHO}
            if not async_db_url.startswith("sqlite"):
                # SQLite's async pool does not take sizing arguments
                engine_kwargs.update(
                    pool_pre_ping=settings.DB_POOL_PRE_PING,
                    pool_size=settings.DB_POOL_SIZE,
                    max_overflow=settings.DB_MAX_OVERFLOW,
                    pool_recycle=settings.DB_POOL_RECYCLE,
                )
                logger.info(f"Pool configuration - Size: {settings.DB_POOL_SIZE}, "
                            f"Max Overflow: {settings.DB_MAX_OVERFLOW}, Recycle: {settings.DB_POOL_RECYCLE}s")

            self.async_engine = create_async_engine(async_db_url, **engine_kwargs)

            self.async_session_factory = async_sessionmaker(
                bind=self.async_engine,
                class_=AsyncSession,
                expire_on_commit=False,  # Keep objects accessible after commit
                autoflush=False,
            )

            self._is_initialized = True
            logger.info("Async database engine initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize async database engine: {e}")
            raise

    async def get_async_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get an async database session with proper lifecycle management.

        The session is rolled back on any exception and always closed.

        Raises:
            RuntimeError: If the database manager is not initialized
        """
        if not self._is_initialized:
            raise RuntimeError("AsyncDatabaseManager is not initialized")

        async with self.async_session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Database error in session: {e}")
                raise
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """Create the users and plans tables if they do not exist."""
        # Registers the models on Base.metadata
        import app.models  # noqa: F401

        async with self.async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def test_connection(self) -> bool:
        """Return True if a trivial query succeeds."""
        try:
            async with self.async_session_factory() as session:
                await session.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(f"Database connection test failed: {e}")
            return False

    async def close(self):
        """Dispose of the engine and all pooled connections."""
        if self.async_engine:
            try:
                await self.async_engine.dispose()
                logger.info("Async database engine disposed successfully")
            finally:
                self._is_initialized = False
                self.async_engine = None
                self.async_session_factory = None


# Global async database manager instance
_async_db_manager: Optional[AsyncDatabaseManager] = None


def get_async_db_manager() -> AsyncDatabaseManager:
    """Get or create the global async database manager instance."""
    global _async_db_manager

    if _async_db_manager is None:
        _async_db_manager = AsyncDatabaseManager()
        logger.info("Created new AsyncDatabaseManager instance")

    return _async_db_manager


# Async dependency injection function for FastAPI
async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection.

    Example:
        @router.get("/plans")
        async def list_plans(db: AsyncSession = Depends(get_async_db)):
            ...
    """
    manager = get_async_db_manager()
    async for session in manager.get_async_session():
        yield session


async def startup_async_database():
    """
    Create tables and verify connectivity on application startup.

    Raises:
        RuntimeError: If the database cannot be reached
    """
    db_logger.section_start("Database Startup", "STARTUP")
    manager = get_async_db_manager()
    await manager.create_tables()

    if not await manager.test_connection():
        db_logger.section_end("Database Startup", "STARTUP", success=False)
        raise RuntimeError("Failed to establish database connection during startup")

    db_logger.success("Tables ready", "STARTUP", tables=sorted(Base.metadata.tables))
    db_logger.section_end("Database Startup", "STARTUP")


async def shutdown_async_database():
    """Clean up async database connections on application shutdown."""
    global _async_db_manager

    if _async_db_manager is not None:
        await _async_db_manager.close()
        _async_db_manager = None
    logger.info("Async database shutdown completed successfully")


async def check_async_database_health() -> dict:
    """
    Check database connectivity and measure the round trip.

    Returns:
        dict: e.g. {"status": "healthy", "response_time_ms": 3.1, "timestamp": "..."}
    """
    start_time = time.time()
    connected = await get_async_db_manager().test_connection()
    return {
        "status": "healthy" if connected else "unhealthy",
        "response_time_ms": round((time.time() - start_time) * 1000, 2),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
