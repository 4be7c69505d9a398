from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import FitSphereError
from app.schemas.base import ErrorResponse
from app.api.router import api_router
from app.db.async_session import startup_async_database, shutdown_async_database
from app.utils.logger import api_logger

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database on startup and release it on shutdown."""
    try:
        logger.info("Starting up FitSphere API...")
        await startup_async_database()
        logger.info("FitSphere API startup completed successfully")
    except Exception as e:
        logger.error(f"Failed to start up application: {e}")
        raise

    yield

    logger.info("Shutting down FitSphere API...")
    await shutdown_async_database()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.PROJECT_DESCRIPTION,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    lifespan=lifespan,
)


def error_envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


@app.exception_handler(FitSphereError)
async def fitsphere_error_handler(request: Request, exc: FitSphereError):
    if exc.status_code >= 500:
        api_logger.error(exc.message, "ERROR", path=request.url.path)
    else:
        api_logger.debug(exc.message, "ERROR", path=request.url.path, status=exc.status_code)
    return error_envelope(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_envelope(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed bodies as a plain 400 with the first problem."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return error_envelope(400, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    api_logger.error(f"Unhandled error: {exc}", "ERROR", path=request.url.path)
    return error_envelope(500, str(exc) or "Server error")


# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)
