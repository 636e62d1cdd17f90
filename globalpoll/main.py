"""Main FastAPI application."""
import asyncio
from contextlib import asynccontextmanager, suppress

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from globalpoll.api.deps import get_db
from globalpoll.api.v1.router import api_router
from globalpoll.core import rate_limit
from globalpoll.core.cache import global_cache
from globalpoll.core.config import settings
from globalpoll.core.exceptions import PollSiteError, RateLimitedError
from globalpoll.core.logging_config import get_logger, setup_logging
from globalpoll.middleware import LoggingMiddleware
from globalpoll.schemas import ErrorResponse
from globalpoll.services.scheduler import run_periodic_sweep, run_startup_tasks

# Initialize structured logging
setup_logging(level=settings.LOG_LEVEL, json_logs=settings.ENVIRONMENT == "production")
logger = get_logger(__name__)

if settings.ENVIRONMENT == "production":
    settings.validate_production_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.STARTUP_TASKS_ENABLED:
        await asyncio.to_thread(run_startup_tasks)

    sweeper = None
    if settings.EXPIRY_SWEEP_INTERVAL_SECONDS > 0:
        sweeper = asyncio.create_task(run_periodic_sweep(settings.EXPIRY_SWEEP_INTERVAL_SECONDS))

    yield

    if sweeper is not None:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper


logger.info(
    "application_starting",
    app_title=settings.APP_TITLE,
    app_version=settings.APP_VERSION,
    environment=settings.ENVIRONMENT,
)

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(PollSiteError)
async def poll_site_error_handler(request: Request, exc: PollSiteError) -> JSONResponse:
    logger.warning(
        "request_rejected",
        error=type(exc).__name__,
        message=exc.message,
        status_code=exc.status_code,
    )
    headers = None
    if isinstance(exc, RateLimitedError) and exc.retry_after:
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message}, headers=headers)


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        # loc looks like ("body", "pollId") or ("query", "pollId")
        field = ".".join(str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path"))
        if error.get("type") == "missing":
            parts.append(f"{field or 'Request body'} is required")
        else:
            parts.append(f"Invalid {field or 'request body'}: {error.get('msg')}")
    return "; ".join(parts) or "Invalid request"


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation_errors(exc)
    logger.warning("request_validation_failed", message=message)
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    logger.warning("http_error", status_code=exc.status_code, message=message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", exception_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# Add logging middleware (must be added before other middleware for proper request tracking)
app.add_middleware(LoggingMiddleware)


@app.middleware("http")
async def add_api_version_header(request: Request, call_next):
    """Add X-API-Version header to all responses for version tracking."""
    response = await call_next(request)
    response.headers["X-API-Version"] = settings.APP_VERSION
    return response


# CORS: the embed widget is served from third-party pages
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Retry-After", "X-Request-ID"],
)

app.include_router(
    api_router,
    responses={code: {"model": ErrorResponse} for code in (400, 401, 404, 429)},
)


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
        - status: "healthy" or "unhealthy"
        - database: connection status
        - cache: read cache statistics
        - rate_limiter: which limiter implementation is active

    Returns 503 if the database is unreachable.
    """
    health_status = {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "cache": global_cache.get_stats(),
        "rate_limiter": type(rate_limit.vote_limiter).__name__,
        "database": {"status": "connected"},
    }

    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("health_check_failed", error=str(e))
        health_status["status"] = "unhealthy"
        health_status["database"]["status"] = "unreachable"
        return JSONResponse(status_code=503, content=health_status)

    return health_status
