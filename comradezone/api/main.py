from contextlib import asynccontextmanager
from typing import AsyncGenerator, Awaitable, Callable

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sqlalchemy import text

from comradezone.api.routes import router
from comradezone.config import settings
from comradezone.utils.database import init_database, session_scope
from comradezone.utils.errors import ComradeZoneError
from comradezone.utils.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
    log_error,
)

logger = get_logger(__name__)

GENERIC_FAILURE_MESSAGE = "Something went wrong, please try again"

# Initialize Sentry if DSN is provided
if settings.SENTRY_DSN:
    logger.info("Initializing Sentry...")
    try:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.ENVIRONMENT,
            traces_sample_rate=1.0 if settings.ENVIRONMENT == "development" else 0.1,
            integrations=[
                FastApiIntegration(transaction_style="url"),
                SqlalchemyIntegration(),
            ],
        )
        logger.info("Sentry initialized")
    except Exception as e:
        logger.error("Failed to initialize Sentry", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan."""
    configure_logging()
    logger.info("Starting dating API...")

    try:
        init_database()
    except Exception as e:
        error_details = {}
        if hasattr(e, "details"):
            error_details = e.details
        logger.error("Failed to initialize database", error=str(e), details=error_details)
        raise

    yield

    logger.info("Shutting down dating API...")


app = FastAPI(
    title=settings.APP_NAME,
    description="ComradeZone dating API",
    version="1.0.0",
    lifespan=lifespan,
)
app.include_router(router)


@app.middleware("http")
async def request_logging_context(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Bind the request path and method to every log line emitted while handling it."""
    bind_request_context(request_path=request.url.path, request_method=request.method)
    try:
        return await call_next(request)
    finally:
        clear_request_context()


@app.exception_handler(ComradeZoneError)
async def comradezone_error_handler(request: Request, exc: ComradeZoneError) -> JSONResponse:
    """Turn service errors into structured JSON responses."""
    if exc.status_code >= 500:
        log_error(logger, exc, "Request failed", {"path": request.url.path})
        message = GENERIC_FAILURE_MESSAGE
    else:
        logger.info("Request rejected", path=request.url.path, code=exc.__class__.__name__, error=exc.message)
        message = exc.message

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": message, "code": exc.__class__.__name__},
    )


@app.get("/health")
def health_check() -> JSONResponse:
    """Health check endpoint."""
    try:
        with session_scope() as session:
            session.execute(text("SELECT 1"))
        database_ok = True
    except ComradeZoneError as e:
        logger.warning("Health check database ping failed", error=str(e))
        database_ok = False

    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={
            "status": "ok" if database_ok else "error",
            "database": database_ok,
            "app": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
        },
    )


@app.get("/")
async def root() -> JSONResponse:
    """Root endpoint."""
    return JSONResponse(
        content={
            "message": "ComradeZone dating API is running",
            "docs_url": "/docs",
        }
    )
