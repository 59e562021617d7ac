"""
Main FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from wardrobe.core.config import settings
from wardrobe.core.exceptions import WardrobeError
from wardrobe.core.logging_config import configure_logging
from wardrobe.core.middleware import RateLimitMiddleware
from wardrobe.core.startup import run_startup_tasks
from wardrobe.services.rate_limiter import RateLimiter
from wardrobe.services.session_service import SessionStore, get_session_store
from wardrobe.services.storage_service import StorageService, get_storage_service

configure_logging()
logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.STARTUP_TASKS_ENABLED:
        run_startup_tasks()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Clothing photo analysis and wardrobe storage",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.state.rate_limiter = RateLimiter()

# Rate limiting runs before routing
app.add_middleware(RateLimitMiddleware)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "Retry-After"],
)


# ============================================================================
# Error Handlers
# ============================================================================

@app.exception_handler(WardrobeError)
async def wardrobe_error_handler(request: Request, exc: WardrobeError):
    """Render categorized errors as {error, details}."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} in {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed input as 400 validation_error without echoing it back."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
        details = f"{field}: {first['msg']}" if field else first["msg"]
    else:
        details = "Invalid request."
    return JSONResponse(
        status_code=400,
        content={"error": "validation_error", "details": details},
    )


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    """Render framework HTTP errors in the same shape as application errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
            "details": str(exc.detail),
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """Last resort: log the traceback, expose nothing internal."""
    logger.exception(f"Unhandled error in {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "unexpected_error",
            "details": "An unexpected server error occurred.",
        },
    )


# ============================================================================
# System Endpoints
# ============================================================================

@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {
        "status": "online",
        "service": settings.APP_NAME,
        "version": "0.1.0",
    }


@app.get("/health")
def health_check(
    sessions: SessionStore = Depends(get_session_store),
    storage: StorageService = Depends(get_storage_service),
):
    """Health check endpoint reporting Redis and storage connectivity."""
    redis_healthy = sessions.health_check()
    storage_healthy = storage.health_check()

    return {
        "status": "healthy" if redis_healthy and storage_healthy else "degraded",
        "redis": redis_healthy,
        "storage": storage_healthy,
    }


# Import and include API routers
from wardrobe.api import api_router

app.include_router(api_router, prefix=settings.API_PREFIX)
