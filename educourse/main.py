"""EduCourse API - Main Application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from educourse.config import get_settings
from educourse.core.database import init_database, shutdown_database
from educourse.core.logging import configure_structlog, get_logger
from educourse.core.middleware import INTERNAL_ERROR_BODY, RequestContextMiddleware
from educourse.courses.router import router_courses, router_lessons, router_modules
from educourse.courses.service import CourseService, LessonService, ModuleService
from educourse.health import router as health_router
from educourse.progress.router import router as progress_router
from educourse.progress.service import ProgressService


# Configure logging early (before creating logger)
settings = get_settings()
configure_structlog(settings)

logger = get_logger(__name__)


# Application state for dependency injection
class AppState:
    """Application state container."""

    session_factory: async_sessionmaker[AsyncSession] | None = None
    course_service: CourseService | None = None
    module_service: ModuleService | None = None
    lesson_service: LessonService | None = None
    progress_service: ProgressService | None = None


app_state = AppState()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    app_state.session_factory = await init_database(settings)
    logger.info("database_initialized")

    app_state.course_service = CourseService(app_state.session_factory)
    app_state.module_service = ModuleService(app_state.session_factory)
    app_state.lesson_service = LessonService(app_state.session_factory)
    app.state.course_service = app_state.course_service
    app.state.module_service = app_state.module_service
    app.state.lesson_service = app_state.lesson_service
    logger.info("course_services_initialized")

    app_state.progress_service = ProgressService(app_state.session_factory)
    app.state.progress_service = app_state.progress_service
    logger.info("progress_service_initialized")

    yield

    # Shutdown
    logger.info("shutting_down_application")
    await shutdown_database()


def _validation_message(exc: RequestValidationError) -> str:
    """Name the first offending parameter, e.g. ``Invalid course_id``."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    loc = [str(part) for part in errors[0].get("loc", ())]
    if loc and loc[0] == "body":
        return "Invalid request body"
    return f"Invalid {loc[-1]}" if loc else "Invalid request"


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # debug stays off so Starlette never renders stack traces in responses
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Online course catalog and learning progress API",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    # Request context middleware (added before CORS, so it sits inside it)
    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )

    # Global exception handlers; every error body is {"error": message}
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Handle HTTP exceptions with safe error messages."""
        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path,
            method=request.method,
        )

        message = (
            str(exc.detail)
            if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
            else "Internal server error"
        )
        return ORJSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Handle validation errors (malformed ids, bad bodies) as 400."""
        logger.warning(
            "validation_error",
            errors=exc.errors(),
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        """Catch-all for exceptions raised outside RequestContextMiddleware.

        Router errors are answered by the middleware itself so the response
        still carries the request id.
        """
        logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=INTERNAL_ERROR_BODY,
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(router_courses, prefix=settings.api_prefix)
    app.include_router(router_modules, prefix=settings.api_prefix)
    app.include_router(router_lessons, prefix=settings.api_prefix)
    app.include_router(progress_router, prefix=settings.api_prefix)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, Any]:
        """Root endpoint listing the API surface."""
        prefix = settings.api_prefix
        return {
            "message": "EduCourse API",
            "version": settings.app_version,
            "endpoints": {
                "courses": f"{prefix}/courses",
                "modules": f"{prefix}/modules",
                "lessons": f"{prefix}/lessons",
                "progress": f"{prefix}/progress",
                "health": "/health",
            },
        }

    return app


app = create_app()
