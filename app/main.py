"""
Main FastAPI application.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1 import api_router
from app.core.agents.lesson import LessonGenerator, MockLessonGenerator
from app.core.config import Settings, settings as default_settings
from app.core.exceptions import AppError, LessonNotFound
from app.db.base import Base, create_db_engine, create_session_factory
from app.db.init_db import init_db
from app.models import Lesson, LearningHistory, User  # noqa: F401  register tables

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure logging BEFORE creating the app."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format='%(levelname)s:\t%(name)s\t%(message)s',
        handlers=[
            logging.StreamHandler()  # Output to console
        ]
    )
    logging.getLogger("uvicorn").setLevel(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create tables and the default user on startup, release the pool on shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(f"🚀 Starting {settings.PROJECT_NAME}")

    Base.metadata.create_all(bind=app.state.engine)
    db = app.state.session_factory()
    try:
        init_db(db, settings)
    finally:
        db.close()

    try:
        yield
    finally:
        logger.info(f"👋 Shutting down {settings.PROJECT_NAME}")
        app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application with its own engine, session factory and generators.

    Args:
        settings: Settings to use, defaults to the environment

    Returns:
        FastAPI application
    """
    settings = settings or default_settings

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Lesson storage, learning progress and AI lesson generation",
        version="0.1.0",
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    engine = create_db_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.lesson_generator = LessonGenerator(settings)
    app.state.mock_generator = MockLessonGenerator()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        """Reject request bodies larger than MAX_BODY_SIZE."""
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            too_large = int(content_length) > settings.MAX_BODY_SIZE
        elif request.method in ("POST", "PUT", "PATCH"):
            # Chunked bodies carry no length, measure what was sent
            too_large = len(await request.body()) > settings.MAX_BODY_SIZE
        else:
            too_large = False

        if too_large:
            return JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content={"error": "Request body too large"},
            )
        return await call_next(request)

    register_exception_handlers(app)

    # Health check endpoints
    @app.get("/", tags=["Health"])
    async def root():
        """
        Root endpoint - Health check.

        Returns:
            Status message
        """
        return {
            "message": f"{settings.PROJECT_NAME} API",
            "status": "healthy",
            "version": "0.1.0",
            "docs": "/docs",
            "llm_configured": settings.llm_configured,
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """
        Health check endpoint.

        Returns:
            Health status
        """
        return {"status": "healthy"}

    # Include API routers
    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Map application errors onto JSON error responses."""

    @app.exception_handler(LessonNotFound)
    async def not_found_handler(request: Request, exc: LessonNotFound):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": exc.message},
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """
        Handle storage faults and generation errors.

        Args:
            request: Request object
            exc: Application error

        Returns:
            JSON response with error message and details
        """
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} {exc.details}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "details": exc.details},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handle validation errors.

        Args:
            request: Request object
            exc: Validation exception

        Returns:
            JSON response with error details
        """
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Handle all unhandled exceptions.

        Args:
            request: Request object
            exc: Exception

        Returns:
            JSON response with error message
        """
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "details": str(exc)},
        )


def jsonable_errors(exc: RequestValidationError):
    # Error contexts can hold exception objects that JSON cannot encode
    return [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg")}
        for error in exc.errors()
    ]


configure_logging(default_settings)
app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=default_settings.PORT,
        reload=default_settings.DEBUG,
    )
