"""FastAPI application entry point."""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.routes import health, ingredients, recipes, saved, session, stores
from app.config import settings
from app.core.request_id import get_request_id
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.performance import PerformanceMiddleware
from app.middleware.security import SecurityHeadersMiddleware, setup_compression, setup_cors
from app.services.gemini_service import GeminiService
from app.services.kitchen_session import KitchenSession
from app.services.saved_recipe_store import SavedRecipeStore
from app.utils.exceptions import (
    FridgeChefException,
    GeminiError,
    ImageProcessingError,
    LocationError,
    NotFoundError,
    PersistenceError,
    PipelineBusyError,
    ValidationError,
)
from app.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

APP_NAME = "Fridge Chef API"
APP_VERSION = "1.0.0"

# Most specific first; the first isinstance match wins
ERROR_STATUS = (
    (ValidationError, status.HTTP_400_BAD_REQUEST, "Validation error"),
    (ImageProcessingError, status.HTTP_400_BAD_REQUEST, "Image processing error"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "Not found"),
    (PipelineBusyError, status.HTTP_409_CONFLICT, "Busy"),
    (LocationError, status.HTTP_422_UNPROCESSABLE_ENTITY, "Location unavailable"),
    (GeminiError, status.HTTP_502_BAD_GATEWAY, "Gemini API error"),
    (PersistenceError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Storage error"),
)


def build_session() -> KitchenSession:
    """Kitchen session wired from settings, with the saved recipe bucket loaded."""
    saved_recipes = SavedRecipeStore(settings.saved_recipes_path, settings.saved_recipes_key)
    saved_recipes.load()
    return KitchenSession(
        gemini_service=GeminiService(),
        saved_recipes=saved_recipes,
        store_limit=settings.store_result_limit,
    )


def create_app(kitchen_session: Optional[KitchenSession] = None) -> FastAPI:
    """
    Build the application.

    A session passed in is used as-is (tests); otherwise one is built from
    settings on startup.
    """
    app = FastAPI(
        title=APP_NAME,
        description="Recipe suggestions from the contents of your fridge, powered by Gemini",
        version=APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    if kitchen_session is not None:
        app.state.session = kitchen_session

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle request validation errors with detailed messages."""
        request_id = get_request_id()

        logger.warning(
            f"Validation error: {str(exc)}",
            extra={
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
            },
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "Validation error",
                "detail": jsonable_errors(exc),
                "request_id": request_id,
            },
        )

    @app.exception_handler(FridgeChefException)
    async def fridge_chef_exception_handler(request: Request, exc: FridgeChefException) -> JSONResponse:
        """Map application exceptions to status codes."""
        request_id = get_request_id()

        status_code, error_message = status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
        for exc_type, code, message in ERROR_STATUS:
            if isinstance(exc, exc_type):
                status_code, error_message = code, message
                break

        log = logger.error if status_code >= 500 else logger.warning
        log(
            f"Exception: {error_message}",
            extra={"request_id": request_id, "exception": str(exc), "path": request.url.path},
            exc_info=status_code >= 500,
        )

        return JSONResponse(
            status_code=status_code,
            content={
                "error": error_message,
                "detail": str(exc),
                "request_id": request_id,
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        request_id = get_request_id()

        logger.error(
            f"Unexpected exception: {str(exc)}",
            extra={"request_id": request_id},
            exc_info=True,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": "An unexpected error occurred",
                "request_id": request_id,
            },
        )

    # Add middleware (order matters: the last added runs first)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        PerformanceMiddleware,
        slow_request_threshold=settings.slow_request_threshold,
        very_slow_request_threshold=settings.very_slow_request_threshold,
    )
    app.add_middleware(RequestLoggingMiddleware)
    setup_compression(app)
    setup_cors(app)

    app.include_router(health.router)
    app.include_router(session.router)
    app.include_router(ingredients.router)
    app.include_router(recipes.router)
    app.include_router(saved.router)
    app.include_router(stores.router)

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"{APP_NAME} starting up...")
        if getattr(app.state, "session", None) is None:
            app.state.session = build_session()
        elif not app.state.session.saved_recipes.loaded:
            app.state.session.saved_recipes.load()
        logger.info(
            "Kitchen session ready",
            extra={
                "saved_recipes": len(app.state.session.saved_recipes),
                "text_model": settings.gemini_text_model,
                "image_model": settings.gemini_image_model,
            },
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info(f"{APP_NAME} shutting down...")
        kitchen = getattr(app.state, "session", None)
        if kitchen is not None:
            await kitchen.aclose()

    @app.get("/")
    async def root():
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "docs": "/docs",
        }

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the raw input, which may hold a whole photo."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


setup_logging(settings.log_level, settings.log_format)
app = create_app()
