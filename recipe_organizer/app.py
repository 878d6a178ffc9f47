# recipe_organizer/app.py
import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from recipe_organizer.config import Settings
from recipe_organizer.db_mongo import get_client, get_collection
from recipe_organizer.errors import RecipeError
from recipe_organizer.handlers import register_error_handlers
from recipe_organizer.logging_config import configure_logging
from recipe_organizer.routes import meta_router, router
from recipe_organizer.storage import MongoRecipeStore, RecipeStore

APP_VERSION = "1.0.0"

logger = structlog.get_logger()


def create_app(store: RecipeStore | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the API.

    ``store`` is normally left as ``None`` so that a MongoDB-backed store is
    created on startup from ``settings``; tests pass their own.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level, json_logs=not settings.is_development)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = None
        if app.state.store is None:
            client = get_client(settings)
            app.state.store = MongoRecipeStore(get_collection(client, settings))
        try:
            app.state.store.ensure_indexes()
        except RecipeError as e:
            logger.error("Failed to ensure indexes", error=e.message)
        logger.info("Recipe Organizer API started", environment=settings.environment)
        yield
        logger.info("Shutting down Recipe Organizer API")
        if client is not None:
            client.close()
            logger.info("MongoDB connection closed")

    app = FastAPI(
        title="Recipe Organizer API",
        version=APP_VERSION,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(elapsed * 1000, 2),
        )
        return response

    register_error_handlers(app)
    app.include_router(meta_router)
    app.include_router(router)
    return app


__all__ = ["create_app", "APP_VERSION"]
