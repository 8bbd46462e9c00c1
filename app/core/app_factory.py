"""Application factory helpers to keep app/main.py lightweight."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.router import api_router
from app.core.config import settings
from app.core.database import get_db
from app.core.error_handlers import register_exception_handlers
from app.core.logging_config import setup_logging
from app.core.middleware import LoggingMiddleware, limiter
import app.models.registry  # noqa: F401  (registers every mapper)

logger = logging.getLogger(__name__)


class CachedStaticFiles(StaticFiles):
    """StaticFiles mount that enforces Cache-Control when not provided by the file system."""

    def __init__(self, *args, cache_control: str | None = None, **kwargs):
        self._cache_control = cache_control
        super().__init__(*args, **kwargs)

    async def get_response(self, path, scope):
        response = await super().get_response(path, scope)
        if (
            self._cache_control
            and response.status_code == HTTPStatus.OK
            and "cache-control" not in response.headers
        ):
            response.headers["Cache-Control"] = self._cache_control
        return response


def _configure_app(app: FastAPI) -> None:
    app.add_middleware(LoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.include_router(api_router)
    _mount_static_files(app)


def _register_routes(app: FastAPI) -> None:
    @app.get("/", include_in_schema=False)
    async def root():
        return {"message": f"{settings.SITE_NAME} is running", "docs": "/docs"}

    # Liveness: is the process serving requests at all?
    @app.get("/livez", tags=["Health"])
    async def livez():
        return {"status": "ok"}

    # Readiness: can we reach the database?
    @app.get("/readyz", tags=["Health"])
    def readyz(db: Session = Depends(get_db)):
        try:
            db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Readiness check failed (Database): {e}")
            return ORJSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unavailable", "details": {"database": "disconnected"}},
            )
        return {"status": "ready", "details": {"database": "connected"}}


def _mount_static_files(app: FastAPI) -> None:
    uploads_dir = settings.uploads_dir
    uploads_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        "/uploads",
        CachedStaticFiles(
            directory=uploads_dir,
            check_dir=False,
            cache_control=settings.uploads_cache_control,
        ),
        name="uploads",
    )


def _lifespan_factory():
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        settings.uploads_dir.mkdir(parents=True, exist_ok=True)
        logger.info(
            f"{settings.SITE_NAME} starting (environment={settings.environment})"
        )

        yield

        # Shutdown
        logger.info(f"{settings.SITE_NAME} shutting down")

    return lifespan


def create_app() -> FastAPI:
    """
    Application Factory to create and configure the FastAPI application.
    Integrates Logging, Error Handling, Rate Limiting, and Middleware.
    """
    setup_logging(
        log_level=settings.log_level,
        log_dir=settings.log_dir,
        app_name="restaurant_reviews",
        use_json=settings.use_json_logs,
        use_colors=settings.environment.lower() != "production",
    )

    app = FastAPI(
        title=settings.SITE_NAME,
        description="Restaurant listings, star-rated reviews and review voting",
        version="1.0.0",
        lifespan=_lifespan_factory(),
        default_response_class=ORJSONResponse,
    )

    app.state.environment = settings.environment
    app.state.limiter = limiter

    _configure_app(app)
    _register_routes(app)
    register_exception_handlers(app)

    logger.info("Application startup complete")
    return app


__all__ = ["create_app", "CachedStaticFiles"]
