"""ASGI application: middleware, error handlers and routers."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import models  # noqa: F401  registers every table on Base.metadata
from app.api.v1.endpoints import health
from app.api.v1.router import api_router
from app.common.request_id import RequestIDMiddleware
from app.core.config import settings
from app.core.errors import (
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.core.logging import get_logger, setup_logging
from app.core.security_headers import SecurityHeadersMiddleware
from app.core.seed_auth import seed_demo_accounts
from app.db.base import Base
from app.db.engine import engine

logger = get_logger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if settings.ENV == "dev":
        # Deployed databases are migrated with alembic
        Base.metadata.create_all(bind=engine)
    seed_demo_accounts()
    logger.info("PROVIQUIZ API started", extra={"api_prefix": settings.API_PREFIX})
    yield
    logger.info("PROVIQUIZ API stopped")


def _register_middleware(app: FastAPI) -> None:
    # Added innermost first; CORS must wrap everything so error responses carry its headers
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )


def _register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def create_app() -> FastAPI:
    docs_enabled = not settings.is_prod
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=APP_VERSION,
        description="Driving theory question bank, mock exams and progress analytics",
        openapi_url="/openapi.json" if docs_enabled else None,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        lifespan=lifespan,
    )
    _register_middleware(app)
    _register_exception_handlers(app)

    # Load balancers probe /health and /ready without the API prefix
    app.include_router(health.router)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/", tags=["Root"], include_in_schema=False)
    async def root() -> dict:
        return {
            "message": settings.PROJECT_NAME,
            "version": APP_VERSION,
            "docs_url": app.docs_url,
        }

    return app


app = create_app()
