import contextlib
import logging

from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.db import create_tables
from app.core.logging import configure_logging
from app.core.middleware import http_logger_middleware
from app.deps import create_container
from app.routes import router as api_router
from app.routes.health import router as health_router
from app.services.exception_handler import register_exception_handlers
from app.settings.app import AppSettings
from app.settings.db import DatabaseSettings


logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "auth", "description": "User authentication endpoints"},
    {"name": "users", "description": "User management endpoints"},
    {"name": "health", "description": "Application health checks"},
]


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    container: AsyncContainer = app.state.dishka_container
    settings = await container.get(AppSettings)
    if settings.db_synchronize:
        engine = await container.get(AsyncEngine)
        await create_tables(engine)
        logger.info("Database schema synchronized")
    logger.info("%s started (env: %s)", settings.name, settings.env)
    yield
    await container.close()


def create_app(
    settings: AppSettings | None = None,
    db_settings: DatabaseSettings | None = None,
) -> FastAPI:
    settings = settings or AppSettings()
    configure_logging(settings)
    container = create_container(settings, db_settings)

    app = FastAPI(
        lifespan=lifespan,
        title=settings.name,
        description=(
            "Users API with SQLAlchemy, JWT authentication, "
            "and role-based access control"
        ),
        version="1.0.0",
        openapi_tags=OPENAPI_TAGS,
        docs_url="/api/docs",
        redoc_url=None,
        openapi_url="/api/openapi.json",
        swagger_ui_parameters={
            "persistAuthorization": True,
            "tagsSorter": "alpha",
            "operationsSorter": "alpha",
        },
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.middleware("http")(http_logger_middleware)
    register_exception_handlers(app, debug=settings.debug)
    setup_dishka(container, app=app)
    app.include_router(api_router)
    app.include_router(health_router)
    return app
