"""
Bistro Boss API - FastAPI Application Factory

Serves the menu and reviews, stages per-user carts and manages the user
directory. Protected routes require a bearer token from ``POST /jwt``; admin
routes additionally require the caller's directory record to hold the admin role.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from bistro.database import close_db, connect_db, init_indexes, ping_db
from bistro.errors import register_error_handlers
from bistro.logger import configure_logging
from bistro.models.schemas import HealthResponse
from bistro.routers import carts, catalog, tokens, users
from bistro.routers.users import init_admin_users
from bistro.settings import app_settings

logger = logging.getLogger(__name__)

LIVENESS_MESSAGE = "bistro boss server is running"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - owns the MongoDB connection for the process lifetime."""
    logger.info(f"🍽️ {app_settings.app_name} starting up...")

    if app_settings.uses_default_secret:
        logger.warning("⚠️ ACCESS_TOKEN_SECRET is not set; using the development placeholder")

    await connect_db()
    await init_indexes()
    await init_admin_users()

    yield

    await close_db()
    logger.info(f"🍽️ {app_settings.app_name} shutting down...")


def create_app() -> FastAPI:
    """FastAPI application factory."""

    configure_logging(
        log_level=app_settings.log_level,
        file=app_settings.log_to_file,
        filename=app_settings.log_filename,
    )

    app = FastAPI(
        title=app_settings.app_name,
        description=(
            "Restaurant ordering backend: menu, reviews, per-user carts and user directory.\n\n"
            "**Authentication:** obtain a token from `POST /jwt` and send it as `Authorization: Bearer <token>`."
        ),
        version=app_settings.app_version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    if app_settings.enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=app_settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_error_handlers(app)

    app.include_router(tokens.router, prefix="/jwt", tags=["Auth"])
    app.include_router(catalog.router, tags=["Catalog"])
    app.include_router(carts.router, prefix="/carts", tags=["Carts"])
    app.include_router(users.router, prefix="/users", tags=["Users"])

    @app.get("/", response_class=PlainTextResponse, tags=["Health"])
    async def root() -> str:
        """Liveness probe."""
        return LIVENESS_MESSAGE

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health() -> HealthResponse:
        """Health check endpoint, including a database ping."""
        database_ok = await ping_db()
        return HealthResponse(
            status="healthy" if database_ok else "degraded",
            service="bistro-boss",
            database="up" if database_ok else "down",
        )

    logger.info(f"🍽️ {app_settings.app_name} application created")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bistro.main:app",
        host=app_settings.app_host,
        port=app_settings.app_port,
        reload=app_settings.debug,
    )
