"""FastAPI application factory for the Wealth Assist website API."""

import logging
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from .middleware.cors import ALLOWED_ORIGINS
from .routes.health import router as health_router
from .routes.registration import router as registration_router
from .routes.site import router as site_router
from .routes.dashboard import router as dashboard_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the lead database before serving so a bad path fails loudly in the logs."""
    logger.info("Starting Wealth Assist Lead Engine API")
    try:
        from .services.database import get_database
        db = get_database()
        logger.info(f"Lead database at {db.db_path}")
    except Exception as e:
        logger.warning(f"Lead database unavailable: {e}")

    yield

    logger.info("Wealth Assist Lead Engine API shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Wealth Assist Lead Engine API",
        description="Investor registration, lead scoring and contact capture for Wealth Assist",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    @app.middleware("http")
    async def request_id(request: Request, call_next):
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

    app.include_router(health_router)
    app.include_router(registration_router)
    app.include_router(site_router)
    app.include_router(dashboard_router)

    return app


# Module-level app instance for uvicorn
app = create_app()
