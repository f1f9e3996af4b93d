"""ServicePay FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from servicepay.api.dashboard import router as dashboard_router
from servicepay.models import Base
from servicepay.services import engine
from servicepay.services.config import Settings, get_settings
from servicepay.services.dashboard_service import DashboardService
from servicepay.services.directory_service import SessionDirectoryStore
from servicepay.services.logging import setup_server_logging
from servicepay.services.period_service import ActivePeriodResolver
from servicepay.services.provisioning_service import AccountProvisioner

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup and shutdown)."""
    if engine is not None:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables initialized")
    else:
        logger.info("No DATABASE_URL configured, accounts are kept in memory")
    yield
    logger.info("Application shutting down")


def create_app(
    settings: Settings | None = None,
    provisioner: AccountProvisioner | None = None,
    resolver: ActivePeriodResolver | None = None,
) -> FastAPI:
    """Build the FastAPI application and its session-scoped collaborators.

    Args:
        settings: Application settings (default: loaded from environment)
        provisioner: Account provisioner (default: placeholder bill schedule)
        resolver: Active period resolver (default: system clock)

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        description="Utility service accounts and monthly bill tracking",
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.directory_store = SessionDirectoryStore(idle_seconds=settings.session_idle_seconds)
    app.state.provisioner = provisioner or AccountProvisioner(default_year=settings.billing_year)
    app.state.dashboard_service = DashboardService(resolver)

    app.include_router(dashboard_router)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint for monitoring."""
        return {"status": "ok"}

    return app


def main() -> None:
    """Run the API server with uvicorn."""
    load_dotenv()
    settings = get_settings()
    setup_server_logging(settings.log_file, settings.log_level)

    logger.info("Starting Uvicorn server on %s:%d...", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
