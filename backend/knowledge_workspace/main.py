"""
Application entry point.

``create_app`` assembles the gateway, routers and the lifespan that builds
the service container; ``app`` is the module-level instance uvicorn serves.
"""
import sys
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, Optional

from fastapi import FastAPI

from .gateway import APIGateway
from .routers import (
    analytics,
    auth,
    cards,
    documents,
    interactions,
    notes,
    notifications,
    recommendations,
    search,
    users,
    workspaces
)
from .routers.dependencies import ServiceContainer, build_container, initialize_database
from .core.config import (
    AI_PROVIDER,
    DATABASE_TYPE,
    ENVIRONMENT,
    RATE_LIMIT_ENABLED,
    RATE_LIMIT_PER_MINUTE,
    UPLOAD_DIR
)
from .core.logging_config import setup_logging, get_logger

logger = get_logger(__name__)

ServicesBuilder = Callable[[], Awaitable[ServiceContainer]]


async def build_default_services() -> ServiceContainer:
    """Datastore from DATABASE_TYPE, local file storage, configured summarizer."""
    db = await initialize_database()
    return build_container(db)


def create_app(build_services: Optional[ServicesBuilder] = None, run_maintenance: bool = True) -> FastAPI:
    """
    Build the FastAPI application.
    
    Args:
        build_services: Coroutine factory for the service container; runs inside
            the lifespan so every service binds to the serving event loop
        run_maintenance: Schedule the retention / counter reconciliation job
    """
    builder = build_services or build_default_services
    
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("=" * 60)
        logger.info("Starting AI Knowledge Workspace backend...")
        logger.info("=" * 60)
        logger.info(f"  → Python Version: {sys.version.split()[0]}")
        logger.info(f"  → Environment: {ENVIRONMENT}")
        logger.info(f"  → Database: {DATABASE_TYPE}")
        logger.info(f"  → AI Provider: {AI_PROVIDER}")
        logger.info(f"  → Upload directory: {UPLOAD_DIR}")
        if RATE_LIMIT_ENABLED:
            logger.info(f"  → Rate limiting: {RATE_LIMIT_PER_MINUTE} requests/minute")
        else:
            logger.info("  → Rate limiting: disabled")
        
        services = await builder()
        await services.start(run_maintenance=run_maintenance)
        app.state.services = services
        logger.info(f"Backend ready (summarizer: {services.summarizer.name})")
        try:
            yield
        finally:
            logger.info("Shutting down...")
            app.state.services = None
            await services.stop()
            logger.info("Shutdown complete")
    
    gateway = APIGateway(lifespan=lifespan)
    gateway.setup_middleware()
    
    gateway.register_router(auth.router, tags=["Auth"])
    gateway.register_router(users.router, tags=["Users"])
    gateway.register_router(workspaces.router, tags=["Workspaces"])
    gateway.register_router(documents.router, tags=["Documents"])
    gateway.register_router(notes.router, tags=["Notes"])
    gateway.register_router(cards.router, tags=["Cards"])
    gateway.register_router(interactions.router, tags=["Interactions"])
    gateway.register_router(notifications.router, tags=["Notifications"])
    gateway.register_router(analytics.router, tags=["Analytics"])
    gateway.register_router(recommendations.router, tags=["Recommendations"])
    gateway.register_router(search.router, tags=["Search"])
    
    gateway.register_health_endpoints()
    return gateway.get_app()


setup_logging()
app = create_app()
