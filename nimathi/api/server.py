"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nimathi.api.routes import router
from nimathi.api.middleware import setup_cors, setup_rate_limiting
from nimathi.config import LOG_LEVEL
from nimathi.exceptions import NimathiError
from nimathi.services.container import ServiceContainer, build_container

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for FastAPI application"""
    # Startup
    logger.info("Starting API server...")
    owns_container = app.state.container is None
    if owns_container:
        app.state.container = await build_container()
        logger.info("Service container ready")

    yield

    # Shutdown
    logger.info("Shutting down API server...")
    if owns_container:
        await app.state.container.close()
        logger.info("Service container closed")


def create_api_application(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure FastAPI application

    Args:
        container: Prebuilt services; built from configuration at startup when omitted
    """
    app = FastAPI(
        title="Nimathi API",
        description="REST API for the Nimathi wellness companion",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.container = container

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)

    # Include routes
    app.include_router(router)

    @app.exception_handler(NimathiError)
    async def nimathi_exception_handler(request: Request, exc: NimathiError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    logger.info("FastAPI application created")

    return app
