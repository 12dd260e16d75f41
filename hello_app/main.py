"""hello-app: greeting service for orchestrated deployment."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from hello_app import __version__
from hello_app.api.routes_greeting import router as greeting_router
from hello_app.api.routes_health import router as health_router
from hello_app.config import Settings
from hello_app.lifecycle import ServiceState
from hello_app.middleware import RequestTimeoutMiddleware

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Route hello_app and uvicorn loggers through one root handler."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    logger.debug(
        f"hello-app starting up (request timeout {settings.request_timeout}s, "
        f"grace period {settings.graceful_timeout}s)"
    )

    yield

    app.state.lifecycle.mark_stopped()
    logger.info("hello-app shutting down...")


def create_app(settings: Settings | None = None, state: ServiceState | None = None) -> FastAPI:
    """Build the application around an explicit settings and lifecycle value.

    Readiness follows ``state``, which hello_app.server moves to SERVING once
    the listener accepts connections.
    """
    app = FastAPI(
        title="hello-app",
        description="Single-route greeting service with liveness and readiness probes.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings or Settings()
    app.state.lifecycle = state or ServiceState()

    app.add_middleware(RequestTimeoutMiddleware, timeout=app.state.settings.request_timeout)

    app.include_router(greeting_router)
    app.include_router(health_router)
    return app
