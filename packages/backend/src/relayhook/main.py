"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance that owns its own ConnectionRegistry. Lifespan manages
startup/shutdown: anything before `yield` runs at startup, after `yield`
at shutdown, where every still-open subscriber stream is closed.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from relayhook import __version__
from relayhook.api import AVAILABLE_ENDPOINTS, api_router
from relayhook.config import Settings, settings as default_settings
from relayhook.logging_config import configure_logging
from relayhook.realtime.broadcast import Broadcaster
from relayhook.realtime.registry import ConnectionRegistry
from relayhook.services.forwarder import OutboundForwarder

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    settings: Settings = app.state.settings
    base = f"http://localhost:{settings.port}"

    logger.info(
        "relay.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )
    logger.info(
        "relay.endpoints",
        events=f"{base}/events",
        webhook=f"{base}/webhook",
        health=f"{base}/health",
        test_message=f"{base}/test-message",
        outbound=settings.outbound_webhook_url or "disabled",
    )

    yield

    registry: ConnectionRegistry = app.state.registry
    logger.info("relay.shutdown", connected_clients=registry.count())
    registry.close_all()


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """Unknown path or method → 404 listing the valid endpoints."""
    if exc.status_code in (404, 405):
        return JSONResponse(
            status_code=404,
            content={
                "error": "Endpoint not found",
                "availableEndpoints": AVAILABLE_ENDPOINTS,
            },
        )
    return await http_exception_handler(request, exc)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or default_settings
    configure_logging(settings.log_level, settings.environment)

    app = FastAPI(
        title="relayhook",
        description="Real-time webhook relay — webhook in, Server-Sent Events out",
        version=__version__,
        lifespan=lifespan,
    )

    # One registry per app; routes reach it through relayhook.api.deps.
    registry = ConnectionRegistry()
    app.state.settings = settings
    app.state.registry = registry
    app.state.broadcaster = Broadcaster(registry)
    app.state.forwarder = OutboundForwarder(
        settings.outbound_webhook_url,
        timeout=settings.outbound_timeout_seconds,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Request flow: RequestId → CORS → handler
    from relayhook.middleware.request_id import RequestIdMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(StarletteHTTPException, not_found_handler)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: relayhook.main:app)
app = create_app()
