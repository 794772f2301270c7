"""Server entry point — uvicorn with subscriber-aware shutdown.

Learn: uvicorn's graceful shutdown waits for in-flight responses to
finish before running the lifespan shutdown. SSE responses never finish
on their own, so a plain `uvicorn relayhook.main:app` would sit on
SIGTERM until its graceful timeout expires.

RelayServer closes every registered handle the moment SIGINT/SIGTERM
arrives. Each stream generator then returns, its response completes,
and uvicorn shuts down normally.

Usage:
    relayhook serve --port 3001
"""

import asyncio
from typing import Optional

import structlog
import uvicorn

from relayhook.config import Settings, settings as default_settings
from relayhook.main import create_app
from relayhook.realtime.registry import ConnectionRegistry

logger = structlog.get_logger()

GRACEFUL_SHUTDOWN_TIMEOUT = 5  # seconds


class RelayServer(uvicorn.Server):
    def __init__(self, config: uvicorn.Config, registry: ConnectionRegistry):
        super().__init__(config)
        self.registry = registry

    def handle_exit(self, sig, frame) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        # Signal handlers may interrupt the loop mid-callback, so the
        # registry is touched from a scheduled callback instead.
        if loop is not None:
            loop.call_soon_threadsafe(self.close_subscribers, sig)
        else:
            self.close_subscribers(sig)
        super().handle_exit(sig, frame)

    def close_subscribers(self, sig=None) -> int:
        count = self.registry.close_all()
        logger.info("relay.signal_received", signal=sig, closed_connections=count)
        return count


def build_server(settings: Optional[Settings] = None) -> RelayServer:
    settings = settings or default_settings
    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=GRACEFUL_SHUTDOWN_TIMEOUT,
    )
    return RelayServer(config, app.state.registry)


def run(settings: Optional[Settings] = None) -> None:
    """Run the relay until interrupted."""
    build_server(settings).run()
