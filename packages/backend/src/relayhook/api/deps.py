"""FastAPI dependencies — hand routes the objects living on app.state.

Learn: The registry, broadcaster and forwarder are created once per app
in create_app() and stored on app.state. Routes never import them as
globals; they ask for them here, which also lets tests build isolated
apps with their own registry.
"""

from fastapi import Request

from relayhook.config import Settings
from relayhook.realtime.broadcast import Broadcaster
from relayhook.realtime.registry import ConnectionRegistry
from relayhook.services.forwarder import OutboundForwarder


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_registry(request: Request) -> ConnectionRegistry:
    return request.app.state.registry


def get_broadcaster(request: Request) -> Broadcaster:
    return request.app.state.broadcaster


def get_forwarder(request: Request) -> OutboundForwarder:
    return request.app.state.forwarder
