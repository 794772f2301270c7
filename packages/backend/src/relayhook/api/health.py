"""Health check endpoint.

Learn: Reports liveness plus how many SSE subscribers are connected,
which is the quickest way to check that the UI is actually listening.
"""

from fastapi import APIRouter, Depends

from relayhook.api.deps import get_registry, get_settings
from relayhook.config import Settings
from relayhook.realtime.registry import ConnectionRegistry
from relayhook.schemas.message import utc_now_iso

router = APIRouter()


@router.get("/health")
async def health_check(
    registry: ConnectionRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    """Check server status and subscriber count."""
    return {
        "status": "OK",
        "timestamp": utc_now_iso(),
        "connectedClients": registry.count(),
        "port": settings.port,
    }
