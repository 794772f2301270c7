"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Routes live at the root, not under /api/v1 — producers and the
chat UI are configured with these exact URLs (/webhook, /events), and
there is no auth layer to split open from protected routes.
"""

from fastapi import APIRouter

from relayhook.api.diagnostics import router as diagnostics_router
from relayhook.api.events import router as events_router
from relayhook.api.health import router as health_router
from relayhook.api.send import router as send_router
from relayhook.api.webhook import router as webhook_router

api_router = APIRouter()

api_router.include_router(events_router, tags=["events"])
api_router.include_router(webhook_router, tags=["webhook"])
api_router.include_router(health_router, tags=["health"])
api_router.include_router(diagnostics_router, tags=["diagnostics"])
api_router.include_router(send_router, tags=["send"])

# Listed in the 404 payload so callers can discover the valid operations.
AVAILABLE_ENDPOINTS = [
    "GET /events - Server-Sent Events stream for the frontend",
    "POST /webhook - Receive messages from the producer",
    "GET /health - Server status",
    "POST /test-message - Broadcast a test message",
    "POST /send - Forward a user message to the outbound webhook",
]
