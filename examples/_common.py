"""
Shared helpers for relayhook examples.

Handles the relay health check so each example can focus on its
specific flow.
"""

import os
import sys

import httpx

BASE = os.environ.get("RELAY_URL", "http://localhost:3001").rstrip("/")


def check_relay() -> dict:
    """Verify the relay is reachable and healthy."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Relay not reachable at {BASE}")
        print("Start it with:  relayhook serve --port 3001")
        sys.exit(1)

    if resp.status_code != 200:
        print(f"ERROR: Health check returned {resp.status_code}")
        sys.exit(1)

    health = resp.json()
    print("Relay health:")
    print(f"  Status:      {health['status']}")
    print(f"  Subscribers: {health['connectedClients']}")
    return health
