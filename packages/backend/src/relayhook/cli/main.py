"""relayhook CLI — run the relay and poke at a running one.

Usage:
    relayhook serve --port 3001                  # Run the relay server
    relayhook health                             # Status + connected subscribers
    relayhook push "hello" --from Bot            # Act as the webhook producer
    relayhook test-message "ping"                # Broadcast from the relay itself
    relayhook listen                             # Print SSE frames as they arrive
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx

from relayhook import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_RELAY_URL = "http://localhost:3001"


def _relay_url(url: Optional[str] = None) -> str:
    return (url or os.environ.get("RELAY_URL", DEFAULT_RELAY_URL)).rstrip("/")


def _client(url: Optional[str] = None, timeout: Optional[float] = 30.0) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at a relay."""
    return httpx.AsyncClient(base_url=_relay_url(url), timeout=timeout)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. CliRunner inside an async test)
    by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str, ensure_ascii=False)


def _fail(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


async def _request(method: str, path: str, url: Optional[str], **kwargs) -> dict:
    async with _client(url) as c:
        try:
            r = await c.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            _fail(f"relay not reachable at {_relay_url(url)} ({e})")
        if r.is_error:
            _fail(f"HTTP {r.status_code}: {r.text}")
        return r.json()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="relayhook")
def main():
    """relayhook — relay webhook messages to browsers over Server-Sent Events."""


# ---------------------------------------------------------------------------
# relayhook serve
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", help="Bind address (default: RELAY_HOST or 0.0.0.0)")
@click.option("--port", "-p", type=int, help="Listening port (default: PORT/RELAY_PORT or 3001)")
@click.option("--log-level", help="DEBUG, INFO, WARNING, ERROR")
def serve(host: Optional[str], port: Optional[int], log_level: Optional[str]):
    """Run the relay server until SIGINT/SIGTERM."""
    from relayhook.config import Settings
    from relayhook.server import run

    overrides = {}
    if host:
        overrides["host"] = host
    if port:
        overrides["port"] = port
    if log_level:
        overrides["log_level"] = log_level

    run(Settings(**overrides))


# ---------------------------------------------------------------------------
# relayhook health
# ---------------------------------------------------------------------------


@main.command()
@click.option("--url", help="Relay base URL (or set RELAY_URL)")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def health(url: Optional[str], as_json: bool):
    """Show relay status and connected subscriber count."""
    data = _run(_request("GET", "/health", url))
    if as_json:
        click.echo(_pretty_json(data))
        return
    color = "green" if data.get("status") == "OK" else "red"
    click.secho(f"Status:      {data.get('status')}", fg=color)
    click.echo(f"Subscribers: {data.get('connectedClients')}")
    click.echo(f"Port:        {data.get('port')}")


# ---------------------------------------------------------------------------
# relayhook push
# ---------------------------------------------------------------------------


@main.command()
@click.argument("message")
@click.option("--from", "sender", help='Sender label (relay defaults to "Bot")')
@click.option("--session-id", help="Opaque session ID passed through to subscribers")
@click.option("--url", help="Relay base URL (or set RELAY_URL)")
def push(message: str, sender: Optional[str], session_id: Optional[str], url: Optional[str]):
    """POST MESSAGE to /webhook, exactly like the producer would."""
    body: dict = {"message": message}
    if sender:
        body["from"] = sender
    if session_id:
        body["sessionId"] = session_id
    data = _run(_request("POST", "/webhook", url, json=body))
    click.secho(f"Relayed to {data['clientsNotified']} subscriber(s)", fg="green")


# ---------------------------------------------------------------------------
# relayhook test-message
# ---------------------------------------------------------------------------


@main.command("test-message")
@click.argument("message", required=False)
@click.option("--url", help="Relay base URL (or set RELAY_URL)")
def test_message(message: Optional[str], url: Optional[str]):
    """Ask the relay to broadcast a test message of its own."""
    body = {"message": message} if message else {}
    data = _run(_request("POST", "/test-message", url, json=body))
    click.echo(_pretty_json(data["data"]))


# ---------------------------------------------------------------------------
# relayhook listen
# ---------------------------------------------------------------------------


@main.command()
@click.option("--url", help="Relay base URL (or set RELAY_URL)")
def listen(url: Optional[str]):
    """Subscribe to /events and print each message as it arrives."""
    try:
        _run(_listen_impl(url))
    except KeyboardInterrupt:
        pass


async def _listen_impl(url: Optional[str]):
    async with _client(url, timeout=None) as c:
        try:
            async with c.stream("GET", "/events") as r:
                if r.is_error:
                    _fail(f"HTTP {r.status_code}")
                async for line in r.aiter_lines():
                    if not line.startswith("data: "):
                        continue
                    event = json.loads(line[len("data: "):])
                    if event.get("type") == "connection":
                        click.secho(event.get("message", "connected"), fg="cyan")
                        continue
                    click.echo(
                        f"[{event.get('timestamp', '')}] "
                        f"{event.get('from', '?')}: {event.get('message', '')}"
                    )
        except httpx.HTTPError as e:
            _fail(f"relay not reachable at {_relay_url(url)} ({e})")


if __name__ == "__main__":
    main()
