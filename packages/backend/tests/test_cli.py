"""CLI tests — click commands against a stubbed relay.

Learn: _client() is patched to return an httpx.AsyncClient over a
MockTransport, so commands run end to end without a server.
"""

import json

import httpx
import pytest
from click.testing import CliRunner

from relayhook.cli import main as cli


@pytest.fixture()
def relay(monkeypatch):
    """Fake relay that records requests and answers like the real one."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/health":
            return httpx.Response(
                200,
                json={"status": "OK", "timestamp": "t", "connectedClients": 2, "port": 3001},
            )
        if request.url.path == "/webhook":
            return httpx.Response(
                200, json={"success": True, "message": "ok", "clientsNotified": 2}
            )
        if request.url.path == "/test-message":
            body = json.loads(request.content or b"{}")
            data = {"message": body.get("message", "default"), "from": "Server", "timestamp": "t"}
            return httpx.Response(200, json={"success": True, "message": "sent", "data": data})
        if request.url.path == "/events":
            frames = (
                'data: {"type": "connection", "message": "Connected", "timestamp": "t"}\n\n'
                'data: {"message": "hi", "from": "Bot", "timestamp": "t"}\n\n'
            )
            return httpx.Response(
                200, content=frames.encode(), headers={"Content-Type": "text/event-stream"}
            )
        return httpx.Response(404, json={"error": "Endpoint not found"})

    def fake_client(url=None, timeout=30.0):
        return httpx.AsyncClient(
            base_url=cli._relay_url(url),
            transport=httpx.MockTransport(handler),
        )

    monkeypatch.setattr(cli, "_client", fake_client)
    return seen


def test_health(relay):
    result = CliRunner().invoke(cli.main, ["health"])
    assert result.exit_code == 0, result.output
    assert "OK" in result.output
    assert "Subscribers: 2" in result.output


def test_health_json(relay):
    result = CliRunner().invoke(cli.main, ["health", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["connectedClients"] == 2


def test_push_sends_producer_payload(relay):
    result = CliRunner().invoke(
        cli.main, ["push", "hello", "--from", "n8n", "--session-id", "s-1"]
    )
    assert result.exit_code == 0, result.output
    assert "2 subscriber(s)" in result.output

    (req,) = relay
    assert req.url.path == "/webhook"
    assert json.loads(req.content) == {"message": "hello", "from": "n8n", "sessionId": "s-1"}


def test_test_message(relay):
    result = CliRunner().invoke(cli.main, ["test-message", "ping"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["message"] == "ping"


def test_listen_prints_messages(relay):
    result = CliRunner().invoke(cli.main, ["listen"])
    assert result.exit_code == 0, result.output
    assert "Connected" in result.output
    assert "Bot: hi" in result.output


def test_http_error_exits_nonzero(relay):
    # Base path makes the request land on /base/health, which the fake relay 404s
    result = CliRunner().invoke(cli.main, ["health", "--url", "http://relay.test/base"])
    assert result.exit_code == 1
    assert "HTTP 404" in result.output


def test_relay_url_resolution(monkeypatch):
    monkeypatch.delenv("RELAY_URL", raising=False)
    assert cli._relay_url() == cli.DEFAULT_RELAY_URL
    monkeypatch.setenv("RELAY_URL", "http://relay.internal:9000/")
    assert cli._relay_url() == "http://relay.internal:9000"
    assert cli._relay_url("http://explicit") == "http://explicit"
