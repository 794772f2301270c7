#!/usr/bin/env python3
"""
Producer — what the n8n workflow does when the bot replies.

POSTs a few messages to /webhook and shows how many subscribers each
one reached, then demonstrates the validation error and the test
broadcast. Start examples/subscriber.py in another terminal first to
watch them arrive.

Run with: python examples/producer.py

Requires: pip install httpx
Relay must be running: http://localhost:3001
"""

import time
import uuid

import httpx

from _common import BASE, check_relay


def main():
    check_relay()
    client = httpx.Client(base_url=BASE, timeout=10)
    session_id = f"session-{uuid.uuid4().hex[:8]}"

    # ── Bot replies ───────────────────────────────────────────────
    print("\n1. Sending bot replies...")
    for text in ["Hi! How can I help?", "Your order shipped yesterday.", "Anything else?"]:
        resp = client.post("/webhook", json={
            "message": text,
            "from": "Bot",
            "sessionId": session_id,
        })
        assert resp.status_code == 200, f"Failed: {resp.text}"
        print(f"   → {text!r} reached {resp.json()['clientsNotified']} subscriber(s)")
        time.sleep(0.5)

    # ── Missing message ───────────────────────────────────────────
    print("\n2. Posting without a message (should be rejected)...")
    resp = client.post("/webhook", json={"from": "Bot"})
    print(f"   {resp.status_code}: {resp.json()['error']}")

    # ── Relay's own test broadcast ────────────────────────────────
    print("\n3. Asking the relay for a test broadcast...")
    resp = client.post("/test-message", json={"message": "Relay self-test"})
    data = resp.json()["data"]
    print(f"   {data['from']}: {data['message']}")

    print("\nDone.")


if __name__ == "__main__":
    main()
