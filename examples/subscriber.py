#!/usr/bin/env python3
"""
Subscriber — what the chat UI does, in a terminal.

Opens GET /events and prints every message frame until Ctrl+C.
Run with: python examples/subscriber.py

Requires: pip install httpx
Relay must be running: http://localhost:3001
"""

import json

import httpx

from _common import BASE, check_relay


def main():
    check_relay()
    print(f"\nListening on {BASE}/events (Ctrl+C to stop)\n")

    with httpx.stream("GET", f"{BASE}/events", timeout=None) as resp:
        for line in resp.iter_lines():
            if not line.startswith("data: "):
                continue  # blank separators and keep-alive comments
            event = json.loads(line[len("data: "):])
            if event.get("type") == "connection":
                print(f"✓ {event['message']}")
                continue
            print(f"[{event['timestamp']}] {event['from']}: {event['message']}")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
