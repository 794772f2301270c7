"""relayhook — real-time webhook relay.

Receives messages from a webhook producer (e.g. an n8n workflow) and pushes
them to every browser connected over Server-Sent Events. User-originated
messages travel the other way, forwarded to an external webhook sink.
"""

__version__ = "0.1.0"
