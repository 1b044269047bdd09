"""
KVS node: an HTTP key-value store with an optional forwarding mode.

A node either serves requests from its own in-memory store or, when started
with a forwarding address, relays every request to an upstream node and
returns the upstream's answer unchanged.

Key responsibilities:
- Store and retrieve arbitrary JSON values by string key
- Distinguish created from replaced writes
- Relay requests verbatim to an upstream node in forwarding mode
"""

__version__ = "1.0.0"
