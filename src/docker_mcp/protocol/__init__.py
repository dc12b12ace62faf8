"""Command/response protocol.

Defines the message envelopes exchanged over a connection and the router
that turns commands into backend calls.

Key concepts:
- Commands: Client → Server requests, ``{"type", "payload"}``
- Responses: Server → Client results, ``{"type", "payload", "error"?}``
- Pairing: Every command gets exactly one response on its own connection
"""

from .commands import Command, CommandType
from .responses import Response, ResponseType
from .router import ROUTES, CommandRouter, Route

__all__ = [
    "Command",
    "CommandType",
    "CommandRouter",
    "ROUTES",
    "Response",
    "ResponseType",
    "Route",
]
