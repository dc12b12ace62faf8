"""Docker MCP - container lifecycle control over a persistent WebSocket.

Clients connect, receive an ``info`` greeting, then send typed commands
(``{"type": ..., "payload": ...}``) that are executed against the Docker
Engine and answered with exactly one response each.
"""

__version__ = "0.1.0"

SERVICE_NAME = "docker"

__all__ = ["SERVICE_NAME", "__version__"]
