"""Docker MCP Application.

Creates the Starlette ASGI application.

Routes:
- / - WebSocket command protocol
- /health - Health check endpoint
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route, WebSocketRoute
from starlette.websockets import WebSocket

from . import __version__
from .backend import DockerBackend, ResourceBackend
from .protocol import CommandRouter
from .server import ProtocolServer

logger = logging.getLogger(__name__)


def create_app(backend: ResourceBackend | None = None) -> Starlette:
    """Create the Docker MCP application.

    Args:
        backend: Resource backend to execute commands against
                 (default: Docker Engine from the environment)

    Returns:
        Configured Starlette application
    """
    backend = backend or DockerBackend()
    server = ProtocolServer(CommandRouter(backend))

    async def protocol_endpoint(websocket: WebSocket) -> None:
        await server.handle(websocket)

    async def health_check(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "connections": len(server.registry)})

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info(f"Docker MCP v{__version__} started")
        logger.info(f"Supported commands: {', '.join(server.router.supported_commands())}")
        yield
        await server.shutdown()
        close = getattr(backend, "close", None)
        if close is not None:
            await close()

    app = Starlette(
        routes=[
            Route("/health", health_check, methods=["GET"]),
            WebSocketRoute("/", protocol_endpoint),
        ],
        lifespan=lifespan,
    )
    app.state.server = server
    return app
