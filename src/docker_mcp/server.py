"""Protocol Server - WebSocket connection handling.

Owns the session lifecycle for every connection:
- Accepts the connection, registers a Session and sends the greeting
- Decodes inbound frames into commands
- Dispatches each command as its own task so slow backend calls never
  block other messages or other clients
- Unregisters the Session on close or transport error
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from starlette.websockets import WebSocket, WebSocketDisconnect

from .errors import ProtocolError
from .protocol import Command, CommandRouter, Response
from .session import ConnectionRegistry, Session

logger = logging.getLogger(__name__)


class ProtocolServer:
    """Serves the command protocol on accepted WebSocket connections.

    Usage:
        server = ProtocolServer(CommandRouter(DockerBackend()))

        async def endpoint(websocket: WebSocket) -> None:
            await server.handle(websocket)

    Ordering:
        Commands on one connection are not serialized. Responses may arrive
        in a different order than their commands when backend latencies
        differ.
    """

    def __init__(
        self,
        router: CommandRouter,
        registry: ConnectionRegistry | None = None,
    ) -> None:
        self.router = router
        self.registry = registry or ConnectionRegistry()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of commands still being executed."""
        return len(self._tasks)

    async def handle(self, websocket: WebSocket) -> None:
        """Serve one connection until it closes."""
        await websocket.accept()
        session = Session(websocket)
        self.registry.add(session)
        logger.info(f"Client connected: {session.id} from {session.peer}")

        try:
            await session.send(Response.info())

            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                await self._handle_message(session, message)

        except WebSocketDisconnect:
            pass
        except Exception as e:
            logger.error(f"WebSocket error for session {session.id}: {e}")
        finally:
            session.close()
            self.registry.remove(session)
            logger.info(f"Client disconnected: {session.id}")

    async def _handle_message(self, session: Session, message: dict[str, Any]) -> None:
        """Decode one frame and schedule its command."""
        data = message.get("text")
        if data is None:
            data = message.get("bytes") or b""

        try:
            command = Command.from_json(data)
        except ProtocolError as e:
            logger.warning(f"Invalid message from session {session.id}: {e}")
            await session.send(Response.processing_failed(e))
            return

        task = asyncio.create_task(self._dispatch(session, command))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _dispatch(self, session: Session, command: Command) -> None:
        try:
            await self.router.dispatch(session, command)
        except Exception as e:
            logger.exception(f"Error dispatching {command.type} for session {session.id}: {e}")
            await session.send(Response.processing_failed(e))

    async def shutdown(self) -> None:
        """Cancel commands that are still running."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
