"""Client sessions and the registry of live connections.

A Session is a pure transport handle: an identity plus the ability to send
responses. It holds no command state.
"""

from __future__ import annotations

import asyncio
import logging
import uuid

from starlette.websockets import WebSocket, WebSocketState

from .protocol import Response

logger = logging.getLogger(__name__)


class Session:
    """One connected client.

    ``send()`` is safe to call at any time, including while the connection
    is closing: transport failures are logged and the session is marked
    closed.
    """

    def __init__(self, websocket: WebSocket, session_id: str | None = None) -> None:
        self.websocket = websocket
        self.id = session_id or f"conn_{uuid.uuid4().hex[:12]}"
        self._closed = False
        self._send_lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"Session(id={self.id!r}, peer={self.peer!r})"

    @property
    def peer(self) -> str:
        client = self.websocket.client
        return f"{client.host}:{client.port}" if client else "unknown"

    @property
    def is_open(self) -> bool:
        return not self._closed and self.websocket.client_state == WebSocketState.CONNECTED

    def close(self) -> None:
        """Mark the session closed; later sends are dropped."""
        self._closed = True

    async def send(self, response: Response) -> None:
        """Serialize and write a response to the client.

        Raises:
            TypeError, ValueError: If the response cannot be serialized. The
                session stays open.
        """
        data = response.to_json()
        async with self._send_lock:
            if not self.is_open:
                logger.debug(f"Dropping {response.type} response for closed session {self.id}")
                return
            try:
                await self.websocket.send_text(data)
            except Exception as e:
                logger.warning(f"Failed to send {response.type} to session {self.id}: {e}")
                self._closed = True


class ConnectionRegistry:
    """Process-wide set of live sessions.

    Only mutated from the event loop, so no lock is needed.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def add(self, session: Session) -> None:
        self._sessions[session.id] = session

    def remove(self, session: Session) -> None:
        """Remove a session; removing an unknown session is a no-op."""
        self._sessions.pop(session.id, None)

    def __contains__(self, session: object) -> bool:
        return isinstance(session, Session) and session.id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
