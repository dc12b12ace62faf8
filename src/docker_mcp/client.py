"""WebSocket client for a running Docker MCP server."""

from __future__ import annotations

import json
from typing import Any

import websockets

from .protocol import Command, CommandType


class DockerMCPClient:
    """Client-side connection to the command protocol.

    Usage:
        async with DockerMCPClient("ws://localhost:9999") as client:
            print(client.info["commands"])
            response = await client.call("listContainers", {"all": True})

    Responses carry no correlation id, so ``call()`` is meant to be used
    one command at a time.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.info: dict[str, Any] = {}
        self._websocket: Any = None  # websockets ClientConnection

    async def __aenter__(self) -> DockerMCPClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def connect(self) -> None:
        """Connect and read the server greeting."""
        self._websocket = await websockets.connect(self.url)
        greeting = await self._receive()
        if greeting.get("type") != "info":
            await self.close()
            raise ConnectionError(f"Unexpected greeting: {greeting.get('type')}")
        self.info = greeting.get("payload") or {}

    async def close(self) -> None:
        if self._websocket is not None:
            await self._websocket.close()
            self._websocket = None

    async def call(
        self,
        command_type: str | CommandType,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one command and return the response that answers it."""
        if self._websocket is None:
            raise ConnectionError("Not connected")
        await self._websocket.send(Command.create(command_type, payload).to_json())
        return await self._receive()

    async def _receive(self) -> dict[str, Any]:
        data = await self._websocket.recv()
        return json.loads(data)
