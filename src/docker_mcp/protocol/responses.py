"""Response definitions for the protocol layer.

Responses are server messages sent to clients. They are either:
- The greeting (``info``) sent once when a client connects
- The single result or error answering a command
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from .. import SERVICE_NAME, __version__
from .commands import CommandType


class ResponseType(str, Enum):
    """Result tags sent back to clients."""

    # Greeting (also the getInfo result tag)
    INFO = "info"
    ERROR = "error"

    # Containers
    CONTAINERS = "containers"
    CONTAINER = "container"
    CONTAINER_STARTED = "containerStarted"
    CONTAINER_STOPPED = "containerStopped"
    CONTAINER_RESTARTED = "containerRestarted"
    CONTAINER_REMOVED = "containerRemoved"
    CONTAINER_LOGS = "containerLogs"
    CONTAINER_CREATED = "containerCreated"

    # Images
    IMAGES = "images"
    IMAGE_PULLED = "imagePulled"
    IMAGE_REMOVED = "imageRemoved"
    IMAGE_BUILT = "imageBuilt"

    # Volumes
    VOLUMES = "volumes"
    VOLUME_CREATED = "volumeCreated"
    VOLUME_REMOVED = "volumeRemoved"

    # Networks
    NETWORKS = "networks"
    NETWORK_CREATED = "networkCreated"
    NETWORK_REMOVED = "networkRemoved"

    # System
    VERSION = "version"
    DISK_USAGE = "diskUsage"


PROCESS_FAILURE_MESSAGE = "Failed to process command"


class Response(BaseModel):
    """A message from server to client.

    Example (success):
        {"type": "containerStarted", "payload": {"id": "web-1"}}

    Example (error):
        {
            "type": "error",
            "payload": {"message": "Failed to execute removeContainer"},
            "error": "404 Client Error: Not Found (\"No such container: nope\")"
        }

    ``error`` is left off the wire when there is none.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    payload: Any = None
    error: str | None = None

    def is_error(self) -> bool:
        """Check if this is an error response."""
        return self.type == ResponseType.ERROR.value

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type, "payload": self.payload}
        if self.error is not None:
            data["error"] = self.error
        return data

    def to_json(self) -> str:
        """Serialize to JSON.

        Engine values may hold datetimes or other non-JSON types; those are
        written as strings.
        """
        return json.dumps(self.to_dict(), default=str)

    # =========================================================================
    # Factory methods
    # =========================================================================

    @classmethod
    def create(cls, response_type: str | ResponseType, payload: Any = None) -> Response:
        """Factory method for creating success responses."""
        return cls(
            type=response_type.value if isinstance(response_type, ResponseType) else response_type,
            payload=payload,
        )

    @classmethod
    def failure(cls, message: str, error: BaseException | str | None = None) -> Response:
        """Create an error response.

        Args:
            message: Fixed human-readable description
            error: Underlying failure, stringified into the ``error`` field
        """
        return cls(
            type=ResponseType.ERROR.value,
            payload={"message": message},
            error=str(error) if error is not None else None,
        )

    @classmethod
    def unknown_command(cls, command_type: str) -> Response:
        return cls.failure(f"Unknown command: {command_type}")

    @classmethod
    def execution_failed(cls, command_type: str, error: BaseException | str) -> Response:
        return cls.failure(f"Failed to execute {command_type}", error)

    @classmethod
    def processing_failed(cls, error: BaseException | str) -> Response:
        """Error for messages that could not be decoded or dispatched."""
        return cls.failure(PROCESS_FAILURE_MESSAGE, error)

    @classmethod
    def info(cls) -> Response:
        """Create the greeting sent when a client connects."""
        return cls.create(
            ResponseType.INFO,
            {
                "name": SERVICE_NAME,
                "version": __version__,
                "commands": CommandType.names(),
            },
        )
