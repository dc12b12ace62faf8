"""Command definitions for the protocol layer.

Commands are requests from clients. Each command is answered by exactly
one response on the same connection; there is no correlation id.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ProtocolError


class CommandType(str, Enum):
    """All supported command types."""

    # Containers
    LIST_CONTAINERS = "listContainers"
    GET_CONTAINER = "getContainer"
    START_CONTAINER = "startContainer"
    STOP_CONTAINER = "stopContainer"
    RESTART_CONTAINER = "restartContainer"
    REMOVE_CONTAINER = "removeContainer"
    GET_CONTAINER_LOGS = "getContainerLogs"
    CREATE_CONTAINER = "createContainer"

    # Images
    LIST_IMAGES = "listImages"
    PULL_IMAGE = "pullImage"
    REMOVE_IMAGE = "removeImage"
    BUILD_IMAGE = "buildImage"

    # Volumes
    LIST_VOLUMES = "listVolumes"
    CREATE_VOLUME = "createVolume"
    REMOVE_VOLUME = "removeVolume"

    # Networks
    LIST_NETWORKS = "listNetworks"
    CREATE_NETWORK = "createNetwork"
    REMOVE_NETWORK = "removeNetwork"

    # System
    GET_VERSION = "getVersion"
    GET_INFO = "getInfo"
    GET_DISK_USAGE = "getDiskUsage"

    @classmethod
    def names(cls) -> list[str]:
        """Wire names of every supported command, in catalog order."""
        return [member.value for member in cls]


class Command(BaseModel):
    """A command from client to server.

    Example:
        {
            "type": "removeContainer",
            "payload": {"id": "web-1", "force": true}
        }

    ``payload`` is kept opaque here; the router validates it against the
    command's payload model when the command is dispatched, so a payload of
    the wrong shape is an execution error rather than a protocol error.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    payload: Any = Field(default_factory=dict)

    @field_validator("payload", mode="before")
    @classmethod
    def _null_payload(cls, value: Any) -> Any:
        return {} if value is None else value

    @classmethod
    def create(
        cls,
        command_type: str | CommandType,
        payload: dict[str, Any] | None = None,
    ) -> Command:
        """Factory method for creating commands."""
        return cls(
            type=command_type.value if isinstance(command_type, CommandType) else command_type,
            payload=payload or {},
        )

    @classmethod
    def from_json(cls, data: str | bytes) -> Command:
        """Decode a wire message into a command.

        Raises:
            ProtocolError: If the data is not a JSON object with a string
                ``type``.
        """
        try:
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            parsed = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ProtocolError(str(e)) from e

        if not isinstance(parsed, dict):
            raise ProtocolError(f"Expected a JSON object, got {type(parsed).__name__}")

        try:
            return cls.model_validate(parsed)
        except ValidationError as e:
            raise ProtocolError(str(e)) from e

    def to_json(self) -> str:
        """Serialize to JSON."""
        return json.dumps({"type": self.type, "payload": self.payload})
