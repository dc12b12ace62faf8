"""Per-command payload models.

Every command has its own payload model with required and optional fields
spelled out. Field aliases carry the wire names; attributes use snake_case.
An explicit ``null`` for an optional field is treated the same as leaving
the field out, so the documented default applies.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CommandPayload(BaseModel):
    """Base for all command payloads."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class EmptyPayload(CommandPayload):
    """Payload for commands that take no arguments.

    Any payload is accepted and ignored, whatever its shape.
    """

    @model_validator(mode="before")
    @classmethod
    def _ignore_payload(cls, data: Any) -> Any:
        return data if isinstance(data, dict) else {}


# =============================================================================
# Containers
# =============================================================================


class ListContainersPayload(CommandPayload):
    all: bool = False


class ContainerIdPayload(CommandPayload):
    """Payload carrying a container id or name."""

    id: str


class RemoveContainerPayload(ContainerIdPayload):
    force: bool = False
    remove_volumes: bool = Field(default=False, alias="removeVolumes")


class ContainerLogsPayload(ContainerIdPayload):
    tail: int = 100


class CreateContainerOptions(CommandPayload):
    """Container creation options in the engine's native field names.

    Fields beyond the ones listed (``Labels``, ``WorkingDir``, ...) are kept
    and handed to the engine untouched.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    name: str
    image: str = Field(alias="Image")
    env: list[str] | None = Field(default=None, alias="Env")
    cmd: list[str] | str | None = Field(default=None, alias="Cmd")
    exposed_ports: dict[str, Any] | None = Field(default=None, alias="ExposedPorts")
    host_config: dict[str, Any] | None = Field(default=None, alias="HostConfig")

    def to_engine(self) -> dict[str, Any]:
        """Options as the engine spells them, without unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Images
# =============================================================================


class PullImagePayload(CommandPayload):
    image: str


class RemoveImagePayload(CommandPayload):
    id: str
    force: bool = False


class BuildOptions(CommandPayload):
    """Image build options; ``t`` is the tag applied to the result."""

    t: str
    dockerfile: str | None = None
    q: bool | None = None
    nocache: bool | None = None
    pull: bool | None = None
    rm: bool | None = None
    forcerm: bool | None = None


class BuildImagePayload(CommandPayload):
    context_path: str = Field(alias="contextPath")
    options: BuildOptions


# =============================================================================
# Volumes and networks
# =============================================================================


class VolumeNamePayload(CommandPayload):
    name: str


class CreateNetworkPayload(CommandPayload):
    name: str
    driver: str = "bridge"


class NetworkIdPayload(CommandPayload):
    id: str
