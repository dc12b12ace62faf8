"""Command Router - maps commands to backend operations.

Each supported command is one entry in an immutable routing table: the
payload model that validates it, the result tag of its success response,
and the single backend call it makes.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import ValidationError

from . import payloads as p
from .commands import Command, CommandType
from .responses import Response, ResponseType

if TYPE_CHECKING:
    from ..backend import ResourceBackend

logger = logging.getLogger(__name__)


class ResponseSink(Protocol):
    """Anything a response can be sent to (normally a Session)."""

    async def send(self, response: Response) -> None: ...


Executor = Callable[["ResourceBackend", Any], Awaitable[Any]]


@dataclass(frozen=True)
class Route:
    """How one command is validated, executed and answered."""

    payload_model: type[p.CommandPayload]
    result: ResponseType
    execute: Executor


# =============================================================================
# Executors
#
# Each executor makes exactly one backend call and returns the success
# payload: the backend's value, or a small echo when the call returns nothing.
# =============================================================================


async def _list_containers(backend: ResourceBackend, payload: p.ListContainersPayload) -> Any:
    return await backend.list_containers(all=payload.all)


async def _get_container(backend: ResourceBackend, payload: p.ContainerIdPayload) -> Any:
    return await backend.get_container(payload.id)


async def _start_container(backend: ResourceBackend, payload: p.ContainerIdPayload) -> Any:
    await backend.start_container(payload.id)
    return {"id": payload.id}


async def _stop_container(backend: ResourceBackend, payload: p.ContainerIdPayload) -> Any:
    await backend.stop_container(payload.id)
    return {"id": payload.id}


async def _restart_container(backend: ResourceBackend, payload: p.ContainerIdPayload) -> Any:
    await backend.restart_container(payload.id)
    return {"id": payload.id}


async def _remove_container(backend: ResourceBackend, payload: p.RemoveContainerPayload) -> Any:
    await backend.remove_container(
        payload.id, force=payload.force, remove_volumes=payload.remove_volumes
    )
    return {"id": payload.id}


async def _get_container_logs(backend: ResourceBackend, payload: p.ContainerLogsPayload) -> Any:
    logs = await backend.get_container_logs(payload.id, tail=payload.tail)
    return {"id": payload.id, "logs": logs}


async def _create_container(backend: ResourceBackend, payload: p.CreateContainerOptions) -> Any:
    return await backend.create_container(payload.to_engine())


async def _list_images(backend: ResourceBackend, payload: p.EmptyPayload) -> Any:
    return await backend.list_images()


async def _pull_image(backend: ResourceBackend, payload: p.PullImagePayload) -> Any:
    await backend.pull_image(payload.image)
    return {"image": payload.image}


async def _remove_image(backend: ResourceBackend, payload: p.RemoveImagePayload) -> Any:
    await backend.remove_image(payload.id, force=payload.force)
    return {"id": payload.id}


async def _build_image(backend: ResourceBackend, payload: p.BuildImagePayload) -> Any:
    await backend.build_image(payload.context_path, payload.options.model_dump(exclude_none=True))
    return {"tag": payload.options.t}


async def _list_volumes(backend: ResourceBackend, payload: p.EmptyPayload) -> Any:
    return await backend.list_volumes()


async def _create_volume(backend: ResourceBackend, payload: p.VolumeNamePayload) -> Any:
    return await backend.create_volume(payload.name)


async def _remove_volume(backend: ResourceBackend, payload: p.VolumeNamePayload) -> Any:
    await backend.remove_volume(payload.name)
    return {"name": payload.name}


async def _list_networks(backend: ResourceBackend, payload: p.EmptyPayload) -> Any:
    return await backend.list_networks()


async def _create_network(backend: ResourceBackend, payload: p.CreateNetworkPayload) -> Any:
    return await backend.create_network(payload.name, driver=payload.driver)


async def _remove_network(backend: ResourceBackend, payload: p.NetworkIdPayload) -> Any:
    await backend.remove_network(payload.id)
    return {"id": payload.id}


async def _get_version(backend: ResourceBackend, payload: p.EmptyPayload) -> Any:
    return await backend.get_version()


async def _get_info(backend: ResourceBackend, payload: p.EmptyPayload) -> Any:
    return await backend.get_info()


async def _get_disk_usage(backend: ResourceBackend, payload: p.EmptyPayload) -> Any:
    return await backend.get_disk_usage()


ROUTES: MappingProxyType[str, Route] = MappingProxyType(
    {
        # Containers
        CommandType.LIST_CONTAINERS.value: Route(
            p.ListContainersPayload, ResponseType.CONTAINERS, _list_containers
        ),
        CommandType.GET_CONTAINER.value: Route(
            p.ContainerIdPayload, ResponseType.CONTAINER, _get_container
        ),
        CommandType.START_CONTAINER.value: Route(
            p.ContainerIdPayload, ResponseType.CONTAINER_STARTED, _start_container
        ),
        CommandType.STOP_CONTAINER.value: Route(
            p.ContainerIdPayload, ResponseType.CONTAINER_STOPPED, _stop_container
        ),
        CommandType.RESTART_CONTAINER.value: Route(
            p.ContainerIdPayload, ResponseType.CONTAINER_RESTARTED, _restart_container
        ),
        CommandType.REMOVE_CONTAINER.value: Route(
            p.RemoveContainerPayload, ResponseType.CONTAINER_REMOVED, _remove_container
        ),
        CommandType.GET_CONTAINER_LOGS.value: Route(
            p.ContainerLogsPayload, ResponseType.CONTAINER_LOGS, _get_container_logs
        ),
        CommandType.CREATE_CONTAINER.value: Route(
            p.CreateContainerOptions, ResponseType.CONTAINER_CREATED, _create_container
        ),
        # Images
        CommandType.LIST_IMAGES.value: Route(p.EmptyPayload, ResponseType.IMAGES, _list_images),
        CommandType.PULL_IMAGE.value: Route(
            p.PullImagePayload, ResponseType.IMAGE_PULLED, _pull_image
        ),
        CommandType.REMOVE_IMAGE.value: Route(
            p.RemoveImagePayload, ResponseType.IMAGE_REMOVED, _remove_image
        ),
        CommandType.BUILD_IMAGE.value: Route(
            p.BuildImagePayload, ResponseType.IMAGE_BUILT, _build_image
        ),
        # Volumes
        CommandType.LIST_VOLUMES.value: Route(p.EmptyPayload, ResponseType.VOLUMES, _list_volumes),
        CommandType.CREATE_VOLUME.value: Route(
            p.VolumeNamePayload, ResponseType.VOLUME_CREATED, _create_volume
        ),
        CommandType.REMOVE_VOLUME.value: Route(
            p.VolumeNamePayload, ResponseType.VOLUME_REMOVED, _remove_volume
        ),
        # Networks
        CommandType.LIST_NETWORKS.value: Route(
            p.EmptyPayload, ResponseType.NETWORKS, _list_networks
        ),
        CommandType.CREATE_NETWORK.value: Route(
            p.CreateNetworkPayload, ResponseType.NETWORK_CREATED, _create_network
        ),
        CommandType.REMOVE_NETWORK.value: Route(
            p.NetworkIdPayload, ResponseType.NETWORK_REMOVED, _remove_network
        ),
        # System
        CommandType.GET_VERSION.value: Route(p.EmptyPayload, ResponseType.VERSION, _get_version),
        CommandType.GET_INFO.value: Route(p.EmptyPayload, ResponseType.INFO, _get_info),
        CommandType.GET_DISK_USAGE.value: Route(
            p.EmptyPayload, ResponseType.DISK_USAGE, _get_disk_usage
        ),
    }
)


class CommandRouter:
    """Routes commands to the resource backend and answers them.

    Usage:
        router = CommandRouter(DockerBackend())
        await router.dispatch(session, command)

    Every dispatched command produces exactly one response on the given
    sink. Unknown commands, invalid payloads and backend failures all
    become error responses; nothing is raised and nothing is retried.
    """

    def __init__(self, backend: ResourceBackend) -> None:
        self._backend = backend

    @property
    def backend(self) -> ResourceBackend:
        return self._backend

    @staticmethod
    def supported_commands() -> list[str]:
        return list(ROUTES)

    async def execute(self, command: Command) -> Response:
        """Run a command and build its response without sending it."""
        route = ROUTES.get(command.type)
        if route is None:
            return Response.unknown_command(command.type)

        try:
            payload = route.payload_model.model_validate(command.payload)
        except ValidationError as e:
            logger.warning(f"Invalid payload for {command.type}: {e}")
            return Response.execution_failed(command.type, e)

        try:
            result = await route.execute(self._backend, payload)
        except Exception as e:
            logger.exception(f"Error handling command {command.type}: {e}")
            return Response.execution_failed(command.type, e)

        return Response.create(route.result, result)

    async def dispatch(self, sink: ResponseSink, command: Command) -> None:
        """Execute a command and send its response to the sink."""
        logger.info(f"Received command: {command.type}")
        response = await self.execute(command)
        try:
            await sink.send(response)
        except (TypeError, ValueError) as e:
            logger.exception(f"Cannot serialize {response.type} response for {command.type}: {e}")
            await sink.send(Response.execution_failed(command.type, e))
