"""Docker Engine backend.

Runs the Docker SDK's low-level ``APIClient`` calls in worker threads so the
event loop is never blocked. Results are the engine's native JSON shapes.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

import docker
from docker import APIClient

from ..errors import BackendError

logger = logging.getLogger(__name__)

# Build options accepted on the wire, mapped to APIClient.build() arguments
BUILD_OPTION_NAMES = {
    "t": "tag",
    "dockerfile": "dockerfile",
    "q": "quiet",
    "nocache": "nocache",
    "pull": "pull",
    "rm": "rm",
    "forcerm": "forcerm",
}


def consume_progress(stream: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Drain a decoded progress stream, raising on the first error entry.

    Pull and build report failures inside the stream rather than through
    the HTTP status, so the whole stream has to be read to know the outcome.
    """
    output = []
    for entry in stream:
        if isinstance(entry, dict) and entry.get("error"):
            detail = entry.get("errorDetail") or {}
            raise BackendError(detail.get("message") or entry["error"])
        output.append(entry)
    return output


def _client_from_env() -> APIClient:
    return docker.from_env().api


class DockerBackend:
    """Resource backend backed by a Docker Engine.

    Usage:
        backend = DockerBackend()  # uses DOCKER_HOST etc. from the environment
        containers = await backend.list_containers(all=True)
    """

    def __init__(self, client: APIClient | None = None) -> None:
        """Initialize backend.

        Args:
            client: Low-level API client. Created from the environment on
                first use when omitted.
        """
        self._client = client
        self._client_lock = asyncio.Lock()

    async def get_client(self) -> APIClient:
        """Return the API client, creating it on first use.

        ``docker.from_env()`` asks the engine for its API version, so it
        runs in a worker thread. Concurrent first calls share one client.
        """
        if self._client is None:
            async with self._client_lock:
                if self._client is None:
                    self._client = await asyncio.to_thread(_client_from_env)
                    logger.info(f"Connected to Docker Engine at {self._client.base_url}")
        return self._client

    async def _call(self, method: str, *args: Any, **kwargs: Any) -> Any:
        client = await self.get_client()
        return await asyncio.to_thread(getattr(client, method), *args, **kwargs)

    async def _drain(self, method: str, *args: Any, **kwargs: Any) -> list[dict[str, Any]]:
        client = await self.get_client()

        def _consume() -> list[dict[str, Any]]:
            return consume_progress(getattr(client, method)(*args, **kwargs))

        return await asyncio.to_thread(_consume)

    async def close(self) -> None:
        if self._client is not None:
            await asyncio.to_thread(self._client.close)

    # =========================================================================
    # Containers
    # =========================================================================

    async def list_containers(self, all: bool = False) -> list[dict[str, Any]]:
        return await self._call("containers", all=all)

    async def get_container(self, container_id: str) -> dict[str, Any]:
        return await self._call("inspect_container", container_id)

    async def start_container(self, container_id: str) -> None:
        await self._call("start", container_id)

    async def stop_container(self, container_id: str) -> None:
        await self._call("stop", container_id)

    async def restart_container(self, container_id: str) -> None:
        await self._call("restart", container_id)

    async def remove_container(
        self, container_id: str, force: bool = False, remove_volumes: bool = False
    ) -> None:
        await self._call("remove_container", container_id, v=remove_volumes, force=force)

    async def get_container_logs(self, container_id: str, tail: int = 100) -> str:
        logs = await self._call("logs", container_id, stdout=True, stderr=True, tail=tail)
        if isinstance(logs, bytes):
            return logs.decode("utf-8", errors="replace")
        return str(logs)

    async def create_container(self, options: dict[str, Any]) -> dict[str, Any]:
        """Create a container from engine-native options.

        ``name`` is passed as the query parameter; everything else forms the
        request body.
        """
        config = dict(options)
        name = config.pop("name", None)
        result = await self._call("create_container_from_config", config, name)
        return {"id": result["Id"]}

    # =========================================================================
    # Images
    # =========================================================================

    async def list_images(self) -> list[dict[str, Any]]:
        return await self._call("images")

    async def pull_image(self, image: str) -> None:
        output = await self._drain("pull", image, stream=True, decode=True)
        logger.debug(f"Pulled {image} ({len(output)} progress entries)")

    async def remove_image(self, image_id: str, force: bool = False) -> None:
        await self._call("remove_image", image_id, force=force)

    async def build_image(self, context_path: str, options: dict[str, Any]) -> None:
        kwargs = {
            BUILD_OPTION_NAMES[key]: value
            for key, value in options.items()
            if key in BUILD_OPTION_NAMES and value is not None
        }
        output = await self._drain("build", path=context_path, decode=True, **kwargs)
        logger.debug(f"Built {kwargs.get('tag')} from {context_path} ({len(output)} entries)")

    # =========================================================================
    # Volumes
    # =========================================================================

    async def list_volumes(self) -> list[dict[str, Any]]:
        result = await self._call("volumes")
        return result.get("Volumes") or []

    async def create_volume(self, name: str) -> dict[str, Any]:
        return await self._call("create_volume", name=name)

    async def remove_volume(self, name: str) -> None:
        await self._call("remove_volume", name)

    # =========================================================================
    # Networks
    # =========================================================================

    async def list_networks(self) -> list[dict[str, Any]]:
        return await self._call("networks")

    async def create_network(self, name: str, driver: str = "bridge") -> dict[str, Any]:
        result = await self._call("create_network", name, driver=driver)
        return {"id": result["Id"]}

    async def remove_network(self, network_id: str) -> None:
        await self._call("remove_network", network_id)

    # =========================================================================
    # System
    # =========================================================================

    async def get_version(self) -> dict[str, Any]:
        return await self._call("version")

    async def get_info(self) -> dict[str, Any]:
        return await self._call("info")

    async def get_disk_usage(self) -> dict[str, Any]:
        return await self._call("df")
