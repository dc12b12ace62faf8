"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

RUNNING_CONTAINER = {
    "id": "container1",
    "names": ["/test-container"],
    "image": "test-image",
    "imageID": "sha256:1234567890",
    "command": "node index.js",
    "created": 1630000000,
    "ports": [],
    "labels": {},
    "state": "running",
    "status": "Up 2 hours",
    "networkSettings": {"networks": {}},
    "mounts": [],
}


class FakeBackend:
    """Resource backend stub with canned results.

    Records every call as ``(method, args)``. Set ``failures[method]`` to an
    exception to make that method raise, or ``delays[method]`` to a number
    of seconds to make it slow.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.failures: dict[str, BaseException] = {}
        self.delays: dict[str, float] = {}

    async def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if method in self.delays:
            await asyncio.sleep(self.delays[method])
        if method in self.failures:
            raise self.failures[method]

    def called(self, method: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    # Containers
    async def list_containers(self, all: bool = False) -> list[dict[str, Any]]:
        await self._record("list_containers", all)
        return [RUNNING_CONTAINER]

    async def get_container(self, container_id: str) -> dict[str, Any]:
        await self._record("get_container", container_id)
        return {"Id": container_id, "State": {"Status": "running"}}

    async def start_container(self, container_id: str) -> None:
        await self._record("start_container", container_id)

    async def stop_container(self, container_id: str) -> None:
        await self._record("stop_container", container_id)

    async def restart_container(self, container_id: str) -> None:
        await self._record("restart_container", container_id)

    async def remove_container(
        self, container_id: str, force: bool = False, remove_volumes: bool = False
    ) -> None:
        await self._record("remove_container", container_id, force, remove_volumes)

    async def get_container_logs(self, container_id: str, tail: int = 100) -> str:
        await self._record("get_container_logs", container_id, tail)
        return "line 1\nline 2\n"

    async def create_container(self, options: dict[str, Any]) -> dict[str, Any]:
        await self._record("create_container", options)
        return {"id": "new-container"}

    # Images
    async def list_images(self) -> list[dict[str, Any]]:
        await self._record("list_images")
        return [{"id": "image1", "repoTags": ["test-image:latest"]}]

    async def pull_image(self, image: str) -> None:
        await self._record("pull_image", image)

    async def remove_image(self, image_id: str, force: bool = False) -> None:
        await self._record("remove_image", image_id, force)

    async def build_image(self, context_path: str, options: dict[str, Any]) -> None:
        await self._record("build_image", context_path, options)

    # Volumes
    async def list_volumes(self) -> list[dict[str, Any]]:
        await self._record("list_volumes")
        return [{"name": "test-volume", "driver": "local"}]

    async def create_volume(self, name: str) -> dict[str, Any]:
        await self._record("create_volume", name)
        return {"Name": name, "Driver": "local"}

    async def remove_volume(self, name: str) -> None:
        await self._record("remove_volume", name)

    # Networks
    async def list_networks(self) -> list[dict[str, Any]]:
        await self._record("list_networks")
        return [{"name": "test-network", "id": "network1", "driver": "bridge"}]

    async def create_network(self, name: str, driver: str = "bridge") -> dict[str, Any]:
        await self._record("create_network", name, driver)
        return {"id": "network2"}

    async def remove_network(self, network_id: str) -> None:
        await self._record("remove_network", network_id)

    # System
    async def get_version(self) -> dict[str, Any]:
        await self._record("get_version")
        return {"Version": "20.10.8", "ApiVersion": "1.41"}

    async def get_info(self) -> dict[str, Any]:
        await self._record("get_info")
        return {"Containers": 1, "Images": 1}

    async def get_disk_usage(self) -> dict[str, Any]:
        await self._record("get_disk_usage")
        return {"LayersSize": 1000}


@pytest.fixture(scope="module")
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()
