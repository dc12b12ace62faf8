"""Resource backend interface.

The router only depends on this protocol. Values returned by a backend are
passed to clients as-is, so implementations return the engine's native
shapes (plain dicts and lists).
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ResourceBackend(Protocol):
    """Container, image, volume, network and system operations.

    Every operation either returns a value or raises. Implementations must
    tolerate concurrent calls from several in-flight commands.
    """

    # Containers
    async def list_containers(self, all: bool = False) -> list[dict[str, Any]]: ...

    async def get_container(self, container_id: str) -> dict[str, Any]: ...

    async def start_container(self, container_id: str) -> None: ...

    async def stop_container(self, container_id: str) -> None: ...

    async def restart_container(self, container_id: str) -> None: ...

    async def remove_container(
        self, container_id: str, force: bool = False, remove_volumes: bool = False
    ) -> None: ...

    async def get_container_logs(self, container_id: str, tail: int = 100) -> str: ...

    async def create_container(self, options: dict[str, Any]) -> dict[str, Any]: ...

    # Images
    async def list_images(self) -> list[dict[str, Any]]: ...

    async def pull_image(self, image: str) -> None: ...

    async def remove_image(self, image_id: str, force: bool = False) -> None: ...

    async def build_image(self, context_path: str, options: dict[str, Any]) -> None: ...

    # Volumes
    async def list_volumes(self) -> list[dict[str, Any]]: ...

    async def create_volume(self, name: str) -> dict[str, Any]: ...

    async def remove_volume(self, name: str) -> None: ...

    # Networks
    async def list_networks(self) -> list[dict[str, Any]]: ...

    async def create_network(self, name: str, driver: str = "bridge") -> dict[str, Any]: ...

    async def remove_network(self, network_id: str) -> None: ...

    # System
    async def get_version(self) -> dict[str, Any]: ...

    async def get_info(self) -> dict[str, Any]: ...

    async def get_disk_usage(self) -> dict[str, Any]: ...
