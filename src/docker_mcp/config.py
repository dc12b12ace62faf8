"""Process configuration from environment variables."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_PORT = 9999
DEFAULT_HOST = "0.0.0.0"
DEFAULT_LOG_LEVEL = "INFO"

PORT_ENV = "DOCKER_MCP_PORT"
HOST_ENV = "DOCKER_MCP_HOST"
LOG_LEVEL_ENV = "DOCKER_MCP_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_port(value: str | int | None, default: int = DEFAULT_PORT) -> int:
    """Parse a port number, falling back to the default when unusable."""
    if value is None:
        return default
    try:
        port = int(str(value).strip())
    except ValueError:
        return default
    if not 0 < port < 65536:
        return default
    return port


def parse_log_level(value: str | None, default: str = DEFAULT_LOG_LEVEL) -> str:
    if not value:
        return default
    level = value.strip().upper()
    return level if level in LOG_LEVELS else default


@dataclass(frozen=True)
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServerConfig:
        """Build configuration from the environment.

        Args:
            environ: Mapping to read from (default: ``os.environ``)
        """
        env = os.environ if environ is None else environ
        return cls(
            host=env.get(HOST_ENV) or DEFAULT_HOST,
            port=parse_port(env.get(PORT_ENV)),
            log_level=parse_log_level(env.get(LOG_LEVEL_ENV)),
        )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure logging to stderr."""
    logging.basicConfig(
        level=getattr(logging, parse_log_level(level)),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
