"""Docker MCP CLI.

Usage:
    docker-mcp                                   # Serve on DOCKER_MCP_PORT (default 9999)
    docker-mcp --port 8080                       # Serve on a custom port
    docker-mcp call listContainers -p '{"all": true}'
    docker-mcp health                            # Check a running server
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

import click
import httpx

from . import __version__
from .config import LOG_LEVELS, ServerConfig, configure_logging


@click.group(invoke_without_command=True)
@click.option("--host", default=None, help="Host to bind to [env: DOCKER_MCP_HOST]")
@click.option("--port", default=None, type=int, help="Port to bind to [env: DOCKER_MCP_PORT]")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Log level [env: DOCKER_MCP_LOG_LEVEL]",
)
@click.version_option(version=__version__, prog_name="docker-mcp")
@click.pass_context
def main(ctx: click.Context, host: str | None, port: int | None, log_level: str | None) -> None:
    """Docker MCP - container lifecycle commands over WebSocket.

    With no subcommand, runs the server.
    """
    if ctx.invoked_subcommand is not None:
        return

    env = ServerConfig.from_env()
    config = ServerConfig(
        host=host or env.host,
        port=port or env.port,
        log_level=(log_level or env.log_level).upper(),
    )
    _run_server(config)


def _run_server(config: ServerConfig) -> None:
    """Run the WebSocket server until interrupted."""
    import uvicorn

    configure_logging(config.log_level)
    click.echo(f"Starting Docker MCP on ws://{config.host}:{config.port}", err=True)
    click.echo("Press Ctrl+C to stop", err=True)

    uvicorn.run(
        "docker_mcp.app:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


@main.command()
@click.argument("command_type")
@click.option("--payload", "-p", default="{}", help="Command payload as a JSON object")
@click.option("--url", default="ws://localhost:9999", help="Server WebSocket URL")
def call(command_type: str, payload: str, url: str) -> None:
    """Send one command to a running server and print the response."""
    try:
        params = json.loads(payload)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON: {e}", param_hint="--payload") from e
    if not isinstance(params, dict):
        raise click.BadParameter("Payload must be a JSON object", param_hint="--payload")

    try:
        response = asyncio.run(_call(url, command_type, params))
    except OSError as e:
        click.echo(f"Cannot connect to {url}: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(response, indent=2))
    if response.get("type") == "error":
        sys.exit(1)


async def _call(url: str, command_type: str, payload: dict[str, Any]) -> dict[str, Any]:
    from .client import DockerMCPClient

    async with DockerMCPClient(url) as client:
        return await client.call(command_type, payload)


@main.command()
@click.option("--url", default="http://localhost:9999", help="Server base URL")
def health(url: str) -> None:
    """Check the health of a running server."""
    try:
        response = httpx.get(f"{url}/health", timeout=5.0)
        response.raise_for_status()
    except httpx.HTTPError as e:
        click.echo(f"Unhealthy: {e}", err=True)
        sys.exit(1)

    data = response.json()
    click.echo(f"Status: {data.get('status')} ({data.get('connections', 0)} connections)")


if __name__ == "__main__":
    main()
