"""Unit tests for the CLI."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
from click.testing import CliRunner

from docker_mcp import cli
from docker_mcp.config import ServerConfig


class TestServe:
    def test_defaults_from_environment(self, monkeypatch):
        monkeypatch.setenv("DOCKER_MCP_PORT", "not-a-port")
        monkeypatch.delenv("DOCKER_MCP_HOST", raising=False)
        monkeypatch.delenv("DOCKER_MCP_LOG_LEVEL", raising=False)

        with patch.object(cli, "_run_server") as run_server:
            result = CliRunner().invoke(cli.main, [])

        assert result.exit_code == 0
        run_server.assert_called_once_with(ServerConfig(host="0.0.0.0", port=9999, log_level="INFO"))

    def test_options_override_environment(self, monkeypatch):
        monkeypatch.setenv("DOCKER_MCP_PORT", "7000")

        with patch.object(cli, "_run_server") as run_server:
            result = CliRunner().invoke(
                cli.main, ["--host", "127.0.0.1", "--port", "8000", "--log-level", "debug"]
            )

        assert result.exit_code == 0
        run_server.assert_called_once_with(
            ServerConfig(host="127.0.0.1", port=8000, log_level="DEBUG")
        )

    def test_runs_uvicorn_app_factory(self):
        with patch("uvicorn.run") as run, patch.object(cli, "configure_logging"):
            cli._run_server(ServerConfig(port=9100))

        run.assert_called_once_with(
            "docker_mcp.app:create_app",
            factory=True,
            host="0.0.0.0",
            port=9100,
            log_level="info",
        )


class TestCall:
    def test_prints_response(self):
        response = {"type": "volumes", "payload": []}

        with patch.object(cli, "_call", AsyncMock(return_value=response)) as call:
            result = CliRunner().invoke(cli.main, ["call", "listVolumes"])

        assert result.exit_code == 0
        assert json.loads(result.output) == response
        call.assert_called_once_with("ws://localhost:9999", "listVolumes", {})

    def test_error_response_exits_non_zero(self):
        response = {"type": "error", "payload": {"message": "Unknown command: nope"}}

        with patch.object(cli, "_call", AsyncMock(return_value=response)):
            result = CliRunner().invoke(cli.main, ["call", "nope"])

        assert result.exit_code == 1

    def test_invalid_payload(self):
        result = CliRunner().invoke(cli.main, ["call", "getContainer", "-p", "{bad"])

        assert result.exit_code == 2
        assert "Invalid JSON" in result.output

    def test_payload_must_be_object(self):
        result = CliRunner().invoke(cli.main, ["call", "getContainer", "-p", "[1]"])

        assert result.exit_code == 2

    def test_connection_refused(self):
        with patch.object(cli, "_call", AsyncMock(side_effect=ConnectionRefusedError("refused"))):
            result = CliRunner().invoke(cli.main, ["call", "getInfo"])

        assert result.exit_code == 1


class TestHealth:
    def test_healthy(self):
        response = MagicMock()
        response.json.return_value = {"status": "ok", "connections": 2}

        with patch.object(cli.httpx, "get", return_value=response) as get:
            result = CliRunner().invoke(cli.main, ["health"])

        assert result.exit_code == 0
        assert "ok (2 connections)" in result.output
        get.assert_called_once_with("http://localhost:9999/health", timeout=5.0)

    def test_unreachable(self):
        with patch.object(cli.httpx, "get", side_effect=httpx.ConnectError("refused")):
            result = CliRunner().invoke(cli.main, ["health"])

        assert result.exit_code == 1
