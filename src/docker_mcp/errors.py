"""Exception types raised inside the server."""

from __future__ import annotations


class DockerMCPError(Exception):
    """Base class for errors raised by this package."""


class ProtocolError(DockerMCPError):
    """An inbound message could not be decoded as a command envelope."""


class BackendError(DockerMCPError):
    """The container engine reported a failure outside of an HTTP error.

    Streamed operations (pull, build) report failures as progress entries
    carrying an ``error`` field instead of a failed HTTP status.
    """
