"""Resource backends the command router executes against."""

from .base import ResourceBackend
from .docker_engine import DockerBackend

__all__ = [
    "DockerBackend",
    "ResourceBackend",
]
