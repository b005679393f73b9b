"""
Emitter Configuration

Connection options for the Redis instance the Socket.IO servers share.
All environment variables are read here. No os.getenv() calls elsewhere.

Environment:
  SOCKETIO_EMITTER_ADDR      host:port (or socket path); wins over HOST/PORT
  SOCKETIO_EMITTER_HOST      e.g. localhost
  SOCKETIO_EMITTER_PORT      e.g. 6379
  SOCKETIO_EMITTER_PROTOCOL  tcp (default), tcp4, tcp6 or unix
  SOCKETIO_EMITTER_KEY       channel prefix, default socket.io
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from .channels import DEFAULT_PREFIX

DEFAULT_ADDRESS = "localhost:6379"

_URL_SCHEMES = {
    "tcp": "redis",
    "tcp4": "redis",
    "tcp6": "redis",
    "unix": "unix",
}


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""


def _optional_env(name: str, default: str = "") -> str:
    """Get an optional environment variable with a default."""
    return os.environ.get(name, default)


def _optional_env_int(name: str, default: int) -> int:
    """Get an optional integer environment variable with a default."""
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Invalid integer value for {name}: {value}")


@dataclass(frozen=True)
class EmitterOptions:
    """
    How to reach Redis and which channel family to publish on.

    An explicit addr wins over host + port; with neither, localhost:6379.
    """
    host: str = ""
    port: int = 0
    key: str = ""
    protocol: str = "tcp"
    addr: str = ""

    def __post_init__(self) -> None:
        if (self.protocol or "tcp") not in _URL_SCHEMES:
            raise ConfigurationError(
                f"Unsupported protocol '{self.protocol}' — expected one of {sorted(_URL_SCHEMES)}"
            )

    @property
    def address(self) -> str:
        if self.addr:
            return self.addr
        if self.host and self.port > 0:
            return f"{self.host}:{self.port}"
        return DEFAULT_ADDRESS

    @property
    def prefix(self) -> str:
        return self.key or DEFAULT_PREFIX

    @property
    def redis_url(self) -> str:
        """Get the redis-py connection URL for this address and protocol."""
        scheme = _URL_SCHEMES[self.protocol or "tcp"]
        return f"{scheme}://{self.address}"


def load_options() -> EmitterOptions:
    """Load emitter options from environment variables."""
    return EmitterOptions(
        host=_optional_env("SOCKETIO_EMITTER_HOST"),
        port=_optional_env_int("SOCKETIO_EMITTER_PORT", 0),
        key=_optional_env("SOCKETIO_EMITTER_KEY"),
        protocol=_optional_env("SOCKETIO_EMITTER_PROTOCOL", "tcp"),
        addr=_optional_env("SOCKETIO_EMITTER_ADDR"),
    )
