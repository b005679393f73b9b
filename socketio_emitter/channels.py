"""
Channel Definitions

Builds the Redis channel names Socket.IO adapters subscribe to.

Channel naming scheme:
  {prefix}#{namespace}#           — whole namespace, e.g. socket.io#/#
  {prefix}#{namespace}#{room}#    — exactly one room, e.g. socket.io#/#lobby#

With two or more rooms the channel falls back to the namespace form and the
rooms travel in the envelope's options for the subscriber to filter on.
"""
from __future__ import annotations

from collections.abc import Sequence

DELIMITER = "#"

DEFAULT_PREFIX = "socket.io"
DEFAULT_NAMESPACE = "/"


def build_channel(prefix: str, namespace: str, rooms: Sequence[str] = ()) -> str:
    """
    Return the channel an emit targeting *rooms* in *namespace* is published on.

    Every segment is followed by the delimiter, including the last one.
    """
    channel = f"{prefix}{DELIMITER}{namespace}{DELIMITER}"
    if len(rooms) == 1:
        channel = f"{channel}{rooms[0]}{DELIMITER}"
    return channel


_GLOB_SPECIAL = frozenset("*?[]\\")


def _escape_glob(text: str) -> str:
    return "".join(f"\\{char}" if char in _GLOB_SPECIAL else char for char in text)


def subscription_pattern(prefix: str = DEFAULT_PREFIX, namespace: str = DEFAULT_NAMESPACE) -> str:
    """
    Glob pattern matching the namespace channel and all of its room channels.

    Glob metacharacters in *prefix* and *namespace* are escaped, so they only
    ever match themselves.
    """
    return f"{_escape_glob(prefix)}{DELIMITER}{_escape_glob(namespace)}{DELIMITER}*"
