"""
Publisher Protocol

The only thing the emitter needs from a transport. RedisPublisher satisfies
it; tests and alternative transports can pass any object with a matching
publish() coroutine.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ChannelPublisher(Protocol):
    """Publishes opaque payload bytes to a named pub/sub channel."""

    async def publish(self, channel: str, payload: bytes) -> int:
        """
        Deliver *payload* unchanged to every current subscriber of *channel*.

        Returns the number of subscribers that received it.
        """
        ...
