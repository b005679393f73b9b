"""
Redis Publisher

Redis implementation of the ChannelPublisher protocol. Publishes already
encoded envelope bytes to one channel. It knows nothing about packets,
rooms or namespaces.

Usage:
    publisher = RedisPublisher(redis_url="redis://localhost:6379/0")
    await publisher.connect()

    await publisher.publish("socket.io#/#", payload)

    await publisher.close()

Context manager usage:
    async with RedisPublisher(redis_url=...) as pub:
        await pub.publish("socket.io#/#lobby#", payload)
"""
from __future__ import annotations

import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class PublisherError(Exception):
    """Raised when a publish operation fails."""


class RedisPublisher:
    """
    Publishes raw bytes to Redis pub/sub channels.

    The payload is handed to Redis untouched; decode_responses stays off so
    binary envelopes survive the round trip.
    """

    def __init__(self, redis_url: str) -> None:
        self._redis_url = redis_url
        self._redis: Redis | None = None

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    async def connect(self) -> None:
        """Open the Redis connection."""
        self._redis = Redis.from_url(self._redis_url, decode_responses=False)
        try:
            await self._redis.ping()
            logger.info("RedisPublisher connected to Redis at %s", self._redis_url)
        except RedisError as exc:
            await self._redis.aclose()
            self._redis = None
            raise PublisherError(f"Cannot connect to Redis: {exc}") from exc

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            logger.info("RedisPublisher disconnected from Redis")

    async def __aenter__(self) -> RedisPublisher:
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    @property
    def connected(self) -> bool:
        return self._redis is not None

    # ── Publish ───────────────────────────────────────────────────────────────

    async def publish(self, channel: str, payload: bytes) -> int:
        """
        Publish payload bytes to a single channel.

        Args:
            channel: The Redis channel name.
            payload: Encoded envelope, sent as-is.

        Returns:
            Number of subscribers that received the message.

        Raises:
            PublisherError: If not connected or Redis returns an error.
        """
        if self._redis is None:
            raise PublisherError("RedisPublisher is not connected — call connect() first")

        try:
            deliveries: int = await self._redis.publish(channel, payload)
        except RedisError as exc:
            raise PublisherError(f"Redis publish failed on channel '{channel}'") from exc

        logger.debug(
            "Published %d byte(s) to '%s', reached %d subscriber(s)",
            len(payload),
            channel,
            deliveries,
        )
        return deliveries
