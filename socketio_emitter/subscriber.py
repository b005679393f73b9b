"""
Envelope Subscriber

Listens on emitter channels (or channel patterns) and hands back decoded
envelopes, i.e. what a Socket.IO Redis adapter would receive. Nothing is
relayed to clients.

    async with EnvelopeSubscriber([subscription_pattern()], redis_url, pattern=True) as sub:
        channel, packet, options = await sub.pull(timeout=1.0)
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from redis.asyncio import Redis
from redis.asyncio.client import PubSub
from redis.exceptions import RedisError

from .serializer import decode_envelope

logger = logging.getLogger(__name__)

_DATA_MESSAGE_TYPES = ("message", "pmessage")
_POLL_INTERVAL = 0.1


class SubscriberError(Exception):
    """Raised when a subscriber operation fails."""


class EnvelopeSubscriber:
    """
    Args:
        channels:  Channel names, or glob patterns when pattern=True.
        redis_url: Redis connection URL.
        pattern:   Use PSUBSCRIBE instead of SUBSCRIBE.
    """

    def __init__(self, channels: list[str], redis_url: str, pattern: bool = False) -> None:
        if not channels:
            raise ValueError("channels must be a non-empty list of channel names")
        self._channels = list(channels)
        self._redis_url = redis_url
        self._pattern = pattern
        self._redis: Redis | None = None
        self._pubsub: PubSub | None = None

    async def connect(self) -> None:
        """Open the Redis connection and subscribe."""
        self._redis = Redis.from_url(self._redis_url, decode_responses=False)
        try:
            await self._redis.ping()
        except RedisError as exc:
            await self._redis.aclose()
            self._redis = None
            raise SubscriberError(f"Cannot connect to Redis: {exc}") from exc

        self._pubsub = self._redis.pubsub(ignore_subscribe_messages=True)
        subscribe = self._pubsub.psubscribe if self._pattern else self._pubsub.subscribe
        await subscribe(*self._channels)
        logger.info("EnvelopeSubscriber listening on %s", self._channels)

    async def close(self) -> None:
        """Unsubscribe and close the Redis connection."""
        if self._pubsub is not None:
            unsubscribe = self._pubsub.punsubscribe if self._pattern else self._pubsub.unsubscribe
            await unsubscribe()
            await self._pubsub.aclose()
            self._pubsub = None
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None

    async def __aenter__(self) -> EnvelopeSubscriber:
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def pull(
        self,
        timeout: float | None = None,
    ) -> tuple[str, dict[str, Any], dict[str, Any]] | None:
        """
        Wait for the next envelope and return (channel, packet, options).

        Returns None once *timeout* seconds pass without one; blocks forever
        when timeout is None. Raises SubscriberError on Redis failures and
        SerializationError for payloads that are not envelopes.
        """
        if self._pubsub is None:
            raise SubscriberError("EnvelopeSubscriber is not connected — call connect() first")

        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout

        while deadline is None or loop.time() < deadline:
            poll = _POLL_INTERVAL if deadline is None else min(deadline - loop.time(), _POLL_INTERVAL)
            try:
                message = await self._pubsub.get_message(
                    ignore_subscribe_messages=True,
                    timeout=max(poll, 0.0),
                )
            except RedisError as exc:
                raise SubscriberError(f"Redis error while waiting for message: {exc}") from exc

            if message is None or message.get("type") not in _DATA_MESSAGE_TYPES:
                await asyncio.sleep(0)
                continue
            if message.get("data") is None:
                continue

            channel = message.get("channel")
            if isinstance(channel, bytes):
                channel = channel.decode("utf-8")
            packet, options = decode_envelope(message["data"])
            return channel, packet, options

        return None
