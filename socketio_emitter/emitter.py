"""
Socket.IO Emitter

Broadcasts events to every Socket.IO server attached to the same Redis
through the Redis adapter, without holding any client connections itself.

Targeting is built with an immutable chain: every modifier returns a new
EmitIntent, and only the final emit() touches the emitter. Two coroutines
building chains on the same emitter can never see each other's rooms or
flags, and nothing has to be reset after an emit.

Usage:
    emitter = await open_emitter(EmitterOptions(host="localhost", port=6379))

    await emitter.emit("news", {"headline": "hello"})
    await emitter.to("lobby").to("vip").volatile().emit("chat", "hi")
    await emitter.of("/admin").emit_binary("blob", b"\x01\x02")

    admin = emitter.of("/admin")          # intents can be kept and reused
    await admin.emit("tick", 1)
    await admin.emit("tick", 2)

    await emitter.close()
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from .binary import has_binary
from .channels import DEFAULT_NAMESPACE, DEFAULT_PREFIX, build_channel
from .config import EmitterOptions, load_options
from .interface import ChannelPublisher
from .publisher import RedisPublisher
from .serializer import BINARY_EVENT, EVENT, encode_envelope

logger = logging.getLogger(__name__)

JOIN = "join"
VOLATILE = "volatile"
BROADCAST = "broadcast"


@dataclass(frozen=True)
class EmitIntent:
    """
    Rooms, flags and namespace override for one emit, plus the emitter to
    send through. Modifiers return a copy; the instance itself never changes.
    """
    emitter: Emitter = field(repr=False, compare=False)
    rooms: tuple[str, ...] = ()
    flags: tuple[str, ...] = ()
    namespace: str | None = None

    # ── Modifiers ─────────────────────────────────────────────────────────────

    def _with_flag(self, flag: str) -> EmitIntent:
        if flag in self.flags:
            return self
        return replace(self, flags=self.flags + (flag,))

    def join(self) -> EmitIntent:
        return self._with_flag(JOIN)

    def volatile(self) -> EmitIntent:
        """Subscribers may drop the message under load."""
        return self._with_flag(VOLATILE)

    def broadcast(self) -> EmitIntent:
        return self._with_flag(BROADCAST)

    def in_(self, room: str) -> EmitIntent:
        """Limit emission to *room*. Targeting a room twice is a no-op."""
        if room in self.rooms:
            return self
        return replace(self, rooms=self.rooms + (room,))

    def to(self, room: str) -> EmitIntent:
        return self.in_(room)

    def of(self, namespace: str) -> EmitIntent:
        """Limit emission to *namespace*; the packet carries it as "nsp"."""
        return replace(self, namespace=namespace)

    # ── Envelope parts ────────────────────────────────────────────────────────

    def options(self) -> dict[str, Any]:
        """A fresh options mapping; callers may mutate it freely."""
        return {
            "rooms": list(self.rooms),
            "flags": {flag: True for flag in self.flags},
        }

    # ── Emit ──────────────────────────────────────────────────────────────────

    async def emit(self, event: str, *args: Any) -> int:
        """
        Emit *event* with *args*, as a binary event if any argument holds bytes.

        Returns the number of subscribers Redis reported.
        """
        packet_type = BINARY_EVENT if has_binary(args) else EVENT
        return await self.emitter._send(self, packet_type, event, args)

    async def emit_binary(self, event: str, *args: Any) -> int:
        """Emit *event* as a binary event without scanning the arguments."""
        return await self.emitter._send(self, BINARY_EVENT, event, args)


class Emitter:
    """
    Publishes Socket.IO packets on the channel family named by *prefix*.

    Args:
        publisher: Anything satisfying ChannelPublisher.
        prefix:    Channel prefix shared with the Socket.IO servers' adapter.
        owns_publisher: close() also closes the publisher.
    """

    def __init__(
        self,
        publisher: ChannelPublisher,
        prefix: str = DEFAULT_PREFIX,
        owns_publisher: bool = False,
    ) -> None:
        self._publisher = publisher
        self._prefix = prefix
        self._owns_publisher = owns_publisher
        self.last_channel: str | None = None
        self.last_type: int | None = None

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def channel(self) -> str:
        """Channel for an emit with no rooms in the default namespace."""
        return build_channel(self._prefix, DEFAULT_NAMESPACE)

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    async def close(self) -> None:
        """Release the publisher if this emitter opened it."""
        if self._owns_publisher:
            await self._publisher.close()

    async def __aenter__(self) -> Emitter:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    # ── Chain entry points ────────────────────────────────────────────────────

    def intent(self) -> EmitIntent:
        """An empty intent: default namespace, no rooms, no flags."""
        return EmitIntent(self)

    def join(self) -> EmitIntent:
        return self.intent().join()

    def volatile(self) -> EmitIntent:
        return self.intent().volatile()

    def broadcast(self) -> EmitIntent:
        return self.intent().broadcast()

    def in_(self, room: str) -> EmitIntent:
        return self.intent().in_(room)

    def to(self, room: str) -> EmitIntent:
        return self.intent().to(room)

    def of(self, namespace: str) -> EmitIntent:
        return self.intent().of(namespace)

    async def emit(self, event: str, *args: Any) -> int:
        return await self.intent().emit(event, *args)

    async def emit_binary(self, event: str, *args: Any) -> int:
        return await self.intent().emit_binary(event, *args)

    # ── Publish ───────────────────────────────────────────────────────────────

    async def _send(
        self,
        intent: EmitIntent,
        packet_type: int,
        event: str,
        args: tuple[Any, ...],
    ) -> int:
        """
        Build the channel and envelope for *intent* and publish it.

        Raises:
            TypeError: If event is not a string.
            SerializationError: If an argument cannot be encoded; nothing is published.
            PublisherError: If the publisher fails.
        """
        if not isinstance(event, str):
            raise TypeError(f"event name must be a str, got {type(event).__name__}")

        namespace = intent.namespace if intent.namespace is not None else DEFAULT_NAMESPACE
        channel = build_channel(self._prefix, namespace, intent.rooms)

        packet: dict[str, Any] = {"type": packet_type, "data": [event, *args]}
        if intent.namespace is not None:
            packet["nsp"] = intent.namespace

        payload = encode_envelope(packet, intent.options())

        self.last_channel = channel
        self.last_type = packet_type

        deliveries = await self._publisher.publish(channel, payload)
        logger.debug(
            "Emitted '%s' (type %d) on '%s' to %d room(s), reached %d subscriber(s)",
            event,
            packet_type,
            channel,
            len(intent.rooms),
            deliveries,
        )
        return deliveries


async def open_emitter(options: EmitterOptions | None = None) -> Emitter:
    """
    Connect to Redis and return an Emitter that owns the connection.

    Options default to load_options() (environment).

    Raises:
        PublisherError: If Redis cannot be reached; no emitter is created.
    """
    if options is None:
        options = load_options()
    publisher = RedisPublisher(options.redis_url)
    await publisher.connect()
    return Emitter(publisher, prefix=options.prefix, owns_publisher=True)
