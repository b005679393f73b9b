"""
socketio_emitter — Publish Socket.IO events through the Redis adapter.

Public API:
    Emitter            — builds channels and envelopes, publishes them
    EmitIntent         — immutable rooms/flags/namespace chain for one emit
    open_emitter       — connect to Redis and return an owning Emitter
    EmitterOptions     — host/port/addr/protocol/key connection options
    RedisPublisher     — publish raw bytes to Redis channels
    EnvelopeSubscriber — pull decoded envelopes from emitter channels
    has_binary         — does a value tree contain a byte buffer?
    build_channel      — prefix#namespace#[room#] channel names
"""
from .binary import has_binary
from .channels import build_channel, subscription_pattern
from .config import ConfigurationError, EmitterOptions, load_options
from .emitter import EmitIntent, Emitter, open_emitter
from .interface import ChannelPublisher
from .publisher import PublisherError, RedisPublisher
from .serializer import (
    BINARY_EVENT,
    EVENT,
    SerializationError,
    decode_envelope,
    encode_envelope,
)
from .subscriber import EnvelopeSubscriber, SubscriberError

__all__ = [
    "BINARY_EVENT",
    "EVENT",
    "ChannelPublisher",
    "ConfigurationError",
    "EmitIntent",
    "Emitter",
    "EmitterOptions",
    "EnvelopeSubscriber",
    "PublisherError",
    "RedisPublisher",
    "SerializationError",
    "SubscriberError",
    "build_channel",
    "decode_envelope",
    "encode_envelope",
    "has_binary",
    "load_options",
    "open_emitter",
    "subscription_pattern",
]
