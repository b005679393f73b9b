"""
Envelope Serializer

Converts between the emit envelope and the msgpack bytes stored in Redis.
Strings are packed as msgpack str and byte buffers as msgpack bin, so
subscribers in any language can tell text and binary arguments apart.

Wire format (envelope):
  [
    {"type": 2, "data": ["event", ...args], "nsp": "/admin"},   # packet
    {"rooms": ["lobby"], "flags": {"volatile": true}}           # options
  ]

"nsp" is only present when the emit selected a namespace explicitly.
"""
from __future__ import annotations

from typing import Any

import msgpack

EVENT = 2
BINARY_EVENT = 5


class SerializationError(Exception):
    """Raised when serialization or deserialization fails."""


def encode_envelope(packet: dict[str, Any], options: dict[str, Any]) -> bytes:
    """
    Encode a packet and its options into the msgpack envelope.

    Raises SerializationError if any value cannot be represented.
    """
    try:
        return msgpack.packb([packet, options], use_bin_type=True)
    except (TypeError, ValueError, OverflowError, RecursionError) as exc:
        raise SerializationError(f"Failed to serialize envelope: {exc}") from exc


def decode_envelope(raw: bytes) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Decode msgpack bytes from Redis into (packet, options).

    Raises SerializationError if decoding fails or the envelope is malformed.
    """
    try:
        envelope = msgpack.unpackb(raw, raw=False)
    except (msgpack.UnpackException, msgpack.ExtraData, ValueError, TypeError) as exc:
        raise SerializationError(f"Failed to deserialize envelope: {exc}") from exc

    if not isinstance(envelope, list) or len(envelope) != 2:
        raise SerializationError(
            f"Malformed envelope — expected [packet, options], got: {envelope!r}"
        )

    packet, options = envelope
    if not isinstance(packet, dict) or "type" not in packet or "data" not in packet:
        raise SerializationError(f"Malformed packet — expected {{type, data}}, got: {packet!r}")
    if not isinstance(options, dict) or "rooms" not in options or "flags" not in options:
        raise SerializationError(f"Malformed options — expected {{rooms, flags}}, got: {options!r}")

    return packet, options
