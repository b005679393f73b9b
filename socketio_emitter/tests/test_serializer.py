"""
Tests for socketio_emitter.serializer

Pure unit tests — no Redis, no mocking required.
"""
import msgpack
import pytest

from socketio_emitter.serializer import (
    BINARY_EVENT,
    EVENT,
    SerializationError,
    decode_envelope,
    encode_envelope,
)


def _options(rooms=(), **flags):
    return {"rooms": list(rooms), "flags": flags}


class TestEncode:
    def test_envelope_is_two_element_array(self):
        packet = {"type": EVENT, "data": ["chat", "hello"]}
        raw = encode_envelope(packet, _options(["lobby"], volatile=True))

        envelope = msgpack.unpackb(raw, raw=False)

        assert envelope == [
            {"type": 2, "data": ["chat", "hello"]},
            {"rooms": ["lobby"], "flags": {"volatile": True}},
        ]

    def test_bytes_are_packed_as_bin_and_str_as_str(self):
        packet = {"type": BINARY_EVENT, "data": ["file", b"\x01\x02"]}
        raw = encode_envelope(packet, _options())

        # str8/fixstr for "file", bin8 (0xc4) for the buffer
        assert b"\xa4file" in raw
        assert b"\xc4\x02\x01\x02" in raw

    def test_nsp_is_carried_in_packet(self):
        packet = {"type": EVENT, "data": ["ping"], "nsp": "/admin"}
        decoded, _ = decode_envelope(encode_envelope(packet, _options()))
        assert decoded["nsp"] == "/admin"

    def test_unsupported_value_raises(self):
        packet = {"type": EVENT, "data": ["chat", object()]}
        with pytest.raises(SerializationError, match="Failed to serialize"):
            encode_envelope(packet, _options())

    def test_integer_overflow_raises(self):
        packet = {"type": EVENT, "data": ["chat", 2**70]}
        with pytest.raises(SerializationError, match="Failed to serialize"):
            encode_envelope(packet, _options())


class TestDecode:
    def test_returns_packet_and_options(self):
        raw = msgpack.packb(
            [{"type": 5, "data": ["x", b"\x00"]}, {"rooms": [], "flags": {}}],
            use_bin_type=True,
        )
        packet, options = decode_envelope(raw)

        assert packet == {"type": 5, "data": ["x", b"\x00"]}
        assert options == {"rooms": [], "flags": {}}

    def test_garbage_raises(self):
        with pytest.raises(SerializationError, match="Failed to deserialize"):
            decode_envelope(b"\xc1")

    def test_truncated_raises(self):
        raw = encode_envelope({"type": EVENT, "data": ["chat"]}, _options())
        with pytest.raises(SerializationError, match="Failed to deserialize"):
            decode_envelope(raw[:-2])

    def test_three_element_envelope_is_malformed(self):
        raw = msgpack.packb(["emitter", {"type": 2, "data": []}, {"rooms": [], "flags": {}}])
        with pytest.raises(SerializationError, match="Malformed envelope"):
            decode_envelope(raw)

    def test_packet_without_type_is_malformed(self):
        raw = msgpack.packb([{"data": []}, {"rooms": [], "flags": {}}])
        with pytest.raises(SerializationError, match="Malformed packet"):
            decode_envelope(raw)

    def test_options_without_flags_is_malformed(self):
        raw = msgpack.packb([{"type": 2, "data": []}, {"rooms": []}])
        with pytest.raises(SerializationError, match="Malformed options"):
            decode_envelope(raw)
