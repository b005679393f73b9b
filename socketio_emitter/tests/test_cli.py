"""
Tests for socketio_emitter.cli

open_emitter() is patched to hand back an Emitter on an AsyncMock
publisher — no live Redis required.
"""
from unittest.mock import AsyncMock, patch

import pytest

from socketio_emitter.cli import build_parser, main, options_from_args, parse_arg
from socketio_emitter.config import EmitterOptions
from socketio_emitter.emitter import Emitter
from socketio_emitter.publisher import PublisherError
from socketio_emitter.serializer import BINARY_EVENT, EVENT, decode_envelope


@pytest.fixture
def publisher():
    pub = AsyncMock()
    pub.publish = AsyncMock(return_value=2)
    return pub


@pytest.fixture
def patched_open(publisher, monkeypatch):
    for name in ("HOST", "PORT", "ADDR", "PROTOCOL", "KEY"):
        monkeypatch.delenv(f"SOCKETIO_EMITTER_{name}", raising=False)
    with patch("socketio_emitter.cli.open_emitter", new_callable=AsyncMock) as mock_open:
        mock_open.side_effect = lambda options: Emitter(publisher, prefix=options.prefix)
        yield mock_open


def _published(publisher):
    channel, payload = publisher.publish.call_args.args
    return (channel, *decode_envelope(payload))


# ── Argument handling ─────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "text, expected",
    [
        ('"hello"', "hello"),
        ("hello", "hello"),
        ("42", 42),
        ('{"a": [1, 2]}', {"a": [1, 2]}),
        ("null", None),
    ],
)
def test_parse_arg(text, expected):
    assert parse_arg(text) == expected


def test_hex_argument_becomes_bytes():
    args = build_parser().parse_args(["upload", "--hex", "0102ff", "--hex", "00"])
    assert args.hex == [b"\x01\x02\xff", b"\x00"]


def test_bad_hex_exits():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["upload", "--hex", "zz"])


def test_connection_flags_override_base_options():
    args = build_parser().parse_args(["chat", "--addr", "cache:7000", "--key", "myapp"])
    options = options_from_args(args, EmitterOptions(host="redis", port=6380))

    assert options.address == "cache:7000"
    assert options.prefix == "myapp"
    assert options.host == "redis"


# ── main() ────────────────────────────────────────────────────────────────────

def test_main_emits_plain_event(patched_open, publisher, capsys):
    assert main(["chat", '"hello"', "7"]) == 0

    channel, packet, options = _published(publisher)
    assert channel == "socket.io#/#"
    assert packet == {"type": EVENT, "data": ["chat", "hello", 7]}
    assert options == {"rooms": [], "flags": {}}
    assert capsys.readouterr().out.strip() == "socket.io#/#\t2"


def test_main_applies_targeting(patched_open, publisher):
    main(["alert", "disk", "--room", "ops", "--nsp", "/admin", "--volatile", "--join", "--key", "myapp"])

    channel, packet, options = _published(publisher)
    assert channel == "myapp#/admin#ops#"
    assert packet["nsp"] == "/admin"
    assert options == {"rooms": ["ops"], "flags": {"volatile": True, "join": True}}


def test_main_hex_argument_makes_binary_event(patched_open, publisher):
    main(["upload", '"name"', "--hex", "0102"])

    _, packet, _ = _published(publisher)
    assert packet["type"] == BINARY_EVENT
    assert packet["data"] == ["upload", "name", b"\x01\x02"]


def test_main_binary_flag_forces_binary(patched_open, publisher):
    main(["chat", "hello", "--binary"])

    _, packet, _ = _published(publisher)
    assert packet["type"] == BINARY_EVENT


def test_main_publish_failure_returns_1(patched_open, publisher):
    publisher.publish.side_effect = PublisherError("Redis publish failed")
    assert main(["chat", "hello"]) == 1


def test_main_bad_protocol_returns_1(patched_open):
    assert main(["chat", "--protocol", "udp"]) == 1
    patched_open.assert_not_called()
