"""
Tests for socketio_emitter.channels

Pure unit tests — no Redis, no mocking required.
"""
from socketio_emitter.channels import build_channel, subscription_pattern


def test_no_rooms_addresses_namespace():
    assert build_channel("socket.io", "/", []) == "socket.io#/#"


def test_default_rooms_argument():
    assert build_channel("socket.io", "/") == "socket.io#/#"


def test_single_room_appends_suffix():
    assert build_channel("socket.io", "/", ["lobby"]) == "socket.io#/#lobby#"


def test_two_rooms_have_no_suffix():
    assert build_channel("socket.io", "/", ["lobby", "vip"]) == "socket.io#/#"


def test_custom_prefix_and_namespace():
    assert build_channel("myapp", "/admin", ("ops",)) == "myapp#/admin#ops#"


def test_subscription_pattern():
    assert subscription_pattern() == "socket.io#/#*"
    assert subscription_pattern("myapp", "/admin") == "myapp#/admin#*"


def test_subscription_pattern_escapes_glob_metacharacters():
    assert subscription_pattern("app*", "/a?b") == r"app\*#/a\?b#*"
    assert subscription_pattern("[x]", "/back\\slash") == r"\[x\]#/back\\slash#*"
