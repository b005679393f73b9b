"""
socketio-emit — publish one Socket.IO event from the shell

Usage:
    socketio-emit chat '"hello"'
    socketio-emit score '{"home": 2, "away": 1}' --room match:42 --volatile
    socketio-emit upload --hex 0102ff --nsp /files
    python -m socketio_emitter news '"breaking"' --addr redis.internal:6379 --key myapp

Each positional argument is sent as JSON when it parses as JSON, otherwise
as a plain string. Connection flags that are not given fall back to the
SOCKETIO_EMITTER_* environment variables (a local .env is loaded first).
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from typing import Any

from dotenv import load_dotenv

from .config import ConfigurationError, EmitterOptions, load_options
from .emitter import open_emitter
from .publisher import PublisherError
from .serializer import SerializationError

logger = logging.getLogger("socketio_emitter")


def parse_arg(text: str) -> Any:
    """JSON value if *text* parses as JSON, else *text* itself."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _hex_bytes(text: str) -> bytes:
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a hex string: {text!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="socketio-emit",
        description="Emit a Socket.IO event through the Redis adapter",
    )
    parser.add_argument("event", help="Event name")
    parser.add_argument("args", nargs="*", help="Event arguments (JSON or plain text)")
    parser.add_argument("--hex", action="append", type=_hex_bytes, default=[],
                        help="Append a binary argument given as hex (repeatable)")
    parser.add_argument("--room", action="append", default=[], help="Target room (repeatable)")
    parser.add_argument("--nsp", help="Target namespace, e.g. /admin")
    parser.add_argument("--join", action="store_true", help="Set the join flag")
    parser.add_argument("--volatile", action="store_true", help="Set the volatile flag")
    parser.add_argument("--broadcast", action="store_true", help="Set the broadcast flag")
    parser.add_argument("--binary", action="store_true", help="Force a binary event packet")

    conn = parser.add_argument_group("connection")
    conn.add_argument("--host", help="Redis host")
    conn.add_argument("--port", type=int, help="Redis port")
    conn.add_argument("--addr", help="Redis address host:port, wins over --host/--port")
    conn.add_argument("--protocol", help="tcp (default), tcp4, tcp6 or unix")
    conn.add_argument("--key", help="Channel prefix (default socket.io)")
    conn.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def options_from_args(args: argparse.Namespace, base: EmitterOptions) -> EmitterOptions:
    """Overlay connection flags that were given on top of *base*."""
    overrides = {
        name: getattr(args, name)
        for name in ("host", "port", "addr", "protocol", "key")
        if getattr(args, name) is not None
    }
    return replace(base, **overrides)


async def run(args: argparse.Namespace, options: EmitterOptions) -> int:
    """Open an emitter, send the event described by *args*, return subscriber count."""
    emitter = await open_emitter(options)
    async with emitter:
        intent = emitter.intent()
        for room in args.room:
            intent = intent.to(room)
        if args.nsp:
            intent = intent.of(args.nsp)
        if args.join:
            intent = intent.join()
        if args.volatile:
            intent = intent.volatile()
        if args.broadcast:
            intent = intent.broadcast()

        values = [parse_arg(a) for a in args.args] + list(args.hex)
        if args.binary:
            deliveries = await intent.emit_binary(args.event, *values)
        else:
            deliveries = await intent.emit(args.event, *values)

        print(f"{emitter.last_channel}\t{deliveries}")
        return deliveries


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s — %(message)s",
    )
    load_dotenv(".env")

    try:
        options = options_from_args(args, load_options())
        asyncio.run(run(args, options))
    except (ConfigurationError, PublisherError, SerializationError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
