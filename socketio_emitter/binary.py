"""
Binary Payload Detection

Decides whether an emit must go out as a BINARY_EVENT packet. A single raw
byte buffer anywhere in the argument tree is enough to flip the whole
packet to binary mode.

Value tree variants:
  raw bytes   — bytes, bytearray, memoryview   → True
  sequence    — list, tuple                    → any element is binary
  mapping     — dict and other Mappings        → any value is binary
  scalar      — everything else (str included) → False

The tree is walked with an explicit stack of iterators, so nesting depth is
bounded by memory rather than the interpreter's recursion limit.
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from functools import singledispatch
from typing import Any


@singledispatch
def _inspect(value: Any) -> bool | Iterator[Any]:
    """True for a byte buffer, an iterator over children for a container, else False."""
    return False


@_inspect.register(bytes)
@_inspect.register(bytearray)
@_inspect.register(memoryview)
def _(value: bytes | bytearray | memoryview) -> bool:
    return True


@_inspect.register(list)
@_inspect.register(tuple)
def _(value: list[Any] | tuple[Any, ...]) -> Iterator[Any]:
    return iter(value)


@_inspect.register(Mapping)
def _(value: Mapping[Any, Any]) -> Iterator[Any]:
    return iter(value.values())


def has_binary(value: Any) -> bool:
    """Return True if *value* contains a raw byte buffer at any depth."""
    stack: list[Iterator[Any]] = [iter((value,))]
    while stack:
        for item in stack[-1]:
            found = _inspect(item)
            if found is True:
                return True
            if found is not False:
                # descend; the parent iterator resumes once this one is exhausted
                stack.append(found)
                break
        else:
            stack.pop()
    return False
