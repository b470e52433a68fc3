"""Builders for RESP (Redis serialisation protocol) replies."""

from __future__ import annotations

import math
from collections.abc import Iterable

CRLF = b"\r\n"
OK = b"+OK\r\n"
PONG = b"+PONG\r\n"
NULL_STRING = b"$-1\r\n"
EMPTY_ARRAY = b"*0\r\n"
EMPTY_STRING = b"$0\r\n\r\n"


def _as_bytes(content: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(content, str):
        return content.encode()
    return bytes(content)


def _format_number(num: int | float) -> str:
    if isinstance(num, float):
        if math.isnan(num):
            return "NaN"
        if math.isinf(num):
            return "inf" if num > 0 else "-inf"
        if num.is_integer():
            return str(int(num))
    return str(num)


def bulk_string(content: bytes | bytearray | memoryview | str) -> bytes:
    """Return a bulk string reply holding `content`."""
    data = _as_bytes(content)
    return b"$" + str(len(data)).encode() + CRLF + data + CRLF


def ok() -> bytes:
    return OK


def pong() -> bytes:
    return PONG


def null_string() -> bytes:
    return NULL_STRING


def empty_string() -> bytes:
    return EMPTY_STRING


def empty_array() -> bytes:
    return EMPTY_ARRAY


def error_string(msg: str) -> bytes:
    """Return an error reply carrying `msg`."""
    return b"-" + msg.encode() + CRLF


def number(num: int | float, is_float: bool = False) -> bytes:
    """Return an integer reply, or a double reply when `is_float` is set."""
    prefix = "," if is_float else ":"
    return f"{prefix}{_format_number(num)}\r\n".encode()


def array_len(num: int) -> bytes:
    """Return the header of an array of `num` elements."""
    return f"*{num}\r\n".encode()


def strings(items: Iterable[bytes | str]) -> bytes:
    """Return an array reply of bulk strings."""
    parts = [bulk_string(item) for item in items]
    return array_len(len(parts)) + b"".join(parts)