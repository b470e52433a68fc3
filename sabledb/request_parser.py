"""Incremental parser for client requests: inline strings or RESP arrays."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

CRLF = b"\r\n"
MAX_BUFFER_SIZE = 512 << 20
MAX_LENGTH_DIGITS = 20
_USIZE_MAX = 2**64 - 1
_LENGTH_RE = re.compile(rb"\+?[0-9]+")

_SPACE = frozenset(b" \t\r\n")
_DQUOTE = ord('"')
_SQUOTE = ord("'")
_BACKSLASH = ord("\\")
_ESCAPES = {ord("n"): ord("\n"), ord("r"): ord("\r"), ord("t"): ord("\t")}


class ParserError(Exception):
    """Base class of request parsing errors."""


class NeedMoreData(ParserError):
    """The buffer does not yet hold a complete request."""

    def __init__(self, message: str = "need more data") -> None:
        super().__init__(message)


class BufferTooBig(ParserError):
    """The request or one of its lengths exceeds the allowed limit."""

    def __init__(self, message: str = "buffer too big") -> None:
        super().__init__(message)


class ProtocolError(ParserError):
    """The request is malformed."""


@dataclass(frozen=True)
class ParseResult:
    """A parsed command and the number of buffer bytes it took."""

    args: tuple[bytes, ...]
    bytes_consumed: int

    def arg(self, index: int) -> bytes:
        return self.args[index]

    def arg_count(self) -> int:
        return len(self.args)


class _State(Enum):
    INITIAL = auto()
    INLINE_STRING = auto()
    BULK_STRING = auto()


def _split_inline(line: bytes) -> list[bytes]:
    """Split an inline command on whitespace, honouring quotes."""
    args: list[bytes] = []
    current = bytearray()
    in_token = False
    quote: int | None = None
    it = iter(line)
    for byte in it:
        if quote is not None:
            if byte == quote:
                quote = None
            elif byte == _BACKSLASH and quote == _DQUOTE:
                escaped = next(it, None)
                if escaped is None:
                    raise ProtocolError("unterminated escape sequence")
                current.append(_ESCAPES.get(escaped, escaped))
            else:
                current.append(byte)
            continue
        if byte in _SPACE:
            if in_token:
                args.append(bytes(current))
                current.clear()
                in_token = False
            continue
        in_token = True
        if byte in (_DQUOTE, _SQUOTE):
            quote = byte
        else:
            current.append(byte)
    if quote is not None:
        raise ProtocolError("unbalanced quotes in request")
    if in_token:
        args.append(bytes(current))
    return args


def _make_result(args: list[bytes] | tuple[bytes, ...], consumed: int) -> ParseResult:
    if not args:
        raise ProtocolError("empty command")
    return ParseResult(tuple(args), consumed)


class RequestParser:
    """Parse requests from a buffer that grows between calls.

    The caller passes the whole unconsumed buffer on every call; after a
    successful parse it drops `bytes_consumed` bytes from the front.
    """

    def __init__(self) -> None:
        self._args: list[tuple[int, int]] = []
        self._curpos = 0
        self._state = _State.INITIAL
        self._expected_items = 0

    def reset(self) -> None:
        self._curpos = 0
        self._state = _State.INITIAL
        self._args.clear()

    def parse(self, buffer: bytes | bytearray | memoryview) -> ParseResult:
        """Parse one request or raise `NeedMoreData` if it is incomplete."""
        if isinstance(buffer, memoryview):
            buffer = buffer.tobytes()
        if not buffer:
            raise NeedMoreData()
        if len(buffer) > MAX_BUFFER_SIZE:
            raise BufferTooBig()

        if self._state is _State.INITIAL:
            if buffer[0] == ord("*"):
                array_len, skip = self._read_len(buffer, 1)
                self._curpos += 1 + skip
                self._expected_items = array_len
                self._state = _State.BULK_STRING
                return self._parse_bulk_strings(buffer)
            self._state = _State.INLINE_STRING
            self._curpos = 0
            return self._parse_inline(buffer)
        if self._state is _State.INLINE_STRING:
            return self._parse_inline(buffer)
        return self._parse_bulk_strings(buffer)

    @staticmethod
    def _read_len(buffer: bytes | bytearray, start: int) -> tuple[int, int]:
        """Read a CRLF-terminated length; return it and the bytes it took."""
        end = buffer.find(CRLF, start)
        if end < 0:
            raise NeedMoreData()
        if end - start > MAX_LENGTH_DIGITS:
            raise BufferTooBig()
        text = bytes(buffer[start:end])
        if not _LENGTH_RE.fullmatch(text):
            raise ProtocolError("failed to parse string to usize")
        length = int(text)
        if length > _USIZE_MAX:
            raise ProtocolError("failed to parse string to usize")
        if length > MAX_BUFFER_SIZE:
            raise BufferTooBig()
        return length, end - start + 2

    def _parse_inline(self, buffer: bytes | bytearray) -> ParseResult:
        if self._curpos >= len(buffer):
            raise ProtocolError(
                "parser in invalid state: current position exceeds or equal "
                "to the buffer len"
            )
        end = buffer.find(CRLF, self._curpos)
        if end < 0:
            # Keep a trailing CR so the split CRLF is found next time.
            self._curpos = len(buffer) - 1 if buffer.endswith(b"\r") else len(buffer)
            raise NeedMoreData()

        command = bytes(buffer[:end])
        consumed = end + 2
        self.reset()
        return _make_result(_split_inline(command), consumed)

    def _parse_bulk_strings(self, buffer: bytes | bytearray) -> ParseResult:
        curpos = self._curpos
        while self._expected_items > 0:
            if curpos >= len(buffer):
                raise NeedMoreData()
            marker = buffer[curpos]
            if marker != ord("$"):
                raise ProtocolError(
                    f"bulk string must start with '$'. Found {chr(marker)}"
                )
            curpos += 1
            str_len, skip = self._read_len(buffer, curpos)
            curpos += skip
            start = curpos
            if str_len + 2 > len(buffer) - curpos:
                raise NeedMoreData()
            curpos += str_len + 2
            self._args.append((start, str_len))
            self._curpos = curpos
            self._expected_items -= 1

        args = [bytes(buffer[start : start + size]) for start, size in self._args]
        consumed = self._curpos
        self.reset()
        return _make_result(args, consumed)