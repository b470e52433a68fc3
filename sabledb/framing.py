"""Length-prefixed message framing over blocking sockets."""

from __future__ import annotations

import socket

from .codec import USIZE_SIZE, ByteWriter

SOCKET_TIMEOUT = 0.1
MAX_BUFFER_SIZE = 10 << 20


def prepare_socket(sock: socket.socket) -> None:
    """Make `sock` blocking with a 100 ms timeout and disable Nagle's delay."""
    sock.setblocking(True)
    sock.settimeout(SOCKET_TIMEOUT)
    try:
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    except OSError:
        pass


class MessageWriter:
    """Write messages as a big-endian length followed by the content."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    def write_message(self, message: bytes | bytearray | memoryview) -> None:
        writer = ByteWriter()
        writer.write_usize(len(message))
        self._sock.sendall(writer.getvalue())
        self._sock.sendall(message)


class MessageReader:
    """Read length-prefixed messages, buffering partial data between calls."""

    def __init__(self, sock: socket.socket, max_read: int = MAX_BUFFER_SIZE) -> None:
        self._sock = sock
        self._max_read = max_read
        self._buffer = bytearray()

    def _read_some(self) -> bool:
        """Pull available bytes; return False when the read timed out."""
        try:
            data = self._sock.recv(self._max_read)
        except (TimeoutError, BlockingIOError):
            return False
        if not data:
            raise ConnectionError("connection closed by peer")
        self._buffer += data
        return True

    def _take_message(self) -> bytes | None:
        if len(self._buffer) < USIZE_SIZE:
            return None
        count = int.from_bytes(self._buffer[:USIZE_SIZE], "big")
        end = USIZE_SIZE + count
        if len(self._buffer) < end:
            return None
        message = bytes(self._buffer[USIZE_SIZE:end])
        del self._buffer[:end]
        return message

    def read_message(self) -> bytes | None:
        """Return the next message, or None if it has not fully arrived yet.

        Raises `ConnectionError` when the peer closed the connection.
        """
        if len(self._buffer) < USIZE_SIZE and not self._read_some():
            return None
        if len(self._buffer) < USIZE_SIZE:
            return None

        message = self._take_message()
        if message is not None:
            return message

        if not self._read_some():
            return None
        return self._take_message()