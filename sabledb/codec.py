"""Big-endian binary encoding helpers and the storage encoding markers."""

from __future__ import annotations

U8_SIZE = 1
U16_SIZE = 2
U64_SIZE = 8
USIZE_SIZE = 8


class SerialisationError(Exception):
    """Raised when a buffer cannot be decoded into the requested value."""


class Encoding:
    """First byte used for every stored data type (and some values)."""

    # All primary data types share the same first byte.
    KEY_STRING = 0
    KEY_LIST = 0
    KEY_HASH = 0

    # Each value type is encoded with its own first byte.
    VALUE_STRING = 0
    VALUE_LIST = 1
    VALUE_HASH = 2

    # Secondary data type keys.
    KEY_LIST_ITEM = 1
    KEY_HASH_ITEM = 2


class ByteWriter:
    """Append big-endian integers and raw bytes to a growing buffer."""

    def __init__(self, buffer: bytearray | None = None) -> None:
        self._buffer = buffer if buffer is not None else bytearray()

    def _write_int(self, value: int, size: int) -> None:
        self._buffer += int(value).to_bytes(size, "big")

    def write_u8(self, value: int) -> None:
        self._write_int(value, U8_SIZE)

    def write_u16(self, value: int) -> None:
        self._write_int(value, U16_SIZE)

    def write_u64(self, value: int) -> None:
        self._write_int(value, U64_SIZE)

    def write_usize(self, value: int) -> None:
        self._write_int(value, USIZE_SIZE)

    def write_bytes(self, data: bytes | bytearray | memoryview) -> None:
        self._buffer += data

    def getvalue(self) -> bytes:
        """Return everything written so far."""
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)


class ByteReader:
    """Read big-endian integers and raw bytes from a buffer, front to back."""

    def __init__(self, buffer: bytes | bytearray | memoryview) -> None:
        self._data = bytes(buffer)
        self._pos = 0

    @property
    def consumed(self) -> int:
        """Number of bytes read so far."""
        return self._pos

    def _take(self, count: int) -> bytes:
        if count < 0 or count > len(self._data) - self._pos:
            raise SerialisationError(
                f"need {count} bytes, only {len(self._data) - self._pos} left"
            )
        chunk = self._data[self._pos : self._pos + count]
        self._pos += count
        return chunk

    def _read_int(self, size: int) -> int:
        return int.from_bytes(self._take(size), "big")

    def read_u8(self) -> int:
        return self._read_int(U8_SIZE)

    def read_u16(self) -> int:
        return self._read_int(U16_SIZE)

    def read_u64(self) -> int:
        return self._read_int(U64_SIZE)

    def read_usize(self) -> int:
        return self._read_int(USIZE_SIZE)

    def read_bytes(self, count: int) -> bytes:
        return self._take(count)

    def remaining(self) -> bytes:
        """Return the unread bytes without consuming them."""
        return self._data[self._pos :]