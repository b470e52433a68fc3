"""Requests sent by a replica to its primary."""

from __future__ import annotations

from dataclasses import dataclass

from .codec import U8_SIZE, U64_SIZE, ByteReader, ByteWriter


@dataclass
class ReplRequest:
    """A replication request.

    For `GET_UPDATES_SINCE` the payload is the first sequence number the
    replica wants to receive.
    """

    req_type: int = 0
    payload: int = 0

    SIZE = U64_SIZE + U8_SIZE
    GET_UPDATES_SINCE = 0
    FULL_SYNC = 1

    @classmethod
    def new_get_updates_since(cls, seq_num: int) -> ReplRequest:
        return cls(req_type=cls.GET_UPDATES_SINCE, payload=seq_num)

    @classmethod
    def new_fullsync(cls) -> ReplRequest:
        return cls(req_type=cls.FULL_SYNC, payload=0)

    def to_bytes(self) -> bytes:
        writer = ByteWriter()
        writer.write_u8(self.req_type)
        writer.write_u64(self.payload)
        return writer.getvalue()

    @classmethod
    def from_bytes(cls, buffer: bytes | bytearray | memoryview) -> ReplRequest:
        """Decode a request; raise `SerialisationError` if the buffer is short."""
        reader = ByteReader(buffer)
        req_type = reader.read_u8()
        payload = reader.read_u64()
        return cls(req_type=req_type, payload=payload)