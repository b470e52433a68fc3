"""Serialised batches of storage changes shipped from a primary to a replica."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Union

from .codec import ByteReader, ByteWriter, SerialisationError

OPCODE_PUT = 0
OPCODE_DEL = 1


@dataclass
class PutRecord:
    """A single `put` of `value` under `key`."""

    key: bytes
    value: bytes

    def to_bytes(self, writer: ByteWriter) -> None:
        writer.write_usize(len(self.key))
        writer.write_bytes(self.key)
        writer.write_usize(len(self.value))
        writer.write_bytes(self.value)

    @classmethod
    def from_bytes(cls, reader: ByteReader) -> PutRecord:
        """Decode a record; raise `SerialisationError` if the data is short."""
        key = reader.read_bytes(reader.read_usize())
        value = reader.read_bytes(reader.read_usize())
        return cls(key=key, value=value)


@dataclass
class DeleteRecord:
    """A single deletion of `key`."""

    key: bytes

    def to_bytes(self, writer: ByteWriter) -> None:
        writer.write_usize(len(self.key))
        writer.write_bytes(self.key)

    @classmethod
    def from_bytes(cls, reader: ByteReader) -> DeleteRecord:
        """Decode a record; raise `SerialisationError` if the data is short."""
        return cls(key=reader.read_bytes(reader.read_usize()))


StorageUpdatesItem = Union[PutRecord, DeleteRecord]


@dataclass
class StorageUpdates:
    """Changes made to the database from `start_seq_number` up to, but not
    including, `end_seq_number`.

    A replica asks for the changes since a sequence number; on its next
    request it uses the `end_seq_number` it received, so it tails the
    primary for updates. All serialised data is big-endian.
    """

    start_seq_number: int = 0
    end_seq_number: int = 0
    changes_count: int = 0
    serialised_data: bytearray = field(default_factory=bytearray)

    @classmethod
    def from_seq_number(cls, start_seq_number: int) -> StorageUpdates:
        return cls(start_seq_number=start_seq_number, end_seq_number=start_seq_number)

    def add_put(self, key: bytes, value: bytes) -> None:
        """Append a serialised `put` command."""
        writer = ByteWriter(self.serialised_data)
        writer.write_u8(OPCODE_PUT)
        PutRecord(bytes(key), bytes(value)).to_bytes(writer)

    def add_delete(self, key: bytes) -> None:
        """Append a serialised `delete` command."""
        writer = ByteWriter(self.serialised_data)
        writer.write_u8(OPCODE_DEL)
        DeleteRecord(bytes(key)).to_bytes(writer)

    def __len__(self) -> int:
        """Size of the serialised changes, in bytes."""
        return len(self.serialised_data)

    def is_empty(self) -> bool:
        return not self.serialised_data

    def to_bytes(self) -> bytes:
        writer = ByteWriter()
        writer.write_u64(self.start_seq_number)
        writer.write_u64(self.end_seq_number)
        writer.write_u64(self.changes_count)
        writer.write_usize(len(self.serialised_data))
        writer.write_bytes(self.serialised_data)
        return writer.getvalue()

    @classmethod
    def from_bytes(cls, buffer: bytes | bytearray | memoryview) -> StorageUpdates:
        """Decode updates; raise `SerialisationError` if the buffer is short."""
        reader = ByteReader(buffer)
        start_seq_number = reader.read_u64()
        end_seq_number = reader.read_u64()
        changes_count = reader.read_u64()
        data = reader.read_bytes(reader.read_usize())
        return cls(
            start_seq_number=start_seq_number,
            end_seq_number=end_seq_number,
            changes_count=changes_count,
            serialised_data=bytearray(data),
        )

    def changes(self) -> Iterator[StorageUpdatesItem]:
        """Yield the recorded changes in the order they were added."""
        reader = ByteReader(self.serialised_data)
        total = len(self.serialised_data)
        while reader.consumed < total:
            kind = reader.read_u8()
            if kind == OPCODE_PUT:
                yield PutRecord.from_bytes(reader)
            elif kind == OPCODE_DEL:
                yield DeleteRecord.from_bytes(reader)
            else:
                raise SerialisationError(f"unknown change opcode {kind}")

    def __str__(self) -> str:
        return (
            f"from: {self.start_seq_number:,}, to: {self.end_seq_number:,}, "
            f"changes: {self.changes_count:,}, "
            f"serialised data: {len(self.serialised_data):,} bytes"
        )