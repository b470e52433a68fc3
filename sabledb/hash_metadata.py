"""Metadata of hash values and the keys of their fields."""

from __future__ import annotations

from dataclasses import dataclass, field

from .codec import U8_SIZE, U64_SIZE, ByteReader, ByteWriter, Encoding
from .expiration import U64_MAX, Expiration
from .value_metadata import CommonValueMetadata


@dataclass
class HashValueMetadata:
    """Id and item count of a hash, plus the common value metadata."""

    hash_id: int = 0
    hash_size: int = 0
    common: CommonValueMetadata = field(
        default_factory=lambda: CommonValueMetadata().set_hash()
    )

    SIZE = 2 * U64_SIZE + CommonValueMetadata.SIZE

    @property
    def expiration(self) -> Expiration:
        return self.common.expiration

    def __len__(self) -> int:
        return self.hash_size

    def is_empty(self) -> bool:
        return self.hash_size == 0

    def incr_len_by(self, diff: int) -> None:
        self.hash_size = min(self.hash_size + diff, U64_MAX)

    def decr_len_by(self, diff: int) -> None:
        self.hash_size = max(self.hash_size - diff, 0)

    def to_bytes(self, writer: ByteWriter) -> None:
        self.common.to_bytes(writer)
        writer.write_u64(self.hash_id)
        writer.write_u64(self.hash_size)

    @classmethod
    def from_bytes(cls, reader: ByteReader) -> HashValueMetadata:
        common = CommonValueMetadata.from_bytes(reader)
        hash_id = reader.read_u64()
        hash_size = reader.read_u64()
        return cls(hash_id=hash_id, hash_size=hash_size, common=common)

    def prefix(self) -> bytes:
        """Key prefix shared by every field of this hash."""
        writer = ByteWriter()
        writer.write_u8(Encoding.KEY_HASH_ITEM)
        writer.write_u64(self.hash_id)
        return writer.getvalue()


@dataclass
class HashFieldKey:
    """Storage key of a single hash field: kind, hash id and the field name."""

    hash_id: int
    user_key: bytes
    kind: int = Encoding.KEY_HASH_ITEM

    # Size of the fixed part only; the user key follows it.
    SIZE = U8_SIZE + U64_SIZE

    def to_bytes(self, writer: ByteWriter) -> None:
        writer.write_u8(self.kind)
        writer.write_u64(self.hash_id)
        writer.write_bytes(self.user_key)

    @classmethod
    def from_bytes(cls, buffer: bytes | bytearray | memoryview) -> HashFieldKey:
        reader = ByteReader(buffer)
        kind = reader.read_u8()
        hash_id = reader.read_u64()
        return cls(hash_id=hash_id, user_key=reader.remaining(), kind=kind)