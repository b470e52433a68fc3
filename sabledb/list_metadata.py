"""Metadata stored in front of a list value."""

from __future__ import annotations

from dataclasses import dataclass, field

from .codec import U64_SIZE, ByteReader, ByteWriter
from .expiration import Expiration
from .value_metadata import CommonValueMetadata


@dataclass
class ListValueMetadata:
    """Head, tail, size and id of a list, plus the common value metadata."""

    common: CommonValueMetadata = field(
        default_factory=lambda: CommonValueMetadata().set_list()
    )
    head: int = 0
    tail: int = 0
    length: int = 0
    list_id: int = 0

    SIZE = 4 * U64_SIZE + CommonValueMetadata.SIZE

    def to_bytes(self, writer: ByteWriter) -> None:
        self.common.to_bytes(writer)
        writer.write_u64(self.head)
        writer.write_u64(self.tail)
        writer.write_u64(self.length)
        writer.write_u64(self.list_id)

    @classmethod
    def from_bytes(cls, reader: ByteReader) -> ListValueMetadata:
        common = CommonValueMetadata.from_bytes(reader)
        head = reader.read_u64()
        tail = reader.read_u64()
        length = reader.read_u64()
        list_id = reader.read_u64()
        return cls(common=common, head=head, tail=tail, length=length, list_id=list_id)

    @property
    def expiration(self) -> Expiration:
        return self.common.expiration

    def __len__(self) -> int:
        return self.length

    def is_empty(self) -> bool:
        return self.length == 0

    def is_type(self, type_bit: int) -> bool:
        return self.common.value_type == type_bit