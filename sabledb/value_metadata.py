"""Metadata stored in front of every value."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .codec import U8_SIZE, ByteReader, ByteWriter, Encoding
from .expiration import Expiration


class ValueType(Enum):
    """Possible value types."""

    STR = 0
    LIST = 1
    HASH = 2


@dataclass
class CommonValueMetadata:
    """Value encoding byte plus expiration data shared by every value type."""

    value_encoding: int = Encoding.VALUE_STRING
    expiration: Expiration = field(default_factory=Expiration)

    SIZE = U8_SIZE + Expiration.SIZE

    def to_bytes(self, writer: ByteWriter) -> None:
        writer.write_u8(self.value_encoding)
        self.expiration.to_bytes(writer)

    @classmethod
    def from_bytes(cls, reader: ByteReader) -> CommonValueMetadata:
        value_encoding = reader.read_u8()
        expiration = Expiration.from_bytes(reader)
        return cls(value_encoding=value_encoding, expiration=expiration)

    @property
    def value_type(self) -> int:
        return self.value_encoding

    def is_string(self) -> bool:
        return self.value_encoding == Encoding.VALUE_STRING

    def is_list(self) -> bool:
        return self.value_encoding == Encoding.VALUE_LIST

    def is_hash(self) -> bool:
        return self.value_encoding == Encoding.VALUE_HASH

    def set_string(self) -> CommonValueMetadata:
        self.value_encoding = Encoding.VALUE_STRING
        return self

    def set_list(self) -> CommonValueMetadata:
        self.value_encoding = Encoding.VALUE_LIST
        return self

    def set_hash(self) -> CommonValueMetadata:
        self.value_encoding = Encoding.VALUE_HASH
        return self


@dataclass
class StringValueMetadata:
    """Metadata of a string value."""

    common: CommonValueMetadata = field(
        default_factory=lambda: CommonValueMetadata().set_string()
    )

    SIZE = CommonValueMetadata.SIZE

    def to_bytes(self, writer: ByteWriter) -> None:
        self.common.to_bytes(writer)

    @classmethod
    def from_bytes(cls, reader: ByteReader) -> StringValueMetadata:
        return cls(common=CommonValueMetadata.from_bytes(reader))

    @property
    def expiration(self) -> Expiration:
        return self.common.expiration

    def is_type(self, type_bit: int) -> bool:
        return self.common.value_type == type_bit