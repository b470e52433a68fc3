"""Key expiration records and a microsecond stopwatch."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from .codec import U64_SIZE, ByteReader, ByteWriter

U64_MAX = 2**64 - 1


def epoch_ms() -> int:
    """Milliseconds since the UNIX epoch."""
    return time.time_ns() // 1_000_000


def _epoch_micros() -> int:
    return time.time_ns() // 1_000


def _clamp_u64(value: int) -> int:
    return max(0, min(value, U64_MAX))


@dataclass
class Expiration:
    """Time-to-live information attached to a stored value.

    `ttl_ms` equal to `U64_MAX` means the record never expires.
    """

    last_updated: int = field(default_factory=epoch_ms)
    ttl_ms: int = U64_MAX

    SIZE = 2 * U64_SIZE

    def to_bytes(self, writer: ByteWriter) -> None:
        writer.write_u64(self.last_updated)
        writer.write_u64(self.ttl_ms)

    @classmethod
    def from_bytes(cls, reader: ByteReader) -> Expiration:
        last_updated = reader.read_u64()
        ttl_ms = reader.read_u64()
        return cls(last_updated=last_updated, ttl_ms=ttl_ms)

    def is_expired(self) -> bool:
        return self.ttl_in_millis() == 0

    def ttl_in_millis(self) -> int:
        """Remaining time to live in milliseconds, or `U64_MAX` without a ttl."""
        if self.ttl_ms == U64_MAX:
            return U64_MAX
        deadline = _clamp_u64(self.last_updated + self.ttl_ms)
        return max(deadline - epoch_ms(), 0)

    def ttl_in_seconds(self) -> int:
        """Remaining time to live in whole seconds (rounded up)."""
        if self.ttl_ms == U64_MAX:
            return U64_MAX
        return -(-self.ttl_in_millis() // 1000)

    def has_ttl(self) -> bool:
        return self.ttl_ms != U64_MAX

    def set_no_expiration(self) -> None:
        self.ttl_ms = U64_MAX
        self.last_updated = epoch_ms()

    def set_ttl_seconds(self, ttl_secs: int) -> None:
        self.ttl_ms = _clamp_u64(ttl_secs * 1000)
        self.last_updated = epoch_ms()

    def set_ttl_millis(self, ttl_ms: int) -> None:
        self.ttl_ms = ttl_ms
        self.last_updated = epoch_ms()

    def set_expire_timestamp_millis(self, expire_timestamp_ms: int) -> None:
        """Expire at an absolute time given in milliseconds since the epoch."""
        now = epoch_ms()
        self.ttl_ms = max(expire_timestamp_ms - now, 0)
        self.last_updated = now

    def set_expire_timestamp_seconds(self, expire_timestamp_secs: int) -> None:
        """Expire at an absolute time given in seconds since the epoch."""
        self.set_expire_timestamp_millis(_clamp_u64(expire_timestamp_secs * 1000))


class StopWatch:
    """Measure elapsed wall-clock time in microseconds."""

    def __init__(self) -> None:
        self.start = _epoch_micros()

    def elapsed_micros(self) -> int:
        return max(_epoch_micros() - self.start, 0)