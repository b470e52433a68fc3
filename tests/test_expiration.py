import time

import pytest

from sabledb.codec import ByteReader, ByteWriter, SerialisationError
from sabledb.expiration import U64_MAX, Expiration, StopWatch, epoch_ms

FIXED_MS = 1_700_000_000_000


class _Clock:
    def __init__(self, now_ns: int) -> None:
        self.now_ns = now_ns

    def advance_ms(self, ms: int) -> None:
        self.now_ns += ms * 1_000_000

    def advance_us(self, us: int) -> None:
        self.now_ns += us * 1_000


@pytest.fixture
def clock(monkeypatch):
    fake = _Clock(FIXED_MS * 1_000_000)
    monkeypatch.setattr(time, "time_ns", lambda: fake.now_ns)
    return fake


def test_epoch_ms_follows_clock(clock):
    assert epoch_ms() == FIXED_MS
    clock.advance_ms(7)
    assert epoch_ms() == FIXED_MS + 7


def test_default_has_no_ttl(clock):
    exp = Expiration()
    assert exp.last_updated == FIXED_MS
    assert not exp.has_ttl()
    assert exp.ttl_in_millis() == U64_MAX
    assert exp.ttl_in_seconds() == U64_MAX
    assert exp.is_expired() is False


def test_round_trip():
    exp = Expiration(last_updated=123456, ttl_ms=789)
    writer = ByteWriter()
    exp.to_bytes(writer)
    data = writer.getvalue()
    assert len(data) == Expiration.SIZE
    assert Expiration.from_bytes(ByteReader(data)) == exp


def test_wire_format_is_big_endian():
    writer = ByteWriter()
    Expiration(last_updated=1, ttl_ms=2).to_bytes(writer)
    assert writer.getvalue() == b"\x00" * 7 + b"\x01" + b"\x00" * 7 + b"\x02"


def test_from_bytes_short_buffer_raises():
    with pytest.raises(SerialisationError):
        Expiration.from_bytes(ByteReader(b"\x00" * (Expiration.SIZE - 1)))


def test_ttl_decreases_with_time(clock):
    exp = Expiration()
    exp.set_ttl_millis(100)
    assert exp.ttl_in_millis() == 100
    clock.advance_ms(40)
    assert exp.ttl_in_millis() + 40 == 100
    clock.advance_ms(100)
    assert exp.ttl_in_millis() == 0
    assert exp.is_expired()


def test_ttl_in_seconds_rounds_up(clock):
    exp = Expiration()
    exp.set_ttl_millis(1500)
    assert exp.ttl_in_seconds() == 2


def test_set_ttl_seconds(clock):
    exp = Expiration()
    exp.set_ttl_seconds(5)
    assert exp.has_ttl()
    assert exp.ttl_in_seconds() == 5
    assert exp.last_updated == FIXED_MS


def test_set_ttl_seconds_saturates_to_no_ttl(clock):
    exp = Expiration()
    exp.set_ttl_seconds(U64_MAX)
    assert exp.ttl_ms == U64_MAX
    assert exp.has_ttl() is False


def test_set_expire_timestamp_seconds(clock):
    exp = Expiration()
    exp.set_expire_timestamp_seconds(FIXED_MS // 1000 + 10)
    assert exp.ttl_in_seconds() == 10
    assert not exp.is_expired()


def test_expire_timestamp_in_past_is_expired(clock):
    exp = Expiration()
    exp.set_expire_timestamp_millis(FIXED_MS - 1)
    assert exp.ttl_ms == 0
    assert exp.is_expired()


def test_set_no_expiration_clears_ttl(clock):
    exp = Expiration()
    exp.set_ttl_millis(10)
    assert exp.has_ttl()
    clock.advance_ms(3)
    exp.set_no_expiration()
    assert not exp.has_ttl()
    assert exp.last_updated == FIXED_MS + 3


def test_ttl_saturates_at_u64_max(clock):
    exp = Expiration(last_updated=U64_MAX - 1, ttl_ms=U64_MAX - 1)
    assert exp.ttl_in_millis() <= U64_MAX
    assert exp.ttl_in_millis() == U64_MAX - FIXED_MS


def test_stopwatch_elapsed(clock):
    watch = StopWatch()
    clock.advance_us(2500)
    assert watch.elapsed_micros() == 2500


def test_stopwatch_never_negative(clock):
    watch = StopWatch()
    clock.now_ns -= 5_000_000
    assert watch.elapsed_micros() == 0