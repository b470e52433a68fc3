import pytest

from sabledb.codec import ByteReader, ByteWriter, Encoding, SerialisationError


def test_round_trip_all_widths():
    writer = ByteWriter()
    writer.write_u8(7)
    writer.write_u16(513)
    writer.write_u64(2**64 - 1)
    writer.write_usize(123456789)
    writer.write_bytes(b"payload")

    reader = ByteReader(writer.getvalue())
    assert reader.read_u8() == 7
    assert reader.read_u16() == 513
    assert reader.read_u64() == 2**64 - 1
    assert reader.read_usize() == 123456789
    assert reader.read_bytes(7) == b"payload"
    assert reader.remaining() == b""


def test_u16_is_big_endian():
    writer = ByteWriter()
    writer.write_u16(1)
    assert writer.getvalue() == b"\x00\x01"


def test_sizes_of_written_values():
    writer = ByteWriter()
    writer.write_u8(Encoding.KEY_HASH_ITEM)
    assert len(writer) == 1
    writer.write_u64(42)
    assert len(writer) == 9
    writer.write_usize(42)
    assert len(writer) == 17


def test_writer_appends_to_given_buffer():
    buffer = bytearray(b"ab")
    writer = ByteWriter(buffer)
    writer.write_bytes(b"cd")
    assert buffer == bytearray(b"abcd")
    assert writer.getvalue() == b"abcd"


def test_short_read_raises():
    reader = ByteReader(b"\x00\x01\x02")
    with pytest.raises(SerialisationError):
        reader.read_u64()


def test_read_bytes_past_end_raises():
    reader = ByteReader(b"abc")
    assert reader.read_bytes(2) == b"ab"
    with pytest.raises(SerialisationError):
        reader.read_bytes(2)


def test_remaining_does_not_consume():
    reader = ByteReader(b"\x05hello")
    assert reader.read_u8() == 5
    assert reader.remaining() == b"hello"
    assert reader.consumed == 1
    assert reader.read_bytes(5) == b"hello"
    assert reader.consumed == 6


def test_negative_value_rejected():
    writer = ByteWriter()
    with pytest.raises(OverflowError):
        writer.write_u8(-1)


def test_too_large_value_rejected():
    writer = ByteWriter()
    with pytest.raises(OverflowError):
        writer.write_u16(70000)