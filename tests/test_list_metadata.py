import pytest

from sabledb.codec import ByteReader, ByteWriter, Encoding, SerialisationError
from sabledb.expiration import epoch_ms
from sabledb.list_metadata import ListValueMetadata


def test_packing():
    md = ListValueMetadata()
    md.expiration.set_ttl_millis(30)
    md.list_id = 42
    md.head = 121
    md.tail = 420
    md.length = 15

    writer = ByteWriter()
    md.to_bytes(writer)
    arr = writer.getvalue()
    assert len(arr) == ListValueMetadata.SIZE

    # the buffer can be larger than the metadata
    arr += bytes([5, 5])
    reader = ByteReader(arr)
    deserialized = ListValueMetadata.from_bytes(reader)

    # changing the source does not touch the deserialised copy
    md.expiration.set_expire_timestamp_seconds(15)

    assert deserialized.expiration.ttl_ms == 30
    assert deserialized.expiration.is_expired() is False
    assert deserialized.list_id == 42
    assert deserialized.head == 121
    assert deserialized.tail == 420
    assert len(deserialized) == 15
    assert reader.remaining() == bytes([5, 5])


def test_expire_api():
    md = ListValueMetadata()
    assert md.expiration.is_expired() is False

    md.expiration.set_ttl_millis(10)
    assert md.expiration.is_expired() is False
    assert md.expiration.ttl_in_seconds() == 1
    assert md.expiration.ttl_in_millis() == 10

    now = epoch_ms() - 1
    md.expiration.set_expire_timestamp_millis(now)
    assert md.expiration.is_expired() is True

    now = epoch_ms() + 42
    md.expiration.set_expire_timestamp_millis(now)
    assert md.expiration.is_expired() is False
    assert md.expiration.ttl_in_millis() == 42


def test_new_list_is_list_type_and_empty():
    md = ListValueMetadata()
    assert md.is_type(Encoding.VALUE_LIST)
    assert not md.is_type(Encoding.VALUE_STRING)
    assert md.is_empty()


def test_from_bytes_short_buffer_raises():
    writer = ByteWriter()
    ListValueMetadata().to_bytes(writer)
    truncated = writer.getvalue()[:-1]
    with pytest.raises(SerialisationError):
        ListValueMetadata.from_bytes(ByteReader(truncated))