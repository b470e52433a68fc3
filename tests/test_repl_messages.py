import pytest

from sabledb.codec import SerialisationError
from sabledb.repl_messages import ReplRequest


def test_fullsync_wire_bytes():
    data = ReplRequest.new_fullsync().to_bytes()
    assert data == b"\x01" + b"\x00" * 8
    assert len(data) == ReplRequest.SIZE


def test_get_updates_since_wire_bytes():
    data = ReplRequest.new_get_updates_since(7).to_bytes()
    assert data == b"\x00" + b"\x00" * 7 + b"\x07"


@pytest.mark.parametrize("seq", [0, 1, 123456789, 2**64 - 1])
def test_round_trip(seq):
    request = ReplRequest.new_get_updates_since(seq)
    restored = ReplRequest.from_bytes(request.to_bytes())
    assert restored == request
    assert restored.req_type == ReplRequest.GET_UPDATES_SINCE
    assert restored.payload == seq


def test_extra_bytes_are_ignored():
    request = ReplRequest.new_fullsync()
    restored = ReplRequest.from_bytes(request.to_bytes() + b"tail")
    assert restored == request


def test_short_buffer_raises():
    with pytest.raises(SerialisationError):
        ReplRequest.from_bytes(ReplRequest.new_fullsync().to_bytes()[:-1])


def test_empty_buffer_raises():
    with pytest.raises(SerialisationError):
        ReplRequest.from_bytes(b"")