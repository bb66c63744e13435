import pytest

from canlink.frames import (
    CAN_FRAME_SIZE,
    CanFrame,
    chunk_payload,
    format_bytes,
    unpack_frame,
)


def test_pack_matches_kernel_layout():
    packed = CanFrame(0x123, b"\x02\x10\x03").pack()
    assert len(packed) == CAN_FRAME_SIZE == 16
    assert packed[4:] == b"\x03\x00\x00\x00\x02\x10\x03\x00\x00\x00\x00\x00"


@pytest.mark.parametrize(
    "frame",
    [CanFrame(0x123, b"hello wo"), CanFrame(0x7E0, b"\x02\x10\x03"), CanFrame(0x1, b"")],
)
def test_pack_unpack_round_trip(frame):
    assert unpack_frame(frame.pack()) == frame


def test_describe():
    assert CanFrame(0x123, b"\x02\x10\x03").describe() == "ID=0x123, DLC=3, Data=0x02 0x10 0x03"


def test_dlc_is_data_length():
    assert CanFrame(0x123, b"abcde").dlc == 5


def test_too_long_frame_rejected():
    with pytest.raises(ValueError):
        CanFrame(0x123, b"123456789")


def test_negative_id_rejected():
    with pytest.raises(ValueError):
        CanFrame(-1, b"")


def test_unpack_incomplete_frame():
    with pytest.raises(ValueError, match="Incomplete CAN frame received: 3 bytes"):
        unpack_frame(b"abc")


def test_unpack_rejects_bad_dlc():
    raw = bytearray(CanFrame(0x123, b"ab").pack())
    raw[4] = 9
    with pytest.raises(ValueError):
        unpack_frame(bytes(raw))


def test_chunk_payload_reassembles():
    message = b"hello world hello can"
    chunks = list(chunk_payload(message, 8))
    assert b"".join(chunks) == message
    assert all(0 < len(c) <= 8 for c in chunks)
    assert [len(c) for c in chunks[:-1]] == [8] * (len(chunks) - 1)


def test_chunk_payload_empty():
    assert list(chunk_payload(b"", 8)) == []


def test_chunk_payload_bad_size():
    with pytest.raises(ValueError):
        list(chunk_payload(b"abc", 0))


def test_format_bytes():
    assert format_bytes(b"\x00\xff") == "0x00 0xFF"


def test_format_bytes_limit():
    text = format_bytes(bytes(range(40)), 16)
    assert len(text.split(" ")) == 16
    assert text.split(" ")[-1] == "0x0F"