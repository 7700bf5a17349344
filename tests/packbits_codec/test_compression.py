import array
import logging

import pytest
from PIL import Image

from packbits_codec import (
    IMPLEMENTATION,
    PackBitsError,
    decode,
    decode_window,
    decoded_size,
    encode,
    iter_decode,
    worst_case_size,
)

logger = logging.getLogger(__name__)

RAW_IMAGE_3x3_8bit = b"\x00\x01\x02\x01\x01\x01\x01\x00\x00"
EDGE_CASE_1 = b"\xf9\xfa\xf4\xff\xff\xb8\xbc\xff\x96-\xe5\xf5\xb5\xd4\xff\xc2?\x95\xff\xc8\x96\xff\xff\xdav\xe4\xff\xa5\xd5\xff\xf9\xdb\xe3\xff\xf6\xc8\xe8\xff\xfa\xce\xd2\xff\xd4v\xe9\xff\x9fz\xee\xe9b\x95\xff\xbd6\xac\xff\xc6\x82\xd8\xffa\x1c\xec\xff\xf3\xe5\xe9\xf2iD\xff\xff\xdc\xfc\xf1\x94\xc6\xff\xd9\x1e:\xff\xffd\x86\xff\xcb\x1ap\xfe\xd7\\\x90\xff\xbd\xa1\xff\xde\x00z\xff\x96\x1c\xb7\xff\xc3w\xe3\xdd\x1d\x1f\xfd\xff\xd1\x82\xf3\x8e\x040\xf3\x98\x06\xa5\xa2t"
GRADIENT = bytes(x // 7 for x in range(1000))


def test_implementation():
    assert IMPLEMENTATION in ("packbits_codec.codec", "packbits_codec._codec")


@pytest.mark.parametrize(
    "size, expected",
    [(0, 0), (1, 2), (128, 129), (129, 131), (300, 303), (65535, 66047)],
)
def test_worst_case_size(size, expected):
    assert worst_case_size(size) == expected


@pytest.mark.parametrize(
    "data",
    [
        b"",
        RAW_IMAGE_3x3_8bit,
        EDGE_CASE_1,
        GRADIENT,
        bytes(bytearray(range(256))),
        b"\x00" * 100 + b"\xff" * 50,
    ],
)
def test_encode_decode(data):
    encoded = encode(data)
    assert decoded_size(encoded) == len(data)
    assert decode(encoded, len(data)) == data
    assert decode(encoded) == data


def test_encode_accepts_buffers():
    assert encode(bytearray(b"\x05\x05\x05")) == b"\xfe\x05"
    assert encode(memoryview(b"\x01\x02\x03\x04\x05")) == b"\x04\x01\x02\x03\x04\x05"


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"", 0),
        (b"\x80", 0),
        (b"\x04\x01\x02\x03\x04\x05", 5),
        (b"\x81\xaa\xff\xaa", 130),
        (b"\x7f\x01\x02", 2),
        (b"\x00\x01\xff", 1),
    ],
)
def test_decoded_size(data, expected):
    assert decoded_size(data) == expected


@pytest.mark.parametrize(
    "data, size",
    [
        # b'\x01\x01\x01\x01'
        (b"\xfd\x01", 3),
        (b"\xfd\x01", 5),
        # b'\x01\x02\x03'
        (b"\x02\x01\x02\x03", 2),
        (b"\x02\x01\x02\x03", 4),
    ],
)
def test_malicious(data, size, caplog):
    with caplog.at_level(logging.ERROR, logger="packbits_codec.compression"):
        with pytest.raises(PackBitsError):
            decode(data, size)
    assert "Expected %d bytes" % size in caplog.text


def test_packbits_error_is_value_error():
    with pytest.raises(ValueError):
        decode(b"\xfd\x01", 3)


@pytest.mark.parametrize(
    "start, size, expected",
    [
        (1, 3, b"\x02\x03\x04"),
        (0, 5, b"\x01\x02\x03\x04\x05"),
        (4, 3, b"\x05"),
        (7, 3, b""),
    ],
)
def test_decode_window(start, size, expected):
    assert decode_window(b"\x04\x01\x02\x03\x04\x05", start, size) == expected


def test_decode_window_matches_decode():
    encoded = encode(GRADIENT)
    for start in range(0, len(GRADIENT), 97):
        assert decode_window(encoded, start, 50) == GRADIENT[start : start + 50]


def test_iter_decode():
    rows = [GRADIENT[offset : offset + 100] for offset in range(0, len(GRADIENT), 100)]
    packed = b"".join(encode(row) for row in rows)
    assert list(iter_decode(packed, 100)) == rows
    assert b"".join(iter_decode(packed, 200)) == GRADIENT


def test_iter_decode_short_tail():
    packed = encode(b"\x01" * 8) + encode(b"\x02\x03")
    assert list(iter_decode(packed, 8)) == [b"\x01" * 8, b"\x02\x03"]


def test_iter_decode_empty():
    assert list(iter_decode(b"", 16)) == []


def test_iter_decode_invalid_chunk_size():
    with pytest.raises(ValueError):
        list(iter_decode(b"\x00\x01", 0))


@pytest.mark.parametrize("data", [RAW_IMAGE_3x3_8bit, EDGE_CASE_1, GRADIENT])
def test_pillow_decodes_output(data):
    image = Image.frombytes("L", (len(data), 1), encode(data), "packbits", "L")
    assert image.tobytes() == data


def test_decode_accepts_wide_buffers():
    packed = array.array("H")
    packed.frombytes(b"\x04\x01\x02\x03\x04\x05")
    assert decode(packed) == b"\x01\x02\x03\x04\x05"
    assert decode(packed, 5) == b"\x01\x02\x03\x04\x05"
    assert decode_window(packed, 1, 3) == b"\x02\x03\x04"
