import array
import io

import pytest

from packbits_codec.bin_utils import (
    be_array_to_bytes,
    read_be_array,
    trimmed_repr,
    write_be_array,
)


@pytest.mark.parametrize(
    "fmt, values, expected",
    [
        ("H", [1, 258], b"\x00\x01\x01\x02"),
        ("I", [1, 0x01020304], b"\x00\x00\x00\x01\x01\x02\x03\x04"),
    ],
)
def test_be_array(fmt, values, expected):
    arr = array.array(fmt, values)
    assert be_array_to_bytes(arr) == expected
    assert arr.tolist() == values

    with io.BytesIO() as f:
        assert write_be_array(f, arr) == len(expected)
        f.seek(0)
        assert read_be_array(fmt, len(values), f).tolist() == values


def test_trimmed_repr():
    assert trimmed_repr(b"\x00" * 4) == repr(b"\x00" * 4)
    assert trimmed_repr(b"\x00" * 40).endswith(" ... =40'")
