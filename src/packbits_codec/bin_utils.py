"""
Binary helpers for big-endian byte-count tables.
"""

import array
import sys
from typing import BinaryIO


def read_be_array(fmt: str, count: int, fp: BinaryIO) -> array.array:
    """
    Reads an array from a file with big-endian data.
    """
    arr = array.array(fmt)
    data = fp.read(count * arr.itemsize)
    assert len(data) == count * arr.itemsize, (len(data), count * arr.itemsize)
    arr.frombytes(data)
    return fix_byteorder(arr)


def write_be_array(fp: BinaryIO, arr: array.array) -> int:
    """
    Writes an array to a file with big-endian data.
    """
    return fp.write(be_array_to_bytes(arr))


def fix_byteorder(arr: array.array) -> array.array:
    """
    Fixes the byte order of the array (assuming it was read
    from a Big Endian data).
    """
    if sys.byteorder == "little":
        arr.byteswap()
    return arr


def be_array_to_bytes(arr: array.array) -> bytes:
    """
    Writes an array to bytestring with big-endian data.
    """
    data = fix_byteorder(array.array(arr.typecode, arr))
    return data.tobytes()


def trimmed_repr(data: bytes, trim_length: int = 30) -> str:
    if isinstance(data, bytes):
        if len(data) > trim_length:
            return repr(data[:trim_length] + b" ... =" + str(len(data)).encode("ascii"))
    return repr(data)
