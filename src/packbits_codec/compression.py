"""
Bytes-level PackBits API.

The functions here allocate their own output and return ``bytes``. They are
built on top of the buffer codec, using the Cython version (``_codec.pyx``)
when it is compiled and the pure Python version otherwise.

Key functions:

- :py:func:`encode`: Compress bytes
- :py:func:`decode`: Decompress a whole stream
- :py:func:`decode_window`: Decompress a slice of the output
- :py:func:`iter_decode`: Decompress a stream in fixed-size chunks

Example usage::

    from packbits_codec.compression import encode, decode

    raw_data = b'\\x00' * 100 + b'\\xff' * 50
    compressed = encode(raw_data)
    assert decode(compressed, len(raw_data)) == raw_data

Performance notes:

- PackBits works best for data with large uniform areas
- Worst case: data without runs grows by one byte per 128 bytes
"""

import logging
from typing import Iterator, Optional

from packbits_codec.constants import (
    DecodeMode,
    decode_literal,
    decode_repeat,
    is_literal,
    is_repeat,
)
from packbits_codec.errors import PackBitsError

try:
    from packbits_codec import _codec as codec_impl  # type: ignore[attr-defined]
except ImportError:
    from packbits_codec import codec as codec_impl

logger = logging.getLogger(__name__)

#: Name of the codec module in use.
IMPLEMENTATION = codec_impl.__name__


def worst_case_size(size: int) -> int:
    """Destination size that always holds the packed form of ``size`` bytes."""
    return size + (size + 127) // 128


def encode(data: bytes) -> bytes:
    """encode(data) -> bytes

    Apple PackBits encoder.
    """
    view = memoryview(data).cast("B")
    if len(view) == 0:
        return b""

    dest = bytearray(worst_case_size(len(view)))
    used = codec_impl.packbits(view, dest)
    assert used, "destination of worst case size %d overflowed" % len(dest)
    return bytes(dest[:used])


def decoded_size(data: bytes) -> int:
    """
    Size of the decompressed stream, computed from the run headers.

    Runs truncated by the end of ``data`` are counted the way the decoder
    clamps them.
    """
    view = memoryview(data).cast("B")
    length = len(view)
    pos = 0
    size = 0
    while pos < length:
        header = view[pos]
        pos += 1
        if is_literal(header):
            count = min(decode_literal(header), length - pos)
            size += count
            pos += count
        elif is_repeat(header):
            if pos >= length:
                break
            size += decode_repeat(header)
            pos += 1
    return size


def decode(data: bytes, size: Optional[int] = None) -> bytes:
    """decode(data, size=None) -> bytes

    Apple PackBits decoder.

    :param data: packed bytes.
    :param size: expected decompressed size. When omitted the whole stream
        is decoded.
    :raise PackBitsError: if ``data`` does not decompress to ``size`` bytes.
    """
    total = decoded_size(data)
    if size is None:
        size = total
    elif total != size:
        logger.error("Expected %d bytes but stream holds %d bytes", size, total)
        raise PackBitsError("Expected %d bytes but decoded %d bytes" % (size, total))

    dest = bytearray(size)
    written = codec_impl.unpackbits(memoryview(data).cast("B"), dest)
    assert written == size, "len=%d, expected=%d" % (written, size)
    return bytes(dest)


def decode_window(data: bytes, start: int, size: int) -> bytes:
    """decode_window(data, start, size) -> bytes

    Decompress the output bytes ``[start, start + size)`` only. The result is
    shorter than ``size`` when the window extends past the end of the data.
    """
    dest = bytearray(size)
    written = codec_impl.unpackbits_window(memoryview(data).cast("B"), dest, start)
    return bytes(dest[:written])


def iter_decode(data: bytes, chunk_size: int) -> Iterator[bytes]:
    """
    Decompress ``data`` in chunks of ``chunk_size`` bytes.

    Each chunk consumes only as much source as it needs. Runs must not
    straddle chunk boundaries, which holds when the data was packed in
    pieces of a multiple of ``chunk_size``, e.g. row by row.

    :param data: packed bytes.
    :param chunk_size: decompressed size of each chunk; the last chunk may be
        shorter.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive, got %d" % chunk_size)

    view = memoryview(data).cast("B")
    offset = 0
    index = 0
    while offset < len(view):
        chunk = bytearray(chunk_size)
        remaining = view[offset:]
        used = codec_impl.unpackbits(remaining, chunk, mode=DecodeMode.FILL)
        if offset + used < len(view):
            size = chunk_size
        else:
            # Source ran out; the final chunk may be short.
            size = codec_impl.unpackbits(remaining, chunk)
        offset += used
        if size:
            logger.debug("  decoded chunk %d, len=%d", index, size)
            index += 1
            yield bytes(chunk[:size])
