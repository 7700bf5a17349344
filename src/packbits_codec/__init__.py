"""
packbits-codec: PackBits run-length encoding as used by MacPaint, TIFF and PSD.

PackBits is a simple byte-oriented run-length scheme. Every run of up to 128
bytes starts with a single header byte telling whether the run is a block of
literal bytes or a single byte repeated. There is no stream header, no
dictionary and no state carried between calls.

Basic usage::

    from packbits_codec import encode, decode

    packed = encode(b'\\xaa' * 130)
    assert decode(packed) == b'\\xaa' * 130

Buffer usage, writing into caller-owned memory::

    from packbits_codec import packbits, unpackbits_window

    dest = bytearray(8)
    used = packbits(b'\\x01\\x02\\x03\\x04\\x05', dest)
    window = bytearray(3)
    unpackbits_window(dest, window, 1, src_count=used)  # b'\\x02\\x03\\x04'

Architecture:

- :py:mod:`packbits_codec.codec`: Buffer codec, pure Python
- :py:mod:`packbits_codec.compression`: Bytes API on the fastest codec
- :py:mod:`packbits_codec.rows`: Row-wise packing with a byte-count table
"""

from packbits_codec.compression import (
    IMPLEMENTATION,
    codec_impl,
    decode,
    decode_window,
    decoded_size,
    encode,
    iter_decode,
    worst_case_size,
)
from packbits_codec.constants import DecodeMode
from packbits_codec.errors import PackBitsError
from packbits_codec.rows import PackedRows, decode_rows, encode_rows
from packbits_codec.version import __version__

packbits = codec_impl.packbits
unpackbits = codec_impl.unpackbits
unpackbits_window = codec_impl.unpackbits_window

__all__ = [
    "DecodeMode",
    "IMPLEMENTATION",
    "PackBitsError",
    "PackedRows",
    "__version__",
    "decode",
    "decode_rows",
    "decode_window",
    "decoded_size",
    "encode",
    "encode_rows",
    "iter_decode",
    "packbits",
    "unpackbits",
    "unpackbits_window",
    "worst_case_size",
]
