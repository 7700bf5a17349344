"""
Constants of the PackBits wire format.

Every run in a packed stream starts with a single header byte:

- ``0..127``: ``header + 1`` literal bytes follow.
- ``129..255``: the following byte is repeated ``257 - header`` times.
- ``128``: no operation.
"""

from enum import IntEnum

#: Minimum run worth packing between literal blocks.
MIN_REPT = 3
#: Maximum run of a repeated byte.
MAX_REPT = 128
#: Maximum run of literal bytes.
MAX_DIFF = 128
#: Header byte that carries no data.
NOOP = 128


class DecodeMode(IntEnum):
    """
    Decoder return value selector.

    .. py:attribute:: BOUNDED

        Decode until the source or the destination is exhausted and return
        the number of destination bytes written.

    .. py:attribute:: FILL

        Use as much source as is needed to fill the destination and return
        the number of source bytes consumed. This supports unpacking a
        stream in chunks when chunk boundaries align with run boundaries.
    """

    BOUNDED = 0
    FILL = 1


def encode_literal(count: int) -> int:
    return count - 1


def encode_repeat(count: int) -> int:
    return 257 - count


def is_literal(header: int) -> bool:
    return header < NOOP


def is_repeat(header: int) -> bool:
    return header > NOOP


def decode_literal(header: int) -> int:
    return header + 1


def decode_repeat(header: int) -> int:
    return 257 - header
