"""
Scanline packing with a byte-count table.

PSD and TIFF pack image channels row by row. Each row is packed on its own,
and the packed rows are preceded by a big-endian table holding the packed
size of every row (2-byte counts for version 1, 4-byte counts for version 2,
matching PSD and PSB files). Packing rows independently keeps run
boundaries aligned with row boundaries, so single rows or windows across
rows can be unpacked without touching the rest of the data.
"""

import array
import io
import logging
from typing import Any, BinaryIO, List, TypeVar

from attrs import define, field

from packbits_codec.bin_utils import read_be_array, trimmed_repr, write_be_array
from packbits_codec.compression import decode, decode_window, encode
from packbits_codec.errors import PackBitsError
from packbits_codec.validators import in_, range_

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="PackedRows")

VERSIONS = (1, 2)


def _count_format(version: int) -> str:
    if version not in VERSIONS:
        raise ValueError("Invalid version %r" % version)
    return ("H", "I")[version - 1]


@define
class PackedRows:
    """
    Packed rows and their byte-count table.

    .. py:attribute:: version

        1 for 2-byte counts, 2 for 4-byte counts.

    .. py:attribute:: byte_counts

        `list` of packed sizes, one per row.

    .. py:attribute:: data

        `bytes` of the concatenated packed rows.
    """

    version: int = field(default=1, validator=in_(VERSIONS))
    byte_counts: List[int] = field(
        factory=list, converter=list, validator=range_(0, 0xFFFFFFFF)
    )
    data: bytes = field(default=b"", converter=bytes, repr=trimmed_repr)

    @byte_counts.validator
    def _check_counts(self, attribute: Any, value: List[int]) -> None:
        limit = (0xFFFF, 0xFFFFFFFF)[self.version - 1]
        for count in value:
            if count > limit:
                raise ValueError(
                    "Byte count %d does not fit version %d table" % (count, self.version)
                )

    @data.validator
    def _check_data(self, attribute: Any, value: bytes) -> None:
        total = sum(self.byte_counts)
        if total > len(value):
            raise PackBitsError(
                "Byte counts total %d but only %d bytes of data" % (total, len(value))
            )

    @classmethod
    def read(cls: type[T], fp: BinaryIO, height: int, version: int = 1) -> T:
        fmt = _count_format(version)
        byte_counts = read_be_array(fmt, height, fp)
        data = fp.read(sum(byte_counts))
        logger.debug("  read packed rows, height=%d, len=%d" % (height, len(data)))
        return cls(version, byte_counts, data)

    def write(self, fp: BinaryIO) -> int:
        arr = array.array(_count_format(self.version), self.byte_counts)
        written = write_be_array(fp, arr)
        written += fp.write(self.data)
        logger.debug("  wrote packed rows, len=%d" % written)
        return written

    @classmethod
    def frombytes(cls: type[T], data: bytes, *args: Any, **kwargs: Any) -> T:
        with io.BytesIO(data) as f:
            return cls.read(f, *args, **kwargs)

    def tobytes(self) -> bytes:
        with io.BytesIO() as f:
            self.write(f)
            return f.getvalue()

    @classmethod
    def pack(
        cls: type[T], data: bytes, row_size: int, height: int, version: int = 1
    ) -> T:
        """
        Pack raw data row by row.

        :param data: raw bytes holding at least ``row_size * height`` bytes.
        :param row_size: bytes per row.
        :param height: number of rows.
        :param version: byte-count table version.
        """
        if row_size <= 0:
            raise ValueError("row_size must be positive, got %d" % row_size)
        view = memoryview(data).cast("B")
        if len(view) < row_size * height:
            raise ValueError(
                "Expected %d bytes of raw data, got %d" % (row_size * height, len(view))
            )
        rows = [
            encode(view[offset : offset + row_size])
            for offset in range(0, row_size * height, row_size)
        ]
        logger.debug("  packed %d rows, len=%d" % (height, sum(map(len, rows))))
        return cls(version, map(len, rows), b"".join(rows))

    def offsets(self) -> List[int]:
        """Start offset of each packed row in :py:attr:`data`."""
        offsets = []
        position = 0
        for count in self.byte_counts:
            offsets.append(position)
            position += count
        return offsets

    def _packed_row(self, index: int, offset: int) -> bytes:
        return self.data[offset : offset + self.byte_counts[index]]

    def get_row(self, index: int, row_size: int) -> bytes:
        """Unpack a single row."""
        offset = self.offsets()[index]
        return decode(self._packed_row(index, offset), row_size)

    def unpack(self, row_size: int) -> bytes:
        """Unpack all rows."""
        return b"".join(
            decode(self._packed_row(index, offset), row_size)
            for index, offset in enumerate(self.offsets())
        )

    def get_window(self, start: int, size: int, row_size: int) -> bytes:
        """
        Unpack ``size`` bytes starting at ``start`` of the raw data.

        Only the rows overlapping the window are decoded, and only their
        overlapping parts are kept.
        """
        if row_size <= 0:
            raise ValueError("row_size must be positive, got %d" % row_size)
        if start < 0:
            raise ValueError("start must not be negative, got %d" % start)
        offsets = self.offsets()
        index, column = divmod(start, row_size)
        result = bytearray()
        while len(result) < size and index < len(self.byte_counts):
            wanted = min(row_size - column, size - len(result))
            piece = decode_window(self._packed_row(index, offsets[index]), column, wanted)
            if len(piece) != wanted:
                raise PackBitsError(
                    "Row %d holds %d bytes at offset %d, expected %d"
                    % (index, len(piece), column, wanted)
                )
            result += piece
            index += 1
            column = 0
        return bytes(result)


def encode_rows(data: bytes, row_size: int, height: int, version: int = 1) -> bytes:
    """
    Pack ``height`` rows of ``row_size`` bytes with a leading byte-count
    table.
    """
    return PackedRows.pack(data, row_size, height, version).tobytes()


def decode_rows(data: bytes, row_size: int, height: int, version: int = 1) -> bytes:
    """
    Unpack data produced by :py:func:`encode_rows`.

    :raise PackBitsError: if the table or any row is inconsistent with the
        given geometry.
    """
    try:
        table_size = height * array.array(_count_format(version)).itemsize
        if len(data) < table_size:
            raise PackBitsError(
                "Byte-count table needs %d bytes, got %d" % (table_size, len(data))
            )
        return PackedRows.frombytes(data, height, version).unpack(row_size)
    except PackBitsError as e:
        logger.error(f"An error occurred during PackBits decoding: {e}")
        logger.info(
            f"Unpacking rows failed: {row_size=} {height=} {version=} size={len(data)}",
            exc_info=True,
        )
        raise
