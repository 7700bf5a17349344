"""
Pure Python PackBits codec over caller-supplied buffers.

This module provides the reference implementation of the Apple PackBits
run-length encoding used by MacPaint, TIFF and PSD files. All functions work
on buffers owned by the caller and never allocate output: the encoder and the
decoders write into ``dest`` and report how much of it they used.

**Note**: This is the fallback implementation. A faster Cython version is
available in ``_codec.pyx`` and is picked up by :py:mod:`packbits_codec` when
compiled. Both produce identical output.

Algorithm overview:

Every run starts with a header byte:

- Values 0-127: Copy the next (n+1) literal bytes
- Values 129-255: Repeat the next byte (257-n) times
- Value 128: No-op (never emitted by the encoder)

Encoding example::

    Input:  [A, A, A, B, C, C, C, C]
    Output: [254, A, 0, B, 253, C]
            (repeat A 3x, copy B 1x, repeat C 4x)

A repeated pair in the middle of literal data is kept literal, since the
run header would cost as much as it saves. A pair that starts a literal
block is still packed as a run.

Functions:

- :py:func:`packbits`: Compress ``src`` into ``dest``
- :py:func:`unpackbits`: Decompress ``src`` into ``dest``
- :py:func:`unpackbits_window`: Decompress a window of the output only

Buffers are any objects supporting the buffer protocol. Destinations must be
writable and C-contiguous, e.g. ``bytearray`` or a NumPy ``uint8`` array.
"""

from typing import Optional, Tuple

from packbits_codec.constants import (
    MAX_DIFF,
    MAX_REPT,
    MIN_REPT,
    DecodeMode,
    decode_literal,
    decode_repeat,
    encode_literal,
    encode_repeat,
    is_literal,
    is_repeat,
)


def _check_count(count: Optional[int], size: int, name: str) -> int:
    if count is None:
        return size
    if count < 0 or count > size:
        raise ValueError("%s must be in range [0, %d], got %d" % (name, size, count))
    return count


def _source(src, count: Optional[int]) -> Tuple[memoryview, int]:
    view = memoryview(src).cast("B")
    return view, _check_count(count, len(view), "src_count")


def _destination(dest, limit: Optional[int]) -> Tuple[memoryview, int]:
    view = memoryview(dest).cast("B")
    if view.readonly:
        raise TypeError("destination buffer is read-only")
    return view, _check_count(limit, len(view), "dest_limit")


def packbits(src, dest, src_count: Optional[int] = None, dest_limit: Optional[int] = None) -> int:
    """packbits(src, dest, src_count=None, dest_limit=None) -> int

    Compress ``src`` into ``dest``.

    Compression is not guaranteed if there are not enough runs. Data without
    any run costs one extra byte per 128 bytes of source, so ``dest`` must
    hold at least ``src_count + (src_count + 127) // 128`` bytes for
    unconditional compression.

    :param src: source buffer.
    :param dest: writable destination buffer.
    :param src_count: number of source bytes to pack, defaults to
        ``len(src)``.
    :param dest_limit: usable size of ``dest``, defaults to ``len(dest)``.
    :return: number of destination bytes used, or 0 when ``src_count`` is 0
        or ``dest`` is too small. On 0 the content of ``dest`` is incomplete
        and must not be used.
    """
    data, src_count = _source(src, src_count)
    out, dest_limit = _destination(dest, dest_limit)

    if src_count == 0:
        return 0

    in_run = False
    dest_count = 0
    pending = 1  # Bytes looked at but not yet output
    pending_start = 0
    run_start = 0  # Distance into pending bytes that a run starts
    last = data[0]

    for pos in range(1, src_count):
        curr = data[pos]
        pending += 1
        if in_run:
            if curr != last or pending > MAX_REPT:
                # End of run or maximum run length reached.
                if dest_count + 2 > dest_limit:
                    return 0
                out[dest_count] = encode_repeat(pending - 1)
                out[dest_count + 1] = last
                dest_count += 2
                pending = 1
                pending_start = pos
                run_start = 0
                in_run = False
        elif pending > MAX_DIFF:
            # Output MAX_DIFF literal bytes leaving one pending.
            if dest_count + 1 + MAX_DIFF > dest_limit:
                return 0
            out[dest_count] = encode_literal(MAX_DIFF)
            out[dest_count + 1 : dest_count + 1 + MAX_DIFF] = data[
                pending_start : pending_start + MAX_DIFF
            ]
            dest_count += 1 + MAX_DIFF
            pending_start += MAX_DIFF
            pending -= MAX_DIFF
            run_start = pending - 1
        elif curr == last:
            if pending - run_start >= MIN_REPT or run_start == 0:
                if run_start != 0:
                    # Flush literal bytes preceding the run.
                    if dest_count + 1 + run_start > dest_limit:
                        return 0
                    out[dest_count] = encode_literal(run_start)
                    out[dest_count + 1 : dest_count + 1 + run_start] = data[
                        pending_start : pending_start + run_start
                    ]
                    dest_count += 1 + run_start
                    pending_start += run_start
                pending -= run_start
                in_run = True
        else:
            run_start = pending - 1
        last = curr

    if in_run:
        if dest_count + 2 > dest_limit:
            return 0
        out[dest_count] = encode_repeat(pending)
        out[dest_count + 1] = last
        dest_count += 2
    else:
        if dest_count + 1 + pending > dest_limit:
            return 0
        out[dest_count] = encode_literal(pending)
        out[dest_count + 1 : dest_count + 1 + pending] = data[
            pending_start : pending_start + pending
        ]
        dest_count += 1 + pending
    return dest_count


def unpackbits(
    src,
    dest,
    src_count: Optional[int] = None,
    dest_limit: Optional[int] = None,
    mode: DecodeMode = DecodeMode.BOUNDED,
) -> int:
    """unpackbits(src, dest, src_count=None, dest_limit=None, mode=DecodeMode.BOUNDED) -> int

    Decompress ``src`` into ``dest``.

    Unpacking stops when either the source runs out or the destination is
    full. Runs that do not fit are truncated silently, so callers that need
    to detect malformed streams must check the returned size themselves.

    :param src: packed source buffer.
    :param dest: writable destination buffer.
    :param src_count: number of packed bytes, defaults to ``len(src)``.
    :param dest_limit: usable size of ``dest``, defaults to ``len(dest)``.
    :param mode: see :py:class:`~packbits_codec.constants.DecodeMode`.
    :return: destination bytes written for ``DecodeMode.BOUNDED``, source
        bytes consumed for ``DecodeMode.FILL``.
    """
    data, src_count = _source(src, src_count)
    out, dest_limit = _destination(dest, dest_limit)

    src_pos = 0
    dest_pos = 0
    while src_pos < src_count and dest_pos < dest_limit:
        header = data[src_pos]
        src_pos += 1
        if is_literal(header):
            count = min(
                decode_literal(header), dest_limit - dest_pos, src_count - src_pos
            )
            if count:
                out[dest_pos : dest_pos + count] = data[src_pos : src_pos + count]
                src_pos += count
                dest_pos += count
        elif is_repeat(header):
            count = min(decode_repeat(header), dest_limit - dest_pos)
            if src_pos < src_count:
                out[dest_pos : dest_pos + count] = bytes((data[src_pos],)) * count
                src_pos += 1
                dest_pos += count

    if mode == DecodeMode.FILL:
        return src_pos
    return dest_pos


def unpackbits_window(
    src,
    dest,
    start: int,
    src_count: Optional[int] = None,
    dest_limit: Optional[int] = None,
) -> int:
    """unpackbits_window(src, dest, start, src_count=None, dest_limit=None) -> int

    Decompress only the output bytes ``[start, start + dest_limit)``.

    There are no sectors in packed data, so every run before the window is
    still decoded to track the output position, but its bytes are
    discarded. Useful when only a slice of a large image is needed.

    :param src: packed source buffer.
    :param dest: writable destination buffer receiving the window.
    :param start: offset of the window in the decompressed output.
    :param src_count: number of packed bytes, defaults to ``len(src)``.
    :param dest_limit: window size, defaults to ``len(dest)``.
    :return: number of destination bytes written; 0 if the window lies
        entirely past the decompressed data.
    """
    if start < 0:
        raise ValueError("start must not be negative, got %d" % start)
    data, src_count = _source(src, src_count)
    out, dest_limit = _destination(dest, dest_limit)

    window_end = start + dest_limit
    src_pos = 0
    written = 0
    position = 0  # Absolute position in the decompressed output
    while src_pos < src_count and written < dest_limit:
        header = data[src_pos]
        src_pos += 1
        if is_literal(header):
            count = min(decode_literal(header), src_count - src_pos)
            lo = max(position, start)
            hi = min(position + count, window_end)
            if lo < hi:
                offset = src_pos + lo - position
                out[written : written + hi - lo] = data[offset : offset + hi - lo]
                written += hi - lo
            src_pos += count
            position += count
        elif is_repeat(header):
            if src_pos >= src_count:
                break
            count = decode_repeat(header)
            lo = max(position, start)
            hi = min(position + count, window_end)
            if lo < hi:
                out[written : written + hi - lo] = bytes((data[src_pos],)) * (hi - lo)
                written += hi - lo
            src_pos += 1
            position += count
    return written
