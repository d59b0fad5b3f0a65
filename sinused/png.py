"""PNG image writer with per-row adaptive filtering."""

from __future__ import annotations

import os
import struct

from sinused.deflate import crc32, zlib_compress

_SIGNATURE = bytes((137, 80, 78, 71, 13, 10, 26, 10))
_COLOR_TYPES = {1: 0, 2: 4, 3: 2, 4: 6}
_FILTER_COUNT = 5


def _paeth(a: int, b: int, c: int) -> int:
    p = a + b - c
    pa, pb, pc = abs(p - a), abs(p - b), abs(p - c)
    if pa <= pb and pa <= pc:
        return a
    if pb <= pc:
        return b
    return c


def _filter_row(kind: int, row: bytes, prior: bytes, bpp: int) -> bytes:
    """Apply PNG filter `kind` to `row`, given the row above it."""
    if kind == 0:
        return row
    size = len(row)
    left = bytes(bpp) + row[: max(size - bpp, 0)]
    if kind == 1:
        return bytes((c - a) & 0xFF for c, a in zip(row, left))
    if kind == 2:
        return bytes((c - b) & 0xFF for c, b in zip(row, prior))
    if kind == 3:
        return bytes((c - ((a + b) >> 1)) & 0xFF for c, a, b in zip(row, left, prior))
    upper_left = bytes(bpp) + prior[: max(size - bpp, 0)]
    return bytes(
        (c - _paeth(a, b, ul)) & 0xFF
        for c, a, b, ul in zip(row, left, prior, upper_left)
    )


def _cost(filtered: bytes) -> int:
    """Sum of the absolute values of the bytes read as signed."""
    return sum(v if v < 128 else 256 - v for v in filtered)


def _best_filter(row: bytes, prior: bytes, bpp: int) -> tuple[int, bytes]:
    best_kind, best_data, best_cost = 0, row, None
    for kind in range(_FILTER_COUNT):
        filtered = _filter_row(kind, row, prior, bpp)
        cost = _cost(filtered)
        if best_cost is None or cost < best_cost:
            best_kind, best_data, best_cost = kind, filtered, cost
    return best_kind, best_data


def _chunk(tag: bytes, payload: bytes) -> bytes:
    body = tag + payload
    return struct.pack(">I", len(payload)) + body + struct.pack(">I", crc32(body))


def encode_png(
    pixels,
    width: int,
    height: int,
    components: int,
    stride: int = 0,
    compression_level: int = 8,
    force_filter: int = -1,
    flip_vertically: bool = False,
) -> bytes:
    """Return a PNG file holding the given interleaved 8-bit pixels.

    `stride` is the distance in bytes between the starts of two rows; 0
    means rows are packed. A `force_filter` of 0..4 uses that filter on
    every row; any other value picks the cheapest filter row by row.
    """
    if width < 0 or height < 0:
        raise ValueError(f"image dimensions must not be negative: {width}x{height}")
    if components not in _COLOR_TYPES:
        raise ValueError(f"components must be between 1 and 4, got {components}")
    row_size = width * components
    if stride == 0:
        stride = row_size
    if stride < row_size:
        raise ValueError(f"stride {stride} is shorter than a row of {row_size} bytes")
    raw = bytes(pixels)
    if height and len(raw) < stride * (height - 1) + row_size:
        raise ValueError(f"pixel data holds {len(raw)} bytes, too few for the image")
    if not 0 <= force_filter < _FILTER_COUNT:
        force_filter = -1

    order = range(height - 1, -1, -1) if flip_vertically else range(height)
    filtered = bytearray()
    prior = bytes(row_size)
    for r in order:
        row = raw[r * stride:r * stride + row_size]
        if force_filter >= 0:
            kind, line = force_filter, _filter_row(force_filter, row, prior, components)
        else:
            kind, line = _best_filter(row, prior, components)
        filtered.append(kind)
        filtered += line
        prior = row

    compressed = zlib_compress(bytes(filtered), compression_level)
    header = struct.pack(
        ">IIBBBBB",
        width & 0xFFFFFFFF,
        height & 0xFFFFFFFF,
        8,
        _COLOR_TYPES[components],
        0,
        0,
        0,
    )
    return (
        _SIGNATURE
        + _chunk(b"IHDR", header)
        + _chunk(b"IDAT", compressed)
        + _chunk(b"IEND", b"")
    )


def write_png(
    path: str | os.PathLike,
    pixels,
    width: int,
    height: int,
    components: int,
    stride: int = 0,
    compression_level: int = 8,
    force_filter: int = -1,
    flip_vertically: bool = False,
) -> None:
    """Write the pixels to `path` as a PNG file."""
    encoded = encode_png(
        pixels,
        width,
        height,
        components,
        stride,
        compression_level,
        force_filter,
        flip_vertically,
    )
    with open(path, "wb") as fh:
        fh.write(encoded)