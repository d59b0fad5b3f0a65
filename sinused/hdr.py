"""Radiance RGBE (.hdr) image writer with per-component run-length encoding."""

from __future__ import annotations

import math
import os
import struct
from collections.abc import Iterator, Sequence

_HEADER = b"#?RADIANCE\n# Written by sinused\nFORMAT=32-bit_rle_rgbe\n"
_MAX_DUMP = 128
_MAX_RUN = 127
_RLE_MIN_WIDTH = 8
_RLE_MAX_WIDTH = 32768


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


_TINY = _f32(1e-32)


def _to_byte(value: float) -> int:
    return int(value) & 0xFF


def _linear_to_rgbe(red: float, green: float, blue: float) -> bytes:
    """Convert one linear RGB triple to shared-exponent RGBE bytes."""
    maxcomp = max(red, max(green, blue))
    if maxcomp < _TINY:
        return bytes(4)
    mantissa, exponent = math.frexp(maxcomp)
    normalize = _f32(_f32(mantissa) * 256.0 / maxcomp)
    return bytes(
        (
            _to_byte(_f32(red * normalize)),
            _to_byte(_f32(green * normalize)),
            _to_byte(_f32(blue * normalize)),
            (exponent + 128) & 0xFF,
        )
    )


def _pixels(scanline: Sequence[float], components: int) -> Iterator[bytes]:
    for start in range(0, len(scanline), components):
        if components >= 3:
            red, green, blue = scanline[start:start + 3]
        else:
            red = green = blue = scanline[start]
        yield _linear_to_rgbe(red, green, blue)


def _rle_component(values: bytes) -> bytes:
    """Run-length encode one component plane of a scanline."""
    width = len(values)
    out = bytearray()
    x = 0
    while x < width:
        r = x
        while r + 2 < width:
            if values[r] == values[r + 1] == values[r + 2]:
                break
            r += 1
        if r + 2 >= width:
            r = width
        while x < r:
            length = min(r - x, _MAX_DUMP)
            out.append(length)
            out += values[x:x + length]
            x += length
        if r + 2 < width:
            while r < width and values[r] == values[x]:
                r += 1
            while x < r:
                length = min(r - x, _MAX_RUN)
                out.append(length + 128)
                out.append(values[x])
                x += length
    return bytes(out)


def _scanline(width: int, components: int, scanline: Sequence[float]) -> bytes:
    rgbe = list(_pixels(scanline, components))
    if width < _RLE_MIN_WIDTH or width >= _RLE_MAX_WIDTH:
        return b"".join(rgbe)
    out = bytearray((2, 2, (width & 0xFF00) >> 8, width & 0x00FF))
    for channel in range(4):
        out += _rle_component(bytes(px[channel] for px in rgbe))
    return bytes(out)


def encode_hdr(
    width: int,
    height: int,
    components: int,
    data,
    flip_vertically: bool = False,
) -> bytes:
    """Return a Radiance HDR file holding the given linear float pixels.

    Alpha, if present, is discarded; grey values are replicated to RGB.
    """
    if data is None:
        raise ValueError("no pixel data given")
    if width <= 0 or height <= 0:
        raise ValueError(f"image dimensions must be positive: {width}x{height}")
    if components not in (1, 2, 3, 4):
        raise ValueError(f"components must be between 1 and 4, got {components}")
    values = [_f32(float(v)) for v in data]
    stride = width * components
    if len(values) < stride * height:
        raise ValueError(
            f"pixel data holds {len(values)} values, {stride * height} needed"
        )

    out = bytearray(_HEADER)
    out += (
        f"EXPOSURE=          1.0000000000000\n\n-Y {height} +X {width}\n"
    ).encode("ascii")
    for i in range(height):
        row = height - 1 - i if flip_vertically else i
        out += _scanline(width, components, values[row * stride:(row + 1) * stride])
    return bytes(out)


def write_hdr(
    path: str | os.PathLike,
    width: int,
    height: int,
    components: int,
    data,
    flip_vertically: bool = False,
) -> None:
    """Write the pixels to `path` as a Radiance HDR file."""
    encoded = encode_hdr(width, height, components, data, flip_vertically)
    with open(path, "wb") as fh:
        fh.write(encoded)