"""Read back the bits hidden in an image of sine humps."""

from __future__ import annotations

import os

from PIL import Image

ONE_ROW = 401
ZERO_ROW = 599
_CHANNELS = 4
_LIT = 255


def get_bytes(data: bytes, width: int) -> str:
    """Recover the bits from RGBA pixel data of the given width.

    Each hump crosses its probe row once, so every second rising edge of
    the red channel on the upper row gives a '1' and on the lower row a '0'.
    """
    needed = (ZERO_ROW + 1) * width * _CHANNELS
    if len(data) < needed:
        raise ValueError(
            f"image too small to decode: {len(data)} bytes, {needed} needed"
        )
    row_bytes = width * _CHANNELS
    upper = data[ONE_ROW * row_bytes:(ONE_ROW + 1) * row_bytes:_CHANNELS]
    lower = data[ZERO_ROW * row_bytes:(ZERO_ROW + 1) * row_bytes:_CHANNELS]

    bits = []
    ones = zeros = 0
    old_one = old_zero = 0
    for red_one, red_zero in zip(upper, lower):
        if red_one == _LIT and old_one == 0:
            ones += 1
            if ones % 2 == 0:
                bits.append("1")
        if red_zero == _LIT and old_zero == 0:
            zeros += 1
            if zeros % 2 == 0:
                bits.append("0")
        old_one, old_zero = red_one, red_zero
    return "".join(bits)


def decode(path: str | os.PathLike) -> str:
    """Load the image at `path` and return the bits it encodes."""
    with Image.open(path) as img:
        rgba = img.convert("RGBA")
        width, height = rgba.size
        if height <= ZERO_ROW:
            raise ValueError(
                f"image must be at least {ZERO_ROW + 1} pixels high, got {height}"
            )
        return get_bytes(rgba.tobytes(), width)