"""An in-memory 32-bit drawing surface that can be saved as a BMP file."""

from __future__ import annotations

import os
import struct

from sinused.bitmap import write_bmp

WIDTH = 800
HEIGHT = 600
_BYTES_PER_PIXEL = 4


class Canvas:
    """A surface of 32-bit pixels; colours are given as 0xAARRGGBB.

    Pixels are stored as BGRA bytes on a little-endian surface and as ARGB
    bytes on a big-endian one. A new canvas is all zeros (transparent black).
    """

    def __init__(
        self, width: int = WIDTH, height: int = HEIGHT, big_endian: bool = False
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas size must be positive: {width}x{height}")
        self.width = width
        self.height = height
        self.big_endian = big_endian
        self.line_size = width * _BYTES_PER_PIXEL
        self.pixels = bytearray(self.line_size * height)

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Set one pixel; points outside the canvas are ignored."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        offset = y * self.line_size + x * _BYTES_PER_PIXEL
        layout = ">I" if self.big_endian else "<I"
        struct.pack_into(layout, self.pixels, offset, color & 0xFFFFFFFF)

    def draw_line(self, x0: int, y0: int, x1: int, y1: int, color: int) -> None:
        """Draw a straight line with the DDA algorithm, both ends included."""
        dx = x1 - x0
        dy = y1 - y0
        steps = max(abs(dx), abs(dy))
        if steps == 0:
            # A degenerate segment has no direction and draws nothing.
            return
        x_inc = dx / steps
        y_inc = dy / steps
        for i in range(steps + 1):
            self.put_pixel(int(x0 + i * x_inc), int(y0 + i * y_inc), color)

    def to_rgba(self) -> bytes:
        """Return the pixels as RGBA bytes, rows from top to bottom."""
        src = self.pixels
        if self.big_endian:
            alpha, red, green, blue = src[0::4], src[1::4], src[2::4], src[3::4]
        else:
            blue, green, red, alpha = src[0::4], src[1::4], src[2::4], src[3::4]
        out = bytearray(len(src))
        out[0::4] = red
        out[1::4] = green
        out[2::4] = blue
        out[3::4] = alpha
        return bytes(out)

    def save_bmp(self, path: str | os.PathLike) -> None:
        """Write the canvas to `path` as a 32-bit BMP file."""
        write_bmp(path, self.width, self.height, 4, self.to_rgba())