"""Draw a string of bits as a chain of half-wave sine humps on a canvas."""

from __future__ import annotations

import math

from sinused.canvas import WIDTH, Canvas

BUFFER_SIZE = 1024
PI = 3.14
ORIGIN_X = 20
AXIS_Y = 500
AMPLITUDE = 100
STEP = 0.05
TICK_HALF_LENGTH = 10
WAVE_COLOR = 0x00FF0000
AXIS_COLOR = 0x0000FF00


def chunks_total(data: str) -> int:
    """Number of chunks the horizontal axis is divided into.

    Counts every character of the first BUFFER_SIZE that is not a newline,
    plus one for the end of the data when it is shorter than the buffer.
    """
    head = data[:BUFFER_SIZE]
    count = sum(1 for ch in head if ch != "\n")
    if len(head) < BUFFER_SIZE:
        count += 1
    return count


def draw_sine_chunk(
    canvas: Canvas, start_x: int, chunk_size: int, zero_y: int, flag: bool
) -> None:
    """Draw one full sine period folded above (flag set) or below the axis."""
    old_x = start_x
    old_y = zero_y
    x = 0.0
    while x < chunk_size:
        y = int(-AMPLITUDE * math.sin(2 * PI * x / chunk_size))
        if flag and y > 0:
            y = -y
        if not flag and y < 0:
            y = -y
        new_x = int(x + start_x)
        new_y = y + zero_y
        canvas.draw_line(old_x, old_y, new_x, new_y, WAVE_COLOR)
        old_x, old_y = new_x, new_y
        x += STEP


def fill(canvas: Canvas, x: int, y: int) -> None:
    """Draw a short vertical tick centred on (x, y)."""
    for i in range(TICK_HALF_LENGTH):
        canvas.put_pixel(x, y + i, WAVE_COLOR)
        canvas.put_pixel(x, y - i, WAVE_COLOR)


def encode(canvas: Canvas, bits: str) -> None:
    """Draw the axes and one sine chunk for every character of `bits`.

    A '1' is drawn above the axis and anything else below it. A newline
    is skipped together with the character after it, which is drawn as 0.
    """
    chunk_width = (WIDTH - ORIGIN_X) // chunks_total(bits)
    canvas.draw_line(ORIGIN_X, AXIS_Y, canvas.width, AXIS_Y, AXIS_COLOR)
    canvas.draw_line(ORIGIN_X, 0, ORIGIN_X, AXIS_Y, AXIS_COLOR)

    x = ORIGIN_X
    chars = iter(bits)
    for ch in chars:
        flag = ch == "1"
        if ch == "\n":
            next(chars, None)
        draw_sine_chunk(canvas, x, chunk_width, AXIS_Y, flag)
        fill(canvas, x, AXIS_Y)
        x += chunk_width