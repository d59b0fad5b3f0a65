"""Uncompressed BMP and (optionally run-length encoded) TGA image writers."""

from __future__ import annotations

import os
import struct
from collections.abc import Iterator, Sequence

_BMP_FILE_HEADER_SIZE = 14
_BMP_INFO_HEADER_SIZE = 40
_BMP_V4_HEADER_SIZE = 108
_TGA_MAX_PACKET = 128


def _validate(width: int, height: int, components: int, data) -> bytes:
    if width < 0 or height < 0:
        raise ValueError(f"image dimensions must not be negative: {width}x{height}")
    if components not in (1, 2, 3, 4):
        raise ValueError(f"components must be between 1 and 4, got {components}")
    raw = bytes(data)
    needed = width * height * components
    if len(raw) < needed:
        raise ValueError(f"pixel data holds {len(raw)} bytes, {needed} needed")
    return raw


def _rows(
    data: bytes, width: int, height: int, components: int, bottom_up: bool
) -> Iterator[list[bytes]]:
    """Yield rows of pixels, each pixel as a bytes object of `components` bytes."""
    stride = width * components
    order = range(height - 1, -1, -1) if bottom_up else range(height)
    for j in order:
        row = data[j * stride:(j + 1) * stride]
        yield [row[i:i + components] for i in range(0, stride, components)]


def _pixel_bytes(
    pixel: Sequence[int], components: int, write_alpha: bool, expand_mono: bool
) -> bytes:
    """Encode one pixel in BGR(A) or grey(A) order."""
    if components <= 2:
        out = bytes((pixel[0],) * 3) if expand_mono else bytes((pixel[0],))
    else:
        out = bytes((pixel[2], pixel[1], pixel[0]))
    if write_alpha:
        out += bytes((pixel[components - 1],))
    return out


def encode_bmp(
    width: int,
    height: int,
    components: int,
    data,
    flip_vertically: bool = False,
) -> bytes:
    """Return a BMP file holding the given interleaved 8-bit pixels.

    Four-component data is stored as 32-bit BGRA with a V4 header; anything
    else becomes 24-bit BGR, with grey values expanded to all three channels.
    """
    raw = _validate(width, height, components, data)

    if components != 4:
        pad = (-width * 3) & 3
        offset = _BMP_FILE_HEADER_SIZE + _BMP_INFO_HEADER_SIZE
        file_size = (offset + (width * 3 + pad) * height) & 0xFFFFFFFF
        header = struct.pack(
            "<2sIHHIIiiHHIIIIII",
            b"BM", file_size, 0, 0, offset,
            _BMP_INFO_HEADER_SIZE, width, height, 1, 24,
            0, 0, 0, 0, 0, 0,
        )
        write_alpha = False
    else:
        pad = 0
        offset = _BMP_FILE_HEADER_SIZE + _BMP_V4_HEADER_SIZE
        file_size = (offset + width * height * 4) & 0xFFFFFFFF
        header = struct.pack(
            "<2sIHHIIiiHHIIIIIIIIIII" + "I" * 12,
            b"BM", file_size, 0, 0, offset,
            _BMP_V4_HEADER_SIZE, width, height, 1, 32,
            3, 0, 0, 0, 0, 0,
            0x00FF0000, 0x0000FF00, 0x000000FF, 0xFF000000,
            0,
            *([0] * 12),
        )
        write_alpha = True

    out = bytearray(header)
    padding = bytes(pad)
    for row in _rows(raw, width, height, components, bottom_up=not flip_vertically):
        for pixel in row:
            out += _pixel_bytes(pixel, components, write_alpha, expand_mono=True)
        out += padding
    return bytes(out)


def write_bmp(
    path: str | os.PathLike,
    width: int,
    height: int,
    components: int,
    data,
    flip_vertically: bool = False,
) -> None:
    """Write the pixels to `path` as a BMP file."""
    encoded = encode_bmp(width, height, components, data, flip_vertically)
    with open(path, "wb") as fh:
        fh.write(encoded)


def _tga_packets(row: list[bytes]) -> Iterator[tuple[bool, int, int]]:
    """Split a row into packets: (is_raw, start index, length)."""
    width = len(row)
    i = 0
    while i < width:
        length = 1
        raw = True
        if i < width - 1:
            length = 2
            raw = row[i] != row[i + 1]
            if raw:
                prev = i
                for k in range(i + 2, width):
                    if length >= _TGA_MAX_PACKET:
                        break
                    if row[prev] != row[k]:
                        prev += 1
                        length += 1
                    else:
                        length -= 1
                        break
            else:
                for k in range(i + 2, width):
                    if length >= _TGA_MAX_PACKET or row[i] != row[k]:
                        break
                    length += 1
        yield raw, i, length
        i += length


def encode_tga(
    width: int,
    height: int,
    components: int,
    data,
    rle: bool = True,
    flip_vertically: bool = False,
) -> bytes:
    """Return a TGA file holding the given interleaved 8-bit pixels.

    Rows are stored bottom-up unless `flip_vertically` is set; with `rle`
    the pixel data is run-length encoded.
    """
    raw = _validate(width, height, components, data)
    has_alpha = components in (2, 4)
    colorbytes = components - 1 if has_alpha else components
    image_type = 3 if colorbytes < 2 else 2
    if rle:
        image_type += 8

    header = struct.pack(
        "<BBBHHBHHHHBB",
        0, 0, image_type,
        0, 0, 0,
        0, 0, width & 0xFFFF, height & 0xFFFF,
        ((colorbytes + has_alpha) * 8) & 0xFF, int(has_alpha) * 8,
    )
    out = bytearray(header)

    def pixel(px: bytes) -> bytes:
        return _pixel_bytes(px, components, has_alpha, expand_mono=False)

    for row in _rows(raw, width, height, components, bottom_up=not flip_vertically):
        if not rle:
            for px in row:
                out += pixel(px)
            continue
        for is_raw, start, length in _tga_packets(row):
            if is_raw:
                out.append((length - 1) & 0xFF)
                for px in row[start:start + length]:
                    out += pixel(px)
            else:
                out.append((length - 129) & 0xFF)
                out += pixel(row[start])
    return bytes(out)


def write_tga(
    path: str | os.PathLike,
    width: int,
    height: int,
    components: int,
    data,
    rle: bool = True,
    flip_vertically: bool = False,
) -> None:
    """Write the pixels to `path` as a TGA file."""
    encoded = encode_tga(width, height, components, data, rle, flip_vertically)
    with open(path, "wb") as fh:
        fh.write(encoded)