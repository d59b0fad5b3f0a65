import struct

import pytest

from sinused.bitmap import encode_bmp, encode_tga, write_bmp, write_tga


def _decode_tga_rle(body, pixel_size, count):
    out = bytearray()
    pos = 0
    seen = 0
    while seen < count:
        head = body[pos]
        pos += 1
        n = (head & 0x7F) + 1
        if head & 0x80:
            out += body[pos:pos + pixel_size] * n
            pos += pixel_size
        else:
            out += body[pos:pos + n * pixel_size]
            pos += n * pixel_size
        seen += n
    return bytes(out), pos


# ---------------------------------------------------------------- BMP


def test_bmp_header_fields_24bit():
    data = bytes([1, 2, 3, 4, 5, 6])
    out = encode_bmp(2, 1, 3, data)
    assert out[:2] == b"BM"
    size, _, _, offset, info = struct.unpack_from("<IHHII", out, 2)
    assert size == len(out)
    assert offset == 54
    assert info == 40
    w, h, planes, bpp = struct.unpack_from("<iiHH", out, 18)
    assert (w, h, planes, bpp) == (2, 1, 1, 24)


def test_bmp_pixels_are_bgr_and_padded():
    data = bytes([1, 2, 3, 4, 5, 6])
    out = encode_bmp(2, 1, 3, data)
    assert out[54:] == bytes([3, 2, 1, 6, 5, 4, 0, 0])


def test_bmp_rows_bottom_up_and_flip():
    data = bytes([10, 20, 30, 40, 50, 60])
    normal = encode_bmp(1, 2, 3, data)
    flipped = encode_bmp(1, 2, 3, data, flip_vertically=True)
    assert normal[54:] == bytes([60, 50, 40, 0, 30, 20, 10, 0])
    assert flipped[54:] == bytes([30, 20, 10, 0, 60, 50, 40, 0])


def test_bmp_mono_is_expanded():
    out = encode_bmp(1, 1, 1, bytes([7]))
    assert out[54:] == bytes([7, 7, 7, 0])


def test_bmp_grey_alpha_drops_alpha():
    out = encode_bmp(1, 1, 2, bytes([9, 200]))
    assert out[54:57] == bytes([9, 9, 9])


def test_bmp_rgba_uses_v4_header():
    data = bytes([1, 2, 3, 4])
    out = encode_bmp(1, 1, 4, data)
    size, _, _, offset, info = struct.unpack_from("<IHHII", out, 2)
    assert offset == 122
    assert info == 108
    assert size == len(out)
    assert struct.unpack_from("<HH", out, 26) == (1, 32)
    masks = struct.unpack_from("<IIIII", out, 30 + 24 - 24 + 16)
    assert masks[1:] == (0xFF0000, 0xFF00, 0xFF, 0xFF000000)
    assert out[122:] == bytes([3, 2, 1, 4])


@pytest.mark.parametrize("w,h", [(1, 1), (3, 2), (5, 4), (4, 3)])
def test_bmp_size_matches_dimensions(w, h):
    data = bytes(range(w * h * 3))
    out = encode_bmp(w, h, 3, data)
    row = w * 3 + ((-w * 3) & 3)
    assert len(out) == 54 + row * h
    assert row % 4 == 0


def test_bmp_negative_dimension_raises():
    with pytest.raises(ValueError):
        encode_bmp(-1, 1, 3, b"")


def test_bmp_short_data_raises():
    with pytest.raises(ValueError):
        encode_bmp(2, 2, 3, bytes(5))


def test_bmp_bad_components_raises():
    with pytest.raises(ValueError):
        encode_bmp(1, 1, 5, bytes(5))


def test_write_bmp_matches_encode(tmp_path):
    data = bytes(range(12))
    path = tmp_path / "out.bmp"
    write_bmp(path, 2, 2, 3, data)
    assert path.read_bytes() == encode_bmp(2, 2, 3, data)


# ---------------------------------------------------------------- TGA


def test_tga_header_uncompressed_rgb():
    out = encode_tga(2, 1, 3, bytes([1, 2, 3, 4, 5, 6]), rle=False)
    assert out[2] == 2
    assert struct.unpack_from("<HH", out, 12) == (2, 1)
    assert out[16] == 24
    assert out[17] == 0
    assert out[18:] == bytes([3, 2, 1, 6, 5, 4])


def test_tga_header_types():
    assert encode_tga(1, 1, 3, bytes(3), rle=True)[2] == 10
    assert encode_tga(1, 1, 1, bytes(1), rle=False)[2] == 3
    assert encode_tga(1, 1, 2, bytes(2), rle=True)[2] == 11


def test_tga_rgba_bits():
    out = encode_tga(1, 1, 4, bytes([1, 2, 3, 4]), rle=False)
    assert out[16] == 32
    assert out[17] == 8
    assert out[18:] == bytes([3, 2, 1, 4])


def test_tga_grey_alpha_keeps_alpha():
    out = encode_tga(1, 1, 2, bytes([9, 200]), rle=False)
    assert out[16] == 16
    assert out[18:] == bytes([9, 200])


def test_tga_rows_bottom_up_and_flip():
    data = bytes([1, 2])
    assert encode_tga(1, 2, 1, data, rle=False)[18:] == bytes([2, 1])
    assert encode_tga(1, 2, 1, data, rle=False, flip_vertically=True)[18:] == bytes([1, 2])


def test_tga_run_packet_header():
    out = encode_tga(4, 1, 1, bytes([5, 5, 5, 5]))
    assert out[18:] == bytes([0x83, 5])


@pytest.mark.parametrize(
    "row",
    [
        [1, 1, 1, 1, 1],
        [1, 2, 3, 4, 5],
        [1, 2, 1, 2, 1, 2],
        [1, 1, 2, 3, 3, 3, 4, 5, 5],
        [7] * 300,
        list(range(200)),
        [0, 1] * 90 + [3] * 50,
    ],
)
def test_tga_rle_round_trip(row):
    width = len(row)
    data = bytes(row) * 2
    plain = encode_tga(width, 2, 1, data, rle=False)
    packed = encode_tga(width, 2, 1, data, rle=True)
    decoded, used = _decode_tga_rle(packed[18:], 1, width * 2)
    assert decoded == plain[18:]
    assert used == len(packed) - 18


def test_tga_rle_round_trip_rgba():
    pixels = [(1, 2, 3, 4)] * 5 + [(9, 8, 7, 6), (5, 5, 5, 5)] * 3
    data = b"".join(bytes(p) for p in pixels)
    plain = encode_tga(len(pixels), 1, 4, data, rle=False)
    packed = encode_tga(len(pixels), 1, 4, data, rle=True)
    decoded, _ = _decode_tga_rle(packed[18:], 4, len(pixels))
    assert decoded == plain[18:]
    assert len(packed) < len(plain) + len(pixels)


def test_tga_negative_dimension_raises():
    with pytest.raises(ValueError):
        encode_tga(1, -2, 3, b"")


def test_write_tga_matches_encode(tmp_path):
    data = bytes([3, 3, 3, 4])
    path = tmp_path / "out.tga"
    write_tga(path, 4, 1, 1, data)
    assert path.read_bytes() == encode_tga(4, 1, 1, data)