import pytest

from sinused.hdr import encode_hdr, write_hdr

_PREAMBLE = b"#?RADIANCE\n"


def _body(encoded: bytes, width: int, height: int) -> bytes:
    marker = f"-Y {height} +X {width}\n".encode("ascii")
    index = encoded.index(marker)
    return encoded[index + len(marker):]


def _decode_rle_scanline(body: bytes, width: int) -> tuple[list[bytes], bytes]:
    """Decode one new-style RLE scanline; return pixels and the remaining bytes."""
    assert body[:2] == bytes((2, 2))
    assert (body[2] << 8) | body[3] == width
    pos = 4
    planes = []
    for _ in range(4):
        plane = bytearray()
        while len(plane) < width:
            count = body[pos]
            pos += 1
            if count > 128:
                plane += bytes((body[pos],)) * (count - 128)
                pos += 1
            else:
                plane += body[pos:pos + count]
                pos += count
        assert len(plane) == width
        planes.append(plane)
    pixels = [bytes(plane[x] for plane in planes) for x in range(width)]
    return pixels, body[pos:]


def _single_pixel_rgbe(values: list[float], components: int) -> bytes:
    encoded = encode_hdr(1, 1, components, values)
    body = _body(encoded, 1, 1)
    assert len(body) == 4
    return body


def test_header_and_resolution_line():
    encoded = encode_hdr(3, 2, 3, [0.5] * 18)
    assert encoded.startswith(_PREAMBLE)
    assert b"FORMAT=32-bit_rle_rgbe\n" in encoded
    assert b"EXPOSURE=          1.0000000000000\n\n-Y 2 +X 3\n" in encoded


def test_small_image_stores_raw_rgbe():
    encoded = encode_hdr(3, 2, 3, [0.5] * 18)
    assert len(_body(encoded, 3, 2)) == 3 * 2 * 4


def test_unit_grey_pixel():
    assert _single_pixel_rgbe([1.0], 1) == bytes((128, 128, 128, 129))


def test_black_pixel_is_all_zero():
    assert _single_pixel_rgbe([0.0, 0.0, 0.0], 3) == bytes(4)


def test_alpha_is_ignored():
    assert _single_pixel_rgbe([0.2, 0.4, 0.8, 0.1], 4) == _single_pixel_rgbe(
        [0.2, 0.4, 0.8], 3
    )


def test_grey_is_replicated():
    assert _single_pixel_rgbe([0.3, 1.0], 2) == _single_pixel_rgbe(
        [0.3, 0.3, 0.3], 3
    )


def test_zero_row_of_width_eight_is_four_runs():
    encoded = encode_hdr(8, 1, 3, [0.0] * 24)
    body = _body(encoded, 8, 1)
    assert body == bytes((2, 2, 0, 8)) + bytes((136, 0)) * 4


@pytest.mark.parametrize(
    "width",
    [8, 9, 20, 300],
)
def test_rle_round_trip_matches_raw_pixels(width):
    values = []
    for x in range(width):
        if x % 50 < 20:
            values += [0.25, 0.5, 0.75]
        else:
            values += [(x % 7) / 3.0, (x % 5) / 2.0, x / width]
    encoded = encode_hdr(width, 1, 3, values)
    pixels, rest = _decode_rle_scanline(_body(encoded, width, 1), width)
    assert rest == b""
    expected = [
        _single_pixel_rgbe(values[3 * x:3 * x + 3], 3) for x in range(width)
    ]
    assert pixels == expected


def test_long_uniform_row_round_trips():
    width = 300
    encoded = encode_hdr(width, 1, 1, [2.0] * width)
    pixels, rest = _decode_rle_scanline(_body(encoded, width, 1), width)
    assert rest == b""
    assert set(pixels) == {_single_pixel_rgbe([2.0], 1)}


def test_alternating_row_round_trips():
    width = 300
    values = [float(x % 2) for x in range(width)]
    encoded = encode_hdr(width, 1, 1, values)
    pixels, rest = _decode_rle_scanline(_body(encoded, width, 1), width)
    assert rest == b""
    assert pixels == [_single_pixel_rgbe([v], 1) for v in values]


def test_flip_reverses_scanline_order():
    top = [1.0] * 3
    bottom = [0.5] * 3
    normal = _body(encode_hdr(1, 2, 3, top + bottom), 1, 2)
    flipped = _body(encode_hdr(1, 2, 3, top + bottom, flip_vertically=True), 1, 2)
    assert flipped == normal[4:] + normal[:4]


def test_write_hdr_matches_encoding(tmp_path):
    values = [0.1 * i for i in range(12)]
    path = tmp_path / "out.hdr"
    write_hdr(path, 2, 2, 3, values)
    assert path.read_bytes() == encode_hdr(2, 2, 3, values)


@pytest.mark.parametrize("width,height", [(0, 1), (1, 0), (-1, 2)])
def test_non_positive_dimensions_rejected(width, height):
    with pytest.raises(ValueError):
        encode_hdr(width, height, 3, [0.0] * 12)


def test_missing_data_rejected():
    with pytest.raises(ValueError):
        encode_hdr(1, 1, 3, None)


def test_short_data_rejected():
    with pytest.raises(ValueError):
        encode_hdr(2, 2, 3, [0.0] * 11)


def test_bad_component_count_rejected():
    with pytest.raises(ValueError):
        encode_hdr(1, 1, 5, [0.0] * 5)