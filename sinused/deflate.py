"""A small zlib/DEFLATE compressor using fixed Huffman codes, plus CRC-32."""

from __future__ import annotations

import struct
import zlib

_HASH_SIZE = 16384
_WINDOW = 32768
_MAX_MATCH = 258
_MAX_STORED_BLOCK = 32767
_MIN_QUALITY = 5

_LENGTH_BASE = (
    3, 4, 5, 6, 7, 8, 9, 10, 11, 13, 15, 17, 19, 23, 27, 31, 35, 43, 51, 59,
    67, 83, 99, 115, 131, 163, 195, 227, 258, 259,
)
_LENGTH_EXTRA = (
    0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 2, 2, 2, 2, 3, 3, 3, 3,
    4, 4, 4, 4, 5, 5, 5, 5, 0,
)
_DIST_BASE = (
    1, 2, 3, 4, 5, 7, 9, 13, 17, 25, 33, 49, 65, 97, 129, 193, 257, 385, 513,
    769, 1025, 1537, 2049, 3073, 4097, 6145, 8193, 12289, 16385, 24577, 32768,
)
_DIST_EXTRA = (
    0, 0, 0, 0, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6, 7, 7, 8, 8,
    9, 9, 10, 10, 11, 11, 12, 12, 13, 13,
)

_MASK32 = 0xFFFFFFFF


def _bit_reverse(code: int, bits: int) -> int:
    result = 0
    for _ in range(bits):
        result = (result << 1) | (code & 1)
        code >>= 1
    return result


class _BitWriter:
    """Accumulates bits least-significant first and emits whole bytes."""

    def __init__(self, out: bytearray) -> None:
        self.out = out
        self.buffer = 0
        self.count = 0

    def add(self, code: int, bits: int) -> None:
        self.buffer |= code << self.count
        self.count += bits
        while self.count >= 8:
            self.out.append(self.buffer & 0xFF)
            self.buffer >>= 8
            self.count -= 8

    def huffman(self, symbol: int) -> None:
        """Write a literal/length symbol with the fixed Huffman code."""
        if symbol <= 143:
            self.add(_bit_reverse(0x30 + symbol, 8), 8)
        elif symbol <= 255:
            self.add(_bit_reverse(0x190 + symbol - 144, 9), 9)
        elif symbol <= 279:
            self.add(_bit_reverse(symbol - 256, 7), 7)
        else:
            self.add(_bit_reverse(0xC0 + symbol - 280, 8), 8)

    def align(self) -> None:
        while self.count:
            self.add(0, 1)


def _hash3(data: bytes, pos: int) -> int:
    h = data[pos] + (data[pos + 1] << 8) + (data[pos + 2] << 16)
    h ^= (h << 3) & _MASK32
    h = (h + (h >> 5)) & _MASK32
    h ^= (h << 4) & _MASK32
    h = (h + (h >> 17)) & _MASK32
    h ^= (h << 25) & _MASK32
    h = (h + (h >> 6)) & _MASK32
    return h & (_HASH_SIZE - 1)


def _match_length(data: bytes, a: int, b: int, limit: int) -> int:
    """Length of the common run starting at `a` and `b`, at most 258."""
    n = min(limit, _MAX_MATCH)
    if data[a:a + n] == data[b:b + n]:
        return n
    k = 0
    while k < n and data[a + k] == data[b + k]:
        k += 1
    return k


def _compress_fixed(data: bytes, quality: int, out: bytearray) -> None:
    size = len(data)
    bits = _BitWriter(out)
    bits.add(1, 1)  # final block
    bits.add(1, 2)  # fixed Huffman codes

    table: dict[int, list[int]] = {}
    i = 0
    while i < size - 3:
        h = _hash3(data, i)
        best = 3
        best_pos: int | None = None
        chain = table.setdefault(h, [])
        for pos in chain:
            if pos > i - _WINDOW:
                d = _match_length(data, pos, i, size - i)
                if d >= best:
                    best = d
                    best_pos = pos
        if len(chain) == 2 * quality:
            del chain[:quality]
        chain.append(i)

        if best_pos is not None:
            # lazy matching: prefer a literal if the next byte starts a longer match
            for pos in table.get(_hash3(data, i + 1), ()):
                if pos > i - (_WINDOW - 1):
                    if _match_length(data, pos, i + 1, size - i - 1) > best:
                        best_pos = None
                        break

        if best_pos is not None:
            distance = i - best_pos
            j = 0
            while best > _LENGTH_BASE[j + 1] - 1:
                j += 1
            bits.huffman(j + 257)
            if _LENGTH_EXTRA[j]:
                bits.add(best - _LENGTH_BASE[j], _LENGTH_EXTRA[j])
            j = 0
            while distance > _DIST_BASE[j + 1] - 1:
                j += 1
            bits.add(_bit_reverse(j, 5), 5)
            if _DIST_EXTRA[j]:
                bits.add(distance - _DIST_BASE[j], _DIST_EXTRA[j])
            i += best
        else:
            bits.huffman(data[i])
            i += 1

    for byte in data[i:]:
        bits.huffman(byte)
    bits.huffman(256)
    bits.align()


def _store(data: bytes, out: bytearray) -> None:
    size = len(data)
    j = 0
    while j < size:
        block = min(size - j, _MAX_STORED_BLOCK)
        out.append(1 if size - j == block else 0)
        out += struct.pack("<HH", block, ~block & 0xFFFF)
        out += data[j:j + block]
        j += block


def zlib_compress(data, quality: int = 8) -> bytes:
    """Compress `data` into a zlib stream.

    `quality` bounds the length of the hash chains searched for matches; it
    is raised to at least 5. If the compressed block would be larger than
    storing the data, stored blocks are written instead.
    """
    raw = bytes(data)
    quality = max(int(quality), _MIN_QUALITY)
    size = len(raw)

    out = bytearray((0x78, 0x5E))
    _compress_fixed(raw, quality, out)

    stored_size = size + 2 + ((size + _MAX_STORED_BLOCK - 1) // _MAX_STORED_BLOCK) * 5
    if len(out) > stored_size:
        del out[2:]
        _store(raw, out)

    out += struct.pack(">I", zlib.adler32(raw))
    return bytes(out)


def crc32(data) -> int:
    """Return the CRC-32 of `data` as an unsigned 32-bit integer."""
    return zlib.crc32(bytes(data)) & _MASK32