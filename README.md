# sinused

`sinused` hides a sequence of bits in a picture of a sine wave and reads
them back out again.

Each bit becomes one period of a sine curve drawn along a horizontal axis.
The period is folded to one side of the axis. A `1` is drawn as two humps
above the axis, and anything else is drawn as two humps below it. The
finished graph is saved as a 32-bit BMP image. Decoding scans two fixed
rows of the image for those humps and returns the bits it finds.

The package also holds small image writers for BMP, TGA, Radiance HDR,
PNG and baseline JPEG. They use only the standard library. The PNG writer
comes with its own zlib/deflate encoder.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

```
sinus-ed encode bits.txt
sinus-ed decode output.bmp
```

* `encode` reads the first 1024 bytes of a text file, up to the first NUL
  byte. The file may hold only `0`, `1` and newlines. The command draws
  the graph on an 800×600 canvas, writes it to `output.bmp` in the current
  directory and prints `Image saved as output.bmp`.
* `decode` loads an image with Pillow, so BMP, PNG and similar formats
  work. The image must be at least 600 pixels high. The command prints
  `DECODING ...` and then the hidden bits.

Each of these ends the command with a message on standard error and exit
status 1:

* fewer than two arguments;
* an unknown operation;
* a missing file;
* a file that holds other characters;
* an empty file;
* an image that cannot be read or is too small.

## Library use

```python
from sinused.canvas import Canvas
from sinused.encoder import encode
from sinused.decoder import decode

canvas = Canvas(800, 600, False)
encode(canvas, "1011\n")
canvas.save_bmp("graph.bmp")

print(decode("graph.bmp"))
```

`sinused.cli.run(operation, filename, output)` does the same work as the
command, and `output` can name a different file. It raises
`sinused.cli.UsageError` on bad input. `sinused.cli.validate_file` checks
an input file on its own.

The `Canvas` class stores colours given as `0xAARRGGBB`. It offers these
methods:

* `put_pixel`, which ignores points outside the canvas;
* `draw_line`, which draws a DDA line;
* `to_rgba`;
* `save_bmp`.

`sinused.encoder` also exposes the drawing steps: `draw_sine_chunk`,
`fill` and `chunks_total`. `sinused.decoder.get_bytes` recovers the bits
from raw RGBA data.

### Image writers

The writers can also be used on their own. Each one takes tightly packed
8-bit pixel data and returns the encoded file as `bytes`. The pixel layout
is set by the number of components:

* 1: grey;
* 2: grey and alpha;
* 3: RGB;
* 4: RGBA.

The `write_*` variants save the file to a path.

```python
from sinused.png import encode_png
from sinused.bitmap import encode_bmp, encode_tga
from sinused.jpeg import encode_jpeg
from sinused.hdr import encode_hdr

pixels = bytes([255, 0, 0, 0, 255, 0, 0, 0, 255, 255, 255, 255])  # 2x2 RGB
png = encode_png(pixels, 2, 2, 3, 0, 8, -1, False)
bmp = encode_bmp(2, 2, 3, pixels, False)
tga = encode_tga(2, 2, 3, pixels, True, False)
jpg = encode_jpeg(2, 2, 3, pixels, 90, False)
hdr = encode_hdr(1, 1, 3, [1.0, 0.5, 0.25], False)
```

* **PNG:** a stride of 0 means the rows are packed. A `force_filter` of
  0 to 4 uses that filter for every row. Any other value picks the
  cheapest filter for each row.
* **JPEG:** a quality of 0 means 90. Qualities of 90 and below subsample
  the chroma 2×2. Alpha is ignored.
* **HDR:** takes linear float values. Alpha is dropped and grey values are
  copied to all three channels.
* **Errors:** invalid sizes, component counts or too little data raise
  `ValueError`.

`sinused.deflate` provides `zlib_compress(data, quality)` and
`crc32(data)`, which the PNG writer is built on.

## What it does not do

The package does not open a window or show the graph while it is drawn.
Encoding renders straight to the in-memory canvas and writes the BMP file
at once. The command always writes to `output.bmp`; use `run` from Python
to choose another path. Decoding only looks at rows 401 and 599 of an
image laid out like the one the encoder draws. It is not a general
detector of sine curves.