"""Command line entry point: encode a bit file as a sine graph or decode one."""

from __future__ import annotations

import os
import sys

from sinused.canvas import Canvas
from sinused.decoder import decode
from sinused.encoder import BUFFER_SIZE, encode

OPERATIONS = ("encode", "decode")
DEFAULT_OUTPUT = "output.bmp"
_ALLOWED = frozenset(b"01\n")


class UsageError(Exception):
    """Raised when the arguments or the input file cannot be used."""


def validate_file(filename: str | os.PathLike, operation: str) -> str | None:
    """Check the input file; for encoding, return its bits.

    Only the first BUFFER_SIZE bytes are read, up to the first NUL byte.
    """
    try:
        with open(filename, "rb") as fh:
            if operation != "encode":
                return None
            content = fh.read(BUFFER_SIZE)
    except FileNotFoundError as exc:
        raise UsageError("File not found") from exc
    except OSError as exc:
        raise UsageError("Error while reading file") from exc

    content = content.split(b"\0", 1)[0]
    if any(byte not in _ALLOWED for byte in content):
        raise UsageError("File must contain only 0 and 1")
    if not content:
        raise UsageError("File is empty")
    return content.decode("ascii")


def run(
    operation: str,
    filename: str | os.PathLike,
    output: str | os.PathLike = DEFAULT_OUTPUT,
) -> str:
    """Perform `operation` on `filename`.

    Encoding draws the graph and saves it to `output`, returning that path;
    decoding returns the recovered bits.
    """
    if operation not in OPERATIONS:
        raise UsageError("Operation name must [decode] or [encode]")
    bits = validate_file(filename, operation)

    if operation == "decode":
        print("DECODING ...")
        decoded = decode(filename)
        print(decoded, end="")
        return decoded

    canvas = Canvas()
    encode(canvas, bits)
    canvas.save_bmp(output)
    print(f"Image saved as {os.fspath(output)}")
    return os.fspath(output)


def main(argv: list[str] | None = None) -> int:
    """Run the command and return its exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 2:
        print("Few arguments: sinus-ed [operation] [filename]", file=sys.stderr)
        return 1
    try:
        run(args[0], args[1])
    except UsageError as exc:
        print(exc, file=sys.stderr)
        return 1
    except (OSError, ValueError) as exc:
        print(f"Failed to process image: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())