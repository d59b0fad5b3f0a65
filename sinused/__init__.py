"""Encode bits as a sinusoidal graph image and decode them again, with BMP, TGA, HDR, PNG and JPEG writers."""

__version__ = "0.1.0"