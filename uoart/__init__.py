"""Conversion between Ultima Online artwork records and bitmaps, with BMP reading and writing."""

__version__ = "0.1.0"
__all__ = ["animation", "art", "bitmap", "gump", "hue", "light", "texture"]