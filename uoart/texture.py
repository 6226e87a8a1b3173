"""Conversion between texture data and bitmaps."""

from __future__ import annotations

import struct

from uoart.bitmap import Bitmap

_LARGE_TEXTURE_BYTES = 32768


def bitmap_for_texture(data: bytes) -> Bitmap:
    """Decode a square 64x64 (or 128x128 for 32768 bytes) texture."""
    width = 128 if len(data) == _LARGE_TEXTURE_BYTES else 64
    count = width * width
    if len(data) < count * 2:
        raise ValueError("Not sufficient data for texture image.")
    colors = struct.unpack_from(f"<{count}H", data)
    image = Bitmap(width, width)
    for index, color in enumerate(colors):
        image[index % width, index // width] = color | 0x8000 if color & 0x7FFF else 0
    return image


def data_for_texture(image: Bitmap) -> bytes:
    """Encode a bitmap as texture data."""
    width, height = image.size
    words = [image[x, y] & 0x7FFF for y in range(height) for x in range(width)]
    return struct.pack(f"<{len(words)}H", *words)