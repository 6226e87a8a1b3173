"""Conversion between light data and grayscale bitmaps."""

from __future__ import annotations

from uoart.bitmap import Bitmap


def bitmap_for_light(width: int, height: int, data: bytes) -> Bitmap:
    """Decode one intensity byte per pixel into a gray 16 bit bitmap."""
    if len(data) < width * height:
        raise ValueError("Not sufficient data for light image.")
    image = Bitmap(width, height)
    for index, value in enumerate(data[: width * height]):
        channel = value & 0x1F
        image[index % width, index // width] = (channel << 10) | (channel << 5) | channel
    return image


def data_for_light(bitmap: Bitmap) -> bytes:
    """Encode a gray bitmap as one intensity byte per pixel."""
    width, height = bitmap.size
    return bytes(bitmap[x, y] & 0x1F for y in range(height) for x in range(width))