"""Conversion between gump data and bitmaps."""

from __future__ import annotations

import struct
from itertools import groupby

from uoart.bitmap import Bitmap


def _solid(color: int) -> int:
    return color | 0x8000 if color & 0x7FFF else 0


def bitmap_for_gump(data: bytes) -> Bitmap:
    """Decode gump data (size, row offset table, colour/run pairs) into a bitmap."""
    data = bytes(data)
    if len(data) <= 8:
        raise ValueError("Invalid gump data size.")
    width, height = struct.unpack_from("<II", data)
    try:
        offsets = struct.unpack_from(f"<{height}I", data, 8)
    except struct.error as exc:
        raise ValueError("Truncated gump offset table.") from exc
    image = Bitmap(width, height)
    total = (len(data) - 8) // 4
    try:
        for y, start in enumerate(offsets):
            end = offsets[y + 1] if y < height - 1 else total
            pos = 8 + start * 4
            x = 0
            for _ in range(end - start):
                color, run = struct.unpack_from("<HH", data, pos)
                pos += 4
                value = _solid(color)
                for _ in range(run):
                    image[x, y] = value
                    x += 1
    except struct.error as exc:
        raise ValueError("Truncated gump data.") from exc
    return image


def _gump_line(image: Bitmap, y: int) -> list[int]:
    row = (image[x, y] & 0x7FFF for x in range(image.width))
    words: list[int] = []
    for color, group in groupby(row):
        words += [color, sum(1 for _ in group) & 0xFFFF]
    return words or [0, 0]


def data_for_gump(image: Bitmap) -> bytes:
    """Encode a bitmap as gump data."""
    width, height = image.size
    lines = [_gump_line(image, y) for y in range(height)]
    offsets: list[int] = []
    base = height
    for line in lines:
        offsets.append(base)
        base += len(line) // 2
    words = [word for line in lines for word in line]
    return struct.pack(
        f"<II{height}I{len(words)}H", width, height, *offsets, *words
    )