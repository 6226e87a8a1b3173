"""Conversion between art tile data (terrain and items) and bitmaps."""

from __future__ import annotations

import struct
from typing import Iterator

from uoart.bitmap import Bitmap

_TERRAIN_SIZE = 44
_TERRAIN_PIXELS = 1012
_TERRAIN_BYTES = 2024
_MAX_ITEM_DIMENSION = 1024
_RUN_LIMIT = 2048


def _solid(color: int) -> int:
    """Set the opaque bit on any colour that is not black."""
    return color | 0x8000 if color & 0x7FFF else 0


def _terrain_coordinates() -> Iterator[tuple[int, int]]:
    """Yield the pixel positions of the terrain diamond in storage order."""
    run, xloc = 2, 21
    for y in range(22):
        for offset in range(run):
            yield xloc + offset, y
        xloc -= 1
        run += 2
    run, xloc = 44, 0
    for y in range(22, 44):
        for offset in range(run):
            yield xloc + offset, y
        xloc += 1
        run -= 2


def bitmap_for_terrain(data: bytes) -> Bitmap:
    """Decode raw terrain tile data into a 44x44 bitmap."""
    if len(data) < _TERRAIN_BYTES:
        raise ValueError("Not sufficient data for terrain image.")
    colors = struct.unpack_from(f"<{_TERRAIN_PIXELS}H", data)
    image = Bitmap(_TERRAIN_SIZE, _TERRAIN_SIZE)
    for (x, y), color in zip(_terrain_coordinates(), colors):
        image[x, y] = _solid(color)
    return image


def data_for_terrain(image: Bitmap) -> bytes:
    """Encode a 44x44 bitmap as raw terrain tile data."""
    words = [
        image[x, y] if y < 22 else image[x, y] & 0x7FFF
        for x, y in _terrain_coordinates()
    ]
    return struct.pack(f"<{_TERRAIN_PIXELS}H", *words)


def bitmap_for_item(data: bytes) -> Bitmap:
    """Decode run-length encoded item art into a bitmap."""
    data = bytes(data)
    if len(data) <= 8:
        raise ValueError("Not sufficient data for image.")
    width, height = struct.unpack_from("<HH", data, 4)
    if not 0 < width < _MAX_ITEM_DIMENSION:
        raise ValueError("Image not available, invalid width.")
    if not 0 < height < _MAX_ITEM_DIMENSION:
        raise ValueError("Image not available, invalid height.")
    try:
        table = struct.unpack_from(f"<{height}H", data, 8)
        start = 8 + height * 2
        image = Bitmap(width, height)
        x = y = 0
        pos = start + table[0] * 2
        while y < height:
            xoff, run = struct.unpack_from("<HH", data, pos)
            pos += 4
            if xoff + run >= _RUN_LIMIT:
                break
            if xoff + run:
                x += xoff
                colors = struct.unpack_from(f"<{run}H", data, pos)
                pos += 2 * run
                for j, color in enumerate(colors):
                    image[x + j, y] = _solid(color)
                x += run
            else:
                x = 0
                y += 1
                if y < height:
                    pos = start + table[y] * 2
    except struct.error as exc:
        raise ValueError("Truncated item data.") from exc
    return image


def _item_line(image: Bitmap, y: int) -> tuple[int, ...]:
    line: list[int] = []
    xoffset = run = oldcolor = 0
    colors: list[int] = []
    for x in range(image.width):
        color = image[x, y] & 0x7FFF
        if color == 0:
            if oldcolor:
                line += [xoffset, run, *colors]
                oldcolor = 0
                xoffset = 0
            xoffset += 1
            run = 0
            colors = []
        else:
            run += 1
            colors.append(color)
            oldcolor = color
    if colors:
        line += [xoffset, run, *colors]
    line += [0, 0]
    if len(line) % 2:
        line.append(0)
    return tuple(line)


def data_for_item(image: Bitmap) -> bytes:
    """Encode a bitmap as run-length encoded item art, sharing identical rows."""
    width, height = image.size
    lines: list[tuple[int, ...]] = []
    index_of: dict[tuple[int, ...], int] = {}
    row_index: list[int] = []
    for y in range(height):
        line = _item_line(image, y)
        if line not in index_of:
            index_of[line] = len(lines)
            lines.append(line)
        row_index.append(index_of[line])
    offsets: list[int] = []
    total = 0
    for line in lines:
        offsets.append(total)
        total += len(line)
    words = [word & 0xFFFF for line in lines for word in line]
    table = [offsets[i] & 0xFFFF for i in row_index]
    return struct.pack(
        f"<IHH{len(table)}H{len(words)}H",
        0,
        width & 0xFFFF,
        height & 0xFFFF,
        *table,
        *words,
    )