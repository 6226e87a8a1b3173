"""Conversion between hue entries and colour-strip bitmaps."""

from __future__ import annotations

import struct

from uoart.bitmap import Bitmap

HUE_ENTRY_SIZE = 88
_NAME_OFFSET = 68
_NAME_LENGTH = 20
_COLORS = 32


def data_from_hue(bitmap: Bitmap, name: str) -> bytes:
    """Build an 88 byte hue entry by sampling 32 colours across the bitmap."""
    width, height = bitmap.size
    buffer = bytearray(HUE_ENTRY_SIZE)
    if name:
        encoded = name.encode("latin-1", errors="replace")[:_NAME_LENGTH]
        buffer[_NAME_OFFSET:_NAME_OFFSET + len(encoded)] = encoded
    size = width // _COLORS
    colors = [
        bitmap[j * size + size // 2, height // 2] & 0x7FFF for j in range(_COLORS)
    ]
    struct.pack_into(f"<{_COLORS}H", buffer, 0, *colors)
    buffer[64:66] = buffer[0:2]
    buffer[66:68] = buffer[62:64]
    return bytes(buffer)


def hue_from_data(data: bytes, width: int = 5, height: int = 5) -> tuple[Bitmap, str]:
    """Render a hue entry as 32 colour blocks and return it with the hue's name."""
    if len(data) < HUE_ENTRY_SIZE:
        raise ValueError("Not sufficient data for hue entry.")
    colors = struct.unpack_from(f"<{_COLORS}H", data)
    bitmap = Bitmap(width * _COLORS, height)
    for j, color in enumerate(colors):
        offset = width * j
        for x in range(width):
            for y in range(height):
                bitmap[x + offset, y] = color
    chars: list[str] = []
    for byte in data[_NAME_OFFSET:_NAME_OFFSET + _NAME_LENGTH]:
        if byte < 31 or byte >= 128:
            break
        chars.append(chr(byte))
    return bitmap, "".join(chars)


def hue_blank(data: bytes) -> bool:
    """True when every colour of the hue entry is the placeholder value 1."""
    colors = struct.unpack_from(f"<{_COLORS}H", data)
    return all(color & 0x7FFF == 1 for color in colors)