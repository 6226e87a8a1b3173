"""Raster images with 8, 16 or 32 bit pixels, with BMP reading and writing."""

from __future__ import annotations

import io
import math
import struct
from typing import BinaryIO, Callable, Sequence

_BMP_HEADER_SIZE = 14
_DIB_HEADER_SIZE = 40
_RESOLUTION = 0x0B13  # 72 DPI in pixels per metre
_DEPTHS = (1, 2, 4)
_SOURCE_PIXELSIZES = (8, 16, 24, 32)


def _f32(value: float) -> float:
    """Round a number to single precision."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


_MULT32 = _f32(255.0 / 31.0)
_MULT16 = _f32(1.0 / _MULT32)


def channels_from_16(value: int, pixelsize: int) -> tuple[int, int, int, int]:
    """Split a 16 bit colour into (alpha, red, green, blue) for the given output size."""
    value &= 0xFFFF
    red = (value >> 10) & 0x1F
    green = (value >> 5) & 0x1F
    blue = value & 0x1F
    if pixelsize in (24, 32):
        red, green, blue = (math.ceil(_f32(c * _MULT32)) & 0xFF for c in (red, green, blue))
        alpha = 255 if value & 0x8000 else 0
        if pixelsize == 24:
            alpha = 0
    elif pixelsize == 16:
        alpha = 1 if value & 0x80 else 0
    else:
        raise ValueError("Invalid color channel breakout, invalid pixelsize requested.")
    return alpha, red, green, blue


def channels_from_32(value: int, pixelsize: int) -> tuple[int, int, int, int]:
    """Split a 32 bit colour into (alpha, red, green, blue) for the given output size."""
    value &= 0xFFFFFFFF
    red = (value >> 16) & 0xFF
    green = (value >> 8) & 0xFF
    blue = value & 0xFF
    alpha = (value >> 24) & 0xFF
    if pixelsize in (24, 32):
        if pixelsize == 24:
            alpha = 0
    elif pixelsize == 16:
        red, green, blue = (math.floor(_f32(c * _MULT16)) & 0xFF for c in (red, green, blue))
        alpha = 1 if alpha == 255 else 0
    else:
        raise ValueError("Invalid color channel breakout, invalid pixelsize requested.")
    return alpha, red, green, blue


def color16_to_32(color: int) -> int:
    """Convert a 16 bit ARGB1555 colour to 32 bit ARGB8888."""
    alpha, red, green, blue = channels_from_16(color, 32)
    return (alpha << 24) | (red << 16) | (green << 8) | blue


def color32_to_16(color: int) -> int:
    """Convert a 32 bit ARGB8888 colour to 16 bit ARGB1555."""
    alpha, red, green, blue = channels_from_32(color, 16)
    return ((alpha << 15) | (red << 10) | (green << 5) | blue) & 0xFFFF


def _read_exact(stream: BinaryIO, count: int) -> bytes:
    data = stream.read(count)
    if len(data) < count:
        raise ValueError("Truncated BMP stream.")
    return data


def read_palette(stream: BinaryIO, number: int) -> list[int]:
    """Read ``number`` little-endian 32 bit palette colours from a stream."""
    if number <= 0:
        return []
    data = _read_exact(stream, 4 * number)
    return list(struct.unpack(f"<{number}I", data))


def index_for(color: int, palette: Sequence[int]) -> int:
    """Return the (8 bit) index of ``color`` in ``palette``."""
    try:
        return palette.index(color) & 0xFF
    except ValueError:
        raise ValueError("Color not present in palette.") from None


class Bitmap:
    """A width x height image whose pixels are ``depth`` bytes wide (1, 2 or 4)."""

    def __init__(self, width: int = 0, height: int = 0, depth: int = 2) -> None:
        if depth not in _DEPTHS:
            raise ValueError(f"Unsupported pixel depth: {depth}")
        self.depth = depth
        self.palette: list[int] = []
        self._mask = (1 << (8 * depth)) - 1
        self._width = 0
        self._height = 0
        self._rows: list[list[int]] = []
        self.resize(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> tuple[int, int]:
        return self._width, self._height

    @property
    def empty(self) -> bool:
        return not self._rows

    def __repr__(self) -> str:
        return f"Bitmap({self._width}, {self._height}, depth={self.depth})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bitmap):
            return NotImplemented
        return (
            self.depth == other.depth
            and self.size == other.size
            and self._rows == other._rows
            and self.palette == other.palette
        )

    __hash__ = None  # type: ignore[assignment]

    def _check(self, key: tuple[int, int]) -> tuple[int, int]:
        x, y = key
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError("Bitmap pixel access beyond image size.")
        return x, y

    def __getitem__(self, key: tuple[int, int]) -> int:
        x, y = self._check(key)
        return self._rows[y][x]

    def __setitem__(self, key: tuple[int, int], value: int) -> None:
        x, y = self._check(key)
        self._rows[y][x] = value & self._mask

    def resize(self, width: int, height: int) -> None:
        """Set a new size; all pixels become zero."""
        if width < 0 or height < 0:
            raise ValueError("Bitmap dimensions must not be negative.")
        self._width = width
        self._height = height
        self._rows = [[0] * width for _ in range(height)]

    def fill(self, color: int) -> Bitmap:
        """Set every pixel to ``color``."""
        color &= self._mask
        self._rows = [[color] * self._width for _ in range(self._height)]
        return self

    def invert(self) -> Bitmap:
        """Flip the image vertically."""
        self._rows.reverse()
        return self

    def mirror(self) -> Bitmap:
        """Flip the image horizontally."""
        for row in self._rows:
            row.reverse()
        return self

    def is_gray(self, value: int) -> bool:
        """True when the red, green and blue channels of ``value`` are equal."""
        mask, shift = (0x1F, 5) if self.depth == 2 else (0xFF, 8)
        value &= self._mask
        red = (value >> (2 * shift)) & mask
        green = (value >> shift) & mask
        blue = value & mask
        return red == green and blue == green

    def intensify(self, value: int, x: int, y: int) -> None:
        """Adjust a non-zero pixel by the signed 8 bit ``value``."""
        mask, shift = (0xFF, 8) if self.depth == 4 else (0x1F, 5)
        value = ((value + 128) & 0xFF) - 128
        if self[x, y] != 0:
            red = ((value >> (shift * 2)) & mask) + value
            green = ((value >> shift) & mask) + value
            blue = (value & mask) + value
            self[x, y] = ((red << (shift * 2)) | (green << shift) | blue) | ~(mask << (shift * 3))

    def hue(self, huevalues: Sequence[int], grayonly: bool) -> Bitmap:
        """Return a copy with colours replaced from ``huevalues`` by their red channel."""
        if self.depth == 4:
            alpha, shift = 0xFF000000, 8
        else:
            alpha, shift = 0x8000 & self._mask, 5
        mask = ~alpha & self._mask
        image = Bitmap(self._width, self._height, self.depth)
        for y, row in enumerate(self._rows):
            for x, value in enumerate(row):
                if value != 0:
                    red = (value & mask) >> (shift * 2)
                    if not grayonly or self.is_gray(value):
                        value = huevalues[red]
                if value != 0:
                    value |= alpha
                image._rows[y][x] = value & self._mask
        return image

    def _encode_pixel(self, value: int, pixelsize: int) -> bytes:
        if self.depth == 1:
            channels = channels_from_32(self.palette[value], pixelsize)
        elif self.depth == 2:
            channels = channels_from_16(value, pixelsize)
        else:
            channels = channels_from_32(value, pixelsize)
        alpha, red, green, blue = channels
        if pixelsize == 16:
            return struct.pack("<H", ((red << 10) | (green << 5) | blue | (alpha << 15)) & 0xFFFF)
        if pixelsize == 24:
            return bytes((blue, green, red))
        return bytes((blue, green, red, alpha))

    def save_bmp(self, output: BinaryIO, pixelsize: int = 24, inverted: bool = False) -> None:
        """Write the image to a binary stream as an uncompressed BMP."""
        palette_bytes = b"".join(
            bytes((blue, green, red, alpha))
            for alpha, red, green, blue in (channels_from_32(c, 24) for c in self.palette)
        )
        rows = self._rows[::-1] if inverted else self._rows
        mod = (self._width * (pixelsize // 8)) % 4
        pad = b"\0" * ((4 - mod) if mod else 0)
        body = bytearray()
        for row in reversed(rows):
            for value in row:
                body += self._encode_pixel(value, pixelsize)
            body += pad
        datastart = _BMP_HEADER_SIZE + _DIB_HEADER_SIZE + len(palette_bytes)
        filesize = datastart + len(body)
        header = struct.pack("<2sIII", b"BM", filesize, 0, datastart)
        dib = struct.pack(
            "<IiiHHIIiiII",
            _DIB_HEADER_SIZE,
            self._width,
            self._height,
            1,
            pixelsize & 0xFFFF,
            0,
            len(body),
            _RESOLUTION,
            _RESOLUTION,
            len(self.palette),
            0,
        )
        output.write(header + dib + palette_bytes + bytes(body))

    @classmethod
    def from_bmp(cls, stream: BinaryIO, depth: int = 2) -> Bitmap:
        """Read an uncompressed BMP from a binary stream into a bitmap of ``depth`` bytes."""
        if stream.read(1) != b"B" or stream.read(1) != b"M":
            raise ValueError("Input stream is not a BMP file.")
        stream.seek(8, io.SEEK_CUR)
        offset_to_data, dib_size, width, height = struct.unpack("<IIii", _read_exact(stream, 16))
        stream.seek(2, io.SEEK_CUR)
        pixelsize, compression = struct.unpack("<HI", _read_exact(stream, 6))
        if compression != 0:
            raise ValueError("Compressed BMP data not supported.")
        stream.seek(12, io.SEEK_CUR)
        (palette_size,) = struct.unpack("<I", _read_exact(stream, 4))

        stream.seek(_BMP_HEADER_SIZE + dib_size)
        image = cls(width, height, depth)
        palette = read_palette(stream, palette_size)
        if pixelsize == 8 and depth == 1:
            image.palette = palette
        stream.seek(offset_to_data)

        if width > 0 and height > 0 and pixelsize not in _SOURCE_PIXELSIZES:
            raise ValueError("Invalid pixel size for input BMP.")
        bytesize = pixelsize // 8
        mod = (bytesize * width) % 4
        pad = (4 - mod) if mod else 0
        created: list[int] = []
        decode = _pixel_decoder(depth, pixelsize, palette, created)
        for y in range(height):
            row = _read_exact(stream, bytesize * width)
            target = image._rows[height - 1 - y]
            for x in range(width):
                target[x] = decode(row[x * bytesize:(x + 1) * bytesize]) & image._mask
            stream.read(pad)
        if created:
            if len(created) > 256 and depth == 1:
                raise ValueError("Created palette is too large.")
            image.palette = created
        return image


def _pixel_decoder(
    depth: int, pixelsize: int, palette: list[int], created: list[int]
) -> Callable[[bytes], int]:
    def indexed(color: int) -> int:
        try:
            return index_for(color, created)
        except ValueError:
            created.append(color)
            return (len(created) - 1) & 0xFF

    def decode(chunk: bytes) -> int:
        raw = int.from_bytes(chunk, "little")
        if pixelsize == 24:
            raw |= 0xFF000000
        if depth == 1:
            if pixelsize == 8:
                return raw
            if pixelsize == 16:
                return indexed(color16_to_32(raw))
            return indexed(raw)
        if depth == 2:
            if pixelsize == 8:
                return color32_to_16(palette[raw])
            if pixelsize == 16:
                return raw
            return color32_to_16(raw)
        if pixelsize == 16:
            return color16_to_32(raw)
        return raw

    return decode