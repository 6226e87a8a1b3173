"""Animation frames with a shared 256 colour palette, in binary and CSV/BMP form."""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Iterable, Iterator, Sequence, TextIO

from uoart.bitmap import Bitmap

PALETTE_SIZE = 256
_PALETTE_BYTES = PALETTE_SIZE * 2
_DOUBLE_XOR = ((0x200 << 22) | (0x200 << 12)) & 0xFFFFFFFF
_END_MARKER = 0x7FFF7FFF
_END_BYTES = struct.pack("<I", _END_MARKER)
_INT_RE = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")


def _parse_int(text: str) -> int:
    """Parse the leading integer of ``text`` with automatic base (hex, octal, decimal)."""
    match = _INT_RE.match(text)
    if match is None:
        raise ValueError(f"Not a number: {text!r}")
    sign, digits = match.groups()
    if digits[:2] in ("0x", "0X"):
        value = int(digits[2:], 16)
    elif digits.startswith("0") and len(digits) > 1:
        value = int(digits[1:], 8)
    else:
        value = int(digits)
    return -value if sign == "-" else value


def _int16(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


def _unique_colors(images: Iterable[Bitmap], mask: int) -> list[int]:
    colors = {
        image[x, y] & mask
        for image in images
        if not image.empty
        for y in range(image.height)
        for x in range(image.width)
    }
    if len(colors) > PALETTE_SIZE:
        raise ValueError("Too many colors for palette.")
    return sorted(colors)


@dataclass
class Palette:
    """A table of 256 16 bit colours; shorter lists are padded with zeros."""

    colors: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        colors = [c & 0xFFFF for c in self.colors]
        if len(colors) > PALETTE_SIZE:
            raise ValueError("Too many colors for palette.")
        self.colors = colors + [0] * (PALETTE_SIZE - len(colors))

    def _check(self, index: int) -> int:
        if not 0 <= index < PALETTE_SIZE:
            raise IndexError("Palette index out of range.")
        return index

    def __getitem__(self, index: int) -> int:
        return self.colors[self._check(index)]

    def __setitem__(self, index: int, value: int) -> None:
        self.colors[self._check(index)] = value & 0xFFFF

    def __len__(self) -> int:
        return PALETTE_SIZE

    def __iter__(self) -> Iterator[int]:
        return iter(self.colors)

    @classmethod
    def from_frames(cls, frames: Iterable[AnimFrame]) -> Palette:
        """Collect the distinct colours of the frames' images, in ascending order."""
        return cls(_unique_colors((frame.image for frame in frames), 0xFFFF))

    @classmethod
    def from_images(cls, images: Iterable[Bitmap]) -> Palette:
        """Collect the distinct colours (without alpha bit) of the images, ascending."""
        return cls(_unique_colors(images, 0x7FFF))

    @classmethod
    def from_bytes(cls, data: bytes) -> Palette:
        """Read 256 little-endian colours, dropping the alpha bit."""
        if len(data) < _PALETTE_BYTES:
            raise ValueError("Buffer too small for palette.")
        colors = struct.unpack_from(f"<{PALETTE_SIZE}H", data)
        return cls([color & 0x7FFF for color in colors])

    def index_for(self, color: int) -> int:
        """Return the first index holding ``color``."""
        try:
            return self.colors.index(color)
        except ValueError:
            raise ValueError("Color was not in palette.") from None

    def to_bytes(self) -> bytes:
        """Encode the palette as 512 little-endian bytes."""
        return struct.pack(f"<{PALETTE_SIZE}H", *self.colors)


@dataclass
class AnimFrame:
    """One animation frame: a centre point and an optional image."""

    HEADER: ClassVar[str] = "has_image,center_x,center_y"

    center_x: int = 0
    center_y: int = 0
    image: Bitmap = field(default_factory=Bitmap)

    def __post_init__(self) -> None:
        self.center_x = _int16(self.center_x)
        self.center_y = _int16(self.center_y)

    @classmethod
    def from_bytes(cls, data: bytes, offset: int, size: int, palette: Palette) -> AnimFrame:
        """Decode the frame stored at ``offset`` in ``data``."""
        if size < 8:
            raise ValueError("Invalid size for animation frame data.")
        try:
            center_x, center_y, width, height = struct.unpack_from("<hhHH", data, offset)
            pos = offset + 8
            image = Bitmap(width, height)
            if not image.empty:
                xbase = center_x - 0x200
                ybase = center_y + height - 0x200
                (header,) = struct.unpack_from("<I", data, pos)
                pos += 4
                while header != _END_MARKER:
                    header ^= _DOUBLE_XOR
                    deltay = (header >> 12) & 0x3FF
                    deltax = (header >> 22) & 0x3FF
                    run = header & 0xFFF
                    indices = data[pos:pos + run]
                    if len(indices) < run:
                        raise ValueError("Truncated animation frame data.")
                    for j, index in enumerate(indices):
                        image[xbase + deltax + j, ybase + deltay] = palette[index]
                    pos += run
                    (header,) = struct.unpack_from("<I", data, pos)
                    pos += 4
        except struct.error as exc:
            raise ValueError("Truncated animation frame data.") from exc
        return cls(center_x, center_y, image)

    @classmethod
    def from_line(cls, frame: int, line: str, path: str | Path) -> AnimFrame:
        """Build a frame from a CSV line; its image is read from a BMP beside ``path``."""
        path = Path(path)
        values = [value.strip() for value in line.split(",")]
        ident, _, rest = path.stem.partition(".")
        ident, rest = ident.strip(), rest.strip()
        result = cls()
        if len(values) >= 3:
            result.center_y = _int16(_parse_int(values[2]))
        if len(values) >= 2:
            result.center_x = _int16(_parse_int(values[1]))
        if values and _parse_int(values[0]):
            suffix = f"-{rest}" if rest else ""
            image_path = path.with_name(f"{ident}.{frame}{suffix}.bmp")
            with open(image_path, "rb") as stream:
                result.image = Bitmap.from_bmp(stream)
        return result

    def description(self) -> str:
        """The frame as a CSV line: has_image,center_x,center_y."""
        return f"{0 if self.image.empty else 1},{self.center_x},{self.center_y}"

    def _runs(self) -> Iterator[tuple[int, list[tuple[int, int]]]]:
        width, height = self.image.size
        for y in range(height):
            runs: list[tuple[int, int]] = []
            start: int | None = None
            for x in range(width):
                if self.image[x, y]:
                    if start is None:
                        start = x
                elif start is not None:
                    runs.append((start, x - 1))
                    start = None
            if start is not None:
                runs.append((start, width - 1))
            if runs:
                yield y, runs

    def to_bytes(self, palette: Palette) -> bytes:
        """Encode the frame with colour indices from ``palette``; empty frames give b''."""
        if self.image.empty:
            return b""
        width, height = self.image.size
        out = bytearray(
            struct.pack("<hhHH", self.center_x, self.center_y, width & 0xFFFF, height & 0xFFFF)
        )
        xbase = self.center_x - 0x200
        ybase = self.center_y + height - 0x200
        for y, runs in self._runs():
            for start, end in runs:
                header = (
                    (((y - ybase) & 0xFFF) << 12)
                    | (((start - xbase) & 0xFFF) << 22)
                    | ((end - start + 1) & 0xFFF)
                ) & 0xFFFFFFFF
                out += struct.pack("<I", header ^ _DOUBLE_XOR)
                out += bytes(palette.index_for(self.image[x, y]) for x in range(start, end + 1))
        out += _END_BYTES
        return bytes(out)


class Animation:
    """A sequence of frames sharing one palette."""

    def __init__(self, frames: Sequence[AnimFrame] | None = None) -> None:
        self.frames: list[AnimFrame] = list(frames or [])
        self.palette = Palette.from_frames(self.frames)

    def __repr__(self) -> str:
        return f"Animation({len(self.frames)} frames)"

    @classmethod
    def from_bytes(cls, data: bytes) -> Animation:
        """Decode binary animation data: palette, frame count, offsets, frames."""
        data = bytes(data)
        palette = Palette.from_bytes(data)
        try:
            (count,) = struct.unpack_from("<I", data, _PALETTE_BYTES)
            if _PALETTE_BYTES + 4 + 4 * count > len(data):
                raise ValueError("Truncated animation frame table.")
            offsets = struct.unpack_from(f"<{count}I", data, _PALETTE_BYTES + 4)
        except struct.error as exc:
            raise ValueError("Truncated animation data.") from exc
        frames: list[AnimFrame] = []
        for index, start in enumerate(offsets):
            if start == 0:
                frames.append(AnimFrame())
                continue
            dataoffset = _PALETTE_BYTES + start
            if index < count - 1:
                size = (offsets[index + 1] - start) & 0xFFFFFFFF
            else:
                size = len(data) - dataoffset
            frames.append(AnimFrame.from_bytes(data, dataoffset, size, palette))
        animation = cls(frames)
        animation.palette = palette
        return animation

    @classmethod
    def from_csv(cls, stream: TextIO, path: str | Path) -> Animation:
        """Read frames from CSV lines; lines not starting with a digit are skipped."""
        frames: list[AnimFrame] = []
        for raw in stream:
            line = raw.split("//", 1)[0].strip()
            if line and line[0].isdigit() and line[0].isascii():
                frames.append(AnimFrame.from_line(len(frames), line, path))
        return cls(frames)

    def description(self) -> str:
        """The frames as CSV text with a header line."""
        lines = [AnimFrame.HEADER, *(frame.description() for frame in self.frames)]
        return "".join(f"{line}\n" for line in lines)

    def to_bytes(self) -> bytes:
        """Encode palette, frame count, frame offsets and frame data."""
        count = len(self.frames)
        location = 4 + 4 * count
        offsets: list[int] = []
        body = bytearray()
        for frame in self.frames:
            encoded = frame.to_bytes(self.palette)
            if encoded:
                offsets.append(location & 0xFFFFFFFF)
                body += encoded
                location += len(encoded)
            else:
                offsets.append(0)
        return (
            self.palette.to_bytes()
            + struct.pack(f"<I{count}I", count, *offsets)
            + bytes(body)
        )

    def __len__(self) -> int:
        return len(self.frames)

    def __getitem__(self, index: int) -> AnimFrame:
        return self.frames[index]