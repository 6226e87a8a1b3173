# uoart

Convert Ultima Online artwork records to and from bitmaps.

The package decodes single binary records (one art tile, one gump, one
texture, one hue entry, one animation and so on) into `Bitmap` objects,
encodes bitmaps back into those records, and reads and writes
uncompressed Windows BMP files. It has no dependencies outside the
standard library.

## Installation

```
pip install uoart
```

## Modules

- `uoart.bitmap`: the `Bitmap` image type with 1, 2 or 4 byte pixels
  (`Bitmap(width, height, depth)`, pixel access as `image[x, y]`), and
  `size`, `width`, `height`, `empty`, `resize`, `fill`, `invert`,
  `mirror`, `is_gray`, `intensify` and `hue`. `Bitmap.from_bmp(stream, depth)`
  reads 8, 16, 24 or 32 bit BMPs; `save_bmp(output, pixelsize, inverted)`
  writes them. Colour helpers: `channels_from_16`, `channels_from_32`,
  `color16_to_32`, `color32_to_16`, `read_palette`, `index_for`.
- `uoart.art`: land tiles as 44×44 diamonds (`bitmap_for_terrain`,
  `data_for_terrain`) and run-length encoded item art (`bitmap_for_item`,
  `data_for_item`; identical rows are stored once).
- `uoart.gump`: run-length encoded gump images (`bitmap_for_gump`,
  `data_for_gump`).
- `uoart.texture`: square textures, 64×64, or 128×128 when the record is
  32768 bytes (`bitmap_for_texture`, `data_for_texture`).
- `uoart.light`: light maps of one intensity byte per pixel
  (`bitmap_for_light(width, height, data)`, `data_for_light`).
- `uoart.hue`: 88 byte hue entries. `hue_from_data(data, width, height)`
  renders the 32 colours as blocks and returns `(bitmap, name)`;
  `data_from_hue(bitmap, name)` samples 32 colours across a bitmap;
  `hue_blank(data)` tells whether every colour is the placeholder value 1.
- `uoart.animation`: palettized animations. `Palette` holds 256 colours,
  `AnimFrame` a centre point and image, `Animation` a list of frames with a
  shared palette. `Animation.from_bytes` / `to_bytes` handle the binary
  record; `Animation.from_csv(stream, path)` and `description()` handle a
  CSV form whose frame images are BMP files named
  `<id>.<frame>[-<label>].bmp` beside the CSV file.

Malformed or truncated records raise `ValueError`; pixel access outside
an image raises `IndexError`.

## Examples

Decode a gump record and save it as a 24-bit BMP:

```python
from uoart.gump import bitmap_for_gump

with open("gump.dat", "rb") as src:
    image = bitmap_for_gump(src.read())

with open("gump.bmp", "wb") as out:
    image.save_bmp(out, 24, False)
```

Read a BMP back and encode it as a gump record:

```python
from uoart.bitmap import Bitmap
from uoart.gump import data_for_gump

with open("gump.bmp", "rb") as src:
    image = Bitmap.from_bmp(src, 2)

record = data_for_gump(image)
```

Render a hue entry and get its name:

```python
from uoart.hue import hue_blank, hue_from_data

if not hue_blank(entry):
    strip, name = hue_from_data(entry, 10, 10)
```

## What it does not do

The package works on individual records held in memory. It does not
open the game's index, data or packed container files, does not read
or write tile data, sound or multi records, and offers no command-line
tool; finding a record and passing its bytes in is left to the caller.

## Tests

```
pip install -e ".[test]"
pytest
```