import struct

import pytest

from uoart.bitmap import Bitmap
from uoart.gump import bitmap_for_gump, data_for_gump


def _image():
    image = Bitmap(5, 3)
    for x in range(5):
        image[x, 0] = 0x8000 | 0x1111
    image[2, 1] = 0x8000 | 0x7C00
    image[4, 2] = 0x8000 | 0x001F
    return image


def test_round_trip():
    image = _image()
    assert bitmap_for_gump(data_for_gump(image)) == image


def test_header_holds_size_and_first_offset():
    data = data_for_gump(_image())
    width, height, first = struct.unpack_from("<III", data)
    assert (width, height) == (5, 3)
    assert first == height


def test_single_run_wire_bytes():
    image = Bitmap(2, 1)
    image[0, 0] = 0x1234
    image[1, 0] = 0x1234
    assert data_for_gump(image) == struct.pack("<IIIHH", 2, 1, 1, 0x1234, 2)


def test_decoded_colours_are_opaque():
    image = Bitmap(2, 1)
    image[0, 0] = 0x0421
    decoded = bitmap_for_gump(data_for_gump(image))
    assert decoded[0, 0] == 0x0421 | 0x8000
    assert decoded[1, 0] == 0


def test_too_little_data_raises():
    with pytest.raises(ValueError):
        bitmap_for_gump(b"\0" * 8)


def test_truncated_offset_table_raises():
    with pytest.raises(ValueError):
        bitmap_for_gump(struct.pack("<II", 2, 100) + b"\0" * 4)