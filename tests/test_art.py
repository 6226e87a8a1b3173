import struct

import pytest

from uoart.art import bitmap_for_item, bitmap_for_terrain, data_for_item, data_for_terrain
from uoart.bitmap import Bitmap


def _terrain_data():
    return struct.pack("<1012H", *((i * 37) % 0x7FFF + 1 for i in range(1012)))


def _item_image():
    image = Bitmap(6, 4)
    image[1, 0] = 0x8000 | 0x1234
    image[2, 0] = 0x8000 | 0x0421
    image[5, 0] = 0x8000 | 0x7C00
    image[0, 1] = 0x8000 | 0x03E0
    image[1, 2] = 0x8000 | 0x1234
    image[2, 2] = 0x8000 | 0x0421
    image[5, 2] = 0x8000 | 0x7C00
    return image


def test_terrain_dimensions_and_corners():
    image = bitmap_for_terrain(_terrain_data())
    assert image.size == (44, 44)
    assert image[0, 0] == 0
    assert image[43, 43] == 0
    assert image[21, 0] & 0x8000


def test_terrain_data_length():
    assert len(data_for_terrain(bitmap_for_terrain(_terrain_data()))) == 2024


def test_terrain_round_trip():
    image = bitmap_for_terrain(_terrain_data())
    assert bitmap_for_terrain(data_for_terrain(image)) == image


def test_terrain_lower_half_is_masked():
    image = bitmap_for_terrain(_terrain_data())
    data = data_for_terrain(image)
    lower = struct.unpack_from("<506H", data, 1012)
    assert all(word & 0x8000 == 0 for word in lower)


def test_terrain_short_data_raises():
    with pytest.raises(ValueError):
        bitmap_for_terrain(b"\0" * 100)


def test_item_round_trip():
    image = _item_image()
    assert bitmap_for_item(data_for_item(image)) == image


def test_item_header_holds_size():
    image = _item_image()
    data = data_for_item(image)
    assert struct.unpack_from("<IHH", data) == (0, 6, 4)


def test_item_identical_rows_share_offset():
    image = _item_image()
    data = data_for_item(image)
    table = struct.unpack_from("<4H", data, 8)
    assert table[0] == table[2]
    assert table[1] == table[3] or table[1] != table[0]
    assert table[0] == 0


def test_item_blank_image_round_trip():
    image = Bitmap(3, 2)
    assert bitmap_for_item(data_for_item(image)) == image


def test_item_too_little_data_raises():
    with pytest.raises(ValueError):
        bitmap_for_item(b"\0" * 8)


def test_item_invalid_width_raises():
    with pytest.raises(ValueError, match="width"):
        bitmap_for_item(struct.pack("<IHH", 0, 0, 4) + b"\0" * 8)


def test_item_invalid_height_raises():
    with pytest.raises(ValueError, match="height"):
        bitmap_for_item(struct.pack("<IHH", 0, 4, 0) + b"\0" * 8)


def test_item_truncated_data_raises():
    with pytest.raises(ValueError):
        bitmap_for_item(struct.pack("<IHH", 0, 4, 200) + b"\0" * 4)