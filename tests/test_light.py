import pytest

from uoart.light import bitmap_for_light, data_for_light


def _data(width, height):
    return bytes((i * 5) % 32 for i in range(width * height))


def test_size():
    assert bitmap_for_light(7, 3, _data(7, 3)).size == (7, 3)


def test_pixels_are_gray():
    image = bitmap_for_light(4, 4, _data(4, 4))
    assert all(image.is_gray(image[x, y]) for y in range(4) for x in range(4))


def test_full_intensity_pixel():
    image = bitmap_for_light(1, 1, bytes([0x1F]))
    assert image[0, 0] == 0x7FFF


def test_round_trip():
    data = _data(6, 5)
    assert data_for_light(bitmap_for_light(6, 5, data)) == data


def test_high_bits_are_ignored():
    plain = bitmap_for_light(2, 1, bytes([3, 4]))
    assert bitmap_for_light(2, 1, bytes([3 | 0xE0, 4 | 0x20])) == plain


def test_short_data_raises():
    with pytest.raises(ValueError):
        bitmap_for_light(4, 4, b"\0" * 3)