import struct

import pytest

from uoart.texture import bitmap_for_texture, data_for_texture


def _data(count):
    return struct.pack(f"<{count}H", *((i * 13) % 0x8000 for i in range(count)))


def test_small_texture_size():
    assert bitmap_for_texture(_data(64 * 64)).size == (64, 64)


def test_large_texture_size():
    assert bitmap_for_texture(_data(128 * 128)).size == (128, 128)


def test_round_trip_small():
    data = _data(64 * 64)
    assert data_for_texture(bitmap_for_texture(data)) == data


def test_round_trip_large():
    data = _data(128 * 128)
    assert data_for_texture(bitmap_for_texture(data)) == data


def test_nonzero_pixels_opaque_zero_stays_zero():
    image = bitmap_for_texture(_data(64 * 64))
    assert image[0, 0] == 0
    assert image[1, 0] == 13 | 0x8000


def test_short_data_raises():
    with pytest.raises(ValueError):
        bitmap_for_texture(b"\0" * 10)