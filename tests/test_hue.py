import struct

import pytest

from uoart.hue import data_from_hue, hue_blank, hue_from_data


def _entry(colors, name=b""):
    body = struct.pack("<32H", *colors)
    return body + body[0:2] + body[62:64] + name.ljust(20, b"\0")


def _colors():
    return [(i * 1021) % 0x8000 for i in range(32)]


def test_round_trip():
    entry = _entry(_colors(), b"Bright Red")
    bitmap, name = hue_from_data(entry)
    assert name == "Bright Red"
    assert data_from_hue(bitmap, name) == entry


def test_default_size():
    bitmap, _ = hue_from_data(_entry(_colors()))
    assert bitmap.size == (32 * 5, 5)


def test_custom_size_round_trip():
    entry = _entry(_colors(), b"abc")
    bitmap, name = hue_from_data(entry, 3, 2)
    assert bitmap.size == (96, 2)
    assert data_from_hue(bitmap, name) == entry


def test_name_is_truncated_to_field():
    bitmap, _ = hue_from_data(_entry(_colors()))
    data = data_from_hue(bitmap, "x" * 30)
    assert data[68:88] == b"x" * 20
    assert len(data) == 88


def test_name_stops_at_control_byte():
    _, name = hue_from_data(_entry(_colors(), b"ab\x01cd"))
    assert name == "ab"


def test_blank_entry():
    assert hue_blank(_entry([1] * 32)) is True


def test_blank_ignores_high_bit():
    assert hue_blank(_entry([0x8001] * 32)) is True


def test_not_blank():
    colors = [1] * 32
    colors[17] = 2
    assert hue_blank(_entry(colors)) is False


def test_short_data_raises():
    with pytest.raises(ValueError):
        hue_from_data(b"\0" * 40)