"""Tests for hex parsing, HSL conversion and palette bucketing."""
import random

import pytest

from paint_preview.core.errors import InvalidColorFormat
from paint_preview.schemas.palette import Color
from paint_preview.utils.color_categories import (
    Category,
    categorize,
    group_palette,
    hex_to_rgb,
    normalize_hex,
    rgb_to_hsl,
)


@pytest.mark.parametrize("value,expected", [
    ("#FFFFFF", Category.LIGHTS),
    ("#000000", Category.DARKS),
    ("#808080", Category.NEUTRALS),
    ("#FF0000", Category.REDS),
    ("#FF0040", Category.REDS),
    ("#FF8000", Category.ORANGES),
    ("#FFFF00", Category.YELLOWS),
    ("#00FF00", Category.GREENS),
    ("#00FFFF", Category.CYANS),
    ("#0000FF", Category.BLUES),
    ("#8000FF", Category.PURPLES),
    ("#FF00FF", Category.PURPLES),
    ("#8C8080", Category.NEUTRALS),
])
def test_categorize_reference_colors(value, expected):
    assert categorize(value) == expected


@pytest.mark.parametrize("value,expected", [
    ("#FF8001", Category.ORANGES),  # hue 30.0
    ("#ff7f00", Category.REDS),  # hue just under 30
    ("#FF0180", Category.REDS),  # hue 330.0
    ("#80FF00", Category.YELLOWS),  # hue just under 90
])
def test_hue_band_edges(value, expected):
    assert categorize(value) == expected


def test_band_edge_hues_are_exact():
    assert rgb_to_hsl(255, 128, 1)[0] == 30.0
    assert rgb_to_hsl(255, 1, 128)[0] == 330.0


def test_neutral_saturation_edge():
    # Both at lightness 0.5: saturation 25/255 and 27/255
    assert categorize("#8C7373") == Category.NEUTRALS
    assert categorize("#8D7272") == Category.REDS


def test_lightness_thresholds_are_inclusive():
    assert categorize("#CCCCCC") == Category.LIGHTS
    assert categorize("#333333") == Category.DARKS


def test_lightness_checked_before_hue():
    # Pale pink is light before it is red
    assert categorize("#FFE0E0") == Category.LIGHTS
    # Very dark blue is dark before it is blue
    assert categorize("#00002A") == Category.DARKS


def test_three_digit_form_matches_six_digit_form():
    assert categorize("#0f0") == categorize("#00ff00")
    assert normalize_hex("f0a") == "ff00aa"
    assert normalize_hex("#ABC") == "aabbcc"


def test_hash_is_optional():
    assert categorize("ff0000") == categorize("#ff0000")


def test_hex_to_rgb_channels():
    assert hex_to_rgb("#2F3D4C") == (47, 61, 76)


def test_rgb_to_hsl_primaries():
    assert rgb_to_hsl(255, 0, 0) == (0.0, 1.0, 0.5)
    h, s, l = rgb_to_hsl(0, 255, 0)
    assert h == pytest.approx(120)
    h, s, l = rgb_to_hsl(0, 0, 255)
    assert h == pytest.approx(240)


def test_rgb_to_hsl_achromatic():
    h, s, l = rgb_to_hsl(128, 128, 128)
    assert (h, s) == (0.0, 0.0)
    assert l == pytest.approx(128 / 255)


@pytest.mark.parametrize("value", ["#12345", "#GGGGGG", "", "#", "12", "#1234567", "zzz"])
def test_malformed_hex_raises(value):
    with pytest.raises(InvalidColorFormat):
        categorize(value)


def test_non_string_hex_raises():
    with pytest.raises(InvalidColorFormat):
        normalize_hex(0xFF0000)


def test_every_valid_hex_lands_in_one_category():
    rng = random.Random(7)
    for _ in range(500):
        value = f"#{rng.randrange(0x1000000):06x}"
        assert categorize(value) in set(Category)


def test_group_palette_keeps_source_order_and_category_order():
    colors = [
        Color(name="Blue One", hex="#0000FF"),
        Color(name="White", hex="#FFFFFF"),
        Color(name="Red", hex="#FF0000"),
        Color(name="Blue Two", hex="#0033CC"),
    ]
    grouping = group_palette(colors)

    assert list(grouping) == [Category.LIGHTS, Category.REDS, Category.BLUES]
    assert [c.name for c in grouping[Category.BLUES]] == ["Blue One", "Blue Two"]


def test_group_palette_empty():
    assert group_palette([]) == {}
