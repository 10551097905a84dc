"""
Utility functions for bucketing paint colors into named categories.

Colors are converted from hex to HSL and classified by lightness first,
then saturation, then hue band. The buckets only drive how the palette is
grouped for display.
"""
import string
from enum import Enum
from typing import Dict, Iterable, List, Tuple

from paint_preview.core.errors import InvalidColorFormat


class Category(str, Enum):
    """Closed set of palette buckets, in display order."""
    LIGHTS = "Lights"
    DARKS = "Darks"
    NEUTRALS = "Neutrals"
    REDS = "Reds"
    ORANGES = "Oranges"
    YELLOWS = "Yellows"
    GREENS = "Greens"
    CYANS = "Cyans"
    BLUES = "Blues"
    PURPLES = "Purples"


# Upper hue bound (exclusive, degrees) for each chromatic bucket after Reds
HUE_BANDS: List[Tuple[float, Category]] = [
    (60, Category.ORANGES),
    (90, Category.YELLOWS),
    (150, Category.GREENS),
    (210, Category.CYANS),
    (270, Category.BLUES),
]

LIGHT_THRESHOLD = 0.8
DARK_THRESHOLD = 0.2
NEUTRAL_SATURATION = 0.1

_HEX_DIGITS = set(string.hexdigits)


def normalize_hex(value: str) -> str:
    """
    Normalize a hex color to six lowercase digits without the leading '#'.

    Args:
        value: 3- or 6-digit hex string, '#' optional

    Returns:
        str: e.g. "ff00aa" for "#f0a"

    Raises:
        InvalidColorFormat: If the value is not a 3- or 6-digit hex string
    """
    if not isinstance(value, str):
        raise InvalidColorFormat(f"Hex color must be a string, got {type(value).__name__}")

    digits = value.strip()
    if digits.startswith("#"):
        digits = digits[1:]

    if len(digits) not in (3, 6) or not set(digits) <= _HEX_DIGITS:
        raise InvalidColorFormat(f"Invalid hex color: {value!r}")

    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)

    return digits.lower()


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    """Split a hex color into 8-bit red, green and blue channels."""
    n = int(normalize_hex(value), 16)
    return (n >> 16) & 255, (n >> 8) & 255, n & 255


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[float, float, float]:
    """
    Convert 8-bit RGB channels to HSL.

    Returns:
        Tuple[float, float, float]: hue in degrees [0, 360), saturation and
        lightness in [0, 1]
    """
    high = max(r, g, b)
    low = min(r, g, b)
    l = (high + low) / 510

    if high == low:
        return 0.0, 0.0, l

    # Integer channel differences keep band edges such as 30 and 330 exact
    d = high - low
    s = d / (510 - high - low) if l > 0.5 else d / (high + low)

    if high == r:
        h = (g - b) / d + (6 if g < b else 0)
    elif high == g:
        h = (b - r) / d + 2
    else:
        h = (r - g) / d + 4

    return h * 60, s, l


def hex_to_hsl(value: str) -> Tuple[float, float, float]:
    return rgb_to_hsl(*hex_to_rgb(value))


def categorize(value: str) -> Category:
    """
    Return the palette bucket for a hex color.

    Rules are checked in order and the first match wins: light, dark,
    low-saturation neutral, then hue bands with red wrapping around 0 degrees.

    Raises:
        InvalidColorFormat: If the value is not a valid hex color
    """
    h, s, l = hex_to_hsl(value)

    if l >= LIGHT_THRESHOLD:
        return Category.LIGHTS
    if l <= DARK_THRESHOLD:
        return Category.DARKS
    if s <= NEUTRAL_SATURATION:
        return Category.NEUTRALS
    if h < 30 or h >= 330:
        return Category.REDS
    for upper, category in HUE_BANDS:
        if h < upper:
            return category
    return Category.PURPLES


def group_palette(colors: Iterable) -> Dict[Category, List]:
    """
    Group palette colors by category.

    Args:
        colors: Objects exposing a ``hex`` attribute, in source order

    Returns:
        Dict[Category, List]: Non-empty buckets keyed in Category order;
        each bucket keeps the source order of its colors
    """
    buckets: Dict[Category, List] = {category: [] for category in Category}
    for color in colors:
        buckets[categorize(color.hex)].append(color)
    return {category: members for category, members in buckets.items() if members}
