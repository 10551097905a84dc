"""
Utility functions for stamping a paint color label onto a preview image.
"""
from io import BytesIO

from PIL import Image, ImageDraw, ImageFont

BANNER_PADDING = 12
BANNER_ALPHA = 170


def _load_font(size: int):
    try:
        return ImageFont.load_default(size=size)
    except TypeError:
        # Pillow < 10.1 only ships the fixed-size bitmap font
        return ImageFont.load_default()


def annotate_image(image_bytes: bytes, label: str) -> bytes:
    """
    Composite a text label onto the bottom of an image.

    Args:
        image_bytes: Encoded image (any format Pillow can read)
        label: Text to draw, e.g. "Naval SW 6244 (#2F3D4C)"

    Returns:
        bytes: PNG-encoded labelled image
    """
    with Image.open(BytesIO(image_bytes)) as source:
        image = source.convert("RGBA")

    font = _load_font(max(14, image.height // 32))
    overlay = Image.new("RGBA", image.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)

    left, top, right, bottom = draw.textbbox((0, 0), label, font=font)
    text_height = bottom - top
    banner_top = image.height - text_height - 2 * BANNER_PADDING

    draw.rectangle([(0, banner_top), (image.width, image.height)], fill=(0, 0, 0, BANNER_ALPHA))
    draw.text(
        (BANNER_PADDING - left, banner_top + BANNER_PADDING - top),
        label,
        font=font,
        fill=(255, 255, 255, 255),
    )

    output = BytesIO()
    Image.alpha_composite(image, overlay).save(output, format="PNG")
    return output.getvalue()
