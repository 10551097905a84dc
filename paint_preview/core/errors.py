"""
Exception types shared by the palette, proxy and preview layers.
"""


class PaintPreviewError(Exception):
    """Base class for every failure the application reports to a user."""


class InvalidColorFormat(PaintPreviewError, ValueError):
    """A hex color string is not 3 or 6 hexadecimal digits."""


class PaletteLoadError(PaintPreviewError):
    """The palette source is unreachable or does not hold a list of colors."""


class MissingInputError(PaintPreviewError):
    """A submission lacks the image or the paint color."""


class EditRequestError(PaintPreviewError):
    """The image edit collaborator failed or could not be reached."""


class InvalidImageError(PaintPreviewError, ValueError):
    """Bytes that were expected to be an image cannot be decoded."""
