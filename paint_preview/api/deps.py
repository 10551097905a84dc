"""
Dependency functions for API endpoints.
"""
from functools import lru_cache
from typing import List

from fastapi import HTTPException

from paint_preview.core.errors import PaletteLoadError
from paint_preview.core.logging import logger
from paint_preview.schemas.palette import Color
from paint_preview.utils.image_edit_client import ImageEditClient
from paint_preview.utils.palette_loader import get_palette


@lru_cache(maxsize=1)
def get_image_edit_client() -> ImageEditClient:
    """
    Shared client for the image edit collaborator.

    Tests replace this through ``app.dependency_overrides``.
    """
    return ImageEditClient()


def get_palette_colors() -> List[Color]:
    """
    The configured palette.

    Raises:
        HTTPException: 503 if the palette source is unreachable or malformed
    """
    try:
        return get_palette()
    except PaletteLoadError as e:
        logger.error(f"Palette unavailable: {str(e)}")
        raise HTTPException(status_code=503, detail="Could not load paint colors.")
