"""
API endpoint that proxies house repaint requests to the image edit service.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from paint_preview.api.deps import get_image_edit_client
from paint_preview.core.errors import (
    EditRequestError,
    InvalidColorFormat,
    InvalidImageError,
    MissingInputError,
    PaletteLoadError,
)
from paint_preview.core.logging import logger
from paint_preview.schemas.palette import Color
from paint_preview.utils.color_categories import normalize_hex
from paint_preview.utils.image_edit_client import ImageEditClient, verify_image
from paint_preview.utils.labeling import annotate_image
from paint_preview.utils.palette_loader import get_palette

router = APIRouter()


def resolve_color(hex_value: Optional[str], name: Optional[str]) -> Color:
    """
    Build the Color for a submitted hex value.

    When no name is submitted the palette is searched for a matching hex;
    failing that the hex itself is used as the name. The Color always carries
    the normalized "#RRGGBB" form of the submitted value.

    Raises:
        InvalidColorFormat: If the hex value is malformed
    """
    normalized = normalize_hex(hex_value)
    canonical = f"#{normalized.upper()}"
    if name:
        return Color(name=name.strip(), hex=canonical)

    try:
        for color in get_palette():
            if normalize_hex(color.hex) == normalized:
                return color
    except PaletteLoadError as e:
        logger.warning(f"Palette unavailable for name lookup: {str(e)}")

    return Color(name=canonical, hex=canonical)


@router.post(
    "",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}, "description": "The repainted house photo"}},
)
async def repaint_house(
    image: Optional[UploadFile] = File(None, description="Photo of the house"),
    color: Optional[str] = Form(None, description="Hex value of the main paint color"),
    name: Optional[str] = Form(None, description="Paint color name"),
    trim_color: Optional[str] = Form(None, description="Optional hex value for the trim"),
    trim_name: Optional[str] = Form(None, description="Optional trim paint color name"),
    label: bool = Form(False, description="Draw the color name and hex onto the result"),
    client: ImageEditClient = Depends(get_image_edit_client),
):
    """
    Repaint an uploaded house photo in the chosen paint color.

    The photo and color are forwarded to the image edit service and the
    repainted image is returned as a PNG body. Nothing is forwarded when the
    image or the color is missing, or when the upload is not a readable image.
    """
    try:
        content = await image.read() if image is not None else b""
        if not content or not color:
            raise MissingInputError("Please select an image and pick a paint color.")

        verify_image(content)
        main_color = resolve_color(color, name)
        trim = resolve_color(trim_color, trim_name) if trim_color else None
    except (MissingInputError, InvalidColorFormat, InvalidImageError) as e:
        logger.warning(f"Rejected repaint request: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(
        f"Repaint request for {image.filename} ({len(content)} bytes) in {main_color.label}"
        + (f" with trim {trim.label}" if trim else "")
    )

    try:
        result = await client.edit(content, main_color, trim)
        verify_image(result)
    except InvalidImageError as e:
        logger.error(f"Repaint returned data that is not an image: {str(e)}")
        raise HTTPException(status_code=502, detail="Image edit service returned data that is not an image")
    except EditRequestError as e:
        logger.error(f"Repaint failed: {str(e)}")
        raise HTTPException(status_code=502, detail=str(e))

    if label:
        result = annotate_image(result, main_color.label)

    logger.info(f"Repaint complete, returning {len(result)} bytes")
    return Response(
        content=result,
        media_type="image/png",
        headers={"Content-Disposition": 'inline; filename="house-preview.png"'},
    )
