"""
API endpoints for the paint palette.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from paint_preview.api.deps import get_palette_colors
from paint_preview.core.errors import InvalidColorFormat
from paint_preview.core.logging import logger
from paint_preview.schemas.palette import CategorizeResponse, CategoryGroup, Color, PaletteResponse
from paint_preview.utils.color_categories import categorize, group_palette, hex_to_hsl, normalize_hex

router = APIRouter()


@router.get("/colors", response_model=List[Color])
async def list_colors(colors: List[Color] = Depends(get_palette_colors)) -> List[Color]:
    """
    Return the flat palette as a JSON array of {name, hex}, in source order.
    """
    return colors


@router.get("", response_model=PaletteResponse)
async def grouped_palette(colors: List[Color] = Depends(get_palette_colors)) -> PaletteResponse:
    """
    Return the palette grouped into color categories.

    Categories appear in display order (Lights, Darks, Neutrals, then hue
    bands); empty categories are omitted.
    """
    grouping = group_palette(colors)
    return PaletteResponse(
        categories=[CategoryGroup(category=category, colors=members) for category, members in grouping.items()],
        total=len(colors),
    )


@router.get("/categorize", response_model=CategorizeResponse)
async def categorize_color(
    hex: str = Query(..., description="3- or 6-digit hex color, '#' optional"),
) -> CategorizeResponse:
    """
    Categorize a single hex color and report its HSL components.
    """
    try:
        normalized = normalize_hex(hex)
        hue, saturation, lightness = hex_to_hsl(normalized)
        category = categorize(normalized)
    except InvalidColorFormat as e:
        logger.warning(f"Rejected color for categorization: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    return CategorizeResponse(
        hex=hex,
        normalized=f"#{normalized}",
        category=category,
        hue=hue,
        saturation=saturation,
        lightness=lightness,
    )
