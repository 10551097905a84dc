"""
Schema definitions for the paint palette.
"""
from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator

from paint_preview.utils.color_categories import Category, normalize_hex


class Color(BaseModel):
    """A paint color from the static palette"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Paint color name, e.g. 'Agreeable Gray'")
    hex: str = Field(..., description="3- or 6-digit hex value, '#' optional")

    @field_validator("hex")
    @classmethod
    def validate_hex(cls, value: str) -> str:
        normalize_hex(value)
        return value

    @property
    def label(self) -> str:
        return f"{self.name} ({self.hex})"


class CategoryGroup(BaseModel):
    """Colors that share a category, in palette order"""
    category: Category
    colors: List[Color]


class PaletteResponse(BaseModel):
    """Response schema for the grouped palette"""
    categories: List[CategoryGroup] = Field(..., description="Non-empty categories in display order")
    total: int = Field(..., description="Number of colors in the palette")


class CategorizeResponse(BaseModel):
    """Response schema for categorizing a single hex color"""
    hex: str = Field(..., description="Hex value as submitted")
    normalized: str = Field(..., description="Six-digit '#rrggbb' form")
    category: Category
    hue: float = Field(..., description="Hue in degrees [0, 360)")
    saturation: float = Field(..., description="Saturation in [0, 1]")
    lightness: float = Field(..., description="Lightness in [0, 1]")
