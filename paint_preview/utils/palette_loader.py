"""
Utility functions for loading the static paint palette.
"""
import json
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

import requests
from pydantic import TypeAdapter, ValidationError

from paint_preview.core.config import settings
from paint_preview.core.errors import PaletteLoadError
from paint_preview.core.logging import logger
from paint_preview.schemas.palette import Color

_palette_adapter = TypeAdapter(List[Color])


def parse_palette(payload) -> List[Color]:
    """
    Validate a decoded JSON payload as a list of colors.

    Raises:
        PaletteLoadError: If the payload is not an array of {name, hex} objects
    """
    if not isinstance(payload, list):
        raise PaletteLoadError(f"Palette must be a JSON array, got {type(payload).__name__}")
    try:
        return _palette_adapter.validate_python(payload)
    except ValidationError as e:
        raise PaletteLoadError(f"Malformed palette entry: {e.errors()[0]['msg']}") from e


def _read_source(source: str) -> str:
    if source.startswith(('http://', 'https://')):
        try:
            response = requests.get(source, timeout=settings.PALETTE_FETCH_TIMEOUT)
            response.raise_for_status()
            return response.text
        except requests.RequestException as e:
            raise PaletteLoadError(f"Could not fetch palette from {source}: {str(e)}") from e

    path = Path(source)
    if not path.is_file():
        raise PaletteLoadError(f"Palette file does not exist: {source}")
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise PaletteLoadError(f"Could not read palette file {source}: {str(e)}") from e


def load_palette(source: Optional[str] = None) -> List[Color]:
    """
    Load the paint palette from a file path or URL.

    Args:
        source: Local path or http(s) URL of a JSON array of {name, hex};
            defaults to the configured palette source

    Returns:
        List[Color]: Colors in source order

    Raises:
        PaletteLoadError: If the source is unreachable or malformed
    """
    source = source or settings.PALETTE_SOURCE
    logger.info(f"Loading palette from {source}")

    raw = _read_source(source)
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PaletteLoadError(f"Palette at {source} is not valid JSON: {str(e)}") from e

    colors = parse_palette(payload)
    logger.info(f"Loaded {len(colors)} palette colors")
    return colors


@lru_cache(maxsize=1)
def get_palette() -> List[Color]:
    """Palette for the configured source, loaded once per process."""
    return load_palette()
