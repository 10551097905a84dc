"""
Configuration settings for the House Paint Preview application.
"""
import re
from pathlib import Path
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Bundled Sherwin-Williams palette shipped with the package
DEFAULT_PALETTE_PATH = Path(__file__).resolve().parent.parent / "data" / "sherwin_williams_colors.json"

_SIZE_PATTERN = re.compile(r"^(\d+)x(\d+)$")


def parse_image_size(value: str) -> int:
    """
    Edge length of a square "<n>x<n>" size string.

    Raises:
        ValueError: If the value is not a square pixel size
    """
    match = _SIZE_PATTERN.match(value or "")
    if not match or match.group(1) != match.group(2) or int(match.group(1)) == 0:
        raise ValueError(f"Image size must look like '1024x1024', got {value!r}")
    return int(match.group(1))


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "House Paint Preview"

    # OpenAI image edit configuration
    OPENAI_API_KEY: Optional[str] = Field(None, description="API key for the image edit collaborator")
    OPENAI_BASE_URL: Optional[str] = Field(None, description="Override for the OpenAI API base URL")
    IMAGE_EDIT_MODEL: str = Field("dall-e-2", description="Model used for image edits")
    IMAGE_EDIT_SIZE: str = Field("1024x1024", description="Square output size requested from the collaborator")
    IMAGE_EDIT_TIMEOUT: float = Field(120.0, description="Seconds to wait for one image edit")

    # Palette source: local path or http(s) URL returning a JSON array of {name, hex}
    PALETTE_SOURCE: str = Field(str(DEFAULT_PALETTE_PATH))
    PALETTE_FETCH_TIMEOUT: float = 10.0

    # Logging
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: List[str] = ["*"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore"
    }

    @field_validator("IMAGE_EDIT_SIZE")
    @classmethod
    def validate_image_size(cls, value: str) -> str:
        parse_image_size(value)
        return value


settings = Settings()
