"""
Client for the external image edit API that repaints house photos.
"""
import base64
import binascii
from io import BytesIO
from typing import Optional

import httpx
from openai import AsyncOpenAI, OpenAIError
from PIL import Image, ImageOps, UnidentifiedImageError

from paint_preview.core.config import parse_image_size, settings
from paint_preview.core.errors import EditRequestError, InvalidImageError
from paint_preview.core.logging import logger
from paint_preview.schemas.palette import Color


def build_prompt(color: Color, trim: Optional[Color] = None) -> str:
    """
    Build the recoloring instruction sent with the photo.

    Args:
        color: Main body paint color
        trim: Optional separate color for trim, doors and window frames

    Returns:
        str: Prompt text
    """
    prompt = f"Recolor this house {color.name} ({color.hex})"
    if trim is not None:
        prompt += f" and paint the trim {trim.name} ({trim.hex})"
    return prompt + ". Keep the roof, windows, landscaping and sky unchanged."


def verify_image(image_bytes: bytes) -> None:
    """
    Check that bytes decode as an image without loading the pixels.

    Raises:
        InvalidImageError: If Pillow cannot identify or parse the data
    """
    try:
        with Image.open(BytesIO(image_bytes)) as image:
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidImageError(f"Not a readable image: {str(e)}") from e


def prepare_image(image_bytes: bytes, size: int) -> bytes:
    """
    Convert an uploaded photo into the square RGBA PNG the edit API accepts.

    Args:
        image_bytes: Uploaded image in any format Pillow can read
        size: Output edge length in pixels

    Returns:
        bytes: PNG-encoded square image

    Raises:
        InvalidImageError: If the upload is not a readable image
    """
    try:
        with Image.open(BytesIO(image_bytes)) as source:
            source = ImageOps.exif_transpose(source)
            image = ImageOps.fit(source.convert("RGBA"), (size, size))
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImageError(f"Uploaded file is not a readable image: {str(e)}") from e

    output = BytesIO()
    image.save(output, format="PNG")
    return output.getvalue()


class ImageEditClient:
    """Client for the OpenAI image edit endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        size: Optional[str] = None,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
    ):
        self.api_key = api_key or settings.OPENAI_API_KEY
        self.model = model or settings.IMAGE_EDIT_MODEL
        self.size = size or settings.IMAGE_EDIT_SIZE
        self.edge = parse_image_size(self.size)
        self.timeout = timeout or settings.IMAGE_EDIT_TIMEOUT
        self.base_url = base_url or settings.OPENAI_BASE_URL
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise EditRequestError("Image edit service is not configured (missing OPENAI_API_KEY)")
            # No automatic retries: a failed edit is reported to the user as-is
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def edit(self, image_bytes: bytes, color: Color, trim: Optional[Color] = None) -> bytes:
        """
        Repaint a house photo.

        Args:
            image_bytes: Uploaded house photo
            color: Main paint color
            trim: Optional trim color

        Returns:
            bytes: The repainted image as PNG bytes

        Raises:
            InvalidImageError: If the uploaded photo is not a readable image
            EditRequestError: If the request fails or yields no image
        """
        png = prepare_image(image_bytes, self.edge)
        prompt = build_prompt(color, trim)

        params = {
            "model": self.model,
            "image": ("house.png", png, "image/png"),
            "prompt": prompt,
            "n": 1,
            "size": self.size,
        }
        # gpt-image models always answer with base64; dall-e defaults to URLs
        if self.model.startswith("dall-e"):
            params["response_format"] = "b64_json"

        logger.info(f"Requesting image edit with model {self.model}: {prompt}")
        try:
            result = await self.client.images.edit(**params)
        except OpenAIError as e:
            logger.error(f"Image edit request failed: {str(e)}")
            raise EditRequestError(str(e) or "Image edit request failed") from e

        if not result.data:
            raise EditRequestError("Image edit service returned no image")

        item = result.data[0]
        if item.b64_json:
            try:
                edited = base64.b64decode(item.b64_json, validate=True)
            except binascii.Error as e:
                raise EditRequestError(f"Image edit service returned undecodable image data: {str(e)}") from e
        elif item.url:
            edited = await self._download(item.url)
        else:
            raise EditRequestError("Image edit service returned neither image data nor a URL")

        try:
            verify_image(edited)
        except InvalidImageError as e:
            logger.error(f"Image edit result is not an image: {str(e)}")
            raise EditRequestError("Image edit service returned data that is not an image") from e
        return edited

    async def _download(self, url: str) -> bytes:
        logger.info("Downloading edited image from result URL")
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as http:
                response = await http.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            logger.error(f"Error downloading edited image: {str(e)}")
            raise EditRequestError(f"Could not download edited image: {str(e)}") from e

    async def close(self):
        if self._client is not None:
            await self._client.close()
            self._client = None
