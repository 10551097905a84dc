"""
Preview session state and the controller that drives it.

The controller is the Python counterpart of the browser preview form: it
loads the palette, holds one selected image and one selected color, submits
both to the repaint endpoint and keeps the returned preview. All state lives
in one serializable ``PreviewState`` that only changes through ``reduce``.
"""
from typing import Dict, List, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field

from paint_preview.core.config import settings
from paint_preview.core.errors import EditRequestError, InvalidImageError, MissingInputError, PaletteLoadError
from paint_preview.core.logging import logger
from paint_preview.schemas.palette import Color
from paint_preview.utils.color_categories import Category, group_palette
from paint_preview.utils.image_edit_client import verify_image
from paint_preview.utils.labeling import annotate_image
from paint_preview.utils.palette_loader import parse_palette

PALETTE_ERROR_MESSAGE = "Could not load paint colors."
MISSING_INPUT_MESSAGE = "Please select an image and pick a paint color."
SUBMIT_ERROR_MESSAGE = "Failed to generate preview."
DOWNLOAD_ERROR_MESSAGE = "Could not prepare the preview for download."


class SelectedImage(BaseModel):
    """The single house photo chosen for a preview"""
    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")

    filename: str = "house.png"
    content_type: str = "image/png"
    data: bytes


class PreviewState(BaseModel):
    """Everything the preview form shows, as one immutable value"""
    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")

    palette: Dict[Category, List[Color]] = Field(default_factory=dict)
    colors_loaded: bool = False
    image: Optional[SelectedImage] = None
    color: Optional[Color] = None
    busy: bool = False
    preview: Optional[bytes] = None
    preview_color: Optional[Color] = None
    error: Optional[str] = None


# Transitions

class PaletteLoaded(BaseModel):
    grouping: Dict[Category, List[Color]]


class PaletteLoadFailed(BaseModel):
    message: str = PALETTE_ERROR_MESSAGE


class ImageSelected(BaseModel):
    image: SelectedImage


class ColorSelected(BaseModel):
    color: Color


class SubmissionStarted(BaseModel):
    pass


class SubmissionSucceeded(BaseModel):
    image: bytes
    color: Color


class SubmissionFailed(BaseModel):
    message: str = SUBMIT_ERROR_MESSAGE


class DownloadFailed(BaseModel):
    message: str = DOWNLOAD_ERROR_MESSAGE


PreviewEvent = Union[
    PaletteLoaded,
    PaletteLoadFailed,
    ImageSelected,
    ColorSelected,
    SubmissionStarted,
    SubmissionSucceeded,
    SubmissionFailed,
    DownloadFailed,
]


def reduce(state: PreviewState, event: PreviewEvent) -> PreviewState:
    """
    Apply one transition and return the new state.

    Failures never touch ``preview``: a failed submission keeps the last
    successful image on screen.
    """
    if isinstance(event, PaletteLoaded):
        return state.model_copy(update={"palette": event.grouping, "colors_loaded": True})
    if isinstance(event, PaletteLoadFailed):
        return state.model_copy(update={"palette": {}, "colors_loaded": False, "error": event.message})
    if isinstance(event, ImageSelected):
        return state.model_copy(update={"image": event.image, "error": None})
    if isinstance(event, ColorSelected):
        return state.model_copy(update={"color": event.color, "error": None})
    if isinstance(event, SubmissionStarted):
        return state.model_copy(update={"busy": True, "error": None})
    if isinstance(event, SubmissionSucceeded):
        return state.model_copy(update={"busy": False, "preview": event.image, "preview_color": event.color, "error": None})
    if isinstance(event, SubmissionFailed):
        return state.model_copy(update={"busy": False, "error": event.message})
    if isinstance(event, DownloadFailed):
        return state.model_copy(update={"error": event.message})
    raise TypeError(f"Unknown preview event: {type(event).__name__}")


class PreviewController:
    """Owns a PreviewState and talks to the paint preview API."""

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=settings.IMAGE_EDIT_TIMEOUT)
        self.state = PreviewState()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{settings.API_V1_STR}{path}"

    def dispatch(self, event: PreviewEvent) -> PreviewState:
        self.state = reduce(self.state, event)
        return self.state

    async def load_palette(self) -> PreviewState:
        """Fetch the flat palette and group it by category."""
        try:
            try:
                response = await self._http.get(self._url("/palette/colors"))
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError) as e:
                raise PaletteLoadError(str(e)) from e
            colors = parse_palette(payload)
        except PaletteLoadError as e:
            logger.error(f"Failed to load color list: {str(e)}")
            return self.dispatch(PaletteLoadFailed())

        return self.dispatch(PaletteLoaded(grouping=group_palette(colors)))

    def select_image(self, data: bytes, filename: str = "house.png", content_type: str = "image/png") -> PreviewState:
        return self.dispatch(ImageSelected(image=SelectedImage(filename=filename, content_type=content_type, data=data)))

    def select_color(self, color: Color) -> PreviewState:
        return self.dispatch(ColorSelected(color=color))

    async def submit(self) -> PreviewState:
        """
        Send the selected image and color to the repaint endpoint.

        Without both inputs nothing is sent. While a request is in flight
        further calls are ignored.
        """
        if self.state.busy:
            logger.warning("Submission ignored: a preview is already being generated")
            return self.state

        try:
            image, color = self._require_inputs()
        except MissingInputError as e:
            logger.info(str(e))
            return self.dispatch(SubmissionFailed(message=MISSING_INPUT_MESSAGE))

        self.dispatch(SubmissionStarted())
        try:
            preview = await self._request_repaint(image, color)
        except EditRequestError as e:
            logger.error(f"Preview generation failed: {str(e)}")
            return self.dispatch(SubmissionFailed())

        return self.dispatch(SubmissionSucceeded(image=preview, color=color))

    def _require_inputs(self):
        if self.state.image is None or self.state.color is None:
            raise MissingInputError("Submission requires both an image and a paint color")
        return self.state.image, self.state.color

    async def _request_repaint(self, image: SelectedImage, color: Color) -> bytes:
        files = {"image": (image.filename, image.data, image.content_type)}
        data = {"color": color.hex, "name": color.name}
        try:
            response = await self._http.post(self._url("/repaint"), files=files, data=data)
        except httpx.HTTPError as e:
            raise EditRequestError(f"Repaint request failed: {str(e)}") from e

        if response.is_error:
            raise EditRequestError(f"Repaint request returned {response.status_code}: {response.text}")
        if not response.content:
            raise EditRequestError("Repaint request returned an empty image")
        content_type = response.headers.get("content-type", "image/png")
        if not content_type.startswith("image/"):
            raise EditRequestError(f"Repaint request returned {content_type} instead of an image")
        try:
            verify_image(response.content)
        except InvalidImageError as e:
            raise EditRequestError(f"Repaint request returned an unreadable image: {str(e)}") from e
        return response.content

    def download_artifact(self) -> Optional[bytes]:
        """Current preview with the chosen color's label drawn on it."""
        if self.state.preview is None or self.state.preview_color is None:
            return None
        try:
            return annotate_image(self.state.preview, self.state.preview_color.label)
        except OSError as e:
            logger.error(f"Could not label preview for download: {str(e)}")
            self.dispatch(DownloadFailed())
            return None

    async def aclose(self):
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()
