"""Tests for prompt building, image preparation, labeling and the edit client."""
import asyncio
import base64
from io import BytesIO
from types import SimpleNamespace

import httpx
import openai
import pytest
from PIL import Image
from pydantic import ValidationError

from conftest import make_image
from paint_preview.core.config import Settings
from paint_preview.core.errors import EditRequestError, InvalidImageError
from paint_preview.schemas.palette import Color
from paint_preview.utils import image_edit_client
from paint_preview.utils.image_edit_client import ImageEditClient, build_prompt, prepare_image, verify_image
from paint_preview.utils.labeling import annotate_image

NAVAL = Color(name="Naval SW 6244", hex="#2F3D4C")
WHITE = Color(name="Pure White SW 7005", hex="#EDECE6")


def run(coro):
    return asyncio.run(coro)


class FakeImages:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def edit(self, **params):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.result


def client_with(images: FakeImages) -> ImageEditClient:
    client = ImageEditClient(api_key="test-key", model="dall-e-2", size="256x256")
    client._client = SimpleNamespace(images=images)
    return client


def test_build_prompt_main_color():
    prompt = build_prompt(NAVAL)
    assert prompt.startswith("Recolor this house Naval SW 6244 (#2F3D4C)")


def test_build_prompt_with_trim():
    prompt = build_prompt(NAVAL, trim=WHITE)
    assert "Naval SW 6244 (#2F3D4C)" in prompt
    assert "paint the trim Pure White SW 7005 (#EDECE6)" in prompt


def test_prepare_image_makes_square_png():
    png = prepare_image(make_image(size=(300, 200), fmt="JPEG"), 128)
    with Image.open(BytesIO(png)) as image:
        assert image.format == "PNG"
        assert image.size == (128, 128)
        assert image.mode == "RGBA"


def test_prepare_image_rejects_non_images():
    with pytest.raises(InvalidImageError):
        prepare_image(b"definitely not an image", 128)


def test_annotate_image_keeps_size_and_draws_banner():
    labelled = annotate_image(make_image(size=(200, 200), color=(47, 61, 76)), NAVAL.label)
    with Image.open(BytesIO(labelled)) as image:
        assert image.format == "PNG"
        assert image.size == (200, 200)
        top = image.convert("RGB").getpixel((100, 0))
        bottom = image.convert("RGB").getpixel((0, 199))
    assert top == (47, 61, 76)
    assert bottom != (47, 61, 76)


def test_edit_decodes_base64_result(house_photo, repainted_photo):
    images = FakeImages(result=SimpleNamespace(
        data=[SimpleNamespace(b64_json=base64.b64encode(repainted_photo).decode(), url=None)]
    ))
    client = client_with(images)

    result = run(client.edit(house_photo, NAVAL))

    assert result == repainted_photo
    params = images.calls[0]
    assert params["model"] == "dall-e-2"
    assert params["n"] == 1
    assert params["size"] == "256x256"
    assert params["response_format"] == "b64_json"
    assert params["image"][0] == "house.png"
    assert "Naval SW 6244" in params["prompt"]


def test_edit_omits_response_format_for_gpt_image(house_photo, repainted_photo):
    images = FakeImages(result=SimpleNamespace(
        data=[SimpleNamespace(b64_json=base64.b64encode(repainted_photo).decode(), url=None)]
    ))
    client = client_with(images)
    client.model = "gpt-image-1"

    run(client.edit(house_photo, NAVAL))
    assert "response_format" not in images.calls[0]


def test_edit_downloads_url_result(monkeypatch, house_photo, repainted_photo):
    images = FakeImages(result=SimpleNamespace(
        data=[SimpleNamespace(b64_json=None, url="https://images.example.com/result.png")]
    ))
    client = client_with(images)

    requested = []

    def handler(request):
        requested.append(str(request.url))
        return httpx.Response(200, content=repainted_photo)

    real_client = httpx.AsyncClient
    monkeypatch.setattr(
        image_edit_client.httpx, "AsyncClient",
        lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
    )

    assert run(client.edit(house_photo, NAVAL)) == repainted_photo
    assert requested == ["https://images.example.com/result.png"]


def test_edit_wraps_sdk_errors(house_photo):
    error = openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/images/edits"))
    client = client_with(FakeImages(error=error))

    with pytest.raises(EditRequestError):
        run(client.edit(house_photo, NAVAL))


def test_edit_without_result_raises(house_photo):
    client = client_with(FakeImages(result=SimpleNamespace(data=[])))
    with pytest.raises(EditRequestError):
        run(client.edit(house_photo, NAVAL))


def test_missing_api_key_raises(house_photo, monkeypatch):
    monkeypatch.setattr(image_edit_client.settings, "OPENAI_API_KEY", None)
    client = ImageEditClient(size="256x256")
    with pytest.raises(EditRequestError):
        run(client.edit(house_photo, NAVAL))



def test_verify_image_accepts_images(house_photo):
    verify_image(house_photo)
    verify_image(make_image(fmt="JPEG"))


@pytest.mark.parametrize("data", [b"<html>not an image</html>", b"", b"\x89PNG\r\n\x1a\n truncated"])
def test_verify_image_rejects_other_bytes(data):
    with pytest.raises(InvalidImageError):
        verify_image(data)


def test_edit_rejects_base64_result_that_is_not_an_image(house_photo):
    payload = base64.b64encode(b"<html>not an image</html>").decode()
    client = client_with(FakeImages(result=SimpleNamespace(data=[SimpleNamespace(b64_json=payload, url=None)])))

    with pytest.raises(EditRequestError):
        run(client.edit(house_photo, NAVAL))


def test_edit_rejects_undecodable_base64(house_photo):
    client = client_with(FakeImages(result=SimpleNamespace(data=[SimpleNamespace(b64_json="%%% not base64", url=None)])))

    with pytest.raises(EditRequestError):
        run(client.edit(house_photo, NAVAL))


def test_edit_rejects_url_result_serving_html(monkeypatch, house_photo):
    images = FakeImages(result=SimpleNamespace(
        data=[SimpleNamespace(b64_json=None, url="https://images.example.com/result.png")]
    ))
    client = client_with(images)

    def handler(request):
        return httpx.Response(200, content=b"<html>Access denied</html>", headers={"content-type": "text/html"})

    real_client = httpx.AsyncClient
    monkeypatch.setattr(
        image_edit_client.httpx, "AsyncClient",
        lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
    )

    with pytest.raises(EditRequestError):
        run(client.edit(house_photo, NAVAL))


@pytest.mark.parametrize("size", ["auto", "1024", "1024x768", "0x0", ""])
def test_settings_reject_non_square_image_size(size):
    with pytest.raises(ValidationError):
        Settings(IMAGE_EDIT_SIZE=size)


def test_client_rejects_non_square_image_size():
    with pytest.raises(ValueError):
        ImageEditClient(api_key="test-key", size="auto")
