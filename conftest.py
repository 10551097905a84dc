"""
Shared pytest fixtures for the House Paint Preview tests.
"""
import os
import tempfile
from io import BytesIO

# Keep per-run log files out of the working tree
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "paint_preview_test_logs"))

import pytest
from PIL import Image


def make_image(size=(64, 48), color=(200, 180, 150), fmt="PNG") -> bytes:
    image = Image.new("RGB", size, color)
    buffer = BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def house_photo() -> bytes:
    return make_image()


@pytest.fixture
def repainted_photo() -> bytes:
    return make_image(size=(32, 32), color=(47, 61, 76))
