import asyncio
import io
import os
from typing import Optional

import pytest
from PIL import Image

from multi_compress.blob import Blob, File
from multi_compress.compression.format import MediaCategory
from multi_compress.compression.strategy import CompressionStrategy
from multi_compress.exceptions import StrategyError

ALL_CATEGORIES = frozenset(MediaCategory)


class FakeStrategy(CompressionStrategy):
    """Returns a blob of a fixed size, or raises."""

    def __init__(
        self,
        name: str,
        size: Optional[int] = None,
        error: Optional[Exception] = None,
        supports_exif: bool = False,
        categories=ALL_CATEGORIES,
        delay: float = 0.0,
    ) -> None:
        self.name = name
        self.size = size
        self.error = error
        self.supports_exif = supports_exif
        self.categories = categories
        self.delay = delay
        self.calls = 0

    async def compress(self, blob, constraints):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return Blob(data=b"\x00" * self.size, mime_type=blob.mime_type)


def failing(name: str, **kwargs) -> FakeStrategy:
    return FakeStrategy(name, error=StrategyError(f"{name} broke"), **kwargs)


def _noise(size=(256, 256)) -> Image.Image:
    return Image.frombytes("RGB", size, os.urandom(size[0] * size[1] * 3))


@pytest.fixture
def jpeg_file() -> File:
    exif = Image.Exif()
    exif[0x010F] = "TestCam"
    buffer = io.BytesIO()
    _noise().save(buffer, format="JPEG", quality=95, exif=exif.tobytes())
    return File(data=buffer.getvalue(), mime_type="image/jpeg", name="photo.jpg")


@pytest.fixture
def png_file() -> File:
    buffer = io.BytesIO()
    _noise((64, 64)).save(buffer, format="PNG")
    return File(data=buffer.getvalue(), mime_type="image/png", name="noise.png")


@pytest.fixture
def gif_file() -> File:
    frames = [Image.new("RGB", (32, 32), color) for color in ("red", "green", "blue")]
    buffer = io.BytesIO()
    frames[0].save(
        buffer,
        format="GIF",
        save_all=True,
        append_images=frames[1:],
        duration=80,
        loop=0,
    )
    return File(data=buffer.getvalue(), mime_type="image/gif", name="anim.gif")


@pytest.fixture
def webp_file() -> File:
    buffer = io.BytesIO()
    _noise((128, 128)).save(buffer, format="WEBP", quality=95)
    return File(data=buffer.getvalue(), mime_type="image/webp", name="noise.webp")


@pytest.fixture
def fake_blob() -> Blob:
    return Blob(data=b"\xff" * 1000, mime_type="image/jpeg")


@pytest.fixture
def large_png_file() -> File:
    buffer = io.BytesIO()
    _noise((400, 400)).save(buffer, format="PNG")
    return File(data=buffer.getvalue(), mime_type="image/png", name="large.png")


@pytest.fixture
def uncompressed_png_file() -> File:
    gradient = Image.linear_gradient("L").resize((400, 400)).convert("RGB")
    buffer = io.BytesIO()
    gradient.save(buffer, format="PNG", compress_level=0)
    return File(data=buffer.getvalue(), mime_type="image/png", name="gradient.png")


@pytest.fixture
def bmp_file() -> File:
    buffer = io.BytesIO()
    _noise((200, 200)).save(buffer, format="BMP")
    return File(data=buffer.getvalue(), mime_type="image/bmp", name="noise.bmp")
