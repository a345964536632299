"""Pytest configuration and shared fixtures."""

import io
import zipfile
from datetime import datetime, timezone

import pytest
from PIL import Image

from slidewright import Presentation

FIXED_TIME = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


def make_image(fmt: str = "PNG", size=(40, 20), color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


def read_package(data: bytes) -> dict:
    """Part name -> bytes for a written .pptx."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


def part_text(parts: dict, name: str) -> str:
    return parts[name].decode("utf-8")


@pytest.fixture
def png_bytes() -> bytes:
    """A real 40x20 PNG."""
    return make_image("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A real 40x20 JPEG."""
    return make_image("JPEG")


@pytest.fixture
def fixed_time() -> datetime:
    return FIXED_TIME


@pytest.fixture
def pres() -> Presentation:
    """An empty presentation with a fixed creation time."""
    return Presentation().set_created(FIXED_TIME)


@pytest.fixture
def mp4_bytes() -> bytes:
    return b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 64


@pytest.fixture
def mp3_bytes() -> bytes:
    return b"ID3\x03\x00\x00\x00\x00\x00\x00" + b"\x00" * 64
