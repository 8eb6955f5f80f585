"""Shared fixtures for the snapsim test suite."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from snapsim.pixels import PixelBuffer

Color = tuple[int, int, int]


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    """Return a factory encoding a solid-color image in the given format."""

    def make(
        size: tuple[int, int] = (4, 4),
        color: Color = (0, 0, 0),
        format: str = "PNG",
    ) -> bytes:
        buf = io.BytesIO()
        Image.new("RGB", size, color).save(buf, format=format)
        return buf.getvalue()

    return make


@pytest.fixture
def image_file(tmp_path: Path) -> Callable[[str, Image.Image], Path]:
    """Return a factory saving an image under tmp_path and returning its path."""

    def make(name: str, image: Image.Image) -> Path:
        path = tmp_path / name
        image.save(path)
        return path

    return make


@pytest.fixture
def buffer_of() -> Callable[[list[list[Color]]], PixelBuffer]:
    """Return a factory building a PixelBuffer from rows of RGB tuples."""

    def make(rows: list[list[Color]]) -> PixelBuffer:
        height = len(rows)
        width = len(rows[0]) if rows else 0
        data = bytes(channel for row in rows for pixel in row for channel in pixel)
        return PixelBuffer(width, height, width * 3, data)

    return make
