"""Decoded 24-bit RGB pixel buffers."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image

BYTES_PER_PIXEL = 3  # RGB


@dataclass(frozen=True)
class PixelBuffer:
    """Row-major 24-bit RGB pixels, with rows ``stride`` bytes apart.

    Raises:
        ValueError: If the dimensions are negative, the stride is shorter
            than a row of pixels, or ``pixels`` is shorter than
            ``stride * height``.
    """

    width: int
    height: int
    stride: int
    pixels: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"negative buffer size: {self.width} x {self.height}")
        if self.stride < self.width * BYTES_PER_PIXEL:
            raise ValueError(
                f"stride {self.stride} too small for width {self.width} "
                f"(need at least {self.width * BYTES_PER_PIXEL})"
            )
        if len(self.pixels) < self.stride * self.height:
            raise ValueError(
                f"buffer too short: {len(self.pixels)} bytes, "
                f"need {self.stride * self.height} for {self.height} rows"
            )

    @classmethod
    def from_image(cls, image: Image.Image) -> PixelBuffer:
        """Decode a Pillow image of any mode into an RGB buffer without row padding."""
        rgb = image.convert("RGB")
        width, height = rgb.size
        return cls(width, height, width * BYTES_PER_PIXEL, rgb.tobytes())

    @property
    def area(self) -> int:
        return self.width * self.height

    def as_array(self) -> np.ndarray:
        """Return the pixels as a ``(height, width, 3)`` uint8 array, dropping row padding."""
        if self.area == 0:
            return np.zeros((self.height, self.width, BYTES_PER_PIXEL), dtype=np.uint8)
        rows = np.frombuffer(self.pixels, dtype=np.uint8, count=self.stride * self.height)
        rows = rows.reshape(self.height, self.stride)[:, : self.width * BYTES_PER_PIXEL]
        return rows.reshape(self.height, self.width, BYTES_PER_PIXEL)
