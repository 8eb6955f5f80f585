"""Scale-aware comparison of two snapshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image

from snapsim.pixels import PixelBuffer
from snapsim.similarity import difference_map, similarity
from snapsim.size import MIN_PIXEL_ROOT, Size

if TYPE_CHECKING:
    from snapsim.snapshot import Snapshot

log = logging.getLogger(__name__)

MISMATCH_COLOR = (255, 0, 0)
NEAR_MISS_COLOR = (255, 165, 0)
EXTRA_COLOR = (0, 0, 255)


@dataclass(frozen=True)
class CompareResult:
    """Result of comparing two snapshots at their reduced sizes."""

    similarity: float
    matches: bool
    threshold: float
    left_size: Size
    right_size: Size
    left_compared: Size
    right_compared: Size
    left_factor: int
    right_factor: int
    scaled_versions: bool
    diff_image: Path | None


def _reduce(size: Size, factor: int) -> Size:
    # factor 0 means no reduction policy
    return size if factor == 0 else size.scaled(factor)


def _reduced_area(size: Size, factor: int) -> int:
    return size.area if factor == 0 else size.reduced_area(factor)


def comparison_sizes(
    left: Size, right: Size, min_dimension: int = MIN_PIXEL_ROOT
) -> tuple[Size, Size, int, int]:
    """Pick the sizes two images are resampled to before scoring.

    Each size is reduced by its own factor. If the two look like scaled
    versions of each other, the one keeping the larger reduced area wins and
    both are compared at that size. Ties go to ``right``.

    Returns:
        (left_compared, right_compared, left_factor, right_factor)
    """
    left_factor = left.reduction_factor(min_dimension)
    right_factor = right.reduction_factor(min_dimension)
    left_new = _reduce(left, left_factor)
    right_new = _reduce(right, right_factor)
    if left.could_be_scaled(right):
        if _reduced_area(left, left_factor) > _reduced_area(right, right_factor):
            right_new = left_new
        else:
            left_new = right_new
    log.debug(
        "comparing %s (factor %d) as %s against %s (factor %d) as %s",
        left, left_factor, left_new, right, right_factor, right_new,
    )
    return left_new, right_new, left_factor, right_factor


def _write_diff_image(
    left: PixelBuffer, right: PixelBuffer, weights: np.ndarray, path: Path
) -> None:
    height = max(left.height, right.height)
    width = max(left.width, right.width)
    canvas = np.zeros((height, width, 3), dtype=np.uint8)
    canvas[:, :] = EXTRA_COLOR
    gray = np.array(Image.fromarray(left.as_array()).convert("L").convert("RGB"), dtype=np.uint8)
    rows, cols = weights.shape
    overlap = canvas[:rows, :cols]
    overlap[:] = gray[:rows, :cols]
    overlap[weights == 0.5] = NEAR_MISS_COLOR
    overlap[weights == 1.0] = MISMATCH_COLOR
    Image.fromarray(canvas).save(path)


def compare_snapshots(
    left: Snapshot,
    right: Snapshot,
    *,
    min_dimension: int = MIN_PIXEL_ROOT,
    threshold: float = 1.0,
    diff_output: Path | None = None,
) -> CompareResult:
    """Compare two snapshots after reducing them to comparable sizes.

    Args:
        left: The first (expected) snapshot.
        right: The second (actual) snapshot.
        min_dimension: Target minimum dimension for the reduction factor.
        threshold: Minimum similarity to count as a match.
        diff_output: If set, write a diff visualization PNG here.

    Returns:
        CompareResult with comparison details.

    Raises:
        ValueError: If either snapshot is not a decodable image.
    """
    for snapshot in (left, right):
        if not snapshot.is_valid:
            raise ValueError(f"cannot compare {snapshot}: not a decodable image")
    assert left.size is not None and right.size is not None

    left_new, right_new, left_factor, right_factor = comparison_sizes(
        left.size, right.size, min_dimension
    )
    left_pixels = PixelBuffer.from_image(left.reduce_to(left_new))
    right_pixels = PixelBuffer.from_image(right.reduce_to(right_new))
    score = similarity(left_pixels, right_pixels)
    log.debug("similarity %s vs %s: %.4f", left, right, score)

    diff_image: Path | None = None
    if diff_output and score < 1.0:
        weights = difference_map(left_pixels, right_pixels)
        _write_diff_image(left_pixels, right_pixels, weights, diff_output)
        diff_image = diff_output

    return CompareResult(
        similarity=score,
        matches=score >= threshold,
        threshold=threshold,
        left_size=left.size,
        right_size=right.size,
        left_compared=Size(left_pixels.width, left_pixels.height),
        right_compared=Size(right_pixels.width, right_pixels.height),
        left_factor=left_factor,
        right_factor=right_factor,
        scaled_versions=left.size.could_be_scaled(right.size),
        diff_image=diff_image,
    )
