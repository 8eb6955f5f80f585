"""Pixel-level similarity between two RGB buffers."""

from __future__ import annotations

import numpy as np

from snapsim.pixels import PixelBuffer

SAME_COLOR_DISTANCE = 8
NEAR_COLOR_DISTANCE = 16


def difference_weights(distance: np.ndarray) -> np.ndarray:
    """Map rounded color distances to mismatch weights of 0.0, 0.5 or 1.0."""
    return np.where(
        distance <= SAME_COLOR_DISTANCE,
        0.0,
        np.where(distance <= NEAR_COLOR_DISTANCE, 0.5, 1.0),
    )


def difference_map(left: PixelBuffer, right: PixelBuffer) -> np.ndarray:
    """Return the mismatch weight of every pixel in the overlap of both buffers.

    The result has shape ``(min_height, min_width)``. Each entry weighs the
    Euclidean RGB distance between the two pixels at that position, rounded
    to the nearest integer.
    """
    height = min(left.height, right.height)
    width = min(left.width, right.width)
    a = left.as_array()[:height, :width].astype(np.int32)
    b = right.as_array()[:height, :width].astype(np.int32)
    distance = np.rint(np.sqrt(np.sum((a - b) ** 2, axis=2)))
    return difference_weights(distance)


def similarity(left: PixelBuffer | None, right: PixelBuffer | None) -> float:
    """Score how alike two buffers are, from 0.0 (nothing alike) to 1.0 (identical).

    Buffers are compared pixel by pixel over their overlapping rectangle.
    Pixels outside the overlap count as full mismatches, so buffers of
    different sizes never score 1.0. Swapping the arguments gives the same
    score. A missing buffer scores 0.0.
    """
    if left is None or right is None:
        return 0.0
    overlap = min(left.width, right.width) * min(left.height, right.height)
    left_extra = left.area - overlap
    right_extra = right.area - overlap
    compared = overlap + left_extra + right_extra
    if compared == 0:
        return 1.0

    total_difference = float(left_extra + right_extra)
    if overlap:
        total_difference += float(difference_map(left, right).sum())
    return 1.0 - total_difference / compared
