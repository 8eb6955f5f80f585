"""Size arithmetic and the reduction-factor search.

A reduction factor is the integer both dimensions of an image are divided by
to bring it down to a small canonical size before comparison. The chosen
factor keeps the reduced image between ``min_dimension**2`` and
``(2 * min_dimension)**2`` pixels, and prefers divisors that split width and
height evenly so the resampled image does not alias.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

MIN_PIXEL_ROOT = 16  # reduced images hold 256 to 1024 pixels

_INITIAL_DISTANCE = 2**31 - 1


def round_div(top: int, bottom: int) -> int:
    """Divide non-negative integers, rounding to the nearest integer."""
    return (top + bottom // 2) // bottom


def greatest_common_denominator(a: int, b: int) -> int:
    while b != 0:
        a, b = b, a % b
    return a


def denominator_in_range(denominator: int, min_value: int, max_value: int) -> int:
    """Return ``denominator // i`` for the smallest exact divisor ``i`` that lands in range.

    The quotient must fall within ``[min_value, max_value]``. If ``denominator``
    is already in range it is returned as is. Returns 1 when no exact divisor
    exists.

    Raises:
        ValueError: If either bound is not positive.
    """
    if min_value <= 0 or max_value <= 0:
        raise ValueError(f"range bounds must be positive: [{min_value}, {max_value}]")
    max_multiplier = denominator / min_value
    min_multiplier = denominator / max_value
    if min_multiplier <= 1:
        return denominator if max_multiplier >= 1 else 1
    for i in range(math.ceil(min_multiplier), math.floor(max_multiplier) + 1):
        if denominator % i == 0:
            return denominator // i
    return 1


def _wrapped_remainder(value: int, divisor: int) -> int:
    """Signed distance from ``value`` to its nearest multiple of ``divisor``."""
    diff = value % divisor
    if diff > divisor // 2:
        diff -= divisor
    return diff


@dataclass(frozen=True)
class Size:
    """Width and height of an image, in pixels."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"size must not be negative: {self.width} x {self.height}")

    def __str__(self) -> str:
        return f"{self.width} x {self.height}"

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def aspect_ratio(self) -> float:
        return 0.0 if self.height == 0 else self.width / self.height

    def could_be_scaled(self, other: Size | None) -> bool:
        """Return True if ``other`` looks like a uniformly scaled copy of this size.

        The predicted height may be off by less than one pixel, since real
        scaled screenshots round each dimension separately.
        """
        if other is None or self.area == other.area:
            return False
        if 0 in (self.width, self.height, other.width, other.height):
            return False
        scaling = other.width / self.width
        if scaling < 1:
            return abs(self.height * scaling - other.height) < 1
        return abs(other.height / scaling - self.height) < 1

    def reduced_area(self, factor: int) -> int:
        return round_div(self.area, factor * factor)

    def reduction_factor(self, min_dimension: int = MIN_PIXEL_ROOT) -> int:
        """Find the integer factor that reduces this size for comparison.

        Returns 0 when ``min_dimension`` is 0 (no reduction policy), and 1 for
        an empty size or one that is already small enough.
        """
        if min_dimension == 0:
            return 0
        if self.area == 0:
            return 1

        max_factor = math.sqrt(self.area) / min_dimension
        if max_factor < 1:
            return 1
        min_factor = max_factor / 2.0
        floor_max = math.floor(max_factor)
        ceil_min = math.ceil(min_factor)

        # an exact divisor of both dimensions beats any approximation
        gcd = greatest_common_denominator(self.width, self.height)
        denominator = denominator_in_range(gcd, ceil_min, floor_max)
        if denominator != 1:
            return denominator

        factor = 1
        smallest = _INITIAL_DISTANCE
        for i in range(ceil_min, floor_max + 1):
            diff_x = _wrapped_remainder(self.width, i)
            diff_y = _wrapped_remainder(self.height, i)
            distance = diff_x * diff_x + diff_y * diff_y
            if distance >= smallest:
                continue
            smallest = distance
            factor = i
            if distance <= 1:
                break
        return factor

    def scaled(self, factor: int) -> Size:
        return Size(round_div(self.width, factor), round_div(self.height, factor))
