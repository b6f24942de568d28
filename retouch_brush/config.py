"""Brush defaults, operator constants and shared clamping utilities."""

from __future__ import annotations

import math

RADIUS_RANGE: tuple[int, int] = (5, 100)
DEFAULT_RADIUS = 20
DEFAULT_OPERATOR = "repair"

PIXELATE_BLOCK = 8

# Share of the original pixel kept when Repair blends in the fill colour.
REPAIR_KEEP = 0.2

BLUR_REACH = 2
BLUR_MIX_PROBABILITY = 0.5

HISTORY_DEPTH = 10

# Container width assumed when the host reports none.
FALLBACK_CONTAINER_WIDTH = 800


def clamp_radius(radius: float) -> int:
    """Map any requested brush radius into RADIUS_RANGE.

    Zero, negative and non-finite values land on the lower bound.
    """

    min_val, max_val = RADIUS_RANGE
    if not math.isfinite(radius):
        return min_val
    return int(max(min_val, min(max_val, int(radius))))
