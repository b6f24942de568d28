"""Display-space to buffer-space coordinate mapping."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from .config import FALLBACK_CONTAINER_WIDTH
from .errors import InvalidMapping


@dataclass(frozen=True)
class RenderBox:
    """On-screen bounding box of the element the buffer is drawn into."""

    left: float
    top: float
    width: float
    height: float


class CoordinateMapper:
    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def map(self, event_x: float, event_y: float, box: RenderBox) -> Tuple[float, float]:
        if box.width <= 0 or box.height <= 0:
            raise InvalidMapping(
                f"render box must have a positive size, got {box.width}x{box.height}")
        scale_x = self.width / box.width
        scale_y = self.height / box.height
        return (event_x - box.left) * scale_x, (event_y - box.top) * scale_y

    def map_to_pixel(self, event_x: float, event_y: float, box: RenderBox) -> Tuple[int, int]:
        x, y = self.map(event_x, event_y, box)
        return int(math.floor(x + 0.5)), int(math.floor(y + 0.5))


def fit_display_size(width: int, height: int, container_width: float) -> Tuple[int, int]:
    """Size an image is shown at inside a container, never upscaled."""

    if width <= 0 or height <= 0:
        raise InvalidMapping(f"image must have a positive size, got {width}x{height}")
    if container_width <= 0:
        container_width = FALLBACK_CONTAINER_WIDTH
    scale = min(1.0, container_width / width)
    return max(1, int(round(width * scale))), max(1, int(round(height * scale)))
