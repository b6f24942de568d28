"""RGBA pixel storage with bounded rectangular access."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from .errors import OutOfBounds, SizeMismatch

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class Region:
    """Rectangle in buffer pixel space."""

    x: int
    y: int
    w: int
    h: int

    @property
    def area(self) -> int:
        return max(0, self.w) * max(0, self.h)

    @property
    def is_empty(self) -> bool:
        return self.area == 0

    @classmethod
    def around(cls, center_x: int, center_y: int, side: int) -> "Region":
        """Square of the given side whose middle sits on the center point."""

        half = side // 2
        return cls(center_x - half, center_y - half, side, side)


class PixelBuffer:
    """Owns a (height, width, 4) uint8 RGBA array of fixed dimensions."""

    def __init__(self, pixels: np.ndarray) -> None:
        if pixels.dtype != np.uint8:
            raise SizeMismatch("pixels must be uint8")
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise SizeMismatch("pixels must have shape (H, W, 4)")
        self._pixels = np.ascontiguousarray(pixels).copy()
        self.height, self.width = self._pixels.shape[:2]

    @classmethod
    def from_bytes(cls, data: BytesLike, width: int, height: int) -> "PixelBuffer":
        flat = np.frombuffer(data, dtype=np.uint8)
        expected = width * height * 4
        if width <= 0 or height <= 0 or flat.size != expected:
            raise SizeMismatch(
                f"expected {expected} RGBA bytes for {width}x{height}, got {flat.size}")
        return cls(flat.reshape(height, width, 4))

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self._pixels.shape

    def get(self, x: int, y: int) -> Tuple[int, int, int, int]:
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            raise OutOfBounds(
                f"pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        r, g, b, a = self._pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def clamp(self, x: int, y: int, w: int, h: int) -> Region:
        """Intersect a rectangle with the buffer bounds."""

        x0 = max(0, min(self.width, x))
        y0 = max(0, min(self.height, y))
        x1 = max(0, min(self.width, x + w))
        y1 = max(0, min(self.height, y + h))
        return Region(x0, y0, max(0, x1 - x0), max(0, y1 - y0))

    def brush_square(self, center_x: int, center_y: int, side: int) -> Region:
        """Square under a brush centred on a point.

        The top-left corner is pulled onto the buffer first and the square
        keeps its full side from there, so a brush at the top or left edge
        paints a whole square pushed inwards. Only the right and bottom
        edges crop it.
        """

        square = Region.around(center_x, center_y, side)
        x0 = max(0, square.x)
        y0 = max(0, square.y)
        w = min(self.width - x0, side)
        h = min(self.height - y0, side)
        if w <= 0 or h <= 0:
            return Region(x0, y0, 0, 0)
        return Region(x0, y0, w, h)

    def get_region(self, x: int, y: int, w: int, h: int) -> np.ndarray:
        region = self.clamp(x, y, w, h)
        if region.is_empty:
            return np.zeros((0, 0, 4), dtype=np.uint8)
        return self._pixels[region.y:region.y + region.h,
                            region.x:region.x + region.w].copy()

    def put_region(self, x: int, y: int, pixels: np.ndarray) -> Region:
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise SizeMismatch("region must have shape (h, w, 4)")
        h, w = pixels.shape[:2]
        region = self.clamp(x, y, w, h)
        if (region.x, region.y, region.w, region.h) != (x, y, w, h):
            raise SizeMismatch(
                f"region {w}x{h} at ({x}, {y}) does not fit the "
                f"{self.width}x{self.height} buffer")
        if not region.is_empty:
            self._pixels[y:y + h, x:x + w] = pixels
        return region

    def copy(self) -> np.ndarray:
        return self._pixels.copy()

    def restore(self, snapshot: np.ndarray) -> None:
        """Overwrite every pixel with a full-buffer snapshot."""

        if snapshot.shape != self._pixels.shape:
            raise SizeMismatch(
                f"snapshot shape {snapshot.shape} != buffer shape {self._pixels.shape}")
        np.copyto(self._pixels, snapshot)
