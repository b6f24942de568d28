"""Local pixel-transform operators applied under the brush."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Type

import numpy as np

from .buffer import PixelBuffer, Region
from .color import average_pair, blend_towards, edge_fill_color
from .config import BLUR_MIX_PROBABILITY, BLUR_REACH, PIXELATE_BLOCK, REPAIR_KEEP


class OperatorKind(str, Enum):
    REPAIR = "repair"
    BLUR = "blur"
    PIXELATE = "pixelate"

    @classmethod
    def parse(cls, value: "str | OperatorKind") -> "OperatorKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(kind.value for kind in cls)
            raise ValueError(
                f"unknown operator {value!r}; expected one of: {choices}") from None


class EffectOperator:
    """Base operator: reads the brush square, transforms it, writes it back.

    Subclasses implement ``process`` which mutates an owned (h, w, 4) copy of
    the region in place. The copy is only written back once ``process``
    returns, so a failure leaves the buffer untouched.
    """

    kind: OperatorKind

    def apply(self, buffer: PixelBuffer, center_x: int, center_y: int,
              radius: int) -> Optional[Region]:
        region = buffer.brush_square(center_x, center_y, radius)
        if region.is_empty:
            return None
        pixels = buffer.get_region(region.x, region.y, region.w, region.h)
        self.process(pixels)
        return buffer.put_region(region.x, region.y, pixels)

    def process(self, pixels: np.ndarray) -> None:
        raise NotImplementedError


class Pixelate(EffectOperator):
    kind = OperatorKind.PIXELATE

    def __init__(self, block: int = PIXELATE_BLOCK) -> None:
        if block <= 0:
            raise ValueError("block must be positive")
        self.block = block

    def process(self, pixels: np.ndarray) -> None:
        height, width = pixels.shape[:2]
        step = self.block
        for by in range(0, height, step):
            for bx in range(0, width, step):
                pixels[by:by + step, bx:bx + step, :3] = pixels[by, bx, :3].copy()


class Repair(EffectOperator):
    """Cheap fill: pull the region towards the mean colour of its top and
    bottom rows, keeping a little of the original texture."""

    kind = OperatorKind.REPAIR

    def __init__(self, keep: float = REPAIR_KEEP) -> None:
        self.keep = keep

    def process(self, pixels: np.ndarray) -> None:
        fill = edge_fill_color(pixels)
        pixels[..., :3] = blend_towards(pixels[..., :3], fill, self.keep)


class Blur(EffectOperator):
    """Approximate blur by stochastic horizontal mixing.

    About half the pixels (``mix_probability``) are averaged with a neighbour
    up to ``reach`` columns away in the same row. Neighbours are read from
    the untouched copy of the region, and ones that fall outside the row are
    skipped. This is not a convolution; repeated passes strengthen the
    effect. Pass a seeded ``numpy.random.Generator`` for repeatable output.
    """

    kind = OperatorKind.BLUR

    def __init__(self, rng: Optional[np.random.Generator] = None,
                 reach: int = BLUR_REACH,
                 mix_probability: float = BLUR_MIX_PROBABILITY) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.reach = reach
        self.mix_probability = mix_probability

    def process(self, pixels: np.ndarray) -> None:
        height, width = pixels.shape[:2]
        source = pixels.copy()

        gate = self.rng.random((height, width)) < self.mix_probability
        offsets = self.rng.integers(-self.reach, self.reach + 1, size=(height, width))
        cols = np.arange(width)[None, :] + offsets
        valid = gate & (cols >= 0) & (cols < width)

        ys, xs = np.nonzero(valid)
        if ys.size == 0:
            return
        neighbour = source[ys, cols[ys, xs], :3]
        pixels[ys, xs, :3] = average_pair(source[ys, xs, :3], neighbour)


OPERATORS: Dict[OperatorKind, Type[EffectOperator]] = {
    OperatorKind.REPAIR: Repair,
    OperatorKind.BLUR: Blur,
    OperatorKind.PIXELATE: Pixelate,
}


def make_operator(kind: "str | OperatorKind",
                  rng: Optional[np.random.Generator] = None) -> EffectOperator:
    kind = OperatorKind.parse(kind)
    if kind is OperatorKind.BLUR:
        return Blur(rng=rng)
    return OPERATORS[kind]()
