"""Channel mixing helpers shared by the effect operators."""

from __future__ import annotations

import numpy as np


def clamp_u8(arr: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(arr), 0, 255).astype(np.uint8)


def edge_fill_color(rgba: np.ndarray) -> np.ndarray:
    """Floor of the mean R, G, B over the top and bottom rows of a region."""

    top = rgba[0, :, :3].astype(np.int64)
    bottom = rgba[-1, :, :3].astype(np.int64)
    total = top.sum(axis=0) + bottom.sum(axis=0)
    count = top.shape[0] + bottom.shape[0]
    return total // count


def blend_towards(rgb: np.ndarray, fill: np.ndarray, keep: float) -> np.ndarray:
    mixed = rgb.astype(np.float32) * keep + fill.astype(np.float32) * (1.0 - keep)
    return clamp_u8(mixed)


def average_pair(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    total = a.astype(np.float32) + b.astype(np.float32)
    return clamp_u8(total / 2.0)
