from __future__ import annotations

import numpy as np
import pytest

from retouch_brush import RenderBox, RetouchEngine


def gradient_rgba(width: int, height: int) -> np.ndarray:
    """Image where every pixel differs from its neighbours, alpha varying too."""

    ys, xs = np.mgrid[0:height, 0:width]
    img = np.empty((height, width, 4), dtype=np.uint8)
    img[..., 0] = (xs * 7 + ys * 3) % 256
    img[..., 1] = (xs * 5 + ys * 11) % 256
    img[..., 2] = (xs * 13 + ys * 2) % 256
    img[..., 3] = (200 + xs + ys) % 256
    return img


@pytest.fixture
def image() -> np.ndarray:
    return gradient_rgba(100, 100)


@pytest.fixture
def identity_box() -> RenderBox:
    return RenderBox(0, 0, 100, 100)


@pytest.fixture
def engine(image: np.ndarray) -> RetouchEngine:
    eng = RetouchEngine(rng=np.random.default_rng(7))
    eng.load(image, 100, 100)
    return eng
