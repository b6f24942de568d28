"""Retouch engine façade driven by a host UI."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import numpy as np

from .buffer import BytesLike, PixelBuffer, Region
from .config import DEFAULT_OPERATOR, DEFAULT_RADIUS, HISTORY_DEPTH, clamp_radius
from .errors import NoImageLoaded, SizeMismatch
from .history import HistoryStack
from .mapping import CoordinateMapper, RenderBox
from .operators import EffectOperator, OperatorKind, make_operator
from .stroke import Point, StrokeController

logger = logging.getLogger(__name__)

PixelSource = Union[BytesLike, np.ndarray]


@dataclass
class Brush:
    radius: int = DEFAULT_RADIUS
    operator: OperatorKind = OperatorKind(DEFAULT_OPERATOR)


class RetouchEngine:
    """Owns the live buffer, the brush and the undo history of one image.

    Hosts forward raw pointer events together with the on-screen box the
    buffer is rendered into, and re-render after every call that returns a
    region. ``load`` discards everything from the previous image.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None,
                 stroke_spacing: Optional[float] = None,
                 history_depth: int = HISTORY_DEPTH) -> None:
        self._rng = rng
        self._stroke_spacing = stroke_spacing
        self._history_depth = history_depth
        self.brush = Brush()
        self._operator: EffectOperator = make_operator(self.brush.operator, rng)
        self._buffer: Optional[PixelBuffer] = None
        self._mapper: Optional[CoordinateMapper] = None
        self._history = HistoryStack(history_depth)
        self._stroke = self._new_stroke()
        self._dirty: List[Region] = []

    def _new_stroke(self) -> StrokeController:
        return StrokeController(self._dab, self._commit, spacing=self._stroke_spacing)

    @property
    def is_loaded(self) -> bool:
        return self._buffer is not None

    @property
    def width(self) -> int:
        return self._require_buffer().width

    @property
    def height(self) -> int:
        return self._require_buffer().height

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def history_depth(self) -> int:
        return len(self._history)

    @property
    def stroke_active(self) -> bool:
        return self._stroke.active

    def _require_buffer(self) -> PixelBuffer:
        if self._buffer is None:
            raise NoImageLoaded("load an image before editing")
        return self._buffer

    def load(self, pixels: PixelSource, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise SizeMismatch(f"image must have a positive size, got {width}x{height}")
        if isinstance(pixels, np.ndarray):
            if pixels.dtype != np.uint8 or pixels.size != width * height * 4:
                raise SizeMismatch(
                    f"expected {width * height * 4} RGBA bytes for "
                    f"{width}x{height}, got {pixels.size} ({pixels.dtype})")
            buffer = PixelBuffer(pixels.reshape(height, width, 4))
        else:
            buffer = PixelBuffer.from_bytes(pixels, width, height)

        self.brush = Brush()
        self._operator = make_operator(self.brush.operator, self._rng)
        self._buffer = buffer
        self._mapper = CoordinateMapper(width, height)
        self._history = HistoryStack(self._history_depth)
        self._history.reset(buffer.pixels)
        self._stroke = self._new_stroke()
        logger.debug("Loaded %dx%d image", width, height)

    def set_operator(self, kind: Union[str, OperatorKind]) -> OperatorKind:
        kind = OperatorKind.parse(kind)
        if kind is not self.brush.operator:
            self.brush.operator = kind
            self._operator = make_operator(kind, self._rng)
        return kind

    def set_radius(self, radius: float) -> int:
        self.brush.radius = clamp_radius(radius)
        return self.brush.radius

    def _dab(self, point: Point) -> None:
        buffer = self._require_buffer()
        region = self._operator.apply(buffer, point[0], point[1], self.brush.radius)
        if region is not None:
            self._dirty.append(region)

    def _commit(self, points: List[Point]) -> None:
        self._history.push(self._require_buffer().pixels)
        logger.debug("Stroke of %d points committed (%s, radius %d); history %d",
                     len(points), self.brush.operator.value, self.brush.radius,
                     len(self._history))

    def _map(self, display_point: Tuple[float, float], render_box: RenderBox) -> Point:
        self._require_buffer()
        return self._mapper.map_to_pixel(display_point[0], display_point[1], render_box)

    def _take_dirty(self) -> Optional[Region]:
        """Bounding box of every region touched since the last call."""

        dirty, self._dirty = self._dirty, []
        if not dirty:
            return None
        x0 = min(r.x for r in dirty)
        y0 = min(r.y for r in dirty)
        x1 = max(r.x + r.w for r in dirty)
        y1 = max(r.y + r.h for r in dirty)
        return Region(x0, y0, x1 - x0, y1 - y0)

    def pointer_down(self, display_point: Tuple[float, float],
                     render_box: RenderBox) -> Optional[Region]:
        point = self._map(display_point, render_box)
        self._stroke.start(point)
        return self._take_dirty()

    def pointer_move(self, display_point: Tuple[float, float],
                     render_box: RenderBox) -> Optional[Region]:
        if not self._stroke.active:
            return None
        point = self._map(display_point, render_box)
        self._stroke.move(point)
        return self._take_dirty()

    def pointer_up(self, display_point: Optional[Tuple[float, float]] = None,
                   render_box: Optional[RenderBox] = None) -> bool:
        """Finish the open stroke; returns whether a snapshot was recorded.

        The release position is not painted, matching a pointer that leaves
        the canvas mid-stroke.
        """

        return self._stroke.end()

    pointer_leave = pointer_up

    def undo(self) -> bool:
        buffer = self._require_buffer()
        if self._stroke.active:
            self._stroke.end()
        snapshot = self._history.undo()
        if snapshot is None:
            return False
        buffer.restore(snapshot)
        logger.debug("Undo; %d history entries left", len(self._history))
        return True

    def export(self) -> np.ndarray:
        view = self._require_buffer().pixels.view()
        view.flags.writeable = False
        return view
