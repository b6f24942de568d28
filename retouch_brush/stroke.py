"""Pointer stroke state machine."""

from __future__ import annotations

import math
from typing import Callable, List, Optional, Tuple

Point = Tuple[int, int]


class StrokeController:
    """Turns pointer down/move/up into operator dabs.

    ``dab`` is called with a buffer-space point for every application and
    ``commit`` once per finished stroke. With ``spacing`` set, moves also dab
    every ``spacing`` pixels along the straight line from the previous point.
    """

    def __init__(self, dab: Callable[[Point], object],
                 commit: Callable[[List[Point]], object],
                 spacing: Optional[float] = None) -> None:
        if spacing is not None and spacing <= 0:
            raise ValueError("spacing must be positive")
        self._dab = dab
        self._commit = commit
        self.spacing = spacing
        self._points: List[Point] = []
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @property
    def points(self) -> List[Point]:
        return list(self._points)

    def start(self, point: Point) -> None:
        # A repeated start from the same pointer continues the open stroke.
        self._active = True
        self._points.append(point)
        self._dab(point)

    def move(self, point: Point) -> None:
        if not self._active:
            return
        if self.spacing is not None and self._points:
            for step in self._interpolate(self._points[-1], point):
                self._dab(step)
        self._points.append(point)
        self._dab(point)

    def end(self) -> bool:
        if not self._active:
            return False
        points = self._points
        self._active = False
        self._points = []
        self._commit(points)
        return True

    leave = end

    def cancel(self) -> None:
        """Drop an open stroke without committing it."""

        self._active = False
        self._points = []

    def _interpolate(self, start: Point, stop: Point) -> List[Point]:
        dx = stop[0] - start[0]
        dy = stop[1] - start[1]
        distance = math.hypot(dx, dy)
        count = int(distance // self.spacing)
        steps = []
        for i in range(1, count + 1):
            t = i * self.spacing / distance
            if t >= 1.0:
                break
            steps.append((int(round(start[0] + dx * t)),
                          int(round(start[1] + dy * t))))
        return steps
