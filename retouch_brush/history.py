"""Bounded full-buffer undo history."""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Optional

import numpy as np

from .config import HISTORY_DEPTH

logger = logging.getLogger(__name__)


class HistoryStack:
    """Oldest-first snapshots; the top entry mirrors the live buffer."""

    def __init__(self, depth: int = HISTORY_DEPTH) -> None:
        if depth < 1:
            raise ValueError("depth must be at least 1")
        self.depth = depth
        self._entries: Deque[np.ndarray] = deque(maxlen=depth)

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _freeze(snapshot: np.ndarray) -> np.ndarray:
        frozen = np.array(snapshot, dtype=np.uint8, copy=True)
        frozen.flags.writeable = False
        return frozen

    def reset(self, snapshot: np.ndarray) -> None:
        self._entries.clear()
        self._entries.append(self._freeze(snapshot))

    def push(self, snapshot: np.ndarray) -> None:
        dropped = len(self._entries) == self.depth
        self._entries.append(self._freeze(snapshot))
        if dropped:
            logger.debug("History full at %d entries, dropped oldest", self.depth)

    @property
    def top(self) -> Optional[np.ndarray]:
        return self._entries[-1] if self._entries else None

    @property
    def can_undo(self) -> bool:
        return len(self._entries) > 1

    def undo(self) -> Optional[np.ndarray]:
        if not self.can_undo:
            return None
        self._entries.pop()
        return self._entries[-1]
