"""Errors raised by the retouch engine."""

from __future__ import annotations


class RetouchError(Exception):
    """Base class for engine failures."""


class OutOfBounds(RetouchError, IndexError):
    """A raw pixel access fell outside the buffer."""


class SizeMismatch(RetouchError, ValueError):
    """Pixel data does not match the rectangle it is written to."""


class InvalidMapping(RetouchError, ValueError):
    """The render box cannot be mapped to buffer space."""


class NoImageLoaded(RetouchError, RuntimeError):
    """The engine was driven before an image was loaded."""
