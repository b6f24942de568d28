"""Brush-driven retouch engine API."""

from .buffer import PixelBuffer, Region
from .config import RADIUS_RANGE, clamp_radius
from .engine import Brush, RetouchEngine
from .errors import InvalidMapping, NoImageLoaded, OutOfBounds, RetouchError, SizeMismatch
from .history import HistoryStack
from .io import download_name, load_image_rgba_u8, save_image_rgba_u8
from .mapping import CoordinateMapper, RenderBox, fit_display_size
from .operators import Blur, EffectOperator, OperatorKind, Pixelate, Repair, make_operator
from .stroke import StrokeController

__all__ = [
    "RADIUS_RANGE",
    "clamp_radius",
    "PixelBuffer",
    "Region",
    "CoordinateMapper",
    "RenderBox",
    "fit_display_size",
    "EffectOperator",
    "OperatorKind",
    "Pixelate",
    "Repair",
    "Blur",
    "make_operator",
    "StrokeController",
    "HistoryStack",
    "Brush",
    "RetouchEngine",
    "RetouchError",
    "OutOfBounds",
    "SizeMismatch",
    "InvalidMapping",
    "NoImageLoaded",
    "load_image_rgba_u8",
    "save_image_rgba_u8",
    "download_name",
]
