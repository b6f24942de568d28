"""Image decoding into RGBA buffers and PNG export, ICC-aware."""

from __future__ import annotations

import logging
import time
from io import BytesIO
from typing import Optional, Union

import numpy as np
from PIL import Image
from PIL import UnidentifiedImageError

try:
    from pillow_heif import register_heif_opener

    register_heif_opener()
    _HAS_HEIF = True
except Exception:
    _HAS_HEIF = False

try:
    from PIL import ImageCms

    _HAS_IMAGECMS = True
except Exception:
    ImageCms = None
    _HAS_IMAGECMS = False

logger = logging.getLogger(__name__)

SourceType = Union[str, "Image.Image"]

DOWNLOAD_PREFIX = "removed_watermark_"


def _convert_to_srgb(image: Image.Image) -> Image.Image:
    icc_profile = image.info.get("icc_profile")
    if not icc_profile:
        return image.convert("RGBA")

    if not _HAS_IMAGECMS:
        raise RuntimeError(
            "ICC profile present but Pillow ImageCms is unavailable")

    # ImageCms transforms RGB only; alpha is carried over separately.
    alpha = image.getchannel("A") if "A" in image.getbands() else None
    srgb_profile = ImageCms.createProfile("sRGB")
    src_profile = ImageCms.ImageCmsProfile(BytesIO(icc_profile))
    rgb = ImageCms.profileToProfile(
        image.convert("RGB") if image.mode not in ("RGB", "CMYK") else image,
        src_profile, srgb_profile, outputMode="RGB")
    rgba = rgb.convert("RGBA")
    if alpha is not None:
        rgba.putalpha(alpha)
    return rgba


def load_image_rgba_u8(source: SourceType) -> np.ndarray:
    """Decode a path or PIL image into a (H, W, 4) uint8 sRGB array."""

    if isinstance(source, Image.Image):
        image = source
    else:
        try:
            image = Image.open(source)
        except UnidentifiedImageError as exc:
            source_str = str(source).lower()
            if source_str.endswith((".heic", ".heif")) and not _HAS_HEIF:
                raise RuntimeError(
                    "Reading HEIC/HEIF images requires pillow-heif"
                ) from exc
            raise

    image = _convert_to_srgb(image)
    pixels = np.asarray(image, dtype=np.uint8)
    logger.debug("Decoded %s into %dx%d RGBA", getattr(source, "filename", source),
                 pixels.shape[1], pixels.shape[0])
    return pixels


def save_image_rgba_u8(path: str, img_rgba_u8: np.ndarray) -> None:
    if img_rgba_u8.dtype != np.uint8:
        raise ValueError("img_rgba_u8 must be uint8")
    if img_rgba_u8.ndim != 3 or img_rgba_u8.shape[2] != 4:
        raise ValueError("img_rgba_u8 must have shape (H, W, 4)")
    image = Image.fromarray(np.ascontiguousarray(img_rgba_u8))
    image.save(path, format="PNG")


def download_name(now: Optional[float] = None) -> str:
    """File name an edited image is offered under, stamped in epoch ms."""

    stamp = int((time.time() if now is None else now) * 1000)
    return f"{DOWNLOAD_PREFIX}{stamp}.png"
