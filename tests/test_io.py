import numpy as np
import pytest
from PIL import Image, UnidentifiedImageError

from retouch_brush import download_name, load_image_rgba_u8, save_image_rgba_u8

from conftest import gradient_rgba


def test_png_round_trip(tmp_path):
    img = gradient_rgba(12, 9)
    path = tmp_path / "out.png"
    save_image_rgba_u8(str(path), img)
    np.testing.assert_array_equal(load_image_rgba_u8(str(path)), img)


def test_rgb_source_gets_opaque_alpha():
    rgb = Image.new("RGB", (5, 4), (10, 20, 30))
    pixels = load_image_rgba_u8(rgb)
    assert pixels.shape == (4, 5, 4)
    assert pixels.dtype == np.uint8
    assert (pixels[..., :3] == (10, 20, 30)).all()
    assert (pixels[..., 3] == 255).all()


def test_non_image_file_is_rejected(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("not an image", encoding="utf-8")
    with pytest.raises(UnidentifiedImageError):
        load_image_rgba_u8(str(path))


def test_save_rejects_rgb(tmp_path):
    with pytest.raises(ValueError):
        save_image_rgba_u8(str(tmp_path / "x.png"), np.zeros((2, 2, 3), dtype=np.uint8))


def test_download_name_uses_epoch_millis():
    assert download_name(now=1700000000.5) == "removed_watermark_1700000000500.png"
    assert download_name().startswith("removed_watermark_")


def test_embedded_icc_profile_keeps_alpha(tmp_path):
    ImageCms = pytest.importorskip("PIL.ImageCms")
    img = gradient_rgba(8, 6)
    profile = ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB")).tobytes()
    path = tmp_path / "tagged.png"
    Image.fromarray(img).save(path, format="PNG", icc_profile=profile)

    with Image.open(path) as reopened:
        assert reopened.info.get("icc_profile")
    pixels = load_image_rgba_u8(str(path))
    assert pixels.shape == (6, 8, 4)
    assert pixels.dtype == np.uint8
    np.testing.assert_array_equal(pixels[..., 3], img[..., 3])
