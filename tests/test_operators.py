import numpy as np
import pytest

from retouch_brush import Blur, OperatorKind, PixelBuffer, Pixelate, Region, Repair, make_operator

from conftest import gradient_rgba


def _changed_outside(before, after, region):
    mask = np.ones(before.shape[:2], dtype=bool)
    mask[region.y:region.y + region.h, region.x:region.x + region.w] = False
    return (before[mask] != after[mask]).any()


@pytest.mark.parametrize("operator_cls", [Pixelate, Repair])
def test_deterministic_operators(operator_cls):
    img = gradient_rgba(60, 40)
    first = PixelBuffer(img)
    second = PixelBuffer(img)
    operator_cls().apply(first, 30, 20, 24)
    operator_cls().apply(second, 30, 20, 24)
    np.testing.assert_array_equal(first.pixels, second.pixels)
    assert (first.pixels != img).any()


def test_pixelate_scenario():
    img = gradient_rgba(100, 100)
    buf = PixelBuffer(img)
    region = Pixelate().apply(buf, 50, 50, 16)
    assert region == Region(42, 42, 16, 16)

    out = buf.pixels
    assert not _changed_outside(img, out, region)
    for by in (42, 50):
        for bx in (42, 50):
            block = out[by:by + 8, bx:bx + 8]
            assert (block[..., :3] == img[by, bx, :3]).all()
            np.testing.assert_array_equal(block[..., 3], img[by:by + 8, bx:bx + 8, 3])


def test_pixelate_partial_blocks_use_remaining_pixels():
    img = gradient_rgba(20, 20)
    buf = PixelBuffer(img)
    region = Pixelate().apply(buf, 19, 19, 20)
    assert region == Region(9, 9, 11, 11)
    out = buf.pixels
    # 11 = one full block plus a 3-pixel strip anchored at offset 8.
    assert (out[17:20, 17:20, :3] == img[17, 17, :3]).all()
    assert (out[9:17, 17:20, :3] == img[9, 17, :3]).all()


def test_repair_blends_towards_edge_mean():
    img = np.zeros((10, 10, 4), dtype=np.uint8)
    img[..., 3] = 77
    img[2, :, :3] = 100   # top row of the region
    img[5, :, :3] = 200   # bottom row of the region
    buf = PixelBuffer(img)
    region = Repair().apply(buf, 4, 4, 4)
    assert region == Region(2, 2, 4, 4)

    out = buf.pixels
    # fill = 150; 0.2*100 + 0.8*150 = 140, 0.2*0 + 0.8*150 = 120
    assert (out[2, 2:6, :3] == 140).all()
    assert (out[3, 2:6, :3] == 120).all()
    assert (out[5, 2:6, :3] == 160).all()
    assert (out[..., 3] == 77).all()
    assert not _changed_outside(img, out, region)


def test_repair_on_flat_region_keeps_colour():
    img = np.full((16, 16, 4), 90, dtype=np.uint8)
    buf = PixelBuffer(img)
    Repair().apply(buf, 8, 8, 10)
    np.testing.assert_array_equal(buf.pixels, img)


def test_blur_seeded_is_repeatable_and_contained():
    img = gradient_rgba(50, 50)
    first = PixelBuffer(img)
    second = PixelBuffer(img)
    region = Blur(rng=np.random.default_rng(3)).apply(first, 25, 25, 20)
    Blur(rng=np.random.default_rng(3)).apply(second, 25, 25, 20)
    np.testing.assert_array_equal(first.pixels, second.pixels)
    assert (first.pixels != img).any()
    assert not _changed_outside(img, first.pixels, region)
    np.testing.assert_array_equal(first.pixels[..., 3], img[..., 3])


def test_blur_mixes_only_with_same_row_neighbours():
    # Every column has a distinct colour, rows are identical.
    img = np.zeros((6, 12, 4), dtype=np.uint8)
    img[..., 0] = np.arange(12, dtype=np.uint8)[None, :] * 20
    buf = PixelBuffer(img)
    Blur(rng=np.random.default_rng(11)).apply(buf, 6, 3, 12)
    out = buf.pixels[..., 0].astype(int)
    src = img[..., 0].astype(int)
    for y in range(6):
        for x in range(12):
            candidates = {
                int(np.rint((src[y, x] + src[y, n]) / 2))
                for n in range(max(0, x - 2), min(12, x + 3))
            }
            assert out[y, x] in candidates


def test_blur_uniform_region_unchanged():
    img = np.full((20, 20, 4), 33, dtype=np.uint8)
    buf = PixelBuffer(img)
    Blur(rng=np.random.default_rng(0)).apply(buf, 10, 10, 20)
    np.testing.assert_array_equal(buf.pixels, img)


@pytest.mark.parametrize("kind", list(OperatorKind))
@pytest.mark.parametrize("cx, cy, radius", [
    (0, 0, 100), (-50, -50, 30), (200, 5, 40), (9, 9, 5), (5, 300, 7), (-3, 4, 10),
])
def test_bounds_containment(kind, cx, cy, radius):
    img = gradient_rgba(10, 10)
    buf = PixelBuffer(img)
    region = make_operator(kind, rng=np.random.default_rng(1)).apply(buf, cx, cy, radius)
    assert buf.shape == (10, 10, 4)
    if region is None:
        np.testing.assert_array_equal(buf.pixels, img)
    else:
        assert 0 <= region.x and region.x + region.w <= 10
        assert 0 <= region.y and region.y + region.h <= 10
        assert not _changed_outside(img, buf.pixels, region)


def test_operator_kind_parse():
    assert OperatorKind.parse("Pixelate") is OperatorKind.PIXELATE
    assert OperatorKind.parse(OperatorKind.BLUR) is OperatorKind.BLUR
    with pytest.raises(ValueError):
        OperatorKind.parse("smudge")


def test_make_operator_types():
    assert isinstance(make_operator("repair"), Repair)
    assert isinstance(make_operator("pixelate"), Pixelate)
    rng = np.random.default_rng(0)
    blur = make_operator("blur", rng=rng)
    assert isinstance(blur, Blur) and blur.rng is rng


@pytest.mark.parametrize("cx, cy, expected", [
    (3, 3, Region(0, 0, 20, 20)),
    (-10, 50, Region(0, 40, 20, 20)),
    (98, 50, Region(88, 40, 12, 20)),
    (150, 50, None),
])
def test_edge_brush_keeps_full_side_on_top_left(cx, cy, expected):
    img = gradient_rgba(100, 100)
    buf = PixelBuffer(img)
    region = Pixelate().apply(buf, cx, cy, 20)
    assert region == expected
    if region is None:
        np.testing.assert_array_equal(buf.pixels, img)
    else:
        out = buf.pixels
        assert (out[region.y:region.y + 8, region.x:region.x + 8, :3]
                == img[region.y, region.x, :3]).all()
        assert not _changed_outside(img, out, region)
