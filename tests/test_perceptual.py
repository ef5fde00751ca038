from __future__ import annotations

import math

import numpy as np
import pytest

from prism_color import Color
from prism_perceptual import (
    hcl_to_lab,
    hpluv_to_lch,
    hsluv_bounds,
    hsluv_to_lch,
    lab_to_hcl,
    lab_to_xyz,
    lch_to_hpluv,
    lch_to_hsluv,
    lch_to_luv,
    luv_to_lch,
    luv_to_xyz,
    max_chroma_for_lh,
    max_safe_chroma_for_l,
    lab_to_srgb_array,
    srgb_to_lab_array,
    xyz_to_lab,
    xyz_to_luv,
    xyz_to_uv,
)
from prism_tristimulus import D50, D65, HSLUV_D65


# --- Lab / Luv ---

def test_lab_of_white_point_is_unit_lightness():
    for wref in (D65, D50):
        l, a, b = xyz_to_lab(*wref, wref=wref)
        assert l == pytest.approx(1.0)
        assert a == pytest.approx(0.0, abs=1e-12)
        assert b == pytest.approx(0.0, abs=1e-12)


def test_lab_xyz_roundtrip_on_both_branches():
    for xyz in [(0.3, 0.4, 0.5), (0.001, 0.002, 0.003), (0.0, 0.0, 0.0)]:
        assert lab_to_xyz(*xyz_to_lab(*xyz)) == pytest.approx(xyz, abs=1e-12)


def test_xyz_to_uv_black_is_zero():
    assert xyz_to_uv(0.0, 0.0, 0.0) == (0.0, 0.0)


def test_luv_of_black_and_back():
    assert xyz_to_luv(0.0, 0.0, 0.0) == (0.0, 0.0, 0.0)
    assert luv_to_xyz(0.0, 0.3, -0.2) == (0.0, 0.0, 0.0)


def test_luv_roundtrip_on_both_branches():
    # Y/Yw below (6/29)^3 takes the linear lightness segment
    for xyz in [(0.3, 0.4, 0.5), (0.002, 0.003, 0.004)]:
        assert luv_to_xyz(*xyz_to_luv(*xyz)) == pytest.approx(xyz, rel=1e-9)


def test_srgb_to_lab_array_matches_scalar(random_colors):
    rgb = np.array([c.values() for c in random_colors])
    lab = srgb_to_lab_array(rgb)
    for c, row in zip(random_colors, lab):
        np.testing.assert_allclose(row, c.lab(), rtol=1e-9, atol=1e-12)

    lab50 = srgb_to_lab_array(rgb[0], wref=D50)
    np.testing.assert_allclose(lab50, random_colors[0].lab(D50), rtol=1e-9, atol=1e-12)


def test_lab_to_srgb_array_inverts_batch(random_colors):
    rgb = np.array([c.values() for c in random_colors])
    np.testing.assert_allclose(lab_to_srgb_array(srgb_to_lab_array(rgb)), rgb, atol=1e-9)
    np.testing.assert_allclose(
        lab_to_srgb_array(srgb_to_lab_array(rgb[3], wref=D50), wref=D50), rgb[3], atol=1e-9
    )


def test_lab_to_srgb_array_matches_scalar():
    lab = np.array([[0.0, 0.0, 0.0], [0.5, 0.2, -0.3], [1.0, 0.0, 0.0], [0.05, -0.1, 0.1]])
    for row, rgb in zip(lab, lab_to_srgb_array(lab)):
        np.testing.assert_allclose(rgb, Color.from_lab(*row).values(), rtol=1e-9, atol=1e-12)


# --- polar ---

def test_polar_hue_range_and_chroma():
    h, c, l = lab_to_hcl(0.5, -0.3, -0.4)
    assert 0.0 <= h < 360.0
    assert h == pytest.approx(math.degrees(math.atan2(-0.4, -0.3)) + 360.0)
    assert c == pytest.approx(0.5)
    assert l == 0.5


def test_polar_degenerate_hue_is_zero():
    assert lab_to_hcl(0.7, 3e-5, -3e-5)[0] == 0.0
    assert luv_to_lch(0.7, 0.0, 0.0) == (0.7, 0.0, 0.0)


def test_polar_roundtrip():
    lab = (0.6, 0.25, -0.35)
    assert hcl_to_lab(*lab_to_hcl(*lab)) == pytest.approx(lab)
    luv = (0.6, -0.1, 0.45)
    assert lch_to_luv(*luv_to_lch(*luv)) == pytest.approx(luv)


# --- HSLuv / HPLuv ---

def test_hsluv_bounds_has_six_lines():
    assert len(hsluv_bounds(50.0)) == 6


def test_max_safe_chroma_never_exceeds_hue_max():
    for l in (5.0, 30.0, 60.0, 95.0):
        safe = max_safe_chroma_for_l(l)
        for h in range(0, 360, 15):
            assert safe <= max_chroma_for_lh(l, float(h)) + 1e-9


def test_hsluv_of_red():
    h, s, l = Color(1.0, 0.0, 0.0).hsluv()
    assert h == pytest.approx(12.177, abs=0.5)
    assert s == pytest.approx(1.0, abs=0.01)
    assert l == pytest.approx(0.5324, abs=0.005)


def test_hpluv_of_red_exceeds_one():
    h, s, l = Color(1.0, 0.0, 0.0).hpluv()
    assert h == pytest.approx(12.177, abs=0.5)
    assert s == pytest.approx(4.2675, abs=0.05)


def test_hsluv_primaries_sit_on_gamut_edge():
    for text in ("#00ff00", "#0000ff", "#ffff00", "#00ffff", "#ff00ff"):
        c = Color.from_hex(text)
        assert c.hsluv()[1] == pytest.approx(1.0, abs=0.01)


@pytest.mark.parametrize("l", [0.0, 1.0])
def test_hsluv_saturation_zero_at_extremes(l):
    for h in range(360):
        assert lch_to_hsluv(l, 0.3, float(h))[1] == 0.0
        assert lch_to_hpluv(l, 0.3, float(h))[1] == 0.0
        assert hsluv_to_lch(float(h), 0.8, l)[1] == 0.0
        assert hpluv_to_lch(float(h), 0.8, l)[1] == 0.0


def test_hsluv_of_black_and_white_have_zero_saturation():
    assert Color(0.0, 0.0, 0.0).hsluv()[1] == 0.0
    assert Color(1.0, 1.0, 1.0).hsluv()[1] == 0.0
    assert Color(1.0, 1.0, 1.0).hpluv()[1] == 0.0


def test_hsluv_full_saturation_is_in_gamut():
    for h in range(0, 360, 10):
        for l in (0.2, 0.5, 0.8):
            c = Color.from_hsluv(float(h), 1.0, l)
            assert c.clamped().almost_equal_rgb(c)


def test_hsluv_does_not_clamp_saturation():
    # s > 1 leaves the gamut instead of being clipped to 1
    c = Color.from_hsluv(250.0, 1.5, 0.5)
    assert not c.is_valid()


def test_hsluv_uses_its_own_white():
    l, _, _ = Color(0.5, 0.5, 0.5).luv_lch(HSLUV_D65)
    assert Color(0.5, 0.5, 0.5).hsluv()[2] == pytest.approx(l)
