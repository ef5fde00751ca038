from __future__ import annotations

import numpy as np
import pytest

from prism_color import Color
from prism_tristimulus import (
    D50,
    D65,
    M_SRGB_TO_XYZ,
    M_XYZ_TO_SRGB,
    linear_rgb_to_xyz,
    srgb_to_xyz_array,
    xyy_to_xyz,
    xyz_to_linear_rgb,
    xyz_to_srgb_array,
    xyz_to_xyy,
)


def test_matrices_are_inverse():
    np.testing.assert_allclose(M_SRGB_TO_XYZ @ M_XYZ_TO_SRGB, np.eye(3), atol=1e-12)


def test_white_maps_to_d65():
    x, y, z = linear_rgb_to_xyz(1.0, 1.0, 1.0)
    assert (x, y, z) == pytest.approx(D65, abs=1e-6)


def test_linear_roundtrip():
    for rgb in [(0.2, 0.4, 0.6), (1.0, 0.0, 0.0), (-0.1, 0.5, 1.3)]:
        assert xyz_to_linear_rgb(*linear_rgb_to_xyz(*rgb)) == pytest.approx(rgb, abs=1e-12)


def test_xyy_of_black_uses_white_chromaticity():
    x, y, Y = xyz_to_xyy(0.0, 0.0, 0.0)
    assert x == pytest.approx(0.312727, abs=1e-6)
    assert y == pytest.approx(0.329023, abs=1e-6)
    assert Y == 0.0

    x50, y50, _ = xyz_to_xyy(0.0, 0.0, 0.0, wref=D50)
    assert x50 == pytest.approx(D50[0] / sum(D50))
    assert y50 == pytest.approx(D50[1] / sum(D50))


def test_xyy_to_xyz_degenerate_y():
    assert xyy_to_xyz(0.3, 0.0, 0.5) == (0.0, 0.5, 0.0)


def test_xyy_roundtrip():
    xyz = (0.3, 0.4, 0.5)
    assert xyy_to_xyz(*xyz_to_xyy(*xyz)) == pytest.approx(xyz)


def test_batch_matches_scalar(random_colors):
    rgb = np.array([c.values() for c in random_colors])
    xyz = srgb_to_xyz_array(rgb)
    assert xyz.shape == rgb.shape
    for c, row in zip(random_colors[:20], xyz[:20]):
        np.testing.assert_allclose(row, c.xyz(), rtol=1e-9, atol=1e-12)


def test_batch_single_color_shape():
    out = srgb_to_xyz_array([1.0, 0.0, 0.0])
    assert out.shape == (3,)
    np.testing.assert_allclose(out, Color(1.0, 0.0, 0.0).xyz(), rtol=1e-9)


def test_batch_roundtrip(random_colors):
    rgb = np.array([c.values() for c in random_colors])
    np.testing.assert_allclose(xyz_to_srgb_array(srgb_to_xyz_array(rgb)), rgb, atol=1e-9)


@pytest.mark.parametrize("bad", [np.zeros((4, 2)), np.zeros(4), np.zeros((2, 3, 3))])
def test_batch_rejects_bad_shapes(bad):
    with pytest.raises(ValueError, match="Expected shape"):
        srgb_to_xyz_array(bad)
