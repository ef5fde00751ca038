from collections import Counter

import pytest

hypothesis = pytest.importorskip("hypothesis", reason="hypothesis is a test optional dependency")
from hypothesis import given, settings, strategies as st  # type: ignore

from prism_color import Color
from prism_sort import sorted_colors

unit = st.floats(0.0, 1.0, allow_nan=False)
colors = st.builds(Color, unit, unit, unit)


@given(c=colors)
def test_lab_roundtrip(c):
    assert Color.from_lab(*c.lab()).almost_equal_rgb(c)


@given(c=colors)
def test_luv_roundtrip(c):
    assert Color.from_luv(*c.luv()).almost_equal_rgb(c)


@given(c=colors)
def test_hsluv_roundtrip(c):
    assert Color.from_hsluv(*c.hsluv()).almost_equal_rgb(c)


@given(c=colors)
def test_hsv_hsl_ranges(c):
    for h, s, x in (c.hsv(), c.hsl()):
        assert 0.0 <= h < 360.0
        assert 0.0 <= s <= 1.0 + 1e-12
        assert 0.0 <= x <= 1.0


@given(c=colors)
def test_hex_roundtrip_stays_within_one_step(c):
    assert Color.from_hex(c.hex()).almost_equal_rgb(c)


@given(a=colors, b=colors)
def test_distance_symmetry(a, b):
    assert a.distance_lab(b) == pytest.approx(b.distance_lab(a))
    assert a.distance_rgb(b) == pytest.approx(b.distance_rgb(a))


@given(a=colors, b=colors)
def test_blend_lab_endpoints(a, b):
    assert a.blend_lab(b, 0.0).almost_equal_rgb(a)
    assert a.blend_lab(b, 1.0).almost_equal_rgb(b)


@settings(max_examples=50, deadline=None)
@given(cs=st.lists(colors, max_size=40))
def test_sorted_is_permutation(cs):
    assert Counter(sorted_colors(cs)) == Counter(cs)
