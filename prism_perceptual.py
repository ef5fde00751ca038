# -*- coding: utf-8 -*-
"""
Prism: Weaving the mathematics of color representation
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Perceptual-Space Layer
======================
White-point relative CIE spaces and their cylindrical restatements:

1. XYZ <-> CIE L*a*b* and XYZ <-> CIE L*u*v*.
2. Lab -> HCL and Luv -> LCh(uv) polar forms.
3. HSLuv / HPLuv, LCh(uv) rescaled by the sRGB gamut boundary.

Scale convention: lightness lives in [0, 1] (not the traditional 0..100) and
a, b, u, v are divided by 100 accordingly.  Every function is a plain
function over a 3-tuple; the white point is an explicit argument.

References:
    - CIE 15:2004 "Colorimetry"
    - HSLuv reference implementation, rev. 4 (https://www.hsluv.org)
"""

import math
from typing import Final, List, Tuple

import numpy as np

from prism_transfer import (
    LAB_EPSILON,
    LAB_KAPPA,
    ArrayFloat,
    DEG2RAD,
    RAD2DEG,
    lab_f,
    lab_f_array,
    lab_finv,
    lab_finv_array,
)
from prism_tristimulus import (
    D65,
    Triple,
    WhitePoint,
    handle_shapes,
    srgb_to_xyz_array,
    xyz_to_srgb_array,
)

__all__ = [
    # --- Lab ---
    "xyz_to_lab",
    "lab_to_xyz",
    "srgb_to_lab_array",
    "lab_to_srgb_array",

    # --- Luv ---
    "xyz_to_uv",
    "xyz_to_luv",
    "luv_to_xyz",

    # --- Polar ---
    "lab_to_hcl",
    "hcl_to_lab",
    "luv_to_lch",
    "lch_to_luv",

    # --- HSLuv / HPLuv ---
    "hsluv_bounds",
    "max_chroma_for_lh",
    "max_safe_chroma_for_l",
    "lch_to_hsluv",
    "hsluv_to_lch",
    "lch_to_hpluv",
    "hpluv_to_lch",
]

# Polar transforms treat |a|, |b| below this as the achromatic axis.
HUE_EPSILON: Final[float] = 1e-4

# HSLuv lightness limits on the 0..100 scale; outside them the gamut is a
# single point and saturation is defined as 0.
_HSLUV_L_MAX: Final[float] = 99.9999999
_HSLUV_L_MIN: Final[float] = 0.00000001

# XYZ -> linear RGB matrix of the HSLuv reference implementation.  The gamut
# boundary lines are derived from its rows.
_HSLUV_M: Final[Tuple[Triple, Triple, Triple]] = (
    (3.2409699419045214, -1.5373831775700935, -0.49861076029300328),
    (-0.96924363628087983, 1.8759675015077207, 0.041555057407175613),
    (0.055630079696993609, -0.20397695888897657, 1.0569715142428786),
)
_HSLUV_EPSILON: Final[float] = 0.0088564516790356308
_HSLUV_KAPPA: Final[float] = 903.2962962962963


# =============================================================================
# 1. CIE L*a*b*
# =============================================================================

def xyz_to_lab(x: float, y: float, z: float, wref: WhitePoint = D65) -> Triple:
    """
    Converts XYZ to CIELAB relative to *wref*.

    L depends on Y only; a and b are the scaled differences
    5 * (f(X) - f(Y)) and 2 * (f(Y) - f(Z)).
    """
    fy = lab_f(y / wref[1])
    l = 1.16 * fy - 0.16
    a = 5.0 * (lab_f(x / wref[0]) - fy)
    b = 2.0 * (fy - lab_f(z / wref[2]))
    return l, a, b


def lab_to_xyz(l: float, a: float, b: float, wref: WhitePoint = D65) -> Triple:
    """Converts CIELAB back to XYZ; the algebraic inverse of ``xyz_to_lab``."""
    fy = (l + 0.16) / 1.16
    return (
        wref[0] * lab_finv(fy + a / 5.0),
        wref[1] * lab_finv(fy),
        wref[2] * lab_finv(fy - b / 2.0),
    )


@handle_shapes
def srgb_to_lab_array(rgb_array: ArrayFloat, wref: WhitePoint = D65) -> ArrayFloat:
    """
    Converts a batch of sRGB colors to CIELAB in one vectorized pass.

    Args:
        rgb_array: sRGB data, shape (N, 3) or (3,).
        wref: Reference white point.

    Returns:
        Lab coordinates with L in [0, 1], same shape as the input.
    """
    xyz = srgb_to_xyz_array(rgb_array)
    f_xyz = lab_f_array(xyz / np.asarray(wref, dtype=np.float64))

    out = np.empty_like(xyz)
    out[:, 0] = 1.16 * f_xyz[:, 1] - 0.16
    out[:, 1] = 5.0 * (f_xyz[:, 0] - f_xyz[:, 1])
    out[:, 2] = 2.0 * (f_xyz[:, 1] - f_xyz[:, 2])
    return out


@handle_shapes
def lab_to_srgb_array(lab_array: ArrayFloat, wref: WhitePoint = D65) -> ArrayFloat:
    """
    Converts a batch of CIELAB colors to gamma-encoded sRGB.

    The inverse of ``srgb_to_lab_array``; out-of-gamut results are not clipped.
    """
    fy = (lab_array[:, 0] + 0.16) / 1.16
    f_xyz = np.empty_like(lab_array)
    f_xyz[:, 0] = fy + lab_array[:, 1] / 5.0
    f_xyz[:, 1] = fy
    f_xyz[:, 2] = fy - lab_array[:, 2] / 2.0

    xyz = lab_finv_array(f_xyz) * np.asarray(wref, dtype=np.float64)
    return xyz_to_srgb_array(xyz)


# =============================================================================
# 2. CIE L*u*v*
# =============================================================================

def xyz_to_uv(x: float, y: float, z: float) -> Tuple[float, float]:
    """
    CIE 1976 u', v' chromaticity.

    Formulas:
        u' = 4X / (X + 15Y + 3Z)
        v' = 9Y / (X + 15Y + 3Z)

    A zero denominator (pure black) returns (0, 0).
    """
    denom = x + 15.0 * y + 3.0 * z
    if denom == 0.0:
        return 0.0, 0.0
    return 4.0 * x / denom, 9.0 * y / denom


def xyz_to_luv(x: float, y: float, z: float, wref: WhitePoint = D65) -> Triple:
    """Converts XYZ to CIELUV relative to *wref*."""
    y_rel = y / wref[1]
    if y_rel <= LAB_EPSILON:
        l = y_rel * LAB_KAPPA / 100.0
    else:
        l = 1.16 * y_rel ** (1.0 / 3.0) - 0.16

    u_prime, v_prime = xyz_to_uv(x, y, z)
    u_n, v_n = xyz_to_uv(*wref)
    return l, 13.0 * l * (u_prime - u_n), 13.0 * l * (v_prime - v_n)


def luv_to_xyz(l: float, u: float, v: float, wref: WhitePoint = D65) -> Triple:
    """
    Converts CIELUV to XYZ relative to *wref*.

    u and v are defined through a division by L, so L == 0 maps straight to
    black instead of dividing.
    """
    if l == 0.0:
        return 0.0, 0.0, 0.0

    if l <= 0.08:
        y = wref[1] * l * 100.0 / LAB_KAPPA
    else:
        fy = (l + 0.16) / 1.16
        y = wref[1] * fy * fy * fy

    u_n, v_n = xyz_to_uv(*wref)
    u_prime = u / (13.0 * l) + u_n
    v_prime = v / (13.0 * l) + v_n
    if v_prime == 0.0:
        return 0.0, y, 0.0

    inv_4vp = 1.0 / (4.0 * v_prime)
    x = y * 9.0 * u_prime * inv_4vp
    z = y * (12.0 - 3.0 * u_prime - 20.0 * v_prime) * inv_4vp
    return x, y, z


# =============================================================================
# 3. POLAR FORMS (HCL, LCh)
# =============================================================================

def _polar(first: float, second: float) -> Tuple[float, float]:
    """Returns (hue in [0, 360), chroma) of the rectangular pair."""
    if abs(second - first) <= HUE_EPSILON and abs(second) <= HUE_EPSILON:
        h = 0.0
    else:
        h = (math.atan2(second, first) * RAD2DEG + 360.0) % 360.0
    return h, math.hypot(first, second)


def lab_to_hcl(l: float, a: float, b: float) -> Triple:
    """CIELAB -> HCL (hue in degrees, chroma, lightness)."""
    h, c = _polar(a, b)
    return h, c, l


def hcl_to_lab(h: float, c: float, l: float) -> Triple:
    """HCL -> CIELAB."""
    h_rad = h * DEG2RAD
    return l, c * math.cos(h_rad), c * math.sin(h_rad)


def luv_to_lch(l: float, u: float, v: float) -> Triple:
    """CIELUV -> LCh(uv) (lightness, chroma, hue in degrees)."""
    h, c = _polar(u, v)
    return l, c, h


def lch_to_luv(l: float, c: float, h: float) -> Triple:
    """LCh(uv) -> CIELUV."""
    h_rad = h * DEG2RAD
    return l, c * math.cos(h_rad), c * math.sin(h_rad)


# =============================================================================
# 4. HSLuv / HPLuv GAMUT BOUNDARY
# =============================================================================
# For a fixed lightness each of the six planes R=0, R=1, G=0, G=1, B=0, B=1
# projects to a straight line in the (u, v) chroma plane.  The lines enclose
# the displayable gamut at that lightness.  All math here runs on the 0..100
# scale of the reference implementation.

def hsluv_bounds(l: float) -> List[Tuple[float, float]]:
    """
    Six gamut-boundary lines ``(slope, intercept)`` at lightness *l* (0..100).

    *l* must lie strictly inside (0, 100]; at l = 0 every line collapses
    onto the origin.
    """
    sub1 = (l + 16.0) ** 3 / 1560896.0
    sub2 = sub1 if sub1 > _HSLUV_EPSILON else l / _HSLUV_KAPPA

    bounds = []
    for m1, m2, m3 in _HSLUV_M:
        for t in (0.0, 1.0):
            top1 = (284517.0 * m1 - 94839.0 * m3) * sub2
            top2 = (838422.0 * m3 + 769860.0 * m2 + 731718.0 * m1) * l * sub2 - 769860.0 * t * l
            bottom = (632260.0 * m3 - 126452.0 * m2) * sub2 + 126452.0 * t
            bounds.append((top1 / bottom, top2 / bottom))
    return bounds


def _ray_length_until_intersect(theta: float, slope: float, intercept: float) -> float:
    denom = math.sin(theta) - slope * math.cos(theta)
    if denom == 0.0:
        # ray parallel to the line, never hits it
        return math.inf
    return intercept / denom


def max_chroma_for_lh(l: float, h: float) -> float:
    """
    Largest in-gamut chroma (0..100 scale) for lightness *l* and hue *h*.

    The hue ray is intersected with every boundary line; the closest
    positive hit is the gamut edge.
    """
    h_rad = h * DEG2RAD
    min_length = math.inf
    for slope, intercept in hsluv_bounds(l):
        length = _ray_length_until_intersect(h_rad, slope, intercept)
        if 0.0 < length < min_length:
            min_length = length
    return min_length


def max_safe_chroma_for_l(l: float) -> float:
    """
    Largest chroma (0..100 scale) in gamut for *every* hue at lightness *l*.

    This is the radius of the largest circle around the achromatic axis
    that fits inside the boundary hexagon: the minimum distance from the
    origin to each boundary line.
    """
    min_length = math.inf
    for slope, intercept in hsluv_bounds(l):
        x = intercept / (-1.0 / slope - slope)
        dist = math.hypot(x, intercept + x * slope)
        if dist < min_length:
            min_length = dist
    return min_length


def _degenerate_lightness(l100: float) -> bool:
    return l100 > _HSLUV_L_MAX or l100 < _HSLUV_L_MIN


def lch_to_hsluv(l: float, c: float, h: float) -> Triple:
    """
    LCh(uv) -> HSLuv (hue, saturation, lightness), S and L in [0, 1].

    At the black and white ends the gamut degenerates to a point and the
    saturation is 0 for every hue.
    """
    l100 = l * 100.0
    if _degenerate_lightness(l100):
        return h, 0.0, l
    return h, c * 100.0 / max_chroma_for_lh(l100, h), l


def hsluv_to_lch(h: float, s: float, l: float) -> Triple:
    """HSLuv -> LCh(uv)."""
    l100 = l * 100.0
    if _degenerate_lightness(l100):
        return l, 0.0, h
    return l, max_chroma_for_lh(l100, h) / 100.0 * s, h


def lch_to_hpluv(l: float, c: float, h: float) -> Triple:
    """
    LCh(uv) -> HPLuv (hue, saturation, lightness).

    Saturation is relative to the hue-independent safe chroma, so colors at
    the gamut edge of saturated hues exceed 1.
    """
    l100 = l * 100.0
    if _degenerate_lightness(l100):
        return h, 0.0, l
    return h, c * 100.0 / max_safe_chroma_for_l(l100), l


def hpluv_to_lch(h: float, s: float, l: float) -> Triple:
    """HPLuv -> LCh(uv)."""
    l100 = l * 100.0
    if _degenerate_lightness(l100):
        return l, 0.0, h
    return l, max_safe_chroma_for_l(l100) / 100.0 * s, h
