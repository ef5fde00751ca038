# -*- coding: utf-8 -*-
"""
Prism: Weaving the mathematics of color representation
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Color Value Type
================
``Color`` stores three gamma-encoded sRGB channels.  Every other model is
reached through a named conversion pair (``color.lab()`` / ``Color.from_lab``)
composed from the pure transforms in ``prism_tristimulus`` and
``prism_perceptual``; HSV and HSL are computed directly on the RGB channels.

Gamut policy:
    Nothing is clamped implicitly.  Conversions from other models may return
    channels outside [0, 1]; use ``is_valid()`` to detect that and
    ``clamped()`` to fix it.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Callable, Final, Iterator, List, Optional, Tuple

import numpy as np

from prism_perceptual import (
    hcl_to_lab,
    hpluv_to_lch,
    hsluv_to_lch,
    lab_to_hcl,
    lab_to_srgb_array,
    lab_to_xyz,
    lch_to_hpluv,
    lch_to_hsluv,
    lch_to_luv,
    luv_to_lch,
    luv_to_xyz,
    srgb_to_lab_array,
    xyz_to_lab,
    xyz_to_luv,
)
from prism_transfer import delinearize, fast_delinearize, fast_linearize, linearize
from prism_tristimulus import (
    D65,
    HSLUV_D65,
    Triple,
    WhitePoint,
    linear_rgb_to_xyz,
    xyy_to_xyz,
    xyz_to_linear_rgb,
    xyz_to_xyy,
)

logger = logging.getLogger(__name__)

__all__ = [
    "Color",
    "MalformedHexError",
    "DELTA",
    "lab_ramp",
    "warm_color",
    "fast_warm_color",
    "happy_color",
    "fast_happy_color",
]

# Tolerance of ``almost_equal_rgb``: one 8-bit step per channel.
DELTA: Final[float] = 1.0 / 255.0

# Polar blends treat a chroma at or below this as gray.
_ACHROMATIC_CHROMA: Final[float] = 0.00015

_HEX6_RE: Final[re.Pattern[str]] = re.compile(r"#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})")
_HEX3_RE: Final[re.Pattern[str]] = re.compile(r"#([0-9a-fA-F])([0-9a-fA-F])([0-9a-fA-F])")


class MalformedHexError(ValueError):
    """Raised when a string is not a ``#rrggbb`` or ``#rgb`` hex color."""

    def __init__(self, text: object) -> None:
        super().__init__(f"{text!r} is not a hex-color")
        self.text = text


def _to_8bit(v: float) -> int:
    # round half up, then keep the low byte like a uint8 cast
    return int(v * 255.0 + 0.5) & 0xFF


def _to_16bit(v: float) -> int:
    return int(v * 65535.0 + 0.5) & 0xFFFF


def _clamp01(v: float) -> float:
    return max(0.0, min(1.0, v))


def _lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


def _interp_angle(a0: float, a1: float, t: float) -> float:
    """Interpolates hue angles in degrees along the shorter arc."""
    delta = ((a1 - a0) % 360.0 + 540.0) % 360.0 - 180.0
    return (a0 + t * delta) % 360.0


@dataclass(slots=True, frozen=True)
class Color:
    """
    A color in gamma-encoded sRGB.

    Attributes
    ----------
    r, g, b:
        Channel values, nominally in [0, 1].  Values outside that range are
        representable and mark the color as out of gamut.
    """

    r: float
    g: float
    b: float

    def __iter__(self) -> Iterator[float]:
        return iter((self.r, self.g, self.b))

    # =========================================================================
    # Validity, clamping, comparison
    # =========================================================================

    def is_valid(self) -> bool:
        """True iff every channel lies in [0, 1]."""
        return 0.0 <= self.r <= 1.0 and 0.0 <= self.g <= 1.0 and 0.0 <= self.b <= 1.0

    def clamped(self) -> "Color":
        """Returns the color with each channel clipped to [0, 1]."""
        return Color(_clamp01(self.r), _clamp01(self.g), _clamp01(self.b))

    def almost_equal_rgb(self, other: "Color") -> bool:
        """Summed absolute channel difference below 3 * (1/255)."""
        return (
            abs(self.r - other.r) + abs(self.g - other.g) + abs(self.b - other.b)
        ) < 3.0 * DELTA

    def values(self) -> Triple:
        return self.r, self.g, self.b

    # =========================================================================
    # Interchange: hex, 8-bit, 16-bit
    # =========================================================================

    @classmethod
    def from_hex(cls, text: str) -> "Color":
        """
        Parses ``#rrggbb`` or the ``#rgb`` shorthand (case-insensitive).

        In the shorthand each digit is duplicated, so ``#f0c`` equals
        ``#ff00cc``.

        Raises:
            MalformedHexError: *text* matches neither form exactly.
        """
        if not isinstance(text, str):
            raise MalformedHexError(text)
        if len(text) == 4:
            match = _HEX3_RE.fullmatch(text)
            scale = 17.0
        else:
            match = _HEX6_RE.fullmatch(text)
            scale = 1.0
        if match is None:
            logger.debug("rejected hex color %r", text)
            raise MalformedHexError(text)
        r, g, b = (int(group, 16) * scale / 255.0 for group in match.groups())
        return cls(r, g, b)

    def hex(self) -> str:
        """Lower-case ``#rrggbb`` form; each channel rounded half up to 8 bits."""
        return "#{:02x}{:02x}{:02x}".format(
            _to_8bit(self.r), _to_8bit(self.g), _to_8bit(self.b)
        )

    def rgb255(self) -> Tuple[int, int, int]:
        """Channels as 8-bit integers."""
        return _to_8bit(self.r), _to_8bit(self.g), _to_8bit(self.b)

    def rgba(self) -> Tuple[int, int, int, int]:
        """
        16-bit channels plus a fully opaque alpha, for pixel pipelines that
        work with 32-bit-per-channel (alpha-premultiplied) values.
        """
        return _to_16bit(self.r), _to_16bit(self.g), _to_16bit(self.b), 0xFFFF

    @classmethod
    def from_rgba(cls, r: int, g: int, b: int, a: int) -> Tuple["Color", bool]:
        """
        Builds a color from 16-bit alpha-premultiplied channels.

        Returns:
            ``(color, ok)``.  A fully transparent input cannot be
            un-premultiplied; it gives black and ``ok = False``.
        """
        if a == 0:
            return cls(0.0, 0.0, 0.0), False
        return cls(
            (r * 0xFFFF // a) / 65535.0,
            (g * 0xFFFF // a) / 65535.0,
            (b * 0xFFFF // a) / 65535.0,
        ), True

    # =========================================================================
    # HSV / HSL (RGB native, no white point)
    # =========================================================================

    def _hue(self, v_max: float, chroma: float) -> float:
        # six-piece hue; callers guarantee chroma > 0
        if v_max == self.r:
            h = math.fmod((self.g - self.b) / chroma, 6.0)
        elif v_max == self.g:
            h = (self.b - self.r) / chroma + 2.0
        else:
            h = (self.r - self.g) / chroma + 4.0
        h *= 60.0
        if h < 0.0:
            h += 360.0
        # a tiny negative hue rounds onto 360
        return h if h < 360.0 else 0.0

    def hsv(self) -> Triple:
        """Hue [0, 360), saturation and value [0, 1].  Gray has hue 0."""
        v_min = min(self.r, self.g, self.b)
        v_max = max(self.r, self.g, self.b)
        chroma = v_max - v_min

        s = chroma / v_max if v_max != 0.0 else 0.0
        h = self._hue(v_max, chroma) if v_min != v_max else 0.0
        return h, s, v_max

    @classmethod
    def from_hsv(cls, h: float, s: float, v: float) -> "Color":
        """Hue in degrees (taken modulo 360), saturation and value in [0, 1]."""
        hp = (h % 360.0) / 60.0

        def channel(n: float) -> float:
            k = (n + hp) % 6.0
            return v - v * s * max(0.0, min(k, 4.0 - k, 1.0))

        return cls(channel(5.0), channel(3.0), channel(1.0))

    def hsl(self) -> Triple:
        """Hue [0, 360), saturation and lightness [0, 1].  Gray has h = s = 0."""
        v_min = min(self.r, self.g, self.b)
        v_max = max(self.r, self.g, self.b)
        l = (v_max + v_min) / 2.0
        if v_min == v_max:
            return 0.0, 0.0, l

        chroma = v_max - v_min
        # out-of-gamut channels can zero either denominator
        denom = v_max + v_min if l < 0.5 else 2.0 - v_max - v_min
        s = chroma / denom if denom != 0.0 else 0.0
        return self._hue(v_max, chroma), s, l

    @classmethod
    def from_hsl(cls, h: float, s: float, l: float) -> "Color":
        """Hue in degrees (taken modulo 360), saturation and lightness in [0, 1]."""
        if s == 0.0:
            return cls(l, l, l)
        hp = (h % 360.0) / 30.0
        a = s * min(l, 1.0 - l)

        def channel(n: float) -> float:
            k = (n + hp) % 12.0
            return l - a * max(-1.0, min(k - 3.0, 9.0 - k, 1.0))

        return cls(channel(0.0), channel(8.0), channel(4.0))

    # =========================================================================
    # Linear RGB / XYZ / xyY
    # =========================================================================

    def linear_rgb(self) -> Triple:
        """Exact sRGB EOTF per channel."""
        return linearize(self.r), linearize(self.g), linearize(self.b)

    @classmethod
    def from_linear_rgb(cls, r: float, g: float, b: float) -> "Color":
        return cls(delinearize(r), delinearize(g), delinearize(b))

    def fast_linear_rgb(self) -> Triple:
        """2.2 power-law approximation of ``linear_rgb``; cheaper, less exact near black."""
        return fast_linearize(self.r), fast_linearize(self.g), fast_linearize(self.b)

    @classmethod
    def from_fast_linear_rgb(cls, r: float, g: float, b: float) -> "Color":
        return cls(fast_delinearize(r), fast_delinearize(g), fast_delinearize(b))

    def xyz(self) -> Triple:
        return linear_rgb_to_xyz(*self.linear_rgb())

    @classmethod
    def from_xyz(cls, x: float, y: float, z: float) -> "Color":
        return cls.from_linear_rgb(*xyz_to_linear_rgb(x, y, z))

    def xyy(self, wref: WhitePoint = D65) -> Triple:
        """CIE xyY; black takes the chromaticity of *wref*."""
        return xyz_to_xyy(*self.xyz(), wref=wref)

    @classmethod
    def from_xyy(cls, x: float, y: float, Y: float) -> "Color":
        return cls.from_xyz(*xyy_to_xyz(x, y, Y))

    # =========================================================================
    # White-point relative models
    # =========================================================================

    def lab(self, wref: WhitePoint = D65) -> Triple:
        """CIE L*a*b* with L in [0, 1]."""
        return xyz_to_lab(*self.xyz(), wref=wref)

    @classmethod
    def from_lab(cls, l: float, a: float, b: float, wref: WhitePoint = D65) -> "Color":
        return cls.from_xyz(*lab_to_xyz(l, a, b, wref=wref))

    def luv(self, wref: WhitePoint = D65) -> Triple:
        """CIE L*u*v* with L in [0, 1]."""
        return xyz_to_luv(*self.xyz(), wref=wref)

    @classmethod
    def from_luv(cls, l: float, u: float, v: float, wref: WhitePoint = D65) -> "Color":
        return cls.from_xyz(*luv_to_xyz(l, u, v, wref=wref))

    def hcl(self, wref: WhitePoint = D65) -> Triple:
        """Polar L*a*b*: (hue in degrees, chroma, lightness)."""
        return lab_to_hcl(*self.lab(wref))

    @classmethod
    def from_hcl(cls, h: float, c: float, l: float, wref: WhitePoint = D65) -> "Color":
        return cls.from_lab(*hcl_to_lab(h, c, l), wref=wref)

    def luv_lch(self, wref: WhitePoint = D65) -> Triple:
        """Polar L*u*v*: (lightness, chroma, hue in degrees)."""
        return luv_to_lch(*self.luv(wref))

    @classmethod
    def from_luv_lch(cls, l: float, c: float, h: float, wref: WhitePoint = D65) -> "Color":
        return cls.from_luv(*lch_to_luv(l, c, h), wref=wref)

    def hsluv(self) -> Triple:
        """HSLuv (hue, saturation, lightness), always relative to the HSLuv D65."""
        return lch_to_hsluv(*self.luv_lch(HSLUV_D65))

    @classmethod
    def from_hsluv(cls, h: float, s: float, l: float) -> "Color":
        return cls.from_luv_lch(*hsluv_to_lch(h, s, l), wref=HSLUV_D65)

    def hpluv(self) -> Triple:
        """HPLuv (hue, saturation, lightness), always relative to the HSLuv D65."""
        return lch_to_hpluv(*self.luv_lch(HSLUV_D65))

    @classmethod
    def from_hpluv(cls, h: float, s: float, l: float) -> "Color":
        return cls.from_luv_lch(*hpluv_to_lch(h, s, l), wref=HSLUV_D65)

    # =========================================================================
    # Distances
    # =========================================================================

    def distance_rgb(self, other: "Color") -> float:
        """
        Euclidean distance in gamma-encoded RGB.

        Cheap but visually poor: equal steps do not look equally large.
        Prefer ``distance_lab``.
        """
        return math.dist(self.values(), other.values())

    def distance_linear_rgb(self, other: "Color") -> float:
        """Euclidean distance in linear RGB."""
        return math.dist(self.linear_rgb(), other.linear_rgb())

    def distance_lab(self, other: "Color", wref: WhitePoint = D65) -> float:
        """Euclidean distance in L*a*b* (CIE76), the recommended metric."""
        return math.dist(self.lab(wref), other.lab(wref))

    def distance_luv(self, other: "Color", wref: WhitePoint = D65) -> float:
        """Euclidean distance in L*u*v*."""
        return math.dist(self.luv(wref), other.luv(wref))

    # =========================================================================
    # Blending (t == 0 gives self, t == 1 gives other)
    # =========================================================================

    def blend_rgb(self, other: "Color", t: float) -> "Color":
        """Per-channel lerp in sRGB; tends to produce muddy midpoints."""
        return Color(
            _lerp(self.r, other.r, t),
            _lerp(self.g, other.g, t),
            _lerp(self.b, other.b, t),
        )

    def blend_linear_rgb(self, other: "Color", t: float) -> "Color":
        r1, g1, b1 = self.linear_rgb()
        r2, g2, b2 = other.linear_rgb()
        return Color.from_linear_rgb(_lerp(r1, r2, t), _lerp(g1, g2, t), _lerp(b1, b2, t))

    def blend_lab(self, other: "Color", t: float, wref: WhitePoint = D65) -> "Color":
        """Lerp in L*a*b*; the recommended blend."""
        l1, a1, b1 = self.lab(wref)
        l2, a2, b2 = other.lab(wref)
        return Color.from_lab(_lerp(l1, l2, t), _lerp(a1, a2, t), _lerp(b1, b2, t), wref=wref)

    def blend_luv(self, other: "Color", t: float, wref: WhitePoint = D65) -> "Color":
        l1, u1, v1 = self.luv(wref)
        l2, u2, v2 = other.luv(wref)
        return Color.from_luv(_lerp(l1, l2, t), _lerp(u1, u2, t), _lerp(v1, v2, t), wref=wref)

    def blend_hsv(self, other: "Color", t: float) -> "Color":
        """Blends in HSV along the shorter hue arc."""
        h1, s1, v1 = self.hsv()
        h2, s2, v2 = other.hsv()
        # a gray endpoint has no meaningful hue; borrow the other one
        if s1 == 0.0 and s2 != 0.0:
            h1 = h2
        elif s2 == 0.0 and s1 != 0.0:
            h2 = h1
        return Color.from_hsv(_interp_angle(h1, h2, t), _lerp(s1, s2, t), _lerp(v1, v2, t))

    def blend_hcl(self, other: "Color", t: float, wref: WhitePoint = D65) -> "Color":
        """Blends in HCL along the shorter hue arc."""
        h1, c1, l1 = self.hcl(wref)
        h2, c2, l2 = other.hcl(wref)
        if c1 <= _ACHROMATIC_CHROMA < c2:
            h1 = h2
        elif c2 <= _ACHROMATIC_CHROMA < c1:
            h2 = h1
        return Color.from_hcl(_interp_angle(h1, h2, t), _lerp(c1, c2, t), _lerp(l1, l2, t), wref=wref)

    def blend_luv_lch(self, other: "Color", t: float, wref: WhitePoint = D65) -> "Color":
        """Blends in LCh(uv) along the shorter hue arc."""
        l1, c1, h1 = self.luv_lch(wref)
        l2, c2, h2 = other.luv_lch(wref)
        if c1 <= _ACHROMATIC_CHROMA < c2:
            h1 = h2
        elif c2 <= _ACHROMATIC_CHROMA < c1:
            h2 = h1
        return Color.from_luv_lch(_lerp(l1, l2, t), _lerp(c1, c2, t), _interp_angle(h1, h2, t), wref=wref)


# =============================================================================
# Gradients
# =============================================================================

def lab_ramp(start: Color, end: Color, steps: int, wref: WhitePoint = D65) -> List[Color]:
    """
    Evenly spaced colors from *start* to *end*, blended in L*a*b*.

    Equivalent to ``start.blend_lab(end, t)`` for ``t`` on an even grid over
    [0, 1], computed in one vectorized pass.

    Raises:
        ValueError: *steps* is smaller than 1.
    """
    if steps < 1:
        raise ValueError(f"steps must be at least 1, got {steps}")
    if steps == 1:
        return [start]

    ends = srgb_to_lab_array(np.array([start.values(), end.values()]), wref)
    t = np.linspace(0.0, 1.0, steps)[:, None]
    rgb = lab_to_srgb_array(ends[0] + t * (ends[1] - ends[0]), wref)
    return [Color(*map(float, row)) for row in rgb]


# =============================================================================
# Random generators
# =============================================================================

def _until_valid(make: Callable[[np.random.Generator], Color],
                 rng: Optional[np.random.Generator]) -> Color:
    rng = rng if rng is not None else np.random.default_rng()
    color = make(rng)
    while not color.is_valid():
        color = make(rng)
    return color


def warm_color(rng: Optional[np.random.Generator] = None) -> Color:
    """Random low-chroma, mid-dark color picked in HCL; always in gamut."""
    return _until_valid(
        lambda g: Color.from_hcl(g.random() * 360.0, 0.1 + g.random() * 0.3, 0.2 + g.random() * 0.3),
        rng,
    )


def fast_warm_color(rng: Optional[np.random.Generator] = None) -> Color:
    """Like ``warm_color`` but sampled in HSV, which needs no rejection loop."""
    rng = rng if rng is not None else np.random.default_rng()
    return Color.from_hsv(rng.random() * 360.0, 0.5 + rng.random() * 0.3, 0.3 + rng.random() * 0.3)


def happy_color(rng: Optional[np.random.Generator] = None) -> Color:
    """Random saturated, bright color picked in HCL; always in gamut."""
    return _until_valid(
        lambda g: Color.from_hcl(g.random() * 360.0, 0.5 + g.random() * 0.3, 0.5 + g.random() * 0.3),
        rng,
    )


def fast_happy_color(rng: Optional[np.random.Generator] = None) -> Color:
    """Like ``happy_color`` but sampled in HSV."""
    rng = rng if rng is not None else np.random.default_rng()
    return Color.from_hsv(rng.random() * 360.0, 0.7 + rng.random() * 0.3, 0.6 + rng.random() * 0.3)
