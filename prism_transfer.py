# -*- coding: utf-8 -*-
"""
Prism: Weaving the mathematics of color representation
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Scalar Transfer Functions
=========================
Leaf layer of the conversion chain.  Everything here is a pure function of
its arguments:

1. sRGB EOTF / OETF (``linearize`` / ``delinearize``) and the cheap 2.2
   power approximation.
2. The CIE 1976 piecewise cube root ``lab_f`` and its inverse.
3. Degree / radian helpers.

Each scalar function has a vectorized Numba twin (``*_array``) working on
float64 arrays of any shape.  Two kernel flavors are compiled: ``fastmath=True`` (default) and a strict IEEE 754 variant selected
at runtime through ``set_strict_ieee``.

References:
    - IEC 61966-2-1:1999 (sRGB Standard)
    - CIE 15:2004 "Colorimetry"
"""

import math
from typing import Final, TypeAlias

import numpy as np
from numba import njit
from numpy.typing import NDArray

__all__ = [
    # --- Type Aliases ---
    "ArrayFloat",

    # --- Constants ---
    "LAB_DELTA",
    "LAB_EPSILON",
    "LAB_KAPPA",
    "DEG2RAD",
    "RAD2DEG",

    # --- Configuration ---
    "set_strict_ieee",
    "strict_ieee_enabled",

    # --- Scalar functions ---
    "linearize",
    "delinearize",
    "fast_linearize",
    "fast_delinearize",
    "lab_f",
    "lab_finv",
    "deg2rad",
    "rad2deg",

    # --- Array functions ---
    "linearize_array",
    "delinearize_array",
    "lab_f_array",
    "lab_finv_array",
]

ArrayFloat: TypeAlias = NDArray[np.floating]

# --- Exact Rational Math Constants ---
# delta = 6/29 is the knee where the Lab curve switches from cubic to linear.
LAB_DELTA: Final[float] = 6.0 / 29.0
LAB_EPSILON: Final[float] = LAB_DELTA * LAB_DELTA * LAB_DELTA  # ~0.008856
LAB_KAPPA: Final[float] = (29.0 * 29.0 * 29.0) / (3.0 * 3.0 * 3.0)  # (29/3)^3 ~903.296

DEG2RAD: Final[float] = math.pi / 180.0
RAD2DEG: Final[float] = 180.0 / math.pi

# sRGB transfer breakpoints (IEC 61966-2-1)
_SRGB_ENCODED_KNEE: Final[float] = 0.04045
_SRGB_LINEAR_KNEE: Final[float] = 0.0031308
_FAST_GAMMA: Final[float] = 2.2


# --- Runtime Configuration ---
# When True, the array dispatchers use fastmath=False kernels that preserve
# strict IEEE 754 semantics (inf / NaN propagation, no FP reassociation).
#
# Toggle at runtime via:
#     import prism_transfer
#     prism_transfer.set_strict_ieee(True)
_STRICT_IEEE: bool = False


def set_strict_ieee(enabled: bool = True) -> None:
    """
    Toggle between fast (default) and strict IEEE 754 Numba kernels.

    Only the ``*_array`` functions are affected; the scalar functions always
    run in plain Python floating point.

    Args:
        enabled: If True, use strict IEEE mode.
    """
    global _STRICT_IEEE
    _STRICT_IEEE = bool(enabled)


def strict_ieee_enabled() -> bool:
    """Returns the current kernel flavor (True = strict IEEE)."""
    return _STRICT_IEEE


# =============================================================================
# 1. SCALAR FUNCTIONS
# =============================================================================

def linearize(v: float) -> float:
    """
    sRGB EOTF: gamma-encoded channel -> linear light.

    Below 0.04045 the curve is the straight segment v / 12.92, which keeps
    the slope finite near black.
    """
    if v <= _SRGB_ENCODED_KNEE:
        return v / 12.92
    return ((v + 0.055) / 1.055) ** 2.4


def delinearize(v: float) -> float:
    """sRGB OETF, exact inverse of ``linearize``."""
    if v <= _SRGB_LINEAR_KNEE:
        return 12.92 * v
    return 1.055 * (v ** (1.0 / 2.4)) - 0.055


def fast_linearize(v: float) -> float:
    """
    Approximate EOTF using a pure 2.2 power law.

    Much cheaper than ``linearize`` but off by a few percent near black.
    The sign is carried through so out-of-gamut values stay real.
    """
    return math.copysign(abs(v) ** _FAST_GAMMA, v)


def fast_delinearize(v: float) -> float:
    """Inverse of ``fast_linearize``."""
    return math.copysign(abs(v) ** (1.0 / _FAST_GAMMA), v)


def lab_f(t: float) -> float:
    """
    Non-linear transfer f(t) of CIE 1976 Lab/Luv.

    Cube root above (6/29)^3, linear segment t*(29/6)^2/3 + 4/29 below it;
    both branches meet exactly at the knee.
    """
    if t > LAB_EPSILON:
        return t ** (1.0 / 3.0)
    return t / 3.0 * (29.0 / 6.0) * (29.0 / 6.0) + 4.0 / 29.0


def lab_finv(t: float) -> float:
    """Inverse of ``lab_f`` with the knee at 6/29."""
    if t > LAB_DELTA:
        return t * t * t
    return 3.0 * LAB_DELTA * LAB_DELTA * (t - 4.0 / 29.0)


def deg2rad(deg: float) -> float:
    return deg * DEG2RAD


def rad2deg(rad: float) -> float:
    return rad * RAD2DEG


# =============================================================================
# 2. ARRAY KERNELS (Numba Optimized)
# =============================================================================
# Explicit loops over .ravel() views instead of np.where, so no boolean mask
# array is allocated.

@njit(cache=True, fastmath=True)
def _linearize_kernel(srgb: ArrayFloat) -> ArrayFloat:
    """sRGB EOTF over a contiguous float64 array."""
    out = np.empty_like(srgb)
    srgb_flat = srgb.ravel()
    out_flat = out.ravel()
    for i in range(srgb.size):
        v = srgb_flat[i]
        if v <= 0.04045:
            out_flat[i] = v / 12.92
        else:
            out_flat[i] = ((v + 0.055) / 1.055) ** 2.4
    return out


@njit(cache=True, fastmath=True)
def _delinearize_kernel(linear: ArrayFloat) -> ArrayFloat:
    """sRGB OETF over a contiguous float64 array."""
    out = np.empty_like(linear)
    linear_flat = linear.ravel()
    out_flat = out.ravel()
    for i in range(linear.size):
        v = linear_flat[i]
        if v <= 0.0031308:
            out_flat[i] = 12.92 * v
        else:
            out_flat[i] = 1.055 * (v ** (1.0 / 2.4)) - 0.055
    return out


@njit(cache=True, fastmath=True)
def _lab_f_kernel(t: ArrayFloat) -> ArrayFloat:
    """Lab f(t) over a contiguous float64 array."""
    out = np.empty_like(t)
    t_flat = t.ravel()
    out_flat = out.ravel()
    for i in range(t.size):
        v = t_flat[i]
        if v > LAB_EPSILON:
            out_flat[i] = v ** (1.0 / 3.0)
        else:
            out_flat[i] = v / 3.0 * (29.0 / 6.0) * (29.0 / 6.0) + 4.0 / 29.0
    return out


@njit(cache=True, fastmath=True)
def _lab_finv_kernel(t: ArrayFloat) -> ArrayFloat:
    """Lab f_inv(t) over a contiguous float64 array."""
    out = np.empty_like(t)
    t_flat = t.ravel()
    out_flat = out.ravel()
    for i in range(t.size):
        v = t_flat[i]
        if v > LAB_DELTA:
            out_flat[i] = v * v * v
        else:
            out_flat[i] = 3.0 * LAB_DELTA * LAB_DELTA * (v - 4.0 / 29.0)
    return out


# --- Strict IEEE 754 kernel variants (fastmath=False) ---

@njit(cache=True, fastmath=False)
def _linearize_kernel_strict(srgb: ArrayFloat) -> ArrayFloat:
    """sRGB EOTF, strict IEEE 754 variant."""
    out = np.empty_like(srgb)
    srgb_flat = srgb.ravel()
    out_flat = out.ravel()
    for i in range(srgb.size):
        v = srgb_flat[i]
        if v <= 0.04045:
            out_flat[i] = v / 12.92
        else:
            out_flat[i] = ((v + 0.055) / 1.055) ** 2.4
    return out


@njit(cache=True, fastmath=False)
def _delinearize_kernel_strict(linear: ArrayFloat) -> ArrayFloat:
    """sRGB OETF, strict IEEE 754 variant."""
    out = np.empty_like(linear)
    linear_flat = linear.ravel()
    out_flat = out.ravel()
    for i in range(linear.size):
        v = linear_flat[i]
        if v <= 0.0031308:
            out_flat[i] = 12.92 * v
        else:
            out_flat[i] = 1.055 * (v ** (1.0 / 2.4)) - 0.055
    return out


@njit(cache=True, fastmath=False)
def _lab_f_kernel_strict(t: ArrayFloat) -> ArrayFloat:
    """Lab f(t), strict IEEE 754 variant."""
    out = np.empty_like(t)
    t_flat = t.ravel()
    out_flat = out.ravel()
    for i in range(t.size):
        v = t_flat[i]
        if v > LAB_EPSILON:
            out_flat[i] = v ** (1.0 / 3.0)
        else:
            out_flat[i] = v / 3.0 * (29.0 / 6.0) * (29.0 / 6.0) + 4.0 / 29.0
    return out


@njit(cache=True, fastmath=False)
def _lab_finv_kernel_strict(t: ArrayFloat) -> ArrayFloat:
    """Lab f_inv(t), strict IEEE 754 variant."""
    out = np.empty_like(t)
    t_flat = t.ravel()
    out_flat = out.ravel()
    for i in range(t.size):
        v = t_flat[i]
        if v > LAB_DELTA:
            out_flat[i] = v * v * v
        else:
            out_flat[i] = 3.0 * LAB_DELTA * LAB_DELTA * (v - 4.0 / 29.0)
    return out


# --- Kernel dispatchers ---
# Inputs are materialised as contiguous float64 before entering a kernel.

def _as_kernel_input(arr: ArrayFloat) -> ArrayFloat:
    return np.ascontiguousarray(arr, dtype=np.float64)


def linearize_array(srgb: ArrayFloat) -> ArrayFloat:
    """Vectorized ``linearize``."""
    arr = _as_kernel_input(srgb)
    if _STRICT_IEEE:
        return _linearize_kernel_strict(arr)
    return _linearize_kernel(arr)


def delinearize_array(linear: ArrayFloat) -> ArrayFloat:
    """Vectorized ``delinearize``."""
    arr = _as_kernel_input(linear)
    if _STRICT_IEEE:
        return _delinearize_kernel_strict(arr)
    return _delinearize_kernel(arr)


def lab_f_array(t: ArrayFloat) -> ArrayFloat:
    """Vectorized ``lab_f``."""
    arr = _as_kernel_input(t)
    if _STRICT_IEEE:
        return _lab_f_kernel_strict(arr)
    return _lab_f_kernel(arr)


def lab_finv_array(t: ArrayFloat) -> ArrayFloat:
    """Vectorized ``lab_finv``."""
    arr = _as_kernel_input(t)
    if _STRICT_IEEE:
        return _lab_finv_kernel_strict(arr)
    return _lab_finv_kernel(arr)
