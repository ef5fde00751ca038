# -*- coding: utf-8 -*-
"""
Prism: Weaving the mathematics of color representation
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Tristimulus Layer
=================
Linear RGB <-> CIE XYZ through the sRGB primaries matrix, XYZ <-> xyY, and the
reference white points shared by every white-point-relative model.

The reverse matrix is *computed* as the exact inverse of the forward one
instead of being typed in from a table, so RGB -> XYZ -> RGB round trips are
limited only by float64 rounding.
"""

import functools
from typing import Any, Callable, Final, Tuple

import numpy as np

from prism_transfer import ArrayFloat, delinearize_array, linearize_array

__all__ = [
    # --- Type Aliases ---
    "Triple",
    "WhitePoint",

    # --- Constants ---
    "D65",
    "D50",
    "HSLUV_D65",
    "M_SRGB_TO_XYZ",
    "M_XYZ_TO_SRGB",

    # --- Decorators ---
    "handle_shapes",

    # --- Scalar functions ---
    "linear_rgb_to_xyz",
    "xyz_to_linear_rgb",
    "xyz_to_xyy",
    "xyy_to_xyz",

    # --- Array functions ---
    "srgb_to_xyz_array",
    "xyz_to_srgb_array",
]

Triple = Tuple[float, float, float]
WhitePoint = Tuple[float, float, float]

# --- Standard Illuminants (Y = 1.0) ---
# D65: Average daylight (approx 6500K)
D65: Final[WhitePoint] = (0.95047, 1.00000, 1.08883)
# D50: Horizon daylight (approx 5000K), standard for printing (ICC)
D50: Final[WhitePoint] = (0.96422, 1.00000, 0.82521)
# White point the HSLuv reference implementation is built on.
HSLUV_D65: Final[WhitePoint] = (0.95045592705167, 1.0, 1.089057750759878)

# --- sRGB Matrices ---
# Defined by IEC 61966-2-1.  Column vectors: xyz = M @ rgb.
M_SRGB_TO_XYZ: Final[ArrayFloat] = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041]
], dtype=np.float64)
M_XYZ_TO_SRGB: Final[ArrayFloat] = np.linalg.inv(M_SRGB_TO_XYZ)

# Pre-transposed copies for row-vector batches: (N, 3) @ M.T
_M_SRGB_TO_XYZ_T: Final[ArrayFloat] = M_SRGB_TO_XYZ.T.copy()
_M_XYZ_TO_SRGB_T: Final[ArrayFloat] = M_XYZ_TO_SRGB.T.copy()

# Plain-float rows for the scalar path; indexing NumPy scalars one at a time
# is several times slower than tuple access.
_FWD: Final[Tuple[Triple, Triple, Triple]] = tuple(
    tuple(float(x) for x in row) for row in M_SRGB_TO_XYZ
)
_INV: Final[Tuple[Triple, Triple, Triple]] = tuple(
    tuple(float(x) for x in row) for row in M_XYZ_TO_SRGB
)

# Below this X+Y+Z (resp. y) a color is treated as black in xyY.
_XYY_BLACK_EPS: Final[float] = 1e-14


# =============================================================================
# 1. ROBUST DECORATORS
# =============================================================================

def handle_shapes(func: Callable[..., ArrayFloat]) -> Callable[..., ArrayFloat]:
    """
    Decorator to normalize inputs to (N, 3) and safeguard shape.

    Args:
        func: The function to decorate.

    Returns:
        The wrapped function with shape handling.
        - If input is (3,), returns (3,)
        - If input is (N, 3), returns (N, 3)
    """
    @functools.wraps(func)
    def wrapper(arr: ArrayFloat, *args: Any, **kwargs: Any) -> ArrayFloat:
        arr = np.asarray(arr, dtype=np.float64)
        arr_in = np.ascontiguousarray(np.atleast_2d(arr))

        if arr_in.ndim != 2 or arr_in.shape[-1] != 3:
            raise ValueError(f"Expected shape (N, 3) or (3,), got {arr.shape}")

        res = func(arr_in, *args, **kwargs)

        if arr.ndim == 1:
            return res[0]
        return res
    return wrapper


# =============================================================================
# 2. SCALAR TRANSFORMS
# =============================================================================

def linear_rgb_to_xyz(r: float, g: float, b: float) -> Triple:
    """Linear RGB -> CIE XYZ (D65 relative)."""
    (m00, m01, m02), (m10, m11, m12), (m20, m21, m22) = _FWD
    return (
        m00 * r + m01 * g + m02 * b,
        m10 * r + m11 * g + m12 * b,
        m20 * r + m21 * g + m22 * b,
    )


def xyz_to_linear_rgb(x: float, y: float, z: float) -> Triple:
    """CIE XYZ -> linear RGB.  Out-of-gamut XYZ yields channels outside [0, 1]."""
    (m00, m01, m02), (m10, m11, m12), (m20, m21, m22) = _INV
    return (
        m00 * x + m01 * y + m02 * z,
        m10 * x + m11 * y + m12 * z,
        m20 * x + m21 * y + m22 * z,
    )


def xyz_to_xyy(x: float, y: float, z: float, wref: WhitePoint = D65) -> Triple:
    """
    Converts XYZ to xyY (Chromaticity + Luminance).

    Black-Pixel Handling:
        For X+Y+Z ~ 0 the chromaticity of the reference white is returned
        with Y = 0 (Bruce Lindbloom convention), so the result is NaN-free.
    """
    n = x + y + z
    if abs(n) < _XYY_BLACK_EPS:
        w_sum = wref[0] + wref[1] + wref[2]
        return wref[0] / w_sum, wref[1] / w_sum, y
    return x / n, y / n, y


def xyy_to_xyz(x: float, y: float, Y: float) -> Triple:
    """Converts xyY to XYZ.  A vanishing y gives X = Z = 0."""
    if abs(y) < _XYY_BLACK_EPS:
        return 0.0, Y, 0.0
    factor = Y / y
    return x * factor, Y, (1.0 - x - y) * factor


# =============================================================================
# 3. BATCH TRANSFORMS
# =============================================================================

@handle_shapes
def srgb_to_xyz_array(rgb_array: ArrayFloat) -> ArrayFloat:
    """
    Converts gamma-encoded sRGB to XYZ for a batch of colors.

    No clipping is applied; out-of-range channels pass straight through the
    transfer function.

    Args:
        rgb_array: sRGB data, shape (N, 3) or (3,).

    Returns:
        XYZ coordinates (D65 relative), same shape as the input.
    """
    return np.dot(linearize_array(rgb_array), _M_SRGB_TO_XYZ_T)


@handle_shapes
def xyz_to_srgb_array(xyz_array: ArrayFloat) -> ArrayFloat:
    """
    Converts XYZ to gamma-encoded sRGB for a batch of colors.

    Args:
        xyz_array: XYZ data, shape (N, 3) or (3,).

    Returns:
        sRGB coordinates, same shape as the input.
    """
    return delinearize_array(np.dot(xyz_array, _M_XYZ_TO_SRGB_T))
