# -*- coding: utf-8 -*-
"""
Tonal: Perceptual color appearance for design systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Tristimulus and transfer-function primitives
============================================

Everything the appearance model consumes but does not own lives here:
ARGB packing, the sRGB transfer curve, sRGB <-> XYZ, and the L* <-> Y
lightness scale.  All functions are pure and operate on single colors.

Conventions:
    - Packed colors are 32-bit ARGB integers (0xAARRGGBB).  Every color
      produced by this module is fully opaque.
    - Linear RGB and XYZ are on the 0..100 scale (Y of white = 100).
    - L* is on the 0..100 scale.

The sRGB -> XYZ matrix is the HCT variant whose Y row is exactly the
Rec. 709 luminance weights (0.2126, 0.7152, 0.0722), so that the Y of a
linear RGB point is a plain dot product.  The inverse is its exact matrix
inverse, not the rounded IEC 61966-2-1 table.

References:
    - IEC 61966-2-1:1999 (sRGB Standard)
    - CIE 15:2004 "Colorimetry"
"""

import math
from typing import Final, Tuple, TypeAlias

import numpy as np
from numba import njit

__all__ = [
    # --- Type Aliases ---
    "Vec3",

    # --- Constants ---
    "WHITE_POINT_D65",
    "SRGB_TO_XYZ",
    "XYZ_TO_SRGB",
    "Y_FROM_LINRGB",
    "LAB_EPSILON",
    "LAB_KAPPA",

    # --- ARGB packing ---
    "argb_from_rgb",
    "alpha_from_argb",
    "red_from_argb",
    "green_from_argb",
    "blue_from_argb",
    "is_opaque",

    # --- Transfer functions ---
    "linearized",
    "delinearized",
    "true_delinearized",

    # --- Conversions ---
    "argb_from_linrgb",
    "xyz_from_argb",
    "argb_from_xyz",
    "lab_from_argb",
    "argb_from_lab",
    "y_from_lstar",
    "lstar_from_y",
    "lstar_from_argb",
    "argb_from_lstar",

    # --- Math helpers ---
    "signum",
    "lerp",
    "sanitize_degrees",
    "sanitize_degrees_int",
    "difference_degrees",
]

# --- Type Aliases ---
Vec3: TypeAlias = Tuple[float, float, float]

# =============================================================================
# 1. CONSTANTS
# =============================================================================

# D65 on the 0..100 scale.
WHITE_POINT_D65: Final[Vec3] = (95.047, 100.0, 108.883)

SRGB_TO_XYZ: Final[np.ndarray] = np.array([
    [0.41233895, 0.35762064, 0.18051042],
    [0.2126,     0.7152,     0.0722],
    [0.01932141, 0.11916382, 0.95034478],
], dtype=np.float64)

XYZ_TO_SRGB: Final[np.ndarray] = np.array([
    [ 3.2413774792388685, -1.5376652402851851, -0.49885366846268053],
    [-0.9691452513005321,  1.8758853451067872,  0.04156585616912061],
    [ 0.05562093689691305, -0.20395524564742123, 1.0571799111220335],
], dtype=np.float64)

Y_FROM_LINRGB: Final[np.ndarray] = SRGB_TO_XYZ[1].copy()

# CIE exact rational constants
LAB_EPSILON: Final[float] = 216.0 / 24389.0
LAB_KAPPA: Final[float] = 24389.0 / 27.0


# =============================================================================
# 2. MATH HELPERS
# =============================================================================

@njit(cache=True)
def signum(num: float) -> float:
    """Sign of ``num`` as -1.0, 0.0 or 1.0.  Callable from compiled kernels."""
    if num < 0.0:
        return -1.0
    if num == 0.0:
        return 0.0
    return 1.0


def lerp(start: float, stop: float, amount: float) -> float:
    return (1.0 - amount) * start + amount * stop


def sanitize_degrees(degrees: float) -> float:
    """Wrap an angle into [0, 360)."""
    degrees = degrees % 360.0
    if degrees < 0:
        degrees += 360.0
    # -1e-20 % 360.0 rounds to 360.0
    if degrees >= 360.0:
        degrees -= 360.0
    return degrees


def sanitize_degrees_int(degrees: int) -> int:
    return degrees % 360


def difference_degrees(a: float, b: float) -> float:
    """Shortest angular distance between two hues, in [0, 180]."""
    return 180.0 - abs(abs(a - b) - 180.0)


# =============================================================================
# 3. ARGB PACKING
# =============================================================================

def argb_from_rgb(red: int, green: int, blue: int) -> int:
    """Pack 8-bit channels into an opaque ARGB integer."""
    return (255 << 24) | ((red & 255) << 16) | ((green & 255) << 8) | (blue & 255)


def alpha_from_argb(argb: int) -> int:
    return (argb >> 24) & 255


def red_from_argb(argb: int) -> int:
    return (argb >> 16) & 255


def green_from_argb(argb: int) -> int:
    return (argb >> 8) & 255


def blue_from_argb(argb: int) -> int:
    return argb & 255


def is_opaque(argb: int) -> bool:
    return alpha_from_argb(argb) == 255


# =============================================================================
# 4. TRANSFER FUNCTIONS
# =============================================================================

def linearized(rgb_component: int) -> float:
    """
    Applies the sRGB EOTF to one 8-bit channel.

    Args:
        rgb_component: Channel value in 0..255.

    Returns:
        Linear channel value in 0..100.
    """
    normalized = rgb_component / 255.0
    if normalized <= 0.040449936:
        return normalized / 12.92 * 100.0
    return math.pow((normalized + 0.055) / 1.055, 2.4) * 100.0


@njit(cache=True)
def true_delinearized(rgb_component: float) -> float:
    """
    Applies the sRGB OETF without rounding or clamping.

    Args:
        rgb_component: Linear channel value in 0..100.

    Returns:
        Gamma-encoded channel value on the 0..255 scale, unrounded.
    """
    normalized = rgb_component / 100.0
    if normalized <= 0.0031308:
        delinearized = normalized * 12.92
    else:
        delinearized = 1.055 * normalized ** (1.0 / 2.4) - 0.055
    return delinearized * 255.0


def delinearized(rgb_component: float) -> int:
    """
    Applies the sRGB OETF and quantizes to an 8-bit channel.

    Halves round away from zero; out-of-gamut values clamp to 0..255.
    """
    value = math.floor(true_delinearized(rgb_component) + 0.5)
    return min(255, max(0, int(value)))


# =============================================================================
# 5. COLOR SPACE CONVERSIONS
# =============================================================================

def argb_from_linrgb(linrgb: Vec3) -> int:
    """Quantize a linear RGB point (0..100 per channel) to opaque ARGB."""
    r = delinearized(linrgb[0])
    g = delinearized(linrgb[1])
    b = delinearized(linrgb[2])
    return argb_from_rgb(r, g, b)


def xyz_from_argb(argb: int) -> Vec3:
    """Converts a packed color to XYZ (0..100 scale)."""
    linrgb = np.array([
        linearized(red_from_argb(argb)),
        linearized(green_from_argb(argb)),
        linearized(blue_from_argb(argb)),
    ], dtype=np.float64)
    x, y, z = (SRGB_TO_XYZ @ linrgb).tolist()
    return x, y, z


def argb_from_xyz(x: float, y: float, z: float) -> int:
    """Converts XYZ (0..100 scale) to a packed color, clipping to gamut."""
    r, g, b = (XYZ_TO_SRGB @ np.array([x, y, z], dtype=np.float64)).tolist()
    return argb_from_linrgb((r, g, b))


def _lab_f(t: float) -> float:
    if t > LAB_EPSILON:
        return math.pow(t, 1.0 / 3.0)
    return (LAB_KAPPA * t + 16.0) / 116.0


def _lab_invf(ft: float) -> float:
    ft3 = ft * ft * ft
    if ft3 > LAB_EPSILON:
        return ft3
    return (116.0 * ft - 16.0) / LAB_KAPPA


def lab_from_argb(argb: int) -> Vec3:
    """Converts a packed color to CIELAB under D65."""
    x, y, z = xyz_from_argb(argb)
    fx = _lab_f(x / WHITE_POINT_D65[0])
    fy = _lab_f(y / WHITE_POINT_D65[1])
    fz = _lab_f(z / WHITE_POINT_D65[2])
    return 116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz)


def argb_from_lab(l: float, a: float, b: float) -> int:
    """Converts CIELAB under D65 to a packed color, clipping to gamut."""
    fy = (l + 16.0) / 116.0
    fx = a / 500.0 + fy
    fz = fy - b / 200.0
    return argb_from_xyz(
        _lab_invf(fx) * WHITE_POINT_D65[0],
        _lab_invf(fy) * WHITE_POINT_D65[1],
        _lab_invf(fz) * WHITE_POINT_D65[2],
    )


def y_from_lstar(lstar: float) -> float:
    """
    Converts L* to relative luminance Y.

    L* is perceptually uniform; Y is linear in light energy.  Both measure
    the same quantity.

    Args:
        lstar: L* in 0..100.

    Returns:
        Y in 0..100.
    """
    return 100.0 * _lab_invf((lstar + 16.0) / 116.0)


def lstar_from_y(y: float) -> float:
    """Converts relative luminance Y (0..100) to L* (0..100)."""
    return _lab_f(y / 100.0) * 116.0 - 16.0


def lstar_from_argb(argb: int) -> float:
    return lstar_from_y(xyz_from_argb(argb)[1])


def argb_from_lstar(lstar: float) -> int:
    """Neutral gray whose L* is ``lstar``."""
    component = delinearized(y_from_lstar(lstar))
    return argb_from_rgb(component, component, component)
