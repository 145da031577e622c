# -*- coding: utf-8 -*-
"""
Tonal: Perceptual color appearance for design systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Gamut-constrained HCT -> sRGB solver
====================================

Geometry:
    Tone fixes L*, and L* is a monotonic function of relative luminance Y.
    In linear RGB, Y = 0.2126·R + 0.7152·G + 0.0722·B, so every color of a
    given tone lies on one plane.  That plane cuts the RGB cube in a convex
    polygon whose boundary holds the most chromatic color of every hue.

Algorithm (per request):
    1.  Fast paths: tone at either end of the scale or zero chroma give a
        neutral gray; no search.
    2.  In-gamut solve: walk CAM16 J along the requested hue and chroma,
        inverting the model to linear RGB, with a fixed five rounds of
        Newton's method on Y(J).  Success means the requested chroma is
        reachable and the result carries the requested hue exactly.
    3.  Boundary solve: otherwise, intersect the 12 cube edges with the
        constant-Y plane, pick the two intersections whose hues bracket the
        target hue, and bisect each RGB axis over the 8-bit "critical
        planes" (midpoints between adjacent channel codes) with at most
        8 steps per axis.  The midpoint of the final bracket is the maximum
        chroma color; the requested chroma is clamped to it.

All iteration counts are fixed, so the cost of a solve is bounded and
independent of convergence.
"""

import math
from typing import Final, Tuple

import numpy as np
from numba import njit

from tonal_cam16 import Cam16
from tonal_colorutils import (
    SRGB_TO_XYZ,
    Y_FROM_LINRGB,
    argb_from_linrgb,
    argb_from_lstar,
    linearized,
    sanitize_degrees,
    signum,
    true_delinearized,
    y_from_lstar,
)
from tonal_viewing import M16, ViewingConditions

__all__ = [
    "SCALED_DISCOUNT_FROM_LINRGB",
    "LINRGB_FROM_SCALED_DISCOUNT",
    "CRITICAL_PLANES",
    "solve_to_argb",
    "solve_to_cam",
    "max_chroma_argb",
    "boundary_linrgb",
]

# =============================================================================
# 1. PRECOMPUTED TABLES (standard viewing conditions)
# =============================================================================

_VC: Final[ViewingConditions] = ViewingConditions.DEFAULT

# Linear RGB (0..100) -> F_L-scaled, discounted cone responses.  Composes
# sRGB -> XYZ, CAT16 and the degree-of-adaptation gains of the standard
# conditions into a single matrix.
SCALED_DISCOUNT_FROM_LINRGB: Final[np.ndarray] = (
    (_VC.fl / 100.0) * (np.diag(_VC.rgb_d) @ M16 @ SRGB_TO_XYZ)
)
LINRGB_FROM_SCALED_DISCOUNT: Final[np.ndarray] = np.linalg.inv(SCALED_DISCOUNT_FROM_LINRGB)

# Linear values at which a channel's 8-bit code changes (i + 0.5).
CRITICAL_PLANES: Final[np.ndarray] = np.array(
    [linearized(i + 0.5) for i in range(255)], dtype=np.float64
)

_K_R: Final[float] = float(Y_FROM_LINRGB[0])
_K_G: Final[float] = float(Y_FROM_LINRGB[1])
_K_B: Final[float] = float(Y_FROM_LINRGB[2])

_N: Final[float] = _VC.n
_AW: Final[float] = _VC.aw
_NBB: Final[float] = _VC.nbb
_NCB: Final[float] = _VC.ncb
_C: Final[float] = _VC.c
_NC: Final[float] = _VC.nc
_Z: Final[float] = _VC.z

_NEWTON_ROUNDS: Final[int] = 5
_PLANE_BISECTION_STEPS: Final[int] = 8
_Y_TOLERANCE: Final[float] = 0.002


# =============================================================================
# 2. KERNELS (Numba)
# =============================================================================

@njit(cache=True)
def _sanitize_radians(angle: float) -> float:
    return (angle + math.pi * 8.0) % (math.pi * 2.0)


@njit(cache=True)
def _chromatic_adaptation(component: float) -> float:
    af = abs(component) ** 0.42
    return signum(component) * 400.0 * af / (af + 27.13)


@njit(cache=True)
def _inverse_chromatic_adaptation(adapted: float) -> float:
    adapted_abs = abs(adapted)
    base = max(0.0, 27.13 * adapted_abs / (400.0 - adapted_abs))
    return signum(adapted) * base ** (1.0 / 0.42)


@njit(cache=True)
def _hue_of(linrgb):
    """CAM16 hue of a linear RGB point, in radians (-π, π]."""
    m = SCALED_DISCOUNT_FROM_LINRGB
    r_a = _chromatic_adaptation(m[0, 0] * linrgb[0] + m[0, 1] * linrgb[1] + m[0, 2] * linrgb[2])
    g_a = _chromatic_adaptation(m[1, 0] * linrgb[0] + m[1, 1] * linrgb[1] + m[1, 2] * linrgb[2])
    b_a = _chromatic_adaptation(m[2, 0] * linrgb[0] + m[2, 1] * linrgb[1] + m[2, 2] * linrgb[2])
    # redness-greenness
    a = (11.0 * r_a + -12.0 * g_a + b_a) / 11.0
    # yellowness-blueness
    b = (r_a + g_a - 2.0 * b_a) / 9.0
    return math.atan2(b, a)


@njit(cache=True)
def _are_in_cyclic_order(a: float, b: float, c: float) -> bool:
    """True when walking counter-clockwise from a reaches b before c."""
    return _sanitize_radians(b - a) < _sanitize_radians(c - a)


@njit(cache=True)
def _set_coordinate(source, coordinate: float, target, axis: int):
    """Point on segment source->target whose ``axis`` equals ``coordinate``."""
    t = (coordinate - source[axis]) / (target[axis] - source[axis])
    return (
        source[0] + (target[0] - source[0]) * t,
        source[1] + (target[1] - source[1]) * t,
        source[2] + (target[2] - source[2]) * t,
    )


@njit(cache=True)
def _is_bounded(x: float) -> bool:
    return 0.0 <= x <= 100.0


@njit(cache=True)
def _nth_vertex(y: float, n: int):
    """
    Intersection of the n-th cube edge (0 <= n < 12) with the plane of
    luminance ``y``, or the sentinel if that edge misses the plane.

    Edges 0-3 run along R, 4-7 along G, 8-11 along B; the other two
    coordinates sit at 0 or 100.
    """
    coord_a = 0.0 if n % 4 <= 1 else 100.0
    coord_b = 0.0 if n % 2 == 0 else 100.0
    if n < 4:
        g = coord_a
        b = coord_b
        r = (y - g * _K_G - b * _K_B) / _K_R
        if _is_bounded(r):
            return (r, g, b)
        return (-1.0, -1.0, -1.0)
    elif n < 8:
        b = coord_a
        r = coord_b
        g = (y - r * _K_R - b * _K_B) / _K_G
        if _is_bounded(g):
            return (r, g, b)
        return (-1.0, -1.0, -1.0)
    else:
        r = coord_a
        g = coord_b
        b = (y - r * _K_R - g * _K_G) / _K_B
        if _is_bounded(b):
            return (r, g, b)
        return (-1.0, -1.0, -1.0)


@njit(cache=True)
def _bisect_to_segment(y: float, target_hue: float):
    """
    Finds the polygon edge whose endpoint hues bracket ``target_hue``.

    Walks the plane/cube intersections, keeping the tightest bracket
    [left, right] in cyclic hue order around the target.
    """
    left = (-1.0, -1.0, -1.0)
    right = left
    left_hue = 0.0
    right_hue = 0.0
    initialized = False
    uncut = True
    for n in range(12):
        mid = _nth_vertex(y, n)
        if mid[0] < 0.0:
            continue
        mid_hue = _hue_of(mid)
        if not initialized:
            left = mid
            right = mid
            left_hue = mid_hue
            right_hue = mid_hue
            initialized = True
            continue
        if uncut or _are_in_cyclic_order(left_hue, mid_hue, right_hue):
            uncut = False
            if _are_in_cyclic_order(left_hue, target_hue, mid_hue):
                right = mid
                right_hue = mid_hue
            else:
                left = mid
                left_hue = mid_hue
    return left, right


@njit(cache=True)
def _critical_plane_below(x: float) -> int:
    return int(math.floor(x - 0.5))


@njit(cache=True)
def _critical_plane_above(x: float) -> int:
    return int(math.ceil(x - 0.5))


@njit(cache=True)
def _bisect_to_limit(y: float, target_hue: float):
    """Maximum-chroma linear RGB point of luminance ``y`` at ``target_hue``."""
    left, right = _bisect_to_segment(y, target_hue)
    left_hue = _hue_of(left)
    for axis in range(3):
        if left[axis] != right[axis]:
            if left[axis] < right[axis]:
                l_plane = _critical_plane_below(true_delinearized(left[axis]))
                r_plane = _critical_plane_above(true_delinearized(right[axis]))
            else:
                l_plane = _critical_plane_above(true_delinearized(left[axis]))
                r_plane = _critical_plane_below(true_delinearized(right[axis]))
            for _ in range(_PLANE_BISECTION_STEPS):
                if abs(r_plane - l_plane) <= 1:
                    break
                m_plane = (l_plane + r_plane) // 2
                mid = _set_coordinate(left, CRITICAL_PLANES[m_plane], right, axis)
                mid_hue = _hue_of(mid)
                if _are_in_cyclic_order(left_hue, target_hue, mid_hue):
                    right = mid
                    r_plane = m_plane
                else:
                    left = mid
                    left_hue = mid_hue
                    l_plane = m_plane
    return (
        (left[0] + right[0]) / 2.0,
        (left[1] + right[1]) / 2.0,
        (left[2] + right[2]) / 2.0,
    )


@njit(cache=True)
def _find_result_by_j(hue_radians: float, chroma: float, y: float):
    """
    Linear RGB of (hue, chroma) at luminance ``y``, or the sentinel when
    that color is outside the cube.

    Newton iteration on J, approximating fn'(j) by 2·fn(j)/j.
    """
    j = math.sqrt(y) * 11.0
    t_inner_coeff = 1.0 / (1.64 - 0.29 ** _N) ** 0.73
    e_hue = 0.25 * (math.cos(hue_radians + 2.0) + 3.8)
    p1 = e_hue * (50000.0 / 13.0) * _NC * _NCB
    h_sin = math.sin(hue_radians)
    h_cos = math.cos(hue_radians)
    m = LINRGB_FROM_SCALED_DISCOUNT
    for iteration_round in range(_NEWTON_ROUNDS):
        j_normalized = j / 100.0
        if chroma == 0.0 or j == 0.0:
            alpha = 0.0
        else:
            alpha = chroma / math.sqrt(j_normalized)
        t = (alpha * t_inner_coeff) ** (1.0 / 0.9)
        ac = _AW * j_normalized ** (1.0 / _C / _Z)
        p2 = ac / _NBB
        gamma = 23.0 * (p2 + 0.305) * t / (23.0 * p1 + 11.0 * t * h_cos + 108.0 * t * h_sin)
        a = gamma * h_cos
        b = gamma * h_sin
        r_a = (460.0 * p2 + 451.0 * a + 288.0 * b) / 1403.0
        g_a = (460.0 * p2 - 891.0 * a - 261.0 * b) / 1403.0
        b_a = (460.0 * p2 - 220.0 * a - 6300.0 * b) / 1403.0
        r_cs = _inverse_chromatic_adaptation(r_a)
        g_cs = _inverse_chromatic_adaptation(g_a)
        b_cs = _inverse_chromatic_adaptation(b_a)
        red = m[0, 0] * r_cs + m[0, 1] * g_cs + m[0, 2] * b_cs
        green = m[1, 0] * r_cs + m[1, 1] * g_cs + m[1, 2] * b_cs
        blue = m[2, 0] * r_cs + m[2, 1] * g_cs + m[2, 2] * b_cs

        if red < 0.0 or green < 0.0 or blue < 0.0:
            return (-1.0, -1.0, -1.0)
        fnj = _K_R * red + _K_G * green + _K_B * blue
        if fnj <= 0.0:
            return (-1.0, -1.0, -1.0)
        if iteration_round == _NEWTON_ROUNDS - 1 or abs(fnj - y) < _Y_TOLERANCE:
            if red > 100.01 or green > 100.01 or blue > 100.01:
                return (-1.0, -1.0, -1.0)
            return (red, green, blue)
        j = j - (fnj - y) * j / (2.0 * fnj)
    return (-1.0, -1.0, -1.0)


# =============================================================================
# 3. PUBLIC API
# =============================================================================

def _is_neutral_request(chroma: float, lstar: float) -> bool:
    return chroma < 0.0001 or lstar < 0.0001 or lstar > 99.9999


def _hue_radians(hue_degrees: float) -> float:
    return sanitize_degrees(hue_degrees) / 180.0 * math.pi


def solve_to_argb(hue_degrees: float, chroma: float, lstar: float) -> int:
    """
    Finds the sRGB color with the given hue, chroma and L*, if possible.

    Args:
        hue_degrees: CAM16 hue in degrees; any real value, wrapped.
        chroma: CAM16 chroma.  Clamped to the maximum reachable at this
            hue and tone when out of gamut.
        lstar: L* tone.  <= 0 gives black, >= 100 gives white.

    Returns:
        Opaque ARGB integer.  Hue and L* match the request (up to 8-bit
        quantization); chroma matches or is the largest reachable.
    """
    if _is_neutral_request(chroma, lstar):
        return argb_from_lstar(lstar)
    hue_radians = _hue_radians(hue_degrees)
    y = y_from_lstar(lstar)
    exact = _find_result_by_j(hue_radians, float(chroma), y)
    if exact[0] >= 0.0:
        return argb_from_linrgb(exact)
    return argb_from_linrgb(_bisect_to_limit(y, hue_radians))


def solve_to_cam(hue_degrees: float, chroma: float, lstar: float) -> Cam16:
    """CAM16 attributes of :func:`solve_to_argb`'s result."""
    return Cam16.from_argb(solve_to_argb(hue_degrees, chroma, lstar))


def max_chroma_argb(hue_degrees: float, lstar: float) -> int:
    """
    The most chromatic sRGB color at this hue and tone.

    This is the color any out-of-gamut chroma request resolves to.
    """
    if lstar < 0.0001 or lstar > 99.9999:
        return argb_from_lstar(lstar)
    y = y_from_lstar(lstar)
    return argb_from_linrgb(_bisect_to_limit(y, _hue_radians(hue_degrees)))


def boundary_linrgb(hue_degrees: float, lstar: float) -> Tuple[float, float, float]:
    """Unquantized linear RGB (0..100) of :func:`max_chroma_argb`."""
    y = y_from_lstar(lstar)
    r, g, b = _bisect_to_limit(y, _hue_radians(hue_degrees))
    return r, g, b
