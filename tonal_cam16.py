# -*- coding: utf-8 -*-
"""
Tonal: Perceptual color appearance for design systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

CAM16 color appearance model
============================

Forward transform (XYZ + viewing conditions -> appearance attributes):
    1.  CAT16: XYZ -> cone-like RGB, scaled per channel by the degree of
        adaptation D baked into ViewingConditions.rgb_d.
    2.  Post-adaptation compression  R'a = 400·(F_L·|R|/100)^0.42 / (... + 27.13).
    3.  Opponent channels a, b;  h = atan2(b, a) wrapped into [0, 360).
    4.  Eccentricity e_t = ¼·(cos(h' + 2) + 3.8), h' = h + 360 below 20.14°.
    5.  Achromatic response A = (2R'a + G'a + B'a/20)·N_bb.
    6.  Lightness  J = 100·(A / A_w)^(c·z).
    7.  Brightness Q = (4/c)·√(J/100)·(A_w + 4)·F_L^¼.
    8.  Chroma     C = t^0.9·√(J/100)·(1.64 − 0.29^n)^0.73.
    9.  Colorfulness M = C·F_L^¼.
    10. Saturation s = 100·√(M/Q), evaluated in a form that stays finite
        when Q = 0.
    11. CAM16-UCS  J* = 1.7·J/(1 + 0.007·J),  M* = ln(1 + 0.0228·M)/0.0228,
        (a*, b*) = M*·(cos h, sin h).

The inverse (J, C, h -> XYZ) runs the same chain backwards and is what
translates an appearance into different viewing conditions.

References:
    - Li, C. et al. (2017). "Comprehensive color solutions: CAM16, CAT16,
      and CAM16-UCS". Color Res. Appl. 42(6), 703-718.
    - CIE 159:2004 (CIECAM02 hue quadrature table).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final, Optional

import numpy as np
from numba import njit

from tonal_colorutils import Vec3, argb_from_xyz, signum, xyz_from_argb
from tonal_viewing import M16, M16_INV, ViewingConditions

__all__ = [
    "Cam16",
    "xyz_in_viewing_conditions",
]

# =============================================================================
# 1. CONSTANTS
# =============================================================================

# Unique hues (red, yellow, green, blue, red + 360) with their eccentricities
# and hue-quadrature anchors.
_UNIQUE_HUES: Final[np.ndarray] = np.array([20.14, 90.0, 164.25, 237.53, 380.14])
_UNIQUE_ECCENTRICITIES: Final[np.ndarray] = np.array([0.8, 0.7, 1.0, 1.2, 0.8])
_UNIQUE_QUADRATURES: Final[np.ndarray] = np.array([0.0, 100.0, 200.0, 300.0, 400.0])


# =============================================================================
# 2. KERNELS (Numba)
# =============================================================================

@njit(cache=True)
def _forward_kernel(
    x: float, y: float, z: float,
    n: float, aw: float, nbb: float, ncb: float, c: float, nc: float,
    rgb_d_r: float, rgb_d_g: float, rgb_d_b: float,
    fl: float, fl_root: float, base_z: float,
):
    """XYZ -> (hue, chroma, J, Q, M, s, J*, a*, b*)."""
    # CAT16 and discounting
    r_d = rgb_d_r * (M16[0, 0] * x + M16[0, 1] * y + M16[0, 2] * z)
    g_d = rgb_d_g * (M16[1, 0] * x + M16[1, 1] * y + M16[1, 2] * z)
    b_d = rgb_d_b * (M16[2, 0] * x + M16[2, 1] * y + M16[2, 2] * z)

    # Post-adaptation nonlinear compression
    r_af = (fl * abs(r_d) / 100.0) ** 0.42
    g_af = (fl * abs(g_d) / 100.0) ** 0.42
    b_af = (fl * abs(b_d) / 100.0) ** 0.42
    r_a = signum(r_d) * 400.0 * r_af / (r_af + 27.13)
    g_a = signum(g_d) * 400.0 * g_af / (g_af + 27.13)
    b_a = signum(b_d) * 400.0 * b_af / (b_af + 27.13)

    # Redness-greenness, yellowness-blueness
    a = (11.0 * r_a + -12.0 * g_a + b_a) / 11.0
    b = (r_a + g_a - 2.0 * b_a) / 9.0

    u = (20.0 * r_a + 20.0 * g_a + 21.0 * b_a) / 20.0
    p2 = (40.0 * r_a + 20.0 * g_a + b_a) / 20.0

    atan_degrees = math.atan2(b, a) * 180.0 / math.pi
    if atan_degrees < 0.0:
        hue = atan_degrees + 360.0
    elif atan_degrees >= 360.0:
        hue = atan_degrees - 360.0
    else:
        hue = atan_degrees
    hue_radians = hue * math.pi / 180.0

    ac = p2 * nbb
    j = 100.0 * (ac / aw) ** (c * base_z)
    q = 4.0 / c * math.sqrt(j / 100.0) * (aw + 4.0) * fl_root

    hue_prime = hue + 360.0 if hue < 20.14 else hue
    e_hue = 0.25 * (math.cos(hue_prime * math.pi / 180.0 + 2.0) + 3.8)
    p1 = 50000.0 / 13.0 * e_hue * nc * ncb
    t = p1 * math.sqrt(a * a + b * b) / (u + 0.305)
    alpha = t ** 0.9 * (1.64 - 0.29 ** n) ** 0.73

    chroma = alpha * math.sqrt(j / 100.0)
    m = chroma * fl_root
    s = 50.0 * math.sqrt(alpha * c / (aw + 4.0))

    jstar = (1.0 + 100.0 * 0.007) * j / (1.0 + 0.007 * j)
    mstar = 1.0 / 0.0228 * math.log(1.0 + 0.0228 * m)
    astar = mstar * math.cos(hue_radians)
    bstar = mstar * math.sin(hue_radians)
    return hue, chroma, j, q, m, s, jstar, astar, bstar


@njit(cache=True)
def _inverse_kernel(
    j: float, chroma: float, hue: float,
    n: float, aw: float, nbb: float, ncb: float, c: float, nc: float,
    rgb_d_r: float, rgb_d_g: float, rgb_d_b: float,
    fl: float, fl_root: float, base_z: float,
):
    """(J, C, h) -> XYZ under the given coefficients."""
    if chroma == 0.0 or j == 0.0:
        alpha = 0.0
    else:
        alpha = chroma / math.sqrt(j / 100.0)
    t = (alpha / (1.64 - 0.29 ** n) ** 0.73) ** (1.0 / 0.9)
    h_rad = hue * math.pi / 180.0

    e_hue = 0.25 * (math.cos(h_rad + 2.0) + 3.8)
    ac = aw * (j / 100.0) ** (1.0 / c / base_z)
    p1 = e_hue * (50000.0 / 13.0) * nc * ncb
    p2 = ac / nbb

    h_sin = math.sin(h_rad)
    h_cos = math.cos(h_rad)

    gamma = 23.0 * (p2 + 0.305) * t / (23.0 * p1 + 11.0 * t * h_cos + 108.0 * t * h_sin)
    a = gamma * h_cos
    b = gamma * h_sin
    r_a = (460.0 * p2 + 451.0 * a + 288.0 * b) / 1403.0
    g_a = (460.0 * p2 - 891.0 * a - 261.0 * b) / 1403.0
    b_a = (460.0 * p2 - 220.0 * a - 6300.0 * b) / 1403.0

    r_c_base = max(0.0, 27.13 * abs(r_a) / (400.0 - abs(r_a)))
    g_c_base = max(0.0, 27.13 * abs(g_a) / (400.0 - abs(g_a)))
    b_c_base = max(0.0, 27.13 * abs(b_a) / (400.0 - abs(b_a)))
    r_c = signum(r_a) * (100.0 / fl) * r_c_base ** (1.0 / 0.42)
    g_c = signum(g_a) * (100.0 / fl) * g_c_base ** (1.0 / 0.42)
    b_c = signum(b_a) * (100.0 / fl) * b_c_base ** (1.0 / 0.42)

    r_f = r_c / rgb_d_r
    g_f = g_c / rgb_d_g
    b_f = b_c / rgb_d_b

    x = M16_INV[0, 0] * r_f + M16_INV[0, 1] * g_f + M16_INV[0, 2] * b_f
    y = M16_INV[1, 0] * r_f + M16_INV[1, 1] * g_f + M16_INV[1, 2] * b_f
    z = M16_INV[2, 0] * r_f + M16_INV[2, 1] * g_f + M16_INV[2, 2] * b_f
    return x, y, z


# =============================================================================
# 3. CAM16 ATTRIBUTES
# =============================================================================

@dataclass(frozen=True, slots=True)
class Cam16:
    """
    Full CAM16 attribute set of one color under one set of viewing
    conditions.

    All attributes are derived jointly; construct through :meth:`from_xyz`,
    :meth:`from_argb`, :meth:`from_jch` or :meth:`from_ucs` rather than by
    hand.

    Attributes:
        hue: Hue angle in degrees, [0, 360).
        chroma: Informally colorfulness relative to white; like HSL
            saturation but perceptually accurate.
        j: Lightness.
        q: Brightness; lightness scaled by the white point's brightness.
        m: Colorfulness.
        s: Saturation; colorfulness relative to brightness.
        jstar, astar, bstar: CAM16-UCS coordinates.  Euclidean distance
            in this space approximates perceived color difference.
    """
    hue: float
    chroma: float
    j: float
    q: float
    m: float
    s: float
    jstar: float
    astar: float
    bstar: float

    @classmethod
    def from_xyz(
        cls, x: float, y: float, z: float,
        viewing_conditions: Optional[ViewingConditions] = None,
    ) -> Cam16:
        """
        Runs the forward CAM16 transform.

        Args:
            x, y, z: XYZ tristimulus values on the 0..100 scale.
            viewing_conditions: Environment of observation; defaults to
                ``ViewingConditions.DEFAULT``.
        """
        vc = viewing_conditions or ViewingConditions.DEFAULT
        return cls(*_forward_kernel(float(x), float(y), float(z), *vc.coefficients()))

    @classmethod
    def from_argb(
        cls, argb: int, viewing_conditions: Optional[ViewingConditions] = None
    ) -> Cam16:
        return cls.from_xyz(*xyz_from_argb(argb), viewing_conditions)

    @classmethod
    def from_jch(
        cls, j: float, c: float, h: float,
        viewing_conditions: Optional[ViewingConditions] = None,
    ) -> Cam16:
        """Builds the attribute set from lightness, chroma and hue."""
        vc = viewing_conditions or ViewingConditions.DEFAULT
        q = 4.0 / vc.c * math.sqrt(j / 100.0) * (vc.aw + 4.0) * vc.fl_root
        m = c * vc.fl_root
        alpha = c / math.sqrt(j / 100.0) if j != 0.0 else 0.0
        s = 50.0 * math.sqrt(alpha * vc.c / (vc.aw + 4.0))

        hue_radians = h * math.pi / 180.0
        jstar = (1.0 + 100.0 * 0.007) * j / (1.0 + 0.007 * j)
        mstar = 1.0 / 0.0228 * math.log(1.0 + 0.0228 * m)
        astar = mstar * math.cos(hue_radians)
        bstar = mstar * math.sin(hue_radians)
        return cls(h, c, j, q, m, s, jstar, astar, bstar)

    @classmethod
    def from_ucs(
        cls, jstar: float, astar: float, bstar: float,
        viewing_conditions: Optional[ViewingConditions] = None,
    ) -> Cam16:
        """Builds the attribute set from CAM16-UCS coordinates."""
        vc = viewing_conditions or ViewingConditions.DEFAULT
        mstar = math.hypot(astar, bstar)
        m = (math.exp(mstar * 0.0228) - 1.0) / 0.0228
        c = m / vc.fl_root
        h = math.atan2(bstar, astar) * (180.0 / math.pi)
        if h < 0.0:
            h += 360.0
        j = jstar / (1.0 - (jstar - 100.0) * 0.007)
        return cls.from_jch(j, c, h, vc)

    def distance(self, other: Cam16) -> float:
        """
        Perceived color difference, ΔE' = 1.41·ΔE^0.63 over the CAM16-UCS
        coordinates.
        """
        d_j = self.jstar - other.jstar
        d_a = self.astar - other.astar
        d_b = self.bstar - other.bstar
        d_e_prime = math.sqrt(d_j * d_j + d_a * d_a + d_b * d_b)
        return 1.41 * math.pow(d_e_prime, 0.63)

    @property
    def hue_quadrature(self) -> float:
        """
        Hue quadrature H in [0, 400): 0 red, 100 yellow, 200 green,
        300 blue, interpolated through the unique-hue table.
        """
        hue_prime = self.hue + 360.0 if self.hue < _UNIQUE_HUES[0] else self.hue
        i = int(np.searchsorted(_UNIQUE_HUES, hue_prime, side="right")) - 1
        i = min(max(i, 0), 3)
        lo = (hue_prime - _UNIQUE_HUES[i]) / _UNIQUE_ECCENTRICITIES[i]
        hi = (_UNIQUE_HUES[i + 1] - hue_prime) / _UNIQUE_ECCENTRICITIES[i + 1]
        return float(_UNIQUE_QUADRATURES[i] + 100.0 * lo / (lo + hi))

    def xyz_in_viewing_conditions(self, viewing_conditions: ViewingConditions) -> Vec3:
        """XYZ this appearance would need under ``viewing_conditions``."""
        return xyz_in_viewing_conditions(self, viewing_conditions)

    def to_argb(self, viewing_conditions: Optional[ViewingConditions] = None) -> int:
        """
        Packed color of this appearance when viewed under
        ``viewing_conditions`` (default: standard), clipped to sRGB.
        """
        vc = viewing_conditions or ViewingConditions.DEFAULT
        return argb_from_xyz(*xyz_in_viewing_conditions(self, vc))


# =============================================================================
# 4. VIEWING-CONDITIONS TRANSLATION
# =============================================================================

def xyz_in_viewing_conditions(cam: Cam16, viewing_conditions: ViewingConditions) -> Vec3:
    """
    Inverts the CAM16 transform under ``viewing_conditions``.

    Hue, chroma and J of ``cam`` are held fixed; the result is the XYZ a
    stimulus needs for that appearance in the target environment.

    Args:
        cam: Appearance attributes (any viewing conditions).
        viewing_conditions: Target environment.

    Returns:
        (X, Y, Z) on the 0..100 scale.
    """
    x, y, z = _inverse_kernel(
        float(cam.j), float(cam.chroma), float(cam.hue),
        *viewing_conditions.coefficients(),
    )
    return x, y, z
