# -*- coding: utf-8 -*-
"""
Tonal: Perceptual color appearance for design systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

CAM16 viewing conditions
========================

In traditional color spaces a color is identified solely by the observer's
measurement of it.  Color appearance models such as CAM16 also take the
environment where the color was observed into account: the viewing
conditions.  White under a midday-sun white point, for instance, is
measured by CAM16 as a slightly chromatic blue (roughly hue 209, chroma 3).

ViewingConditions caches every intermediate of the CAM16 transform that
depends only on the environment.  Field names are the shorthand used in the
CAM16 literature (Li et al. 2017; Fairchild, Color Appearance Models):

    n        background luminance factor  Yb / Yw
    aw       achromatic response of the white point
    nbb/ncb  background and chromatic induction factors
    c        impact of surround (exponent of J)
    nc       chromatic induction factor of the surround
    rgb_d    per-channel degree-of-adaptation gains
    fl       luminance-level adaptation factor, fl_root = fl ** 0.25
    z        base exponent nonlinearity

References:
    - Li, C. et al. (2017). "Comprehensive color solutions: CAM16, CAT16,
      and CAM16-UCS". Color Res. Appl. 42(6), 703-718.
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Final, Mapping, Tuple, Union

import numpy as np

from tonal_colorutils import WHITE_POINT_D65, Vec3, lerp, y_from_lstar

__all__ = [
    "M16",
    "M16_INV",
    "SURROUND_FACTORS",
    "ViewingConditions",
]

# =============================================================================
# 1. CONSTANTS
# =============================================================================

# CAT16 chromatic adaptation matrix, XYZ -> cone-like RGB.
M16: Final[np.ndarray] = np.array([
    [ 0.401288, 0.650173, -0.051461],
    [-0.250268, 1.204414,  0.045854],
    [-0.002079, 0.048952,  0.953127],
], dtype=np.float64)

M16_INV: Final[np.ndarray] = np.array([
    [ 1.86206786, -1.01125463,  0.14918677],
    [ 0.38752654,  0.62144744, -0.00897398],
    [-0.01584150, -0.03412294,  1.04996444],
], dtype=np.float64)

# Surround descriptions on the 0..2 scale consumed by make().
SURROUND_FACTORS: Final[Dict[str, float]] = {
    "dark": 0.0,
    "dim": 1.0,
    "average": 2.0,
}

# A pure black background is non-physical and drives n to zero.
_MIN_BACKGROUND_LSTAR: Final[float] = 0.1

_CONFIG_ALIASES: Final[Dict[str, str]] = {
    "white_point": "white_point",
    "whitePoint": "white_point",
    "adapting_luminance": "adapting_luminance",
    "adaptingLuminance": "adapting_luminance",
    "background_lstar": "background_lstar",
    "backgroundLstar": "background_lstar",
    "surround": "surround",
    "discount_illuminant": "discount_illuminant",
    "discountIlluminant": "discount_illuminant",
}


def _default_adapting_luminance() -> float:
    # 200 lux, expressed as the luminance of a mid-gray (L* 50) surface.
    return 200.0 / math.pi * y_from_lstar(50.0) / 100.0


def _resolve_surround(surround: Union[float, str]) -> float:
    if isinstance(surround, str):
        try:
            return SURROUND_FACTORS[surround.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown surround '{surround}'; expected one of "
                f"{sorted(SURROUND_FACTORS)} or a number in [0, 2]."
            ) from None
    value = float(surround)
    if not 0.0 <= value <= 2.0:
        raise ValueError(f"surround must be in [0, 2], got {surround}")
    return value


# =============================================================================
# 2. VIEWING CONDITIONS
# =============================================================================

@dataclass(frozen=True, slots=True)
class ViewingConditions:
    """
    Immutable description of a viewing environment plus the CAM16
    coefficients derived from it.

    Build instances with :meth:`make` or :meth:`from_config`; the raw
    constructor expects already-derived coefficients.
    """
    n: float
    aw: float
    nbb: float
    ncb: float
    c: float
    nc: float
    rgb_d: Vec3
    fl: float
    fl_root: float
    z: float
    white_point: Vec3 = WHITE_POINT_D65
    adapting_luminance: float = 0.0
    background_lstar: float = 50.0
    surround: float = 2.0
    discount_illuminant: bool = False

    DEFAULT: ClassVar[ViewingConditions]

    @classmethod
    def make(
        cls,
        white_point: Vec3 = WHITE_POINT_D65,
        adapting_luminance: float = -1.0,
        background_lstar: float = 50.0,
        surround: Union[float, str] = 2.0,
        discount_illuminant: bool = False,
    ) -> ViewingConditions:
        """
        Create ViewingConditions from a simple, physically relevant set of
        parameters.

        Args:
            white_point: White point in XYZ (0..100 scale).  Default D65,
                a sunny afternoon.
            adapting_luminance: Luminance of the adapting field in cd/m²;
                informally, how bright the room is.  Lux times 0.0586
                gives this value.  Non-positive selects the default of
                about 11.72 (200 lux).
            background_lstar: L* of the area surrounding the color.
                Values below 0.1 are raised to 0.1 with a warning.
            surround: 0 (``"dark"``, a movie theater) to 2 (``"average"``,
                no difference between the color's lighting and its
                surroundings).  ``"dim"`` is 1, like a TV at night.
            discount_illuminant: Whether the eye accounts for the tint of
                ambient light, as when knowing an apple is red under green
                light.  Self-luminous displays are not discounted.

        Returns:
            ViewingConditions with all derived coefficients.

        Raises:
            ValueError: For non-finite inputs, a non-positive white point Y,
                or an invalid surround.
        """
        wp = tuple(float(v) for v in white_point)
        if len(wp) != 3 or not all(math.isfinite(v) for v in wp):
            raise ValueError(f"white_point must be 3 finite XYZ values, got {white_point!r}")
        if wp[1] <= 0.0:
            raise ValueError(f"white_point Y must be positive, got {wp[1]}")
        if not math.isfinite(adapting_luminance):
            raise ValueError(f"adapting_luminance must be finite, got {adapting_luminance}")
        if not math.isfinite(background_lstar):
            raise ValueError(f"background_lstar must be finite, got {background_lstar}")

        surround_value = _resolve_surround(surround)
        if adapting_luminance <= 0.0:
            adapting_luminance = _default_adapting_luminance()
        if background_lstar < _MIN_BACKGROUND_LSTAR:
            warnings.warn(
                f"background_lstar={background_lstar} is below "
                f"{_MIN_BACKGROUND_LSTAR}; a pure black background is "
                f"non-physical, using {_MIN_BACKGROUND_LSTAR}.",
                RuntimeWarning,
                stacklevel=2,
            )
            background_lstar = _MIN_BACKGROUND_LSTAR

        r_w, g_w, b_w = (M16 @ np.array(wp, dtype=np.float64)).tolist()

        f = 0.8 + surround_value / 10.0
        if f >= 0.9:
            c = lerp(0.59, 0.69, (f - 0.9) * 10.0)
        else:
            c = lerp(0.525, 0.59, (f - 0.8) * 10.0)

        if discount_illuminant:
            d = 1.0
        else:
            d = f * (1.0 - (1.0 / 3.6) * math.exp((-adapting_luminance - 42.0) / 92.0))
        d = min(1.0, max(0.0, d))
        nc = f

        rgb_d = (
            d * (100.0 / r_w) + 1.0 - d,
            d * (100.0 / g_w) + 1.0 - d,
            d * (100.0 / b_w) + 1.0 - d,
        )

        k = 1.0 / (5.0 * adapting_luminance + 1.0)
        k4 = k * k * k * k
        k4f = 1.0 - k4
        fl = k4 * adapting_luminance + 0.1 * k4f * k4f * math.pow(5.0 * adapting_luminance, 1.0 / 3.0)

        n = y_from_lstar(background_lstar) / wp[1]
        z = 1.48 + math.sqrt(n)
        nbb = 0.725 / math.pow(n, 0.2)
        ncb = nbb

        rgb_a_factors = [
            math.pow(fl * gain * white / 100.0, 0.42)
            for gain, white in zip(rgb_d, (r_w, g_w, b_w))
        ]
        rgb_a = [400.0 * af / (af + 27.13) for af in rgb_a_factors]
        aw = (2.0 * rgb_a[0] + rgb_a[1] + 0.05 * rgb_a[2]) * nbb

        return cls(
            n=n,
            aw=aw,
            nbb=nbb,
            ncb=ncb,
            c=c,
            nc=nc,
            rgb_d=rgb_d,
            fl=fl,
            fl_root=math.pow(fl, 0.25),
            z=z,
            white_point=(wp[0], wp[1], wp[2]),
            adapting_luminance=adapting_luminance,
            background_lstar=background_lstar,
            surround=surround_value,
            discount_illuminant=bool(discount_illuminant),
        )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> ViewingConditions:
        """
        Build viewing conditions from a configuration mapping.

        Recognized keys are the keyword arguments of :meth:`make`, in snake
        case or camel case (``adaptingLuminance``, ``backgroundLstar``,
        ``whitePoint``, ``discountIlluminant``, ``surround``).  Missing
        keys take their defaults.

        Raises:
            ValueError: If the mapping has unrecognized or duplicated keys.
        """
        unknown = sorted(k for k in config if k not in _CONFIG_ALIASES)
        if unknown:
            raise ValueError(
                f"Unrecognized viewing-condition option(s): {unknown}. "
                f"Expected any of {sorted(set(_CONFIG_ALIASES.values()))}."
            )
        kwargs: Dict[str, Any] = {}
        for key, value in config.items():
            name = _CONFIG_ALIASES[key]
            if name in kwargs:
                raise ValueError(f"Option '{name}' given more than once.")
            kwargs[name] = value
        return cls.make(**kwargs)

    @classmethod
    def with_lstar(cls, lstar: float) -> ViewingConditions:
        """Standard conditions with the background at ``lstar``."""
        return cls.make(background_lstar=lstar)

    def coefficients(self) -> Tuple[float, ...]:
        """Derived coefficients in the order the CAM16 kernels expect."""
        return (
            self.n, self.aw, self.nbb, self.ncb, self.c, self.nc,
            self.rgb_d[0], self.rgb_d[1], self.rgb_d[2],
            self.fl, self.fl_root, self.z,
        )


# sRGB-like conditions: D65, 200 lux, mid-gray background, average surround.
ViewingConditions.DEFAULT = ViewingConditions.make()
