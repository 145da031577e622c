# -*- coding: utf-8 -*-
"""
Tonal: Perceptual color appearance for design systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

HCT (hue, chroma, tone) color values
====================================

HCT combines CAM16 hue and chroma with L* from L*a*b* as its tone.
Using L* links the color system to contrast and thus accessibility:
contrast ratio depends on relative luminance Y, L* is a perceptual
rescaling of Y, and unlike contrast ratio a difference in L* is linear and
simple to reason about.  A tone difference of 40 guarantees a contrast
ratio >= 3.0; a difference of 50 guarantees >= 4.5.

Not every (hue, chroma, tone) exists in sRGB.  Resolving an Hct to a packed
color keeps hue and tone and lowers chroma to the largest value reachable
at that hue and tone.

Usage:
    >>> hct = hct_from_color(0xFF0000FF)
    >>> str(hct)
    'H283 C87 T32'
    >>> darker = hct.with_tone(20.0)
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Optional

from tonal_cam16 import Cam16
from tonal_colorutils import lstar_from_argb, lstar_from_y
from tonal_solver import solve_to_argb
from tonal_viewing import ViewingConditions

__all__ = [
    "Hct",
    "hct_from",
    "hct_from_color",
]


def _clamp_tone(tone: float) -> float:
    # Y of white sums to 100 only up to float rounding.
    return min(100.0, max(0.0, tone))


@dataclass(frozen=True, slots=True)
class Hct:
    """
    An immutable, range-checked HCT triple.

    ``Hct(hue, chroma, tone)`` stores the triple exactly as given; the
    packed color is solved on first use of :meth:`to_color` and cached.
    Use :meth:`from_hct` when the stored values should be the achieved
    ones (chroma clamped to gamut).

    Attributes:
        hue: CAM16 hue in degrees, [0, 360].  Not wrapped.
        chroma: CAM16 chroma, >= 0.  May exceed what sRGB can show.
        tone: L*, [0, 100].

    Raises:
        TypeError: If a field is not a real number.
        ValueError: If a field is non-finite or outside its range.
    """
    hue: float
    chroma: float
    tone: float
    _argb: Optional[int] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name in ("hue", "chroma", "tone"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise TypeError(f"{name} must be a real number, got {type(value).__name__}")
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
            object.__setattr__(self, name, float(value))

        if not 0.0 <= self.hue <= 360.0:
            raise ValueError(f"hue must be in [0, 360] degrees, got {self.hue}")
        if self.chroma < 0.0:
            raise ValueError(f"chroma must be >= 0, got {self.chroma}")
        if not 0.0 <= self.tone <= 100.0:
            raise ValueError(f"tone must be in [0, 100], got {self.tone}")

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def from_color(cls, argb: int) -> Hct:
        """
        HCT of a packed ARGB color under standard viewing conditions.

        Alpha is ignored.
        """
        if isinstance(argb, bool) or not isinstance(argb, numbers.Integral):
            raise TypeError(f"argb must be an integer, got {type(argb).__name__}")
        argb = int(argb) & 0xFFFFFFFF
        cam = Cam16.from_argb(argb)
        hct = cls(cam.hue, cam.chroma, _clamp_tone(lstar_from_argb(argb)))
        # The solver reproduces every opaque color exactly.
        object.__setattr__(hct, "_argb", argb | 0xFF000000)
        return hct

    @classmethod
    def from_hct(cls, hue: float, chroma: float, tone: float) -> Hct:
        """
        Validates the request, solves it, and returns the HCT of the
        resulting color.

        Chroma may come back lower than requested: chroma has a different
        maximum for every hue and tone.
        """
        return cls.from_color(cls(hue, chroma, tone).to_color())

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------
    def to_color(self) -> int:
        """Opaque ARGB of this HCT, solved once and cached."""
        argb = self._argb
        if argb is None:
            # Racing callers compute the same value; last write wins.
            argb = solve_to_argb(self.hue, self.chroma, self.tone)
            object.__setattr__(self, "_argb", argb)
        return argb

    @property
    def is_resolved(self) -> bool:
        return self._argb is not None

    def to_cam16(self) -> Cam16:
        return Cam16.from_argb(self.to_color())

    def in_viewing_conditions(self, viewing_conditions: ViewingConditions) -> Hct:
        """
        Translates this color into different viewing conditions.

        Colors change appearance: a hex code looks different with the
        lights off, or on white versus black (color relativity).  CAM16
        models this.  The packed color is taken as seen under standard
        conditions; the same appearance is then reproduced under
        ``viewing_conditions`` and measured back in standard HCT.

        Tone is recomputed from the new Y, so it can shift.
        """
        # 1. XYZ of the same appearance in the target conditions.
        x, y, z = self.to_cam16().xyz_in_viewing_conditions(viewing_conditions)
        # 2. Hue and chroma of those XYZ under standard conditions.
        viewed = Cam16.from_xyz(x, y, z)
        # 3. Tone from the target Y.
        return Hct(viewed.hue, viewed.chroma, _clamp_tone(lstar_from_y(y)))

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    def with_hue(self, hue: float) -> Hct:
        """Resolved copy with a new hue; chroma may drop to fit the gamut."""
        return Hct.from_hct(hue, self.chroma, self.tone)

    def with_chroma(self, chroma: float) -> Hct:
        return Hct.from_hct(self.hue, chroma, self.tone)

    def with_tone(self, tone: float) -> Hct:
        """Resolved copy with a new tone; chroma may drop to fit the gamut."""
        return Hct.from_hct(self.hue, self.chroma, tone)

    def __str__(self) -> str:
        return f"H{round(self.hue)} C{round(self.chroma)} T{round(self.tone)}"


def hct_from(hue: float, chroma: float, tone: float) -> Hct:
    """Resolved HCT for a (hue, chroma, tone) request."""
    return Hct.from_hct(hue, chroma, tone)


def hct_from_color(argb: int) -> Hct:
    return Hct.from_color(argb)
