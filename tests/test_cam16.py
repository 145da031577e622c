"""Tests for the CAM16 forward transform and its inverse."""
import dataclasses

import pytest

from tonal_cam16 import Cam16, xyz_in_viewing_conditions
from tonal_colorutils import xyz_from_argb
from tonal_viewing import ViewingConditions

RED = 0xFFFF0000
GREEN = 0xFF00FF00
BLUE = 0xFF0000FF
WHITE = 0xFFFFFFFF
BLACK = 0xFF000000

# Expected (hue, chroma, j, m, s, q) under standard conditions.
REFERENCE_ATTRIBUTES = {
    RED: (27.408, 113.357, 46.445, 89.494, 91.889, 105.988),
    GREEN: (142.139, 108.410, 79.331, 85.587, 78.604, 138.520),
    BLUE: (282.788, 87.230, 25.465, 68.867, 93.674, 78.481),
    WHITE: (209.492, 2.869, 100.0, 2.265, 12.068, 155.521),
    BLACK: (0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
}

SAMPLE_COLORS = [RED, GREEN, BLUE, WHITE, 0xFF123456, 0xFF808080, 0xFFFEDCBA, 0xFF336699]


class TestForwardTransform:
    """Attributes of primaries and neutrals under standard conditions."""

    @pytest.mark.parametrize("argb", sorted(REFERENCE_ATTRIBUTES))
    def test_reference_attributes(self, argb):
        hue, chroma, j, m, s, q = REFERENCE_ATTRIBUTES[argb]
        cam = Cam16.from_argb(argb)
        assert cam.hue == pytest.approx(hue, abs=1e-3)
        assert cam.chroma == pytest.approx(chroma, abs=1e-3)
        assert cam.j == pytest.approx(j, abs=1e-3)
        assert cam.m == pytest.approx(m, abs=1e-3)
        assert cam.s == pytest.approx(s, abs=1e-3)
        assert cam.q == pytest.approx(q, abs=1e-3)

    def test_black_is_all_zero(self):
        cam = Cam16.from_argb(BLACK)
        assert (cam.jstar, cam.astar, cam.bstar) == (0.0, 0.0, 0.0)

    def test_from_xyz_matches_from_argb(self):
        assert Cam16.from_xyz(*xyz_from_argb(BLUE)) == Cam16.from_argb(BLUE)

    def test_explicit_default_conditions(self):
        assert Cam16.from_argb(RED, ViewingConditions.DEFAULT) == Cam16.from_argb(RED)

    @pytest.mark.parametrize("argb", SAMPLE_COLORS)
    def test_hue_range(self, argb):
        assert 0.0 <= Cam16.from_argb(argb).hue < 360.0

    def test_colorfulness_scales_with_fl_root(self):
        cam = Cam16.from_argb(GREEN)
        assert cam.m == pytest.approx(cam.chroma * ViewingConditions.DEFAULT.fl_root)

    def test_darker_surround_changes_appearance(self):
        dark = ViewingConditions.make(surround="dark")
        assert Cam16.from_argb(RED, dark).j != pytest.approx(Cam16.from_argb(RED).j)

    def test_is_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Cam16.from_argb(RED).hue = 0.0


class TestAlternateConstructors:
    @pytest.mark.parametrize("argb", SAMPLE_COLORS)
    def test_from_jch(self, argb):
        cam = Cam16.from_argb(argb)
        rebuilt = Cam16.from_jch(cam.j, cam.chroma, cam.hue)
        for name in ("q", "m", "s", "jstar", "astar", "bstar"):
            assert getattr(rebuilt, name) == pytest.approx(getattr(cam, name), abs=1e-6)

    @pytest.mark.parametrize("argb", SAMPLE_COLORS)
    def test_from_ucs(self, argb):
        cam = Cam16.from_argb(argb)
        rebuilt = Cam16.from_ucs(cam.jstar, cam.astar, cam.bstar)
        assert rebuilt.j == pytest.approx(cam.j, abs=1e-6)
        assert rebuilt.chroma == pytest.approx(cam.chroma, abs=1e-6)
        assert rebuilt.m == pytest.approx(cam.m, abs=1e-6)

    def test_from_jch_at_zero_lightness(self):
        cam = Cam16.from_jch(0.0, 10.0, 120.0)
        assert cam.q == 0.0
        assert cam.s == 0.0


class TestInverse:
    @pytest.mark.parametrize("argb", SAMPLE_COLORS)
    def test_to_argb_round_trip(self, argb):
        assert Cam16.from_argb(argb).to_argb() == argb

    @pytest.mark.parametrize("argb", SAMPLE_COLORS)
    def test_default_conditions_reproduce_xyz(self, argb):
        cam = Cam16.from_argb(argb)
        xyz = xyz_in_viewing_conditions(cam, ViewingConditions.DEFAULT)
        assert xyz == pytest.approx(xyz_from_argb(argb), abs=1e-4)

    def test_method_and_function_agree(self):
        cam = Cam16.from_argb(BLUE)
        vc = ViewingConditions.with_lstar(20.0)
        assert cam.xyz_in_viewing_conditions(vc) == xyz_in_viewing_conditions(cam, vc)

    def test_round_trip_in_other_conditions(self):
        vc = ViewingConditions.make(background_lstar=20.0, surround="dim")
        xyz = xyz_from_argb(0xFF336699)
        cam = Cam16.from_xyz(*xyz, vc)
        assert cam.xyz_in_viewing_conditions(vc) == pytest.approx(xyz, abs=1e-4)

    def test_other_conditions_need_other_stimulus(self):
        cam = Cam16.from_argb(0xFF336699)
        vc = ViewingConditions.make(background_lstar=20.0)
        _, y_default, _ = cam.xyz_in_viewing_conditions(ViewingConditions.DEFAULT)
        _, y_other, _ = cam.xyz_in_viewing_conditions(vc)
        assert abs(y_other - y_default) > 0.01

    def test_black_inverts_to_black(self):
        cam = Cam16.from_argb(BLACK)
        assert cam.xyz_in_viewing_conditions(ViewingConditions.DEFAULT) == pytest.approx(
            (0.0, 0.0, 0.0), abs=1e-9
        )


class TestDistance:
    def test_distance_to_self(self):
        cam = Cam16.from_argb(BLUE)
        assert cam.distance(cam) == 0.0

    def test_symmetric(self):
        red, blue = Cam16.from_argb(RED), Cam16.from_argb(BLUE)
        assert red.distance(blue) == pytest.approx(blue.distance(red))
        assert red.distance(blue) > 0.0

    def test_similar_colors_are_closer(self):
        base = Cam16.from_argb(0xFF336699)
        near = Cam16.from_argb(0xFF33669A)
        far = Cam16.from_argb(0xFFFF9966)
        assert base.distance(near) < base.distance(far)


class TestHueQuadrature:
    @pytest.mark.parametrize(
        "hue, expected",
        [(20.14, 0.0), (90.0, 100.0), (164.25, 200.0), (237.53, 300.0)],
    )
    def test_unique_hues(self, hue, expected):
        assert Cam16.from_jch(50.0, 30.0, hue).hue_quadrature == pytest.approx(expected)

    def test_hue_below_first_unique_hue_wraps(self):
        quadrature = Cam16.from_jch(50.0, 30.0, 10.0).hue_quadrature
        assert 300.0 < quadrature < 400.0

    def test_increases_around_the_circle(self):
        # Starting just past red, hues below 20.14 sort to the end.
        hues = [h % 360 for h in range(21, 380, 7)]
        values = [Cam16.from_jch(50.0, 30.0, h).hue_quadrature for h in hues]
        assert values == sorted(values)
        assert 0.0 <= values[0] and values[-1] < 400.0
