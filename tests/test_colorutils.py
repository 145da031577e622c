"""Tests for tristimulus and transfer-function primitives."""
import pytest

from tonal_colorutils import (
    WHITE_POINT_D65,
    alpha_from_argb,
    argb_from_lab,
    argb_from_lstar,
    argb_from_rgb,
    argb_from_xyz,
    blue_from_argb,
    delinearized,
    difference_degrees,
    green_from_argb,
    is_opaque,
    lab_from_argb,
    lerp,
    linearized,
    lstar_from_argb,
    lstar_from_y,
    red_from_argb,
    sanitize_degrees,
    sanitize_degrees_int,
    signum,
    true_delinearized,
    xyz_from_argb,
    y_from_lstar,
)

SAMPLE_COLORS = [
    0xFF000000, 0xFFFFFFFF, 0xFFFF0000, 0xFF00FF00, 0xFF0000FF,
    0xFF7F7F7F, 0xFF123456, 0xFFFEDCBA, 0xFF01FF80,
]


class TestArgbPacking:
    """Packing and unpacking of 32-bit ARGB."""

    def test_pack_red(self):
        assert argb_from_rgb(255, 0, 0) == 0xFFFF0000

    def test_pack_forces_opaque(self):
        assert alpha_from_argb(argb_from_rgb(1, 2, 3)) == 255

    def test_pack_masks_channels(self):
        assert argb_from_rgb(256 + 5, 0, 0) == argb_from_rgb(5, 0, 0)

    def test_unpack(self):
        argb = 0x80123456
        assert alpha_from_argb(argb) == 0x80
        assert red_from_argb(argb) == 0x12
        assert green_from_argb(argb) == 0x34
        assert blue_from_argb(argb) == 0x56

    def test_is_opaque(self):
        assert is_opaque(0xFF000000)
        assert not is_opaque(0x7F000000)


class TestTransferFunctions:
    """sRGB EOTF / OETF on single channels."""

    def test_linearized_endpoints(self):
        assert linearized(0) == 0.0
        assert linearized(255) == pytest.approx(100.0)

    def test_linearized_below_threshold_is_linear(self):
        # 10/255 sits below the 0.04045 knee
        assert linearized(10) == pytest.approx(10 / 255.0 / 12.92 * 100.0)

    def test_delinearized_endpoints(self):
        assert delinearized(0.0) == 0
        assert delinearized(100.0) == 255

    def test_delinearized_clamps(self):
        assert delinearized(-5.0) == 0
        assert delinearized(150.0) == 255

    def test_channel_round_trip(self):
        for component in range(256):
            assert delinearized(linearized(component)) == component

    def test_true_delinearized_is_unrounded(self):
        value = true_delinearized(linearized(128) + 0.01)
        assert 128.0 < value < 129.0


class TestLightness:
    """L* <-> Y conversions."""

    def test_mid_gray_luminance(self):
        assert y_from_lstar(50.0) == pytest.approx(18.41865, abs=1e-4)

    @pytest.mark.parametrize("lstar", [0.0, 2.0, 8.0, 8.5, 25.0, 50.0, 99.0, 100.0])
    def test_lstar_round_trip(self, lstar):
        assert lstar_from_y(y_from_lstar(lstar)) == pytest.approx(lstar, abs=1e-9)

    def test_white_and_black(self):
        assert lstar_from_argb(0xFFFFFFFF) == pytest.approx(100.0)
        assert lstar_from_argb(0xFF000000) == pytest.approx(0.0)

    @pytest.mark.parametrize("lstar", [10.0, 33.3, 50.0, 75.0, 90.0])
    def test_argb_from_lstar_is_gray_of_that_tone(self, lstar):
        argb = argb_from_lstar(lstar)
        assert red_from_argb(argb) == green_from_argb(argb) == blue_from_argb(argb)
        assert lstar_from_argb(argb) == pytest.approx(lstar, abs=0.5)

    def test_argb_from_lstar_extremes(self):
        assert argb_from_lstar(0.0) == 0xFF000000
        assert argb_from_lstar(100.0) == 0xFFFFFFFF


class TestColorSpaces:
    """XYZ and L*a*b* conversions."""

    def test_white_is_d65(self):
        x, y, z = xyz_from_argb(0xFFFFFFFF)
        assert (x, y, z) == pytest.approx(WHITE_POINT_D65, abs=1e-3)

    @pytest.mark.parametrize("argb", SAMPLE_COLORS)
    def test_xyz_round_trip(self, argb):
        assert argb_from_xyz(*xyz_from_argb(argb)) == argb

    def test_white_lab(self):
        l, a, b = lab_from_argb(0xFFFFFFFF)
        assert l == pytest.approx(100.0, abs=1e-3)
        assert a == pytest.approx(0.0, abs=1e-3)
        assert b == pytest.approx(0.0, abs=1e-3)

    @pytest.mark.parametrize("argb", SAMPLE_COLORS)
    def test_lab_round_trip(self, argb):
        assert argb_from_lab(*lab_from_argb(argb)) == argb

    def test_out_of_gamut_xyz_is_clipped_opaque(self):
        argb = argb_from_xyz(200.0, -10.0, 300.0)
        assert is_opaque(argb)


class TestMathHelpers:
    def test_signum(self):
        assert signum(-3.0) == -1.0
        assert signum(0.0) == 0.0
        assert signum(2.5) == 1.0

    def test_signum_is_compiled_for_kernels(self):
        assert hasattr(signum, "py_func")
        assert signum.py_func(-0.5) == signum(-0.5) == -1.0

    def test_lerp(self):
        assert lerp(0.59, 0.69, 1.0) == pytest.approx(0.69)
        assert lerp(10.0, 20.0, 0.25) == pytest.approx(12.5)

    @pytest.mark.parametrize(
        "degrees, expected",
        [(-30.0, 330.0), (360.0, 0.0), (725.0, 5.0), (0.0, 0.0), (359.5, 359.5)],
    )
    def test_sanitize_degrees(self, degrees, expected):
        assert sanitize_degrees(degrees) == pytest.approx(expected)

    def test_sanitize_degrees_int(self):
        assert sanitize_degrees_int(-90) == 270
        assert sanitize_degrees_int(720) == 0

    def test_difference_degrees_wraps(self):
        assert difference_degrees(350.0, 10.0) == pytest.approx(20.0)
        assert difference_degrees(10.0, 190.0) == pytest.approx(180.0)
