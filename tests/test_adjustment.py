"""Unit tests for clamping and manual adjustment sanitising."""
import math

import pytest

from faceguide.core.adjustment import (
    MANUAL_DEFAULTS,
    clamp,
    manual_is_neutral,
    opacity_fraction,
    sanitize_manual_adjustment
)
from faceguide.models.geometry import ManualAdjustment


class TestClamp:

    def test_limits_values_within_range(self):
        assert clamp(10, 0, 5) == 5
        assert clamp(-3, 0, 5) == 0
        assert clamp(3, 0, 5) == 3

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, None, "7", True])
    def test_non_finite_falls_back_to_min(self, value):
        assert clamp(value, -2, 8) == -2

    def test_non_finite_with_infinite_min_falls_back_to_max(self):
        assert clamp(math.nan, -math.inf, 4) == 4

    @pytest.mark.parametrize("value", [-1e9, -0.5, 0, 0.25, 1, 1e9])
    def test_result_in_range(self, value):
        assert -0.5 <= clamp(value, -0.5, 0.5) <= 0.5


class TestSanitizeManualAdjustment:

    def test_defaults_for_missing_input(self):
        assert sanitize_manual_adjustment(None) == MANUAL_DEFAULTS
        assert sanitize_manual_adjustment({}) == ManualAdjustment(0, 0, 1, 0)

    def test_values_clamped_to_slider_limits(self):
        manual = sanitize_manual_adjustment({
            'offsetX': 900, 'offsetY': -900, 'scale': 3, 'rotation': -45
        })
        assert manual == ManualAdjustment(offset_x=250, offset_y=-250, scale=1.2, rotation=-20)

    def test_non_numeric_fields_keep_defaults(self):
        manual = sanitize_manual_adjustment({'offsetX': 'left', 'scale': None, 'rotation': 5})
        assert manual == ManualAdjustment(offset_x=0, offset_y=0, scale=1, rotation=5)

    def test_nan_falls_back_to_lower_limit(self):
        assert sanitize_manual_adjustment({'scale': math.nan}).scale == 0.8


class TestManualIsNeutral:

    def test_defaults_are_neutral(self):
        assert manual_is_neutral(MANUAL_DEFAULTS)

    def test_within_tolerance(self):
        assert manual_is_neutral(ManualAdjustment(offset_x=0.4, offset_y=-0.4, scale=1.001, rotation=0.05))

    @pytest.mark.parametrize("manual", [
        ManualAdjustment(offset_x=1),
        ManualAdjustment(offset_y=-0.5),
        ManualAdjustment(scale=0.99),
        ManualAdjustment(rotation=0.2),
    ])
    def test_active_adjustments(self, manual):
        assert not manual_is_neutral(manual)


class TestOpacityFraction:

    def test_default(self):
        assert opacity_fraction(None) == 0.5

    @pytest.mark.parametrize("percent,expected", [(0, 0), (75, 0.75), (150, 1), (-5, 0)])
    def test_clamped(self, percent, expected):
        assert opacity_fraction(percent) == pytest.approx(expected)
