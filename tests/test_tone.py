"""Tests for brightness / contrast / gamma adjustment."""

import numpy as np
import pytest

from dot_maker.core.tone import (
    adjust_channels,
    adjust_tone,
    contrast_factor,
    luminance,
)


class TestContrastFactor:
    def test_zero_is_identity(self):
        assert contrast_factor(0) == pytest.approx(1.0)

    def test_positive_increases(self):
        assert contrast_factor(50) > 1.0

    def test_negative_decreases(self):
        assert 0 < contrast_factor(-50) < 1.0


class TestAdjustTone:
    def test_identity(self):
        values = np.arange(256, dtype=np.float64)
        assert np.allclose(adjust_tone(values, 0, 0, 1.0), values)

    @pytest.mark.parametrize("brightness", [-100, -37, 0, 55, 100])
    @pytest.mark.parametrize("contrast", [-100, -20, 0, 60, 100])
    def test_output_clamped(self, brightness, contrast):
        values = np.arange(256, dtype=np.float64)
        result = adjust_tone(values, brightness, contrast, 1.0)
        assert result.min() >= 0.0
        assert result.max() <= 255.0

    def test_brightness_offset(self):
        assert adjust_tone(100.0, brightness=20) == pytest.approx(120.0)

    def test_brightness_clamps(self):
        assert adjust_tone(250.0, brightness=100) == pytest.approx(255.0)
        assert adjust_tone(5.0, brightness=-100) == pytest.approx(0.0)

    def test_contrast_keeps_midpoint(self):
        assert adjust_tone(128.0, contrast=80) == pytest.approx(128.0)

    def test_gamma_brightens_midtones(self):
        expected = 255 * (64 / 255) ** 0.5
        assert adjust_tone(64.0, gamma=2.0) == pytest.approx(expected)

    def test_input_not_mutated(self):
        values = np.array([10.0, 200.0])
        adjust_tone(values, brightness=50, contrast=50)
        assert values.tolist() == [10.0, 200.0]


class TestLuminance:
    def test_weights(self):
        rgba = np.array([[[255, 0, 0, 255], [0, 255, 0, 255], [0, 0, 255, 255]]], dtype=np.uint8)
        lum = luminance(rgba)
        assert lum.shape == (1, 3)
        assert lum[0, 0] == pytest.approx(0.299 * 255)
        assert lum[0, 1] == pytest.approx(0.587 * 255)
        assert lum[0, 2] == pytest.approx(0.114 * 255)

    def test_gray_is_unchanged(self):
        rgba = np.full((2, 2, 4), 77, dtype=np.uint8)
        assert np.allclose(luminance(rgba), 77)


class TestAdjustChannels:
    def test_alpha_copied(self):
        rgba = np.zeros((2, 2, 4), dtype=np.uint8)
        rgba[..., 3] = 42
        out = adjust_channels(rgba, brightness=50)
        assert out.dtype == np.uint8
        assert (out[..., 3] == 42).all()
        assert (out[..., :3] == 50).all()

    def test_returns_copy(self):
        rgba = np.full((2, 2, 4), 100, dtype=np.uint8)
        out = adjust_channels(rgba, brightness=30)
        assert (rgba == 100).all()
        assert (out[..., :3] == 130).all()

    def test_channels_adjusted_independently(self):
        rgba = np.array([[[250, 10, 128, 255]]], dtype=np.uint8)
        out = adjust_channels(rgba, brightness=20)
        assert out[0, 0, :3].tolist() == [255, 30, 148]
