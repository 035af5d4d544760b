import colorsys
import math

import numpy as np
import pytest

from bytefield.model.colors import (
    ColorPolicy, HSLColor, color_for_index, colors_for_indices, curve_position_hue,
    data_value_hue, hls_to_rgb_array
)


def test_data_value_hue_wraps_every_256():
    assert data_value_hue(0) == 0.0
    assert data_value_hue(128) == 0.5
    assert data_value_hue(65 + 256) == data_value_hue(65)


def test_curve_position_hue():
    assert curve_position_hue(0.0) == 0.0
    assert curve_position_hue(math.pi) == pytest.approx(0.5)
    assert curve_position_hue(2 * math.pi + math.pi / 2) == pytest.approx(0.25)


def test_default_policy_uses_data_value():
    color = color_for_index(3, ord("A"), ColorPolicy.DATA_VALUE)
    assert color == HSLColor(65 / 256, 0.8, 0.6)


def test_curve_policy_ignores_data_value():
    a = color_for_index(0, 10, ColorPolicy.CURVE_POSITION, curve_u=1.0)
    b = color_for_index(0, 200, ColorPolicy.CURVE_POSITION, curve_u=1.0)
    assert a == b
    assert a.h == pytest.approx(1.0 / (2 * math.pi))


def test_curve_policy_requires_curve_u():
    with pytest.raises(ValueError):
        color_for_index(0, 10, ColorPolicy.CURVE_POSITION)


def test_hsl_to_rgb():
    # Hue 0 (red) at s=0.8, l=0.6
    r, g, b = HSLColor(0.0).to_rgb()
    assert r == pytest.approx(0.92)
    assert g == pytest.approx(0.28)
    assert b == pytest.approx(0.28)
    assert all(0.0 <= c <= 1.0 for c in HSLColor(0.73).to_rgb())


def test_hls_to_rgb_array_matches_colorsys():
    hues = np.linspace(-0.5, 1.5, 41)
    expected = [colorsys.hls_to_rgb(h, 0.6, 0.8) for h in hues]
    assert np.allclose(hls_to_rgb_array(hues), expected)
    dark = [colorsys.hls_to_rgb(h, 0.3, 0.5) for h in hues]
    assert np.allclose(hls_to_rgb_array(hues, lightness=0.3, saturation=0.5), dark)


def test_hls_to_rgb_array_grey_without_saturation():
    assert np.allclose(hls_to_rgb_array(np.array([0.1, 0.7]), saturation=0.0), 0.6)


def test_colors_for_indices_follow_policy():
    values = [0, 97, 300]
    rgb = colors_for_indices(values, ColorPolicy.DATA_VALUE)
    for row, value in zip(rgb, values):
        assert np.allclose(row, color_for_index(0, value, ColorPolicy.DATA_VALUE).to_rgb())

    u = np.array([0.0, math.pi, 5.0 * math.pi])
    rgb = colors_for_indices(values, ColorPolicy.CURVE_POSITION, u)
    assert np.allclose(rgb[1], rgb[2])
    with pytest.raises(ValueError):
        colors_for_indices(values, ColorPolicy.CURVE_POSITION)
