"""
Color Mapping
Deterministic index/data value -> color functions.
"""
from __future__ import annotations

import colorsys
from dataclasses import dataclass
from enum import Enum
from math import pi
from typing import Optional, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

SATURATION = 0.8
LIGHTNESS = 0.6
HUE_BUCKETS = 256


class ColorPolicy(Enum):
    """Where an instance takes its hue from."""
    DATA_VALUE = "data-value"          # hue from the character / byte value
    CURVE_POSITION = "curve-position"  # hue from the position along a closed curve


@dataclass(frozen=True)
class HSLColor:
    h: float
    s: float = SATURATION
    l: float = LIGHTNESS

    def to_rgb(self) -> tuple[float, float, float]:
        """RGB triple with components in [0, 1]."""
        # colorsys orders the arguments hue, lightness, saturation
        return colorsys.hls_to_rgb(self.h, self.l, self.s)


def data_value_hue(value: int) -> float:
    return (value % HUE_BUCKETS) / HUE_BUCKETS


def curve_position_hue(curve_u: float) -> float:
    """Fraction of the way around a 2*pi periodic curve, in [0, 1)."""
    return (curve_u / (2.0 * pi)) % 1.0


def color_for_index(
    index: int,
    data_value: int,
    policy: ColorPolicy,
    curve_u: Optional[float] = None
) -> HSLColor:
    """
    Color of one instance.

    Args:
        index: Instance index. Not used by the current policies but kept so
               the signature covers index-based palettes.
        data_value: The data sequence value at `index`.
        policy: Which hue source to use.
        curve_u: Curve parameter, required for ColorPolicy.CURVE_POSITION.

    Raises:
        ValueError: If the curve policy is requested without `curve_u`.
    """
    if policy is ColorPolicy.CURVE_POSITION:
        if curve_u is None:
            raise ValueError("curve_u is required for the curve position color policy.")
        return HSLColor(curve_position_hue(curve_u))
    return HSLColor(data_value_hue(data_value))


# ==========================================
# ARRAY VERSIONS
# ==========================================

def hls_to_rgb_array(
    hues: npt.NDArray[np.float64],
    lightness: float = LIGHTNESS,
    saturation: float = SATURATION
) -> npt.NDArray[np.float64]:
    """
    `colorsys.hls_to_rgb` over an array of hues with shared lightness and saturation.

    Returns:
        (N, 3) RGB array, components in [0, 1].
    """
    hues = np.asarray(hues, dtype=np.float64)
    if saturation == 0.0:
        return np.full((len(hues), 3), lightness)
    if lightness <= 0.5:
        m2 = lightness * (1.0 + saturation)
    else:
        m2 = lightness + saturation - (lightness * saturation)
    m1 = 2.0 * lightness - m2

    def channel(h: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        h = np.mod(h, 1.0)
        return np.select(
            [h < 1.0 / 6.0, h < 0.5, h < 2.0 / 3.0],
            [m1 + (m2 - m1) * h * 6.0, np.full_like(h, m2), m1 + (m2 - m1) * (2.0 / 3.0 - h) * 6.0],
            default=m1
        )

    return np.column_stack((channel(hues + 1.0 / 3.0), channel(hues), channel(hues - 1.0 / 3.0)))


def data_value_hues(values: npt.ArrayLike) -> npt.NDArray[np.float64]:
    return np.mod(np.asarray(values, dtype=np.int64), HUE_BUCKETS) / HUE_BUCKETS


def curve_position_hues(curve_u: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    return np.mod(np.asarray(curve_u, dtype=np.float64) / (2.0 * pi), 1.0)


def colors_for_indices(
    data_values: npt.ArrayLike,
    policy: ColorPolicy,
    curve_u: Optional[npt.NDArray[np.float64]] = None
) -> npt.NDArray[np.float64]:
    """
    Batched `color_for_index`, already converted to RGB.

    Raises:
        ValueError: If the curve policy is requested without `curve_u`.
    """
    if policy is ColorPolicy.CURVE_POSITION:
        if curve_u is None:
            raise ValueError("curve_u is required for the curve position color policy.")
        return hls_to_rgb_array(curve_position_hues(curve_u))
    return hls_to_rgb_array(data_value_hues(data_values))
