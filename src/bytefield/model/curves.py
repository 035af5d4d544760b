"""
Closed-form parametric curves and surfaces.

Every function here is total: no validation, no failure modes. Parameters are
checked once, where they enter the application (see ``ShapeParameters``).
"""
from __future__ import annotations

from dataclasses import dataclass
from math import cos, sin, pi
from typing import TYPE_CHECKING

import numpy as np

from bytefield.model.geometry_primitives import Vector

if TYPE_CHECKING:
    import numpy.typing as npt


def torus_knot_point(u: float, p: int, q: int, radius: float, tube_radius: float) -> Vector:
    """
    Point on a (p, q) torus knot.

    Args:
        u: Curve parameter in radians. The curve is periodic with period 2*pi
           for integer `p` and `q`.
        p: Number of windings around the axis of rotational symmetry.
        q: Number of windings around the interior circle of the torus.
        radius: Distance from the torus centre to the centre of the tube.
        tube_radius: Radius of the tube the knot is wound on.
    """
    p_u = p * u
    q_u = q * u
    ring = radius + tube_radius * cos(q_u)
    return Vector(
        ring * cos(p_u),
        ring * sin(p_u),
        tube_radius * sin(q_u)
    )


def helix_point(t: float, turns: float, radius: float, length: float) -> Vector:
    """Point on a vertical helix centred on the origin, `t` running over [0, 1]."""
    angle = 2.0 * pi * turns * t
    return Vector(
        radius * cos(angle),
        (t - 0.5) * length,
        radius * sin(angle)
    )


def mobius_point(u: float, t: float, big_radius: float) -> Vector:
    """
    Point on a Möbius strip with a single half-twist.

    `u` runs around the strip, `t` in [-1, 1] across it. Going once around
    (u -> u + 2*pi) lands on the opposite edge, i.e. the point for -t.
    """
    half_width = t / 2.0
    ring = big_radius + half_width * cos(u / 2.0)
    return Vector(
        cos(u) * ring,
        sin(u) * ring,
        half_width * sin(u / 2.0)
    )


def klein_bottle_point(u: float, v: float, scale: float) -> Vector:
    """
    Point on the figure-8 style Klein bottle immersion.

    Args:
        u: Spine parameter, nominally in [-pi, pi].
        v: Cross-section angle.
        scale: Uniform scale of the whole surface.
    """
    r = 4.0 * (1.0 - cos(u) / 2.0)
    spine_x = 6.0 * cos(u) * (1.0 + sin(u))
    if u < pi:
        x = scale * (spine_x + r * cos(u) * cos(v))
        z = scale * (16.0 * sin(u) + r * sin(u) * cos(v))
    else:
        x = scale * (spine_x - r * cos(v + pi))
        z = scale * 16.0 * sin(u)
    y = scale * r * sin(v)
    return Vector(x, y, z)


@dataclass(frozen=True)
class TorusKnotCurve:
    """A torus knot bound to its shape constants, callable on the curve parameter."""
    p: int
    q: int
    radius: float
    tube_radius: float

    def point(self, u: float) -> Vector:
        return torus_knot_point(u, self.p, self.q, self.radius, self.tube_radius)

    def points(self, u: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return torus_knot_points(u, self.p, self.q, self.radius, self.tube_radius)

    def perturbed(self, delta: float) -> TorusKnotCurve:
        """Same knot wound on a tube that is `delta` thicker."""
        return TorusKnotCurve(self.p, self.q, self.radius, self.tube_radius + delta)

    def __call__(self, u: float) -> Vector:
        return self.point(u)


# ==========================================
# ARRAY VERSIONS (one row per parameter value)
# ==========================================

def torus_knot_points(
    u: npt.NDArray[np.float64], p: int, q: int, radius: float, tube_radius: float
) -> npt.NDArray[np.float64]:
    """Vectorized `torus_knot_point`. Returns an (N, 3) array."""
    ring = radius + tube_radius * np.cos(q * u)
    return np.column_stack((
        ring * np.cos(p * u),
        ring * np.sin(p * u),
        tube_radius * np.sin(q * u)
    ))


def mobius_points(
    u: npt.NDArray[np.float64], t: npt.NDArray[np.float64], big_radius: float
) -> npt.NDArray[np.float64]:
    """Vectorized `mobius_point`. Returns an (N, 3) array."""
    half_width = t / 2.0
    ring = big_radius + half_width * np.cos(u / 2.0)
    return np.column_stack((
        np.cos(u) * ring,
        np.sin(u) * ring,
        half_width * np.sin(u / 2.0)
    ))


def klein_bottle_points(
    u: npt.NDArray[np.float64], v: float, scale: float
) -> npt.NDArray[np.float64]:
    """Vectorized `klein_bottle_point` over `u` with a shared `v`. Returns an (N, 3) array."""
    r = 4.0 * (1.0 - np.cos(u) / 2.0)
    spine_x = 6.0 * np.cos(u) * (1.0 + np.sin(u))
    first = u < pi
    x = np.where(
        first,
        scale * (spine_x + r * np.cos(u) * cos(v)),
        scale * (spine_x - r * cos(v + pi))
    )
    z = np.where(
        first,
        scale * (16.0 * np.sin(u) + r * np.sin(u) * cos(v)),
        scale * 16.0 * np.sin(u)
    )
    y = scale * r * sin(v)
    return np.column_stack((x, y, z))
