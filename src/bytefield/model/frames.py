"""
Moving frames along curves.

The torus-knot sweep needs a local coordinate system at each point of the knot
to wind a secondary helix around it. The frame is estimated by finite
differences rather than derived analytically.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from bytefield.model.curves import TorusKnotCurve
from bytefield.model.geometry_primitives import Vector, normalize_rows

if TYPE_CHECKING:
    import numpy.typing as npt

DEFAULT_EPSILON = 1e-3


@dataclass(frozen=True)
class Frame:
    """Tangent / normal / binormal triad at a point of a curve."""
    origin: Vector
    tangent: Vector
    normal: Vector
    binormal: Vector

    def offset(self, normal_amount: float, binormal_amount: float) -> Vector:
        """Point displaced from the origin within the normal plane."""
        return self.origin + self.normal * normal_amount + self.binormal * binormal_amount


def build_frame(curve: TorusKnotCurve, u: float, epsilon: float = DEFAULT_EPSILON) -> Frame:
    """
    Estimate the frame of `curve` at parameter `u`.

    Args:
        curve: The knot to sample.
        u: Curve parameter.
        epsilon: Step used both along the curve and for the tube radius
                 perturbation. Must be small relative to the curvature.

    Returns:
        Frame with T = dC/du (forward difference), N pointing away from the
        torus core (tube radius perturbation) and B = T x N.

    Notes:
        - Zero-length differences give a zero vector (see Vector.normalize);
          the frame is then degenerate and no correction is attempted.
        - N is not re-orthogonalised against T, so T and N are only
          approximately perpendicular.
    """
    base = curve.point(u)
    tangent = (curve.point(u + epsilon) - base).normalize()
    normal = (curve.perturbed(epsilon).point(u) - base).normalize()
    binormal = tangent.cross(normal)
    return Frame(origin=base, tangent=tangent, normal=normal, binormal=binormal)


@dataclass(frozen=True)
class FrameBatch:
    """Frames at many curve parameters, one (N, 3) array per axis."""
    origins: npt.NDArray[np.float64]
    tangents: npt.NDArray[np.float64]
    normals: npt.NDArray[np.float64]
    binormals: npt.NDArray[np.float64]

    def offsets(
        self,
        normal_amounts: npt.NDArray[np.float64],
        binormal_amounts: npt.NDArray[np.float64]
    ) -> npt.NDArray[np.float64]:
        return (
            self.origins
            + self.normals * normal_amounts[:, np.newaxis]
            + self.binormals * binormal_amounts[:, np.newaxis]
        )


def build_frames(
    curve: TorusKnotCurve,
    u: npt.NDArray[np.float64],
    epsilon: float = DEFAULT_EPSILON
) -> FrameBatch:
    """Vectorized `build_frame` over an array of curve parameters."""
    base = curve.points(u)
    tangents = normalize_rows(curve.points(u + epsilon) - base)
    normals = normalize_rows(curve.perturbed(epsilon).points(u) - base)
    binormals = np.cross(tangents, normals)
    return FrameBatch(origins=base, tangents=tangents, normals=normals, binormals=binormals)
