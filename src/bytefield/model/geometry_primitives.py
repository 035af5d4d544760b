"""
Geometric Primitives for the arrangement engine.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import numpy as np
import math

if TYPE_CHECKING:
    import numpy.typing as npt

@dataclass(frozen=True)
class Vector:
    """
    A vector in 3D space, used both for points on curves and for directions.
    """
    x: float
    y: float
    z: float = 0.0

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector:
        if scalar == 0.0: raise ZeroDivisionError
        return Vector(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y, -self.z)

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def normalize(self) -> Vector:
        mag = self.magnitude
        if mag == 0.0: return Vector(0.0, 0.0, 0.0)
        return self / mag

    def dot(self, other: Vector) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector) -> Vector:
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z])

    @classmethod
    def from_array(cls, arr: npt.ArrayLike) -> Vector:
        x, y, z = np.asarray(arr, dtype=np.float64).reshape(3)
        return cls(float(x), float(y), float(z))


ORIGIN = Vector(0.0, 0.0, 0.0)
UP = Vector(0.0, 1.0, 0.0)


def look_at_rotation(position: Vector, target: Vector, up: Vector = UP) -> npt.NDArray[np.float64]:
    """
    Rotation matrix that turns an object at `position` so that its local +Z
    axis points at `target`.

    Args:
        position: Where the object sits.
        target: The point it should face.
        up: World up direction used to fix the roll.

    Returns:
        A (3, 3) array whose columns are the object's local X, Y and Z axes.

    Notes:
        - If `target` coincides with `position` the forward axis falls back to +Z.
        - If forward is parallel to `up`, forward is nudged slightly along X
          (or Z) so the cross product stays defined.
    """
    forward = target - position
    if forward.magnitude == 0.0:
        forward = Vector(0.0, 0.0, 1.0)
    forward = forward.normalize()

    side = up.cross(forward)
    if side.magnitude == 0.0:
        # up and forward are parallel
        if abs(up.z) == 1.0:
            forward = Vector(forward.x + 0.0001, forward.y, forward.z)
        else:
            forward = Vector(forward.x, forward.y, forward.z + 0.0001)
        forward = forward.normalize()
        side = up.cross(forward)
    side = side.normalize()

    true_up = forward.cross(side)

    return np.column_stack((side.to_array(), true_up.to_array(), forward.to_array()))


def compose_transform(
    position: Vector,
    rotation: npt.NDArray[np.float64],
    scale: float = 1.0
) -> npt.NDArray[np.float64]:
    """Builds a 4x4 affine matrix from translation, (3, 3) rotation and uniform scale."""
    matrix = np.eye(4, dtype=np.float64)
    matrix[:3, :3] = rotation * scale
    matrix[:3, 3] = position.to_array()
    return matrix


# ==========================================
# ARRAY VERSIONS (one row per instance)
# ==========================================

def normalize_rows(vectors: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Normalize every row of an (N, 3) array. Zero rows stay zero."""
    lengths = np.linalg.norm(vectors, axis=1, keepdims=True)
    return np.divide(vectors, lengths, out=np.zeros_like(vectors), where=lengths != 0.0)


def look_at_rotations(
    positions: npt.ArrayLike,
    targets: npt.ArrayLike,
    up: Vector = UP
) -> npt.NDArray[np.float64]:
    """
    Batched `look_at_rotation`.

    Args:
        positions: (N, 3) object positions.
        targets: (N, 3) targets, or a single (3,) target shared by all rows.
        up: World up direction.

    Returns:
        (N, 3, 3) array, columns as in `look_at_rotation`. The degenerate
        cases are handled row by row the same way.
    """
    positions, targets = np.broadcast_arrays(
        np.asarray(positions, dtype=np.float64),
        np.asarray(targets, dtype=np.float64)
    )
    forward = targets - positions
    forward[~forward.any(axis=1)] = (0.0, 0.0, 1.0)
    forward = normalize_rows(forward)

    up_arr = up.to_array()
    side = np.cross(up_arr, forward)
    parallel = ~side.any(axis=1)
    if parallel.any():
        axis = 0 if abs(up.z) == 1.0 else 2
        forward[parallel, axis] += 0.0001
        forward[parallel] = normalize_rows(forward[parallel])
        side[parallel] = np.cross(up_arr, forward[parallel])
    side = normalize_rows(side)

    true_up = np.cross(forward, side)

    return np.stack((side, true_up, forward), axis=2)


def compose_transforms(
    positions: npt.NDArray[np.float64],
    rotations: npt.NDArray[np.float64],
    scale: float = 1.0
) -> npt.NDArray[np.float64]:
    """Batched `compose_transform`: (N, 3) positions and (N, 3, 3) rotations to (N, 4, 4)."""
    matrices = np.tile(np.eye(4, dtype=np.float64), (len(positions), 1, 1))
    matrices[:, :3, :3] = rotations * scale
    matrices[:, :3, 3] = positions
    return matrices
