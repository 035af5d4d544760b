"""
Arrangement Engine
==================
Computes where each instance sits, which way it faces and what color it has.

Every layout is a pure function of (index, count, shape, parameters, time) and
the explicit look-at inputs (camera position, scene origin). There is no
cross-index state, so any subset of indices can be computed independently.

Classes:
    ShapeMode: The selectable layouts.
    ShapeParameters: Validated user parameters (spacing, knot p/q).
    InstanceTransform: The (matrix, color) result for one index.
    InstanceBatch: The same for a whole pass, as stacked arrays.

Functions:
    compute_instance / compute_all: Per-index path, one object per instance.
    compute_batch: Vectorized path over all indices at once, used every frame.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from math import acos, ceil, cos, floor, pi, sin, sqrt
from typing import Callable, Optional, Sequence, TYPE_CHECKING

import numpy as np

from bytefield.model.colors import ColorPolicy, HSLColor, color_for_index, colors_for_indices
from bytefield.model.curves import (
    TorusKnotCurve, klein_bottle_point, klein_bottle_points, mobius_point, mobius_points
)
from bytefield.model.frames import DEFAULT_EPSILON, build_frame, build_frames
from bytefield.model.geometry_primitives import (
    ORIGIN, Vector, compose_transform, compose_transforms, look_at_rotation, look_at_rotations
)

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * pi

# Animated shapes advance their curve phase by this many turns per unit of clock time
PHASE_RATE = 0.05


class ShapeMode(Enum):
    GRID = "grid"
    CIRCLE = "circle"
    SPHERE = "sphere"
    HELIX = "helix"
    MOBIUS = "mobius"
    KLEIN = "klein"
    TORUS_KNOT_HELIX = "torus-knot-helix"

    @property
    def is_animated(self) -> bool:
        """Animated layouts depend on the clock and are recomputed every frame."""
        return self in (ShapeMode.MOBIUS, ShapeMode.KLEIN, ShapeMode.TORUS_KNOT_HELIX)

    @property
    def color_policy(self) -> ColorPolicy:
        if self is ShapeMode.TORUS_KNOT_HELIX:
            return ColorPolicy.CURVE_POSITION
        return ColorPolicy.DATA_VALUE

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()


@dataclass(frozen=True)
class ShapeParameters:
    """
    User-controlled shape parameters.

    Validation happens here, once, so the curve functions never have to.
    `knot_p` and `knot_q` only affect the torus-knot layout. Non-coprime
    pairs are accepted and simply trace a curve that overlaps itself.
    """
    spacing: float = 1.0
    knot_p: int = 2
    knot_q: int = 3

    def __post_init__(self) -> None:
        if not self.spacing > 0.0:
            raise ValueError(f"Spacing must be positive, got {self.spacing}.")
        for name in ("knot_p", "knot_q"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"{name} must be an integer, got {value!r}.")
            if value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value}.")


@dataclass(frozen=True)
class InstanceTransform:
    """Per-instance result: a 4x4 affine matrix and a color."""
    matrix: npt.NDArray[np.float64]
    color: HSLColor

    @property
    def position(self) -> Vector:
        return Vector.from_array(self.matrix[:3, 3])


@dataclass(frozen=True)
class Placement:
    """Intermediate result of a layout: where an instance sits and what it looks at."""
    position: Vector
    target: Vector
    curve_u: Optional[float] = None


@dataclass(frozen=True)
class LayoutContext:
    """Inputs shared by all indices of one pass."""
    count: int
    params: ShapeParameters
    time: float
    camera_position: Vector
    scene_origin: Vector


@dataclass(frozen=True)
class PlacementBatch:
    """Placements of every index of one pass. `targets` may be a single shared (3,) point."""
    positions: npt.NDArray[np.float64]
    targets: npt.NDArray[np.float64]
    curve_u: Optional[npt.NDArray[np.float64]] = None


@dataclass(frozen=True)
class InstanceBatch:
    """A full pass as stacked arrays: (N, 4, 4) matrices and (N, 3) RGB colors."""
    matrices: npt.NDArray[np.float64]
    colors: npt.NDArray[np.float64]

    def __len__(self) -> int:
        return int(self.matrices.shape[0])


# ==========================================
# STATIC LAYOUTS
# ==========================================

def _grid(i: int, ctx: LayoutContext) -> Placement:
    item_size = 20.0 * ctx.params.spacing
    cols = ceil(sqrt(ctx.count))
    rows = floor(ctx.count / cols)
    x = (i % cols - (cols - 1) / 2.0) * item_size
    y = (floor(i / cols) - (rows - 1) / 2.0) * -item_size
    return Placement(Vector(x, y, 0.0), ctx.camera_position)


def _circle(i: int, ctx: LayoutContext) -> Placement:
    radius = max(200.0, ctx.count * 0.6) * ctx.params.spacing
    angle = (i / ctx.count) * TWO_PI
    return Placement(Vector(radius * cos(angle), 0.0, radius * sin(angle)), ctx.scene_origin)


def _sphere(i: int, ctx: LayoutContext) -> Placement:
    radius = max(150.0, ctx.count * 0.25) * ctx.params.spacing
    phi = acos(-1.0 + (2.0 * i) / ctx.count)
    theta = sqrt(ctx.count * pi) * phi
    position = Vector(
        radius * cos(theta) * sin(phi),
        radius * sin(theta) * sin(phi),
        radius * cos(phi)
    )
    return Placement(position, ctx.scene_origin)


def _helix(i: int, ctx: LayoutContext) -> Placement:
    radius = 100.0 * ctx.params.spacing
    vertical_spacing = 15.0 * ctx.params.spacing
    turns = 10
    angle = (i / ctx.count) * TWO_PI * turns
    y = (i - ctx.count / 2.0) * vertical_spacing * 0.2
    position = Vector(radius * cos(angle), y, radius * sin(angle))
    # Face the central axis at the instance's own height
    return Placement(position, Vector(0.0, y, 0.0))


# ==========================================
# ANIMATED LAYOUTS
# ==========================================

def _phase(i: int, ctx: LayoutContext) -> float:
    """Curve parameter that travels around a closed curve as time advances."""
    return (i / ctx.count + ctx.time * PHASE_RATE) * TWO_PI


def _mobius(i: int, ctx: LayoutContext) -> Placement:
    big_radius = 150.0 * ctx.params.spacing
    u = _phase(i, ctx)
    t = (i / ctx.count) * 2.0 - 1.0
    return Placement(mobius_point(u, t, big_radius), ctx.scene_origin)


def _klein(i: int, ctx: LayoutContext) -> Placement:
    u = ((i / ctx.count) * 2.0 - 1.0) * pi
    v = ctx.time * 0.5
    scale = 25.0 * ctx.params.spacing
    return Placement(klein_bottle_point(u, v, scale), ctx.scene_origin)


def _torus_knot_helix(i: int, ctx: LayoutContext) -> Placement:
    spacing = ctx.params.spacing
    curve = TorusKnotCurve(
        p=ctx.params.knot_p,
        q=ctx.params.knot_q,
        radius=100.0 * spacing,
        tube_radius=40.0 * spacing
    )
    u = _phase(i, ctx)
    frame = build_frame(curve, u, DEFAULT_EPSILON)

    helix_radius = 15.0 * spacing
    helix_angle = ctx.time * 5.0 + (i / ctx.count) * pi * 8.0
    position = frame.offset(cos(helix_angle) * helix_radius, sin(helix_angle) * helix_radius)
    return Placement(position, frame.origin, curve_u=u)


LAYOUTS: dict[ShapeMode, Callable[[int, LayoutContext], Placement]] = {
    ShapeMode.GRID: _grid,
    ShapeMode.CIRCLE: _circle,
    ShapeMode.SPHERE: _sphere,
    ShapeMode.HELIX: _helix,
    ShapeMode.MOBIUS: _mobius,
    ShapeMode.KLEIN: _klein,
    ShapeMode.TORUS_KNOT_HELIX: _torus_knot_helix,
}


# ==========================================
# BATCH LAYOUTS
# Same formulas as above, with `i` an array of every index.
# ==========================================

def _grid_batch(i: npt.NDArray[np.int64], ctx: LayoutContext) -> PlacementBatch:
    item_size = 20.0 * ctx.params.spacing
    cols = ceil(sqrt(ctx.count))
    rows = floor(ctx.count / cols)
    x = (i % cols - (cols - 1) / 2.0) * item_size
    y = (np.floor(i / cols) - (rows - 1) / 2.0) * -item_size
    positions = np.column_stack((x, y, np.zeros(len(i))))
    return PlacementBatch(positions, ctx.camera_position.to_array())


def _circle_batch(i: npt.NDArray[np.int64], ctx: LayoutContext) -> PlacementBatch:
    radius = max(200.0, ctx.count * 0.6) * ctx.params.spacing
    angle = (i / ctx.count) * TWO_PI
    positions = np.column_stack((radius * np.cos(angle), np.zeros(len(i)), radius * np.sin(angle)))
    return PlacementBatch(positions, ctx.scene_origin.to_array())


def _sphere_batch(i: npt.NDArray[np.int64], ctx: LayoutContext) -> PlacementBatch:
    radius = max(150.0, ctx.count * 0.25) * ctx.params.spacing
    phi = np.arccos(-1.0 + (2.0 * i) / ctx.count)
    theta = sqrt(ctx.count * pi) * phi
    positions = np.column_stack((
        radius * np.cos(theta) * np.sin(phi),
        radius * np.sin(theta) * np.sin(phi),
        radius * np.cos(phi)
    ))
    return PlacementBatch(positions, ctx.scene_origin.to_array())


def _helix_batch(i: npt.NDArray[np.int64], ctx: LayoutContext) -> PlacementBatch:
    radius = 100.0 * ctx.params.spacing
    vertical_spacing = 15.0 * ctx.params.spacing
    turns = 10
    angle = (i / ctx.count) * TWO_PI * turns
    y = (i - ctx.count / 2.0) * vertical_spacing * 0.2
    zeros = np.zeros(len(i))
    positions = np.column_stack((radius * np.cos(angle), y, radius * np.sin(angle)))
    return PlacementBatch(positions, np.column_stack((zeros, y, zeros)))


def _phase_batch(i: npt.NDArray[np.int64], ctx: LayoutContext) -> npt.NDArray[np.float64]:
    return (i / ctx.count + ctx.time * PHASE_RATE) * TWO_PI


def _mobius_batch(i: npt.NDArray[np.int64], ctx: LayoutContext) -> PlacementBatch:
    big_radius = 150.0 * ctx.params.spacing
    u = _phase_batch(i, ctx)
    t = (i / ctx.count) * 2.0 - 1.0
    return PlacementBatch(mobius_points(u, t, big_radius), ctx.scene_origin.to_array())


def _klein_batch(i: npt.NDArray[np.int64], ctx: LayoutContext) -> PlacementBatch:
    u = ((i / ctx.count) * 2.0 - 1.0) * pi
    v = ctx.time * 0.5
    scale = 25.0 * ctx.params.spacing
    return PlacementBatch(klein_bottle_points(u, v, scale), ctx.scene_origin.to_array())


def _torus_knot_helix_batch(i: npt.NDArray[np.int64], ctx: LayoutContext) -> PlacementBatch:
    spacing = ctx.params.spacing
    curve = TorusKnotCurve(
        p=ctx.params.knot_p,
        q=ctx.params.knot_q,
        radius=100.0 * spacing,
        tube_radius=40.0 * spacing
    )
    u = _phase_batch(i, ctx)
    frames = build_frames(curve, u, DEFAULT_EPSILON)

    helix_radius = 15.0 * spacing
    helix_angle = ctx.time * 5.0 + (i / ctx.count) * pi * 8.0
    positions = frames.offsets(np.cos(helix_angle) * helix_radius, np.sin(helix_angle) * helix_radius)
    return PlacementBatch(positions, frames.origins, curve_u=u)


BATCH_LAYOUTS: dict[ShapeMode, Callable[[npt.NDArray[np.int64], LayoutContext], PlacementBatch]] = {
    ShapeMode.GRID: _grid_batch,
    ShapeMode.CIRCLE: _circle_batch,
    ShapeMode.SPHERE: _sphere_batch,
    ShapeMode.HELIX: _helix_batch,
    ShapeMode.MOBIUS: _mobius_batch,
    ShapeMode.KLEIN: _klein_batch,
    ShapeMode.TORUS_KNOT_HELIX: _torus_knot_helix_batch,
}


# ==========================================
# PUBLIC API
# ==========================================

def compute_instance(
    index: int,
    count: int,
    shape: ShapeMode,
    params: ShapeParameters,
    time: float,
    data_value: int,
    *,
    camera_position: Vector = ORIGIN,
    scene_origin: Vector = ORIGIN
) -> InstanceTransform:
    """
    Transform and color of a single instance.

    Args:
        index: Instance index, must lie in [0, count).
        count: Total number of instances (the data sequence length).
        shape: Active layout.
        params: Spacing and knot parameters.
        time: Animation clock value. Ignored by static layouts.
        data_value: Data sequence value at `index`, used for the default hue.
        camera_position: Look-at target of the grid layout.
        scene_origin: Look-at target of the circle, sphere, Möbius and Klein layouts.

    Returns:
        InstanceTransform with unit scale.

    Raises:
        IndexError: If `index` is outside [0, count).
    """
    if not 0 <= index < count:
        raise IndexError(f"Instance index {index} outside [0, {count}).")
    ctx = LayoutContext(count, params, time, camera_position, scene_origin)
    return _compute(index, data_value, shape, ctx)


def compute_all(
    data: Sequence[int],
    shape: ShapeMode,
    params: ShapeParameters,
    time: float,
    *,
    camera_position: Vector = ORIGIN,
    scene_origin: Vector = ORIGIN
) -> list[InstanceTransform]:
    """
    Runs one full pass over every index of `data`.

    An empty sequence yields an empty list without touching any formula that
    divides by the count.
    """
    count = len(data)
    if count == 0:
        return []

    ctx = LayoutContext(count, params, time, camera_position, scene_origin)
    return [_compute(i, int(data[i]), shape, ctx) for i in range(count)]


def compute_batch(
    data: npt.ArrayLike,
    shape: ShapeMode,
    params: ShapeParameters,
    time: float,
    *,
    camera_position: Vector = ORIGIN,
    scene_origin: Vector = ORIGIN
) -> InstanceBatch:
    """
    Runs one full pass over every index of `data` with array operations.

    Gives the same transforms and colors as `compute_all`, without building
    per-instance objects, so a pass over tens of thousands of values fits
    in one animation frame.
    """
    values = np.asarray(data, dtype=np.int64)
    count = len(values)
    if count == 0:
        return InstanceBatch(np.empty((0, 4, 4)), np.empty((0, 3)))

    ctx = LayoutContext(count, params, time, camera_position, scene_origin)
    placement = BATCH_LAYOUTS[shape](np.arange(count), ctx)
    rotations = look_at_rotations(placement.positions, placement.targets)
    matrices = compose_transforms(placement.positions, rotations)
    colors = colors_for_indices(values, shape.color_policy, placement.curve_u)
    return InstanceBatch(matrices=matrices, colors=colors)


def _compute(index: int, data_value: int, shape: ShapeMode, ctx: LayoutContext) -> InstanceTransform:
    placement = LAYOUTS[shape](index, ctx)
    rotation = look_at_rotation(placement.position, placement.target)
    matrix = compose_transform(placement.position, rotation)
    color = color_for_index(index, data_value, shape.color_policy, placement.curve_u)
    return InstanceTransform(matrix=matrix, color=color)
