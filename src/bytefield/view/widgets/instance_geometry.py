"""
Instance Geometry
Base meshes shared by every instance of the field.
"""
from __future__ import annotations

from enum import Enum
import logging
from math import pi

import numpy as np
import pyvista as pv

from bytefield import config
from bytefield.model.curves import helix_point, torus_knot_point

logger = logging.getLogger(__name__)


class ObjectType(Enum):
    CUBE = "cube"
    SPHERE = "sphere"
    TETRAHEDRON = "tetrahedron"
    OCTAHEDRON = "octahedron"
    DODECAHEDRON = "dodecahedron"
    ICOSAHEDRON = "icosahedron"
    RECURSIVE_KNOT = "recursive-knot"
    RECURSIVE_HELIX = "recursive-helix"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()


def _tube(points: np.ndarray, radius: float, n_sides: int, closed: bool) -> pv.PolyData:
    """Sweep a tube of `radius` along a smooth spline through `points`."""
    if closed:
        points = np.vstack([points, points[0]])
    spline = pv.Spline(points, n_points=len(points) * 2)
    return spline.tube(radius=radius, n_sides=n_sides).triangulate()


def recursive_knot_mesh() -> pv.PolyData:
    """A small (2, 3) torus knot tube, used as a glyph in its own right."""
    p, q, radius, tube_radius = 2, 3, 1.0, 0.4
    n_points = 128
    points = np.array([
        torus_knot_point((i / n_points) * 2.0 * pi, p, q, radius, tube_radius).to_array()
        for i in range(n_points)
    ])
    return _tube(points, radius=0.1, n_sides=8, closed=True)


def recursive_helix_mesh() -> pv.PolyData:
    """A small three-turn helix tube."""
    n_points = 64
    points = np.array([
        helix_point(i / n_points, turns=3, radius=1.0, length=5.0).to_array()
        for i in range(n_points)
    ])
    return _tube(points, radius=0.1, n_sides=5, closed=False)


def create_instance_mesh(object_type: ObjectType, size: float = config.OBJECT_SIZE) -> pv.PolyData:
    """
    Build the base mesh for one object type, centred on the origin.

    Returns:
        A triangulated PolyData.
    """
    if object_type is ObjectType.SPHERE:
        mesh = pv.Sphere(radius=size * 0.7, theta_resolution=8, phi_resolution=8)
    elif object_type is ObjectType.TETRAHEDRON:
        mesh = pv.Tetrahedron(radius=size)
    elif object_type is ObjectType.OCTAHEDRON:
        mesh = pv.Octahedron(radius=size)
    elif object_type is ObjectType.DODECAHEDRON:
        mesh = pv.Dodecahedron(radius=size)
    elif object_type is ObjectType.ICOSAHEDRON:
        mesh = pv.Icosahedron(radius=size)
    elif object_type is ObjectType.RECURSIVE_KNOT:
        mesh = recursive_knot_mesh()
    elif object_type is ObjectType.RECURSIVE_HELIX:
        mesh = recursive_helix_mesh()
    else:  # ObjectType.CUBE
        mesh = pv.Cube(x_length=size, y_length=size, z_length=size)

    mesh = mesh.triangulate()
    logger.debug(f"Built {object_type.value} mesh with {mesh.n_points} points.")
    return mesh
