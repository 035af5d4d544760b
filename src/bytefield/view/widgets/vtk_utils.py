"""
VTK and Geometry Utilities
Helper functions for replicating a base mesh into an instance field.
"""
from __future__ import annotations

import numpy as np
import numpy.typing as npt
import pyvista as pv

import logging

logger = logging.getLogger(__name__)

RGB_ARRAY_NAME = "rgb"


class VtkUtils:
    @staticmethod
    def face_connectivity(base: pv.PolyData) -> npt.NDArray[np.int_]:
        """
        Returns the flat face array [n, id0, ..., id(n-1), n, ...] of a triangulated mesh.

        Raises:
            ValueError: If the mesh is not made of triangles only.
        """
        faces = np.asarray(base.faces, dtype=np.int_)
        if faces.size % 4 != 0 or np.any(faces.reshape(-1, 4)[:, 0] != 3):
            raise ValueError("Base mesh must be triangulated.")
        return faces

    @staticmethod
    def tile_faces(faces: npt.NDArray[np.int_], n_points: int, count: int) -> npt.NDArray[np.int_]:
        """
        Repeat a triangle face array `count` times, offsetting point ids per copy.

        Args:
            faces: Flat triangle face array of the base mesh.
            n_points: Number of points in the base mesh.
            count: Number of copies.
        """
        tri = faces.reshape(-1, 4)
        offsets = (np.arange(count, dtype=np.int_) * n_points)[:, None, None]
        tiled = np.broadcast_to(tri, (count,) + tri.shape).copy()
        tiled[:, :, 1:] += offsets
        return tiled.reshape(-1)

    @staticmethod
    def transform_points(
        base_points: npt.NDArray[np.float64],
        matrices: npt.NDArray[np.float64]
    ) -> npt.NDArray[np.float64]:
        """
        Apply every (4, 4) matrix to every base point.

        Args:
            base_points: (M, 3) array.
            matrices: (N, 4, 4) array.

        Returns:
            (N * M, 3) array, instance-major.
        """
        rot = matrices[:, :3, :3]
        trans = matrices[:, :3, 3]
        pts = np.einsum("nij,mj->nmi", rot, base_points) + trans[:, None, :]
        return pts.reshape(-1, 3)

    def build_field(
        self,
        base: pv.PolyData,
        matrices: npt.NDArray[np.float64],
        colors: npt.NDArray[np.float64]
    ) -> pv.PolyData:
        """
        Merge `len(matrices)` transformed copies of `base` into a single PolyData
        carrying an (N * M, 3) uint8 RGB point array.
        """
        count = matrices.shape[0]
        if count == 0:
            return pv.PolyData()

        base_points = np.asarray(base.points, dtype=np.float64)
        faces = self.face_connectivity(base)

        field = pv.PolyData(
            self.transform_points(base_points, matrices),
            self.tile_faces(faces, base_points.shape[0], count)
        )
        field.point_data[RGB_ARRAY_NAME] = self.expand_colors(colors, base_points.shape[0])
        return field

    def update_field(
        self,
        field: pv.PolyData,
        base: pv.PolyData,
        matrices: npt.NDArray[np.float64],
        colors: npt.NDArray[np.float64]
    ) -> None:
        """Update points and colors of an existing field in place (same instance count)."""
        base_points = np.asarray(base.points, dtype=np.float64)
        field.points = self.transform_points(base_points, matrices)
        field.point_data[RGB_ARRAY_NAME] = self.expand_colors(colors, base_points.shape[0])

    @staticmethod
    def expand_colors(colors: npt.NDArray[np.float64], n_points: int) -> npt.NDArray[np.uint8]:
        """Per-instance [0, 1] RGB -> per-point 0..255 RGB."""
        rgb = np.clip(np.rint(colors * 255.0), 0, 255).astype(np.uint8)
        return np.repeat(rgb, n_points, axis=0)
