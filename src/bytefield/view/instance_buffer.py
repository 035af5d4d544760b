"""
Instance Buffer
Staging area between the arrangement engine and the renderer.

The engine is the only writer, the renderer the only reader. A full pass is
written, then flagged dirty once; the renderer uploads and clears the flag.
"""
from __future__ import annotations

import logging
from typing import Sequence, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt
    from bytefield.model.arrangements import InstanceTransform

logger = logging.getLogger(__name__)


class InstanceBuffer:
    def __init__(self, count: int = 0) -> None:
        self.matrices: npt.NDArray[np.float64] = np.empty((0, 4, 4), dtype=np.float64)
        self.colors: npt.NDArray[np.float64] = np.empty((0, 3), dtype=np.float64)
        # Rotation of the whole group about the vertical axis, radians
        self.group_rotation: float = 0.0
        self.dirty: bool = False
        self.allocate(count)

    @property
    def count(self) -> int:
        return int(self.matrices.shape[0])

    def allocate(self, count: int) -> None:
        """(Re)allocate storage for `count` instances, identity transforms and white."""
        if count < 0:
            raise ValueError(f"Instance count cannot be negative, got {count}.")
        self.matrices = np.tile(np.eye(4, dtype=np.float64), (count, 1, 1))
        self.colors = np.ones((count, 3), dtype=np.float64)
        self.group_rotation = 0.0
        self.dirty = True
        logger.debug(f"Allocated instance buffer for {count} instances.")

    def set_matrix_at(self, index: int, matrix: npt.NDArray[np.float64]) -> None:
        self.matrices[index] = matrix

    def set_color_at(self, index: int, rgb: Sequence[float]) -> None:
        self.colors[index] = rgb

    def stage(self, instances: Sequence[InstanceTransform]) -> None:
        """
        Write a complete pass into the buffer and mark it dirty.

        Raises:
            ValueError: If the pass does not cover every allocated instance.
        """
        if len(instances) != self.count:
            raise ValueError(
                f"Pass produced {len(instances)} instances for a buffer of {self.count}."
            )
        for i, instance in enumerate(instances):
            self.set_matrix_at(i, instance.matrix)
            self.set_color_at(i, instance.color.to_rgb())
        self.mark_dirty()

    def stage_arrays(self, matrices: npt.ArrayLike, colors: npt.ArrayLike) -> None:
        """
        Write a complete pass given as (N, 4, 4) matrices and (N, 3) RGB colors.

        Raises:
            ValueError: If the arrays do not match the allocated instance count.
        """
        matrices = np.asarray(matrices, dtype=np.float64)
        colors = np.asarray(colors, dtype=np.float64)
        if matrices.shape != self.matrices.shape or colors.shape != self.colors.shape:
            raise ValueError(
                f"Pass of shape {matrices.shape} / {colors.shape} does not fit a buffer of {self.count}."
            )
        self.matrices[:] = matrices
        self.colors[:] = colors
        self.mark_dirty()

    def rotate_group(self, angle: float) -> None:
        """
        Rotate the whole group about the vertical axis.

        Per-instance transforms are untouched, so this does not set the dirty
        flag; the renderer applies `group_rotation` on every frame.
        """
        self.group_rotation += angle

    def mark_dirty(self) -> None:
        self.dirty = True

    def take_dirty(self) -> bool:
        """Return the dirty flag and clear it; the caller must upload if True."""
        was_dirty = self.dirty
        self.dirty = False
        return was_dirty
