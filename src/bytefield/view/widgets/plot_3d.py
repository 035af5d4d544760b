"""
3D Visualization Widget (PyVista Wrapper) - Instance Field Rendering
"""

from __future__ import annotations

from math import degrees
from typing import Optional

import logging

from PySide6.QtWidgets import QWidget, QVBoxLayout

from pyvistaqt import QtInteractor
import pyvista as pv

from bytefield import config
from bytefield.model.geometry_primitives import Vector
from bytefield.view.instance_buffer import InstanceBuffer
from bytefield.view.widgets.instance_geometry import ObjectType, create_instance_mesh
from bytefield.view.widgets.vtk_utils import RGB_ARRAY_NAME, VtkUtils

logger = logging.getLogger(__name__)


class PyVistaWidget(QWidget):
    def __init__(self, buffer: InstanceBuffer, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)

        self.layout_box: QVBoxLayout = QVBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter)

        self._init_plotter()

        self._vtk_utils = VtkUtils()
        self.buffer: InstanceBuffer = buffer

        # --- Actors state ---
        self._field_actor: Optional[pv.Actor] = None
        self._field_mesh: Optional[pv.PolyData] = None

        # --- Data cache ---
        self._object_type: ObjectType = ObjectType.CUBE
        self._base_mesh: pv.PolyData = create_instance_mesh(self._object_type)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def camera_position(self) -> Vector:
        """Current position of the interactive camera, after any user orbiting."""
        return Vector.from_array(self.plotter.camera.position)

    def set_object_type(self, object_type: ObjectType) -> None:
        """Swap the shared instance mesh. Transforms and colors are kept."""
        if object_type is self._object_type:
            return
        logger.info(f"Switching instance mesh to {object_type.value}.")
        self._object_type = object_type
        self._base_mesh = create_instance_mesh(object_type)
        self._clear_field()
        self.buffer.mark_dirty()

    def sync(self) -> None:
        """
        Upload the buffer if it is dirty, apply the group rotation and render.
        Called once per frame and after every synchronous recompute.
        """
        if self.buffer.take_dirty():
            self._upload()

        if self._field_actor is not None:
            self._field_actor.orientation = (0.0, degrees(self.buffer.group_rotation), 0.0)

        self.plotter.render()

    # ------------------------------------------------------------------------------
    # Internal: Layer Management
    # ------------------------------------------------------------------------------

    def _upload(self) -> None:
        matrices = self.buffer.matrices
        colors = self.buffer.colors

        if matrices.shape[0] == 0:
            self._clear_field()
            return

        try:
            expected_points = matrices.shape[0] * self._base_mesh.n_points
            if self._field_mesh is not None and self._field_mesh.n_points == expected_points:
                # Update existing data in-place to prevent blinking
                self._vtk_utils.update_field(self._field_mesh, self._base_mesh, matrices, colors)
                return

            self._clear_field()
            self._field_mesh = self._vtk_utils.build_field(self._base_mesh, matrices, colors)
            self._field_actor = self.plotter.add_mesh(
                self._field_mesh,
                scalars=RGB_ARRAY_NAME,
                rgb=True,
                specular=0.3,
                show_scalar_bar=False,
                reset_camera=False,
                pickable=False,
            )
            logger.debug(f"Field actor rebuilt with {matrices.shape[0]} instances.")
        except Exception as e:
            logger.exception(f"Failed to upload instance field: {e}")

    def _clear_field(self) -> None:
        if self._field_actor is not None:
            self.plotter.remove_actor(self._field_actor, render=False)
        self._field_actor = None
        self._field_mesh = None

    # ------------------------------------------------------------------------------
    # Internal: Setup
    # ------------------------------------------------------------------------------

    def _init_plotter(self) -> None:
        self.plotter.set_background(config.BACKGROUND_COLOR)
        self.plotter.remove_all_lights()
        self.plotter.add_light(pv.Light(light_type="headlight", intensity=0.7))
        self.plotter.add_light(pv.Light(position=(5.0, 10.0, 7.5), focal_point=(0.0, 0.0, 0.0),
                                        light_type="scene light", intensity=1.0))

        camera = self.plotter.camera
        camera.position = config.CAMERA_POSITION.to_array().tolist()
        camera.focal_point = config.SCENE_ORIGIN.to_array().tolist()
        camera.up = (0.0, 1.0, 0.0)
        camera.view_angle = config.CAMERA_VIEW_ANGLE
        camera.clipping_range = (1.0, 20000.0)
