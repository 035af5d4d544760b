"""
Animation Driver
================
Owns the per-frame update of the instance field.

Why is this file needed?
------------------------
1. Regimes: Static layouts are computed once and then only spun slowly as a
   group; animated layouts are recomputed in full on every frame.
2. Single entry points: The frame timer calls `tick`, the UI calls
   `recompute` (through the `set_*` helpers). Both run a complete pass
   synchronously; there is no partial or deferred work.

Classes:
    AnimationDriver: Advances the clock and feeds the instance buffer.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from bytefield import config
from bytefield.model.arrangements import ShapeMode, ShapeParameters, compute_batch
from bytefield.model.geometry_primitives import Vector
from bytefield.model.state import DataSequence, EngineState
from bytefield.view.instance_buffer import InstanceBuffer

logger = logging.getLogger(__name__)


class AnimationDriver:
    def __init__(
        self,
        state: EngineState,
        buffer: Optional[InstanceBuffer] = None,
        camera_provider: Optional[Callable[[], Vector]] = None
    ) -> None:
        self.state = state
        self.buffer = buffer if buffer is not None else InstanceBuffer(state.count)
        # Live camera position of the renderer, read before every pass
        self.camera_provider = camera_provider
        self.passes: int = 0

    # ------------------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------------------

    def tick(self, real_delta: float) -> None:
        """
        Advance one frame.

        Args:
            real_delta: Wall-clock seconds since the previous frame.
        """
        self.state.clock.advance(real_delta)

        if not self.state.has_data:
            return

        if self.state.shape.is_animated:
            self.recompute()
        else:
            self.buffer.rotate_group(real_delta * config.GROUP_ROTATION_RATE * self.state.clock.speed)

    def recompute(
        self,
        shape: Optional[ShapeMode] = None,
        params: Optional[ShapeParameters] = None,
        time: Optional[float] = None
    ) -> None:
        """
        Fully repopulate the instance buffer.

        Arguments left as None are taken from the engine state. The group
        rotation is reset, so a static layout always starts facing forward.
        """
        shape = shape if shape is not None else self.state.shape
        params = params if params is not None else self.state.params
        time = time if time is not None else self.state.clock.elapsed

        if self.buffer.count != self.state.count:
            self.buffer.allocate(self.state.count)

        self.buffer.group_rotation = 0.0
        if not self.state.has_data:
            return

        if self.camera_provider is not None:
            self.state.camera_position = self.camera_provider()

        batch = compute_batch(
            self.state.data.values,
            shape,
            params,
            time,
            camera_position=self.state.camera_position,
            scene_origin=self.state.scene_origin
        )
        self.buffer.stage_arrays(batch.matrices, batch.colors)
        self.passes += 1

    # ------------------------------------------------------------------------------
    # State changes (each triggers a synchronous pass)
    # ------------------------------------------------------------------------------

    def load_data(self, data: DataSequence) -> None:
        """Hand over a new dataset. The clock keeps its value."""
        self.state.replace_data(data)
        self.buffer.allocate(self.state.count)
        self.recompute()
        logger.info(f"{self.state.count} data points rendered.")

    def set_shape(self, shape: ShapeMode) -> None:
        logger.debug(f"Shape changed to {shape.value}.")
        self.state.shape = shape
        self.recompute()

    def set_parameters(self, params: ShapeParameters) -> None:
        logger.debug(f"Parameters changed to {params}.")
        self.state.params = params
        self.recompute()

    def set_speed(self, speed: float) -> None:
        """Change the speed multiplier. Takes effect from the next tick."""
        self.state.clock.set_speed(speed)
