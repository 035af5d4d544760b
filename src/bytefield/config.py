"""
Configuration & Defaults
========================
This module serves as the central registry for scene constants and control defaults.

Why is this file needed?
------------------------
1. Abstraction: It keeps scene constants (camera, frame rate, slider ranges)
   out of the widgets and the engine.
2. Single source: the engine defaults, the widgets and the tests all read
   the same values.

Exports:
    CAMERA_POSITION, SCENE_ORIGIN: Look-at inputs of the arrangement engine.
    FRAME_INTERVAL_MS: Period of the animation timer.
    *_RANGE, DEFAULT_*: Limits and defaults of the user controls.
"""
from bytefield.model.arrangements import ShapeMode
from bytefield.model.geometry_primitives import Vector


APP_NAME: str = "Bytefield"

# Scene
CAMERA_POSITION: Vector = Vector(0.0, 50.0, 600.0)
SCENE_ORIGIN: Vector = Vector(0.0, 0.0, 0.0)
CAMERA_VIEW_ANGLE: float = 50.0
BACKGROUND_COLOR: str = "#111111"

# Animation
FRAME_INTERVAL_MS: int = 16
# Radians per real second (times the speed multiplier) for static layouts
GROUP_ROTATION_RATE: float = 0.05

# Instances
OBJECT_SIZE: float = 5.0

# Controls: (minimum, maximum)
SPACING_RANGE: tuple[float, float] = (0.1, 5.0)
SPEED_RANGE: tuple[float, float] = (0.0, 5.0)
KNOT_RANGE: tuple[int, int] = (1, 10)

DEFAULT_SHAPE: ShapeMode = ShapeMode.GRID
DEFAULT_SPACING: float = 1.0
DEFAULT_SPEED: float = 1.0
DEFAULT_KNOT_P: int = 2
DEFAULT_KNOT_Q: int = 3

DEFAULT_ENCODING: str = "utf-8"
