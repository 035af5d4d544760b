"""
Engine State (Data Model)
=========================
This module defines the central data structure for the running visualizer.

Why is this file needed?
------------------------
1. State Management: It holds the loaded data, the active shape, the shape
   parameters and the animation clock in one place.
2. Ownership: A new dataset is handed over through `replace_data`; nothing
   else mutates the sequence.
3. Decoupling: The view reads from this object; the animation driver writes
   to it.

Classes:
    DataSequence: Immutable sequence of data values.
    AnimationClock: Application time decoupled from wall-clock time.
    EngineState: The main container class.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterator, Optional, TYPE_CHECKING, overload

import numpy as np

from bytefield import config
from bytefield.model.arrangements import ShapeMode, ShapeParameters
from bytefield.model.geometry_primitives import Vector

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class DataSequence:
    """
    Ordered, fixed-length, read-only sequence of integer values.

    Text is stored as Unicode code points, binary data as byte values.
    """

    def __init__(self, values: npt.ArrayLike, source: Optional[str] = None) -> None:
        arr = np.array(values, dtype=np.int64).reshape(-1)
        arr.setflags(write=False)
        self._values = arr
        self.source = source

    @classmethod
    def from_text(cls, text: str, source: Optional[str] = None) -> DataSequence:
        return cls(np.fromiter((ord(c) for c in text), dtype=np.int64, count=len(text)), source)

    @classmethod
    def from_bytes(cls, data: bytes, source: Optional[str] = None) -> DataSequence:
        return cls(np.frombuffer(data, dtype=np.uint8), source)

    @classmethod
    def empty(cls) -> DataSequence:
        return cls(np.empty(0, dtype=np.int64))

    @property
    def values(self) -> npt.NDArray[np.int64]:
        return self._values

    def __len__(self) -> int:
        return int(self._values.shape[0])

    @overload
    def __getitem__(self, index: int) -> int: ...
    @overload
    def __getitem__(self, index: slice) -> DataSequence: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return DataSequence(self._values[index], self.source)
        if not -len(self) <= index < len(self):
            raise IndexError(f"Data index {index} outside sequence of length {len(self)}.")
        return int(self._values[index])

    def __iter__(self) -> Iterator[int]:
        return (int(v) for v in self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataSequence):
            return NotImplemented
        return np.array_equal(self._values, other._values)

    def __repr__(self) -> str:
        return f"DataSequence(len={len(self)}, source={self.source!r})"


@dataclass
class AnimationClock:
    """
    Custom animation time.

    `elapsed` grows by `real_delta * speed` on every advance and never
    decreases. A speed of zero freezes animated layouts.
    """
    elapsed: float = 0.0
    speed: float = config.DEFAULT_SPEED

    def __post_init__(self) -> None:
        if self.elapsed < 0.0:
            raise ValueError(f"Elapsed time cannot be negative, got {self.elapsed}.")
        self.set_speed(self.speed)

    def set_speed(self, speed: float) -> None:
        if speed < 0.0:
            raise ValueError(f"Speed multiplier cannot be negative, got {speed}.")
        self.speed = speed

    def advance(self, real_delta: float) -> float:
        """Advance by a real time step in seconds and return the scaled step."""
        if real_delta < 0.0:
            raise ValueError(f"Real time delta cannot be negative, got {real_delta}.")
        step = real_delta * self.speed
        self.elapsed += step
        return step


@dataclass
class EngineState:
    """
    Holds everything one arrangement pass needs.
    Pass this instance to the animation driver and the views.
    """
    data: DataSequence = field(default_factory=DataSequence.empty)
    shape: ShapeMode = config.DEFAULT_SHAPE
    params: ShapeParameters = field(default_factory=ShapeParameters)
    clock: AnimationClock = field(default_factory=AnimationClock)

    # Grid look-at target; the driver refreshes it from the renderer before each pass
    camera_position: Vector = config.CAMERA_POSITION
    scene_origin: Vector = config.SCENE_ORIGIN

    @property
    def count(self) -> int:
        return len(self.data)

    @property
    def has_data(self) -> bool:
        return self.count > 0

    def replace_data(self, data: DataSequence) -> None:
        """Take ownership of a new dataset. The clock keeps running."""
        logger.info(f"Replacing dataset ({self.count} -> {len(data)} values).")
        self.data = data

    def reset(self) -> None:
        """Clear all data for a fresh session."""
        self.data = DataSequence.empty()
        self.shape = config.DEFAULT_SHAPE
        self.params = ShapeParameters()
        self.clock = AnimationClock()
        logger.info("Engine state has been reset.")
