from dataclasses import dataclass
from typing import Sequence

import numpy as np

from flight_types import TrajectoryPoint


@dataclass
class ThreeDBody:
    """Array view of a flight path (meters, seconds) for numpy consumers."""

    name: str
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    t: np.ndarray
    spin: np.ndarray

    @classmethod
    def from_points(cls, points: Sequence[TrajectoryPoint], name: str = "golf_ball") -> "ThreeDBody":
        if not points:
            raise ValueError("cannot build a body from an empty trajectory")
        return cls(
            name=name,
            x=np.array([p.position.x for p in points]),
            y=np.array([p.position.y for p in points]),
            z=np.array([p.position.z for p in points]),
            t=np.array([p.time for p in points]),
            spin=np.array([p.spin for p in points]),
        )

    def apex_index(self) -> int:
        return int(np.argmax(self.y))

    def horizontal_range(self) -> np.ndarray:
        """Horizontal distance from the first sample, per sample."""
        return np.hypot(self.x - self.x[0], self.z - self.z[0])
