"""Axis-aligned world volumes."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..config import WorldConfig


@dataclass(frozen=True, slots=True)
class Box:
    min_x: float
    max_x: float
    min_z: float
    max_z: float
    min_y: float
    max_y: float

    @classmethod
    def from_config(cls, config: WorldConfig) -> "Box":
        return cls(
            min_x=float(config.min_x),
            max_x=float(config.max_x),
            min_z=float(config.min_z),
            max_z=float(config.max_z),
            min_y=float(config.min_y),
            max_y=float(config.max_y),
        )

    @property
    def center(self) -> np.ndarray:
        return np.array(
            [
                0.5 * (self.min_x + self.max_x),
                0.5 * (self.min_y + self.max_y),
                0.5 * (self.min_z + self.max_z),
            ],
            dtype=float,
        )

    def shrink(self, horizontal_m: float, vertical_m: float = 0.0) -> "Box":
        shrunk = Box(
            min_x=self.min_x + horizontal_m,
            max_x=self.max_x - horizontal_m,
            min_z=self.min_z + horizontal_m,
            max_z=self.max_z - horizontal_m,
            min_y=self.min_y + vertical_m,
            max_y=self.max_y - vertical_m,
        )
        if shrunk.min_x > shrunk.max_x or shrunk.min_z > shrunk.max_z or shrunk.min_y > shrunk.max_y:
            raise ValueError(f"Shrinking by ({horizontal_m}, {vertical_m}) leaves an empty volume")
        return shrunk

    def clamp(self, point) -> np.ndarray:
        p = np.asarray(point, dtype=float)
        return np.array(
            [
                np.clip(p[0], self.min_x, self.max_x),
                np.clip(p[1], self.min_y, self.max_y),
                np.clip(p[2], self.min_z, self.max_z),
            ],
            dtype=float,
        )

    def contains(self, point, tol: float = 0.0) -> bool:
        p = np.asarray(point, dtype=float)
        return bool(
            self.min_x - tol <= p[0] <= self.max_x + tol
            and self.min_y - tol <= p[1] <= self.max_y + tol
            and self.min_z - tol <= p[2] <= self.max_z + tol
        )

    def contains_horizontal(self, point) -> bool:
        p = np.asarray(point, dtype=float)
        return bool(self.min_x <= p[0] <= self.max_x and self.min_z <= p[2] <= self.max_z)

    def horizontal_face_distances(self, point) -> np.ndarray:
        """Signed distances to the ``minX, maxX, minZ, maxZ`` faces (negative outside)."""
        p = np.asarray(point, dtype=float)
        return np.array(
            [p[0] - self.min_x, self.max_x - p[0], p[2] - self.min_z, self.max_z - p[2]],
            dtype=float,
        )
