"""Per-agent flight state."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

import numpy as np


class FlightMode(enum.Enum):
    CRUISING = "cruising"
    CORRECTING = "correcting"


class HealthState(enum.Enum):
    VALID = "valid"
    RECOVERING = "recovering"


@dataclass(slots=True)
class Controls:
    pitch: float = 0.0
    yaw: float = 0.0
    throttle: float = 0.7


def _zeros() -> np.ndarray:
    return np.zeros(3, dtype=float)


@dataclass(slots=True)
class AgentState:
    """Mutable kinematic and behavioural state of one agent.

    ``orientation`` holds ``(yaw, pitch, roll)`` in radians. ``turn_rate``
    multiplies the steering response and relaxes towards
    ``baseline_turn_rate`` when no boundary pressure is applied.
    """

    position: np.ndarray = field(default_factory=_zeros)
    velocity: np.ndarray = field(default_factory=_zeros)
    acceleration: np.ndarray = field(default_factory=_zeros)
    orientation: np.ndarray = field(default_factory=_zeros)
    controls: Controls = field(default_factory=Controls)
    target: np.ndarray = field(default_factory=_zeros)
    turn_rate: float = 1.0
    baseline_turn_rate: float = 1.0
    target_timer: float = 5.0
    target_interval: float = 5.0
    out_of_bounds: bool = False
    retarget_pending: bool = False

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    def copy(self) -> "AgentState":
        return AgentState(
            position=np.array(self.position, dtype=float),
            velocity=np.array(self.velocity, dtype=float),
            acceleration=np.array(self.acceleration, dtype=float),
            orientation=np.array(self.orientation, dtype=float),
            controls=Controls(self.controls.pitch, self.controls.yaw, self.controls.throttle),
            target=np.array(self.target, dtype=float),
            turn_rate=float(self.turn_rate),
            baseline_turn_rate=float(self.baseline_turn_rate),
            target_timer=float(self.target_timer),
            target_interval=float(self.target_interval),
            out_of_bounds=bool(self.out_of_bounds),
            retarget_pending=bool(self.retarget_pending),
        )


@dataclass(frozen=True, slots=True)
class Transform:
    """Renderer-facing snapshot of one agent."""

    agent_id: int
    position: np.ndarray
    orientation: np.ndarray
