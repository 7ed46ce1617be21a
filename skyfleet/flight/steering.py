"""Pitch/yaw steering towards the current target."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..config import SteeringConfig
from ..core.vectors import UP, forward_vector, horizontal, safe_normalize
from .state import AgentState


@dataclass(frozen=True, slots=True)
class SteeringCommand:
    pitch: float = 0.0
    yaw: float = 0.0
    target_reached: bool = False
    degenerate: bool = False


def _finite_or_zero(x: float) -> float:
    return float(x) if np.isfinite(x) else 0.0


class Steerer:
    """Turns heading error into bounded pitch/yaw control signals.

    Yaw sign normally comes from the vertical component of
    ``forward_xz x target_xz``. When the two are (anti)parallel that component
    vanishes, so the sign falls back to the alignment of the target with the
    airframe's lateral axis and finally to a fixed tie-break; a 180 degree
    error therefore always produces a turn.
    """

    def __init__(self, config: SteeringConfig):
        self.config = config

    def _yaw_sign(self, forward: np.ndarray, to_target: np.ndarray, fxz: np.ndarray, txz: np.ndarray) -> tuple[float, bool]:
        eps = float(self.config.parallel_epsilon)
        cross_y = float(np.cross(fxz, txz)[1])
        if abs(cross_y) > eps:
            return float(np.sign(cross_y)), False

        if float(np.dot(fxz, txz)) > 0.0:
            return 0.0, True

        lateral, ok = safe_normalize(np.cross(UP, forward))
        if ok:
            alignment = float(np.dot(lateral, to_target))
            if abs(alignment) > eps:
                return float(np.sign(alignment)), True
        return float(np.sign(self.config.antiparallel_yaw_sign) or 1.0), True

    def compute_controls(self, state: AgentState) -> SteeringCommand:
        cfg = self.config
        delta = np.asarray(state.target, dtype=float) - np.asarray(state.position, dtype=float)
        distance = float(np.linalg.norm(delta))
        if not np.isfinite(distance):
            return SteeringCommand()
        if distance < float(cfg.arrival_epsilon):
            return SteeringCommand(target_reached=True)
        to_target = delta / distance

        forward = forward_vector(state.orientation)
        turn_rate = float(state.turn_rate)

        pitch = _finite_or_zero(np.clip((to_target[1] - forward[1]) * turn_rate, -1.0, 1.0))

        fxz, f_ok = safe_normalize(horizontal(forward))
        txz, t_ok = safe_normalize(horizontal(to_target))
        if not (f_ok and t_ok):
            # Target straight above or below: nothing to yaw towards.
            return SteeringCommand(pitch=pitch, yaw=0.0, degenerate=True)

        sign, degenerate = self._yaw_sign(forward, to_target, fxz, txz)
        angle = float(np.arccos(np.clip(np.dot(fxz, txz), -1.0, 1.0)))
        yaw = sign * angle * float(cfg.yaw_gain) * turn_rate
        yaw = _finite_or_zero(np.clip(yaw, -1.0, 1.0))
        return SteeringCommand(pitch=pitch, yaw=yaw, degenerate=degenerate)
