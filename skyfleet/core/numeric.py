"""Validation and in-place repair of non-finite agent state.

Nothing in here raises on bad numbers. Every repair substitutes a documented
default and reports which field was touched; repairing an already valid
state changes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from ..config import ExperimentConfig
from .bounds import Box
from .vectors import forward_vector, is_finite_vector

if TYPE_CHECKING:
    from ..flight.state import AgentState, Controls

logger = logging.getLogger(__name__)

DEFAULT_VELOCITY = np.array([0.0, 0.0, 30.0], dtype=float)
DEFAULT_ACCELERATION = np.zeros(3, dtype=float)
DEFAULT_ORIENTATION = np.zeros(3, dtype=float)


def repair_vector(value, default) -> tuple[np.ndarray, bool]:
    if value is not None and is_finite_vector(value):
        return np.asarray(value, dtype=float), False
    return np.array(default, dtype=float), True


def repair_scalar(value, default: float, lo: float, hi: float) -> tuple[float, bool]:
    try:
        x = float(value)
    except (TypeError, ValueError):
        return float(default), True
    if not np.isfinite(x):
        return float(default), True
    return float(min(max(x, lo), hi)), False


def repair_controls(controls: "Controls", default_throttle: float = 0.7) -> list[str]:
    repaired = []
    pitch, bad = repair_scalar(controls.pitch, 0.0, -1.0, 1.0)
    if bad:
        repaired.append("controls.pitch")
    yaw, bad = repair_scalar(controls.yaw, 0.0, -1.0, 1.0)
    if bad:
        repaired.append("controls.yaw")
    throttle, bad = repair_scalar(controls.throttle, default_throttle, 0.0, 1.0)
    if bad:
        repaired.append("controls.throttle")
    controls.pitch = pitch
    controls.yaw = yaw
    controls.throttle = throttle
    return repaired


@dataclass(slots=True)
class RepairReport:
    repaired: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.repaired

    def __len__(self) -> int:
        return len(self.repaired)


class NumericGuard:
    """Keeps an ``AgentState`` finite and inside its scalar ranges."""

    def __init__(self, config: ExperimentConfig, world: Box, safe_volume: Box):
        self.config = config
        self.world = world
        self.safe_volume = safe_volume
        center = world.center
        safe_alt = min(world.min_y + float(config.spawn.safe_altitude_offset), world.max_y)
        self.safe_position = np.array([center[0], safe_alt, center[2]], dtype=float)

    def repair_target(self, state: "AgentState") -> bool:
        """Fix an invalid target, then clamp it into the safe volume.

        An invalid target becomes a point ``fallback_target_distance`` ahead
        of the nose. Position and orientation must already be finite.
        """
        repaired = False
        target = state.target
        if not is_finite_vector(target):
            forward = forward_vector(state.orientation)
            target = state.position + forward * float(self.config.planner.fallback_target_distance)
            repaired = True
        state.target = self.safe_volume.clamp(target)
        return repaired

    def validate(self, state: "AgentState", label: str | int | None = None) -> RepairReport:
        report = RepairReport()

        state.position, bad = repair_vector(state.position, self.safe_position)
        if bad:
            report.repaired.append("position")
        state.velocity, bad = repair_vector(state.velocity, DEFAULT_VELOCITY)
        if bad:
            report.repaired.append("velocity")
        state.acceleration, bad = repair_vector(state.acceleration, DEFAULT_ACCELERATION)
        if bad:
            report.repaired.append("acceleration")
        state.orientation, bad = repair_vector(state.orientation, DEFAULT_ORIENTATION)
        if bad:
            report.repaired.append("orientation")

        report.repaired.extend(repair_controls(state.controls, self.config.flight.cruise_throttle))

        if self.repair_target(state):
            report.repaired.append("target")

        steer_cfg = self.config.steering
        planner_cfg = self.config.planner
        state.baseline_turn_rate, bad = repair_scalar(
            state.baseline_turn_rate,
            planner_cfg.baseline_turn_rate_min,
            planner_cfg.baseline_turn_rate_min,
            planner_cfg.baseline_turn_rate_max,
        )
        if bad:
            report.repaired.append("baseline_turn_rate")
        state.turn_rate, bad = repair_scalar(
            state.turn_rate,
            state.baseline_turn_rate,
            steer_cfg.min_turn_rate,
            steer_cfg.max_turn_rate,
        )
        if bad:
            report.repaired.append("turn_rate")

        state.target_interval, bad = repair_scalar(
            state.target_interval,
            planner_cfg.retarget_interval_min_s,
            planner_cfg.retarget_interval_min_s,
            planner_cfg.retarget_interval_max_s,
        )
        if bad:
            report.repaired.append("target_interval")
        state.target_timer, bad = repair_scalar(
            state.target_timer,
            state.target_interval,
            -np.inf,
            planner_cfg.retarget_interval_max_s,
        )
        if bad:
            report.repaired.append("target_timer")

        if report.repaired:
            logger.warning("Non-finite state repaired on agent %s: %s", label, ", ".join(report.repaired))
        return report
