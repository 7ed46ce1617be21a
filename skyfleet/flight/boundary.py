"""World-boundary detection and graduated avoidance."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from ..config import BoundaryConfig, SteeringConfig
from ..core.bounds import Box
from .planner import TargetPlanner
from .state import AgentState

logger = logging.getLogger(__name__)

LEVEL_NONE = 0
LEVEL_URGENT = 1
LEVEL_STRONG = 2
LEVEL_WARNING = 3


@dataclass(slots=True)
class BoundaryReport:
    level: int = LEVEL_NONE
    bounced_axes: list[str] = field(default_factory=list)
    nearest_face_distance: float = float("inf")

    @property
    def bounced(self) -> bool:
        return bool(self.bounced_axes)

    @property
    def escalated(self) -> bool:
        return self.level != LEVEL_NONE or self.bounced


class BoundaryGuard:
    """Keeps agents inside the world box.

    Horizontal faces are handled first: a hard violation clamps the position
    just inside the face and reflects the offending velocity component with
    damping. The distance to the nearest face then selects one of three
    urgency levels (fractions of ``margin``). Altitude is clamped last with
    its own bounce and an altitude-biased target.
    """

    def __init__(self, config: BoundaryConfig, steering: SteeringConfig, world: Box, safe_volume: Box):
        self.config = config
        self.steering = steering
        self.world = world
        self.safe_volume = safe_volume

    def _bounce_axis(self, state: AgentState, axis: int, lo: float, hi: float, inset: float) -> str | None:
        damping = float(self.config.bounce_damping)
        value = float(state.position[axis])
        if value < lo:
            state.position[axis] = lo + inset
            state.velocity[axis] = abs(float(state.velocity[axis])) * damping
            return "min"
        if value > hi:
            state.position[axis] = hi - inset
            state.velocity[axis] = -abs(float(state.velocity[axis])) * damping
            return "max"
        return None

    def _bias_toward_center(self, target: np.ndarray) -> np.ndarray:
        center = self.world.center
        keep = 1.0 - float(self.config.level2_center_bias)
        biased = np.array(target, dtype=float)
        biased[0] = center[0] + (biased[0] - center[0]) * keep
        biased[2] = center[2] + (biased[2] - center[2]) * keep
        return biased

    def check(self, state: AgentState, planner: TargetPlanner) -> BoundaryReport:
        cfg = self.config
        world = self.world
        report = BoundaryReport()
        state.position = np.array(state.position, dtype=float)
        state.velocity = np.array(state.velocity, dtype=float)

        for axis, name, lo, hi in ((0, "x", world.min_x, world.max_x), (2, "z", world.min_z, world.max_z)):
            side = self._bounce_axis(state, axis, lo, hi, float(cfg.hard_inset))
            if side is not None:
                report.bounced_axes.append(f"{side}_{name}")

        distances = world.horizontal_face_distances(state.position)
        nearest = float(np.min(distances))
        report.nearest_face_distance = nearest
        margin = float(cfg.margin)

        if nearest < cfg.level1_fraction * margin:
            report.level = LEVEL_URGENT
            center = world.center
            state.target = self.safe_volume.clamp([center[0], state.position[1], center[2]])
            state.turn_rate = float(self.steering.max_turn_rate)
            state.retarget_pending = True
        elif nearest < cfg.level2_fraction * margin:
            report.level = LEVEL_STRONG
            planner.retarget(state)
            state.target = self.safe_volume.clamp(self._bias_toward_center(state.target))
            state.turn_rate = max(float(state.turn_rate), float(cfg.level2_turn_rate))
        elif nearest < margin:
            report.level = LEVEL_WARNING
            planner.retarget(state)
        elif report.bounced:
            planner.retarget(state)

        side = self._bounce_axis(state, 1, world.min_y, world.max_y, float(cfg.altitude_inset))
        if side is not None:
            report.bounced_axes.append(f"{side}_y")
            target = np.array(state.target, dtype=float)
            if side == "min":
                target[1] = world.min_y + float(cfg.altitude_target_offset)
            else:
                target[1] = world.max_y - float(cfg.altitude_target_offset)
            state.target = self.safe_volume.clamp(target)

        state.turn_rate = float(np.clip(state.turn_rate, self.steering.min_turn_rate, self.steering.max_turn_rate))
        state.out_of_bounds = report.bounced or not world.contains(state.position)
        if report.bounced:
            logger.debug("Hard boundary bounce on %s", ", ".join(report.bounced_axes))
        return report
