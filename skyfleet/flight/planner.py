"""Wandering target selection inside the safe sub-volume."""

from __future__ import annotations

import numpy as np

from ..config import PlannerConfig, SteeringConfig
from ..core.bounds import Box
from .state import AgentState


class TargetPlanner:
    """Picks the next point an agent flies towards.

    Policy, first match wins:

    1. Outside the safe volume: head for the midpoint between the agent and
       the world centre and boost the turn rate.
    2. Otherwise a uniform draw in the safe box, occasionally pulled towards
       the centre or replaced by a long excursion from the current position,
       with a fresh baseline turn rate.

    Every result is clamped into the safe volume last; that clamp is what
    keeps targets valid regardless of how the candidate was produced.
    """

    def __init__(
        self,
        config: PlannerConfig,
        steering: SteeringConfig,
        world: Box,
        safe_volume: Box,
        rng: np.random.Generator,
    ):
        self.config = config
        self.steering = steering
        self.world = world
        self.safe_volume = safe_volume
        self.rng = rng

    def draw_interval(self) -> float:
        return float(self.rng.uniform(self.config.retarget_interval_min_s, self.config.retarget_interval_max_s))

    def draw_baseline_turn_rate(self) -> float:
        return float(self.rng.uniform(self.config.baseline_turn_rate_min, self.config.baseline_turn_rate_max))

    def _uniform_point(self) -> np.ndarray:
        safe = self.safe_volume
        return np.array(
            [
                self.rng.uniform(safe.min_x, safe.max_x),
                self.rng.uniform(safe.min_y, safe.max_y),
                self.rng.uniform(safe.min_z, safe.max_z),
            ],
            dtype=float,
        )

    def pick_target(self, state: AgentState) -> np.ndarray:
        cfg = self.config
        center = self.world.center
        position = np.asarray(state.position, dtype=float)

        if not self.safe_volume.contains(position):
            target = position + 0.5 * (center - position)
            state.turn_rate = min(
                float(state.turn_rate) * float(cfg.outside_turn_rate_boost),
                float(self.steering.max_turn_rate),
            )
        else:
            target = self._uniform_point()
            roll = self.rng.random()
            if roll < cfg.center_pull_probability:
                pull = self.rng.uniform(cfg.center_pull_min, cfg.center_pull_max)
                target[0] += pull * (center[0] - target[0])
                target[2] += pull * (center[2] - target[2])
            elif self.rng.random() < cfg.excursion_probability:
                distance = self.rng.uniform(cfg.excursion_min_distance, cfg.excursion_max_distance)
                bearing = self.rng.uniform(0.0, 2.0 * np.pi)
                target[0] = position[0] + distance * np.sin(bearing)
                target[2] = position[2] + distance * np.cos(bearing)

            state.baseline_turn_rate = self.draw_baseline_turn_rate()
            state.turn_rate = state.baseline_turn_rate

        state.turn_rate = float(
            np.clip(state.turn_rate, self.steering.min_turn_rate, self.steering.max_turn_rate)
        )
        return self.safe_volume.clamp(target)

    def retarget(self, state: AgentState) -> np.ndarray:
        """Pick and assign a new target, restarting the re-targeting countdown."""
        state.target = self.pick_target(state)
        state.target_interval = self.draw_interval()
        state.target_timer = state.target_interval
        state.retarget_pending = False
        return state.target

    def countdown(self, state: AgentState, dt: float) -> bool:
        """Advance the re-targeting timer; True once it has run out."""
        state.target_timer -= dt
        return state.target_timer <= 0.0
