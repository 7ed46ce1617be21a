"""Autonomous wandering agent."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..config import ExperimentConfig
from ..core.bounds import Box
from ..core.numeric import NumericGuard, RepairReport
from ..core.vectors import clip, forward_vector, wrap_pi
from .boundary import LEVEL_NONE, LEVEL_STRONG, LEVEL_WARNING, BoundaryGuard, BoundaryReport
from .integrator import FlightIntegrator
from .planner import TargetPlanner
from .state import AgentState, Controls, FlightMode, HealthState, Transform
from .steering import Steerer, SteeringCommand


@dataclass(slots=True)
class AgentTick:
    agent_id: int
    repairs: int
    boundary: BoundaryReport
    command: SteeringCommand
    retargeted: bool
    jittered: bool


class Agent:
    """One simulated aircraft and the components that fly it.

    Each tick runs validate -> retarget if due -> integrate -> boundary ->
    steer -> orient -> validate, strictly in that order. Nothing raises on
    bad numbers; the guard repairs them at both ends of the tick.
    """

    def __init__(self, agent_id: int, config: ExperimentConfig, rng: np.random.Generator | None = None):
        config.validate()
        self.agent_id = int(agent_id)
        self.config = config
        if rng is None:
            # Same stream Fleet spawns for this id.
            rng = np.random.default_rng(np.random.SeedSequence(config.fleet.seed, spawn_key=(self.agent_id,)))
        self.rng = rng

        self.world = Box.from_config(config.world)
        self.safe_volume = self.world.shrink(config.planner.horizontal_margin, config.planner.vertical_margin)
        self.spawn_volume = self.world.shrink(config.spawn.margin, config.planner.vertical_margin)

        self.guard = NumericGuard(config, self.world, self.safe_volume)
        self.integrator = FlightIntegrator(config.flight, self.rng)
        self.planner = TargetPlanner(config.planner, config.steering, self.world, self.safe_volume, self.rng)
        self.boundary = BoundaryGuard(config.boundary, config.steering, self.world, self.safe_volume)
        self.steerer = Steerer(config.steering)

        self.state = AgentState()
        self.mode = FlightMode.CRUISING
        self.health = HealthState.VALID
        self.total_repairs = 0
        self.last_command = SteeringCommand()
        self.reset_to_safe_state()

    def reset_to_safe_state(self):
        """Respawn in place: new position, heading, speed and target."""
        cfg = self.config
        spawn = cfg.spawn
        state = self.state
        center = self.world.center

        max_radius = max(
            0.0,
            min(self.spawn_volume.max_x - center[0], self.spawn_volume.max_z - center[2]),
        )
        min_radius = min(float(spawn.min_radius), max_radius)
        radius = self.rng.uniform(min_radius, max_radius)
        angle = self.rng.uniform(0.0, 2.0 * np.pi)
        altitude = self.world.min_y + self.rng.uniform(spawn.altitude_offset_min, spawn.altitude_offset_max)
        state.position = self.spawn_volume.clamp(
            [center[0] + np.cos(angle) * radius, altitude, center[2] + np.sin(angle) * radius]
        )

        heading = self.rng.uniform(-np.pi, np.pi)
        state.orientation = np.array([heading, 0.0, 0.0], dtype=float)
        speed = min(
            self.rng.uniform(cfg.flight.min_velocity, 2.0 * cfg.flight.min_velocity),
            cfg.flight.max_velocity,
        )
        state.velocity = forward_vector(state.orientation) * speed
        state.acceleration = np.zeros(3, dtype=float)
        state.controls = Controls(pitch=0.0, yaw=0.0, throttle=float(cfg.flight.cruise_throttle))

        distance = self.rng.uniform(spawn.target_distance_min, spawn.target_distance_max)
        bearing = self.rng.uniform(0.0, 2.0 * np.pi)
        target = state.position + np.array(
            [np.cos(bearing) * distance, float(spawn.target_climb), np.sin(bearing) * distance],
            dtype=float,
        )
        state.target = self.safe_volume.clamp(self.spawn_volume.clamp(target))

        state.baseline_turn_rate = self.planner.draw_baseline_turn_rate()
        state.turn_rate = state.baseline_turn_rate
        state.target_interval = self.planner.draw_interval()
        state.target_timer = state.target_interval
        state.out_of_bounds = False
        state.retarget_pending = False

        self.mode = FlightMode.CRUISING
        self.health = HealthState.VALID
        self.last_command = SteeringCommand()

    def validate(self) -> RepairReport:
        report = self.guard.validate(self.state, label=self.agent_id)
        if not report.ok:
            self.health = HealthState.RECOVERING
            self.total_repairs += len(report)
        return report

    def steer(self) -> SteeringCommand:
        command = self.steerer.compute_controls(self.state)
        if command.target_reached:
            self.state.retarget_pending = True
        self.state.controls.pitch = command.pitch
        self.state.controls.yaw = command.yaw
        self.last_command = command
        return command

    def _apply_controls(self, dt: float):
        flight = self.config.flight
        controls = self.state.controls
        yaw, pitch, _ = (float(a) for a in self.state.orientation)
        yaw = wrap_pi(yaw + controls.yaw * float(flight.yaw_rate_rad_s) * dt)
        pitch = clip(
            pitch + controls.pitch * float(flight.pitch_rate_rad_s) * dt,
            -float(flight.max_pitch_rad),
            float(flight.max_pitch_rad),
        )
        roll = controls.yaw * float(flight.bank_factor)
        self.state.orientation = np.array([yaw, pitch, roll], dtype=float)

    def _relax_turn_rate(self, dt: float):
        state = self.state
        alpha = min(1.0, float(self.config.steering.turn_rate_decay_per_s) * dt)
        state.turn_rate += (state.baseline_turn_rate - state.turn_rate) * alpha

    def tick(self, dt: float) -> AgentTick:
        dt = float(dt) if np.isfinite(dt) else 0.0
        dt = clip(dt, 0.0, self.config.fleet.max_dt_s)

        repairs = len(self.validate())

        retargeted = False
        if self.planner.countdown(self.state, dt) or self.state.retarget_pending:
            self.planner.retarget(self.state)
            retargeted = True

        step = self.integrator.step(self.state, dt)

        boundary = self.boundary.check(self.state, self.planner)
        if boundary.level in (LEVEL_STRONG, LEVEL_WARNING) or (boundary.bounced and boundary.level == LEVEL_NONE):
            retargeted = True

        command = self.steer()
        self._apply_controls(dt)
        if not boundary.escalated:
            self._relax_turn_rate(dt)

        repairs += len(self.validate())
        self.health = HealthState.VALID

        if boundary.escalated:
            self.mode = FlightMode.CORRECTING
        elif retargeted or not self.state.retarget_pending:
            # Level 1 leaves the new target pending until the next tick.
            self.mode = FlightMode.CRUISING

        return AgentTick(
            agent_id=self.agent_id,
            repairs=repairs,
            boundary=boundary,
            command=command,
            retargeted=retargeted,
            jittered=step.jittered,
        )

    def transform(self) -> Transform:
        return Transform(
            agent_id=self.agent_id,
            position=np.array(self.state.position, dtype=float),
            orientation=np.array(self.state.orientation, dtype=float),
        )
