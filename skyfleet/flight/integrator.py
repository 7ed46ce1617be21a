"""Arcade point-mass flight dynamics."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..config import FlightConfig
from ..core.vectors import forward_vector
from .state import AgentState


@dataclass(slots=True)
class FlightStep:
    position: np.ndarray
    velocity: np.ndarray
    acceleration: np.ndarray
    jittered: bool = False


class FlightIntegrator:
    """Thrust, drag and gravity integrated with one explicit Euler step.

    Speed is kept inside ``[min_velocity, max_velocity]`` by rescaling the
    velocity vector; a vanishing velocity is replaced by the nose direction at
    the minimum speed rather than dropped to zero.
    """

    def __init__(self, config: FlightConfig, rng: np.random.Generator):
        self.config = config
        self.rng = rng

    def acceleration(self, state: AgentState) -> tuple[np.ndarray, bool]:
        cfg = self.config
        forward = forward_vector(state.orientation)

        thrust = float(state.controls.throttle) * float(cfg.thrust_constant)
        effective_thrust = max(thrust, float(cfg.min_thrust))

        accel = forward * effective_thrust
        accel[1] -= float(cfg.gravity)

        velocity = np.asarray(state.velocity, dtype=float)
        speed = float(np.linalg.norm(velocity))
        if np.isfinite(speed) and speed > float(cfg.drag_speed_epsilon):
            # Speed is clamped every tick; the cap only matters for seeded states.
            drag_speed = min(speed, float(cfg.max_velocity))
            drag = float(cfg.drag_coefficient) * drag_speed * drag_speed
            accel -= (velocity / speed) * drag

        jittered = False
        if float(np.linalg.norm(accel)) < float(cfg.min_acceleration):
            accel += self.rng.uniform(-cfg.jitter_magnitude, cfg.jitter_magnitude, size=3)
            jittered = True
        return accel, jittered

    def clamp_speed(self, velocity: np.ndarray, forward: np.ndarray) -> np.ndarray:
        cfg = self.config
        speed = float(np.linalg.norm(velocity))
        if not np.isfinite(speed) or speed <= 1e-9:
            return forward * float(cfg.min_velocity)
        if speed < cfg.min_velocity:
            return velocity * (float(cfg.min_velocity) / speed)
        if speed > cfg.max_velocity:
            return velocity * (float(cfg.max_velocity) / speed)
        return velocity

    def integrate(self, state: AgentState, dt: float) -> FlightStep:
        accel, jittered = self.acceleration(state)

        velocity = np.asarray(state.velocity, dtype=float) + accel * dt
        velocity = self.clamp_speed(velocity, forward_vector(state.orientation))
        position = np.asarray(state.position, dtype=float) + velocity * dt

        return FlightStep(position=position, velocity=velocity, acceleration=accel, jittered=jittered)

    def step(self, state: AgentState, dt: float) -> FlightStep:
        result = self.integrate(state, dt)
        state.position = result.position
        state.velocity = result.velocity
        state.acceleration = result.acceleration
        return result
