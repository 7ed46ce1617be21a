"""
Tests for the point-mass flight integrator.

Checks thrust/drag/gravity composition, the speed clamps, and the
zero-acceleration jitter.
"""

import numpy as np
import pytest

from skyfleet.config import FlightConfig
from skyfleet.flight.integrator import FlightIntegrator
from skyfleet.flight.state import AgentState, Controls


def _state(velocity, orientation=(0.0, 0.0, 0.0), throttle=0.7):
    return AgentState(
        position=np.array([0.0, 1000.0, 0.0]),
        velocity=np.array(velocity, dtype=float),
        orientation=np.array(orientation, dtype=float),
        controls=Controls(throttle=throttle),
    )


@pytest.fixture
def integrator():
    return FlightIntegrator(FlightConfig(), np.random.default_rng(0))


class TestAcceleration:
    """Test force composition."""

    def test_thrust_and_gravity(self, integrator):
        """At rest drag is skipped: thrust along the nose minus gravity."""
        accel, jittered = integrator.acceleration(_state([0.0, 0.0, 0.0]))
        assert not jittered
        assert accel == pytest.approx([0.0, -20.0, 0.7 * 320.0])

    def test_min_thrust_floor(self, integrator):
        accel, _ = integrator.acceleration(_state([0.0, 0.0, 0.0], throttle=0.0))
        assert accel[2] == pytest.approx(120.0)

    def test_drag_opposes_velocity(self, integrator):
        accel, _ = integrator.acceleration(_state([0.0, 0.0, 500.0]))
        drag = 0.0008 * 500.0**2
        assert accel[2] == pytest.approx(224.0 - drag)

    def test_jitter_when_acceleration_vanishes(self):
        cfg = FlightConfig(min_thrust=0.0, gravity=0.0)
        integrator = FlightIntegrator(cfg, np.random.default_rng(3))
        accel, jittered = integrator.acceleration(_state([0.0, 0.0, 0.0], throttle=0.0))
        assert jittered
        assert np.all(np.abs(accel) <= 0.5)


class TestSpeedClamp:
    """Test the [min_velocity, max_velocity] envelope."""

    def test_zero_velocity_gets_minimum_speed_along_nose(self, integrator):
        step = integrator.integrate(_state([0.0, 0.0, 0.0]), 1.0 / 60.0)
        assert np.linalg.norm(step.velocity) == pytest.approx(105.0)
        assert step.velocity[2] > 0.0

    def test_huge_velocity_capped(self, integrator):
        step = integrator.integrate(_state([1e12, 0.0, 0.0]), 1.0 / 60.0)
        assert np.all(np.isfinite(step.velocity))
        assert np.linalg.norm(step.velocity) == pytest.approx(1560.0)

    def test_cruise_speed_inside_envelope(self, integrator):
        step = integrator.integrate(_state([0.0, 0.0, 300.0]), 1.0 / 60.0)
        assert 105.0 <= np.linalg.norm(step.velocity) <= 1560.0

    def test_degenerate_velocity_uses_forward(self, integrator):
        v = integrator.clamp_speed(np.zeros(3), np.array([1.0, 0.0, 0.0]))
        assert v == pytest.approx([105.0, 0.0, 0.0])


class TestIntegrate:
    def test_integrate_does_not_mutate(self, integrator):
        state = _state([0.0, 0.0, 300.0])
        before = state.copy()
        integrator.integrate(state, 0.1)
        assert state.position == pytest.approx(before.position)
        assert state.velocity == pytest.approx(before.velocity)

    def test_position_advances_with_new_velocity(self, integrator):
        state = _state([0.0, 0.0, 300.0])
        start = state.position.copy()
        step = integrator.step(state, 0.1)
        assert state.position == pytest.approx(start + step.velocity * 0.1)
        assert state.velocity == pytest.approx(step.velocity)
