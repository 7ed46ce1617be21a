"""
Tests for orientation helpers and world volumes.

Covers the axis conventions used by steering and the integrator, and the
axis-aligned box operations the planner and boundary guard rely on.
"""

import math

import numpy as np
import pytest

from skyfleet.config import WorldConfig
from skyfleet.core.bounds import Box
from skyfleet.core.vectors import FORWARD, forward_vector, safe_normalize, wrap_pi


class TestForwardVector:
    """Test nose direction for (yaw, pitch, roll) orientations."""

    def test_identity_points_along_z(self):
        """An unrotated airframe faces +z."""
        assert forward_vector([0.0, 0.0, 0.0]) == pytest.approx([0.0, 0.0, 1.0])

    def test_positive_yaw_turns_towards_x(self):
        """A quarter turn of yaw faces +x."""
        assert forward_vector([math.pi / 2, 0.0, 0.0]) == pytest.approx([1.0, 0.0, 0.0], abs=1e-12)

    def test_positive_pitch_raises_nose(self):
        """Positive pitch gives a positive vertical component."""
        fwd = forward_vector([0.0, 0.3, 0.0])
        assert fwd[1] == pytest.approx(math.sin(0.3))
        assert np.linalg.norm(fwd) == pytest.approx(1.0)

    def test_roll_does_not_move_nose(self):
        """Roll only banks the airframe around its forward axis."""
        assert forward_vector([0.4, 0.2, 1.0]) == pytest.approx(forward_vector([0.4, 0.2, 0.0]))

    def test_non_finite_orientation_falls_back(self):
        """NaN orientation yields the canonical forward vector."""
        assert forward_vector([np.nan, 0.0, 0.0]) == pytest.approx(FORWARD)


class TestSafeNormalize:
    """Test normalization with degenerate inputs."""

    def test_zero_vector_returns_fallback(self):
        vec, ok = safe_normalize([0.0, 0.0, 0.0])
        assert not ok
        assert vec == pytest.approx(FORWARD)

    def test_regular_vector(self):
        vec, ok = safe_normalize([3.0, 0.0, 4.0])
        assert ok
        assert vec == pytest.approx([0.6, 0.0, 0.8])

    def test_infinite_vector_returns_fallback(self):
        _, ok = safe_normalize([np.inf, 0.0, 0.0])
        assert not ok


class TestWrapPi:
    def test_wraps_past_pi(self):
        assert wrap_pi(math.pi + 0.1) == pytest.approx(-math.pi + 0.1)

    def test_keeps_small_angles(self):
        assert wrap_pi(0.5) == pytest.approx(0.5)


class TestBox:
    """Test world and safe volume geometry."""

    def test_from_default_config(self):
        box = Box.from_config(WorldConfig())
        assert box.center == pytest.approx([0.0, 1200.0, 0.0])

    def test_shrink(self):
        safe = Box.from_config(WorldConfig()).shrink(1500.0, 300.0)
        assert (safe.min_x, safe.max_x) == (-8500.0, 8500.0)
        assert (safe.min_y, safe.max_y) == (700.0, 1700.0)

    def test_shrink_to_empty_raises(self):
        with pytest.raises(ValueError):
            Box.from_config(WorldConfig()).shrink(15_000.0)

    def test_clamp(self):
        box = Box.from_config(WorldConfig())
        assert box.clamp([20_000.0, 0.0, -20_000.0]) == pytest.approx([10_000.0, 400.0, -10_000.0])

    def test_face_distances_negative_outside(self):
        box = Box.from_config(WorldConfig())
        d = box.horizontal_face_distances([10_050.0, 1000.0, 0.0])
        assert d[1] == pytest.approx(-50.0)
        assert d[0] == pytest.approx(20_050.0)

    def test_contains(self):
        box = Box.from_config(WorldConfig())
        assert box.contains([0.0, 1000.0, 0.0])
        assert not box.contains([0.0, 2500.0, 0.0])
        assert box.contains_horizontal([0.0, 2500.0, 0.0])
