"""Vector and orientation helpers shared by the flight components.

World axes follow the renderer: ``y`` is up, ``z`` is the canonical forward
direction of an unrotated airframe. Orientations are stored as
``(yaw, pitch, roll)`` radians and composed yaw -> pitch -> roll, so a vertical
heading change never couples into pitch.
"""

from __future__ import annotations

import numpy as np

FORWARD = np.array([0.0, 0.0, 1.0], dtype=float)
UP = np.array([0.0, 1.0, 0.0], dtype=float)

_EPS = 1e-9


def is_finite_vector(v) -> bool:
    if v is None:
        return False
    arr = np.asarray(v, dtype=float)
    return arr.shape == (3,) and bool(np.all(np.isfinite(arr)))


def safe_normalize(v, fallback=FORWARD, eps: float = _EPS) -> tuple[np.ndarray, bool]:
    """Normalize ``v``; return ``(fallback, False)`` instead of dividing by ~0."""
    arr = np.asarray(v, dtype=float)
    norm = float(np.linalg.norm(arr))
    if not np.isfinite(norm) or norm <= eps:
        return np.array(fallback, dtype=float), False
    return arr / norm, True


def rotation_matrix(orientation) -> np.ndarray:
    """Rotation matrix for a ``(yaw, pitch, roll)`` orientation.

    Positive pitch raises the nose; positive yaw turns the nose from ``+z``
    towards ``+x``.
    """
    yaw, pitch, roll = (float(a) for a in orientation)
    cy, sy = np.cos(yaw), np.sin(yaw)
    cp, sp = np.cos(pitch), np.sin(pitch)
    cr, sr = np.cos(roll), np.sin(roll)

    r_yaw = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]], dtype=float)
    r_pitch = np.array([[1.0, 0.0, 0.0], [0.0, cp, sp], [0.0, -sp, cp]], dtype=float)
    r_roll = np.array([[cr, -sr, 0.0], [sr, cr, 0.0], [0.0, 0.0, 1.0]], dtype=float)
    return r_yaw @ r_pitch @ r_roll


def forward_vector(orientation) -> np.ndarray:
    """Unit nose direction; the canonical forward vector when degenerate."""
    if not is_finite_vector(orientation):
        return FORWARD.copy()
    forward = rotation_matrix(orientation) @ FORWARD
    forward, ok = safe_normalize(forward)
    return forward if ok else FORWARD.copy()


def horizontal(v) -> np.ndarray:
    arr = np.asarray(v, dtype=float)
    return np.array([arr[0], 0.0, arr[2]], dtype=float)


def wrap_pi(angle_rad: float) -> float:
    return float((angle_rad + np.pi) % (2.0 * np.pi) - np.pi)


def clip(value: float, lo: float, hi: float) -> float:
    return float(np.clip(float(value), float(lo), float(hi)))
