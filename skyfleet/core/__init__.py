"""Core numerical and geometry utilities."""

from .bounds import Box
from .numeric import NumericGuard, RepairReport, repair_scalar, repair_vector
from .vectors import forward_vector, rotation_matrix, safe_normalize

__all__ = [
    "Box",
    "NumericGuard",
    "RepairReport",
    "repair_scalar",
    "repair_vector",
    "forward_vector",
    "rotation_matrix",
    "safe_normalize",
]
