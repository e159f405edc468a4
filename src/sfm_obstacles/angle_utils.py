"""Small utilities for angle wrapping and planar headings.

Keep these dependency-light so the force model and tests can share them.
"""
import math
import numpy as np


def wrap_rad(x: float) -> float:
    """Wrap radians to [-pi, pi] using atan2, so +pi stays +pi."""
    return math.atan2(math.sin(x), math.cos(x))


def heading_rad(vec) -> float:
    """Planar heading of a vector, atan2(y, x).  A zero vector yields 0."""
    return math.atan2(float(vec[1]), float(vec[0]))


def signed_angle(from_vec, to_vec) -> float:
    """Angle that rotates `from_vec` onto `to_vec` in the xy-plane, wrapped."""
    return wrap_rad(heading_rad(to_vec) - heading_rad(from_vec))


def normalized(vec: np.ndarray) -> np.ndarray:
    """Unit vector along `vec`; the zero vector maps to the zero vector."""
    v = np.asarray(vec, dtype=float)
    norm = float(np.linalg.norm(v))
    if norm == 0.0:
        return np.zeros_like(v)
    return v / norm
