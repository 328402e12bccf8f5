"""
Coordinate transformation functions between video pixel space and a user axis.
"""
import numpy as np
from typing import Optional, Sequence, Tuple

from motion_tracking.data_structures import AxisConfig


def to_axis(x: float, y: float, axis: Optional[AxisConfig]) -> Tuple[float, float]:
    """
    Convert a pixel coordinate to axis-relative coordinates.

    Args:
        x: X coordinate in video pixel space
        y: Y coordinate in video pixel space
        axis: Axis configuration (origin and rotation), None for identity

    Returns:
        Tuple of (x, y) in axis-relative space

    Note:
        Translates by the negated origin, then rotates by -rotation_angle.
        In screen coordinates (y down) this is a clockwise rotation.
    """
    if axis is None:
        return (x, y)

    dx = x - axis.origin_x
    dy = y - axis.origin_y
    cos = np.cos(-axis.rotation_angle)
    sin = np.sin(-axis.rotation_angle)
    return (float(dx * cos - dy * sin), float(dx * sin + dy * cos))


def from_axis(x: float, y: float, axis: Optional[AxisConfig]) -> Tuple[float, float]:
    """
    Convert axis-relative coordinates back to pixel space.

    Args:
        x: X coordinate in axis-relative space
        y: Y coordinate in axis-relative space
        axis: Axis configuration (origin and rotation), None for identity

    Returns:
        Tuple of (x, y) in video pixel space
    """
    if axis is None:
        return (x, y)

    cos = np.cos(axis.rotation_angle)
    sin = np.sin(axis.rotation_angle)
    rotated_x = x * cos - y * sin
    rotated_y = x * sin + y * cos
    return (float(rotated_x + axis.origin_x), float(rotated_y + axis.origin_y))


def batch_to_axis(xs: Sequence[float],
                  ys: Sequence[float],
                  axis: Optional[AxisConfig]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Vectorized `to_axis` over coordinate arrays.

    Args:
        xs: X coordinates in pixels
        ys: Y coordinates in pixels
        axis: Axis configuration, None for identity

    Returns:
        Tuple of (xs, ys) arrays in axis-relative space
    """
    xs = np.asarray(xs, dtype=float)
    ys = np.asarray(ys, dtype=float)
    if axis is None:
        return xs.copy(), ys.copy()

    dx = xs - axis.origin_x
    dy = ys - axis.origin_y
    cos = np.cos(-axis.rotation_angle)
    sin = np.sin(-axis.rotation_angle)
    return dx * cos - dy * sin, dx * sin + dy * cos
