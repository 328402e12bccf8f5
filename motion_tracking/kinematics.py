# kinematics.py

"""
Finite-difference kinematics for tracked position samples.

Velocity and acceleration use one-sided differences: every sample but the last
takes a forward difference to the next sample, the last takes a backward
difference to the previous one. Interior samples are NOT centered; this keeps
both ends defined without padding at the cost of a half-step time shift.
"""
import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from motion_tracking.coordinate_transforms import batch_to_axis
from motion_tracking.data_structures import AxisConfig, PositionSample, ScaleConfig, SeriesPoint

logger = logging.getLogger(__name__)

DEFAULT_FPS = 30.0
AXIS_TYPES = ('x', 'y')


def check_fps(fps: float) -> float:
    """Validate a frame rate and return it as float."""
    if not fps > 0:
        raise ValueError(f"fps must be positive, got {fps}")
    return float(fps)


def _check_axis_type(axis_type: str):
    if axis_type not in AXIS_TYPES:
        raise ValueError(f"axis_type must be one of {AXIS_TYPES}, got {axis_type!r}")


def sort_samples(samples: Iterable[PositionSample]) -> List[PositionSample]:
    """Return samples ordered by frame (stable for duplicate frames)."""
    return sorted(samples, key=lambda s: s.frame)


def group_by_object(samples: Iterable[PositionSample]) -> Dict[str, List[PositionSample]]:
    """
    Group samples by tracked object, keeping first-seen object order.

    Args:
        samples: Samples of any number of objects

    Returns:
        Ordered mapping object_id -> samples of that object
    """
    groups: Dict[str, List[PositionSample]] = OrderedDict()
    for sample in samples:
        groups.setdefault(sample.object_id, []).append(sample)
    return groups


def axis_coordinates(samples: List[PositionSample],
                     axis: Optional[AxisConfig] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Axis-relative (x, y) arrays for samples in their given order."""
    return batch_to_axis([s.x for s in samples], [s.y for s in samples], axis)


def one_sided_difference(values: np.ndarray, deltas: np.ndarray) -> np.ndarray:
    """
    Differentiate `values` against step sizes `deltas`.

    Args:
        values: Sampled values, length N
        deltas: Step sizes between consecutive samples, length N-1

    Returns:
        Array of N rates. Entry i < N-1 is the forward rate to i+1, entry N-1
        repeats the backward rate to N-2. A zero step yields a zero rate;
        a single sample yields [0].
    """
    values = np.asarray(values, dtype=float)
    n = len(values)
    if n == 0:
        return np.zeros(0)
    if n == 1:
        return np.zeros(1)

    deltas = np.asarray(deltas, dtype=float)
    diffs = np.diff(values)
    rates = np.zeros(n - 1)
    np.divide(diffs, deltas, out=rates, where=deltas != 0)
    if np.any(deltas == 0):
        logger.debug("Zero time step in %d place(s), derivative set to 0", int(np.sum(deltas == 0)))

    return np.append(rates, rates[-1])


def derivative_series(series: List[SeriesPoint]) -> List[SeriesPoint]:
    """
    Differentiate a time series with the one-sided rule.

    Args:
        series: Time series, sorted here by time before differencing

    Returns:
        Derivative series with the same times
    """
    ordered = sorted(series, key=lambda p: p.time)
    times = np.array([p.time for p in ordered], dtype=float)
    values = np.array([p.value for p in ordered], dtype=float)
    rates = one_sided_difference(values, np.diff(times))
    return [SeriesPoint(time=float(t), value=float(r)) for t, r in zip(times, rates)]


def velocity_arrays(samples: Iterable[PositionSample],
                    axis_type: str = 'x',
                    axis: Optional[AxisConfig] = None,
                    fps: float = DEFAULT_FPS) -> Tuple[np.ndarray, np.ndarray]:
    """
    Velocity along one axis in pixels/s, without scale conversion.

    Args:
        samples: Samples of a single tracked object, any order
        axis_type: 'x' or 'y'
        axis: Optional axis configuration applied before differencing
        fps: Frame rate used to turn frame steps into seconds

    Returns:
        Tuple of (times, velocities) arrays in frame order
    """
    _check_axis_type(axis_type)
    fps = check_fps(fps)
    ordered = sort_samples(samples)
    if not ordered:
        return np.zeros(0), np.zeros(0)

    frames = np.array([s.frame for s in ordered], dtype=float)
    xs, ys = axis_coordinates(ordered, axis)
    positions = xs if axis_type == 'x' else ys

    # step per pair is (frame[i+1] - frame[i]) / fps
    velocities = one_sided_difference(positions, np.diff(frames) / fps)
    return frames / fps, velocities


def acceleration_arrays(samples: Iterable[PositionSample],
                        axis_type: str = 'x',
                        axis: Optional[AxisConfig] = None,
                        fps: float = DEFAULT_FPS) -> Tuple[np.ndarray, np.ndarray]:
    """
    Acceleration along one axis in pixels/s^2, without scale conversion.

    The one-sided rule is re-applied to the unscaled velocity series.
    """
    times, velocities = velocity_arrays(samples, axis_type, axis, fps)
    return times, one_sided_difference(velocities, np.diff(times))


def _to_series(times: np.ndarray, values: np.ndarray,
               scale: Optional[ScaleConfig]) -> List[SeriesPoint]:
    if scale is not None:
        values = scale.to_meters(values)
    return [SeriesPoint(time=float(t), value=float(v)) for t, v in zip(times, values)]


def compute_velocity(samples: Iterable[PositionSample],
                     axis_type: str = 'x',
                     axis: Optional[AxisConfig] = None,
                     scale: Optional[ScaleConfig] = None,
                     fps: float = DEFAULT_FPS) -> List[SeriesPoint]:
    """
    Per-sample velocity of one tracked object.

    Args:
        samples: Samples of a single tracked object, any order
        axis_type: 'x' or 'y'
        axis: Optional axis configuration
        scale: Optional scale; velocities are converted to m/s when given
        fps: Frame rate

    Returns:
        Velocity series (pixels/s or m/s), one point per sample
    """
    times, velocities = velocity_arrays(samples, axis_type, axis, fps)
    return _to_series(times, velocities, scale)


def compute_acceleration(samples: Iterable[PositionSample],
                         axis_type: str = 'x',
                         axis: Optional[AxisConfig] = None,
                         scale: Optional[ScaleConfig] = None,
                         fps: float = DEFAULT_FPS) -> List[SeriesPoint]:
    """
    Per-sample acceleration of one tracked object.

    Scale is applied once, to the final acceleration values.

    Returns:
        Acceleration series (pixels/s^2 or m/s^2), one point per sample
    """
    times, accelerations = acceleration_arrays(samples, axis_type, axis, fps)
    return _to_series(times, accelerations, scale)


def position_series(samples: Iterable[PositionSample],
                    axis_type: str = 'x',
                    axis: Optional[AxisConfig] = None,
                    scale: Optional[ScaleConfig] = None,
                    fps: float = DEFAULT_FPS) -> List[SeriesPoint]:
    """Frame-ordered position of one tracked object along one axis."""
    _check_axis_type(axis_type)
    fps = check_fps(fps)
    ordered = sort_samples(samples)
    xs, ys = axis_coordinates(ordered, axis)
    times = np.array([s.frame for s in ordered], dtype=float) / fps
    return _to_series(times, xs if axis_type == 'x' else ys, scale)
