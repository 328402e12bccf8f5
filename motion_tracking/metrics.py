"""
Motion statistics over one or more tracked objects.
Aggregates path length and velocity/acceleration magnitudes.
"""
import logging
from typing import Dict, Iterable, List, Optional

import numpy as np

from motion_tracking.data_structures import AxisConfig, MotionStatistics, PositionSample, ScaleConfig
from motion_tracking.kinematics import (
    DEFAULT_FPS,
    acceleration_arrays,
    axis_coordinates,
    check_fps,
    group_by_object,
    sort_samples,
    velocity_arrays,
)

logger = logging.getLogger(__name__)


class MotionMetrics:
    """
    Summary statistics for tracked motion.

    Derivatives are computed per object: the x and y series of one object come
    from the same frame-ordered samples, so they pair sample by sample. The
    per-object magnitude series are then pooled for the averages and maximum.
    Samples of different objects are never differenced against each other.
    """

    def __init__(self, fps: float = DEFAULT_FPS):
        """
        Initialize metrics calculator.

        Args:
            fps: Frame rate used to convert frame indices to seconds
        """
        self.fps = check_fps(fps)

    def total_distance(self,
                       samples: Iterable[PositionSample],
                       scale: Optional[ScaleConfig] = None,
                       axis: Optional[AxisConfig] = None) -> float:
        """
        Sum of straight-line segment lengths between consecutive samples of each object.

        Args:
            samples: Samples of any number of objects
            scale: Optional scale, each segment is converted to meters
            axis: Optional axis configuration

        Returns:
            Total distance in meters if scaled, else pixels
        """
        total = 0.0
        for object_samples in group_by_object(samples).values():
            if len(object_samples) < 2:
                continue
            xs, ys = axis_coordinates(sort_samples(object_samples), axis)
            segments = np.hypot(np.diff(xs), np.diff(ys))
            if scale is not None:
                segments = scale.to_meters(segments)
            total += float(np.sum(segments))
        return total

    def _magnitudes(self,
                    samples: List[PositionSample],
                    axis: Optional[AxisConfig],
                    arrays_fn) -> np.ndarray:
        _, x_values = arrays_fn(samples, 'x', axis, self.fps)
        _, y_values = arrays_fn(samples, 'y', axis, self.fps)
        return np.hypot(x_values, y_values)

    def velocity_magnitudes(self,
                            samples: Iterable[PositionSample],
                            scale: Optional[ScaleConfig] = None,
                            axis: Optional[AxisConfig] = None) -> np.ndarray:
        """Pooled per-sample speed of all objects, in m/s if scaled."""
        return self._pooled(samples, scale, axis, velocity_arrays)

    def acceleration_magnitudes(self,
                                samples: Iterable[PositionSample],
                                scale: Optional[ScaleConfig] = None,
                                axis: Optional[AxisConfig] = None) -> np.ndarray:
        """Pooled per-sample acceleration magnitude of all objects, in m/s^2 if scaled."""
        return self._pooled(samples, scale, axis, acceleration_arrays)

    def _pooled(self, samples, scale, axis, arrays_fn) -> np.ndarray:
        parts = [self._magnitudes(object_samples, axis, arrays_fn)
                 for object_samples in group_by_object(samples).values()]
        if not parts:
            return np.zeros(0)
        magnitudes = np.concatenate(parts)
        if scale is not None:
            magnitudes = scale.to_meters(magnitudes)
        return magnitudes

    def compute_statistics(self,
                           samples: Iterable[PositionSample],
                           scale: Optional[ScaleConfig] = None,
                           axis: Optional[AxisConfig] = None) -> MotionStatistics:
        """
        Compute combined statistics over all tracked objects.

        Args:
            samples: Samples of any number of objects
            scale: Optional scale configuration
            axis: Optional axis configuration

        Returns:
            MotionStatistics, all zero when there are no samples
        """
        samples = list(samples)
        if not samples:
            return MotionStatistics()

        speeds = self.velocity_magnitudes(samples, scale, axis)
        accelerations = self.acceleration_magnitudes(samples, scale, axis)

        return MotionStatistics(
            total_distance=self.total_distance(samples, scale, axis),
            average_velocity=float(np.mean(speeds)) if len(speeds) else 0.0,
            max_velocity=float(np.max(speeds)) if len(speeds) else 0.0,
            average_acceleration=float(np.mean(accelerations)) if len(accelerations) else 0.0,
        )

    def compute_object_statistics(self,
                                  samples: Iterable[PositionSample],
                                  scale: Optional[ScaleConfig] = None,
                                  axis: Optional[AxisConfig] = None) -> Dict[str, MotionStatistics]:
        """
        Compute statistics for each tracked object separately.

        Returns:
            Mapping object_id -> MotionStatistics, in first-seen object order
        """
        return {object_id: self.compute_statistics(object_samples, scale, axis)
                for object_id, object_samples in group_by_object(samples).items()}

    def print_metrics(self, stats: MotionStatistics,
                      scale: Optional[ScaleConfig] = None,
                      object_id: Optional[str] = None):
        """
        Log statistics in a readable format.

        Args:
            stats: MotionStatistics to report
            scale: Scale the statistics were computed with, selects the units
            object_id: Optional tracked object identifier
        """
        unit = "m" if scale is not None else "px"
        header = f"Object {object_id} Statistics:" if object_id is not None else "Statistics:"
        logger.info(header)
        logger.info("  Total Distance: %.3f %s", stats.total_distance, unit)
        logger.info("  Average Velocity: %.3f %s/s", stats.average_velocity, unit)
        logger.info("  Max Velocity: %.3f %s/s", stats.max_velocity, unit)
        logger.info("  Average Acceleration: %.3f %s/s^2", stats.average_acceleration, unit)


def calculate_statistics(samples: Iterable[PositionSample],
                         scale: Optional[ScaleConfig] = None,
                         axis: Optional[AxisConfig] = None,
                         fps: float = DEFAULT_FPS) -> MotionStatistics:
    """Convenience wrapper around `MotionMetrics.compute_statistics`."""
    return MotionMetrics(fps=fps).compute_statistics(samples, scale, axis)
