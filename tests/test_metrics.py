"""Tests for motion statistics."""
import logging
import math

import numpy as np
import pytest

from motion_tracking.data_structures import AxisConfig, MotionStatistics, PositionSample, ScaleConfig
from motion_tracking.metrics import MotionMetrics, calculate_statistics


def _line(object_id, n=5, dx=3.0, dy=4.0, start_frame=0):
    return [PositionSample(frame=start_frame + i, x=dx * i, y=dy * i, object_id=object_id) for i in range(n)]


class TestMotionMetrics:
    def test_no_points_all_zero(self):
        assert MotionMetrics().compute_statistics([]) == MotionStatistics(0.0, 0.0, 0.0, 0.0)

    def test_single_point(self):
        stats = MotionMetrics().compute_statistics([PositionSample(frame=3, x=1, y=1)])
        assert stats == MotionStatistics(0.0, 0.0, 0.0, 0.0)

    def test_uniform_motion(self):
        stats = MotionMetrics().compute_statistics(_line('a'))
        # 4 segments of length 5, speed 5 px/frame = 150 px/s
        assert stats.total_distance == pytest.approx(20.0)
        assert stats.average_velocity == pytest.approx(150.0)
        assert stats.max_velocity == pytest.approx(150.0)
        assert stats.average_acceleration == pytest.approx(0.0, abs=1e-9)

    def test_scale_converts_to_meters(self):
        stats = MotionMetrics().compute_statistics(_line('a'), scale=ScaleConfig(pixels_per_meter=5))
        assert stats.total_distance == pytest.approx(4.0)
        assert stats.average_velocity == pytest.approx(30.0)

    def test_distance_is_rotation_invariant(self):
        samples = _line('a')
        axis = AxisConfig(origin_x=50, origin_y=-20, rotation_angle=1.1)
        metrics = MotionMetrics()
        assert metrics.total_distance(samples, axis=axis) == pytest.approx(metrics.total_distance(samples))
        assert metrics.compute_statistics(samples, axis=axis).max_velocity == pytest.approx(150.0)

    def test_distance_sorted_by_frame(self):
        samples = [PositionSample(frame=2, x=2, y=0), PositionSample(frame=0, x=0, y=0),
                   PositionSample(frame=1, x=1, y=0)]
        assert MotionMetrics().total_distance(samples) == pytest.approx(2.0)

    def test_objects_not_mixed(self):
        # two objects far apart at the same frames
        samples = _line('a') + _line('b', dx=0.0, dy=0.0)
        for s in samples[5:]:
            s.x += 1000
        stats = MotionMetrics().compute_statistics(samples)
        assert stats.total_distance == pytest.approx(20.0)
        assert stats.max_velocity == pytest.approx(150.0)
        # pooled over 5 moving + 5 resting samples
        assert stats.average_velocity == pytest.approx(75.0)

    def test_object_statistics(self):
        samples = _line('a') + _line('b', n=3, dx=0.0, dy=1.0)
        per_object = MotionMetrics().compute_object_statistics(samples)
        assert list(per_object) == ['a', 'b']
        assert per_object['a'].total_distance == pytest.approx(20.0)
        assert per_object['b'].average_velocity == pytest.approx(30.0)

    def test_acceleration_magnitude(self):
        # x = f^2, constant 1800 px/s^2 except the tail of the one-sided rule
        samples = [PositionSample(frame=f, x=f * f, y=0) for f in range(6)]
        metrics = MotionMetrics()
        magnitudes = metrics.acceleration_magnitudes(samples)
        np.testing.assert_allclose(magnitudes, [1800, 1800, 1800, 1800, 0, 0], atol=1e-6)
        assert metrics.compute_statistics(samples).average_acceleration == pytest.approx(1200.0)

    def test_custom_fps(self):
        stats = MotionMetrics(fps=60).compute_statistics(_line('a'))
        assert stats.average_velocity == pytest.approx(300.0)

    def test_invalid_fps(self):
        with pytest.raises(ValueError):
            MotionMetrics(fps=-1)

    def test_print_metrics_logs(self, caplog):
        with caplog.at_level(logging.INFO, logger='motion_tracking.metrics'):
            MotionMetrics().print_metrics(MotionStatistics(1.0, 2.0, 3.0, 4.0), object_id='ball')
        assert 'Object ball Statistics:' in caplog.text
        assert 'Max Velocity: 3.000 px/s' in caplog.text


def test_calculate_statistics_wrapper():
    stats = calculate_statistics(_line('a'), scale=None, axis=None, fps=30)
    assert math.isclose(stats.total_distance, 20.0)
