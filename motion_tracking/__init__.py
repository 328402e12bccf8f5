"""
Video Motion Tracking Analysis

Turns per-frame pixel positions clicked on a tracked object into physics data:
calibrated distances, velocities, accelerations and fitted motion models.

Key Components:
- Position sample, axis, scale and result data structures
- Coordinate transformations (pixel space <-> user axis)
- One-sided finite-difference kinematics
- Motion statistics over one or more tracked objects
- Least-squares regression on a fixed catalog of model families
- CSV export and matplotlib charts

Usage:
    from motion_tracking import PositionSample, MotionMetrics, fit

    samples = [PositionSample(frame=0, x=100, y=50), PositionSample(frame=1, x=103, y=50)]
    stats = MotionMetrics(fps=30).compute_statistics(samples)
    result = fit([(0, 2), (1, 4), (2, 6)], 'linear')
"""

from .data_structures import (
    AxisConfig,
    ModelType,
    MotionStatistics,
    PositionSample,
    RegressionResult,
    ScaleConfig,
    SeriesPoint,
)
from .coordinate_transforms import (
    to_axis,
    from_axis,
    batch_to_axis
)
from .kinematics import (
    DEFAULT_FPS,
    compute_velocity,
    compute_acceleration,
    position_series,
    derivative_series,
    group_by_object,
)
from .metrics import MotionMetrics, calculate_statistics
from .regression import fit, fit_series, sample_fit_curve
from .export import generate_tracking_csv, tracking_dataframe, load_tracking_csv
from .config import AnalysisConfig, load_config

__version__ = "1.0.0"

__all__ = [
    # Data structures
    'PositionSample',
    'AxisConfig',
    'ScaleConfig',
    'SeriesPoint',
    'MotionStatistics',
    'ModelType',
    'RegressionResult',

    # Coordinate transforms
    'to_axis',
    'from_axis',
    'batch_to_axis',

    # Kinematics
    'DEFAULT_FPS',
    'compute_velocity',
    'compute_acceleration',
    'position_series',
    'derivative_series',
    'group_by_object',

    # Statistics and fitting
    'MotionMetrics',
    'calculate_statistics',
    'fit',
    'fit_series',
    'sample_fit_curve',

    # IO and config
    'generate_tracking_csv',
    'tracking_dataframe',
    'load_tracking_csv',
    'AnalysisConfig',
    'load_config',
]
