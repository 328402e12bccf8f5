"""
Data structures for video motion tracking and analysis.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional


@dataclass
class PositionSample:
    """
    Represents one clicked position of a tracked object in a video frame.

    Attributes:
        frame: Frame index (non-negative)
        x: Horizontal pixel coordinate
        y: Vertical pixel coordinate (increases downward)
        object_id: Identifier of the tracked object this sample belongs to
    """
    frame: int
    x: float
    y: float
    object_id: str = "default"


@dataclass
class AxisConfig:
    """
    User-defined coordinate frame in pixel space.

    Attributes:
        origin_x: Origin x in pixels
        origin_y: Origin y in pixels
        rotation_angle: Axis rotation in radians
    """
    origin_x: float
    origin_y: float
    rotation_angle: float = 0.0


@dataclass
class ScaleConfig:
    """
    Pixels-per-meter calibration derived from a reference distance.

    Attributes:
        pixels_per_meter: Calibration ratio, must be positive
    """
    pixels_per_meter: float

    def __post_init__(self):
        if not self.pixels_per_meter > 0:
            raise ValueError(f"pixels_per_meter must be positive, got {self.pixels_per_meter}")

    def to_meters(self, value):
        """Convert a pixel length (scalar or array) to meters."""
        return value / self.pixels_per_meter


@dataclass
class SeriesPoint:
    """One `(time, value)` entry of a time series."""
    time: float
    value: float


@dataclass
class MotionStatistics:
    """
    Summary scalars over one or more tracked objects.

    Attributes:
        total_distance: Path length (meters if scaled, else pixels)
        average_velocity: Mean velocity magnitude
        max_velocity: Maximum velocity magnitude
        average_acceleration: Mean acceleration magnitude
    """
    total_distance: float = 0.0
    average_velocity: float = 0.0
    max_velocity: float = 0.0
    average_acceleration: float = 0.0


class ModelType(Enum):
    """Closed-form model families supported by the regression engine."""
    LINEAR = "linear"
    QUADRATIC = "quadratic"
    CUBIC = "cubic"
    SQUARE_ROOT = "squareRoot"
    INVERSE_SQUARE = "inverseSquare"
    EXPONENTIAL = "exponential"


@dataclass
class RegressionResult:
    """
    Outcome of a least-squares fit.

    Attributes:
        model_type: Fitted model family
        coefficients: Model coefficients in model-form order
        r2: Coefficient of determination against the observed values,
            None when the observed values have no variance
        equation: Human readable model equation
        predict: Evaluates the fitted model at x
    """
    model_type: ModelType
    coefficients: List[float]
    r2: Optional[float]
    equation: str
    predict: Callable = field(repr=False, compare=False)
