"""
Analysis configuration loaded from YAML.

Example file:

    fps: 30
    axis:
      origin_x: 320
      origin_y: 240
      rotation_angle: 0.0
    scale:
      pixels_per_meter: 250
    fit_model: quadratic
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from motion_tracking.data_structures import AxisConfig, ModelType, ScaleConfig
from motion_tracking.kinematics import DEFAULT_FPS, check_fps
from motion_tracking.regression import resolve_model_type


@dataclass
class AnalysisConfig:
    """
    Settings for one analysis run.

    Attributes:
        fps: Video frame rate
        axis: Optional user axis
        scale: Optional pixels-per-meter calibration
        fit_model: Model family fitted to velocity series
        fit_points: Samples drawn along each fitted curve for charts
    """
    fps: float = DEFAULT_FPS
    axis: Optional[AxisConfig] = None
    scale: Optional[ScaleConfig] = None
    fit_model: ModelType = ModelType.LINEAR
    fit_points: int = 100

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]]) -> 'AnalysisConfig':
        """
        Build a config from a plain dict, defaults for missing keys.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        config = dict(config or {})
        unknown = set(config) - {'fps', 'axis', 'scale', 'fit_model', 'fit_points'}
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")

        axis = None
        if config.get('axis') is not None:
            section = config['axis']
            try:
                axis = AxisConfig(origin_x=float(section['origin_x']),
                                  origin_y=float(section['origin_y']),
                                  rotation_angle=float(section.get('rotation_angle', 0.0)))
            except (KeyError, TypeError) as e:
                raise ValueError(f"Invalid 'axis' section: {e}") from e

        scale = None
        if config.get('scale') is not None:
            try:
                scale = ScaleConfig(pixels_per_meter=float(config['scale']['pixels_per_meter']))
            except (KeyError, TypeError) as e:
                raise ValueError(f"Invalid 'scale' section: {e}") from e

        fit_points = int(config.get('fit_points', 100))
        if fit_points < 1:
            raise ValueError(f"fit_points must be at least 1, got {fit_points}")

        return cls(
            fps=check_fps(float(config.get('fps', DEFAULT_FPS))),
            axis=axis,
            scale=scale,
            fit_model=resolve_model_type(config.get('fit_model', ModelType.LINEAR)),
            fit_points=fit_points,
        )

    def to_dict(self) -> Dict[str, Any]:
        config: Dict[str, Any] = {
            'fps': self.fps,
            'fit_model': self.fit_model.value,
            'fit_points': self.fit_points,
        }
        if self.axis is not None:
            config['axis'] = {'origin_x': self.axis.origin_x,
                              'origin_y': self.axis.origin_y,
                              'rotation_angle': self.axis.rotation_angle}
        if self.scale is not None:
            config['scale'] = {'pixels_per_meter': self.scale.pixels_per_meter}
        return config


def load_config(path: Union[str, Path]) -> AnalysisConfig:
    """Load an AnalysisConfig from a YAML file."""
    with open(path, 'r') as fp:
        raw = yaml.safe_load(fp)
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return AnalysisConfig.from_dict(raw)


def save_config(config: AnalysisConfig, path: Union[str, Path]):
    with open(path, 'w') as fp:
        yaml.safe_dump(config.to_dict(), fp, sort_keys=False)
