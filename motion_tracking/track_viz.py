import logging
import math
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import matplotlib.pyplot as plt

from motion_tracking.data_structures import (
    AxisConfig, ModelType, PositionSample, RegressionResult, ScaleConfig, SeriesPoint,
)
from motion_tracking.kinematics import (
    DEFAULT_FPS, compute_acceleration, compute_velocity, group_by_object, position_series,
)
from motion_tracking.regression import fit_series, sample_fit_curve

logger = logging.getLogger(__name__)

FIT_LINE_COLOR = 'black'


def prepare_output_directories(output_dir: Union[str, Path]):
    """
    Create output directory structure for charts.

    Args:
        output_dir: Base output directory
    """
    Path(output_dir).mkdir(parents=True, exist_ok=True)


def nice_ticks(vmin: float,
               vmax: float,
               target_count: int = 6,
               tight: bool = False) -> Tuple[List[float], Tuple[float, float]]:
    """
    Evenly spaced axis ticks on round numbers (1, 2 or 5 times a power of ten).

    Args:
        vmin: Smallest data value
        vmax: Largest data value
        target_count: Approximate number of ticks
        tight: Use small padding around the data (value axes)

    Returns:
        Tuple of (ticks, (domain_min, domain_max))
    """
    if vmin == vmax or not math.isfinite(vmin) or not math.isfinite(vmax):
        value = vmin if math.isfinite(vmin) else 0.0
        padding = (abs(value) * 0.1 or 0.01) if tight else 0.1
        return [value], (value - padding, value + padding)

    span = vmax - vmin
    if tight:
        if span < 1:
            padding = span * 0.05
        elif span < 10:
            padding = min(span * 0.03, 0.5)
        else:
            padding = min(span * 0.02, 2.0)
    else:
        padding = span * 0.05

    raw_step = span / max(target_count - 1, 1)
    magnitude = 10 ** math.floor(math.log10(raw_step))
    normalized = raw_step / magnitude
    if normalized <= 1:
        step = magnitude
    elif normalized <= 2:
        step = 2 * magnitude
    elif normalized <= 5:
        step = 5 * magnitude
    else:
        step = 10 * magnitude
    if tight and step > raw_step * 2:
        step = magnitude / 2

    lo = math.floor((vmin - padding) / step) * step
    hi = math.ceil((vmax + padding) / step) * step
    if tight:
        max_expansion = max(span * 0.15, step * 2)
        if lo < vmin - max_expansion:
            lo = math.floor((vmin - max_expansion) / step) * step
        if hi > vmax + max_expansion:
            hi = math.ceil((vmax + max_expansion) / step) * step

    count = int(round((hi - lo) / step)) + 1
    ticks = [round(lo + i * step, 10) for i in range(count)]
    return ticks, (lo, hi)


def plot_series_vs_time(series_by_object: Dict[str, List[SeriesPoint]],
                        ylabel: str,
                        title: str,
                        output_path: Optional[Union[str, Path]] = None,
                        fit_model: Optional[Union[str, ModelType]] = None,
                        fit_points: int = 100):
    """
    Plot one line per tracked object, optionally with a dashed fitted curve.

    Args:
        series_by_object: Mapping object_id -> time series
        ylabel: Value axis label
        title: Figure title
        output_path: Save the figure here and close it when given
        fit_model: Model family to fit per object
        fit_points: Samples along each fitted curve

    Returns:
        Tuple of (figure, {object_id: RegressionResult}) for the fits that succeeded
    """
    fig, ax = plt.subplots(figsize=(8, 5))
    fits: Dict[str, RegressionResult] = {}
    all_times, all_values = [], []

    for object_id, series in series_by_object.items():
        times = [p.time for p in series]
        values = [p.value for p in series]
        all_times += times
        all_values += values
        ax.plot(times, values, marker='o', markersize=3, linewidth=2, label=f"Object {object_id[-6:]}")

        if fit_model is None or not series:
            continue
        result = fit_series(series, fit_model)
        if result is None:
            logger.info("Object %s: not enough data to fit a %s curve", object_id,
                        getattr(fit_model, 'value', fit_model))
            continue
        fits[object_id] = result
        fit_x, fit_y = sample_fit_curve(result, min(times), max(times), fit_points)
        ax.plot(fit_x, fit_y, color=FIT_LINE_COLOR, linestyle='--', linewidth=2,
                label=f"{object_id[-6:]} fit: {result.equation}")

    if all_times:
        time_ticks, time_domain = nice_ticks(min(all_times), max(all_times))
        value_ticks, value_domain = nice_ticks(min(all_values), max(all_values), tight=True)
        ax.set_xticks(time_ticks)
        ax.set_xlim(*time_domain)
        ax.set_yticks(value_ticks)
        ax.set_ylim(*value_domain)
        ax.legend(loc='best', fontsize=8)
    else:
        ax.text(0.5, 0.5, "No tracking data available", ha='center', va='center', transform=ax.transAxes)

    ax.set_xlabel("Time (seconds)")
    ax.set_ylabel(ylabel)
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    if output_path is not None:
        prepare_output_directories(Path(output_path).parent)
        fig.savefig(output_path, dpi=150)
        plt.close(fig)
        logger.info("Saved chart to %s", output_path)

    return fig, fits


def _units(scale: Optional[ScaleConfig]) -> str:
    return "meters" if scale is not None else "pixels"


def plot_position_vs_time(samples: List[PositionSample],
                          axis_type: str = 'x',
                          axis: Optional[AxisConfig] = None,
                          scale: Optional[ScaleConfig] = None,
                          fps: float = DEFAULT_FPS,
                          output_path: Optional[Union[str, Path]] = None,
                          fit_model: Optional[Union[str, ModelType]] = None,
                          fit_points: int = 100):
    series = {object_id: position_series(object_samples, axis_type, axis, scale, fps)
              for object_id, object_samples in group_by_object(samples).items()}
    return plot_series_vs_time(series, f"Position {axis_type.upper()} ({_units(scale)})",
                               "Position vs Time", output_path, fit_model, fit_points)


def plot_velocity_vs_time(samples: List[PositionSample],
                          axis_type: str = 'x',
                          axis: Optional[AxisConfig] = None,
                          scale: Optional[ScaleConfig] = None,
                          fps: float = DEFAULT_FPS,
                          output_path: Optional[Union[str, Path]] = None,
                          fit_model: Optional[Union[str, ModelType]] = None,
                          fit_points: int = 100):
    series = {object_id: compute_velocity(object_samples, axis_type, axis, scale, fps)
              for object_id, object_samples in group_by_object(samples).items()}
    return plot_series_vs_time(series, f"Velocity {axis_type.upper()} ({_units(scale)}/s)",
                               "Velocity vs Time", output_path, fit_model, fit_points)


def plot_acceleration_vs_time(samples: List[PositionSample],
                              axis_type: str = 'x',
                              axis: Optional[AxisConfig] = None,
                              scale: Optional[ScaleConfig] = None,
                              fps: float = DEFAULT_FPS,
                              output_path: Optional[Union[str, Path]] = None,
                              fit_model: Optional[Union[str, ModelType]] = None,
                              fit_points: int = 100):
    """Acceleration per object, same layout as the velocity chart."""
    series = {object_id: compute_acceleration(object_samples, axis_type, axis, scale, fps)
              for object_id, object_samples in group_by_object(samples).items()}
    return plot_series_vs_time(series, f"Acceleration {axis_type.upper()} ({_units(scale)}/s²)",
                               "Acceleration vs Time", output_path, fit_model, fit_points)
