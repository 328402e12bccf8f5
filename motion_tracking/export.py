# export.py
"""
Comma-separated export of raw and derived tracking coordinates.

Columns depend on the configuration:
    always:          objectId, frame, time (seconds), x (pixels), y (pixels)
    with axis:       + x (axis), y (axis)
    with scale:      + x (meters), y (meters)
    with both:       + x (axis meters), y (axis meters)
"""
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

import numpy as np
import pandas as pd

from motion_tracking.coordinate_transforms import batch_to_axis
from motion_tracking.data_structures import AxisConfig, PositionSample, ScaleConfig
from motion_tracking.kinematics import DEFAULT_FPS, check_fps

logger = logging.getLogger(__name__)

BASE_COLUMNS = ['objectId', 'frame', 'time (seconds)', 'x (pixels)', 'y (pixels)']
AXIS_COLUMNS = ['x (axis)', 'y (axis)']
METER_COLUMNS = ['x (meters)', 'y (meters)']
AXIS_METER_COLUMNS = ['x (axis meters)', 'y (axis meters)']

# decimals written per column
_PRECISION = {
    'time (seconds)': 6,
    'x (pixels)': 2, 'y (pixels)': 2,
    'x (axis)': 2, 'y (axis)': 2,
    'x (meters)': 6, 'y (meters)': 6,
    'x (axis meters)': 6, 'y (axis meters)': 6,
}


def export_columns(scale: Optional[ScaleConfig] = None,
                   axis: Optional[AxisConfig] = None) -> List[str]:
    """Column names written for the given configuration."""
    columns = list(BASE_COLUMNS)
    if axis is not None:
        columns += AXIS_COLUMNS
    if scale is not None:
        columns += METER_COLUMNS
    if axis is not None and scale is not None:
        columns += AXIS_METER_COLUMNS
    return columns


def tracking_dataframe(samples: Iterable[PositionSample],
                       scale: Optional[ScaleConfig] = None,
                       axis: Optional[AxisConfig] = None,
                       fps: float = DEFAULT_FPS) -> pd.DataFrame:
    """
    Build the export table with numeric columns, rows in input order.

    Args:
        samples: Samples of any number of objects
        scale: Optional scale configuration
        axis: Optional axis configuration
        fps: Frame rate

    Returns:
        DataFrame with the columns of `export_columns(scale, axis)`
    """
    fps = check_fps(fps)
    samples = list(samples)
    xs = np.array([s.x for s in samples], dtype=float)
    ys = np.array([s.y for s in samples], dtype=float)
    frames = np.array([s.frame for s in samples], dtype=int)

    df = pd.DataFrame({
        'objectId': pd.Series([s.object_id for s in samples], dtype=object),
        'frame': frames,
        'time (seconds)': frames / fps,
        'x (pixels)': xs,
        'y (pixels)': ys,
    })

    if axis is not None:
        axis_x, axis_y = batch_to_axis(xs, ys, axis)
        df['x (axis)'] = axis_x
        df['y (axis)'] = axis_y
    if scale is not None:
        df['x (meters)'] = scale.to_meters(xs)
        df['y (meters)'] = scale.to_meters(ys)
        if axis is not None:
            df['x (axis meters)'] = scale.to_meters(df['x (axis)'])
            df['y (axis meters)'] = scale.to_meters(df['y (axis)'])

    return df[export_columns(scale, axis)].copy()


def generate_tracking_csv(samples: Iterable[PositionSample],
                          scale: Optional[ScaleConfig] = None,
                          axis: Optional[AxisConfig] = None,
                          fps: float = DEFAULT_FPS) -> str:
    """
    Serialize samples and derived coordinates as comma-separated text.

    Returns:
        CSV text with a header row and one row per sample
    """
    df = tracking_dataframe(samples, scale, axis, fps)
    for column, decimals in _PRECISION.items():
        if column in df.columns:
            df[column] = df[column].map(lambda v, d=decimals: f"{v:.{d}f}")
    return df.to_csv(index=False, lineterminator='\n')


def save_tracking_csv(path: Union[str, Path],
                      samples: Iterable[PositionSample],
                      scale: Optional[ScaleConfig] = None,
                      axis: Optional[AxisConfig] = None,
                      fps: float = DEFAULT_FPS) -> Path:
    """Write `generate_tracking_csv` output to a file and return its path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(generate_tracking_csv(samples, scale, axis, fps), encoding='utf-8')
    logger.info("Saved tracking data to %s", path)
    return path


def _pick_column(df: pd.DataFrame, *names: str) -> str:
    for name in names:
        if name in df.columns:
            return name
    raise ValueError(f"CSV is missing a column named one of {list(names)}")


def load_tracking_csv(path: Union[str, Path]) -> List[PositionSample]:
    """
    Read position samples from a CSV file.

    Accepts the export format (`x (pixels)`, `y (pixels)`) or plain `x`, `y`
    columns. A missing object column puts every sample in object "default".

    Raises:
        ValueError: If the frame or coordinate columns are missing
    """
    df = pd.read_csv(path)
    frame_col = _pick_column(df, 'frame')
    x_col = _pick_column(df, 'x (pixels)', 'x')
    y_col = _pick_column(df, 'y (pixels)', 'y')
    object_col = next((c for c in ('objectId', 'object_id') if c in df.columns), None)

    object_ids = df[object_col].astype(str) if object_col else ["default"] * len(df)

    samples = [
        PositionSample(frame=int(frame), x=float(x), y=float(y), object_id=object_id)
        for frame, x, y, object_id in zip(df[frame_col], df[x_col], df[y_col], object_ids)
    ]
    logger.debug("Loaded %d samples from %s", len(samples), path)
    return samples
