import math

import pytest

from motion_tracking.data_structures import AxisConfig, PositionSample, ScaleConfig
from motion_tracking.export import (
    export_columns,
    generate_tracking_csv,
    load_tracking_csv,
    save_tracking_csv,
    tracking_dataframe,
)

SAMPLES = [
    PositionSample(frame=0, x=100.0, y=50.0, object_id='ball'),
    PositionSample(frame=3, x=103.456, y=49.0, object_id='ball'),
    PositionSample(frame=1, x=10.0, y=20.0, object_id='cart'),
]
AXIS = AxisConfig(origin_x=100.0, origin_y=50.0, rotation_angle=math.pi / 2)
SCALE = ScaleConfig(pixels_per_meter=200.0)


def _rows(text):
    lines = text.strip('\n').split('\n')
    return [line.split(',') for line in lines]


@pytest.mark.parametrize("scale, axis, n_columns", [
    (None, None, 5),
    (None, AXIS, 7),
    (SCALE, None, 7),
    (SCALE, AXIS, 11),
])
def test_column_count(scale, axis, n_columns):
    rows = _rows(generate_tracking_csv(SAMPLES, scale, axis))
    assert len(rows) == len(SAMPLES) + 1
    assert all(len(row) == n_columns for row in rows)


def test_header_order():
    header = _rows(generate_tracking_csv(SAMPLES, SCALE, AXIS))[0]
    assert header == export_columns(SCALE, AXIS)
    assert header[:5] == ['objectId', 'frame', 'time (seconds)', 'x (pixels)', 'y (pixels)']
    assert header[-2:] == ['x (axis meters)', 'y (axis meters)']


def test_values_and_precision():
    rows = _rows(generate_tracking_csv(SAMPLES, SCALE, AXIS))
    ball = rows[2]
    assert ball[:5] == ['ball', '3', '0.100000', '103.46', '49.00']
    # axis rotated by 90 degrees: (dx, dy) = (3.456, -1) -> (-1, -3.456)
    assert ball[5:7] == ['-1.00', '-3.46']
    assert ball[7:9] == ['0.517280', '0.245000']
    assert ball[9:] == ['-0.005000', '-0.017280']


def test_rows_keep_input_order():
    rows = _rows(generate_tracking_csv(SAMPLES))
    assert [row[1] for row in rows[1:]] == ['0', '3', '1']


def test_empty_samples_header_only():
    rows = _rows(generate_tracking_csv([]))
    assert rows == [export_columns()]


def test_dataframe_is_numeric():
    df = tracking_dataframe(SAMPLES, scale=SCALE)
    assert df['x (meters)'].iloc[0] == pytest.approx(0.5)
    assert df['time (seconds)'].iloc[2] == pytest.approx(1 / 30)


def test_custom_fps():
    df = tracking_dataframe(SAMPLES, fps=60)
    assert df['time (seconds)'].iloc[1] == pytest.approx(0.05)


def test_save_and_load(tmp_path):
    path = save_tracking_csv(tmp_path / 'out' / 'tracking.csv', SAMPLES, SCALE, AXIS)
    loaded = load_tracking_csv(path)
    assert [s.object_id for s in loaded] == ['ball', 'ball', 'cart']
    assert [s.frame for s in loaded] == [0, 3, 1]
    assert loaded[1].x == pytest.approx(103.46)


def test_load_plain_columns(tmp_path):
    path = tmp_path / 'plain.csv'
    path.write_text("frame,x,y\n0,1.5,2\n1,2.5,3\n")
    loaded = load_tracking_csv(path)
    assert loaded[1] == PositionSample(frame=1, x=2.5, y=3.0, object_id='default')


def test_load_missing_columns(tmp_path):
    path = tmp_path / 'bad.csv'
    path.write_text("frame,u,v\n0,1,2\n")
    with pytest.raises(ValueError):
        load_tracking_csv(path)


def test_scale_to_meters():
    assert SCALE.to_meters(50.0) == pytest.approx(0.25)
    df = tracking_dataframe(SAMPLES, scale=SCALE)
    assert list(df['y (meters)']) == pytest.approx([0.25, 0.245, 0.1])
