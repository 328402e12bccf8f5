import pytest
import yaml

from motion_tracking.config import AnalysisConfig, load_config, save_config
from motion_tracking.data_structures import AxisConfig, ModelType, ScaleConfig


def test_defaults():
    config = AnalysisConfig.from_dict(None)
    assert config.fps == 30.0
    assert config.axis is None
    assert config.scale is None
    assert config.fit_model == ModelType.LINEAR


def test_load_yaml(tmp_path):
    path = tmp_path / 'analysis.yaml'
    path.write_text(yaml.safe_dump({
        'fps': 60,
        'axis': {'origin_x': 320, 'origin_y': 240, 'rotation_angle': 0.25},
        'scale': {'pixels_per_meter': 250},
        'fit_model': 'quadratic',
    }))
    config = load_config(path)
    assert config.fps == 60.0
    assert config.axis == AxisConfig(320.0, 240.0, 0.25)
    assert config.scale == ScaleConfig(250.0)
    assert config.fit_model == ModelType.QUADRATIC


def test_round_trip(tmp_path):
    config = AnalysisConfig(fps=24, axis=AxisConfig(1, 2, 0.5), scale=ScaleConfig(10),
                            fit_model=ModelType.EXPONENTIAL, fit_points=50)
    path = tmp_path / 'saved.yaml'
    save_config(config, path)
    assert load_config(path) == config


def test_empty_file(tmp_path):
    path = tmp_path / 'empty.yaml'
    path.write_text('')
    assert load_config(path) == AnalysisConfig()


@pytest.mark.parametrize("raw", [
    {'fps': 0},
    {'scale': {'pixels_per_meter': -2}},
    {'axis': {'origin_x': 1}},
    {'fit_model': 'spline'},
    {'fit_points': 0},
    {'frame_rate': 30},
])
def test_invalid_values(raw):
    with pytest.raises(ValueError):
        AnalysisConfig.from_dict(raw)


def test_non_mapping_file(tmp_path):
    path = tmp_path / 'list.yaml'
    path.write_text('- 1\n- 2\n')
    with pytest.raises(ValueError):
        load_config(path)
