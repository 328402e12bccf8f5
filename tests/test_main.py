import logging

import matplotlib
matplotlib.use('Agg')

import yaml

from motion_tracking.main import build_parser, main


def _write_samples(path):
    lines = ["objectId,frame,x,y"]
    lines += [f"ball,{f},{100 + 3 * f * f},{50 + 2 * f}" for f in range(8)]
    lines += [f"cart,{f},{10 * f},200" for f in range(4)]
    path.write_text("\n".join(lines) + "\n")
    return path


def test_parser_defaults():
    args = build_parser().parse_args(['samples.csv'])
    assert args.axis == 'x'
    assert args.fit is None
    assert args.plot_dir is None


def test_full_run(tmp_path, caplog):
    samples = _write_samples(tmp_path / 'samples.csv')
    config = tmp_path / 'config.yaml'
    config.write_text(yaml.safe_dump({'scale': {'pixels_per_meter': 100},
                                      'axis': {'origin_x': 100, 'origin_y': 50}}))
    export = tmp_path / 'export.csv'

    with caplog.at_level(logging.INFO):
        code = main([str(samples), '--config', str(config), '--fit', 'quadratic',
                     '--export', str(export), '--plot-dir', str(tmp_path / 'plots')])

    assert code == 0
    assert 'Total Distance' in caplog.text
    assert 'velocity fit' in caplog.text
    header = export.read_text().split('\n')[0]
    assert len(header.split(',')) == 11
    assert (tmp_path / 'plots' / 'velocity_vs_time_x_axis.png').exists()


def test_missing_file_returns_error(tmp_path):
    assert main([str(tmp_path / 'missing.csv')]) == 1


def test_fps_override(tmp_path, caplog):
    samples = _write_samples(tmp_path / 'samples.csv')
    with caplog.at_level(logging.INFO):
        assert main([str(samples), '--fps', '60']) == 0


def test_config_fit_points_reach_charts(tmp_path, monkeypatch):
    import motion_tracking.main as cli

    calls = []

    def record(samples, **kwargs):
        calls.append(kwargs)

    for name in ('plot_position_vs_time', 'plot_velocity_vs_time', 'plot_acceleration_vs_time'):
        monkeypatch.setattr(cli, name, record)

    samples = _write_samples(tmp_path / 'samples.csv')
    config = tmp_path / 'config.yaml'
    config.write_text(yaml.safe_dump({'fit_points': 12}))
    assert main([str(samples), '--config', str(config), '--plot-dir', str(tmp_path / 'plots')]) == 0
    assert len(calls) == 3
    assert all(kwargs['fit_points'] == 12 for kwargs in calls)
