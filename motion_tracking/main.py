# main.py

"""Command-line analysis of tracked positions exported from a video."""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from motion_tracking.config import AnalysisConfig, load_config
from motion_tracking.data_structures import ModelType
from motion_tracking.export import load_tracking_csv, save_tracking_csv
from motion_tracking.kinematics import compute_velocity, group_by_object
from motion_tracking.metrics import MotionMetrics
from motion_tracking.regression import fit_series, resolve_model_type
from motion_tracking.track_viz import plot_acceleration_vs_time, plot_position_vs_time, plot_velocity_vs_time

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('samples', help='CSV with objectId, frame, x, y columns.')
    parser.add_argument('--config', help='Path to a YAML analysis config.', default=None)
    parser.add_argument('--fps', type=float, default=None, help='Override the config frame rate.')
    parser.add_argument('--fit', choices=[m.value for m in ModelType], default=None,
                        help='Model fitted to each object velocity series.')
    parser.add_argument('--axis', choices=['x', 'y'], default='x', help='Coordinate to differentiate and plot.')
    parser.add_argument('--export', default=None, help='Write the coordinate table to this CSV path.')
    parser.add_argument('--plot-dir', default=None, help='Save position/velocity/acceleration charts here.')
    parser.add_argument('--verbose', action='store_true')
    return parser


def run_analysis(args: argparse.Namespace) -> int:
    config = load_config(args.config) if args.config else AnalysisConfig()
    if args.fps is not None:
        config = AnalysisConfig.from_dict({**config.to_dict(), 'fps': args.fps})
    fit_model = resolve_model_type(args.fit) if args.fit else config.fit_model

    samples = load_tracking_csv(args.samples)
    logger.info("Loaded %d samples for %d object(s) from %s",
                len(samples), len(group_by_object(samples)), args.samples)

    metrics = MotionMetrics(fps=config.fps)
    metrics.print_metrics(metrics.compute_statistics(samples, config.scale, config.axis), config.scale)
    per_object = metrics.compute_object_statistics(samples, config.scale, config.axis)
    if len(per_object) > 1:
        for object_id, stats in per_object.items():
            metrics.print_metrics(stats, config.scale, object_id=object_id)

    for object_id, object_samples in group_by_object(samples).items():
        velocity = compute_velocity(object_samples, args.axis, config.axis, config.scale, config.fps)
        result = fit_series(velocity, fit_model)
        if result is None:
            logger.info("Object %s: not enough data to fit a %s curve", object_id, fit_model.value)
            continue
        r2 = f"{result.r2:.4f}" if result.r2 is not None else "n/a"
        logger.info("Object %s velocity fit: %s (R² = %s)", object_id, result.equation, r2)

    if args.export:
        save_tracking_csv(args.export, samples, config.scale, config.axis, config.fps)

    if args.plot_dir:
        plot_dir = Path(args.plot_dir)
        common = dict(axis_type=args.axis, axis=config.axis, scale=config.scale, fps=config.fps,
                      fit_points=config.fit_points)
        plot_position_vs_time(samples, output_path=plot_dir / f"position_vs_time_{args.axis}_axis.png", **common)
        plot_velocity_vs_time(samples, output_path=plot_dir / f"velocity_vs_time_{args.axis}_axis.png",
                              fit_model=fit_model, **common)
        plot_acceleration_vs_time(samples, output_path=plot_dir / f"acceleration_vs_time_{args.axis}_axis.png",
                                  **common)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    try:
        return run_analysis(args)
    except (OSError, ValueError) as e:
        logger.error("Analysis failed: %s", e)
        return 1


if __name__ == '__main__':
    raise SystemExit(main())
