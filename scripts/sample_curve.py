#!/usr/bin/env python3
"""Tessellate a single cubic segment and print the polyline and bounds.

Quick manual check of the engine outside the editor: loads the engine
config, configures logging from it, builds a two-knot curve from the
command line, and prints the flattened points and the control-hull box.

Usage:
    # Arch from (0,0) to (1,0) with handles (0,1) and (1,1)
    python scripts/sample_curve.py --p0 0 0 --h0 0 1 --h1 1 1 --p1 1 0

    # Explicit tolerance and SYMMETRIC continuity on the second knot
    python scripts/sample_curve.py --p0 0 0 --h0 0 1 --h1 1 1 --p1 1 0 \
        --tolerance 0.001 --continuity symmetric

    # Custom config file, DEBUG logs
    python scripts/sample_curve.py --config my_engine.yaml --log-level DEBUG
"""

import argparse
import sys

from pydantic import ValidationError

from spline_engine import BezierCurve, Continuity, CurveError, config, get_logger


def parse_args():
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Tessellate a cubic Bézier segment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--p0', type=float, nargs=2, default=[0.0, 0.0], help='Start knot (x y)')
    parser.add_argument('--h0', type=float, nargs=2, default=[0.0, 1.0], help='Start outgoing handle (x y)')
    parser.add_argument('--h1', type=float, nargs=2, default=[1.0, 1.0], help='End incoming handle (x y)')
    parser.add_argument('--p1', type=float, nargs=2, default=[1.0, 0.0], help='End knot (x y)')
    parser.add_argument('--tolerance', type=float, default=None,
                        help='Flattening tolerance (default: from config)')
    parser.add_argument('--continuity', choices=[c.value for c in Continuity], default=None,
                        help='Continuity mode to declare on the end knot')
    parser.add_argument('--config', type=str, default=None, help='Engine config YAML')
    parser.add_argument('--log-level', type=str, default=None, help='Override config log level')
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    cfg = config.load_engine_config(args.config)
    if args.log_level:
        try:
            cfg.logging = config.LoggingConfig(
                **{**cfg.logging.model_dump(), 'level': args.log_level}
            )
        except ValidationError as e:
            print(f"Invalid --log-level {args.log_level!r}: {e}", file=sys.stderr)
            return 2
    config.apply_logging(cfg, context={"app": "sample_curve"})
    logger = get_logger("sample_curve")

    tolerance = args.tolerance if args.tolerance is not None else cfg.tessellation.tolerance

    try:
        curve = BezierCurve()
        curve.add_knot(*args.p0)
        curve.add_knot(*args.p1)
        curve.set_handle_next(0, *args.h0)
        curve.set_handle_prev(1, *args.h1)
        if args.continuity:
            curve.set_continuity(1, Continuity(args.continuity))

        points = curve.polyline(tolerance)
        bounds = curve.bounds()
    except CurveError as e:
        logger.error(f"Curve construction or tessellation failed: {e}")
        return 1

    logger.info(f"{len(points)} points at tolerance {tolerance}")
    for p in points:
        print(f"{p.x:.6f} {p.y:.6f}")
    print("bounds: xmin={:.6f} ymin={:.6f} xmax={:.6f} ymax={:.6f}".format(*bounds))
    return 0


if __name__ == '__main__':
    sys.exit(main())
