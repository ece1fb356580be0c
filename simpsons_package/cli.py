#!/usr/bin/env python3
"""
Command-line interface for Simpson's paradox detection.

    simpsons-tools detect cars.csv --cause Weight --effect MPG --factor Cylinders --units-row
    simpsons-tools analyze cars.csv --cause MPG --effect Horsepower --plots output/

`detect` exits with 1 when a paradox is found and 0 otherwise; any analysis
error exits with 2.
"""

import argparse
import logging
import os
import sys

from .analysis import simpsons_analysis
from .config import load_settings
from .data_io import load_dataset, save_report_json
from .detector import detect_simpsons_paradox
from .errors import SimpsonsError

# Setup logging
logger = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('csv', help='Path to the CSV dataset')
    parser.add_argument('--cause', required=True, help='Cause column')
    parser.add_argument('--effect', required=True, help='Effect column')
    parser.add_argument('--config', help='YAML file with analysis settings')
    parser.add_argument('--units-row', action='store_true',
                        help='The line after the header holds units, not data')
    parser.add_argument('--seed', type=int, help='Random seed for clustering')
    parser.add_argument('--quiet', action='store_true', help='Suppress the trend trace')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='simpsons-tools',
        description="Detect Simpson's paradox in tabular data"
    )
    parser.add_argument('--version', action='store_true', help='Show version information')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    subparsers = parser.add_subparsers(dest='command')

    detect = subparsers.add_parser('detect', help='Check one cause/effect/factor triple')
    _add_common_arguments(detect)
    detect.add_argument('--factor', required=True, help='Factor (confounder) column')
    detect.add_argument('--json', help='Write the report as JSON to this path')

    analyze = subparsers.add_parser('analyze', help='Try every other column as the factor')
    _add_common_arguments(analyze)
    analyze.add_argument('--plots', help='Directory to save figures into')

    return parser


def _settings_from_args(args):
    return load_settings(
        args.config,
        random_state=args.seed,
        verbose=False if args.quiet else None,
    )


def _run_detect(args) -> int:
    settings = _settings_from_args(args)
    df = load_dataset(args.csv, units_row=args.units_row)
    report = detect_simpsons_paradox(df, args.cause, args.effect, args.factor, **settings.as_kwargs())
    if args.json:
        save_report_json(report, args.json)
        logger.info(f"Saved report to {args.json}")
    return 1 if report.paradox_detected else 0


def _run_analyze(args) -> int:
    settings = _settings_from_args(args)
    df = load_dataset(args.csv, units_row=args.units_row)
    summary = simpsons_analysis(df, args.cause, args.effect, show_plots=bool(args.plots), settings=settings)
    if settings.verbose is False:
        print(summary.narrative)
    if args.plots:
        os.makedirs(args.plots, exist_ok=True)
        for name, fig in summary.figures.items():
            path = os.path.join(args.plots, f"{name}.png")
            fig.savefig(path, dpi=120)
            logger.info(f"Saved figure {path}")
    return 0


def main(argv=None):
    """
    CLI entry point.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.version:
        from . import __version__
        print(f"simpsons_package version: {__version__}")
        return 0
    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == 'detect':
            return _run_detect(args)
        return _run_analyze(args)
    except (SimpsonsError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
