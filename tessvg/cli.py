"""
Command line entry point.

Usage:
    tessvg-examples
    tessvg-examples --shape Bezier
    tessvg-examples --output_dir out --tolerance 0.05 --keep_going
"""

import argparse
import logging
import sys

from .config import ExampleConfig
from .errors import TessvgError
from .examples import make_examples
from .log import setup_logging
from .path import ExampleShape

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tessvg-examples',
        description='Tessellate the example shapes and write one SVG per shape.')
    parser.add_argument("--output_dir", "--output-dir", dest='output_dir', type=str,
                        default='svg_output', help="output directory")
    parser.add_argument("--shape", dest='shapes', action='append', type=ExampleShape.parse,
                        help="shape to generate (repeatable, default: all of "
                             + ', '.join(s.value for s in ExampleShape) + ")")
    parser.add_argument("--tolerance", type=float, default=None,
                        help="curve flattening tolerance for both passes")
    parser.add_argument("--keep_going", "--keep-going", dest='keep_going', action='store_true',
                        help="skip shapes that fail instead of aborting the run")
    parser.add_argument("--log_file", "--log-file", dest='log_file', type=str, default=None)
    parser.add_argument("-v", "--verbose", action='store_true')
    return parser


def config_from_args(args) -> ExampleConfig:
    config = ExampleConfig(output_dir=args.output_dir, keep_going=args.keep_going)
    if args.shapes:
        # Keep the order given, drop repeats
        config.shapes = tuple(dict.fromkeys(args.shapes))
    if args.tolerance is not None:
        config = config.with_tolerance(args.tolerance)
    return config


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    config = config_from_args(args)
    try:
        written = make_examples(config)
    except TessvgError:
        return 1

    log.info("Wrote %d of %d files to %s", len(written), len(config.shapes), config.output_dir)
    return 0


if __name__ == '__main__':
    sys.exit(main())
