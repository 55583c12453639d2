#!/usr/bin/env python3
"""
OSM Border Extractor command line

Reads an OpenStreetMap file four times (relations, ways, nodes, ways) and
writes one line per boundary way with its admin level, dividing line,
dispute, claim and maritime attributes and its geometry.

Usage:
    osm-border-extractor <input.osm.pbf> -o <output.csv> [options]
    osm-border-filter <input.osm.pbf> -o <boundaries.osm.pbf> [options]

Example:
    osm-border-extractor planet-latest.osm.pbf -o borders.csv --config config.yaml
"""

import argparse
import logging
import os
import sys
from contextlib import contextmanager
from typing import Iterator, List, Optional

from . import __version__
from .config import Config, OUTPUT_FORMATS
from .errors import BorderError, ConfigError, InputError, OutputExistsError, EXIT_CMDLINE, EXIT_FATAL
from .osmfilter import filter_boundaries
from .output import create_outputter
from .pipeline import BorderExtractor
from .stats import RunStats

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

VERSION_TEXT = f"""%(prog)s version {__version__}
License: GNU GENERAL PUBLIC LICENSE Version 3 <http://gnu.org/licenses/gpl.html>.
This is free software: you are free to change and redistribute it.
There is NO WARRANTY, to the extent permitted by law."""


class ArgumentParser(argparse.ArgumentParser):
    """argparse with the command line error exit code."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_CMDLINE, f"{self.prog}: error: {message}\n")


def setup_logging(verbose: bool, debug: bool) -> None:
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


def check_input(path: str) -> None:
    if not os.path.isfile(path):
        raise InputError(f"Input file '{path}' not found")


def check_output(path: str, overwrite: bool) -> None:
    """Refuse to replace an existing output file unless asked to."""
    if path == "-" or not os.path.exists(path):
        return
    if not overwrite:
        raise OutputExistsError(f"Output file '{path}' already exists (use --overwrite)")


@contextmanager
def replace_on_success(path: str) -> Iterator[str]:
    """Yield a temporary file name next to path and move it over path when the block succeeds.

    An existing output file is left untouched if the run fails. The temporary
    name keeps the suffix of path so osmium picks the same output format.
    """
    directory, name = os.path.split(path)
    tmp_path = os.path.join(directory, f".{os.getpid()}.{name}")
    try:
        yield tmp_path
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    os.replace(tmp_path, path)


def build_parser() -> argparse.ArgumentParser:
    parser = ArgumentParser(
        prog="osm-border-extractor",
        description="Extract administrative and disputed boundary lines from OSM files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  osm-border-extractor planet-latest.osm.pbf -o borders.csv
  osm-border-extractor data.osm.pbf -o borders.csv --config config.yaml -v
  osm-border-extractor data.osm.pbf -o borders.geojsonseq --format geojsonseq --epsg 4326

Configuration:
  Options in the YAML file given with --config are overridden by command line options.

Attribution:
  © OpenStreetMap contributors. Data licensed under ODbL.
        """
    )

    parser.add_argument('input_file', help='Path to input OSM file')
    parser.add_argument('-o', '--output-file', required=True,
                        help='File for output ("-" for standard output)')
    parser.add_argument('-f', '--overwrite', action='store_true',
                        help='Overwrite output file if it already exists')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')
    parser.add_argument('-d', '--debug', action='store_true', help='Enable debugging output')
    parser.add_argument('-V', '--version', action='version', version=VERSION_TEXT)
    parser.add_argument('--config', help='Path to YAML configuration file')
    parser.add_argument('--format', choices=OUTPUT_FORMATS,
                        help='Output format (overrides config)')
    parser.add_argument('--epsg', type=int,
                        help='EPSG code of the output SRS, 4326 or 3857 (overrides config)')
    parser.add_argument('--no-neutral', action='store_true',
                        help='Leave out the neutral column (overrides config)')
    return parser


def load_config(args: argparse.Namespace) -> Config:
    if args.config:
        config = Config.from_yaml(args.config)
        logger.info(f"Loaded configuration from {args.config}")
    else:
        config = Config()

    # Apply command line overrides
    if args.format is not None:
        config.output_format = args.format
    if args.epsg is not None:
        config.epsg = args.epsg
    if args.no_neutral:
        config.include_neutral = False
    if args.overwrite:
        config.overwrite = True
    if args.verbose:
        config.verbose = True
    if args.debug:
        config.debug = True

    config.validate()
    return config


def print_summary(stats: RunStats) -> None:
    print(f"There were {stats.warnings} warnings.", file=sys.stderr)
    print(f"There were {stats.errors} errors.", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, args.debug)

    try:
        config = load_config(args)
        setup_logging(config.verbose, config.debug)
        check_input(args.input_file)
        check_output(args.output_file, config.overwrite)

        extractor = BorderExtractor(config)
        if args.output_file == "-":
            with create_outputter(config, sys.stdout) as outputter:
                stats = extractor.run(args.input_file, outputter)
        else:
            with replace_on_success(args.output_file) as tmp_file, \
                    open(tmp_file, 'w', encoding='utf-8', newline='\n') as out, \
                    create_outputter(config, out) as outputter:
                stats = extractor.run(args.input_file, outputter)
    except ConfigError as e:
        logger.error(str(e))
        return EXIT_CMDLINE
    except BorderError as e:
        logger.error(str(e))
        return EXIT_FATAL
    except (OSError, RuntimeError) as e:
        # osmium reports unreadable input files as RuntimeError
        logger.error(f"Error processing file: {e}")
        return EXIT_FATAL

    print_summary(stats)
    return stats.exit_code(config.max_warnings)


def print_filter_summary(stats: RunStats) -> None:
    print(f"Wrote {stats.counts['relations_written']} relations, {stats.counts['ways_written']} ways "
          f"and {stats.counts['nodes_written']} nodes.", file=sys.stderr)


def build_filter_parser() -> argparse.ArgumentParser:
    parser = ArgumentParser(
        prog="osm-border-filter",
        description="Write only boundary relations, their ways and nodes to a new OSM file",
    )
    parser.add_argument('input_file', help='Path to input OSM file')
    parser.add_argument('-o', '--output', required=True,
                        help='Where to write output, format chosen by suffix (e.g. .osm.pbf)')
    parser.add_argument('-f', '--overwrite', action='store_true',
                        help='Overwrite output file if it already exists')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')
    parser.add_argument('-V', '--version', action='version', version=VERSION_TEXT)
    return parser


def filter_main(argv: Optional[List[str]] = None) -> int:
    args = build_filter_parser().parse_args(argv)
    setup_logging(args.verbose, False)

    if args.output == "-":
        logger.error("The filter cannot write to standard output")
        return EXIT_CMDLINE

    stats = RunStats()
    try:
        check_input(args.input_file)
        check_output(args.output, args.overwrite)
        with replace_on_success(args.output) as tmp_file:
            filter_boundaries(args.input_file, tmp_file, stats)
    except BorderError as e:
        logger.error(str(e))
        return EXIT_FATAL
    except (OSError, RuntimeError) as e:
        logger.error(f"io error: {e}")
        return EXIT_FATAL

    print_filter_summary(stats)
    return stats.exit_code()


if __name__ == "__main__":
    sys.exit(main())
