#!/usr/bin/env python3
"""
Command-line entry point for fcprofiler.

Dispatches to subcommands and sets up logging before any work starts.
"""

import sys
import logging
import argparse
from importlib.metadata import version, PackageNotFoundError

from .commands.report import add_report_parser, run_report


def configure_logging(verbose: bool = False) -> None:
    """Configure basic logging for main entry points."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(levelname)s: %(message)s'
    )


def _package_version() -> str:
    try:
        return version('fcprofiler')
    except PackageNotFoundError:
        return 'unknown'


def build_parser() -> argparse.ArgumentParser:
    """Create the top-level parser with all subcommands registered."""
    parser = argparse.ArgumentParser(
        prog='fcprofiler',
        description='CPU hotspot analysis for flight-controller sampling profiles',
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {_package_version()}'
    )

    subparsers = parser.add_subparsers(dest='command', metavar='command')
    subparsers.required = True

    report_parser = add_report_parser(subparsers)
    report_parser.set_defaults(func=run_report)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(getattr(args, 'verbose', False))
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
