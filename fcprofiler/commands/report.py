"""Report subcommand - ranks CPU hotspots from a firmware sample log."""

import os
import sys
import json
import argparse
import logging

from jinja2 import TemplateError as Jinja2TemplateError

from ..analysis.aggregator import count_addresses, iter_raw_addresses
from ..analysis.pipeline import start_decoder
from ..analysis.symbolizer import SymbolResolver
from ..core.config import ProfilerConfig, DEFAULT_ELF, DEFAULT_SYMBOLIZER, DEFAULT_QUEUE_SIZE
from ..core.elf import validate_executable
from ..core.exceptions import ProfilerError, LogReadError
from ..core.models import ProfileStats
from ..core.ranking import DEFAULT_TOP_N
from ..log.decoder import FrameDecoder
from ..utils.report_formatter import build_report_json, render_report

# Set up logger
logger = logging.getLogger(__name__)


def _validate_log_path(log_path: str) -> tuple[bool, str]:
    """
    Validate that the sample log exists and can be read.

    Args:
        log_path: Path to the profile log

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not log_path:
        return False, "Missing log filename argument"
    if not os.path.exists(log_path):
        return False, f"Profile log file not found: {log_path}"
    if not os.access(log_path, os.R_OK):
        return False, f"Cannot read profile log file: {log_path}"
    return True, ""


def add_report_parser(subparsers) -> argparse.ArgumentParser:
    """
    Add 'report' subcommand parser.

    Args:
        subparsers: Subparsers object from argparse

    Returns:
        The report parser
    """
    parser = subparsers.add_parser(
        'report',
        help='Rank hottest lines, functions and files from a sample log',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  # Ranked report using the default cleanflight_NAZE.elf
  fcprofiler report profile.log

  # Another target, top 20 entries per section
  fcprofiler report profile.log --elf obj/main/cleanflight_SPRACINGF3.elf --top 20

  # Only dump the decoded program counters
  fcprofiler report profile.log --raw

  # Machine-readable output
  fcprofiler report profile.log --json > profile.json
        """
    )

    parser.add_argument('log_path', help='Profile log file captured from the firmware')
    parser.add_argument(
        '--elf',
        dest='elf_path',
        default=DEFAULT_ELF,
        help='Firmware ELF file that corresponds to the profile (default: %(default)s)'
    )
    parser.add_argument(
        '--raw',
        action='store_true',
        help='Only print raw addresses, perform no analysis'
    )
    parser.add_argument(
        '--top',
        dest='top_n',
        type=int,
        default=DEFAULT_TOP_N,
        help='Number of entries per section (default: %(default)s)'
    )

    symbolizer_group = parser.add_argument_group('symbolizer options')
    symbolizer_group.add_argument(
        '--addr2line',
        dest='symbolizer',
        default=DEFAULT_SYMBOLIZER,
        help='addr2line executable for the target toolchain (default: %(default)s)'
    )
    symbolizer_group.add_argument(
        '--queue-size',
        type=int,
        default=DEFAULT_QUEUE_SIZE,
        help='Samples buffered between decoder and aggregator (default: %(default)s)'
    )

    output_group = parser.add_mutually_exclusive_group()
    output_group.add_argument(
        '--json',
        dest='output_json',
        action='store_true',
        help='Output the ranked report as JSON'
    )
    output_group.add_argument(
        '--template',
        type=str,
        metavar='PATH',
        help='Path to custom Jinja2 template (default: built-in template)'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ProfilerConfig:
    """Convert parsed arguments into an immutable run configuration."""
    return ProfilerConfig(
        log_path=args.log_path,
        elf_path=getattr(args, 'elf_path', DEFAULT_ELF),
        raw=getattr(args, 'raw', False),
        top_n=getattr(args, 'top_n', DEFAULT_TOP_N),
        symbolizer=getattr(args, 'symbolizer', DEFAULT_SYMBOLIZER),
        queue_size=getattr(args, 'queue_size', DEFAULT_QUEUE_SIZE),
        output_json=getattr(args, 'output_json', False),
        template=getattr(args, 'template', None),
    )


def validate_config(config: ProfilerConfig) -> None:
    """
    Check inputs before any decoding starts.

    Raises:
        ValueError: If an option is out of range or the log is unusable
        ExecutableError: If the ELF file is missing or invalid (non-raw mode)
    """
    is_valid, error_message = _validate_log_path(config.log_path)
    if not is_valid:
        raise ValueError(error_message)
    if config.top_n <= 0:
        raise ValueError(f"--top must be positive, got {config.top_n}")
    if config.queue_size <= 0:
        raise ValueError(f"--queue-size must be positive, got {config.queue_size}")
    if not config.raw:
        if not config.elf_path:
            raise ValueError("Missing elf filename argument")
        validate_executable(config.elf_path)


def print_raw_addresses(config: ProfilerConfig) -> int:
    """
    Print every decoded program counter in log order.

    Returns:
        Number of addresses printed
    """
    printed = 0
    try:
        with open(config.log_path, 'rb') as log:
            for line in iter_raw_addresses(start_decoder(log, config)):
                print(line)
                printed += 1
    except OSError as e:
        raise LogReadError(f"Failed to open profile log file '{config.log_path}': {e}") from e
    return printed


def generate_profile(config: ProfilerConfig) -> ProfileStats:
    """
    Decode the sample log, count addresses and resolve them to source lines.

    Args:
        config: Run configuration

    Returns:
        ProfileStats: Fully resolved statistics

    Raises:
        LogReadError: If the log cannot be read
        SymbolizerError: If addr2line cannot be run or misbehaves
    """
    logger.info("Profile log: %s", config.log_path)

    decoder = FrameDecoder()
    try:
        with open(config.log_path, 'rb') as log:
            address_counts = count_addresses(start_decoder(log, config, decoder))
    except OSError as e:
        raise LogReadError(f"Failed to open profile log file '{config.log_path}': {e}") from e

    if decoder.stats.discarded or decoder.stats.truncated:
        logger.info("Dropped %d malformed and %d truncated frames",
                    decoder.stats.discarded, decoder.stats.truncated)

    return SymbolResolver(config).resolve(address_counts)


def run_report(args: argparse.Namespace) -> int:
    """
    Execute the report subcommand.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    config = config_from_args(args)

    try:
        validate_config(config)
    except (ValueError, ProfilerError) as e:
        logger.error("%s", e)
        return 1

    if config.raw:
        try:
            print_raw_addresses(config)
        except ProfilerError as e:
            logger.error("%s", e)
            return 1
        return 0

    try:
        stats = generate_profile(config)
    except ProfilerError as e:
        logger.error("Failed to generate profile: %s", e)
        return 1

    if config.output_json:
        print(json.dumps(build_report_json(stats, config.top_n), indent=2))
        return 0

    try:
        output = render_report(stats, config.top_n, config.template)
    except (FileNotFoundError, Jinja2TemplateError) as e:
        logger.error("Template error: %s", e)
        return 1

    sys.stdout.write(output)
    return 0
