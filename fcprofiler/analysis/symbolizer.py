#!/usr/bin/env python3
"""
Address resolution through an external addr2line process.

addr2line is started with ``--addresses --functions`` and fed one hex
address per line on stdin. For each request it answers with three lines:
the echoed address, the function name and ``file:line`` (``file:?`` when
the line is unknown).

Requests and replies go through OS pipes with bounded buffers, so writing
every request before reading anything can block both processes. The reply
reader therefore runs in its own thread and is started before the first
request is written. Replies are matched to requests by the echoed address,
never by position.
"""

import re
import logging
import subprocess
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from ..core.config import ProfilerConfig
from ..core.exceptions import SymbolizerLaunchError, SymbolizerProtocolError
from ..core.models import AddressDefinition, ProfileStats

logger = logging.getLogger(__name__)

ADDRESS_RE = re.compile(r'^0x[0-9a-fA-F]+$')
FILENAME_LINE_RE = re.compile(r'^(.+):(\d+|\?+)$')
# Newer binutils append this to the location line
DISCRIMINATOR_RE = re.compile(r'\s+\(discriminator \d+\)$')
# Drops "./" and "<build dir>/./" in front of the source path
PATH_PREFIX_RE = re.compile(r'^(?:.*/)?\./')


def parse_address_line(line: str) -> int:
    """Parse the echoed ``0x...`` address line of a reply.

    Raises:
        SymbolizerProtocolError: If the line is not a hex address
    """
    text = line.strip()
    if not ADDRESS_RE.match(text):
        raise SymbolizerProtocolError(f"Bad address line from addr2line: '{text}'")
    return int(text, 16)


def parse_location_line(line: str) -> Tuple[str, int]:
    """Split a ``file:line`` reply into a normalized filename and line number.

    A line reported as ``?`` becomes 0.

    Raises:
        SymbolizerProtocolError: If the line does not look like ``file:line``
    """
    text = DISCRIMINATOR_RE.sub('', line.rstrip('\r\n'))
    match = FILENAME_LINE_RE.match(text)
    if not match:
        raise SymbolizerProtocolError(
            f"Failed to parse filename/line number from '{text}'")

    filename = PATH_PREFIX_RE.sub('', match.group(1))
    line_field = match.group(2)
    line_num = int(line_field) if line_field.isdigit() else 0
    return filename, line_num


class ReplyParser:
    """Folds addr2line replies into ProfileStats, checking them against the requests"""

    def __init__(self, address_counts: Dict[int, int], stats: ProfileStats):
        self.address_counts = address_counts
        self.stats = stats
        self.replies = 0

    def consume(self, lines: Iterable[str]) -> None:
        """Process every reply triple in ``lines``.

        Raises:
            SymbolizerProtocolError: On malformed, truncated, duplicate or
                unrequested replies
        """
        iterator = iter(lines)
        for address_line in iterator:
            address = parse_address_line(address_line)
            function_line = next(iterator, None)
            location_line = next(iterator, None)
            if function_line is None or location_line is None:
                raise SymbolizerProtocolError(
                    f"addr2line output ended in the middle of the reply for 0x{address:08x}")
            self.process_reply(address, function_line.rstrip('\r\n'), location_line)

    def process_reply(self, address: int, function_name: str, location_line: str) -> None:
        """Record one resolved address in every granularity."""
        if address not in self.address_counts:
            raise SymbolizerProtocolError(
                f"addr2line gave us an address 0x{address:08x} which we didn't ask for")
        if AddressDefinition(address) in self.stats.addresses:
            raise SymbolizerProtocolError(
                f"addr2line answered twice for address 0x{address:08x}")

        filename, line_num = parse_location_line(location_line)
        self.stats.record(address, self.address_counts[address],
                          function_name, filename, line_num)
        self.replies += 1

    def check_complete(self) -> None:
        """Fail if any requested address never got a reply."""
        missing = len(self.address_counts) - self.replies
        if missing:
            unresolved = sorted(
                addr for addr in self.address_counts
                if AddressDefinition(addr) not in self.stats.addresses
            )
            preview = ', '.join(f"0x{addr:08x}" for addr in unresolved[:5])
            raise SymbolizerProtocolError(
                f"addr2line did not resolve {missing} address(es): {preview}")


class SymbolResolver:
    """Drives addr2line for a complete address->count map"""

    def __init__(self, config: ProfilerConfig):
        self.config = config

    def command(self) -> List[str]:
        """Build the addr2line command line."""
        return [
            self.config.symbolizer,
            '--addresses',
            '--functions',
            f'--exe={self.config.elf_path}',
        ]

    def _launch(self) -> subprocess.Popen:
        command = self.command()
        logger.debug("Starting symbolizer: %s", ' '.join(command))
        try:
            return subprocess.Popen(  # pylint: disable=consider-using-with
                command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                encoding='utf-8',
                errors='replace',
            )
        except OSError as e:
            raise SymbolizerLaunchError(
                f"Failed to run '{self.config.symbolizer}': {e}. "
                "Is it on the $PATH? Use --addr2line to point at it."
            ) from e

    def resolve(self, address_counts: Dict[int, int]) -> ProfileStats:
        """Resolve every address and build the profile statistics.

        Args:
            address_counts: Complete address->count map; not modified

        Returns:
            ProfileStats populated from the symbolizer replies

        Raises:
            SymbolizerLaunchError: If addr2line cannot be started
            SymbolizerProtocolError: If its replies break the expected format
        """
        stats = ProfileStats()
        parser = ReplyParser(address_counts, stats)
        process = self._launch()

        errors: List[BaseException] = []

        def read_replies():
            try:
                parser.consume(process.stdout)
            except SymbolizerProtocolError as e:
                errors.append(e)
                # Unblock the writer if it is still feeding requests
                process.kill()

        reader = threading.Thread(target=read_replies, name='addr2line-reader', daemon=True)
        reader.start()

        write_error = self._write_requests(process, address_counts)

        reader.join()
        process.stdout.close()
        returncode = process.wait()

        if errors:
            raise errors[0]
        if write_error is not None:
            raise SymbolizerProtocolError(
                f"addr2line stopped accepting requests: {write_error}") from write_error
        if returncode != 0:
            raise SymbolizerProtocolError(f"addr2line exited with status {returncode}")
        parser.check_complete()

        logger.info("Resolved %d addresses to %d lines, %d functions, %d files",
                    len(stats.addresses), len(stats.lines),
                    len(stats.functions), len(stats.files))
        return stats

    @staticmethod
    def _write_requests(process: subprocess.Popen,
                        address_counts: Dict[int, int]) -> Optional[OSError]:
        """Send every address request, then close stdin.

        Returns:
            The pipe error if addr2line went away early, otherwise None
        """
        try:
            for address in address_counts:
                process.stdin.write(f"0x{address:x}\n")
            process.stdin.close()
        except OSError as e:  # BrokenPipeError included
            logger.debug("Writing to addr2line failed: %s", e)
            try:
                process.stdin.close()
            except OSError:
                logger.debug("addr2line stdin already broken")
            return e
        return None

