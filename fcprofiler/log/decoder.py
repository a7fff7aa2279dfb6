#!/usr/bin/env python3
"""
Sample log frame decoder.

The firmware writes one frame per sample: a ``>`` start marker followed by
the sampled program counter as 4 little-endian bytes. There is no header,
length or checksum, and logs captured over a lossy link contain partial
frames and noise. The decoder scans for markers and only accepts a frame
when the byte right after it is another marker or the end of the stream.
Anything else is dropped silently and scanning resumes.
"""

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterator, List

logger = logging.getLogger(__name__)

MARKER = 0x3E  # '>'
ADDRESS_SIZE = 4
DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass
class DecoderStats:
    """Counters describing how much of a log was usable"""
    frames: int = 0         # accepted frames
    discarded: int = 0      # complete frames not followed by a marker or EOF
    truncated: int = 0      # marker at end of stream with fewer than 4 bytes after it
    garbage_bytes: int = 0  # bytes skipped while looking for a marker


class FrameDecoder:
    """Turns a noisy byte stream into program counter samples"""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.chunk_size = chunk_size
        self.stats = DecoderStats()

    def iter_samples(self, stream: BinaryIO) -> Iterator[int]:
        """Yield program counters in stream order.

        The generator reads ``stream`` lazily and finishes when it is
        exhausted. It is single-use: call it again with a fresh stream.

        Args:
            stream: Binary file-like object positioned at the start of the log

        Yields:
            32-bit program counter values
        """
        stats = self.stats
        address = bytearray()
        in_frame = False
        # Complete frame waiting for its terminating byte
        pending = None

        while True:
            chunk = stream.read(self.chunk_size)
            if not chunk:
                break
            for byte in chunk:
                if in_frame:
                    address.append(byte)
                    if len(address) == ADDRESS_SIZE:
                        pending = int.from_bytes(address, 'little')
                        address.clear()
                        in_frame = False
                    continue

                if pending is not None:
                    if byte == MARKER:
                        stats.frames += 1
                        yield pending
                    else:
                        stats.discarded += 1
                    pending = None

                if byte == MARKER:
                    in_frame = True
                else:
                    stats.garbage_bytes += 1

        if pending is not None:
            stats.frames += 1
            yield pending
        elif in_frame:
            stats.truncated += 1

        logger.debug("Decoded %d frames (%d discarded, %d truncated, %d garbage bytes)",
                     stats.frames, stats.discarded, stats.truncated, stats.garbage_bytes)


def decode_bytes(data: bytes) -> List[int]:
    """Decode an in-memory log and return every accepted sample."""
    return list(FrameDecoder().iter_samples(io.BytesIO(data)))
