"""Sample aggregation: per-address counts, or raw passthrough."""

import logging
from collections import Counter
from typing import Iterable, Iterator

logger = logging.getLogger(__name__)


def count_addresses(samples: Iterable[int]) -> Counter:
    """
    Count occurrences of each program counter.

    Consumes ``samples`` to completion before returning; the resolver needs
    the full address set before it sends any request.

    Args:
        samples: Program counters in decode order

    Returns:
        Counter mapping address to number of samples
    """
    counts = Counter()
    total = 0
    for pc in samples:
        counts[pc] += 1
        total += 1

    logger.info("Collected %d samples at %d distinct addresses", total, len(counts))
    return counts


def iter_raw_addresses(samples: Iterable[int]) -> Iterator[str]:
    """Format each sample as ``0x%08x`` in decode order, without aggregation."""
    for pc in samples:
        yield f"0x{pc:08x}"
