#!/usr/bin/env python3
"""
Sample aggregation and symbol resolution.

This package holds the two producer/consumer stages of a profiling run:
decoder thread to aggregator, and addr2line request writer to reply reader.
"""

from .aggregator import count_addresses, iter_raw_addresses
from .pipeline import SampleChannel, start_decoder, END_OF_STREAM
from .symbolizer import SymbolResolver, ReplyParser

__all__ = [
    'count_addresses',
    'iter_raw_addresses',
    'SampleChannel',
    'start_decoder',
    'END_OF_STREAM',
    'SymbolResolver',
    'ReplyParser',
]
