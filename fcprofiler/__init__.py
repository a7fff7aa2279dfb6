#!/usr/bin/env python3
"""
CPU hotspot analysis for flight-controller firmware.

This package decodes sampling-profiler logs captured from the firmware,
resolves the sampled program counters with addr2line, and ranks the hottest
lines, functions and files.
"""

from .core.config import ProfilerConfig
from .core.models import ProfileStats
from .commands.report import generate_profile

__all__ = ['ProfilerConfig', 'ProfileStats', 'generate_profile']
