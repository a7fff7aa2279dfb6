"""Core data model, configuration and errors for fcprofiler."""

from .config import ProfilerConfig
from .exceptions import (
    ProfilerError,
    LogReadError,
    ExecutableError,
    SymbolizerError,
    SymbolizerLaunchError,
    SymbolizerProtocolError,
)
from .models import ProfileStats

__all__ = [
    'ProfilerConfig',
    'ProfileStats',
    'ProfilerError',
    'LogReadError',
    'ExecutableError',
    'SymbolizerError',
    'SymbolizerLaunchError',
    'SymbolizerProtocolError',
]
