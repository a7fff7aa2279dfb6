"""Utility modules for fcprofiler CLI."""

from . import report_formatter

__all__ = ['report_formatter']
