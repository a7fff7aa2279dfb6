#!/usr/bin/env python3
"""
Exception hierarchy for profile decoding and symbol resolution.

Framing problems in the sample log are never raised; the decoder absorbs
them. Everything here is fatal for a run and aborts before any report is
printed.
"""


class ProfilerError(Exception):
    """Base exception for all fcprofiler failures"""


class LogReadError(ProfilerError):
    """Exception raised when the sample log cannot be read"""


class ExecutableError(ProfilerError):
    """Exception raised when the target executable is missing or not an ELF image"""


class SymbolizerError(ProfilerError):
    """Base exception for failures talking to the address-to-line tool"""


class SymbolizerLaunchError(SymbolizerError):
    """Exception raised when the address-to-line tool cannot be started"""


class SymbolizerProtocolError(SymbolizerError):
    """Exception raised when the address-to-line tool breaks the reply format"""
