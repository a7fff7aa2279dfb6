"""Shared pytest fixtures for fcprofiler tests."""

import pytest

from helpers import make_log, write_fake_addr2line


@pytest.fixture
def log_file(tmp_path):
    """Factory writing a sample log from raw bytes or a list of program counters."""
    def _write(content, name='profile.log'):
        path = tmp_path / name
        data = content if isinstance(content, bytes) else make_log(content)
        path.write_bytes(data)
        return str(path)
    return _write


@pytest.fixture
def fake_addr2line(tmp_path):
    """Factory for a stand-in addr2line executable."""
    def _make(mode='ok', symbols=None):
        return write_fake_addr2line(tmp_path, mode, symbols)
    return _make
