"""Test helpers: frame builders and a scriptable stand-in for addr2line."""

import os
import stat
import sys
import textwrap
from pathlib import Path
from typing import Dict, Iterable, Tuple

MARKER = b'>'


def make_frame(pc: int) -> bytes:
    """Encode one well-formed sample frame."""
    return MARKER + pc.to_bytes(4, 'little')


def make_log(pcs: Iterable[int]) -> bytes:
    """Encode back-to-back frames for every program counter."""
    return b''.join(make_frame(pc) for pc in pcs)


FAKE_ADDR2LINE = '''\
import sys

MODE = {mode!r}
SYMBOLS = {symbols!r}


def reply(address, location=None):
    function, default_location = SYMBOLS.get(
        address, ("func_%x" % address, "/build/./src/mod%d.c:%d" % (address % 4, address % 97)))
    if MODE == "garbage":
        location = "not a location"
    sys.stdout.write("0x%08x\\n%s\\n%s\\n" % (address, function, location or default_location))


if MODE == "extra":
    reply(0xdeadbeef)

last = None
for index, line in enumerate(sys.stdin):
    address = int(line, 16)
    last = address
    if MODE == "missing" and index == 0:
        continue
    reply(address)

if MODE == "duplicate" and last is not None:
    reply(last)

sys.stdout.flush()
sys.exit(3 if MODE == "fail" else 0)
'''


def write_fake_addr2line(directory: Path, mode: str = 'ok',
                         symbols: Dict[int, Tuple[str, str]] = None) -> str:
    """
    Write an executable that answers like ``addr2line --addresses --functions``.

    Args:
        directory: Where to put the script
        mode: 'ok', 'extra', 'missing', 'duplicate', 'garbage' or 'fail'
        symbols: Optional address -> (function, "file:line") overrides

    Returns:
        Path of the executable wrapper
    """
    directory = Path(directory)
    script = directory / f'fake_addr2line_{mode}.py'
    script.write_text(FAKE_ADDR2LINE.format(mode=mode, symbols=symbols or {}),
                      encoding='utf-8')

    wrapper = directory / f'fake-addr2line-{mode}'
    wrapper.write_text(textwrap.dedent(f'''\
        #!/bin/sh
        exec "{sys.executable}" "{script}" "$@"
        '''), encoding='utf-8')
    wrapper.chmod(wrapper.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(wrapper)


# The fake addr2line wrapper is a shell script
NOT_POSIX = os.name != "posix"
