"""Run configuration passed explicitly into each pipeline stage."""

from dataclasses import dataclass
from typing import Optional

from .ranking import DEFAULT_TOP_N

DEFAULT_ELF = 'cleanflight_NAZE.elf'
DEFAULT_SYMBOLIZER = 'arm-none-eabi-addr2line'
DEFAULT_QUEUE_SIZE = 50


@dataclass(frozen=True)
class ProfilerConfig:  # pylint: disable=too-many-instance-attributes
    """Immutable options for one profiling run"""
    log_path: str
    elf_path: str = DEFAULT_ELF
    raw: bool = False
    top_n: int = DEFAULT_TOP_N
    symbolizer: str = DEFAULT_SYMBOLIZER
    queue_size: int = DEFAULT_QUEUE_SIZE
    output_json: bool = False
    template: Optional[str] = None
