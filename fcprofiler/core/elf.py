#!/usr/bin/env python3
"""
Target executable validation.

The address-to-line tool does the actual debug-info work. This module only
checks, before any samples are decoded, that the executable it will be given
exists, is an ELF image, and carries debug information.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path

from elftools.elf.elffile import ELFFile
from elftools.common.exceptions import ELFError

from .exceptions import ExecutableError

logger = logging.getLogger(__name__)

# Human-readable names for the machine types firmware images usually carry
MACHINE_NAMES = {
    'EM_ARM': 'ARM',
    'EM_AARCH64': 'AArch64',
    'EM_RISCV': 'RISC-V',
    'EM_XTENSA': 'Xtensa',
    'EM_386': 'x86',
    'EM_X86_64': 'x86-64',
}


@dataclass
class ExecutableInfo:
    """Summary of the target executable"""
    architecture: str
    bit_width: int
    endianness: str
    has_debug_info: bool


def validate_executable(elf_path: str) -> ExecutableInfo:
    """Check that the executable is readable and looks usable for symbolization.

    Args:
        elf_path: Path to the firmware ELF file

    Returns:
        ExecutableInfo describing the image

    Raises:
        ExecutableError: If the file is missing, unreadable or not an ELF image
    """
    path = Path(elf_path)
    if not path.exists():
        raise ExecutableError(f"ELF file not found: {elf_path}")
    if not os.access(path, os.R_OK):
        raise ExecutableError(f"Cannot read ELF file: {elf_path}")

    try:
        with open(path, 'rb') as f:
            elffile = ELFFile(f)
            machine = elffile['e_machine']
            info = ExecutableInfo(
                architecture=MACHINE_NAMES.get(machine, machine),
                bit_width=elffile.elfclass,
                endianness='little' if elffile.little_endian else 'big',
                has_debug_info=elffile.has_dwarf_info(),
            )
    except (IOError, OSError) as e:
        raise ExecutableError(f"Failed to read ELF file {elf_path}: {e}") from e
    except ELFError as e:
        raise ExecutableError(f"Invalid ELF file {elf_path}: {e}") from e

    logger.info("Target executable: %s (%s, %d-bit, %s endian)",
                elf_path, info.architecture, info.bit_width, info.endianness)
    if not info.has_debug_info:
        logger.warning("%s has no debug information; addresses will resolve to ??:?",
                       elf_path)
    return info
