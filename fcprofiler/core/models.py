#!/usr/bin/env python3
"""
Data models for profile statistics.

Identity types are frozen dataclasses so they can key dictionaries; the
statistics attached to them are plain mutable records filled in while
symbolizer replies arrive.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class FileDefinition:
    """Source file, identified by its normalized path"""
    filename: str


@dataclass(frozen=True)
class FunctionDefinition:
    """Function name together with the file it lives in"""
    name: str
    file: FileDefinition


@dataclass(frozen=True)
class LineDefinition:
    """A line inside a function; line_num 0 means the line is unknown"""
    function: FunctionDefinition
    line_num: int


@dataclass(frozen=True)
class AddressDefinition:
    """Raw program counter value"""
    address: int


@dataclass
class EntityStatistics:
    """Sample count for an address, function or file"""
    count: int = 0


@dataclass
class LineStatistics:
    """Sample count for a line plus the lowest address seen for it"""
    count: int = 0
    smallest_address: Optional[int] = None

    def add(self, address: int, count: int) -> None:
        """Accumulate samples for one address mapping to this line."""
        self.count += count
        if self.smallest_address is None or address < self.smallest_address:
            self.smallest_address = address


@dataclass
class ProfileStats:  # pylint: disable=too-few-public-methods
    """Aggregate root for a resolved profile.

    Holds four independent mappings (address, line, function, file) and the
    overall sample total used as the denominator for percentages.
    """
    addresses: Dict[AddressDefinition, EntityStatistics] = field(default_factory=dict)
    lines: Dict[LineDefinition, LineStatistics] = field(default_factory=dict)
    functions: Dict[FunctionDefinition, EntityStatistics] = field(default_factory=dict)
    files: Dict[FileDefinition, EntityStatistics] = field(default_factory=dict)
    overall: EntityStatistics = field(default_factory=EntityStatistics)

    def record(self, address: int, count: int, function_name: str,
               filename: str, line_num: int) -> None:
        """Fold one resolved address into every granularity.

        Args:
            address: Program counter that was resolved
            count: Number of samples taken at that address
            function_name: Function reported by the symbolizer
            filename: Normalized source file name
            line_num: Source line, 0 when unknown
        """
        file_def = FileDefinition(filename)
        function_def = FunctionDefinition(function_name, file_def)
        line_def = LineDefinition(function_def, line_num)

        # One address resolves exactly once, so this is an assignment
        self.addresses[AddressDefinition(address)] = EntityStatistics(count)

        self.files.setdefault(file_def, EntityStatistics()).count += count
        self.functions.setdefault(function_def, EntityStatistics()).count += count
        self.lines.setdefault(line_def, LineStatistics()).add(address, count)
        self.overall.count += count

