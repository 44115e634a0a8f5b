#!/usr/bin/env python3
"""
LC-3 Symbol File Loader
=======================

Reads and writes the symbol files an LC-3 assembler writes next to its
object output, building a SymbolTable from them.

Usage:
    from lc3_symbols.sym_loader import SymbolLoader

    loader = SymbolLoader()
    table = loader.load_file("path/to/program.sym")
    start = loader.get_symbol("START")

Symbol file format:
    // Symbol table
    // Scope level 0:
    //	Symbol Name       Page Address
    //	----------------  ------------
    //	START             3000
"""

import re
from typing import Dict, List, Optional, Tuple

from lc3_symbols.lc3sym import (
    DEFAULT_CAPACITY,
    MEMORY_SIZE,
    AddressRangeError,
    SymbolOrder,
    SymbolTable,
    check_table_size,
)


# Name followed by a hex address, e.g. "START 3000" or "loop x3004"
ENTRY_PATTERN = re.compile(
    r'^([A-Za-z_][A-Za-z0-9_.$]*)\s+(?:0[xX]|[xX])?([0-9A-Fa-f]+)$'
)

SYM_FILE_HEADER = [
    "// Symbol table",
    "// Scope level 0:",
    "//\tSymbol Name       Page Address",
    "//\t----------------  ------------",
]


class SymbolFileError(Exception):
    """Exception raised when a symbol file cannot be loaded."""
    pass


def parse_symbols(text: str) -> List[Tuple[str, int, int]]:
    """Parse symbol file text.

    Args:
        text: Contents of a symbol file

    Returns:
        List of (name, address, line number) tuples in file order

    Raises:
        SymbolFileError: If an uncommented line is not a valid entry
    """
    entries = []
    for line_num, line in enumerate(text.split('\n'), 1):
        line = line.strip()
        if not line:
            continue

        commented = line.startswith('//')
        if commented:
            line = line[2:].strip()

        match = ENTRY_PATTERN.match(line)
        if match:
            entries.append((match.group(1), int(match.group(2), 16), line_num))
        elif not commented:
            raise SymbolFileError(f"Line {line_num}: Invalid symbol entry: {line}")

    return entries


def format_sym_file(table: SymbolTable, order: SymbolOrder = SymbolOrder.ADDR) -> str:
    """Format a table as symbol file text."""
    lines = list(SYM_FILE_HEADER)
    for symbol in table.order_by(order):
        lines.append(f"//\t{symbol.name:16s}  {symbol.addr:04X}")
    return '\n'.join(lines)


class SymbolLoader:
    """Builds symbol tables from symbol files, collecting diagnostics."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY, memory_size: int = MEMORY_SIZE):
        """Initialize loader.

        Args:
            capacity: Bucket count for the tables this loader builds
            memory_size: Size of the address range

        Raises:
            InvalidCapacityError: If capacity is not positive
        """
        check_table_size(capacity, memory_size)
        self.capacity = capacity
        self.memory_size = memory_size
        self.table: Optional[SymbolTable] = None
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def error(self, line_num: int, msg: str):
        """Record an error."""
        self.errors.append(f"Line {line_num}: {msg}")

    def warning(self, line_num: int, msg: str):
        """Record a warning."""
        self.warnings.append(f"Line {line_num}: {msg}")

    def load(self, text: str) -> SymbolTable:
        """Load symbol file text into a new table.

        Redefinitions keep the first definition and are reported as
        warnings.

        Args:
            text: Contents of a symbol file

        Returns:
            The populated SymbolTable

        Raises:
            SymbolFileError: If the text is malformed or an address is
                out of range
        """
        self.errors = []
        self.warnings = []
        self.table = None

        try:
            entries = parse_symbols(text)
        except SymbolFileError as e:
            self.errors.append(str(e))
            raise

        table = SymbolTable(self.capacity, self.memory_size)
        for name, addr, line_num in entries:
            try:
                if not table.insert(name, addr):
                    self.warning(line_num, f"Redefinition of symbol: {name}")
            except AddressRangeError as e:
                self.error(line_num, str(e))

        if self.errors:
            raise SymbolFileError("Symbol file failed to load:\n" + "\n".join(self.errors))

        self.table = table
        return table

    def load_file(self, filepath: str) -> SymbolTable:
        """Load a symbol file into a new table.

        Args:
            filepath: Path to the symbol file

        Returns:
            The populated SymbolTable

        Raises:
            FileNotFoundError: If file doesn't exist
            SymbolFileError: If the file is malformed
        """
        with open(filepath, 'r') as f:
            text = f.read()
        return self.load(text)

    def get_symbol(self, name: str) -> int:
        """Get the address of a symbol from the last load.

        Args:
            name: Symbol name, any case

        Returns:
            Address of the symbol

        Raises:
            KeyError: If symbol not found
        """
        symbol = self.table.find_by_name(name) if self.table is not None else None
        if symbol is None:
            raise KeyError(f"Symbol not found: {name}")
        return symbol.addr

    def get_symbols(self) -> Dict[str, int]:
        """Get all symbols from the last load.

        Returns:
            Dictionary mapping symbol names to addresses
        """
        if self.table is None:
            return {}
        return self.table.as_dict()


# Convenience functions for quick use
def load_symbols(text: str) -> SymbolTable:
    """Quick load symbol file text into a table."""
    loader = SymbolLoader()
    return loader.load(text)


def load_symbol_file(filepath: str) -> SymbolTable:
    """Quick load a symbol file into a table."""
    loader = SymbolLoader()
    return loader.load_file(filepath)
