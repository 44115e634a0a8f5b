"""
LC-3 Symbol Table Package
=========================

This package provides the symbol table used by an LC-3 two-pass assembler
and helpers for loading and writing LC-3 symbol files.

Quick start:
    from lc3_symbols import SymbolTable, SymbolOrder

    table = SymbolTable(capacity=101)
    table.insert("START", 0x3000)
    table.find_by_name("start")      # Symbol(name='START', addr=12288)
    table.find_by_addr(0x3000)       # 'START'
    table.order_by(SymbolOrder.NAME)

    # From a symbol file
    from lc3_symbols import SymbolLoader
    loader = SymbolLoader()
    table = loader.load_file("path/to/program.sym")
"""

from lc3_symbols.lc3sym import (
    DEFAULT_CAPACITY,
    MEMORY_SIZE,
    AddressRangeError,
    InvalidCapacityError,
    Symbol,
    SymbolOrder,
    SymbolTable,
    SymbolTableError,
    check_table_size,
    format_listing,
    symbol_hash,
)
from lc3_symbols.sym_loader import (
    SymbolFileError,
    SymbolLoader,
    format_sym_file,
    load_symbol_file,
    load_symbols,
    parse_symbols,
)

__all__ = [
    'DEFAULT_CAPACITY',
    'MEMORY_SIZE',
    'AddressRangeError',
    'InvalidCapacityError',
    'Symbol',
    'SymbolOrder',
    'SymbolTable',
    'SymbolTableError',
    'check_table_size',
    'format_listing',
    'symbol_hash',
    'SymbolFileError',
    'SymbolLoader',
    'format_sym_file',
    'load_symbol_file',
    'load_symbols',
    'parse_symbols',
]

__version__ = '1.0.0'
