#!/usr/bin/env python3
"""
LC-3 Symbol Table
=================

Symbol table for an LC-3 two-pass assembler: label names mapped to 16-bit
addresses, looked up by name (case-insensitive) or by address.

Usage:
    python lc3sym.py program.sym
    python lc3sym.py program.sym --sort name
    python lc3sym.py program.sym --find loop
    python lc3sym.py program.sym --addr x3000
"""

import argparse
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple


# =============================================================================
# Configuration
# =============================================================================

# Size of LC-3 memory: 65,536 addresses
MEMORY_SIZE = 1 << 16

# Bucket count used when the caller does not pick one
DEFAULT_CAPACITY = 997

HASH_SEED = 5381
HASH_MASK = 0x7FFFFFFF
_WORD_MASK = 0xFFFFFFFFFFFFFFFF


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True)
class Symbol:
    """A label bound to an address."""
    name: str
    addr: int


class SymbolOrder(IntEnum):
    """Sort criterion for order_by()."""
    HASH = 0
    ADDR = 1
    NAME = 2


class SymbolTableError(Exception):
    """Exception raised when the symbol table is misused."""
    pass


class InvalidCapacityError(SymbolTableError, ValueError):
    """Exception raised for a non-positive bucket capacity."""
    pass


class AddressRangeError(SymbolTableError, ValueError):
    """Exception raised for an address outside the memory range."""
    pass


# =============================================================================
# Hashing and Comparison
# =============================================================================

def symbol_hash(name: str) -> int:
    """djb2 hash of the lower-cased name, kept to 31 bits."""
    value = HASH_SEED
    for c in name.lower():
        value = (value * 33 + ord(c)) & _WORD_MASK
    return value & HASH_MASK


def name_key(symbol: Symbol) -> str:
    """Sort key comparing names case-insensitively."""
    return symbol.name.lower()


def address_key(symbol: Symbol) -> Tuple[int, str]:
    """Sort key by address, then by name."""
    return (symbol.addr, symbol.name.lower())


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_table_size(capacity: int, memory_size: int = MEMORY_SIZE):
    """Validate table dimensions, raising InvalidCapacityError."""
    if not _is_int(capacity) or capacity <= 0:
        raise InvalidCapacityError(f"Capacity must be a positive integer: {capacity!r}")
    if not _is_int(memory_size) or memory_size < 0:
        raise InvalidCapacityError(f"Memory size must be a non-negative integer: {memory_size!r}")


SORT_KEYS = {
    SymbolOrder.HASH: address_key,
    SymbolOrder.ADDR: address_key,
    SymbolOrder.NAME: name_key,
}


# =============================================================================
# Symbol Table
# =============================================================================

class SymbolTable:
    """Fixed-capacity hash table of symbols with a reverse address index.

    Symbols live in one list in insertion order. Each bucket is a chain of
    (hash, slot) entries pointing into that list, newest first, and the
    address index maps every address to the slot of the last symbol
    inserted there. The bucket count never changes, so a small capacity
    degrades lookups to a linear scan of the chain.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, memory_size: int = MEMORY_SIZE):
        check_table_size(capacity, memory_size)
        self._capacity = capacity
        self._memory_size = memory_size
        self._symbols: List[Symbol] = []
        self._buckets: Optional[List[List[Tuple[int, int]]]] = [[] for _ in range(capacity)]
        self._addr_index: Optional[List[Optional[int]]] = [None] * memory_size if memory_size else None

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def memory_size(self) -> int:
        return self._memory_size

    @property
    def has_addr_index(self) -> bool:
        return self._addr_index is not None

    @property
    def destroyed(self) -> bool:
        return self._buckets is None

    def _search(self, name: str) -> Tuple[int, int, Optional[int]]:
        """Locate a name. Returns (hash, bucket index, slot or None)."""
        value = symbol_hash(name)
        index = value % self._capacity
        folded = name.lower()
        for entry_hash, slot in self._buckets[index]:
            if entry_hash == value and self._symbols[slot].name.lower() == folded:
                return value, index, slot
        return value, index, None

    def _check_addr(self, addr: int):
        if not _is_int(addr):
            raise AddressRangeError(f"Address must be an integer: {addr!r}")
        if self._addr_index is not None:
            if not 0 <= addr < self._memory_size:
                raise AddressRangeError(
                    f"Address out of range [0, 0x{self._memory_size:04X}): {addr}")
        elif addr < 0:
            raise AddressRangeError(f"Address must not be negative: {addr}")

    def insert(self, name: str, addr: int) -> bool:
        """Add a symbol. Returns False if the name is already defined."""
        if self._buckets is None:
            raise SymbolTableError("Symbol table has been destroyed")
        self._check_addr(addr)

        value, index, slot = self._search(name)
        if slot is not None:
            return False

        slot = len(self._symbols)
        self._symbols.append(Symbol(name, addr))
        self._buckets[index].insert(0, (value, slot))
        if self._addr_index is not None:
            self._addr_index[addr] = slot
        return True

    def find_by_name(self, name: str) -> Optional[Symbol]:
        """Find a symbol by name, ignoring case."""
        if self._buckets is None:
            return None
        _, _, slot = self._search(name)
        if slot is None:
            return None
        return self._symbols[slot]

    def find_by_addr(self, addr: int) -> Optional[str]:
        """Name of the last symbol inserted at addr, if any."""
        if self._addr_index is None:
            return None
        self._check_addr(addr)
        slot = self._addr_index[addr]
        if slot is None:
            return None
        return self._symbols[slot].name

    def for_each(self, fnc: Callable[[Symbol, Any], Any], data: Any = None):
        """Call fnc(symbol, data) for every symbol in bucket order."""
        for symbol in self:
            fnc(symbol, data)

    def order_by(self, order: SymbolOrder) -> List[Symbol]:
        """Return a new list of all symbols sorted by the given criterion."""
        try:
            key = SORT_KEYS[SymbolOrder(order)]
        except ValueError:
            raise ValueError(f"Unknown symbol order: {order!r}") from None
        return sorted(self, key=key)

    def count(self) -> int:
        return len(self._symbols)

    def reset(self):
        """Remove every symbol and clear both indexes."""
        self._symbols.clear()
        if self._buckets is not None:
            for chain in self._buckets:
                chain.clear()
        if self._addr_index is not None:
            self._addr_index[:] = [None] * self._memory_size

    def destroy(self):
        """Reset the table and release its indexes."""
        self.reset()
        self._buckets = None
        self._addr_index = None

    def as_dict(self) -> Dict[str, int]:
        """Symbols as a name -> address dictionary, in bucket order."""
        return {symbol.name: symbol.addr for symbol in self}

    def __iter__(self) -> Iterator[Symbol]:
        if self._buckets is None:
            return
        for chain in self._buckets:
            for _, slot in chain:
                yield self._symbols[slot]

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, name: str) -> bool:
        return self.find_by_name(name) is not None

    def __repr__(self) -> str:
        return f"SymbolTable(capacity={self._capacity}, size={self.count()})"


# =============================================================================
# Listing
# =============================================================================

def format_listing(table: SymbolTable, order: SymbolOrder = SymbolOrder.ADDR) -> str:
    """Format the table as a human-readable listing."""
    lines = ["Symbol Table:", "-" * 40]
    for symbol in table.order_by(order):
        lines.append(f"  {symbol.name:20s} = 0x{symbol.addr:04X} ({symbol.addr})")
    lines.append("-" * 40)
    return '\n'.join(lines)


def parse_address(text: str) -> int:
    """Parse an LC-3 style address: x3000, 0x3000 or decimal."""
    text = text.strip()
    if text[:1] in ('x', 'X'):
        return int(text[1:], 16)
    return int(text, 0)


# =============================================================================
# Main
# =============================================================================

ORDER_NAMES = {
    'hash': SymbolOrder.HASH,
    'addr': SymbolOrder.ADDR,
    'name': SymbolOrder.NAME,
}


def main(argv: Optional[List[str]] = None) -> int:
    from lc3_symbols.sym_loader import SymbolFileError, SymbolLoader, format_sym_file

    parser = argparse.ArgumentParser(
        description='LC-3 Symbol Table Tool',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Output formats:
  listing  Table of names and addresses (default)
  sym      LC-3 symbol file

Examples:
  %(prog)s program.sym
  %(prog)s program.sym --sort name
  %(prog)s program.sym --find LOOP
  %(prog)s program.sym --addr x3000
'''
    )

    parser.add_argument('input', help='Input symbol file')
    parser.add_argument('-o', '--output', help='Output file (stdout if not specified)')
    parser.add_argument('-s', '--sort', choices=sorted(ORDER_NAMES), default='addr',
                        help='Listing order (default: addr)')
    parser.add_argument('-f', '--format', choices=['listing', 'sym'], default='listing',
                        help='Output format (default: listing)')
    parser.add_argument('-c', '--capacity', type=int, default=DEFAULT_CAPACITY,
                        help=f'Hash bucket count (default: {DEFAULT_CAPACITY})')
    parser.add_argument('--find', metavar='NAME', help='Print the address of a symbol')
    parser.add_argument('--addr', metavar='ADDR', type=parse_address,
                        help='Print the symbol at an address')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose output')

    args = parser.parse_args(argv)

    try:
        loader = SymbolLoader(capacity=args.capacity)
    except InvalidCapacityError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        table = loader.load_file(args.input)
    except FileNotFoundError:
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        return 1
    except IOError as e:
        print(f"Error reading {args.input}: {e}", file=sys.stderr)
        return 1
    except SymbolFileError:
        for warning in loader.warnings:
            print(f"Warning: {warning}", file=sys.stderr)
        for error in loader.errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    for warning in loader.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    if args.verbose:
        print(f"Loaded {table.count()} symbols into {table.capacity} buckets", file=sys.stderr)

    if args.find is not None:
        symbol = table.find_by_name(args.find)
        if symbol is None:
            print(f"Error: Symbol not found: {args.find}", file=sys.stderr)
            return 1
        print(f"{symbol.name} = 0x{symbol.addr:04X}")
        return 0

    if args.addr is not None:
        try:
            name = table.find_by_addr(args.addr)
        except AddressRangeError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        if name is None:
            print(f"Error: No symbol at address 0x{args.addr:04X}", file=sys.stderr)
            return 1
        print(name)
        return 0

    order = ORDER_NAMES[args.sort]
    if args.format == 'sym':
        output = format_sym_file(table, order)
    else:
        output = format_listing(table, order)

    if args.output:
        with open(args.output, 'w') as f:
            f.write(output)
            f.write('\n')
    else:
        print(output)

    if args.verbose:
        print(f"\nOutput written to: {args.output or 'stdout'}", file=sys.stderr)

    return 0


if __name__ == '__main__':
    sys.exit(main())
