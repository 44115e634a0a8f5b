"""Tests for symbol file parsing, loading and the lc3sym command line."""

import pytest

from lc3_symbols import (
    InvalidCapacityError,
    SymbolFileError,
    SymbolLoader,
    SymbolOrder,
    SymbolTable,
    format_sym_file,
    load_symbol_file,
    load_symbols,
    parse_symbols,
)
from lc3_symbols.lc3sym import main


LC3_SYM_TEXT = """// Symbol table
// Scope level 0:
//\tSymbol Name       Page Address
//\t----------------  ------------
//\tSTART             3000
//\tLOOP              3003
//\tDONE              300A
//\tCOUNT             3010

"""


def test_parse_lc3_sym_file():
    assert parse_symbols(LC3_SYM_TEXT) == [
        ("START", 0x3000, 5),
        ("LOOP", 0x3003, 6),
        ("DONE", 0x300A, 7),
        ("COUNT", 0x3010, 8),
    ]


def test_parse_plain_entries_with_prefixes():
    text = "start 3000\nloop x3004\nend 0x3008\n"
    assert parse_symbols(text) == [
        ("start", 0x3000, 1),
        ("loop", 0x3004, 2),
        ("end", 0x3008, 3),
    ]


def test_parse_rejects_malformed_line():
    with pytest.raises(SymbolFileError, match="Line 2"):
        parse_symbols("START 3000\nLOOP\n")


def test_format_sym_file_reads_back():
    table = SymbolTable(13)
    table.insert("Loop", 0x3003)
    table.insert("START", 0x3000)

    text = format_sym_file(table)
    lines = text.split('\n')
    assert lines[:2] == ["// Symbol table", "// Scope level 0:"]
    assert lines[4] == "//\tSTART             3000"
    assert [(name, addr) for name, addr, _ in parse_symbols(text)] == [
        ("START", 0x3000), ("Loop", 0x3003)]


def test_format_sym_file_by_name():
    table = SymbolTable(13)
    table.insert("zeta", 0x3000)
    table.insert("Alpha", 0x3005)
    names = [name for name, _, _ in parse_symbols(format_sym_file(table, SymbolOrder.NAME))]
    assert names == ["Alpha", "zeta"]


def test_loader_builds_table():
    loader = SymbolLoader(capacity=17)
    table = loader.load(LC3_SYM_TEXT)

    assert table.capacity == 17
    assert table.count() == 4
    assert table.find_by_addr(0x300A) == "DONE"
    assert loader.get_symbol("loop") == 0x3003
    assert loader.get_symbols() == table.as_dict()
    assert loader.warnings == []
    assert loader.errors == []


def test_loader_reports_redefinition_and_keeps_first():
    loader = SymbolLoader()
    table = loader.load("LOOP 3000\nloop 3004\n")

    assert loader.warnings == ["Line 2: Redefinition of symbol: loop"]
    assert table.count() == 1
    assert loader.get_symbol("LOOP") == 0x3000
    assert table.find_by_addr(0x3004) is None


def test_loader_rejects_out_of_range_address():
    loader = SymbolLoader()
    with pytest.raises(SymbolFileError):
        loader.load("OK 3000\nBIG 10000\n")
    assert len(loader.errors) == 1
    assert loader.errors[0].startswith("Line 2:")
    assert loader.table is None


def test_loader_records_parse_error():
    loader = SymbolLoader()
    with pytest.raises(SymbolFileError):
        loader.load("garbage line here\n")
    assert loader.errors == ["Line 1: Invalid symbol entry: garbage line here"]


def test_loader_rejects_bad_capacity():
    with pytest.raises(InvalidCapacityError):
        SymbolLoader(capacity=0)


def test_get_symbol_missing():
    loader = SymbolLoader()
    with pytest.raises(KeyError):
        loader.get_symbol("START")
    loader.load(LC3_SYM_TEXT)
    with pytest.raises(KeyError):
        loader.get_symbol("MISSING")


def test_convenience_loaders(tmp_path):
    path = tmp_path / "prog.sym"
    path.write_text(LC3_SYM_TEXT)

    assert load_symbols(LC3_SYM_TEXT).as_dict() == load_symbol_file(str(path)).as_dict()


@pytest.fixture
def sym_file(tmp_path):
    path = tmp_path / "prog.sym"
    path.write_text(LC3_SYM_TEXT)
    return str(path)


def test_cli_listing(sym_file, capsys):
    assert main([sym_file]) == 0
    out = capsys.readouterr().out
    lines = out.strip().split('\n')
    assert lines[0] == "Symbol Table:"
    assert lines[2].startswith("  START")
    assert "0x3010 (12304)" in lines[5]


def test_cli_sort_by_name(sym_file, capsys):
    assert main([sym_file, "--sort", "name"]) == 0
    lines = capsys.readouterr().out.strip().split('\n')
    assert [line.split()[0] for line in lines[2:6]] == ["COUNT", "DONE", "LOOP", "START"]


def test_cli_find(sym_file, capsys):
    assert main([sym_file, "--find", "loop"]) == 0
    assert capsys.readouterr().out.strip() == "LOOP = 0x3003"

    assert main([sym_file, "--find", "nowhere"]) == 1
    assert "Symbol not found: nowhere" in capsys.readouterr().err


def test_cli_addr(sym_file, capsys):
    assert main([sym_file, "--addr", "x300A"]) == 0
    assert capsys.readouterr().out.strip() == "DONE"

    assert main([sym_file, "--addr", "0x4000"]) == 1
    assert "No symbol at address 0x4000" in capsys.readouterr().err


def test_cli_writes_sym_output(sym_file, tmp_path):
    out_path = tmp_path / "copy.sym"
    assert main([sym_file, "--format", "sym", "-o", str(out_path)]) == 0
    assert parse_symbols(out_path.read_text()) == parse_symbols(LC3_SYM_TEXT)


def test_cli_reports_warnings(tmp_path, capsys):
    path = tmp_path / "dup.sym"
    path.write_text("A 3000\na 3001\n")
    assert main([str(path)]) == 0
    assert "Warning: Line 2: Redefinition of symbol: a" in capsys.readouterr().err


def test_cli_reports_errors(tmp_path, capsys):
    path = tmp_path / "bad.sym"
    path.write_text("A 3000\nB\n")
    assert main([str(path)]) == 1
    assert "Error: Line 2: Invalid symbol entry: B" in capsys.readouterr().err


def test_cli_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.sym")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_cli_bad_capacity(sym_file, capsys):
    assert main([sym_file, "--capacity", "0"]) == 1
    assert "Capacity must be a positive integer" in capsys.readouterr().err


def test_failed_load_drops_previous_table():
    loader = SymbolLoader()
    loader.load("OLD 3000\n")
    assert loader.get_symbol("OLD") == 0x3000

    with pytest.raises(SymbolFileError):
        loader.load("NEW 3000\nBAD\n")
    assert loader.table is None
    assert loader.get_symbols() == {}
    with pytest.raises(KeyError):
        loader.get_symbol("OLD")


def test_loader_rejects_bad_memory_size():
    with pytest.raises(InvalidCapacityError):
        SymbolLoader(memory_size=-1)
