import pytest

from reflection_generator.config import ScanConfig
from reflection_generator.diagnostics import InputError
from reflection_generator.file_scanner import FileScanner


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')
    return path


@pytest.fixture
def source_tree(tmp_path):
    root = tmp_path / 'Source'
    write(root / 'Player.h', 'GCLASS()\nclass Player {};\n')
    write(root / 'Math' / 'Vector.hpp', 'struct Vector { GPROPERTY(Save) float x; };\n')
    write(root / 'Plain.h', 'class Plain {};\n')
    write(root / 'Lower.h', 'gclass() class Lower {};\n')
    write(root / 'Player.cpp', 'GCLASS()\n')
    write(root / 'Build' / 'Generated.h', 'GCLASS()\n')
    write(root / 'External' / 'lib' / 'Vendor.h', 'GFUNCTION()\n')
    write(root / 'Game' / 'x64' / 'Debug.hh', 'GFUNCTION()\n')
    return root


def test_scan_directory_filters(source_tree):
    files = FileScanner().scan_directory(source_tree)
    assert files == [source_tree / 'Math' / 'Vector.hpp', source_tree / 'Player.h']


def test_get_header_files_skips_denylisted_directories(source_tree):
    names = sorted(path.name for path in FileScanner().get_header_files(source_tree))
    assert names == ['Lower.h', 'Plain.h', 'Player.h', 'Vector.hpp']


def test_missing_directory(tmp_path):
    with pytest.raises(InputError):
        FileScanner().scan_directory(tmp_path / 'Nope')


def test_custom_config(source_tree):
    scanner = FileScanner(ScanConfig(header_extensions=('.h',), excluded_directories=()))
    names = sorted(path.name for path in scanner.scan_directory(source_tree))
    assert names == ['Generated.h', 'Player.h', 'Vendor.h']


def test_should_process_file(source_tree):
    scanner = FileScanner()
    assert scanner.should_process_file(source_tree / 'Player.h')
    assert not scanner.should_process_file(source_tree / 'Player.cpp')
    assert not scanner.should_process_file(source_tree / 'Plain.h')


def test_contains_reflection_macros_unreadable(tmp_path):
    with pytest.raises(InputError):
        FileScanner().contains_reflection_macros(tmp_path / 'Missing.h')
