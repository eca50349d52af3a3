"""Test reading expressions from files and archives."""
from pathlib import Path
import tarfile
import zipfile

import py7zr
import pytest

from mini_calc.batch import build_output_path, extract_archive, read_expressions, result_line
from mini_calc.common.errors import ErrorKind
from mini_calc.common.models import CalculationResult


def test_read_expressions_txt(tmp_path) -> None:
    """Blank lines are dropped and surrounding spaces stripped."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("1+1\n\n  2 × 2  \n")
    assert read_expressions(input_file) == ["1+1", "2 × 2"]


def test_extract_zip(tmp_path) -> None:
    """Check that a .zip archive can be extracted and read correctly."""
    txt = tmp_path / "ops.txt"
    txt.write_text("3+3\n")

    zip_path = tmp_path / "ops.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.write(txt, arcname="ops.txt")

    assert extract_archive(zip_path) == "3+3\n"
    assert read_expressions(zip_path) == ["3+3"]


def test_extract_tar_xz(tmp_path) -> None:
    """Check that a .tar.xz archive can be extracted and read correctly."""
    txt = tmp_path / "ops.txt"
    txt.write_text("4*4\n")

    tar_path = tmp_path / "ops.tar.xz"
    with tarfile.open(tar_path, "w:xz") as tf:
        tf.add(txt, arcname="ops.txt")

    assert extract_archive(tar_path) == "4*4\n"


def test_extract_7z(tmp_path) -> None:
    """Check that a .7z archive can be extracted and read correctly."""
    txt = tmp_path / "ops.txt"
    txt.write_text("5-2\n")

    archive_path = tmp_path / "ops.7z"
    with py7zr.SevenZipFile(archive_path, "w") as archive:
        archive.write(txt, arcname="ops.txt")

    assert extract_archive(archive_path) == "5-2\n"


def test_extract_archive_no_txt(tmp_path) -> None:
    """Verify that extraction fails if no .txt file exists in the archive."""
    zip_path = tmp_path / "empty.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.writestr("data.bin", b"\x00\x01")

    with pytest.raises(ValueError):
        extract_archive(zip_path)


def test_extract_unsupported_format(tmp_path) -> None:
    """Ensure unsupported archive formats raise a ValueError."""
    file_path = tmp_path / "ops.rar"
    file_path.write_text("1+1")

    with pytest.raises(ValueError):
        read_expressions(file_path)


@pytest.mark.parametrize("name,expected", [
    ("operations_short.7z", "operations_short_7z_results.txt"),
    ("ops.tar.xz", "ops_tar_xz_results.txt"),
    ("ops.txt", "ops_txt_results.txt"),
])
def test_build_output_path(name, expected) -> None:
    output = build_output_path(Path("resources") / name)
    assert output == Path("resources") / expected


def test_result_line() -> None:
    ok = CalculationResult(expression="2+3", value=5.0)
    failed = CalculationResult(expression="2+", error=ErrorKind.SYNTAX)
    assert result_line(ok, "2 + 3", "5") == "2 + 3 = 5"
    assert result_line(failed, "2 +", "Syntax error") == "2 + -> ERROR: Syntax error"


@pytest.mark.parametrize("name", ["ops.zip", "ops.tar.xz", "ops.7z"])
def test_extract_corrupt_archive(tmp_path, name) -> None:
    """Corrupt archives raise a ValueError like any other unreadable input."""
    archive_path = tmp_path / name
    archive_path.write_bytes(b"not an archive")

    with pytest.raises(ValueError, match="Unreadable archive"):
        extract_archive(archive_path)
