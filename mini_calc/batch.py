"""Read arithmetic expressions from plain text files and archives."""
from pathlib import Path
import tarfile
import tempfile
from typing import List
import zipfile

import py7zr
from py7zr.exceptions import Bad7zFile
from pydantic import FilePath

from mini_calc.common.models import CalculationResult


def _first_txt(names: List[str], archive_kind: str) -> str:
    txt_files = [name for name in names if name.endswith(".txt")]
    if not txt_files:
        raise ValueError(f"📄❌ No .txt file found in {archive_kind} archive")
    return txt_files[0]


def extract_archive(archive_path: FilePath) -> str:
    """
    Extract the first .txt file found in a supported archive and return its content as a string.

    Supported formats:
    - .zip
    - .tar.xz
    - .7z

    :param FilePath archive_path: Path to the archive file

    :return: Content of the extracted .txt file
    :rtype: str
    :raises ValueError: If no .txt file is found, the archive is corrupt or the format is unsupported
    """
    try:
        return _extract_first_txt(archive_path)
    except (zipfile.BadZipFile, tarfile.TarError, Bad7zFile, EOFError) as exc:
        raise ValueError(f"📄❌ Unreadable archive {archive_path}: {exc}") from exc


def _extract_first_txt(archive_path: FilePath) -> str:
    # Create a temporary directory for safe extraction
    with tempfile.TemporaryDirectory() as tmpdir:
        tmpdir_path = Path(tmpdir)
        if archive_path.suffix == ".zip":
            with zipfile.ZipFile(archive_path, "r") as zf:
                name = _first_txt(zf.namelist(), "zip")
                zf.extract(name, path=tmpdir_path)
                return (tmpdir_path / name).read_text(encoding="utf-8")

        elif archive_path.suffixes[-2:] == [".tar", ".xz"]:
            with tarfile.open(archive_path, "r:xz") as tf:
                name = _first_txt([m.name for m in tf.getmembers()], "tar.xz")
                tf.extract(name, path=tmpdir_path, filter="data")
                return (tmpdir_path / name).read_text(encoding="utf-8")

        elif archive_path.suffix == ".7z":
            with py7zr.SevenZipFile(archive_path, mode="r") as archive:
                name = _first_txt(archive.getnames(), "7z")
                archive.extract(targets=[name], path=tmpdir_path)
                return (tmpdir_path / name).read_text(encoding="utf-8")

        raise ValueError(f"📄❌ Unsupported archive format: {archive_path.suffix}")


def read_expressions(input_file: FilePath) -> List[str]:
    """
    Load one expression per non-empty line from a text file or an archive.

    :param FilePath input_file: Path to a .txt file or a supported archive

    :return: Stripped, non-empty lines
    :rtype: List[str]
    """
    if input_file.suffix == ".txt":
        content = input_file.read_text(encoding="utf-8")
    else:
        content = extract_archive(input_file)
    return [line.strip() for line in content.splitlines() if line.strip()]


def build_output_path(input_path: Path) -> Path:
    """
    Construct a safe output file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations_short.7z
    output: resources/operations_short_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    suffix_safe = "".join(input_path.suffixes).replace(".", "_")
    stem = input_path.name[: len(input_path.name) - len("".join(input_path.suffixes))]
    return input_path.with_name(f"{stem}{suffix_safe}_results.txt")


def result_line(result: CalculationResult, source: str, text: str) -> str:
    """Render one output line: ``expr = result`` or ``expr -> ERROR: message``."""
    if result.error is not None:
        return f"{source} -> ERROR: {result.message}"
    return f"{source} = {text}"
