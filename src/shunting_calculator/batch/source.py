"""Load arithmetic expressions from a text file or an archive of text files."""
from pathlib import Path
import tarfile
import tempfile
from typing import Callable, Dict, Iterator, List, Tuple
import zipfile

import py7zr

# A readable expression document: (member name, decoded text)
Document = Tuple[str, str]


def _is_expression_file(name: str) -> bool:
    return name.endswith(".txt")


def _read_text(path: Path) -> Iterator[Document]:
    yield path.name, path.read_text(encoding="utf-8")


def _read_zip(path: Path) -> Iterator[Document]:
    with zipfile.ZipFile(path, "r") as zf:
        for name in sorted(filter(_is_expression_file, zf.namelist())):
            yield name, zf.read(name).decode("utf-8")


def _read_tar_xz(path: Path) -> Iterator[Document]:
    with tarfile.open(path, "r:xz") as tf:
        members = [m for m in tf.getmembers() if m.isfile() and _is_expression_file(m.name)]
        for member in sorted(members, key=lambda m: m.name):
            # extractfile streams the member without touching the disk
            yield member.name, tf.extractfile(member).read().decode("utf-8")


def _read_7z(path: Path) -> Iterator[Document]:
    # py7zr only decompresses to a directory
    with tempfile.TemporaryDirectory() as tmpdir, py7zr.SevenZipFile(path, mode="r") as archive:
        names = sorted(filter(_is_expression_file, archive.getnames()))
        if names:
            archive.extract(path=tmpdir, targets=names)
        for name in names:
            yield name, (Path(tmpdir) / name).read_text(encoding="utf-8")


# Readers keyed by the full suffix of the input file
READERS: Dict[str, Callable[[Path], Iterator[Document]]] = {
    ".txt": _read_text,
    ".zip": _read_zip,
    ".tar.xz": _read_tar_xz,
    ".7z": _read_7z,
}


def input_format(input_file: Path) -> str:
    """
    Return the READERS key matching a file name.

    Examples:
        - ops.txt -> ".txt"
        - ops.v2.tar.xz -> ".tar.xz"

    :param Path input_file: Input file path

    :return: Matching key
    :rtype: str
    :raises ValueError: If no reader supports the file
    """
    for suffix in sorted(READERS, key=len, reverse=True):
        if input_file.name.endswith(suffix):
            return suffix
    raise ValueError(f"📄❌ Unsupported input format: {input_file.name}")


def read_documents(input_file: Path) -> List[Document]:
    """
    Read every expression document of a file: the file itself, or each .txt member of an archive in name order.

    :param Path input_file: Path to a .txt file or a supported archive

    :return: (name, text) pairs
    :rtype: List[Document]
    :raises ValueError: If the format is unsupported or the archive holds no .txt member
    """
    documents = list(READERS[input_format(input_file)](input_file))
    if not documents:
        raise ValueError(f"📄❌ No .txt file found in {input_file.name}")
    return documents


def read_expressions(input_file: Path) -> List[str]:
    """
    Read the expressions contained in a plain text file or an archive, one per non-empty line.

    Lines of every .txt member are concatenated in member name order.

    :param Path input_file: Path to a .txt file or a supported archive

    :return: Stripped, non-empty lines
    :rtype: List[str]
    :raises ValueError: If the format is unsupported or the archive holds no .txt member
    """
    return [
        line.strip()
        for _, text in read_documents(input_file)
        for line in text.splitlines()
        if line.strip()
    ]
