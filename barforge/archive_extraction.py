"""Safe extraction of gzip-compressed tar archives."""

from __future__ import annotations

import io
import os
import shutil
import tarfile
import zlib
from pathlib import Path, PurePath
from typing import BinaryIO

MAX_PACKAGE_SIZE = 50 * 1024 * 1024

_IO_ERRORS = (tarfile.TarError, OSError, EOFError, zlib.error)


class ExtractionError(Exception):
    """Base class for archive extraction failures."""


class ArchiveTraversalError(ExtractionError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Path traversal detected in archive entry: {path}")
        self.path = path


class SymlinkNotAllowedError(ExtractionError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Symlink not allowed in archive: {path}")
        self.path = path


class HardlinkNotAllowedError(ExtractionError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Hardlink not allowed in archive: {path}")
        self.path = path


class ArchiveTooLargeError(ExtractionError):
    def __init__(self, size: int, max_size: int) -> None:
        super().__init__(f"Archive too large: {size} bytes exceeds {max_size} bytes")
        self.size = size
        self.max_size = max_size


def normalize_path_algebraic(path: str | os.PathLike[str]) -> Path | None:
    """Resolve '.' and '..' lexically; None if the path is absolute, escapes or is empty."""
    pure = PurePath(path)
    if pure.anchor:
        return None
    components: list[str] = []
    for part in pure.parts:
        if part == "..":
            if not components:
                return None
            components.pop()
        elif part == ".":
            continue
        else:
            if "\0" in part:
                return None
            components.append(part)
    if not components:
        return None
    return Path(*components)


def safe_extraction_path(
    base: str | os.PathLike[str], relative: str | os.PathLike[str]
) -> Path:
    """Join a normalised relative path onto base, or raise ArchiveTraversalError."""
    normalized = normalize_path_algebraic(relative)
    if normalized is None:
        raise ArchiveTraversalError(os.fspath(relative))
    return Path(base) / normalized


def _extract_member(archive: tarfile.TarFile, member: tarfile.TarInfo, dest: Path) -> None:
    if member.issym():
        raise SymlinkNotAllowedError(member.name)
    if member.islnk():
        raise HardlinkNotAllowedError(member.name)

    target = safe_extraction_path(dest, member.name)
    target.parent.mkdir(parents=True, exist_ok=True)

    if member.isdir():
        target.mkdir(parents=True, exist_ok=True)
    elif member.isfile():
        source = archive.extractfile(member)
        with open(target, "wb") as out:
            if source is not None:
                with source:
                    shutil.copyfileobj(source, out)
        if os.name == "posix":
            os.chmod(target, member.mode & 0o755)


def extract_tarball_safe(data: bytes, dest: str | os.PathLike[str]) -> None:
    """Extract a .tar.gz held in memory into dest, refusing links and escaping paths."""
    if len(data) > MAX_PACKAGE_SIZE:
        raise ArchiveTooLargeError(len(data), MAX_PACKAGE_SIZE)

    dest_path = Path(dest)
    try:
        dest_path.mkdir(parents=True, exist_ok=True)
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as archive:
            for member in archive:
                _extract_member(archive, member, dest_path)
    except _IO_ERRORS as exc:
        raise ExtractionError(f"IO error: {exc}") from exc


def _read_limited(reader: BinaryIO, limit: int) -> bytes:
    chunks: list[bytes] = []
    remaining = limit
    while remaining > 0:
        chunk = reader.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def extract_tarball_from_reader(
    reader: BinaryIO, dest: str | os.PathLike[str], max_size: int
) -> None:
    """Read at most max_size bytes of a .tar.gz from reader and extract it into dest."""
    try:
        data = _read_limited(reader, max_size + 1)
    except OSError as exc:
        raise ExtractionError(f"IO error: {exc}") from exc
    if len(data) > max_size:
        raise ArchiveTooLargeError(len(data), max_size)
    extract_tarball_safe(data, dest)