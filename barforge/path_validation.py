"""Checking that a relative path stays inside a base directory."""

from __future__ import annotations

import enum
import os
from pathlib import Path


class PathTraversalKind(enum.Enum):
    PARENT_DIRECTORY_REFERENCE = "parent_directory_reference"
    ESCAPES_BASE_DIRECTORY = "escapes_base_directory"
    ABSOLUTE_PATH = "absolute_path"
    IO_ERROR = "io_error"


_MESSAGES = {
    PathTraversalKind.PARENT_DIRECTORY_REFERENCE: "path contains parent directory reference (..)",
    PathTraversalKind.ESCAPES_BASE_DIRECTORY: "path escapes base directory",
    PathTraversalKind.ABSOLUTE_PATH: "path is absolute",
}


class PathTraversalError(Exception):
    """A path was rejected; kind says why."""

    def __init__(self, kind: PathTraversalKind, detail: str | None = None) -> None:
        if kind is PathTraversalKind.IO_ERROR:
            message = f"IO error: {detail}"
        else:
            message = _MESSAGES[kind]
        super().__init__(message)
        self.kind = kind
        self.detail = detail


def _nearest_existing(path: Path) -> Path:
    check = path
    while not check.exists():
        parent = check.parent
        if parent == check or (not check.is_absolute() and len(check.parts) <= 1):
            break
        check = parent
    return check


def validate_extraction_path(
    base_dir: str | os.PathLike[str], relative_path: str | os.PathLike[str]
) -> Path:
    """Return base_dir joined with relative_path, or raise PathTraversalError."""
    base = Path(base_dir)
    relative = Path(relative_path)

    if relative.is_absolute():
        raise PathTraversalError(PathTraversalKind.ABSOLUTE_PATH)
    if ".." in relative.parts:
        raise PathTraversalError(PathTraversalKind.PARENT_DIRECTORY_REFERENCE)

    dest = base / relative

    try:
        canonical_base = base.resolve(strict=True)
    except OSError as exc:
        raise PathTraversalError(PathTraversalKind.IO_ERROR, str(exc)) from exc

    check = _nearest_existing(dest)
    if check.exists():
        try:
            canonical_check = check.resolve(strict=True)
        except OSError as exc:
            raise PathTraversalError(PathTraversalKind.IO_ERROR, str(exc)) from exc
        if not canonical_check.is_relative_to(canonical_base):
            raise PathTraversalError(PathTraversalKind.ESCAPES_BASE_DIRECTORY)

    return dest