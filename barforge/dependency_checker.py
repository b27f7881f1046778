"""Checking that the binaries and Python modules a package needs are present."""

from __future__ import annotations

import enum
import re
import shutil
import string
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

_VALID_BINARY_CHARS = frozenset(string.ascii_letters + string.digits + "_-+.")
_VALID_PYTHON_MODULE_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_MAX_NAME_LENGTH = 255

_VERSION_RE = re.compile(r"\b(\d+\.\d+(?:\.\d+)?(?:-[a-zA-Z0-9.]+)?)\b")


class DepType(enum.Enum):
    BINARY = "binary"
    PYTHON_MODULE = "python_module"


@dataclass
class DepSpec:
    """A single dependency declared by a package."""

    name: str
    dep_type: DepType
    version_req: str | None = None
    optional: bool = False


@dataclass
class DepResult:
    spec: DepSpec
    satisfied: bool
    found_version: str | None = None
    path: Path | None = None
    error: str | None = None


@dataclass
class DepReport:
    all_satisfied: bool
    missing_required: list[str] = field(default_factory=list)
    results: dict[str, DepResult] = field(default_factory=dict)


class DepCheckError(Exception):
    """Base class for dependency check failures."""


class InvalidBinaryNameError(DepCheckError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid binary name: {name}")
        self.name = name


class InvalidPythonModuleNameError(DepCheckError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid Python module name: {name}")
        self.name = name


def is_valid_binary_name(name: str) -> bool:
    """True if name is a plain executable name safe to look up on PATH."""
    return (
        bool(name)
        and len(name.encode("utf-8")) <= _MAX_NAME_LENGTH
        and "/" not in name
        and "\0" not in name
        and all(ch in _VALID_BINARY_CHARS for ch in name)
    )


def is_valid_python_module_name(name: str) -> bool:
    """True if name is a public top-level module name made of safe characters."""
    return (
        bool(name)
        and len(name.encode("utf-8")) <= _MAX_NAME_LENGTH
        and not name.startswith("_")
        and all(ch in _VALID_PYTHON_MODULE_CHARS for ch in name)
    )


def _run(args: list[str]) -> subprocess.CompletedProcess[bytes]:
    return subprocess.run(
        args,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        check=False,
    )


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _extract_binary_version(name: str) -> str | None:
    try:
        output = _run([name, "--version"])
    except OSError:
        return None
    text = _decode(output.stdout if output.returncode == 0 else output.stderr)
    return extract_version(text)


def _extract_python_module_version(name: str) -> str | None:
    # The name has been validated to identifier characters only.
    code = f"import {name} as m; print(getattr(m, '__version__', 'unknown'))"
    try:
        output = _run(["python3", "-c", code])
    except OSError:
        return None
    if output.returncode != 0:
        return None
    version = _decode(output.stdout).strip()
    return None if version == "unknown" else version


def check_binary(spec: DepSpec) -> DepResult:
    """Look the binary up on PATH and read its version if found."""
    if not is_valid_binary_name(spec.name):
        raise InvalidBinaryNameError(spec.name)
    located = shutil.which(spec.name)
    path = Path(located) if located else None
    version = _extract_binary_version(spec.name) if path is not None else None
    return DepResult(spec=spec, satisfied=path is not None, found_version=version, path=path)


def check_python_module(spec: DepSpec) -> DepResult:
    """Try importing the module with python3 and read its version if it imports."""
    if not is_valid_python_module_name(spec.name):
        raise InvalidPythonModuleNameError(spec.name)
    # The name has been validated to identifier characters only.
    try:
        output = _run(["python3", "-c", f"import {spec.name}"])
    except OSError as exc:
        satisfied, error = False, str(exc)
    else:
        if output.returncode == 0:
            satisfied, error = True, None
        else:
            satisfied, error = False, _decode(output.stderr)
    version = _extract_python_module_version(spec.name) if satisfied else None
    return DepResult(spec=spec, satisfied=satisfied, found_version=version, error=error)


def _looks_like_ip_address(text: str) -> bool:
    parts = text.split(".")
    if len(parts) != 4:
        return False
    return all(part.isascii() and part.isdigit() and len(part) <= 3 for part in parts)


def extract_version(text: str) -> str | None:
    """The first version-like number in text that is not an IPv4 address."""
    for match in _VERSION_RE.finditer(text):
        version = match.group(1)
        if not _looks_like_ip_address(version):
            return version
    return None


def check_dependencies(specs: list[DepSpec]) -> DepReport:
    """Check every dependency and collect the required ones that are missing."""
    results: dict[str, DepResult] = {}
    missing_required: list[str] = []

    for spec in specs:
        checker = check_binary if spec.dep_type is DepType.BINARY else check_python_module
        try:
            result = checker(spec)
        except DepCheckError as exc:
            result = DepResult(spec=spec, satisfied=False, error=str(exc))

        if not result.satisfied and not spec.optional:
            missing_required.append(spec.name)
        results[spec.name] = result

    return DepReport(
        all_satisfied=not missing_required,
        missing_required=missing_required,
        results=results,
    )