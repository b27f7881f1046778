"""Sandbox settings for module scripts and the path whitelists they are checked against."""

from __future__ import annotations

import enum
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

ALLOWED_READ_PATH_PARENTS: tuple[str, ...] = (
    "/usr/share",
    "/usr/lib",
    "/usr/local/share",
    "/etc/fonts",
    "/var/lib/fonts",
    "/opt",
)

ALLOWED_WRITE_PATH_PARENTS: tuple[str, ...] = ("/tmp", "/var/tmp")

_FIELDS = ("allow_network", "allowed_ports", "extra_ro_paths", "extra_rw_paths")
_MAX_PORT = 0xFFFF


def _require_bool(data: dict[str, Any], name: str) -> bool:
    value = data[name]
    if not isinstance(value, bool):
        raise ValueError(f"field `{name}` must be a boolean")
    return value


def _require_ports(data: dict[str, Any], name: str) -> list[int]:
    value = data[name]
    if not isinstance(value, list):
        raise ValueError(f"field `{name}` must be a list")
    ports = []
    for port in value:
        if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= _MAX_PORT:
            raise ValueError(f"field `{name}` holds an invalid port: {port!r}")
        ports.append(port)
    return ports


def _require_paths(data: dict[str, Any], name: str) -> list[Path]:
    value = data[name]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"field `{name}` must be a list of strings")
    return [Path(item) for item in value]


@dataclass
class SandboxConfig:
    """What a sandboxed script may reach beyond the built-in rules."""

    allow_network: bool = False
    allowed_ports: list[int] = field(default_factory=list)
    extra_ro_paths: list[Path] = field(default_factory=list)
    extra_rw_paths: list[Path] = field(default_factory=list)

    def to_json(self) -> str:
        """Serialise the configuration to a JSON object."""
        return json.dumps(
            {
                "allow_network": self.allow_network,
                "allowed_ports": list(self.allowed_ports),
                "extra_ro_paths": [os.fspath(path) for path in self.extra_ro_paths],
                "extra_rw_paths": [os.fspath(path) for path in self.extra_rw_paths],
            }
        )

    @classmethod
    def from_json(cls, text: str) -> SandboxConfig:
        """Parse a configuration written by to_json; raise ValueError if malformed."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("sandbox configuration must be a JSON object")
        missing = [name for name in _FIELDS if name not in data]
        if missing:
            raise ValueError(f"missing field `{missing[0]}`")
        return cls(
            allow_network=_require_bool(data, "allow_network"),
            allowed_ports=_require_ports(data, "allowed_ports"),
            extra_ro_paths=_require_paths(data, "extra_ro_paths"),
            extra_rw_paths=_require_paths(data, "extra_rw_paths"),
        )


class SandboxSeverity(enum.Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class SandboxStatus(enum.Enum):
    """How far the sandbox restrictions could be applied."""

    FULLY_ENFORCED = "fully_enforced"
    PARTIALLY_ENFORCED = "partially_enforced"
    NOT_SUPPORTED = "not_supported"
    FAILED = "failed"

    def is_secure(self) -> bool:
        return self in (SandboxStatus.FULLY_ENFORCED, SandboxStatus.PARTIALLY_ENFORCED)

    def allows_execution(self) -> bool:
        return self is not SandboxStatus.FAILED

    def description(self) -> str:
        return _DESCRIPTIONS[self]

    def severity(self) -> SandboxSeverity:
        return _SEVERITIES[self]


_DESCRIPTIONS = {
    SandboxStatus.FULLY_ENFORCED: "All security restrictions active",
    SandboxStatus.PARTIALLY_ENFORCED: "Some restrictions unavailable (kernel too old)",
    SandboxStatus.NOT_SUPPORTED: "Landlock not supported on this kernel",
    SandboxStatus.FAILED: "Failed to apply sandbox restrictions",
}

_SEVERITIES = {
    SandboxStatus.FULLY_ENFORCED: SandboxSeverity.SUCCESS,
    SandboxStatus.PARTIALLY_ENFORCED: SandboxSeverity.WARNING,
    SandboxStatus.NOT_SUPPORTED: SandboxSeverity.ERROR,
    SandboxStatus.FAILED: SandboxSeverity.ERROR,
}


def is_allowed_read_path(path: str | os.PathLike[str]) -> bool:
    """True if a module may request read access to path."""
    text = os.fspath(path)
    return any(text.startswith(parent) for parent in ALLOWED_READ_PATH_PARENTS)


def is_allowed_write_path(path: str | os.PathLike[str]) -> bool:
    """True if a module may request write access to path."""
    text = os.fspath(path)
    return any(text.startswith(parent) for parent in ALLOWED_WRITE_PATH_PARENTS)