"""Reading a module's Package.toml: metadata, dependencies and permissions."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from barforge.dependency_checker import DepSpec, DepType
from barforge.sandbox import SandboxConfig

_MAX_PORT = 0xFFFF


class PackageConfigError(Exception):
    """Package.toml could not be read or did not have the expected shape."""


@dataclass
class PackageInfo:
    name: str
    version: str
    description: str | None = None
    install_script: str | None = None
    uninstall_script: str | None = None


@dataclass
class Permissions:
    network: bool = False
    ports: list[int] = field(default_factory=list)
    read_paths: list[str] = field(default_factory=list)
    write_paths: list[str] = field(default_factory=list)


def _parse_error(detail: str) -> PackageConfigError:
    return PackageConfigError(f"Failed to parse Package.toml: {detail}")


def _required_str(table: dict[str, Any], key: str, where: str) -> str:
    if key not in table:
        raise _parse_error(f"missing field `{key}` in `{where}`")
    value = table[key]
    if not isinstance(value, str):
        raise _parse_error(f"field `{key}` in `{where}` must be a string")
    return value


def _optional_str(table: dict[str, Any], key: str, where: str) -> str | None:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise _parse_error(f"field `{key}` in `{where}` must be a string")
    return value


def _bool(table: dict[str, Any], key: str, where: str) -> bool:
    value = table.get(key, False)
    if not isinstance(value, bool):
        raise _parse_error(f"field `{key}` in `{where}` must be a boolean")
    return value


def _str_list(table: dict[str, Any], key: str, where: str) -> list[str]:
    value = table.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise _parse_error(f"field `{key}` in `{where}` must be a list of strings")
    return list(value)


def _table(document: dict[str, Any], key: str) -> dict[str, Any]:
    value = document.get(key, {})
    if not isinstance(value, dict):
        raise _parse_error(f"`{key}` must be a table")
    return value


def _parse_package(document: dict[str, Any]) -> PackageInfo:
    if "package" not in document:
        raise _parse_error("missing field `package`")
    table = document["package"]
    if not isinstance(table, dict):
        raise _parse_error("`package` must be a table")
    return PackageInfo(
        name=_required_str(table, "name", "package"),
        version=_required_str(table, "version", "package"),
        description=_optional_str(table, "description", "package"),
        install_script=_optional_str(table, "install_script", "package"),
        uninstall_script=_optional_str(table, "uninstall_script", "package"),
    )


def _parse_dependency(name: str, entry: Any) -> DepSpec:
    if isinstance(entry, str):
        return DepSpec(name=name, dep_type=DepType.BINARY, version_req=entry, optional=False)
    if not isinstance(entry, dict):
        raise _parse_error(f"dependency `{name}` did not match any variant")
    where = f"dependencies.{name}"
    try:
        version = _optional_str(entry, "version", where)
        optional = _bool(entry, "optional", where)
        kind = entry.get("type", "binary")
        if not isinstance(kind, str):
            raise _parse_error(f"field `type` in `{where}` must be a string")
    except PackageConfigError as exc:
        raise _parse_error(f"dependency `{name}` did not match any variant") from exc
    dep_type = DepType.PYTHON_MODULE if kind in ("python", "python_module") else DepType.BINARY
    return DepSpec(name=name, dep_type=dep_type, version_req=version, optional=optional)


def _parse_permissions(document: dict[str, Any]) -> Permissions:
    table = _table(document, "permissions")
    ports = table.get("ports", [])
    if not isinstance(ports, list) or not all(
        isinstance(port, int) and not isinstance(port, bool) and 0 <= port <= _MAX_PORT
        for port in ports
    ):
        raise _parse_error("field `ports` in `permissions` must be a list of port numbers")
    return Permissions(
        network=_bool(table, "network", "permissions"),
        ports=list(ports),
        read_paths=_str_list(table, "read_paths", "permissions"),
        write_paths=_str_list(table, "write_paths", "permissions"),
    )


def _expand_tilde(text: str) -> Path:
    if text == "~" or text.startswith("~/"):
        return Path(str(Path.home()) + text[1:])
    return Path(text)


@dataclass
class PackageToml:
    """The contents of a module's Package.toml."""

    package: PackageInfo
    dependencies: dict[str, DepSpec] = field(default_factory=dict)
    permissions: Permissions = field(default_factory=Permissions)

    @classmethod
    def from_str(cls, text: str) -> PackageToml:
        """Parse Package.toml text; raise PackageConfigError if it is malformed."""
        try:
            document = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise _parse_error(str(exc)) from exc
        dependencies = {
            name: _parse_dependency(name, entry)
            for name, entry in _table(document, "dependencies").items()
        }
        return cls(
            package=_parse_package(document),
            dependencies=dependencies,
            permissions=_parse_permissions(document),
        )

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> PackageToml:
        """Read and parse a Package.toml file."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PackageConfigError(f"Failed to read Package.toml: {exc}") from exc
        return cls.from_str(text)

    def to_dep_specs(self) -> list[DepSpec]:
        """The declared dependencies as specs for the dependency checker."""
        return [
            DepSpec(
                name=spec.name,
                dep_type=spec.dep_type,
                version_req=spec.version_req,
                optional=spec.optional,
            )
            for spec in self.dependencies.values()
        ]

    def to_sandbox_config(self) -> SandboxConfig:
        """Sandbox settings from the declared permissions, with '~' expanded."""
        return SandboxConfig(
            allow_network=self.permissions.network,
            allowed_ports=list(self.permissions.ports),
            extra_ro_paths=[_expand_tilde(p) for p in self.permissions.read_paths],
            extra_rw_paths=[_expand_tilde(p) for p in self.permissions.write_paths],
        )