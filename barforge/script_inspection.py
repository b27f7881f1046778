"""Static screening of module scripts for risky commands."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

NETWORK_COMMANDS: tuple[str, ...] = ("curl", "wget", "nc", "netcat", "ncat", "socat")
SENSITIVE_PATHS: tuple[str, ...] = (
    "/etc/passwd",
    "/etc/shadow",
    "/etc/sudoers",
    "~/.ssh",
    ".ssh/",
    "/root/",
)
DANGEROUS_PATTERNS: tuple[str, ...] = (
    "rm -rf /",
    "rm -rf /*",
    "chmod 777",
    "chmod -R 777",
    "> /dev/sd",
    "mkfs.",
    "dd if=",
)
SENSITIVE_ENV_VARS: tuple[str, ...] = (
    "AWS_SECRET",
    "AWS_ACCESS_KEY",
    "API_KEY",
    "SECRET_KEY",
    "PASSWORD",
    "PRIVATE_KEY",
    "TOKEN",
)
EXECUTION_PATTERNS: tuple[str, ...] = (
    "eval $(",
    "| bash",
    "| sh",
    "base64 -d |",
    "base64 --decode |",
)


class RiskKind(enum.Enum):
    NETWORK_COMMAND = "network_command"
    SENSITIVE_PATH = "sensitive_path"
    SYSTEM_MODIFICATION = "system_modification"
    ENVIRONMENT_EXFILTRATION = "environment_exfiltration"


@dataclass(frozen=True)
class RiskyPattern:
    kind: RiskKind
    value: str


@dataclass
class ScriptInspectionResult:
    warnings: list[str] = field(default_factory=list)
    risky_patterns: list[RiskyPattern] = field(default_factory=list)

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def _add(self, warning: str, kind: RiskKind, value: str) -> None:
        self.warnings.append(warning)
        self.risky_patterns.append(RiskyPattern(kind, value))


def _lines(content: str) -> list[str]:
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _contains_command(line: str, cmd: str) -> bool:
    if line.startswith(cmd) or line.endswith(cmd):
        return True
    patterns = (
        f"{cmd} ",
        f"{cmd}\t",
        f"{cmd}\n",
        f" {cmd}",
        f"\t{cmd}",
        f";{cmd}",
        f"|{cmd}",
        f"$({cmd}",
        f"`{cmd}",
    )
    return any(pattern in line for pattern in patterns)


def inspect_script_safety(content: str) -> ScriptInspectionResult:
    """Scan a script line by line and report every risky pattern found."""
    result = ScriptInspectionResult()

    for line in _lines(content):
        lowered = line.lower()

        for cmd in NETWORK_COMMANDS:
            if _contains_command(lowered, cmd):
                result._add(f"Network command detected: {cmd}", RiskKind.NETWORK_COMMAND, cmd)

        for path in SENSITIVE_PATHS:
            if path in line:
                result._add(f"Sensitive path access: {path}", RiskKind.SENSITIVE_PATH, path)

        for pattern in DANGEROUS_PATTERNS:
            if pattern in lowered:
                result._add(
                    f"Dangerous operation: {pattern}", RiskKind.SYSTEM_MODIFICATION, pattern
                )

        for var in SENSITIVE_ENV_VARS:
            if f"${var}" in line or f"${{{var}" in line:
                result._add(
                    f"Sensitive environment variable: {var}",
                    RiskKind.ENVIRONMENT_EXFILTRATION,
                    var,
                )

        for pattern in EXECUTION_PATTERNS:
            if pattern in lowered:
                result._add(
                    f"Dynamic code execution: {pattern}", RiskKind.SYSTEM_MODIFICATION, pattern
                )

    return result